import pytest

from sitesearch.query.types import RequestParameters


class TestResultsCatalog:
    """Test the OPDS catalog of the second page of a full search."""

    @pytest.fixture
    def catalog(self, search_factory, mock_solr):
        request = RequestParameters.from_query_items([
            ("Search", "shoes"),
            ("filter[Category_ms][]", "Footwear"),
            ("start", "25"),
        ])
        return search_factory.build_catalog("full", request).model_dump(mode="json")

    def test_structure(self, catalog):
        assert "metadata" in catalog
        assert "links" in catalog
        assert "publications" in catalog
        assert "facets" in catalog

    def test_metadata(self, catalog):
        metadata = catalog["metadata"]
        assert metadata["title"] == "Full search"
        assert metadata["numberOfItems"] == 57
        assert metadata["itemsPerPage"] == 25
        assert metadata["currentPage"] == 2

    def test_links(self, catalog):
        links = {link["rel"]: link["href"] for link in catalog["links"]}
        base = "/search/full?Search=shoes&filter%5BCategory_ms%5D%5B%5D=Footwear"

        assert links["search"] == "/search/full{?Search}"
        assert links["self"] == f"{base}&start=25"
        assert links["first"] == f"{base}&start=0"
        assert links["previous"] == f"{base}&start=0"
        assert links["next"] == f"{base}&start=50"
        assert links["last"] == f"{base}&start=50"

    def test_publications(self, catalog):
        publications = catalog["publications"]
        assert len(publications) == 2

        pub = publications[0]
        assert pub["metadata"]["title"] == "Trail running shoes"
        assert pub["metadata"]["identifier"] == \
            "https://example.org/articles/trail-running-shoes"

    def test_facets(self, catalog):
        facet_titles = [f["metadata"]["title"] for f in catalog["facets"]]
        assert facet_titles == ["Selected filters", "Categories", "Author_t", "Rating_i"]

        selected = catalog["facets"][0]["links"]
        assert [(l["title"], l["href"]) for l in selected] == \
            [("Footwear", "/search/full?Search=shoes")]

        categories = [l["title"] for l in catalog["facets"][1]["links"]]
        assert categories == ["Footwear (5)", "Outdoor (3)"]

        rating = catalog["facets"][3]["links"][0]
        assert rating["title"] == "Highly rated (4)"


@pytest.mark.parametrize("start, expected", [
    (None, {"first": 0, "next": 25, "last": 50}),
    ("25", {"first": 0, "previous": 0, "next": 50, "last": 50}),
    ("50", {"first": 0, "previous": 25, "last": 50}),
])
def test_pagination_links(search_factory, mock_solr, start, expected):
    items = [("start", start)] if start else []
    catalog = search_factory.build_catalog(
        "full", RequestParameters.from_query_items(items)).model_dump(mode="json")

    pagination = {
        link["rel"]: link["href"] for link in catalog["links"]
        if link["rel"] not in ("search", "self")
    }
    assert pagination == {
        rel: f"/search/full?start={offset}" for rel, offset in expected.items()
    }


class TestEmptyCatalog:
    """Test the catalog of a search Solr cannot answer."""

    @pytest.fixture
    def unavailable_solr(self, make_mock_solr):
        yield from make_mock_solr(available=False)

    @pytest.fixture
    def catalog(self, search_factory, unavailable_solr):
        return search_factory.build_catalog(
            "broad", RequestParameters()).model_dump(mode="json")

    def test_metadata(self, catalog):
        assert catalog["metadata"]["title"] == "Everything"
        assert catalog["metadata"]["numberOfItems"] == 0
        assert catalog["metadata"]["itemsPerPage"] == 10

    def test_no_pagination(self, catalog):
        link_rels = [link["rel"] for link in catalog["links"]]
        assert link_rels == ["search", "self"]
        assert catalog["links"][1]["href"] == "/search/broad"
