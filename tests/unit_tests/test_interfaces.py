import json
import pytest

from database.interfaces import DBinterface, SearchPage


def test_load_pages(db):
    page = db.get_page("full")

    assert isinstance(page, SearchPage)
    assert page.title == "Full search"
    assert page.searchable_types == ["ArticlePage", "EventPage"]
    assert page.results_per_page == 25
    assert page.min_facet_count == 3
    assert page.boost_fields["Title"] == 3


def test_search_trees_are_strings(db):
    assert db.get_page("full").search_trees == ["3", "7"]


def test_page_defaults(db):
    page = db.get_page("articles")

    assert page.sort_by is None
    assert page.query_type is None
    assert page.custom_facet_fields == []
    assert page.filter_fields == {}


def test_unknown_page(db):
    assert db.get_page("nope") is None


def test_static_facets(db):
    assert db.facets == ["SiteWide_ms"]


@pytest.mark.parametrize("type_name, expected", [
    ("ArticlePage", ["ArticlePage", "Page", "SiteTree"]),
    ("SiteTree", ["SiteTree"]),
    ("Nope", []),
])
def test_type_ancestry(db, type_name, expected):
    assert [t.key for t in db.get_type_ancestry(type_name)] == expected


def test_default_search_page_created(tmp_path):
    """Test a default search page exists when none is configured."""
    path = tmp_path / "db.json"
    path.write_text(json.dumps({"types": {"Page": {"db": {}}}}))

    db = DBinterface(str(path))
    page = db.get_page("search")

    assert page.title == "Search"
    assert page.results_per_page == 10
    assert page.searchable_types == []


def test_missing_types_fails(tmp_path):
    path = tmp_path / "db.json"
    path.write_text(json.dumps({"pages": {}}))

    with pytest.raises(KeyError):
        DBinterface(str(path))
