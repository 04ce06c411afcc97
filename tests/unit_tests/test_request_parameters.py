import pytest

from sitesearch.query.types import RequestParameters, facet_param_field


@pytest.mark.parametrize("name, expected", [
    ("filter[Category_ms][]", "Category_ms"),
    ("filter[Category_ms][0]", "Category_ms"),
    ("filter[Category_ms]", "Category_ms"),
    ("filter[]", None),
    ("Search", None),
    ("other[Category_ms][]", None),
])
def test_facet_param_field(name, expected):
    assert facet_param_field(name) == expected


def test_from_query_items():
    params = RequestParameters.from_query_items([
        ("Search", "shoes"),
        ("SortBy", "LastEdited"),
        ("SortDir", "Ascending"),
        ("SearchType", "ArticlePage"),
        ("start", "10"),
        ("limit", "5"),
        ("filter[Category_ms][]", "Footwear"),
        ("filter[Category_ms][]", "Outdoor"),
        ("filter[Author_t][]", "smith"),
        ("unrelated", "x"),
    ])

    assert params.search == "shoes"
    assert params.sort_by == "LastEdited"
    assert params.sort_dir == "Ascending"
    assert params.search_type == "ArticlePage"
    assert params.start == "10"
    assert params.limit == "5"
    assert params.facets == {
        "Category_ms": ["Footwear", "Outdoor"],
        "Author_t": ["smith"],
    }


def test_custom_filter_param():
    params = RequestParameters.from_query_items(
        [("f[Category_ms][]", "Footwear"), ("filter[Author_t][]", "smith")],
        filter_param="f")

    assert params.facets == {"Category_ms": ["Footwear"]}


def test_no_parameters():
    params = RequestParameters.from_query_items([])

    assert params.search is None
    assert params.facets == {}
    assert params.query_string == ""


def test_query_string_drops_start():
    params = RequestParameters.from_query_items(
        [("Search", "red shoes"), ("start", "20"), ("filter[Category_ms][]", "Footwear")])

    assert params.query_string == "Search=red+shoes&filter%5BCategory_ms%5D%5B%5D=Footwear"


def test_query_string_without():
    params = RequestParameters.from_query_items([
        ("Search", "shoes"),
        ("filter[Category_ms][]", "Footwear"),
        ("filter[Category_ms][]", "Outdoor"),
    ])

    assert params.query_string_without("filter[Category_ms][]", "Footwear") == \
        "Search=shoes&filter%5BCategory_ms%5D%5B%5D=Outdoor"
    assert params.query_string_without("filter[Category_ms][]", "Nope") == \
        params.query_string
