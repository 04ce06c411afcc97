from sitesearch.records import SolrDocumentRecord, _create_record


def test_record_creation():
    record = _create_record({
        "id": "ArticlePage_14",
        "ClassName": "ArticlePage",
        "Title_t": ["Trail running", "shoes"],
        "Content_t": "Body",
        "Link": "https://example.org/articles/trail",
        "Created_dt": "2024-05-02T10:00:00Z",
        "score": 3.5,
    })

    assert record.raw_identifier == "ArticlePage_14"
    assert record.class_name == "ArticlePage"
    assert record.title == "Trail running shoes"
    assert record.identifier == "https://example.org/articles/trail"
    assert record.score == 3.5


def test_identifier_without_link():
    record = SolrDocumentRecord(raw_identifier="Page_1")

    assert record.identifier == "Page_1"
    assert record.links() == []


def test_metadata():
    record = SolrDocumentRecord(
        raw_identifier="Page_1",
        link="https://example.org/page-1",
        content="Body text")

    metadata = record.metadata()

    assert metadata.title == "Page_1"
    assert metadata.type == "http://schema.org/WebPage"
    assert metadata.description == "Body text"


def test_links():
    record = SolrDocumentRecord(
        raw_identifier="Page_1", link="https://example.org/page-1")

    links = record.links()

    assert len(links) == 1
    assert links[0].href == "https://example.org/page-1"
    assert links[0].type == "text/html"
