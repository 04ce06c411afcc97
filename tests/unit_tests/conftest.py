import json
import pytest
from pathlib import Path
from unittest.mock import Mock

from database.interfaces import DBinterface
from sitesearch.schema import SearchSchema
from sitesearch.solr import SolrResultSet, SolrSearchService
from sitesearch.query.types import RequestParameters, SearchContext

FILES_DIR = Path(__file__).resolve().parent.parent / "files"
TEST_DB_PATH = FILES_DIR / "search_db.json"
SOLR_RESPONSE_PATH = Path(__file__).resolve().parent.parent / \
    "integration_tests" / "test_search_page" / "files" / "solr_response_full.json"


@pytest.fixture
def db():
    return DBinterface(str(TEST_DB_PATH))


@pytest.fixture
def schema(db):
    return SearchSchema(db)


@pytest.fixture
def solr_response():
    with open(SOLR_RESPONSE_PATH) as f:
        return json.load(f)


@pytest.fixture
def make_service():
    """
    Factory fixture that produces a mocked search backend, connected or not,
    answering every query with the given raw Solr response.
    """

    def _make_service(connected=True, response=None):
        service = Mock()
        service.is_connected.return_value = connected
        service.get_query_builder.side_effect = SolrSearchService.get_query_builder
        service.get_query_builders.side_effect = SolrSearchService.get_query_builders
        service.query.return_value = SolrResultSet(response) if response else None
        return service

    return _make_service


@pytest.fixture
def make_context(db, schema, make_service):
    """Factory fixture building the SearchContext of one request."""

    def _make_context(page_key, items=(), service=None):
        return SearchContext(
            db=db,
            service=service or make_service(),
            schema=schema,
            page=db.get_page(page_key),
            request=RequestParameters.from_query_items(list(items))
        )

    return _make_context
