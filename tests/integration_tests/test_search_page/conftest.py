import json
import pytest
from pathlib import Path
from unittest.mock import Mock, patch

import requests

from sitesearch.query.factory import SearchPageFactory
from sitesearch.solr import SolrSearchService

FILES_DIR = Path(__file__).resolve().parent / "files"
TEST_DB_PATH = Path(__file__).resolve().parents[2] / "files" / "search_db.json"
SOLR_URL = "http://solr.test:8983/solr/site"


@pytest.fixture
def solr_response():
    with open(FILES_DIR / "solr_response_full.json") as f:
        return json.load(f)


@pytest.fixture
def make_mock_solr(solr_response):
    """
    Factory fixture that patches the HTTP layer of the Solr client, answering
    the ping handler with the given status and every select with the sample
    response.
    """

    def _make_mock(available=True):

        def mock_get(url, params=None, timeout=None):
            if not available:
                raise requests.ConnectionError(f"cannot reach {url}")
            response = Mock()
            response.raise_for_status.return_value = None
            if url.endswith("/admin/ping"):
                response.json.return_value = {"status": "OK"}
            else:
                response.json.return_value = solr_response
            return response

        with patch("sitesearch.solr.requests.get") as m:
            m.side_effect = mock_get
            yield m

    return _make_mock


@pytest.fixture
def mock_solr(make_mock_solr):
    yield from make_mock_solr()


@pytest.fixture
def search_factory():
    return SearchPageFactory(str(TEST_DB_PATH), SolrSearchService(SOLR_URL))
