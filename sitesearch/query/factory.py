"""Factory for creating search result presenters and catalogs.

Wires the search configuration, the index schema and the search backend into
the request scoped objects that answer one search request.
"""
from typing import Optional, Callable

from pyopds2 import Catalog

from database.interfaces import DBinterface
from sitesearch.schema import SearchSchema
from sitesearch.query.builder import SolrQueryBuilder
from sitesearch.query.catalog import ResultsCatalogBuilder
from sitesearch.query.page import SearchResults, SearchResultsPage
from sitesearch.query.types import RequestParameters, SearchContext


class SearchPageFactory:
    """Factory for search result presenters.

    Manages the dependencies shared by all requests (configuration, schema
    and backend client) and creates a fresh presenter for each request.
    """

    def __init__(self,
                 db_path: str,
                 service,
                 update_query_builder: Optional[
                     Callable[[SolrQueryBuilder], None]] = None):
        """Initialize the factory with configuration and search backend.

        Args:
            db_path: Path to the JSON file with search page configuration
                and the content model.
            service: Search backend client.
            update_query_builder: Optional callback applied to every query
                builder before its query runs.
        """
        self.db = DBinterface(db_path)
        self.schema = SearchSchema(self.db)
        self.service = service
        self.update_query_builder = update_query_builder

    def results_page(self,
                     page_key: str,
                     request: RequestParameters) -> SearchResultsPage:
        """Create the presenter of one search request.

        Raises:
            ValueError: If no search page is configured under page_key.
        """
        page = self.db.get_page(page_key)
        if not page:
            raise ValueError(f"Search page '{page_key}' not found")

        context = SearchContext(
            db=self.db,
            service=self.service,
            schema=self.schema,
            page=page,
            request=request
        )
        return SearchResultsPage(context, self.update_query_builder)

    def build_results(self,
                      page_key: str,
                      request: RequestParameters) -> SearchResults:
        return self.results_page(page_key, request).results()

    def build_catalog(self,
                      page_key: str,
                      request: RequestParameters) -> Catalog:
        return ResultsCatalogBuilder(self.results_page(page_key, request)).build()
