"""Search results page presenter.

This module exposes the outcome of one search request to the rendering
layer: the result records, the facets of the result set with their filter
links, the crumbs of the selected facets and the summary of the search.
"""
from typing import Optional, List, Dict, Union, Callable

from pydantic import BaseModel, Field

from sitesearch.config import RESULTS_LINK
from sitesearch.query.builder import SolrQueryBuilder
from sitesearch.query.interpreter import SearchRequestInterpreter
from sitesearch.query.transform import facet_crumbs, transform
from sitesearch.query.types import (
    FacetCrumb,
    FacetEntry,
    PresentationFacet,
    SearchContext,
)
from sitesearch.records import SolrDocumentRecord


class SearchResults(BaseModel):
    """Everything a results template renders for one search."""
    title: str
    query: str = Field("", description="Search term as entered")
    results: List[SolrDocumentRecord] = Field(default_factory=list)
    total_results: Optional[int] = Field(
        None, description="Number of matches, None without a query")
    time_taken: Union[float, str] = Field(
        "< 0.001", description="Seconds the backend spent on the query")
    facets: List[PresentationFacet] = Field(default_factory=list)
    crumbs: List[FacetCrumb] = Field(default_factory=list)


class SearchResultsPage:
    """Request scoped presenter of a search page.

    All accessors share one SearchRequestInterpreter, so the backend is
    queried once however many of them a template uses.

    Attributes:
        page: Search page configuration.
        request: Parameters of the current request.
        interpreter: Query builder and runner of the request.
        results_link: Path of the search results of this page.
    """

    def __init__(self,
                 context: SearchContext,
                 update_query_builder: Optional[
                     Callable[[SolrQueryBuilder], None]] = None):
        self.page = context.page
        self.request = context.request
        self.service = context.service
        self.interpreter = SearchRequestInterpreter(context, update_query_builder)
        self.results_link = RESULTS_LINK.format(page_key=self.page.key)

    def get_query(self):
        return self.interpreter.get_query()

    def selectable_fields(self, types=None, exclude_geo: bool = True) -> Dict[str, str]:
        return self.interpreter.resolver.selectable_fields(types, exclude_geo)

    def query_builders(self) -> Dict[str, str]:
        return self.service.get_query_builders()

    def active_facets(self) -> Dict[str, List[str]]:
        return self.interpreter.facets.active_facets(self.request)

    def all_facets(self) -> List[PresentationFacet]:
        """Retrieve all facets of the result set, labelled and linked.

        Facets are listed whether or not any of them is selected.

        Returns:
            One PresentationFacet per facet field, empty without a query.
        """
        query = self.get_query()
        if not query:
            return []

        return transform(
            query.get_facets(),
            self.interpreter.facets,
            self.request.query_string,
            self.results_link
        )

    def current_facets(self, term: Optional[str] = None) -> List[FacetEntry]:
        """Get the list of facet values, for one facet field or for all.

        Like all_facets, values are listed without any active selection.

        Args:
            term: Facet field to list the values of. All fields when None.

        Returns:
            Flat list of linked facet values, empty without a query.
        """
        query = self.get_query()
        if not query:
            return []

        facets = transform(
            query.get_facets(),
            self.interpreter.facets,
            self.request.query_string,
            self.results_link,
            term=term
        )
        return [entry for facet in facets for entry in facet.items]

    def facet_crumbs(self) -> List[FacetCrumb]:
        return facet_crumbs(
            self.active_facets(), self.request, self.results_link)

    def results(self) -> SearchResults:
        """Process the search results for rendering.

        Returns:
            SearchResults summary. Without a query (backend unavailable) it
            carries no records and no facets.
        """
        query = self.get_query()
        data = {
            "title": self.page.title,
            "query": self.request.search or "",
            "crumbs": self.facet_crumbs(),
        }

        if query:
            data["results"] = query.get_records()
            data["total_results"] = query.get_total_results() or 0
            data["facets"] = self.all_facets()
            if time_taken := query.get_time_taken():
                data["time_taken"] = time_taken / 1000

        return SearchResults(**data)
