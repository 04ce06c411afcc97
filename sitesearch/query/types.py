"""Search request and presentation type definitions.

This module defines the core data structures used throughout the search
query system, including the request parameters, the resolved query handed to
the backend, facet presentation models and the context object for building
a search results page.
"""
import re
from typing import Optional, Dict, Any, List, Tuple
from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import urlencode

from pydantic import BaseModel, Field

from database.interfaces import DBinterface, SearchPage
from sitesearch.config import FILTER_PARAM
from sitesearch.query.builder import SolrQueryBuilder


class QueryState(Enum):
    """Lifecycle of the query of a single search request.

    Attributes:
        UNBUILT: Nothing has been assembled yet.
        BUILT: The query builder and backend parameters are assembled.
        EXECUTED: The backend was consulted, the result (or its absence)
            is final for the request.
    """
    UNBUILT = "unbuilt"
    BUILT = "built"
    EXECUTED = "executed"


def facet_param_field(name: str, filter_param: str = FILTER_PARAM) -> Optional[str]:
    """Extract the facet field from a "filter[Field][]" parameter name.

    Returns:
        The facet field name, or None if the parameter is not a facet filter.
    """
    match = re.match(
        rf"^{re.escape(filter_param)}\[([^\]]+)\](?:\[[^\]]*\])?$", name)
    return match.group(1) if match else None


@dataclass
class RequestParameters:
    """Search parameters supplied by the end user.

    All values are untrusted and kept as received; defaults are applied by
    the interpreter from the page configuration.

    Attributes:
        search: Free-text term ("Search").
        sort_by: Field name to sort on ("SortBy").
        sort_dir: "Ascending" or "Descending" ("SortDir").
        search_type: Content type to restrict the search to ("SearchType").
        start: Result offset ("start").
        limit: Number of results ("limit").
        facets: Selected facet values keyed by facet field name
            ("filter[Field][]=value").
        query_items: All parameters in the order they were received, used to
            rebuild the query string of facet and crumb links.
    """
    search: Optional[str] = None
    sort_by: Optional[str] = None
    sort_dir: Optional[str] = None
    search_type: Optional[str] = None
    start: Optional[str] = None
    limit: Optional[str] = None
    facets: Dict[str, List[str]] = field(default_factory=dict)
    query_items: List[Tuple[str, str]] = field(default_factory=list)

    @classmethod
    def from_query_items(
            cls,
            items: List[Tuple[str, str]],
            filter_param: str = FILTER_PARAM) -> "RequestParameters":
        """Parse request parameters from query string items.

        Args:
            items: (name, value) pairs as received, repeated names allowed.
            filter_param: Name of the facet filter parameter.

        Returns:
            RequestParameters holding the recognised values. The last value
            wins for scalar parameters.
        """
        scalars = {
            "Search": "search",
            "SortBy": "sort_by",
            "SortDir": "sort_dir",
            "SearchType": "search_type",
            "start": "start",
            "limit": "limit",
        }

        params = cls(query_items=list(items))
        for name, value in items:
            if name in scalars:
                setattr(params, scalars[name], value)
            elif facet_field := facet_param_field(name, filter_param):
                params.facets.setdefault(facet_field, []).append(value)
        return params

    @property
    def query_string(self) -> str:
        """Query string of the current search without the result offset.

        Links derived from it (facets, crumbs) always lead back to the first
        page of results.
        """
        return urlencode([(k, v) for k, v in self.query_items if k != "start"])

    def query_string_without(self, name: str, value: str) -> str:
        """Query string of the current search with one parameter removed."""
        items = [(k, v) for k, v in self.query_items if k != "start"]
        if (name, value) in items:
            items.remove((name, value))
        return urlencode(items)


@dataclass
class ResolvedQuery:
    """Fully populated query sent to the backend for one request.

    Attributes:
        builder: Query builder carrying term, filters, sort, fields and boosts.
        offset: Index of the first result to return.
        limit: Maximum number of results to return.
        params: Additional backend parameters (faceting, returned fields).
    """
    builder: SolrQueryBuilder
    offset: int
    limit: int
    params: Dict[str, Any]


class FacetTerm(BaseModel):
    """A single facet value as reported by the backend."""
    name: str = Field(..., description="Facet value, or label for query facets")
    count: int = Field(0, description="Number of results carrying the value")
    query: str = Field(..., description="Value to filter on when selected")


class FacetEntry(FacetTerm):
    """A facet value with the links that add it as a filter."""
    search_link: str = Field(..., description="Link filtering on the value")
    quoted_search_link: str = Field(
        ..., description="Link filtering on the quoted value")


class PresentationFacet(BaseModel):
    """All values of one facet field, labelled for display."""
    facet_field: str = Field(..., description="Indexed facet field name")
    title: str = Field(..., description="Human readable facet label")
    items: List[FacetEntry] = Field(default_factory=list)


class FacetCrumb(BaseModel):
    """An active facet value with the link removing it from the search."""
    facet_field: str
    name: str
    remove_link: str


@dataclass
class SearchContext:
    """Context object containing resources needed for a search request.

    Attributes:
        db: Database interface with site wide search configuration.
        service: Search backend client.
        schema: Index schema introspection service.
        page: Configuration of the search page being queried.
        request: Parameters of the current request.
    """
    db: DBinterface
    service: Any
    schema: Any
    page: SearchPage
    request: RequestParameters
