"""Interpreter turning a search request into a backend query.

This module implements the SearchRequestInterpreter, which reads the request
parameters of one search, combines them with the search page configuration,
populates a query builder and runs the query at most once per request.
"""
import logging
from typing import Optional, Callable, List

from sitesearch.config import (
    DEFAULT_MIN_FACET_COUNT,
    DEFAULT_PAGE_TYPE,
    DEFAULT_RESULTS_PER_PAGE,
    FACET_LIMIT,
    PARENTS_HIERARCHY_FIELD,
    TYPE_HIERARCHY_FIELD,
)
from sitesearch.query.builder import SolrQueryBuilder, escape_query_value
from sitesearch.query.facets import FacetCatalog
from sitesearch.query.schema import SchemaResolver
from sitesearch.query.types import QueryState, ResolvedQuery, SearchContext

logger = logging.getLogger(__name__)


class SearchRequestInterpreter:
    """Builds and runs the query of a single search request.

    The query goes through three states: UNBUILT, BUILT and EXECUTED. Each
    transition happens once; later calls return what the transition
    produced, so every consumer of the request (results, facets, crumbs)
    sees the same query and the same result set.

    Attributes:
        service: Search backend client.
        page: Search page configuration.
        request: Parameters of the current request.
        resolver: Resolver for the page's field names.
        facets: Facet configuration of the page.
        update_query_builder: Optional callback receiving the populated
            builder right before the query runs.
        state: Current QueryState.
    """

    def __init__(self,
                 context: SearchContext,
                 update_query_builder: Optional[
                     Callable[[SolrQueryBuilder], None]] = None):
        self.service = context.service
        self.page = context.page
        self.request = context.request
        self.resolver = SchemaResolver(context.schema, context.page)
        self.facets = FacetCatalog(context.db.facets, context.page, self.resolver)
        self.update_query_builder = update_query_builder
        self.state = QueryState.UNBUILT
        self._resolved: Optional[ResolvedQuery] = None
        self._result = None

    def get_query(self):
        """Get the result set of the current search.

        The backend is consulted on the first call only. When it is not
        connected, nothing is built and None is returned for the rest of the
        request.

        Returns:
            The backend result set, or None if the backend is unavailable or
            the query failed.
        """
        if self.state is QueryState.EXECUTED:
            return self._result

        if not self.service.is_connected():
            logger.info("Search backend unavailable, skipping query for page %s",
                        self.page.key)
            self.state = QueryState.EXECUTED
            return None

        resolved = self.build()
        self._result = self.service.query(
            resolved.builder, resolved.offset, resolved.limit, resolved.params)
        self.state = QueryState.EXECUTED
        return self._result

    def build(self) -> ResolvedQuery:
        """Assemble the query builder and backend parameters.

        Returns:
            The ResolvedQuery of this request, built on the first call.
        """
        if self._resolved is not None:
            return self._resolved

        builder = self.service.get_query_builder(self.page.query_type)

        if self.request.search is not None:
            builder.base_query(self.request.search)

        sort_by = self.request.sort_by or self.page.sort_by
        sort_dir = self.request.sort_dir or self.page.sort_dir
        types = self._effective_types()

        # A sort needs a type to resolve its indexed field name
        if not types and sort_by:
            types = [DEFAULT_PAGE_TYPE]

        if sort_by not in self.resolver.selectable_fields():
            sort_by = "score"

        sort_dir = "asc" if sort_dir == "Ascending" else "desc"

        for facet_name, facet_values in self.facets.active_facets(self.request).items():
            builder.add_filter(facet_name, [
                self._facet_filter_value(facet_name, value) for value in facet_values
            ])

        if types:
            sort_by = self.resolver.sort_field_name(sort_by, types)
            builder.add_filter(TYPE_HIERARCHY_FIELD, types)

        builder.add_filter(PARENTS_HIERARCHY_FIELD, self.page.search_trees)

        builder.sort_by(sort_by or "score", sort_dir)

        if self.page.search_on_fields:
            mapped_fields = []
            for name in self.page.search_on_fields:
                # Fields missing from the searched types are left out
                if mapped := self.resolver.resolve_field_name(name, types):
                    mapped_fields.append(mapped)
            builder.query_fields(mapped_fields)

        if self.page.boost_fields:
            builder.boost({
                self.resolver.resolve_or_raw(name, types): amount
                for name, amount in self.page.boost_fields.items()
                if amount > 0
            })

        if self.page.boost_match_fields:
            builder.boost_field_values(self.page.boost_match_fields)

        for name, value in self.page.filter_fields.items():
            builder.add_filter(name, value)

        params = {
            "facet": "true",
            "facet.field": self.facets.facet_fields(),
            "facet.limit": FACET_LIMIT,
            "facet.mincount": self.page.min_facet_count or DEFAULT_MIN_FACET_COUNT,
            "fl": "*,score",
        }
        if query_facets := self.facets.query_facets():
            params["facet.query"] = list(query_facets)

        if self.update_query_builder:
            self.update_query_builder(builder)

        self._resolved = ResolvedQuery(
            builder=builder,
            offset=self.offset(),
            limit=self.limit(),
            params=params
        )
        if self.state is QueryState.UNBUILT:
            self.state = QueryState.BUILT
        return self._resolved

    def _facet_filter_value(self, facet_name: str, value: str) -> str:
        """Escape a requested facet value, keeping configured query facets intact."""
        if f"{facet_name}:{value}" in self.page.facet_queries:
            return value
        return escape_query_value(value)

    def _effective_types(self) -> List[str]:
        """Content types searched, narrowed to the requested type if allowed."""
        types = self.resolver.searchable_types()
        if self.request.search_type and self.request.search_type in types:
            return [self.request.search_type]
        return types

    def offset(self) -> int:
        return _to_count(self.request.start, 0)

    def limit(self) -> int:
        default = self.page.results_per_page or DEFAULT_RESULTS_PER_PAGE
        return _to_count(self.request.limit, default) or default


def _to_count(value: Optional[str], default: int) -> int:
    """Parse a non-negative integer parameter, falling back to a default."""
    try:
        count = int(value)
    except (TypeError, ValueError):
        return default
    return count if count >= 0 else default
