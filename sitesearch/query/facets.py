"""Facet configuration of search pages.

This module works out which facet fields a search page asks the backend for,
how those fields are labelled for display, and which facet values the user
currently has selected.
"""
from typing import List, Dict

from database.interfaces import SearchPage
from sitesearch.config import DEFAULT_PAGE_TYPE
from sitesearch.query.schema import SchemaResolver
from sitesearch.query.types import RequestParameters


class FacetCatalog:
    """Facet fields, labels and selections of a search page.

    Attributes:
        static_facets: Site wide facet fields, already indexed names.
        page: Search page configuration.
        resolver: Resolver for the page's field names.
    """

    def __init__(self,
                 static_facets: List[str],
                 page: SearchPage,
                 resolver: SchemaResolver):
        self.static_facets = list(static_facets)
        self.page = page
        self.resolver = resolver

    def facet_fields(self) -> List[str]:
        """Figure out the list of fields to facet on.

        Site wide facets come first, followed by the page's facet fields and
        custom facet fields. Page level names that cannot be resolved are
        passed through unchanged. Duplicates are kept.

        Returns:
            Ordered list of indexed facet field names.
        """
        fields = list(self.static_facets)
        types = self.resolver.searchable_types(DEFAULT_PAGE_TYPE)

        for name in self.page.facet_fields + self.page.custom_facet_fields:
            fields.append(self.resolver.resolve_or_raw(name, types))

        return fields

    def facet_field_mapping(self) -> Dict[str, str]:
        """Map indexed facet field names to their configured labels."""
        types = self.resolver.searchable_types(DEFAULT_PAGE_TYPE)
        return {
            self.resolver.resolve_or_raw(name, types): label
            for name, label in self.page.facet_mapping.items()
        }

    def label_for(self, facet_field: str) -> str:
        return self.facet_field_mapping().get(facet_field, facet_field)

    def query_facets(self) -> Dict[str, str]:
        """Configured query facets, mapping each query to its label."""
        return dict(self.page.facet_queries)

    @staticmethod
    def active_facets(request: RequestParameters) -> Dict[str, List[str]]:
        """Get the facet based filters selected in the request."""
        return {name: list(values) for name, values in request.facets.items()}
