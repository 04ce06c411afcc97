"""
Database interface for the search page configuration loader.

This module loads search page configuration and the content model from a JSON
file and exposes helper methods to read pages and content types. It provides
dataclasses describing search pages and content types used across the search
query builder.
"""
import json
from dataclasses import dataclass, field
from typing import Optional

from sitesearch.config import DEFAULT_RESULTS_PER_PAGE


@dataclass
class ContentType:
    """Content type of the site with its parent type and declared db fields."""
    key: str
    parent: Optional[str] = None
    db: dict[str, str] = field(default_factory=dict)


@dataclass
class SearchPage:
    """Search page configuration owned by the page record."""
    key: str
    title: str
    searchable_types: list[str] = field(default_factory=list)
    sort_by: Optional[str] = None
    sort_dir: Optional[str] = None
    results_per_page: int = DEFAULT_RESULTS_PER_PAGE
    min_facet_count: Optional[int] = None
    query_type: Optional[str] = None
    facet_fields: list[str] = field(default_factory=list)
    custom_facet_fields: list[str] = field(default_factory=list)
    facet_mapping: dict[str, str] = field(default_factory=dict)
    facet_queries: dict[str, str] = field(default_factory=dict)
    search_on_fields: list[str] = field(default_factory=list)
    boost_fields: dict[str, float] = field(default_factory=dict)
    boost_match_fields: dict[str, float] = field(default_factory=dict)
    filter_fields: dict[str, str] = field(default_factory=dict)
    search_trees: list[str] = field(default_factory=list)


class DBinterface:
    """Database loader that reads JSON search config and provides lookup helpers."""

    DEFAULT_PAGE_KEY = "search"

    def __init__(self, json_path: str):
        """
        Load JSON file and initialize pages, content types and facets.

        Args:
            json_path: Path to configuration JSON file.
        """
        with open(json_path, encoding="utf-8") as f:
            self.data = json.load(f)
        self.facets = list(self.data.get("facets", []))
        self.field_types = dict(self.data.get("field_types", {}))
        self.types = self._load_types()
        self.pages = self._load_pages()

    def _load_types(self) -> dict[str, ContentType]:
        """
        Internal loader: parse content types from JSON configuration.

        Returns:
            Mapping of type name to ContentType object.
        """
        return {
            name: ContentType(
                key=name,
                parent=info.get("parent"),
                db=dict(info.get("db", {}))
            )
            for name, info in self.data["types"].items()
        }

    def _load_pages(self) -> dict[str, SearchPage]:
        """
        Internal loader: parse search pages from JSON configuration.

        A default search page is created when the configuration defines none,
        so there is always a page to search from.

        Returns:
            Mapping of page key to SearchPage object.
        """
        pages = {}
        for key, info in self.data.get("pages", {}).items():
            pages[key] = SearchPage(
                key=key,
                title=info["title"],
                searchable_types=info.get("searchable_types", []),
                sort_by=info.get("sort_by"),
                sort_dir=info.get("sort_dir"),
                results_per_page=info.get(
                    "results_per_page", DEFAULT_RESULTS_PER_PAGE),
                min_facet_count=info.get("min_facet_count"),
                query_type=info.get("query_type"),
                facet_fields=info.get("facet_fields", []),
                custom_facet_fields=info.get("custom_facet_fields", []),
                facet_mapping=info.get("facet_mapping", {}),
                facet_queries=info.get("facet_queries", {}),
                search_on_fields=info.get("search_on_fields", []),
                boost_fields=info.get("boost_fields", {}),
                boost_match_fields=info.get("boost_match_fields", {}),
                filter_fields=info.get("filter_fields", {}),
                search_trees=[str(tree) for tree in info.get("search_trees", [])],
            )

        if not pages:
            pages[self.DEFAULT_PAGE_KEY] = SearchPage(
                key=self.DEFAULT_PAGE_KEY, title="Search")
        return pages

    def get_page(self, key: str) -> Optional[SearchPage]:
        """
        Get search page by key.

        Args:
            key: Page key.

        Returns:
            SearchPage object or None.
        """
        return self.pages.get(key)

    def get_type(self, name: str) -> Optional[ContentType]:
        """
        Get content type by name.

        Args:
            name: Content type name.

        Returns:
            ContentType object or None.
        """
        return self.types.get(name)

    def get_type_ancestry(self, name: str) -> list[ContentType]:
        """
        Get a content type followed by all of its ancestors.

        Args:
            name: Content type name.

        Returns:
            List of ContentType objects, most specific first. Empty for
            unknown types.
        """
        ancestry = []
        content_type = self.types.get(name)
        while content_type and content_type not in ancestry:
            ancestry.append(content_type)
            content_type = self.types.get(content_type.parent)
        return ancestry
