"""OPDS catalog builder for search results.

This module renders the outcome of a search request as an OPDS 2 catalog:
the result records become publications, the facets of the result set become
facet groups whose links add a filter to the search, and the selected facets
form a group whose links remove them again.
"""
from urllib.parse import urlencode
from typing import Optional, List, Dict, Any

from pyopds2 import Catalog, Metadata, Link, Publication

from sitesearch.config import CATALOG_LINK
from sitesearch.query.page import SearchResultsPage
from sitesearch.query.transform import facet_crumbs, transform


class ResultsCatalogBuilder:
    """Builder of the OPDS catalog of one search request.

    The build order ensures publications are built first so the total
    result count is known for pagination and metadata.

    Attributes:
        results_page: Presenter of the current search request.
        catalog_link: Path of this page's catalog.
        total: Total number of results of the current query.
    """

    OPDS_TYPE = "application/opds+json"
    SELECTED_FACETS_TITLE = "Selected filters"

    def __init__(self, results_page: SearchResultsPage):
        self.results_page = results_page
        self.request = results_page.request
        self.catalog_link = CATALOG_LINK.format(page_key=results_page.page.key)
        self.total = 0

    def build(self) -> Catalog:
        """Build the complete catalog.

        Returns:
            Catalog ready for serialization to JSON.
        """
        catalog_dict = {}

        if publications := self._build_publications():
            catalog_dict["publications"] = publications

        if facets := self._build_facets():
            catalog_dict["facets"] = facets

        catalog_dict["metadata"] = self._build_metadata()
        catalog_dict["links"] = self._build_links()

        return Catalog(**catalog_dict)

    def _build_publications(self) -> List[Publication]:
        query = self.results_page.get_query()
        if not query:
            return []

        self.total = query.get_total_results()
        return [record.to_publication() for record in query.get_records()]

    def _build_metadata(self) -> Metadata:
        interpreter = self.results_page.interpreter
        return Metadata(
            title=self.results_page.page.title,
            numberOfItems=self.total,
            itemsPerPage=interpreter.limit(),
            currentPage=interpreter.offset() // interpreter.limit() + 1
        )

    def _build_links(self) -> List[Link]:
        offset = self.results_page.interpreter.offset()
        self_query = self._with_start(offset) if offset else self.request.query_string
        links = [
            Link(
                rel="search",
                href=f"{self.catalog_link}{{?Search}}",
                type=self.OPDS_TYPE,
                templated=True
            ),
            Link(
                rel="self",
                href=self._url(self_query),
                type=self.OPDS_TYPE
            ),
        ]
        links.extend(self._build_pagination_links())
        return links

    def _build_pagination_links(self) -> List[Link]:
        """Create first, previous, next and last links.

        Previous is left out on the first page and next on the last page.

        Returns:
            List of pagination links, empty when there are no results.
        """
        if self.total == 0:
            return []

        interpreter = self.results_page.interpreter
        limit, offset = interpreter.limit(), interpreter.offset()
        last = (self.total - 1) // limit * limit

        pages = [("first", 0)]
        if offset > 0:
            pages.append(("previous", max(0, offset - limit)))
        if offset + limit <= last:
            pages.append(("next", offset + limit))
        pages.append(("last", last))

        return [
            Link(
                rel=rel,
                href=self._url(self._with_start(start)),
                type=self.OPDS_TYPE
            )
            for rel, start in pages
        ]

    def _build_facets(self) -> Optional[List[Dict[str, Any]]]:
        """Build facet groups for filtering results.

        Returns:
            List of facet group dictionaries, each containing metadata and a
            list of filter links, or None when there is nothing to show.
        """
        facets = []

        crumbs = facet_crumbs(
            self.results_page.active_facets(), self.request, self.catalog_link)
        if crumbs:
            facets.append({
                "metadata": {"title": self.SELECTED_FACETS_TITLE},
                "links": [
                    {"title": crumb.name, "href": crumb.remove_link,
                     "type": self.OPDS_TYPE}
                    for crumb in crumbs
                ]
            })

        query = self.results_page.get_query()
        if query:
            for facet in transform(
                    query.get_facets(),
                    self.results_page.interpreter.facets,
                    self.request.query_string,
                    self.catalog_link):
                if not facet.items:
                    continue
                facets.append({
                    "metadata": {"title": facet.title},
                    "links": [
                        {"title": f"{entry.name} ({entry.count})",
                         "href": entry.search_link,
                         "type": self.OPDS_TYPE}
                        for entry in facet.items
                    ]
                })

        return facets if facets else None

    def _with_start(self, start: int) -> str:
        query_string = self.request.query_string
        start_param = urlencode({"start": start})
        return f"{query_string}&{start_param}" if query_string else start_param

    def _url(self, query_string: str) -> str:
        return f"{self.catalog_link}?{query_string}" if query_string else self.catalog_link
