"""
Solr search backend integration module.

This module provides a client for the Solr search service used by the search
pages: connectivity checks, query builder selection, query execution and the
result set wrapping the raw Solr response.
"""
import logging
from typing import Optional, Dict, List, Any

import requests

from sitesearch.config import SOLR_URL, SOLR_TIMEOUT
from sitesearch.query.builder import QUERY_BUILDERS, SolrQueryBuilder
from sitesearch.query.types import FacetTerm
from sitesearch.records import SolrDocumentRecord, _create_record

logger = logging.getLogger(__name__)


class SolrResultSet:
    """Read-only view over a Solr select response.

    Attributes:
        response: Decoded JSON body of the Solr response.
    """

    def __init__(self, response: Dict[str, Any]):
        self.response = response
        self._facets = None

    def get_total_results(self) -> int:
        return int(self.response.get("response", {}).get("numFound") or 0)

    def get_time_taken(self) -> Optional[int]:
        """Time Solr spent on the query in milliseconds, if reported."""
        return self.response.get("responseHeader", {}).get("QTime")

    def get_records(self) -> List[SolrDocumentRecord]:
        docs = self.response.get("response", {}).get("docs", [])
        return [_create_record(doc) for doc in docs]

    def get_facets(self) -> Dict[str, List[FacetTerm]]:
        """Facet counts keyed by facet field, in the order Solr returned them.

        Field facets arrive as flat [term, count, term, count, ...] lists.
        Query facets arrive as {query: count} and are grouped under the field
        named before the first colon of their query, with the remainder of
        the query as the value to filter on.

        Returns:
            Mapping of facet field name to list of FacetTerm.
        """
        if self._facets is not None:
            return self._facets

        counts = self.response.get("facet_counts", {})
        facets: Dict[str, List[FacetTerm]] = {}

        for field_name, flat in counts.get("facet_fields", {}).items():
            facets[field_name] = [
                FacetTerm(name=str(term), count=count, query=str(term))
                for term, count in zip(flat[::2], flat[1::2])
            ]

        for query, count in counts.get("facet_queries", {}).items():
            field_name, _, value = query.partition(":")
            facets.setdefault(field_name, []).append(
                FacetTerm(name=query, count=count, query=value or query))

        self._facets = facets
        return facets


class SolrSearchService:
    """Client for communicating with the Solr search service.

    Attributes:
        url: Base URL of the Solr core, e.g. "http://localhost:8983/solr/site".
        timeout: Request timeout in seconds.
    """

    def __init__(self, url: str, timeout: int = SOLR_TIMEOUT):
        self.url = url.rstrip("/")
        self.timeout = timeout

    def is_connected(self) -> bool:
        """Check whether the Solr core answers its ping handler.

        Returns:
            True when the core reports status OK, False on any transport
            failure or other status.
        """
        try:
            r = requests.get(
                f"{self.url}/admin/ping",
                params={"wt": "json"},
                timeout=self.timeout
            )
            r.raise_for_status()
            return r.json().get("status") == "OK"
        except requests.RequestException as e:
            logger.warning("Solr at %s is not reachable: %s", self.url, e)
            return False

    @staticmethod
    def get_query_builders() -> Dict[str, str]:
        """List the available query parsers.

        Returns:
            Mapping of query type key to its display title.
        """
        return {key: builder.TITLE for key, builder in QUERY_BUILDERS.items()}

    @staticmethod
    def get_query_builder(query_type: Optional[str] = None) -> SolrQueryBuilder:
        """Create an empty builder for the given query type.

        Unknown or missing query types get the standard builder.
        """
        builder_class = QUERY_BUILDERS.get(query_type or "default", SolrQueryBuilder)
        return builder_class()

    def query(self,
              builder: SolrQueryBuilder,
              offset: int = 0,
              limit: int = 10,
              params: Optional[Dict[str, Any]] = None) -> Optional[SolrResultSet]:
        """Execute a query against the select handler.

        Args:
            builder: Populated query builder.
            offset: Index of the first result to return.
            limit: Number of results to return.
            params: Extra request parameters, e.g. facet settings. List
                values are sent as repeated parameters.

        Returns:
            SolrResultSet, or None when the request failed.
        """
        request_params = builder.to_params()
        request_params.update(params or {})
        request_params.update({"start": offset, "rows": limit, "wt": "json"})

        try:
            r = requests.get(
                f"{self.url}/select",
                params=request_params,
                timeout=self.timeout
            )
            r.raise_for_status()
            return SolrResultSet(r.json())
        except requests.RequestException:
            logger.exception("Solr query failed: %s", request_params.get("q"))
            return None


SOLR_SERVICE = SolrSearchService(SOLR_URL)
