"""Query builders for the Solr search backend.

This module defines the builders that accumulate the parts of a search query
(term, filters, sort, query fields and boosts) and render them into Solr
request parameters. One builder exists per supported query parser.
"""
import re
from dataclasses import dataclass, field
from typing import Optional, Dict, List, Any, Tuple, Union

SPECIAL_CHARS = re.compile(r'([+\-&|!(){}\[\]^"~*?:\\/\s])')


def escape_query_value(value: str) -> str:
    """Escape a user supplied value so Solr reads it as a single term.

    A value wrapped in double quotes stays a phrase; only quotes and
    backslashes inside it are escaped.
    """
    if len(value) > 1 and value.startswith('"') and value.endswith('"'):
        return '"' + re.sub(r'(["\\])', r'\\\1', value[1:-1]) + '"'
    return SPECIAL_CHARS.sub(r'\\\1', value)


@dataclass
class SolrQueryBuilder:
    """Builder for queries run through the standard lucene query parser.

    Every add_filter call becomes its own filter query, which Solr AND's
    with the others. The values of one call are OR'd together.

    Attributes:
        base: Free-text term entered by the user. Empty matches everything.
        filters: (field, values) filter groups, in insertion order.
        sort_field: Indexed field to sort on, None for Solr's default.
        sort_dir: Sort direction, "asc" or "desc".
        fields: Indexed fields the free-text term is matched against.
        boosts: Weight per indexed field.
        value_boosts: Weight per "field:value" clause.
    """
    TITLE = "Standard"

    base: str = ""
    filters: List[Tuple[str, List[str]]] = field(default_factory=list)
    sort_field: Optional[str] = None
    sort_dir: str = "desc"
    fields: List[str] = field(default_factory=list)
    boosts: Dict[str, float] = field(default_factory=dict)
    value_boosts: Dict[str, float] = field(default_factory=dict)

    def base_query(self, query: str) -> None:
        self.base = query.strip()

    def add_filter(self, field_name: str, values: Union[str, List[str]]) -> None:
        """Add a filter on one field, matching any of the given values."""
        values = [values] if isinstance(values, str) else list(values)
        if values:
            self.filters.append((field_name, values))

    def sort_by(self, field_name: str, direction: str) -> None:
        self.sort_field = field_name
        self.sort_dir = direction

    def query_fields(self, fields: List[str]) -> None:
        self.fields = list(fields)

    def boost(self, boosts: Dict[str, float]) -> None:
        self.boosts = dict(boosts)

    def boost_field_values(self, boosts: Dict[str, float]) -> None:
        self.value_boosts = dict(boosts)

    def get_filter_queries(self) -> List[str]:
        """Render one filter query per filter group.

        Returns:
            List of "field:value" or "field:(a OR b)" strings.
        """
        queries = []
        for field_name, values in self.filters:
            if len(values) == 1:
                queries.append(f"{field_name}:{values[0]}")
            else:
                queries.append(f"{field_name}:({' OR '.join(values)})")
        return queries

    def get_full_query(self) -> str:
        """Render the main query string.

        The term is matched against each query field, carrying the field's
        boost when one is configured. Without query fields the term is
        passed through as typed.
        """
        if not self.base:
            return "*:*"
        if not self.fields:
            return self.base

        clauses = []
        for field_name in self.fields:
            clause = f"{field_name}:({self.base})"
            if field_name in self.boosts:
                clause += f"^{_format_weight(self.boosts[field_name])}"
            clauses.append(clause)
        return " OR ".join(clauses)

    def to_params(self) -> Dict[str, Any]:
        """Convert the builder to Solr request parameters.

        Returns:
            Dictionary of request parameters, lists for repeated parameters.
        """
        params: Dict[str, Any] = {"q": self.get_full_query()}
        if filter_queries := self.get_filter_queries():
            params["fq"] = filter_queries
        if self.sort_field:
            params["sort"] = f"{self.sort_field} {self.sort_dir}"
        if self.value_boosts:
            # Only honoured by the dismax parsers
            params["bq"] = self._boost_queries()
        return params

    def _boost_queries(self) -> List[str]:
        return [
            f"{clause}^{_format_weight(weight)}"
            for clause, weight in self.value_boosts.items()
        ]


@dataclass
class DismaxQueryBuilder(SolrQueryBuilder):
    """Builder for queries run through the extended dismax query parser.

    The term is passed unchanged in "q" while the query fields and their
    boosts go into "qf", and value boosts into "bq".
    """
    TITLE = "Extended DisMax"

    def to_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "defType": "edismax",
            "q": self.base or "*:*",
            "q.alt": "*:*",
        }
        if self.fields:
            params["qf"] = " ".join(
                f"{name}^{_format_weight(self.boosts[name])}"
                if name in self.boosts else name
                for name in self.fields
            )
        elif self.boosts:
            params["qf"] = " ".join(
                f"{name}^{_format_weight(weight)}"
                for name, weight in self.boosts.items()
            )
        if filter_queries := self.get_filter_queries():
            params["fq"] = filter_queries
        if self.sort_field:
            params["sort"] = f"{self.sort_field} {self.sort_dir}"
        if self.value_boosts:
            params["bq"] = self._boost_queries()
        return params


QUERY_BUILDERS = {
    "default": SolrQueryBuilder,
    "dismax": DismaxQueryBuilder,
}


def _format_weight(weight: float) -> str:
    weight = float(weight)
    return str(int(weight)) if weight.is_integer() else str(weight)
