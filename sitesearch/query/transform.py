"""Conversion of backend facet counts into linked facet entries.

The functions here are pure: they take the raw facet terms and the state of
the current search and return presentation models with the links that add a
facet value to, or remove it from, the current search.
"""
from typing import Optional, List, Dict
from urllib.parse import urlencode

from sitesearch.config import FILTER_PARAM
from sitesearch.query.facets import FacetCatalog
from sitesearch.query.types import (
    FacetCrumb,
    FacetEntry,
    FacetTerm,
    PresentationFacet,
    RequestParameters,
    facet_param_field,
)


def convert_facet_terms(
        raw_terms: List[FacetTerm],
        facet_field: str,
        query_string: str,
        label_table: Dict[str, str],
        results_link: str,
        filter_param: str = FILTER_PARAM) -> List[FacetEntry]:
    """Add filter links to the terms of one facet field.

    Args:
        raw_terms: Facet terms in the order the backend returned them.
        facet_field: Indexed name of the facet field.
        query_string: Query string of the current search.
        label_table: Labels of query facets, keyed by query.
        results_link: Path of the search results.
        filter_param: Name of the facet filter parameter.

    Returns:
        One FacetEntry per term, in the same order, each with a plain and a
        quoted filter link.
    """
    separator = "&" if query_string else ""
    base = f"{results_link}?{query_string}{separator}"
    param_name = f"{filter_param}[{facet_field}][]"

    entries = []
    for term in raw_terms:
        entries.append(FacetEntry(
            # Query facets carry a label in place of their query
            name=label_table.get(term.name, term.name),
            count=term.count,
            query=term.query,
            search_link=base + urlencode([(param_name, term.query)]),
            quoted_search_link=base + urlencode([(param_name, f'"{term.query}"')]),
        ))
    return entries


def transform(
        facet_result: Dict[str, List[FacetTerm]],
        catalog: FacetCatalog,
        query_string: str,
        results_link: str,
        term: Optional[str] = None,
        filter_param: str = FILTER_PARAM) -> List[PresentationFacet]:
    """Convert raw facet counts into labelled, linked facets.

    Args:
        facet_result: Facet terms keyed by facet field, as returned by the
            backend.
        catalog: Facet configuration providing field and query labels.
        query_string: Query string of the current search.
        results_link: Path of the search results.
        term: Only convert this facet field when given.
        filter_param: Name of the facet filter parameter.

    Returns:
        One PresentationFacet per facet field, in backend order.
    """
    label_table = catalog.query_facets()
    facets = []
    for facet_field, raw_terms in facet_result.items():
        if term is not None and facet_field != term:
            continue
        facets.append(PresentationFacet(
            facet_field=facet_field,
            title=catalog.label_for(facet_field),
            items=convert_facet_terms(
                raw_terms, facet_field, query_string, label_table,
                results_link, filter_param)
        ))
    return facets


def facet_crumbs(
        active_facets: Dict[str, List[str]],
        request: RequestParameters,
        results_link: str,
        filter_param: str = FILTER_PARAM) -> List[FacetCrumb]:
    """Build one crumb per selected facet value.

    The removal link of a crumb is the current search without the parameter
    that selected the value.
    """
    crumbs = []
    for facet_field, values in active_facets.items():
        for value in values:
            param_name = next(
                (name for name, item in request.query_items
                 if item == value
                 and facet_param_field(name, filter_param) == facet_field),
                f"{filter_param}[{facet_field}][]")
            crumbs.append(FacetCrumb(
                facet_field=facet_field,
                name=value,
                remove_link=f"{results_link}?"
                            f"{request.query_string_without(param_name, value)}"
            ))
    return crumbs
