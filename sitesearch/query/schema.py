"""Field name resolution for search pages.

This module resolves the field names configured on a search page against the
index schema of the page's content types, and lists the fields a search can
be sorted on.
"""
from typing import Optional, List, Dict, Union

from database.interfaces import SearchPage
from sitesearch.config import DEFAULT_PAGE_TYPE
from sitesearch.schema import SearchSchema


class SchemaResolver:
    """Resolver of page level field names to indexed field names.

    Attributes:
        schema: Index schema introspection service.
        page: Search page whose content types are searched by default.
    """

    # Fields of every record that can always be sorted on, with their labels
    META_FIELDS = {
        "LastEdited": "LastEdited",
        "Created": "Created",
        "ID": "ID",
        "score": "Score",
    }

    def __init__(self, schema: SearchSchema, page: SearchPage):
        self.schema = schema
        self.page = page

    def searchable_types(self, default: Optional[str] = None) -> List[str]:
        """Content types the page searches, or [default] when it has none."""
        if self.page.searchable_types:
            return list(self.page.searchable_types)
        return [default] if default else []

    def resolve_field_name(
            self,
            logical_name: str,
            candidate_types: Union[str, List[str], None]) -> Optional[str]:
        """Resolve a field name against the given content types.

        Args:
            logical_name: Field name as configured on the page.
            candidate_types: Content types the field may belong to.

        Returns:
            Indexed field name, or None when the field does not exist on any
            of the types. Callers decide whether to drop the field or to use
            the logical name as is.
        """
        return self.schema.get_solr_field_name(logical_name, candidate_types)

    def resolve_or_raw(
            self,
            logical_name: str,
            candidate_types: Union[str, List[str], None]) -> str:
        return self.resolve_field_name(logical_name, candidate_types) or logical_name

    def sort_field_name(self, name: str, types: List[str]) -> str:
        return self.schema.get_sort_field_name(name, types)

    def selectable_fields(
            self,
            types: Union[str, List[str], None] = None,
            exclude_geo: bool = True) -> Dict[str, str]:
        """Return the fields that can be selected for sorting.

        Args:
            types: Content types to list the fields of. Defaults to the
                page's searchable types, or the generic page type.
            exclude_geo: Leave out geo point fields, which cannot be sorted
                on.

        Returns:
            Mapping of field name to label, ordered by field name.
        """
        if not types:
            types = self.searchable_types(DEFAULT_PAGE_TYPE)
        if isinstance(types, str):
            types = [types]

        fields = {name: name for name in self.schema.all_searchable_fields(types)}
        fields.update(self.META_FIELDS)

        if exclude_geo:
            for type_name in types:
                for name, db_type in self.schema.all_searchable_fields(type_name).items():
                    if self.schema.is_geo_type(db_type):
                        fields.pop(name, None)

        return dict(sorted(fields.items()))
