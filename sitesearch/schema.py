"""
Index schema introspection for the site content model.

This module maps content types and their declared database fields onto the
dynamic field naming convention of the Solr index, where every indexed field
carries a suffix describing its index type (e.g. "Title_t", "Tags_ms",
"LastEdited_dt").
"""
import logging
from typing import Optional, Union

from database.interfaces import DBinterface

logger = logging.getLogger(__name__)

GEO_POINT_TYPE = "SolrGeoPoint"

FIELD_SUFFIXES = {
    "Varchar": "_t",
    "Text": "_t",
    "HTMLText": "_t",
    "HTMLVarchar": "_t",
    "Boolean": "_b",
    "Int": "_i",
    "ForeignKey": "_i",
    "Float": "_f",
    "Double": "_f",
    "Decimal": "_f",
    "Currency": "_f",
    "Percentage": "_f",
    "Date": "_dt",
    "Datetime": "_dt",
    "SS_Datetime": "_dt",
    "Enum": "_s",
    "MultiValueField": "_ms",
    GEO_POINT_TYPE: "_p",
}

# Fields every record of every content type carries
BASE_FIELDS = {
    "ID": "Int",
    "Created": "SS_Datetime",
    "LastEdited": "SS_Datetime",
}

TEXT_SUFFIX = "_t"
SORTABLE_TEXT_SUFFIX = "_s"


def base_type(db_type: str) -> str:
    """Strip constructor arguments from a db type, "Varchar(255)" -> "Varchar"."""
    return db_type.split("(", 1)[0].strip()


class SearchSchema:
    """Schema introspection service over the configured content model.

    Attributes:
        db: Database interface holding content types and custom field types.
    """

    def __init__(self, db: DBinterface):
        self.db = db

    def all_searchable_fields(
            self, types: Union[str, list[str], None]) -> dict[str, str]:
        """Collect the declared db fields of the given content types.

        Inherited fields are included; a subtype's declaration wins over the
        one of its ancestor. Unknown types contribute nothing.

        Args:
            types: A single content type name or a list of names.

        Returns:
            Mapping of field name to declared db type.
        """
        fields = {}
        for type_name in _as_list(types):
            for content_type in reversed(self.db.get_type_ancestry(type_name)):
                fields.update(content_type.db)
        return fields

    def field_suffix(self, db_type: str) -> Optional[str]:
        """Find the index suffix of a db type, following custom type parents."""
        seen = set()
        current = base_type(db_type)
        while current and current not in seen:
            if current in FIELD_SUFFIXES:
                return FIELD_SUFFIXES[current]
            seen.add(current)
            current = self.db.field_types.get(current)
        return None

    def is_geo_type(self, db_type: str) -> bool:
        """Check whether a db type is a geo point or one of its subtypes."""
        seen = set()
        current = base_type(db_type)
        while current and current not in seen:
            if current == GEO_POINT_TYPE:
                return True
            seen.add(current)
            current = self.db.field_types.get(current)
        return False

    def get_solr_field_name(
            self,
            name: str,
            types: Union[str, list[str], None]) -> Optional[str]:
        """Resolve a logical field name to its indexed field name.

        Args:
            name: Field name as declared on the content type.
            types: Content types the field may be declared on.

        Returns:
            Indexed field name, or None when none of the types declares the
            field or its db type has no index mapping.
        """
        db_type = self.all_searchable_fields(types).get(name) \
            or BASE_FIELDS.get(name)
        if not db_type:
            return None

        suffix = self.field_suffix(db_type)
        if suffix is None:
            logger.debug("No index mapping for field %s of type %s", name, db_type)
            return None
        return f"{name}{suffix}"

    def get_sort_field_name(
            self,
            name: str,
            types: Union[str, list[str], None]) -> str:
        """Resolve a field name to the indexed field used for sorting.

        Tokenized text fields cannot be sorted on, so they sort on their
        untokenized string copy. Names that cannot be resolved are returned
        as they are.
        """
        if name == "score":
            return name

        field_name = self.get_solr_field_name(name, types)
        if not field_name:
            return name
        if field_name.endswith(TEXT_SUFFIX):
            return field_name[:-len(TEXT_SUFFIX)] + SORTABLE_TEXT_SUFFIX
        return field_name


def _as_list(types: Union[str, list[str], None]) -> list[str]:
    if not types:
        return []
    if isinstance(types, str):
        return [types]
    return list(types)
