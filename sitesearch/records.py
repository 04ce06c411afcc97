"""
Solr document / OPDS metadata adapter.

This module defines the conversion between Solr result documents and the
OPDS2 DataProvider record output format, so search results can be listed as
publications of a catalog.
"""
from typing import List, Optional, Union

from pydantic import Field, field_validator
from pyopds2 import DataProviderRecord, Metadata, Link


class SolrDocumentRecord(DataProviderRecord):
    """
    DataProviderRecord implementation for indexed site records.

    Converts stored Solr document fields to OPDS2 compatible record fields.
    """
    raw_identifier: str = Field(..., description="Unique key of the document")
    class_name: Optional[str] = Field(
        None, description="Content type of the record")
    title: Optional[str] = Field(None, description="Title of the record")
    content: Optional[str] = Field(None, description="Indexed body text")
    link: Optional[str] = Field(None, description="URL of the record page")
    created: Optional[str] = Field(None, description="Creation date")
    score: Optional[float] = Field(None, description="Relevance score")

    @property
    def type(self) -> str:
        return "http://schema.org/WebPage"

    @property
    def identifier(self) -> str:
        """Return the record link, or its document key when it has none."""
        return self.link or self.raw_identifier

    @field_validator('title', 'content', mode='before')
    @classmethod
    def join_values(cls, value: Union[str, List[str], None]) -> Optional[str]:
        """
        Normalize multi-valued text fields.

        Solr returns stored values of multi-valued fields as lists; they are
        merged into a single string.
        """
        if isinstance(value, list):
            return " ".join(str(elem) for elem in value)
        return value

    def metadata(self):
        return Metadata(type=self.type,
                        title=self.title or self.raw_identifier,
                        identifier=self.identifier,
                        description=self.content,
                        published=self.created)

    def links(self):
        if not self.link:
            return []
        return [Link(rel="alternate", href=self.link, type="text/html")]

    def images(self):
        return []


def _create_record(doc: dict) -> SolrDocumentRecord:
    """
    Convert a raw Solr document into a SolrDocumentRecord.

    Args:
        doc: Solr document as returned with "fl=*,score".

    Returns:
        SolrDocumentRecord instance.
    """
    return SolrDocumentRecord(
        raw_identifier=str(doc.get("id")),
        class_name=doc.get("ClassName"),
        title=doc.get("Title_t"),
        content=doc.get("Content_t"),
        link=doc.get("Link"),
        created=doc.get("Created_dt"),
        score=doc.get("score"),
    )
