"""
Metadata records and indexer request/response DTOs.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class IndexField(BaseModel):
    """One structured attribute to index alongside a piece of content."""

    name: str = Field(..., min_length=1)
    value: Any = None


def fields_to_dict(fields: Optional[List[IndexField]]) -> Dict[str, Any]:
    """Flatten a list of IndexField into a name -> value mapping (last wins)."""
    if not fields:
        return {}
    return {field.name: field.value for field in fields}


class Metadata(BaseModel):
    """
    Metadata of a stored content as read back from the index.

    Built fresh for every request; the reserved hash / content-type keys are
    lifted out of the indexed document into their own attributes.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    index_name: str = Field(..., alias="index")
    document_id: str = Field(..., alias="id")
    hash: Optional[str] = None
    content_type: Optional[str] = None
    index_fields: Dict[str, Any] = Field(default_factory=dict)

    def get_field(self, name: str, default: Any = None) -> Any:
        return self.index_fields.get(name, default)


class IndexerRequest(BaseModel):
    """Request to index (and optionally store) a content."""

    model_config = ConfigDict(populate_by_name=True)

    document_id: Optional[str] = Field(default=None, alias="id")
    index_name: str = Field(..., alias="index")
    content_type: Optional[str] = None
    hash: Optional[str] = None
    index_fields: List[IndexField] = Field(default_factory=list)
    # Merged over index_fields; may override or add fields unknown to the entity
    external_index_fields: Optional[List[IndexField]] = None

    def resolved_fields(self) -> List[IndexField]:
        """Entity-derived fields with external fields merged on top."""
        merged = fields_to_dict(self.index_fields)
        merged.update(fields_to_dict(self.external_index_fields))
        return [IndexField(name=name, value=value) for name, value in merged.items()]


class IndexerResponse(BaseModel):
    """Result of an index write. Serialised as {"index", "id", "hash"}."""

    model_config = ConfigDict(populate_by_name=True)

    index_name: str = Field(..., alias="index")
    document_id: str = Field(..., alias="id")
    hash: str

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)
