"""
Backend-agnostic query model.

A Query is a flat, ordered list of FilterClause combined with a logical AND.
On the wire it reads:

    {"query": [
        {"name": "author", "operation": "equals", "value": "alice"},
        {"names": ["title", "summary"], "operation": "full_text", "value": "ipfs"}
    ]}
"""

from enum import Enum
from typing import Any, Dict, List, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class QueryOperation(str, Enum):
    """Operations allowed in a filter clause."""

    FULL_TEXT = "full_text"      # Full text search across one or more fields
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"        # Contains the word/phrase
    IN = "in"                    # Value is one of a list
    LT = "lt"
    LTE = "lte"
    GT = "gt"
    GTE = "gte"


class FilterClause(BaseModel):
    """One primitive test: field name(s), operation, value."""

    names: List[str] = Field(..., min_length=1)
    # Unknown operations are kept as raw strings and skipped at translation time
    operation: Union[QueryOperation, str]
    value: Any = None

    @model_validator(mode="before")
    @classmethod
    def _accept_single_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and "names" not in data and "name" in data:
            data = dict(data)
            data["names"] = [data.pop("name")]
        return data

    @field_validator("operation", mode="before")
    @classmethod
    def _parse_operation(cls, value: Any) -> Any:
        if isinstance(value, QueryOperation):
            return value
        try:
            return QueryOperation(value)
        except ValueError:
            return str(value)

    @property
    def name(self) -> str:
        return self.names[0]

    def to_wire(self) -> Dict[str, Any]:
        op = self.operation.value if isinstance(self.operation, QueryOperation) else self.operation
        if len(self.names) == 1:
            return {"name": self.name, "operation": op, "value": self.value}
        return {"names": list(self.names), "operation": op, "value": self.value}


class Query(BaseModel):
    """Ordered sequence of filter clauses interpreted as a logical AND."""

    model_config = ConfigDict(populate_by_name=True)

    filter_clauses: List[FilterClause] = Field(default_factory=list, alias="query")

    def add(self, operation: Union[QueryOperation, str], names: Union[str, Sequence[str]], value: Any) -> "Query":
        if isinstance(names, str):
            names = [names]
        self.filter_clauses.append(FilterClause(names=list(names), operation=operation, value=value))
        return self

    def full_text(self, names: Union[str, Sequence[str]], value: Any) -> "Query":
        return self.add(QueryOperation.FULL_TEXT, names, value)

    def equals(self, name: str, value: Any) -> "Query":
        return self.add(QueryOperation.EQUALS, name, value)

    def not_equals(self, name: str, value: Any) -> "Query":
        return self.add(QueryOperation.NOT_EQUALS, name, value)

    def contains(self, name: str, value: Any) -> "Query":
        return self.add(QueryOperation.CONTAINS, name, value)

    def in_(self, name: str, values: Sequence[Any]) -> "Query":
        return self.add(QueryOperation.IN, name, list(values))

    def lt(self, name: str, value: Any) -> "Query":
        return self.add(QueryOperation.LT, name, value)

    def lte(self, name: str, value: Any) -> "Query":
        return self.add(QueryOperation.LTE, name, value)

    def gt(self, name: str, value: Any) -> "Query":
        return self.add(QueryOperation.GT, name, value)

    def gte(self, name: str, value: Any) -> "Query":
        return self.add(QueryOperation.GTE, name, value)

    def is_empty(self) -> bool:
        return not self.filter_clauses

    def to_wire(self) -> Dict[str, Any]:
        return {"query": [clause.to_wire() for clause in self.filter_clauses]}

    @classmethod
    def from_wire(cls, payload: Any) -> "Query":
        """Build a Query from {"query": [...]} or a bare list of clauses."""
        if payload is None:
            return cls()
        if isinstance(payload, list):
            payload = {"query": payload}
        return cls.model_validate(payload)
