"""
Explicit configuration binding an entity type to the file store.

Identifier / hash accessors, index field extractors and the content codec
are supplied once at construction; the repository never inspects entity
types at runtime.
"""

from dataclasses import dataclass, field
from operator import attrgetter
from typing import Any, Callable, Dict, Generic, Optional, Type, TypeVar

from pydantic import BaseModel

E = TypeVar("E")
M = TypeVar("M", bound=BaseModel)

DEFAULT_CONTENT_TYPE = "application/json"


def _setter(attribute: str) -> Callable[[Any, Any], None]:
    def set_value(entity: Any, value: Any) -> None:
        setattr(entity, attribute, value)
    return set_value


@dataclass(frozen=True)
class EntityAccessors(Generic[E]):
    """Get/set functions for the identifier and the content hash of an entity."""
    get_id: Callable[[E], Optional[str]]
    set_id: Callable[[E, str], None]
    get_hash: Callable[[E], Optional[str]]
    set_hash: Callable[[E, str], None]

    @classmethod
    def for_attributes(cls, id_attribute: str = "id", hash_attribute: str = "hash") -> "EntityAccessors":
        return cls(
            get_id=attrgetter(id_attribute),
            set_id=_setter(id_attribute),
            get_hash=attrgetter(hash_attribute),
            set_hash=_setter(hash_attribute),
        )


@dataclass(frozen=True)
class EntityCodec(Generic[E]):
    """Turns an entity into stored bytes and back."""
    serialize: Callable[[E], bytes]
    deserialize: Callable[[bytes], E]
    content_type: str = DEFAULT_CONTENT_TYPE

    @classmethod
    def for_model(cls, model: Type[M]) -> "EntityCodec[M]":
        """JSON codec for a pydantic model."""
        return cls(
            serialize=lambda entity: entity.model_dump_json().encode("utf-8"),
            deserialize=model.model_validate_json,
        )


def fields_from_attributes(*names: str) -> Dict[str, Callable[[Any], Any]]:
    """Index field extractors reading same-named attributes."""
    return {name: attrgetter(name) for name in names}


@dataclass(frozen=True)
class RepositoryConfig(Generic[E]):
    index_name: str
    codec: EntityCodec[E]
    accessors: EntityAccessors[E] = field(default_factory=EntityAccessors.for_attributes)
    # index field name -> extractor
    index_fields: Dict[str, Callable[[E], Any]] = field(default_factory=dict)
    # names callers may pass as external index fields; empty means any name
    external_index_fields: frozenset = frozenset()
    default_page_size: int = 20
