"""Entity repository built on top of the StoreService."""

from .capabilities import CreateCapability, ReadCapability, SearchCapability
from .config import EntityAccessors, EntityCodec, RepositoryConfig, fields_from_attributes
from .entity_repository import EntityRepository

__all__ = [
    "EntityRepository",
    "RepositoryConfig",
    "EntityAccessors",
    "EntityCodec",
    "fields_from_attributes",
    "CreateCapability",
    "ReadCapability",
    "SearchCapability",
]
