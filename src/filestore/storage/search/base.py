"""
Search Storage modules for Filestore (metadata index).
"""
from abc import ABC, abstractmethod
from typing import Any, List, Optional

from filestore.models import IndexField, Metadata, Pageable, Query

# Reserved keys stored alongside user fields in every indexed document
HASH_INDEX_KEY = "__hash"
CONTENT_TYPE_INDEX_KEY = "__content_type"

# Placeholder indexed in place of None / "" (must be lower case)
NULL_VALUE = "null"


class IndexDao(ABC):
    """Abstract interface for the metadata index."""

    @abstractmethod
    async def connect(self) -> None:
        """Establish connection."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close connection."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if reachable."""
        pass

    @abstractmethod
    async def index(
        self,
        index_name: str,
        document_id: Optional[str],
        hash: str,
        content_type: Optional[str],
        index_fields: Optional[List[IndexField]],
    ) -> str:
        """
        Create or update (upsert) the metadata of a content.

        Args:
            index_name: Index name
            document_id: Document ID (generated by the engine if None)
            hash: Content hash
            content_type: Content type
            index_fields: Fields to index

        Returns:
            Document ID
        """
        pass

    @abstractmethod
    async def search_by_id(self, index_name: str, id: str) -> Metadata:
        """Get a document by ID. Raises NotFoundError if absent."""
        pass

    @abstractmethod
    async def search(self, pageable: Pageable, index_name: str, query: Optional[Query]) -> List[Metadata]:
        """Search documents matching a query, paginated and sorted."""
        pass

    @abstractmethod
    async def count(self, index_name: str, query: Optional[Query]) -> int:
        """Count documents matching a query."""
        pass

    @abstractmethod
    async def create_index(self, index_name: str) -> None:
        """Create an index if it doesn't exist."""
        pass


def handle_null_value(value: Any, enabled: bool) -> Any:
    """Replace None or "" by NULL_VALUE when null-indexing is enabled."""
    if enabled and (value is None or value == ""):
        return NULL_VALUE
    return value
