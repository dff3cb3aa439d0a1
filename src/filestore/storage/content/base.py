"""
Content Storage modules for Filestore (content-addressable storage).
"""
from abc import ABC, abstractmethod


class ContentStore(ABC):
    """Abstract interface for a content-addressable store."""

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
    async def store(self, content: bytes) -> str:
        """
        Store a content.

        Args:
            content: Raw bytes

        Returns:
            Content hash, identical for identical bytes
        """
        pass

    @abstractmethod
    async def fetch(self, hash: str) -> bytes:
        """
        Fetch a content by hash.

        Raises:
            NotFoundError: no content is stored under this hash
        """
        pass
