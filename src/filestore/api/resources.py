"""
Process-wide resources, built once at startup and shared by reference.
"""

from dataclasses import dataclass
from typing import Optional

import httpx
import structlog

from filestore.engine.store_service import StoreService
from filestore.platform.config import Settings, get_settings
from filestore.storage.content.base import ContentStore
from filestore.storage.content.ipfs import IPFSContentStore
from filestore.storage.search.base import IndexDao
from filestore.storage.search.elasticsearch import ElasticsearchIndexDao

logger = structlog.get_logger()


@dataclass
class Resources:
    settings: Settings
    content_store: ContentStore
    index_dao: IndexDao
    store_service: StoreService

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        ipfs_transport: Optional[httpx.AsyncBaseTransport] = None,
        elasticsearch_transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "Resources":
        settings = settings or get_settings()
        content_store = IPFSContentStore(settings, transport=ipfs_transport)
        index_dao = ElasticsearchIndexDao(settings, transport=elasticsearch_transport)
        return cls(
            settings=settings,
            content_store=content_store,
            index_dao=index_dao,
            store_service=StoreService(content_store, index_dao),
        )

    async def connect(self) -> None:
        """Initialize all backend clients."""
        await self.content_store.connect()
        await self.index_dao.connect()

    async def close(self) -> None:
        """Close all backend clients."""
        await self.content_store.close()
        await self.index_dao.close()
        logger.info("resources_closed")
