"""
Store Service - Orchestrates the content store and the metadata index.

There is no transaction across the two backends: `store_and_index_file`
stores first and indexes second, and a failing index step leaves the stored
content orphaned (logged, not rolled back). `search_files` runs `search` and
`count` as two independent requests, so under concurrent writes the page
content and the total may come from different snapshots.
"""

from typing import Optional

import structlog

from filestore.errors import BackendError, FileStoreError, NotFoundError, require
from filestore.models import IndexerRequest, IndexerResponse, Metadata, Page, Pageable, Query
from filestore.storage.content.base import ContentStore
from filestore.storage.search.base import HASH_INDEX_KEY, IndexDao

logger = structlog.get_logger()


class StoreService:
    """
    Service gathering all the logic of the file store.
    """

    def __init__(self, content_store: ContentStore, index_dao: IndexDao):
        """
        Initialize the store service.

        Args:
            content_store: Content-addressable store holding the raw bytes
            index_dao: Metadata index
        """
        self.content_store = content_store
        self.index_dao = index_dao

    async def store_file(self, file: bytes) -> str:
        """
        Store a file in the content store.

        Returns:
            File unique identifier (hash)
        """
        logger.debug("store_file", size=len(file) if file is not None else None)
        try:
            hash = await self.content_store.store(file)
        except FileStoreError:
            raise
        except Exception as e:
            logger.error("store_file_failed", error=str(e))
            raise BackendError(f"Error while storing the file: {e}") from e
        logger.debug("file_stored", hash=hash)
        return hash

    async def index_file(self, request: IndexerRequest) -> IndexerResponse:
        """
        Index a file already stored in the content store.

        Args:
            request: Metadata to index (index, id, hash, content type, fields)

        Returns:
            Tuple (index, document id, hash)
        """
        require(request, "request")
        require(request.index_name, "index_name")
        require(request.hash, "hash")

        logger.debug("index_file", index=request.index_name, document_id=request.document_id, hash=request.hash)
        try:
            document_id = await self.index_dao.index(
                request.index_name,
                request.document_id,
                request.hash,
                request.content_type,
                request.resolved_fields(),
            )
        except FileStoreError:
            raise
        except Exception as e:
            logger.error("index_file_failed", index=request.index_name, document_id=request.document_id, error=str(e))
            raise BackendError(f"Error while indexing the file: {e}") from e

        # Same name the engine reports on read back
        return IndexerResponse(index_name=request.index_name.lower(), document_id=document_id, hash=request.hash)

    async def store_and_index_file(self, file: bytes, request: IndexerRequest) -> IndexerResponse:
        """
        Store a file then index it.

        If indexing fails the stored content is not removed: it stays in the
        content store, unreferenced by the index.
        """
        require(request, "request")
        require(request.index_name, "index_name")

        hash = await self.store_file(file)

        try:
            return await self.index_file(request.model_copy(update={"hash": hash}))
        except FileStoreError:
            logger.error(
                "orphaned_content",
                hash=hash,
                index=request.index_name,
                document_id=request.document_id,
            )
            raise

    async def get_file_by_hash(self, hash: str) -> bytes:
        """Get a file content by hash, bypassing the index."""
        require(hash, "hash")
        logger.debug("get_file_by_hash", hash=hash)
        try:
            return await self.content_store.fetch(hash)
        except FileStoreError:
            raise
        except Exception as e:
            logger.error("get_file_by_hash_failed", hash=hash, error=str(e))
            raise BackendError(f"Error while fetching the file: {e}") from e

    async def get_file_metadata_by_id(self, index: str, id: str) -> Metadata:
        """Get the metadata of a file by its index document id."""
        require(index, "index")
        require(id, "id")
        return await self.index_dao.search_by_id(index, id)

    async def get_file_metadata_by_hash(self, index: str, hash: str) -> Metadata:
        """Get the metadata of a file by its content hash."""
        require(index, "index")
        require(hash, "hash")

        query = Query().equals(HASH_INDEX_KEY, hash)
        results = await self.index_dao.search(Pageable(page=0, size=1), index, query)
        if not results:
            logger.warning("metadata_not_found", index=index, hash=hash)
            raise NotFoundError(f"File [index={index}, hash={hash}] not found", index=index, hash=hash)
        return results[0]

    async def search_files(self, index: str, query: Optional[Query], pageable: Pageable) -> Page[Metadata]:
        """
        Search the index against a multi-criteria query.

        Returns:
            Page of Metadata plus the total number of matches
        """
        require(index, "index")
        require(pageable, "pageable")

        content = await self.index_dao.search(pageable, index, query)
        total = await self.index_dao.count(index, query)

        logger.debug("search_files_done", index=index, returned=len(content), total=total)
        return Page(content=content, pageable=pageable, total_elements=total)

    async def create_index(self, index: str) -> None:
        """Create an index (no-op if it already exists)."""
        require(index, "index")
        await self.index_dao.create_index(index)
