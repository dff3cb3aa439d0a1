"""
Repository capabilities - Create, Read and Search - each implemented once
against the StoreService and composed by EntityRepository.
"""

import uuid
from typing import Any, Generic, List, Mapping, Optional, TypeVar

import structlog

from filestore.engine.store_service import StoreService
from filestore.errors import NotFoundError, ValidationError
from filestore.models import IndexerRequest, IndexField, Metadata, Page, Pageable, Query
from filestore.repository.config import RepositoryConfig

logger = structlog.get_logger()

E = TypeVar("E")


def generate_id() -> str:
    return uuid.uuid4().hex


class CreateCapability(Generic[E]):
    """Store and index an entity."""

    def __init__(self, service: StoreService, config: RepositoryConfig[E]):
        self.service = service
        self.config = config

    async def save(self, entity: E, external_index_fields: Optional[Mapping[str, Any]] = None) -> E:
        """
        Store the serialised entity and index its fields.

        An id is generated when the entity has none; the content hash is set
        on the entity once stored.
        """
        accessors = self.config.accessors
        log = logger.bind(index=self.config.index_name)

        id = accessors.get_id(entity)
        if id is None:
            id = generate_id()
            accessors.set_id(entity, id)
        log.debug("saving_entity", id=id, external_index_fields=external_index_fields)

        request = IndexerRequest(
            index_name=self.config.index_name,
            document_id=id,
            content_type=self.config.codec.content_type,
            index_fields=self.build_index_fields(entity),
            external_index_fields=self._external_fields(external_index_fields),
        )
        response = await self.service.store_and_index_file(self.config.codec.serialize(entity), request)

        accessors.set_hash(entity, response.hash)
        log.debug("entity_saved", id=id, hash=response.hash)
        return entity

    def build_index_fields(self, entity: E) -> List[IndexField]:
        return [IndexField(name=name, value=extract(entity)) for name, extract in self.config.index_fields.items()]

    def _external_fields(self, external: Optional[Mapping[str, Any]]) -> Optional[List[IndexField]]:
        if not external:
            return None
        allowed = self.config.external_index_fields
        unknown = set(external) - allowed if allowed else set()
        if unknown:
            raise ValidationError(f"Unknown external index fields: {sorted(unknown)}", fields=sorted(unknown))
        return [IndexField(name=name, value=value) for name, value in external.items()]


class ReadCapability(Generic[E]):
    """Point lookups returning entities."""

    def __init__(self, service: StoreService, config: RepositoryConfig[E]):
        self.service = service
        self.config = config

    async def find_one(self, id: str) -> Optional[E]:
        """Return the entity stored under id, or None if absent."""
        try:
            metadata = await self.service.get_file_metadata_by_id(self.config.index_name, str(id))
        except NotFoundError:
            return None
        return await self.load(metadata)

    async def exists(self, id: str) -> bool:
        try:
            await self.service.get_file_metadata_by_id(self.config.index_name, str(id))
        except NotFoundError:
            return False
        return True

    async def load(self, metadata: Metadata) -> E:
        """Fetch and deserialise the content referenced by a metadata record."""
        content = await self.service.get_file_by_hash(metadata.hash)
        entity = self.config.codec.deserialize(content)
        self.config.accessors.set_hash(entity, metadata.hash)
        return entity


class SearchCapability(Generic[E]):
    """Paginated queries returning entities."""

    def __init__(self, service: StoreService, config: RepositoryConfig[E], reader: ReadCapability[E]):
        self.service = service
        self.config = config
        self.reader = reader

    async def find_all(self, pageable: Optional[Pageable] = None) -> Page[E]:
        return await self.search(None, pageable)

    async def search(self, query: Optional[Query], pageable: Optional[Pageable] = None) -> Page[E]:
        pageable = pageable or Pageable(page=0, size=self.config.default_page_size)
        page = await self.service.search_files(self.config.index_name, query, pageable)
        entities = [await self.reader.load(metadata) for metadata in page.content]
        return Page(content=entities, pageable=page.pageable, total_elements=page.total_elements)

