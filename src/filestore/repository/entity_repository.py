from typing import Any, Generic, Iterable, Mapping, Optional, TypeVar

from filestore.engine.store_service import StoreService
from filestore.errors import UnsupportedOperationError
from filestore.models import Page, Pageable, Query
from filestore.repository.capabilities import CreateCapability, ReadCapability, SearchCapability
from filestore.repository.config import RepositoryConfig

E = TypeVar("E")


class EntityRepository(Generic[E]):
    """
    Repository-style access to entities persisted in the file store.

    Composes the Create, Read and Search capabilities. Every error
    propagates to the caller; the only mappings are NotFound -> None in
    `find_one` and NotFound -> False in `exists`. Bulk mutations, deletes,
    count and batch fetch are not supported and always raise.
    """

    def __init__(self, service: StoreService, config: RepositoryConfig[E]):
        self.config = config
        self.creator = CreateCapability(service, config)
        self.reader = ReadCapability(service, config)
        self.searcher = SearchCapability(service, config, self.reader)

    @property
    def index_name(self) -> str:
        return self.config.index_name

    async def save(self, entity: E, external_index_fields: Optional[Mapping[str, Any]] = None) -> E:
        return await self.creator.save(entity, external_index_fields)

    async def find_one(self, id: str) -> Optional[E]:
        return await self.reader.find_one(id)

    async def exists(self, id: str) -> bool:
        return await self.reader.exists(id)

    async def find_all(self, pageable: Optional[Pageable] = None) -> Page[E]:
        return await self.searcher.find_all(pageable)

    async def search(self, query: Optional[Query], pageable: Optional[Pageable] = None) -> Page[E]:
        return await self.searcher.search(query, pageable)

    # Not implemented

    async def save_all(self, entities: Iterable[E]):
        raise UnsupportedOperationError("save_all")

    async def delete(self, entity: E):
        raise UnsupportedOperationError("delete")

    async def delete_by_id(self, id: str):
        raise UnsupportedOperationError("delete_by_id")

    async def delete_all(self):
        raise UnsupportedOperationError("delete_all")

    async def count(self):
        raise UnsupportedOperationError("count")

    async def find_all_by_ids(self, ids: Iterable[str]):
        raise UnsupportedOperationError("find_all_by_ids")
