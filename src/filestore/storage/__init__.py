"""Filestore Storage Layer - Backend adapters (IPFS content store, Elasticsearch metadata index)."""

from .content import ContentStore, IPFSContentStore
from .search import ElasticsearchIndexDao, IndexDao

__all__ = [
    "ContentStore",
    "IPFSContentStore",
    "IndexDao",
    "ElasticsearchIndexDao",
]
