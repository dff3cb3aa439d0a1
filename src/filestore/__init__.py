"""
Filestore - Content-addressable file storage with searchable metadata

This package contains the Filestore backend services:
- api: FastAPI REST endpoints
- engine: StoreService orchestrating content store and metadata index
- storage: Backend adapters (IPFS content store, Elasticsearch index)
- repository: Entity repository built on top of the store service
- platform: Cross-cutting concerns (configuration, logging)
"""

__version__ = "0.1.0"
