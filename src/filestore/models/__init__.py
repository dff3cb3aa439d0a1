"""Filestore value objects - metadata, query model, pagination."""

from .metadata import IndexField, IndexerRequest, IndexerResponse, Metadata, fields_to_dict
from .pagination import Page, Pageable, SortOrder
from .query import FilterClause, Query, QueryOperation

__all__ = [
    "IndexField",
    "IndexerRequest",
    "IndexerResponse",
    "Metadata",
    "fields_to_dict",
    "Page",
    "Pageable",
    "SortOrder",
    "FilterClause",
    "Query",
    "QueryOperation",
]
