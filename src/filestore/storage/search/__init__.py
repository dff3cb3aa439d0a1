from .base import CONTENT_TYPE_INDEX_KEY, HASH_INDEX_KEY, NULL_VALUE, IndexDao, handle_null_value
from .elasticsearch import ElasticsearchIndexDao
from .translator import QueryTranslator

__all__ = [
    "IndexDao",
    "ElasticsearchIndexDao",
    "QueryTranslator",
    "HASH_INDEX_KEY",
    "CONTENT_TYPE_INDEX_KEY",
    "NULL_VALUE",
    "handle_null_value",
]
