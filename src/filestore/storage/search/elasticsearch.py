from typing import Any, Dict, List, Optional, Set
from urllib.parse import quote

import httpx
import structlog

from filestore.errors import BackendError, NotFoundError, require
from filestore.models import IndexField, Metadata, Pageable, Query
from filestore.platform.config import Settings, get_settings
from filestore.storage.search.base import (
    CONTENT_TYPE_INDEX_KEY,
    HASH_INDEX_KEY,
    IndexDao,
    handle_null_value,
)
from filestore.storage.search.translator import QueryTranslator

logger = structlog.get_logger()

SEARCH_TYPE = "dfs_query_then_fetch"

# Only the reserved keys are mapped; user fields rely on dynamic mapping
RESERVED_KEYS_MAPPING = {
    "mappings": {
        "properties": {
            HASH_INDEX_KEY: {"type": "keyword"},
            CONTENT_TYPE_INDEX_KEY: {"type": "keyword"},
        }
    }
}


class ElasticsearchIndexDao(IndexDao):
    """Elasticsearch implementation of IndexDao using the REST API (httpx async)."""

    def __init__(self, settings: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        settings = settings or get_settings()
        self._url = settings.ELASTICSEARCH_HOST
        self._timeout = settings.ELASTICSEARCH_TIMEOUT
        self._auth = (
            (settings.ELASTICSEARCH_USERNAME, settings.ELASTICSEARCH_PASSWORD)
            if settings.ELASTICSEARCH_USERNAME
            else None
        )
        self._transport = transport
        self.index_null_value = settings.INDEX_NULL_VALUE
        self.translator = QueryTranslator(index_null_value=self.index_null_value)
        # Indices known to carry the reserved keys mapping
        self._mapped_indices: Set[str] = set()
        self.client: Optional[httpx.AsyncClient] = None

    async def connect(self) -> None:
        if not self.client:
            logger.info("connecting_to_elasticsearch", host=self._url)
            self.client = httpx.AsyncClient(
                base_url=self._url,
                auth=self._auth,
                timeout=self._timeout,
                transport=self._transport,
            )

    async def close(self) -> None:
        if self.client:
            await self.client.aclose()
            self.client = None

    async def _ensure_connected(self):
        if not self.client:
            await self.connect()

    async def health_check(self) -> bool:
        await self._ensure_connected()
        try:
            resp = await self.client.get("/_cluster/health")
            return resp.status_code == 200 and resp.json().get("status") in ("green", "yellow")
        except Exception as e:
            logger.error("elasticsearch_health_check_failed", error=str(e))
            return False

    async def index(
        self,
        index_name: str,
        document_id: Optional[str],
        hash: str,
        content_type: Optional[str],
        index_fields: Optional[List[IndexField]],
    ) -> str:
        require(index_name, "index_name")
        require(hash, "hash")

        index = index_name.lower()
        log = logger.bind(index=index, document_id=document_id)
        log.debug("index_document", index_fields=_print_fields(index_fields))

        source: Dict[str, Any] = {HASH_INDEX_KEY: hash, CONTENT_TYPE_INDEX_KEY: content_type}
        source.update(self._convert_fields(index_fields))

        await self._ensure_connected()
        try:
            await self._create_index_if_missing(index)
            if not await self._does_exist(index, document_id):
                if document_id:
                    resp = await self.client.put(f"/{index}/_doc/{_segment(document_id)}", json=source)
                else:
                    resp = await self.client.post(f"/{index}/_doc", json=source)
            else:
                # Partial update: keys absent from source are left untouched
                resp = await self.client.post(f"/{index}/_update/{_segment(document_id)}", json={"doc": source})
            _check(resp)
            result_id = resp.json()["_id"]

            await self._refresh_index(index)

            log.debug("document_indexed", result_id=result_id, result=resp.json().get("result"))
            return result_id
        except Exception as e:
            log.error("index_document_failed", index_fields=_print_fields(index_fields), error=str(e))
            raise _as_backend_error("indexing document into Elasticsearch", e)

    async def search_by_id(self, index_name: str, id: str) -> Metadata:
        require(index_name, "index_name")
        require(id, "id")

        index = index_name.lower()
        log = logger.bind(index=index, id=id)
        log.debug("search_by_id")

        await self._ensure_connected()
        try:
            resp = await self.client.get(f"/{index}/_doc/{_segment(id)}")
            if resp.status_code == 404:
                raise NotFoundError(f"Document [index={index}, id={id}] not found", index=index, id=id)
            _check(resp)
            data = resp.json()
            if not data.get("found"):
                raise NotFoundError(f"Document [index={index}, id={id}] not found", index=index, id=id)

            metadata = _convert_hit(data)
            log.debug("document_found", metadata=metadata.model_dump())
            return metadata
        except NotFoundError:
            log.warning("document_not_found")
            raise
        except Exception as e:
            log.error("search_by_id_failed", error=str(e))
            raise _as_backend_error("searching into Elasticsearch", e)

    async def search(self, pageable: Pageable, index_name: str, query: Optional[Query]) -> List[Metadata]:
        require(pageable, "pageable")
        require(index_name, "index_name")

        index = index_name.lower()
        log = logger.bind(index=index, query=_print_query(query))
        log.debug("search_documents", page=pageable.page, size=pageable.size)

        await self._ensure_connected()
        try:
            body = self.translator.search_body(query, pageable)
            log.debug("search_request", body=body)
            resp = await self.client.post(f"/{index}/_search", params={"search_type": SEARCH_TYPE}, json=body)
            _check(resp)

            result = [_convert_hit(hit) for hit in resp.json().get("hits", {}).get("hits", [])]
            log.debug("search_documents_done", count=len(result))
            return result
        except Exception as e:
            log.error("search_documents_failed", error=str(e))
            raise _as_backend_error("searching documents into Elasticsearch", e)

    async def count(self, index_name: str, query: Optional[Query]) -> int:
        require(index_name, "index_name")

        index = index_name.lower()
        log = logger.bind(index=index, query=_print_query(query))
        log.debug("count_documents")

        await self._ensure_connected()
        try:
            resp = await self.client.post(
                f"/{index}/_search",
                params={"search_type": SEARCH_TYPE},
                json=self.translator.count_body(query),
            )
            _check(resp)

            total = resp.json().get("hits", {}).get("total", 0)
            # Elasticsearch >= 7 reports {"value": n, "relation": "eq"}
            if isinstance(total, dict):
                total = total.get("value", 0)
            return int(total)
        except Exception as e:
            log.error("count_documents_failed", error=str(e))
            raise _as_backend_error("counting into Elasticsearch", e)

    async def create_index(self, index_name: str) -> None:
        require(index_name, "index_name")

        index = index_name.lower()
        await self._ensure_connected()
        try:
            await self._create_index_if_missing(index, cached=False)
        except Exception as e:
            logger.error("create_index_failed", index=index, error=str(e))
            raise _as_backend_error("creating the index into Elasticsearch", e)

    async def _create_index_if_missing(self, index: str, cached: bool = True) -> None:
        # A first write must not let dynamic mapping turn the reserved keys into analysed text
        if cached and index in self._mapped_indices:
            return

        resp = await self.client.head(f"/{index}")
        if resp.status_code == 200:
            logger.debug("index_already_exists", index=index)
            self._mapped_indices.add(index)
            return

        resp = await self.client.put(f"/{index}", json=RESERVED_KEYS_MAPPING)
        if resp.status_code == 400 and _error_type(resp) == "resource_already_exists_exception":
            logger.debug("index_already_exists", index=index)
        else:
            _check(resp)
            logger.info("created_elasticsearch_index", index=index)
        self._mapped_indices.add(index)

    async def _does_exist(self, index: str, document_id: Optional[str]) -> bool:
        if not document_id:
            return False
        resp = await self.client.get(
            f"/{index}/_doc/{_segment(document_id)}",
            params={"realtime": "true", "refresh": "true", "_source": "false"},
        )
        if resp.status_code == 404:
            return False
        _check(resp)
        return bool(resp.json().get("found"))

    async def _refresh_index(self, index: str) -> None:
        resp = await self.client.post(f"/{index}/_refresh")
        _check(resp)

    def _convert_fields(self, index_fields: Optional[List[IndexField]]) -> Dict[str, Any]:
        if not index_fields:
            return {}
        return {field.name: handle_null_value(field.value, self.index_null_value) for field in index_fields}


def _segment(document_id: str) -> str:
    """Percent-encode a document id as a single path segment."""
    return quote(str(document_id), safe="")


def _convert_hit(hit: Dict[str, Any]) -> Metadata:
    """Build a Metadata from a GET response or a search hit."""
    source = dict(hit.get("_source") or {})
    hash = source.pop(HASH_INDEX_KEY, None)
    content_type = source.pop(CONTENT_TYPE_INDEX_KEY, None)
    return Metadata(
        index_name=hit.get("_index"),
        document_id=hit.get("_id"),
        hash=str(hash) if hash is not None else None,
        content_type=str(content_type) if content_type is not None else None,
        index_fields=source,
    )


def _check(resp: httpx.Response) -> None:
    if resp.is_success:
        return
    raise BackendError(
        f"Elasticsearch answered HTTP {resp.status_code}: {_error_type(resp) or resp.text}",
        status=resp.status_code,
    )


def _error_type(resp: httpx.Response) -> Optional[str]:
    try:
        error = resp.json().get("error")
    except ValueError:
        return None
    if isinstance(error, dict):
        return error.get("type")
    return error


def _as_backend_error(action: str, e: Exception) -> BackendError:
    if isinstance(e, BackendError):
        return e
    error = BackendError(f"Error while {action}: {e}")
    error.__cause__ = e
    return error


def _print_fields(index_fields: Optional[List[IndexField]]) -> Optional[Dict[str, Any]]:
    if index_fields is None:
        return None
    return {field.name: field.value for field in index_fields}


def _print_query(query: Optional[Query]) -> Optional[List[Dict[str, Any]]]:
    return query.to_wire()["query"] if query is not None else None
