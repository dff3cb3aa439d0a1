from typing import Optional

import httpx
import structlog

from filestore.errors import BackendError, NotFoundError, ValidationError, require
from filestore.platform.config import Settings, get_settings
from filestore.storage.content.base import ContentStore

logger = structlog.get_logger()


class IPFSContentStore(ContentStore):
    """IPFS implementation of ContentStore using the HTTP RPC API (httpx async)."""

    def __init__(self, settings: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        settings = settings or get_settings()
        self._url = settings.IPFS_HOST
        self._timeout = settings.IPFS_TIMEOUT
        self._transport = transport
        self.client: Optional[httpx.AsyncClient] = None

    async def connect(self) -> None:
        if not self.client:
            logger.info("connecting_to_ipfs", host=self._url)
            self.client = httpx.AsyncClient(
                base_url=self._url,
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
            resp = await self.client.post("/api/v0/version")
            return resp.status_code == 200
        except Exception as e:
            logger.error("ipfs_health_check_failed", error=str(e))
            return False

    async def store(self, content: bytes) -> str:
        if content is None:
            raise ValidationError("content cannot be null", parameter="content")
        await self._ensure_connected()
        try:
            resp = await self.client.post(
                "/api/v0/add",
                params={"pin": "true", "quieter": "true"},
                files={"file": ("file", content, "application/octet-stream")},
            )
            resp.raise_for_status()
            hash = resp.json()["Hash"]
            logger.debug("stored_content", hash=hash, size=len(content))
            return hash
        except Exception as e:
            logger.error("store_content_failed", size=len(content), error=str(e))
            raise BackendError(f"Error while storing content into IPFS: {e}") from e

    async def fetch(self, hash: str) -> bytes:
        require(hash, "hash")
        await self._ensure_connected()
        try:
            resp = await self.client.post("/api/v0/cat", params={"arg": hash})
        except Exception as e:
            logger.error("fetch_content_failed", hash=hash, error=str(e))
            raise BackendError(f"Error while fetching content from IPFS: {e}") from e

        # The RPC API answers 500 with a JSON error body for unknown/invalid hashes
        if resp.status_code == 404 or (resp.status_code == 500 and _is_missing(resp)):
            logger.warning("content_not_found", hash=hash)
            raise NotFoundError(f"Content [hash={hash}] not found", hash=hash)
        if resp.status_code != 200:
            logger.error("fetch_content_failed", hash=hash, status=resp.status_code, body=resp.text)
            raise BackendError(f"Error while fetching content from IPFS: HTTP {resp.status_code}", hash=hash)

        logger.debug("fetched_content", hash=hash, size=len(resp.content))
        return resp.content


def _is_missing(resp: httpx.Response) -> bool:
    try:
        message = str(resp.json().get("Message", "")).lower()
    except ValueError:
        return False
    return any(marker in message for marker in ("not found", "invalid path", "invalid cid", "no link named"))
