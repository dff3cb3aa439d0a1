"""
Pytest configuration and shared fixtures.
"""

import os
import sys

import pytest

sys.path.append(os.path.join(os.getcwd(), "src"))
sys.path.append(os.path.dirname(__file__))

from emulators import ElasticsearchEmulator, IPFSEmulator  # noqa: E402
from filestore.engine.store_service import StoreService  # noqa: E402
from filestore.platform.config import Settings  # noqa: E402
from filestore.storage.content.ipfs import IPFSContentStore  # noqa: E402
from filestore.storage.search.elasticsearch import ElasticsearchIndexDao  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment() -> None:
    """Set up test environment variables."""
    os.environ.setdefault("APP_ENV", "test")
    os.environ.setdefault("DEBUG", "true")
    os.environ.setdefault("METRICS_ENABLED", "false")


@pytest.fixture
def settings() -> Settings:
    return Settings(
        APP_ENV="test",
        IPFS_HOST="http://ipfs.test:5001",
        ELASTICSEARCH_HOST="http://elasticsearch.test:9200",
        INDEX_NULL_VALUE=True,
        METRICS_ENABLED=False,
        _env_file=None,
    )


@pytest.fixture
def ipfs() -> IPFSEmulator:
    return IPFSEmulator()


@pytest.fixture
def elasticsearch() -> ElasticsearchEmulator:
    return ElasticsearchEmulator()


@pytest.fixture
async def content_store(settings, ipfs):
    store = IPFSContentStore(settings, transport=ipfs.transport())
    await store.connect()
    yield store
    await store.close()


@pytest.fixture
async def index_dao(settings, elasticsearch):
    dao = ElasticsearchIndexDao(settings, transport=elasticsearch.transport())
    await dao.connect()
    yield dao
    await dao.close()


@pytest.fixture
def store_service(content_store, index_dao) -> StoreService:
    return StoreService(content_store, index_dao)
