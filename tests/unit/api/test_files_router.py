"""
Unit tests for the files router using a mocked StoreService.
"""

import json
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from filestore.api.dependencies import get_store_service
from filestore.api.main import create_app
from filestore.engine.store_service import StoreService
from filestore.errors import BackendError, NotFoundError, ValidationError
from filestore.models import IndexerResponse, Metadata, Page, QueryOperation
from filestore.platform.config import Settings

mock_service = AsyncMock(spec=StoreService)

app = create_app(Settings(METRICS_ENABLED=False, _env_file=None))
app.dependency_overrides[get_store_service] = lambda: mock_service

client = TestClient(app)


@pytest.fixture(autouse=True)
def reset_mocks():
    mock_service.reset_mock(return_value=True, side_effect=True)


def metadata(id="doc-1"):
    return Metadata(index_name="docs", document_id=id, hash="QmHash", content_type="text/plain",
                    index_fields={"author": "alice"})


class TestStoreEndpoints:

    def test_store_file(self):
        mock_service.store_file.return_value = "QmHash"

        response = client.post("/filestore/store", files={"file": ("a.txt", b"hello", "text/plain")})

        assert response.status_code == 200
        assert response.json() == {"hash": "QmHash"}
        mock_service.store_file.assert_called_once_with(b"hello")

    def test_index_file_wire_shape(self):
        mock_service.index_file.return_value = IndexerResponse(index_name="docs", document_id="doc-1", hash="QmHash")

        response = client.post("/filestore/index", json={
            "index": "docs",
            "id": "doc-1",
            "hash": "QmHash",
            "content_type": "text/plain",
            "index_fields": [{"name": "author", "value": "alice"}],
        })

        assert response.status_code == 200
        assert response.json() == {"index": "docs", "id": "doc-1", "hash": "QmHash"}
        request = mock_service.index_file.call_args[0][0]
        assert request.index_fields[0].name == "author"

    def test_store_and_index_file(self):
        mock_service.store_and_index_file.return_value = IndexerResponse(
            index_name="docs", document_id="doc-1", hash="QmHash"
        )
        request = {"index": "docs", "content_type": "text/plain", "index_fields": [{"name": "author", "value": "alice"}]}

        response = client.post(
            "/filestore/store_index",
            files={"file": ("a.txt", b"hello", "text/plain")},
            data={"request": json.dumps(request)},
        )

        assert response.status_code == 200
        assert response.json() == {"index": "docs", "id": "doc-1", "hash": "QmHash"}
        content, indexer_request = mock_service.store_and_index_file.call_args[0]
        assert content == b"hello"
        assert indexer_request.index_name == "docs"

    def test_store_and_index_rejects_bad_request_json(self):
        response = client.post(
            "/filestore/store_index",
            files={"file": ("a.txt", b"hello", "text/plain")},
            data={"request": "{not json"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "validation"

    def test_fetch_file(self):
        mock_service.get_file_by_hash.return_value = b"\x00\x01binary"

        response = client.get("/filestore/fetch/QmHash")

        assert response.status_code == 200
        assert response.content == b"\x00\x01binary"


class TestMetadataEndpoints:

    def test_get_metadata_by_id(self):
        mock_service.get_file_metadata_by_id.return_value = metadata()

        response = client.get("/filestore/metadata/docs/doc-1")

        assert response.status_code == 200
        data = response.json()
        assert data["index"] == "docs"
        assert data["id"] == "doc-1"
        assert data["hash"] == "QmHash"
        assert data["index_fields"] == {"author": "alice"}

    def test_get_metadata_by_hash(self):
        mock_service.get_file_metadata_by_hash.return_value = metadata()

        response = client.get("/filestore/metadata/docs/hash/QmHash")

        assert response.status_code == 200
        mock_service.get_file_metadata_by_hash.assert_called_once_with("docs", "QmHash")


class TestSearchEndpoint:

    def test_search_files(self):
        mock_service.search_files.side_effect = lambda index, query, pageable: Page(
            content=[metadata("a"), metadata("b")], pageable=pageable, total_elements=5
        )

        response = client.post(
            "/filestore/search/docs?page=1&size=2&sort=age&dir=DESC",
            json={"query": [{"name": "author", "operation": "equals", "value": "alice"}]},
        )

        assert response.status_code == 200
        data = response.json()
        assert [m["id"] for m in data["content"]] == ["a", "b"]
        assert data["total_elements"] == 5
        assert data["total_pages"] == 3
        assert data["number"] == 1

        index, query, pageable = mock_service.search_files.call_args[0]
        assert index == "docs"
        assert query.filter_clauses[0].operation == QueryOperation.EQUALS
        assert pageable.offset == 2
        assert pageable.sort[0].field == "age"
        assert pageable.sort[0].ascending is False

    def test_search_without_body(self):
        mock_service.search_files.side_effect = lambda index, query, pageable: Page(
            content=[], pageable=pageable, total_elements=0
        )

        response = client.post("/filestore/search/docs")

        assert response.status_code == 200
        index, query, pageable = mock_service.search_files.call_args[0]
        assert query is None
        assert pageable.page == 0
        assert pageable.size == 20
        assert pageable.sort == []

    def test_search_rejects_oversized_page(self):
        response = client.post("/filestore/search/docs?size=1001")

        assert response.status_code == 400
        assert response.json()["error"] == "validation"
        mock_service.search_files.assert_not_called()

    def test_create_index(self):
        response = client.post("/filestore/index/docs")
        assert response.status_code == 201
        mock_service.create_index.assert_called_once_with("docs")


class TestRequestId:

    def test_request_id_is_echoed(self):
        mock_service.get_file_by_hash.return_value = b"content"

        response = client.get("/filestore/fetch/QmHash", headers={"X-Request-ID": "req-42"})

        assert response.headers["X-Request-ID"] == "req-42"

    def test_request_id_is_generated(self):
        mock_service.get_file_metadata_by_id.side_effect = NotFoundError("Document not found")

        first = client.get("/filestore/metadata/docs/doc-1")
        second = client.get("/filestore/metadata/docs/doc-1")

        assert first.status_code == 404
        assert first.headers["X-Request-ID"]
        assert first.headers["X-Request-ID"] != second.headers["X-Request-ID"]


class TestErrorMapping:

    @pytest.mark.parametrize(
        "error, status_code, kind",
        [
            (ValidationError("index cannot be null or empty"), 400, "validation"),
            (NotFoundError("Document not found"), 404, "not_found"),
            (BackendError("elasticsearch down"), 500, "backend"),
        ],
    )
    def test_errors_are_distinguishable(self, error, status_code, kind):
        mock_service.get_file_metadata_by_id.side_effect = error

        response = client.get("/filestore/metadata/docs/doc-1")

        assert response.status_code == status_code
        assert response.json() == {"error": kind, "detail": str(error)}
