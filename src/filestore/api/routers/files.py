"""
Router for file storage, indexing and search endpoints.
"""

from typing import Annotated, Literal, Optional

from fastapi import APIRouter, Body, Depends, File, Form, Query, Response, UploadFile, status
from pydantic import ValidationError as PydanticValidationError

from filestore import models
from filestore.api import schemas
from filestore.api.dependencies import get_app_settings, get_store_service
from filestore.engine.store_service import StoreService
from filestore.errors import ValidationError
from filestore.platform.config import Settings
from filestore.platform.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/store", response_model=schemas.StoreResponse)
async def store_file(
    service: Annotated[StoreService, Depends(get_store_service)],
    file: UploadFile = File(...),
):
    """
    Store a file in the content store.
    """
    hash = await service.store_file(await file.read())
    return schemas.StoreResponse(hash=hash)


@router.post("/index", response_model=models.IndexerResponse)
async def index_file(
    request: models.IndexerRequest,
    service: Annotated[StoreService, Depends(get_store_service)],
):
    """
    Index an already stored file.
    """
    return await service.index_file(request)


@router.post("/store_index", response_model=models.IndexerResponse)
async def store_and_index_file(
    service: Annotated[StoreService, Depends(get_store_service)],
    file: UploadFile = File(...),
    request: str = Form(..., description="IndexerRequest as JSON"),
):
    """
    Store a file and index it.
    """
    try:
        indexer_request = models.IndexerRequest.model_validate_json(request)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid indexer request: {e}")
    return await service.store_and_index_file(await file.read(), indexer_request)


@router.get("/fetch/{hash}")
async def fetch_file(
    hash: str,
    service: Annotated[StoreService, Depends(get_store_service)],
):
    """
    Get a file content by hash.
    """
    content = await service.get_file_by_hash(hash)
    return Response(content=content, media_type="application/octet-stream")


@router.get("/metadata/{index}/hash/{hash}", response_model=models.Metadata)
async def get_metadata_by_hash(
    index: str,
    hash: str,
    service: Annotated[StoreService, Depends(get_store_service)],
):
    return await service.get_file_metadata_by_hash(index, hash)


@router.get("/metadata/{index}/{id}", response_model=models.Metadata)
async def get_metadata_by_id(
    index: str,
    id: str,
    service: Annotated[StoreService, Depends(get_store_service)],
):
    return await service.get_file_metadata_by_id(index, id)


@router.post("/search/{index}", response_model=schemas.MetadataPage)
async def search_files(
    index: str,
    service: Annotated[StoreService, Depends(get_store_service)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    query: Optional[models.Query] = Body(default=None),
    page: int = Query(0, ge=0),
    size: Optional[int] = Query(None, ge=1, description="Page size (defaults to DEFAULT_PAGE_SIZE)"),
    sort: Optional[str] = Query(None, description="Sort attribute"),
    dir: Literal["ASC", "DESC"] = Query("ASC", description="Sort direction"),
):
    """
    Search files in an index against a multi-criteria query.
    """
    size = size or settings.DEFAULT_PAGE_SIZE
    if size > settings.MAX_PAGE_SIZE:
        raise ValidationError(f"size must be <= {settings.MAX_PAGE_SIZE}", parameter="size")
    pageable = models.Pageable.of(page=page, size=size, sort_field=sort, ascending=dir == "ASC")
    result = await service.search_files(index, query, pageable)
    return schemas.MetadataPage.from_page(result)


@router.post("/index/{index}", status_code=status.HTTP_201_CREATED)
async def create_index(
    index: str,
    service: Annotated[StoreService, Depends(get_store_service)],
):
    """
    Create an index (no-op if it already exists).
    """
    await service.create_index(index)
    return {"index": index}
