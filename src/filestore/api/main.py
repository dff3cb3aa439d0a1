"""
Filestore API Main Application

Entry point for the FastAPI application.
"""

import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app
from starlette.middleware.base import BaseHTTPMiddleware

from filestore.api.resources import Resources
from filestore.api.routers import files
from filestore.errors import ErrorKind, FileStoreError
from filestore.platform.config import Settings, get_settings
from filestore.platform.logging import bind_request_context, clear_request_context, configure_logging, get_logger

logger = get_logger(__name__)

ERROR_STATUS = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.UNSUPPORTED: 501,
    ErrorKind.BACKEND: 500,
}

REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind request id, method and path to every log event of a request."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        bind_request_context(request_id, method=request.method, path=request.url.path)
        try:
            response = await call_next(request)
        finally:
            clear_request_context()
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def create_app(settings: Optional[Settings] = None, resources: Optional[Resources] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Configuration (defaults to environment settings)
        resources: Pre-built resources; built from settings at startup when None
    """
    settings = settings or (resources.settings if resources else get_settings())

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Application lifespan handler for startup/shutdown."""
        logger.info("Starting Filestore API...")
        if getattr(app.state, "resources", None) is None:
            app.state.resources = Resources.from_settings(settings)
        try:
            await app.state.resources.connect()
            logger.info("Resources initialized successfully.")
        except Exception as e:
            logger.error("resources_init_failed", error=str(e))
            raise

        yield

        logger.info("Shutting down Filestore API...")
        await app.state.resources.close()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.VERSION,
        description="Content-addressable file storage with searchable metadata",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.resources = resources

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS.split(",") if settings.CORS_ORIGINS else ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestContextMiddleware)

    @app.exception_handler(FileStoreError)
    async def filestore_error_handler(request: Request, exc: FileStoreError) -> JSONResponse:
        status_code = ERROR_STATUS.get(exc.kind, 500)
        if status_code >= 500:
            logger.error("request_failed", path=request.url.path, kind=exc.kind.value, error=str(exc), **exc.context)
        else:
            logger.info("request_rejected", path=request.url.path, kind=exc.kind.value, error=str(exc))
        return JSONResponse(status_code=status_code, content={"error": exc.kind.value, "detail": str(exc)})

    # =========================================================================
    # OBSERVABILITY
    # =========================================================================
    if settings.METRICS_ENABLED:
        app.mount("/metrics", make_asgi_app())

    # =========================================================================
    # HEALTH ENDPOINTS
    # =========================================================================
    @app.get("/health", tags=["Health"])
    async def health_check(request: Request) -> dict:
        resources: Optional[Resources] = request.app.state.resources
        if resources is None:
            return {"status": "starting", "ipfs": False, "elasticsearch": False}
        ipfs = await resources.content_store.health_check()
        elasticsearch = await resources.index_dao.health_check()
        return {
            "status": "healthy" if ipfs and elasticsearch else "degraded",
            "ipfs": ipfs,
            "elasticsearch": elasticsearch,
        }

    app.include_router(files.router, prefix=settings.API_PREFIX, tags=["Files"])

    return app


def run() -> None:
    """Run the API server with uvicorn."""
    import uvicorn

    settings = get_settings()
    configure_logging(settings)
    uvicorn.run(create_app(settings), host=settings.API_HOST, port=settings.API_PORT)


if __name__ == "__main__":
    run()
