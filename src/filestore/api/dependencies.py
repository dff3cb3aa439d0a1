from fastapi import Request

from filestore.api.resources import Resources
from filestore.engine.store_service import StoreService
from filestore.platform.config import Settings


def get_resources(request: Request) -> Resources:
    return request.app.state.resources


def get_store_service(request: Request) -> StoreService:
    return get_resources(request).store_service


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
