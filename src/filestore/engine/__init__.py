from .store_service import StoreService

__all__ = ["StoreService"]
