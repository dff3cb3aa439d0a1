from .base import ContentStore
from .ipfs import IPFSContentStore

__all__ = ["ContentStore", "IPFSContentStore"]
