"""
Error taxonomy shared by every Filestore layer.

Every failure raised by the DAO, the service and the repository carries one
ErrorKind so callers (and the HTTP layer) can branch on "absent" vs "broken".
"""

from enum import Enum
from typing import Any, Dict


class ErrorKind(str, Enum):
    """Tag carried by every Filestore error."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    BACKEND = "backend"
    UNSUPPORTED = "unsupported"


class FileStoreError(Exception):
    """Base class for all Filestore errors."""

    kind: ErrorKind = ErrorKind.BACKEND

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context

    def __str__(self) -> str:
        return self.message


class ValidationError(FileStoreError, ValueError):
    """A required parameter is missing or empty."""

    kind = ErrorKind.VALIDATION


class NotFoundError(FileStoreError):
    """A point lookup found no document or content."""

    kind = ErrorKind.NOT_FOUND


class BackendError(FileStoreError):
    """The content store or the search engine failed."""

    kind = ErrorKind.BACKEND


class UnsupportedOperationError(FileStoreError, NotImplementedError):
    """The operation is not implemented by this component."""

    kind = ErrorKind.UNSUPPORTED

    def __init__(self, operation: str):
        super().__init__(f"Operation '{operation}' is not supported", operation=operation)


def require(value: Any, name: str) -> None:
    """Raise ValidationError if value is None or an empty string/collection."""
    if value is None or (hasattr(value, "__len__") and len(value) == 0):
        raise ValidationError(f"{name} cannot be null or empty", parameter=name)
