from dataclasses import dataclass, field
from math import ceil
from typing import Callable, Generic, List, Optional, TypeVar

from filestore.errors import ValidationError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class SortOrder:
    field: str
    ascending: bool = True


@dataclass(frozen=True)
class Pageable:
    """Page request: zero-based page number, page size and ordered sort keys."""
    page: int = 0
    size: int = 20
    sort: List[SortOrder] = field(default_factory=list)

    def __post_init__(self):
        if self.page < 0:
            raise ValidationError("page must be >= 0", parameter="page")
        if self.size < 1:
            raise ValidationError("size must be >= 1", parameter="size")

    @property
    def offset(self) -> int:
        return self.page * self.size

    def next(self) -> "Pageable":
        return Pageable(page=self.page + 1, size=self.size, sort=self.sort)

    @classmethod
    def of(
        cls,
        page: int = 0,
        size: int = 20,
        sort_field: Optional[str] = None,
        ascending: bool = True,
    ) -> "Pageable":
        sort = [SortOrder(sort_field, ascending)] if sort_field else []
        return cls(page=page, size=size, sort=sort)


@dataclass
class Page(Generic[T]):
    """A slice of results plus the total number of matches."""
    content: List[T]
    pageable: Pageable
    total_elements: int

    @property
    def number(self) -> int:
        return self.pageable.page

    @property
    def size(self) -> int:
        return self.pageable.size

    @property
    def total_pages(self) -> int:
        return ceil(self.total_elements / self.pageable.size) if self.total_elements else 0

    def map(self, fn: Callable[[T], U]) -> "Page[U]":
        return Page(content=[fn(item) for item in self.content], pageable=self.pageable, total_elements=self.total_elements)
