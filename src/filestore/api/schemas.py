from typing import List

from pydantic import BaseModel

from filestore.models import Metadata, Page


class StoreResponse(BaseModel):
    hash: str


class MetadataPage(BaseModel):
    content: List[Metadata]
    total_elements: int
    total_pages: int
    number: int
    size: int

    @classmethod
    def from_page(cls, page: Page[Metadata]) -> "MetadataPage":
        return cls(
            content=page.content,
            total_elements=page.total_elements,
            total_pages=page.total_pages,
            number=page.number,
            size=page.size,
        )


class ErrorResponse(BaseModel):
    error: str
    detail: str
