"""
Reprint Backend — Catalog Request/Response Schemas
====================================================

What:  Pydantic models defining the catalog API contract.
Why:   Automatic serialization, type coercion, and OpenAPI doc generation.
How:   FastAPI validates request bodies against these models and serializes
       service results through the response models.

Design Decision:
    Request bodies declare every field optional, title and author included.
    Required-field checks live in CatalogService so that a missing or empty
    title yields the 400 ValidationError envelope rather than FastAPI's 422
    field report, and so the rule is testable without HTTP.

    Input accepts both snake_case and camelCase keys (publication_year or
    publicationYear); output is always snake_case, matching the row shape
    the frontend already reads.
"""

import math
from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from reprint.config import settings


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class BookPayload(BaseModel):
    """
    What:  Body of POST /api/books and PUT /api/books/{id}.

    PUT is a full replace: a field left out of the body is written as NULL.
    """

    title: Optional[str] = None
    author: Optional[str] = None
    genre: Optional[str] = None
    publication_year: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("publication_year", "publicationYear"),
    )
    publisher: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("image_url", "imageUrl"),
    )
    isbn: Optional[str] = None
    quantity: Optional[int] = None
    available_quantity: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("available_quantity", "availableQuantity"),
    )


class CatalogFilter(BaseModel):
    """
    What:  Request-scoped filter and pagination window for the book listing.

    Clamping:
        page < 1 becomes 1. limit is pulled into [1, MAX_PAGE_SIZE], which
        also keeps the page-count division well defined.
    """

    search: Optional[str] = None
    genre: Optional[str] = None
    author: Optional[str] = None
    page: int = 1
    limit: int = Field(default_factory=lambda: settings.default_page_size)

    @field_validator("search", "genre", "author")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @field_validator("page")
    @classmethod
    def clamp_page(cls, v: int) -> int:
        return max(v, 1)

    @field_validator("limit")
    @classmethod
    def clamp_limit(cls, v: int) -> int:
        return min(max(v, 1), settings.max_page_size)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class BookResponse(BaseModel):
    """Full representation of a catalog entry, as stored."""

    id: int
    title: str
    author: str
    genre: Optional[str] = None
    publication_year: Optional[int] = None
    publisher: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    isbn: Optional[str] = None
    quantity: Optional[int] = None
    available_quantity: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PaginationInfo(BaseModel):
    page: int = Field(description="Current page (1-based)")
    limit: int = Field(description="Page size")
    total: int = Field(description="Rows matching the filter, across all pages")
    pages: int = Field(description="ceil(total / limit)")

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationInfo":
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit))


class BookListResponse(BaseModel):
    """
    What:  Envelope for GET /api/books.

    Pagination strategy:
        Offset-based (page/limit) because the UI renders numbered pages.
        The total comes from a separate COUNT query over the same predicates
        and may drift from `books` under concurrent writes.
    """

    books: List[BookResponse]
    pagination: PaginationInfo


class AllBooksResponse(BaseModel):
    """Envelope for GET /api/books/all (no pagination block)."""

    books: List[BookResponse]


class MessageResponse(BaseModel):
    message: str


class GenreStat(BaseModel):
    genre: str
    count: int


class StatsResponse(BaseModel):
    """
    What:  Aggregates for the dashboard header.

    Keys are camelCase on the wire, as the dashboard has always read them.
    """

    total_books: int = Field(serialization_alias="totalBooks")
    genre_stats: List[GenreStat] = Field(serialization_alias="genreStats")
    total_quantity: int = Field(serialization_alias="totalQuantity")
    available_quantity: int = Field(serialization_alias="availableQuantity")
