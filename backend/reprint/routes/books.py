"""
Reprint Backend — Book Route Handlers
=======================================

What:  HTTP surface for the catalog: list, fetch-all, get, create, replace, delete.
Why:   The browse page, the home page, and the add-book form all call these.
How:   Extracts query/path/body data, delegates to CatalogService, returns JSON.

Routes are thin. Status codes for failures come from the exception handlers
in main.py, never from here.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from reprint.database import get_db_session
from reprint.schemas.book import (
    AllBooksResponse,
    BookListResponse,
    BookPayload,
    BookResponse,
    CatalogFilter,
    MessageResponse,
)
from reprint.schemas.common import ErrorResponse
from reprint.services.catalog_service import catalog_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Books"])


@router.get(
    "/books",
    response_model=BookListResponse,
    responses={
        200: {"description": "One page of matching books", "model": BookListResponse},
        400: {"description": "Malformed query parameter", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="List books with filters and pagination",
)
async def list_books(
    response: Response,
    search: Optional[str] = Query(
        default=None,
        description="Case-insensitive substring of the title or the author",
    ),
    genre: Optional[str] = Query(
        default=None,
        description="Case-insensitive substring of the genre; 'all' disables the filter",
    ),
    author: Optional[str] = Query(
        default=None,
        description="Case-insensitive substring of the author",
    ),
    page: int = Query(default=1, description="1-based page number; values below 1 read as 1"),
    limit: Optional[int] = Query(
        default=None,
        description="Page size; clamped to [1, MAX_PAGE_SIZE]",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> BookListResponse:
    """
    Example:
        GET /api/books?search=dun&genre=all&page=1&limit=12
    """
    params = {"search": search, "genre": genre, "author": author, "page": page}
    if limit is not None:
        params["limit"] = limit
    catalog_filter = CatalogFilter(**params)

    result = await catalog_service.list_books(db=db, catalog_filter=catalog_filter)

    response.headers["X-Total-Count"] = str(result.pagination.total)
    return result


@router.get(
    "/books/all",
    response_model=AllBooksResponse,
    summary="Newest books, unfiltered",
    description="Returns up to ALL_BOOKS_LIMIT (default 1000) books, newest first.",
)
async def list_all_books(db: AsyncSession = Depends(get_db_session)) -> AllBooksResponse:
    return await catalog_service.list_all_books(db=db)


@router.get(
    "/books/{book_id}",
    response_model=BookResponse,
    responses={404: {"description": "Book not found", "model": ErrorResponse}},
    summary="Get a single book",
)
async def get_book(book_id: int, db: AsyncSession = Depends(get_db_session)) -> BookResponse:
    return await catalog_service.get_book(db=db, book_id=book_id)


@router.post(
    "/books",
    status_code=201,
    response_model=BookResponse,
    responses={
        400: {"description": "Missing title/author or duplicate", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Add a book",
)
async def create_book(
    payload: BookPayload,
    db: AsyncSession = Depends(get_db_session),
) -> BookResponse:
    return await catalog_service.create_book(db=db, payload=payload)


@router.put(
    "/books/{book_id}",
    response_model=BookResponse,
    responses={
        400: {"description": "Missing title/author or duplicate", "model": ErrorResponse},
        404: {"description": "Book not found", "model": ErrorResponse},
    },
    summary="Replace a book",
    description=(
        "Full replace: every field not present in the body is cleared. "
        "Send the complete record, not a patch."
    ),
)
async def update_book(
    book_id: int,
    payload: BookPayload,
    db: AsyncSession = Depends(get_db_session),
) -> BookResponse:
    return await catalog_service.update_book(db=db, book_id=book_id, payload=payload)


@router.delete(
    "/books/{book_id}",
    response_model=MessageResponse,
    responses={404: {"description": "Book not found", "model": ErrorResponse}},
    summary="Delete a book",
)
async def delete_book(book_id: int, db: AsyncSession = Depends(get_db_session)) -> MessageResponse:
    await catalog_service.delete_book(db=db, book_id=book_id)
    return MessageResponse(message="Book deleted successfully")
