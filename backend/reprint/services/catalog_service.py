"""
Reprint Backend — Catalog Service
===================================

What:  Business logic for catalog entries: filtered listing, CRUD, statistics.
Why:   Keeps SQL and validation out of the route handlers so every rule can be
       exercised with a bare AsyncSession (or a mock of one).
How:   Each method receives the request's session, runs its statements, and
       translates store failures into the application exception hierarchy.
Who:   Called by routes/books.py and routes/stats.py.

Error translation:
    IntegrityError (unique violation)  → DuplicateKeyError   (400)
    any other SQLAlchemyError          → DatabaseError       (500)
    missing row / zero affected rows   → NotFoundError       (404)
    empty title/author, bad quantities → ValidationError     (400)

Write semantics:
    update_book and delete_book are single conditional statements
    (UPDATE ... WHERE id = :id RETURNING *, DELETE ... WHERE id = :id).
    A missing row shows up as no returned row / zero rowcount, so there is
    no window between an existence check and the write.

Consistency:
    list_books runs the page query and the COUNT query back to back on the
    same session without a snapshot; under concurrent writes `total` may
    disagree with `books` by the rows written in between.
"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from reprint.config import settings
from reprint.exceptions import (
    DatabaseError,
    DuplicateKeyError,
    NotFoundError,
    ReprintError,
    ValidationError,
)
from reprint.models.book import Book, utcnow
from reprint.schemas.book import (
    AllBooksResponse,
    BookListResponse,
    BookPayload,
    BookResponse,
    CatalogFilter,
    GenreStat,
    PaginationInfo,
    StatsResponse,
)
from reprint.services.query_builder import CatalogQuery

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"


def is_unique_violation(exc: IntegrityError) -> bool:
    """
    True when an IntegrityError came from a unique constraint.

    asyncpg and psycopg expose the SQLSTATE on the driver exception; SQLite
    only says so in the message text.
    """
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code is not None:
        return code == UNIQUE_VIOLATION
    text = str(orig).lower()
    return "unique" in text or "duplicate key" in text


class CatalogService:
    """
    Stateless service; one shared instance (`catalog_service`) serves all requests.

    Responsibilities:
        - list_books():     filtered page + matching total
        - list_all_books(): newest rows up to ALL_BOOKS_LIMIT
        - get_book():       single entry or NotFoundError
        - create_book():    validated insert
        - update_book():    validated full replace
        - delete_book():    hard delete
        - get_stats():      genre counts and quantity sums
    """

    # ── Reads ─────────────────────────────────────────────────────────────

    async def list_books(
        self, db: AsyncSession, catalog_filter: CatalogFilter
    ) -> BookListResponse:
        """
        Return one page of entries matching every supplied predicate.

        A page past the end yields `books=[]` with the real total, so the
        client can tell "filtered to nothing" from "paged too far".
        """
        query = CatalogQuery(catalog_filter)
        try:
            result = await db.execute(query.page_statement())
            books = list(result.scalars().all())

            count_result = await db.execute(query.count_statement())
            total = count_result.scalar() or 0
        except SQLAlchemyError as e:
            logger.error("Database error listing books: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to fetch books",
                context={"error_type": type(e).__name__},
            )

        logger.debug(
            "Listed %d of %d books (page=%d, limit=%d, predicates=%d)",
            len(books),
            total,
            catalog_filter.page,
            catalog_filter.limit,
            len(query.conditions),
        )

        return BookListResponse(
            books=[BookResponse.model_validate(b) for b in books],
            pagination=PaginationInfo.build(
                page=catalog_filter.page,
                limit=catalog_filter.limit,
                total=total,
            ),
        )

    async def list_all_books(self, db: AsyncSession) -> AllBooksResponse:
        stmt = (
            select(Book)
            .order_by(Book.created_at.desc(), Book.id.desc())
            .limit(settings.all_books_limit)
        )
        try:
            result = await db.execute(stmt)
            books = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error fetching all books: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to fetch all books",
                context={"error_type": type(e).__name__},
            )
        return AllBooksResponse(books=[BookResponse.model_validate(b) for b in books])

    async def get_book(self, db: AsyncSession, book_id: int) -> BookResponse:
        try:
            result = await db.execute(select(Book).where(Book.id == book_id))
            book = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching book %s: %s", book_id, str(e))
            raise DatabaseError(
                message="Failed to fetch book",
                context={"book_id": book_id},
            )

        if book is None:
            raise NotFoundError(resource="Book", resource_id=book_id)
        return BookResponse.model_validate(book)

    # ── Writes ────────────────────────────────────────────────────────────

    async def create_book(self, db: AsyncSession, payload: BookPayload) -> BookResponse:
        """
        Insert one entry.

        Fields are stored exactly as supplied; nothing is defaulted beyond
        the timestamps. The configured unique fields are checked first so the
        client gets a named-field message; the store's own constraint is the
        backstop for concurrent inserts.

        Raises:
            ValidationError:   empty title/author or inconsistent quantities
            DuplicateKeyError: a unique field already holds this value
            DatabaseError:     any other store failure
        """
        values = self._validated_values(payload)
        try:
            await self._ensure_unique(db, values)

            book = Book(**values)
            db.add(book)
            await db.flush()
        except ReprintError:
            raise
        except IntegrityError as e:
            raise self._translate_integrity_error(e, "create")
        except SQLAlchemyError as e:
            logger.error("Database error creating book: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to create book",
                context={"error_type": type(e).__name__},
            )

        logger.info("Book created: id=%s title=%r", book.id, book.title)
        return BookResponse.model_validate(book)

    async def update_book(
        self, db: AsyncSession, book_id: int, payload: BookPayload
    ) -> BookResponse:
        """
        Replace every mutable field of entry `book_id`.

        Full-replace: a field absent from the payload is written as NULL.
        Callers that want to keep a value must send it back.

        A missing id is reported as NotFoundError even when the body would
        also fail validation or collide on a unique field.
        """
        try:
            values = self._validated_values(payload)
            await self._ensure_unique(db, values, exclude_id=book_id)
        except (ValidationError, DuplicateKeyError):
            await self._ensure_exists(db, book_id)
            raise
        except SQLAlchemyError as e:
            logger.error("Database error checking book %s: %s", book_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to update book",
                context={"book_id": book_id, "error_type": type(e).__name__},
            )

        values["updated_at"] = utcnow()
        stmt = (
            update(Book)
            .where(Book.id == book_id)
            .values(**values)
            .returning(Book)
        )
        try:
            result = await db.execute(stmt)
            book = result.scalar_one_or_none()
        except IntegrityError as e:
            raise self._translate_integrity_error(e, "update")
        except SQLAlchemyError as e:
            logger.error("Database error updating book %s: %s", book_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to update book",
                context={"book_id": book_id, "error_type": type(e).__name__},
            )

        if book is None:
            raise NotFoundError(resource="Book", resource_id=book_id)

        logger.info("Book updated: id=%s", book_id)
        return BookResponse.model_validate(book)

    async def delete_book(self, db: AsyncSession, book_id: int) -> None:
        """Remove entry `book_id` permanently. A second call raises NotFoundError."""
        try:
            # rowcount must come straight from the DELETE, not a RETURNING fetch
            result = await db.execute(
                delete(Book)
                .where(Book.id == book_id)
                .execution_options(synchronize_session=False)
            )
        except SQLAlchemyError as e:
            logger.error("Database error deleting book %s: %s", book_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to delete book",
                context={"book_id": book_id, "error_type": type(e).__name__},
            )

        if result.rowcount == 0:
            raise NotFoundError(resource="Book", resource_id=book_id)
        logger.info("Book deleted: id=%s", book_id)

    # ── Statistics ────────────────────────────────────────────────────────

    async def get_stats(self, db: AsyncSession) -> StatsResponse:
        count_col = func.count().label("count")
        genre_stmt = (
            select(Book.genre, count_col)
            .where(Book.genre.is_not(None))
            .group_by(Book.genre)
            .order_by(count_col.desc(), Book.genre)
        )
        sums_stmt = select(
            func.coalesce(func.sum(Book.quantity), 0),
            func.coalesce(func.sum(Book.available_quantity), 0),
        )
        try:
            total = (await db.execute(select(func.count()).select_from(Book))).scalar() or 0
            genre_rows = (await db.execute(genre_stmt)).all()
            total_quantity, available_quantity = (await db.execute(sums_stmt)).one()
        except SQLAlchemyError as e:
            logger.error("Database error computing stats: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to fetch statistics",
                context={"error_type": type(e).__name__},
            )

        return StatsResponse(
            total_books=total,
            genre_stats=[GenreStat(genre=genre, count=count) for genre, count in genre_rows],
            total_quantity=int(total_quantity),
            available_quantity=int(available_quantity),
        )

    # ── Helpers ───────────────────────────────────────────────────────────

    @staticmethod
    def _validated_values(payload: BookPayload) -> Dict[str, Any]:
        """
        Apply the business rules and return the column values to write.

        Every mutable column is present in the result (None when omitted),
        which is what makes update_book a full replace.
        """
        values = payload.model_dump()

        title, author = values.get("title"), values.get("author")
        if not title or not title.strip() or not author or not author.strip():
            raise ValidationError(
                message="Title and author are required",
                field="title" if not title or not title.strip() else "author",
                details="Please provide both title and author",
            )

        for field in ("quantity", "available_quantity"):
            if values.get(field) is not None and values[field] < 0:
                raise ValidationError(
                    message=f"{field} must be a non-negative integer",
                    field=field,
                )

        quantity, available = values.get("quantity"), values.get("available_quantity")
        if quantity is not None and available is not None and available > quantity:
            raise ValidationError(
                message="available_quantity cannot exceed quantity",
                field="available_quantity",
                details=f"available_quantity={available}, quantity={quantity}",
            )

        return {field: values.get(field) for field in Book.MUTABLE_FIELDS}

    @staticmethod
    async def _ensure_exists(db: AsyncSession, book_id: int) -> None:
        try:
            result = await db.execute(select(Book.id).where(Book.id == book_id))
            found = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching book %s: %s", book_id, str(e))
            raise DatabaseError(
                message="Failed to fetch book",
                context={"book_id": book_id},
            )
        if found is None:
            raise NotFoundError(resource="Book", resource_id=book_id)

    @staticmethod
    async def _ensure_unique(
        db: AsyncSession,
        values: Dict[str, Any],
        exclude_id: Optional[int] = None,
    ) -> None:
        for field in settings.catalog_unique_fields_list:
            if field not in Book.__table__.c:
                continue
            value = values.get(field)
            if value is None or value == "":
                continue

            stmt = select(Book.id).where(getattr(Book, field) == value)
            if exclude_id is not None:
                stmt = stmt.where(Book.id != exclude_id)
            result = await db.execute(stmt.limit(1))
            if result.scalar_one_or_none() is not None:
                raise DuplicateKeyError(
                    message=f"A book with this {field} already exists",
                    field=field,
                )

    @staticmethod
    def _translate_integrity_error(exc: IntegrityError, action: str) -> ReprintError:
        if not is_unique_violation(exc):
            logger.error("Integrity error on book %s: %s", action, str(exc.orig))
            return DatabaseError(
                message=f"Failed to {action} book",
                context={"error_type": type(exc.orig).__name__},
            )

        detail = str(exc.orig).lower()
        for field in settings.catalog_unique_fields_list:
            if field.lower() in detail:
                return DuplicateKeyError(
                    message=f"A book with this {field} already exists",
                    field=field,
                )
        return DuplicateKeyError(message="Book already exists")


# ── Singleton Instance ────────────────────────────────────────────────────
catalog_service = CatalogService()
