"""
Reprint Backend — Book SQLAlchemy Model
=========================================

What:  ORM model representing the `books` table.
Why:   Maps catalog entries to database rows for type-safe queries.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for migrations.
Who:   Used by CatalogService and by the query builder for column references.

Table Design Rationale:
    - Integer primary key: assigned by the store, immutable, used in URLs
    - title / author: the only required fields; everything else is optional
    - isbn: unique when present; NULLs do not collide
    - quantity / available_quantity: nullable because updates are full-replace
      and an omitted field is written as NULL
    - created_at / updated_at: timezone-aware; updated_at moves on every write

    Index on created_at DESC:
        The listing is always "newest first", filtered or not.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from reprint.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Book(Base):
    """
    One catalog entry.

    Query Patterns:
        - Filtered page: WHERE <ilike predicates> ORDER BY created_at DESC, id DESC
          LIMIT :limit OFFSET :offset
        - Matching total: SELECT count(*) with the same predicates
        - Single entry: WHERE id = :id (primary key)
    """

    __tablename__ = "books"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    author: Mapped[str] = mapped_column(String(255), nullable=False)

    genre: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    publication_year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    publisher: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Unique when present; CATALOG_UNIQUE_FIELDS drives the service-side check
    isbn: Mapped[Optional[str]] = mapped_column(String(20), nullable=True, unique=True)

    quantity: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    available_quantity: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # ── Timestamps ────────────────────────────────────────────────────────
    # Python-side defaults carry microseconds, so rows inserted in the same
    # second still sort deterministically; server defaults cover raw SQL inserts.
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_books_created_at", created_at.desc()),
    )

    # Columns a client may write; everything else is owned by the store
    MUTABLE_FIELDS = (
        "title",
        "author",
        "genre",
        "publication_year",
        "publisher",
        "description",
        "image_url",
        "isbn",
        "quantity",
        "available_quantity",
    )

    def __repr__(self) -> str:
        return f"<Book(id={self.id}, title='{self.title}', author='{self.author}')>"
