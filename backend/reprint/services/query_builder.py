"""
Reprint Backend — Catalog Query Builder
=========================================

What:  Turns a CatalogFilter into the page query and its COUNT twin.
Why:   The listing WHERE clause is assembled from optional inputs. Building it
       from SQLAlchemy expressions means every user value becomes a bound
       parameter; nothing typed by a client is ever spliced into SQL text.
How:   One predicate per non-empty filter field, joined with AND. The same
       predicate list feeds both statements so the total always counts what
       the page would contain, minus LIMIT/OFFSET.

Predicates:
    search  → (title ILIKE %term% OR author ILIKE %term%)   one unit
    genre   → genre ILIKE %genre%     (skipped for the "all" sentinel)
    author  → author ILIKE %author%

    On PostgreSQL `ilike` renders as ILIKE; other dialects (SQLite in tests)
    get lower(x) LIKE lower(y).

Wildcards:
    % and _ typed by the user are escaped, so "50%" matches the literal text
    "50%" rather than "50" followed by anything.
"""

from typing import List, Optional

from sqlalchemy import Select, and_, func, or_, select
from sqlalchemy.sql.elements import ColumnElement

from reprint.config import settings
from reprint.models.book import Book
from reprint.schemas.book import CatalogFilter

LIKE_ESCAPE = "/"


def contains_pattern(term: str) -> str:
    """Wraps `term` for a substring match, escaping LIKE metacharacters."""
    escaped = (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def _ilike(column, term: str) -> ColumnElement[bool]:
    return column.ilike(contains_pattern(term), escape=LIKE_ESCAPE)


class CatalogQuery:
    """
    Statement pair for one listing request.

    Usage:
        query = CatalogQuery(catalog_filter)
        rows = (await db.execute(query.page_statement())).scalars().all()
        total = (await db.execute(query.count_statement())).scalar_one()
    """

    def __init__(
        self,
        catalog_filter: CatalogFilter,
        genre_any_sentinel: Optional[str] = None,
    ):
        self.filter = catalog_filter
        sentinel = settings.genre_any_sentinel if genre_any_sentinel is None else genre_any_sentinel
        self.genre_any_sentinel = sentinel.strip().lower()
        self.conditions = self._build_conditions()

    def _build_conditions(self) -> List[ColumnElement[bool]]:
        f = self.filter
        conditions: List[ColumnElement[bool]] = []

        if f.search:
            conditions.append(or_(_ilike(Book.title, f.search), _ilike(Book.author, f.search)))

        if f.genre and f.genre.lower() != self.genre_any_sentinel:
            conditions.append(_ilike(Book.genre, f.genre))

        if f.author:
            conditions.append(_ilike(Book.author, f.author))

        return conditions

    def _where(self, stmt: Select) -> Select:
        if self.conditions:
            stmt = stmt.where(and_(*self.conditions))
        return stmt

    def page_statement(self) -> Select:
        """Filtered, newest-first slice. id DESC breaks created_at ties."""
        return (
            self._where(select(Book))
            .order_by(Book.created_at.desc(), Book.id.desc())
            .limit(self.filter.limit)
            .offset(self.filter.offset)
        )

    def count_statement(self) -> Select:
        """COUNT(*) over the same predicates, without ordering or slicing."""
        return self._where(select(func.count()).select_from(Book))
