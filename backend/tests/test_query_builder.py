"""
Reprint Backend — Query Builder Unit Tests
============================================

What:  Tests for CatalogQuery and CatalogFilter, compiled against the
       PostgreSQL dialect without a database.

What we test:
    ✅ Filter values only ever appear as bound parameters
    ✅ One predicate per non-empty field, joined with AND
    ✅ search is a parenthesized OR over title and author
    ✅ The "all" genre sentinel disables the genre predicate
    ✅ Page and count statements share the same WHERE clause
    ✅ LIMIT/OFFSET and newest-first ordering
    ✅ Page/limit clamping and LIKE wildcard escaping
"""

import pytest
from sqlalchemy.dialects import postgresql

from reprint.config import settings
from reprint.schemas.book import CatalogFilter
from reprint.services.query_builder import CatalogQuery, contains_pattern


def compile_pg(stmt):
    compiled = stmt.compile(dialect=postgresql.dialect())
    return str(compiled), compiled.params


def where_clause(sql: str) -> str:
    if "WHERE" not in sql:
        return ""
    return sql.split("WHERE", 1)[1].split("ORDER BY", 1)[0].strip()


class TestPredicates:

    def test_no_filters_has_no_where(self):
        query = CatalogQuery(CatalogFilter())
        sql, _ = compile_pg(query.page_statement())

        assert query.conditions == []
        assert "WHERE" not in sql

    def test_search_matches_title_or_author(self):
        query = CatalogQuery(CatalogFilter(search="dun"))
        sql, params = compile_pg(query.page_statement())

        clause = where_clause(sql)
        assert clause.count("ILIKE") == 2
        assert " OR " in clause
        assert "books.title" in clause and "books.author" in clause
        assert list(params.values()).count("%dun%") == 2

    def test_all_fields_are_conjoined(self):
        query = CatalogQuery(CatalogFilter(search="dune", genre="sci", author="herbert"))
        sql, params = compile_pg(query.page_statement())

        clause = where_clause(sql)
        assert len(query.conditions) == 3
        assert clause.count(" AND ") == 2
        # The OR stays inside its own parentheses
        assert "(books.title ILIKE" in clause
        assert "%sci%" in params.values()
        assert "%herbert%" in params.values()

    @pytest.mark.parametrize("sentinel", ["all", "ALL", "All"])
    def test_genre_sentinel_disables_filter(self, sentinel):
        query = CatalogQuery(CatalogFilter(genre=sentinel))
        assert query.conditions == []

    def test_custom_sentinel(self):
        query = CatalogQuery(CatalogFilter(genre="any"), genre_any_sentinel="any")
        assert query.conditions == []

        query = CatalogQuery(CatalogFilter(genre="all"), genre_any_sentinel="any")
        assert len(query.conditions) == 1

    def test_blank_fields_are_ignored(self):
        query = CatalogQuery(CatalogFilter(search="   ", genre="", author=None))
        assert query.conditions == []


class TestParameterBinding:

    @pytest.mark.parametrize(
        "hostile",
        [
            "'; DROP TABLE books; --",
            "x' OR '1'='1",
            "Robert'); DELETE FROM users;--",
        ],
    )
    def test_user_input_never_reaches_sql_text(self, hostile):
        query = CatalogQuery(CatalogFilter(search=hostile, genre=hostile, author=hostile))

        for stmt in (query.page_statement(), query.count_statement()):
            sql, params = compile_pg(stmt)
            assert hostile not in sql
            assert "DROP" not in sql and "DELETE" not in sql
            assert any(hostile in str(v) for v in params.values())


class TestStatements:

    def test_count_uses_same_predicates_as_page(self):
        query = CatalogQuery(CatalogFilter(search="a", genre="b", author="c", page=4, limit=7))
        page_sql, page_params = compile_pg(query.page_statement())
        count_sql, count_params = compile_pg(query.count_statement())

        assert where_clause(page_sql) == where_clause(count_sql)
        assert "count(*)" in count_sql.lower()
        for key, value in count_params.items():
            assert page_params[key] == value

    def test_count_has_no_limit_or_order(self):
        sql, _ = compile_pg(CatalogQuery(CatalogFilter(page=3)).count_statement())
        assert "LIMIT" not in sql
        assert "OFFSET" not in sql
        assert "ORDER BY" not in sql

    def test_page_is_newest_first_with_id_tiebreak(self):
        sql, _ = compile_pg(CatalogQuery(CatalogFilter()).page_statement())
        assert "ORDER BY books.created_at DESC, books.id DESC" in sql

    def test_limit_and_offset(self):
        sql, params = compile_pg(CatalogQuery(CatalogFilter(page=3, limit=10)).page_statement())
        assert "LIMIT" in sql and "OFFSET" in sql
        assert 10 in params.values()
        assert 20 in params.values()


class TestCatalogFilter:

    def test_defaults(self):
        f = CatalogFilter()
        assert f.page == 1
        assert f.limit == settings.default_page_size
        assert f.offset == 0

    @pytest.mark.parametrize("page", [0, -1, -100])
    def test_page_below_one_is_clamped(self, page):
        assert CatalogFilter(page=page).page == 1

    @pytest.mark.parametrize("limit", [0, -5])
    def test_limit_below_one_is_clamped(self, limit):
        assert CatalogFilter(limit=limit).limit == 1

    def test_limit_above_max_is_clamped(self):
        assert CatalogFilter(limit=settings.max_page_size + 500).limit == settings.max_page_size

    def test_offset(self):
        assert CatalogFilter(page=5, limit=12).offset == 48

    def test_blank_strings_become_none(self):
        f = CatalogFilter(search="  ", genre="", author=" tolkien ")
        assert f.search is None
        assert f.genre is None
        assert f.author == "tolkien"


class TestContainsPattern:

    def test_plain_term(self):
        assert contains_pattern("dune") == "%dune%"

    def test_wildcards_are_escaped(self):
        assert contains_pattern("50%_off") == "%50/%/_off%"

    def test_escape_character_is_escaped(self):
        assert contains_pattern("AC/DC") == "%AC//DC%"
