"""
Reprint Backend — Application Package Initializer
==================================================

What: Marks the `reprint` directory as a Python package.
Why:  Enables module imports like `from reprint.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The catalog backend follows a layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Filtering, validation, auth
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes never build SQL. Services never touch HTTP status codes; they raise
    exceptions from `reprint.exceptions` and the application factory maps them.
"""

__version__ = "1.0.0"
