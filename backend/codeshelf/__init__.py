"""
CodeShelf Backend — Application Package Initializer
====================================================

What: Marks the `codeshelf` directory as a Python package.
Who:  Used by uvicorn (`codeshelf.main:app`), Alembic, pytest and the
      client sync layer (`codeshelf.client`).

Architecture Note:
    The server follows a layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (Query / Validation /    │  ← Predicates, field rules,
    │             Snippet Store)          │    store operations
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    The client package sits beside it and shares the schemas, the error
    taxonomy and the list predicate, so both ends filter the same way.
"""

__version__ = "1.0.0"

# Version of the JSON wire contract, sent as X-API-Version on every API response
API_VERSION = "1"
