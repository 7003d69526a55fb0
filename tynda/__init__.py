"""
Tynda Backend — Application Package Initializer
================================================

What: Marks the `tynda` directory as a Python package.
Who:  Used by Alembic, pytest, and uvicorn (`uvicorn tynda.main:app`).

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Auth Gate (RequestContext deps)   │  ← session → user → role
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← ownership, validation, joins
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← shared async engine handle
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
