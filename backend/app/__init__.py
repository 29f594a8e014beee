"""
Duet Backend — Application Package
====================================

What: API for a couples app: users, pairings, a question bank, answers,
      journals, progress and daily streaks.
Who:  Imported by uvicorn (`app.main:app`), Alembic and pytest.

Layers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │      Services (Data Store Access)   │  ← queries, 404s, shaping
    ├─────────────────────────────────────┤
    │      Core (Derived-State Rules)     │  ← pure functions, no I/O
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
