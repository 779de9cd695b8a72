"""
Barrel + Verse Backend — Application Package Initializer
=========================================================

What: Marks the `barrelverse` directory as a Python package.
Who:  Imported by uvicorn (`barrelverse.main:app`), Alembic, the admin CLI and pytest.

Architecture Note:
    The backend is split into thin layers:

    ┌─────────────────────────────────────┐
    │     Routes + Access Control gates   │  ← HTTP concerns, session checks
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Visibility rules, auth, purchases
    ├─────────────────────────────────────┤
    │      Storage (Data Access Layer)    │  ← MemoryStorage | DatabaseStorage
    ├─────────────────────────────────────┤
    │   Models (SQLAlchemy) + Schemas     │  ← Tables and API contracts
    └─────────────────────────────────────┘

    Exactly one Storage implementation is active per process; it is chosen
    at startup from configuration and handed to routes through app.state.
"""

__version__ = "1.0.0"
