"""
Inkpost Backend — Application Package
=======================================

What: A small blogging API (authentication, posts, comments) on FastAPI.
Who:  Imported by uvicorn (`inkpost.main:app`), the test suite and `python -m inkpost`.

Layers:

    ┌─────────────────────────────────────┐
    │      Routes (public / gated)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Security (bearer token → Identity)│  ← Authentication Gate
    ├─────────────────────────────────────┤
    │     Services (data access layer)    │  ← one operation per call
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← explicit handle, per-request sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
