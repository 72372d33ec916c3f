"""
Book API — Application Package Initializer
==========================================

What: Marks the `bookapi` directory as a Python package.
Who:  Used by uvicorn (`uvicorn bookapi.main:app`), pytest, and `python -m bookapi`.

Architecture Note:
    ┌─────────────────────────────────────┐
    │     Routes + Docs (API Layer)       │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     Services (Handler Layer)        │  ← builds Book payloads
    ├─────────────────────────────────────┤
    │  Schemas + API Spec Declaration     │  ← Pydantic contracts, OpenAPI metadata
    └─────────────────────────────────────┘

    There is no persistence layer: every Book is synthesized per request.
"""

__version__ = "1.0.0"
