"""
Example API — Application Package Initializer
===============================================

What: Marks the `example_api` directory as a Python package.
Why:  Enables module imports like `from example_api.config import settings`.
Who:  Used by uvicorn (`example_api.main:app`), pytest and the fixture harness.

Architecture Note:
    The package holds two things that depend on each other only one way:

    ┌─────────────────────────────────────┐
    │      Harness (fixture replay)       │  ← parses *.md fixtures, replays them
    ├─────────────────────────────────────┤
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← example lookup, id generation
    ├─────────────────────────────────────┤
    │            Schemas (Data)           │  ← Pydantic API + fixture models
    └─────────────────────────────────────┘

    The harness talks to the API only through HTTP (in-process ASGI transport),
    so it treats the app as an opaque collaborator.
"""

__version__ = "1.0.0"
