"""Domain models and entities.

Why:
- Pure, strict data structures (Pydantic v2) live here.
- The domain knows nothing about SQL, HTTP or the CLI: only catalog concepts.
"""
