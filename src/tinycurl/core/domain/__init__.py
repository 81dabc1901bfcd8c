"""Domain models and entities.

Why:
- Pure, strict data structures (Pydantic v2) live here.
- The domain knows nothing about HTTP clients or the CLI: only requests,
  URLs and outcomes.
"""
