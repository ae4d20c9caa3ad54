"""API Layer — FastAPI routes, dependencies and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return structured JSON responses (except image/redirect views)

Design Decisions:
    - Thin routes delegate to services; vendor adapters injected via api/dependencies.py
"""
