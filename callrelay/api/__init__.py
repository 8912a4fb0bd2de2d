"""API Layer — FastAPI routes, bearer-token dependency and global error handlers.

Invariants:
    - Routers registered explicitly in main.py (no auto-discovery)
    - Every error leaves the API as the {"error": {...}} envelope

Design Decisions:
    - Thin routes delegate to the ServiceContainer (ADR: impureim sandwich)
"""
