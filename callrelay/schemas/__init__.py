"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (chat requests, pushed updates)
    - Domain types from core/ used for enum fields
"""
