"""Services Layer — tool handlers, tool dispatch, and agent orchestration.

Invariants:
    - Handlers split by concern (max 4 methods each)
    - Tool dispatch uses an explicit dict mapping (no auto-discovery)
    - Every upstream failure reaching the model is a descriptive string

Design Decisions:
    - One handler file per concern for locality (ADR: no god objects)
"""
