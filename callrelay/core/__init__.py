"""Core Layer — pure domain logic, no IO, no async.

Invariants:
    - No module in core/ imports from services/, api/ or infrastructure/
    - State is read and written only through the injected KeyValueStore

Design Decisions:
    - Functional core separated from imperative shell (ADR: impureim sandwich)
"""
