"""Infrastructure Layer — external service clients and cross-cutting concerns.

Invariants:
    - Adapters import core/ records and errors only, never services/
    - All external calls bounded by timeouts and mapped to typed errors

Design Decisions:
    - Resilient wrappers over raw clients (ADR: single responsibility)
"""
