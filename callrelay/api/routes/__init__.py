"""Route Modules — one file per resource.

Invariants:
    - Each module defines its own APIRouter with prefix, tags and auth dependencies
    - Routes never contain orchestration logic (delegate to services)
"""
