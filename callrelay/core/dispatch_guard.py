"""Dispatch Guard — per-channel mutual exclusion for specialized-agent dispatch.

Invariants:
    - At most one held guard per channel at any time
    - try_acquire is synchronous: callers acquire before their first await
    - Release is idempotent
"""

from callrelay.core.kv_store import KeyValueStore

_PREFIX = "guard:"


class DispatchGuard:
    """Boolean flag per channel, stored in the injected key-value store."""

    def __init__(self, store: KeyValueStore):
        self._store = store

    def try_acquire(self, channel: str) -> bool:
        """Set the guard. Returns False if it was already held."""
        key = _PREFIX + channel
        if self._store.get(key):
            return False
        self._store.set(key, True)
        return True

    def release(self, channel: str) -> None:
        self._store.delete(_PREFIX + channel)

    def is_held(self, channel: str) -> bool:
        return bool(self._store.get(_PREFIX + channel))
