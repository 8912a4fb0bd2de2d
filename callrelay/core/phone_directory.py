"""Phone Directory — per-user, accumulating name → phone index built from search results.

Invariants:
    - Entries keyed by (user_id, business_id); a recorded phone is never overwritten
    - Re-recording a known business only refreshes last_seen (searches are additive)
    - resolve() matches normalized names by containment in either direction
    - resolve() returns the first hit in insertion order — no ranking, no ambiguity handling

Design Decisions:
    - First-hit resolution is a documented limitation, kept as-is
      (ADR: two similarly named businesses resolve to whichever was indexed first)
    - Empty normalized names never match: "" is contained in every string
    - Clock injected: tests control last_seen without sleeping
"""

import time
from collections.abc import Callable, Iterable, Mapping

from callrelay.core.kv_store import KeyValueStore
from callrelay.core.phone_numbers import normalize_name
from callrelay.core.records import PhoneDirectoryEntry

_PREFIX = "directory:"


class PhoneDirectory:
    """Name → phone index scoped per user."""

    def __init__(
        self, store: KeyValueStore, clock: Callable[[], float] = time.time,
    ):
        self._store = store
        self._clock = clock

    def record_results(
        self, user_id: str, results: Iterable[Mapping[str, object]],
    ) -> int:
        """Index search results. Returns the number of new entries."""
        added = 0
        now = self._clock()
        for result in results:
            phone = str(result.get("phone") or "").strip()
            business_id = str(result.get("id") or "").strip()
            if not phone or not business_id:
                continue
            key = self._key(user_id, business_id)
            existing = self._store.get(key)
            if existing is not None:
                existing.last_seen = now
                continue
            self._store.set(key, PhoneDirectoryEntry(
                business_id=business_id,
                name=str(result.get("name") or ""),
                phone=phone,
                last_seen=now,
            ))
            added += 1
        return added

    def resolve(self, user_id: str, query_name: str) -> str | None:
        query = normalize_name(query_name)
        if not query:
            return None
        for entry in self.entries(user_id):
            name = normalize_name(entry.name)
            if name and (query in name or name in query):
                return entry.phone
        return None

    def entries(self, user_id: str) -> list[PhoneDirectoryEntry]:
        return [v for _, v in self._store.list(self._user_prefix(user_id))]

    def list_recent(
        self, user_id: str, limit: int = 20,
    ) -> list[PhoneDirectoryEntry]:
        """Most recently seen first."""
        return sorted(
            self.entries(user_id), key=lambda e: e.last_seen, reverse=True,
        )[:limit]

    @staticmethod
    def _user_prefix(user_id: str) -> str:
        return f"{_PREFIX}{user_id}|"

    def _key(self, user_id: str, business_id: str) -> str:
        return self._user_prefix(user_id) + business_id
