"""Key-Value Store — the single home of all process-wide orchestration state.

Invariants:
    - Synchronous get/set/delete/list: no await between read and write of a key
    - list(prefix) returns (key, value) pairs in insertion order
    - Process-local: running several instances breaks guard and directory guarantees

Design Decisions:
    - Protocol over ABC: structural subtyping, tests substitute any fake
      (ADR: replaces module-level global maps with one injected store)
    - Synchronous by design of the concurrency model: cooperative scheduling means a
      sync section is never interleaved, which is what the dispatch guard relies on
"""

from typing import Any, Protocol


class KeyValueStore(Protocol):
    """Contract for orchestration state — implemented in-process."""
    def get(self, key: str) -> Any | None: ...
    def set(self, key: str, value: Any) -> None: ...
    def delete(self, key: str) -> bool: ...
    def list(self, prefix: str) -> list[tuple[str, Any]]: ...


class InMemoryKeyValueStore:
    """Dict-backed store for a single running instance."""

    def __init__(self):
        self._data: dict[str, Any] = {}

    def get(self, key: str) -> Any | None:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def list(self, prefix: str) -> list[tuple[str, Any]]:
        return [(k, v) for k, v in self._data.items() if k.startswith(prefix)]

    def __len__(self) -> int:
        return len(self._data)
