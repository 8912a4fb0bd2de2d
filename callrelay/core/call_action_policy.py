"""Call Action Policy — per-channel outbound routing preference with expiry.

Invariants:
    - One preference per channel; set() replaces and re-stamps it
    - get() on a missing channel returns DEFAULT_CALL_ACTION
    - get() on an entry older than ttl returns the default AND evicts the entry
"""

import logging
import time
from collections.abc import Callable

from callrelay.core.domain_types import CallAction, DEFAULT_CALL_ACTION
from callrelay.core.kv_store import KeyValueStore
from callrelay.core.records import CallActionPreference

logger = logging.getLogger(__name__)

_PREFIX = "call_action:"
DEFAULT_TTL_SECONDS = 3600


class CallActionPolicy:

    def __init__(
        self,
        store: KeyValueStore,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self._store = store
        self._ttl = ttl_seconds
        self._clock = clock

    def set(self, channel: str, action: CallAction | str) -> CallAction:
        """Store a preference. Raises ValueError for unknown actions."""
        resolved = CallAction(action)
        self._store.set(_PREFIX + channel, CallActionPreference(
            channel=channel, action=resolved, timestamp=self._clock(),
        ))
        return resolved

    def get(self, channel: str) -> CallAction:
        key = _PREFIX + channel
        pref = self._store.get(key)
        if pref is None:
            return DEFAULT_CALL_ACTION
        if self._clock() - pref.timestamp > self._ttl:
            self._store.delete(key)
            logger.info(
                "Call action preference expired", extra={"channel": channel},
            )
            return DEFAULT_CALL_ACTION
        return pref.action
