"""Credential Issuer — RTC tokens scoped to one agent session channel.

Invariants:
    - Every token carries a publisher privilege expiring at now + ttl (default 1 hour)
    - Tokens are scoped to (app_id, channel, uid); numeric uids use the uid builder,
      anything else the account builder

Design Decisions:
    - agora-token-builder's RtcTokenBuilder: the platform only accepts its own
      access-token format, both for agent join and for the PSTN call
    - Protocol boundary: lifecycle and telephony depend on CredentialIssuer, tests inject fakes
"""

import time
from collections.abc import Callable
from typing import Protocol

from agora_token_builder import RtcTokenBuilder

ROLE_PUBLISHER = 1
DEFAULT_TTL_SECONDS = 3600


class CredentialIssuer(Protocol):
    def issue(self, session_id: str, uid: str) -> str: ...


class RtcCredentialIssuer:
    """Builds publisher tokens signed with the app certificate."""

    def __init__(
        self,
        app_id: str,
        certificate: str,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
        builder=RtcTokenBuilder,
    ):
        self.app_id = app_id
        self._certificate = certificate
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._builder = builder

    def _expires_at(self) -> int:
        return int(self._clock()) + self.ttl_seconds

    def issue(self, session_id: str, uid: str) -> str:
        uid = str(uid)
        if uid.isdigit():
            return self._builder.buildTokenWithUid(
                self.app_id, self._certificate, session_id, int(uid),
                ROLE_PUBLISHER, self._expires_at(),
            )
        return self._builder.buildTokenWithAccount(
            self.app_id, self._certificate, session_id, uid,
            ROLE_PUBLISHER, self._expires_at(),
        )
