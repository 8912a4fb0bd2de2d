"""PSTN Telephony Bridge — places an outbound call that joins a session channel.

Invariants:
    - place() never raises: every outcome is a structured CallPlacement,
      including 2xx bodies that are not a JSON object
    - reason_code is one of REASON_NOT_CONFIGURED or REASON_CALL_FAILED
    - Missing configuration or destination is detected before any network call

Design Decisions:
    - Structured {ok, reason_code} replaces substring matching on result text
    - Generic "call_failed" for every upstream failure: the PSTN API documents no
      failure taxonomy, so none is invented here (ADR: product input needed)
"""

import logging

import httpx

from callrelay.core.phone_numbers import format_phone_number
from callrelay.core.records import CallPlacement
from callrelay.infrastructure.credentials import CredentialIssuer

logger = logging.getLogger(__name__)

REASON_NOT_CONFIGURED = "telephony_not_configured"
REASON_CALL_FAILED = "call_failed"


class PstnTelephonyBridge:
    """httpx client for the PSTN outbound-call API."""

    def __init__(
        self,
        api_url: str,
        auth_header: str,
        from_number: str,
        issuer: CredentialIssuer,
        uid: str,
        region: str = "AREA_CODE_NA",
        sip_gateway: str = "",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_url = api_url
        self._auth_header = auth_header
        self.from_number = from_number
        self._issuer = issuer
        self.uid = uid
        self.region = region
        self.sip_gateway = sip_gateway
        self.timeout = timeout
        self._transport = transport

    @property
    def configured(self) -> bool:
        return all(
            v.strip() for v in (self.api_url, self._auth_header, self.from_number)
        )

    async def place(
        self, app_id: str, session_id: str, destination: str,
    ) -> CallPlacement:
        if not self.configured:
            return CallPlacement(
                ok=False, reason_code=REASON_NOT_CONFIGURED,
                detail="PSTN API URL, authorization header or from number not configured",
            )
        if not destination or not destination.strip():
            return CallPlacement(
                ok=False, reason_code=REASON_NOT_CONFIGURED,
                detail="No destination number configured for this call",
            )
        if not app_id or not session_id:
            return CallPlacement(
                ok=False, reason_code=REASON_CALL_FAILED,
                detail="Missing app id or channel for the call",
            )

        to_number = format_phone_number(destination)
        from_number = format_phone_number(self.from_number)
        payload = {
            "action": "outbound",
            "appid": app_id,
            "token": self._issuer.issue(session_id, self.uid),
            "uid": self.uid,
            "channel": session_id,
            "to": to_number,
            "from": from_number,
            "region": self.region or "AREA_CODE_NA",
            "prompt": "false",
            "timeout": "3600",
            "sip": self.sip_gateway,
        }
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport,
            ) as client:
                response = await client.post(
                    self.api_url, json=payload,
                    headers={"Authorization": f"Basic {self._auth_header}"},
                )
        except httpx.HTTPError as e:
            logger.error(
                f"PSTN request failed: {e}", extra={"channel": session_id},
            )
            return CallPlacement(
                ok=False, reason_code=REASON_CALL_FAILED,
                detail=f"PSTN API unreachable: {e}",
            )

        if response.is_error:
            return CallPlacement(
                ok=False, reason_code=REASON_CALL_FAILED,
                detail=f"PSTN API error: {response.status_code} - {response.text}",
            )
        try:
            data = response.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            logger.error(
                "PSTN API returned a malformed body", extra={"channel": session_id},
            )
            return CallPlacement(
                ok=False, reason_code=REASON_CALL_FAILED,
                detail=(
                    "PSTN API returned an unreadable response: "
                    f"{response.status_code} - {response.text[:200]}"
                ),
            )
        if data.get("success"):
            call_id = str(data.get("callid") or "")
            logger.info(
                "Outbound call initiated", extra={"channel": session_id},
            )
            return CallPlacement(
                ok=True, call_id=call_id,
                detail=(
                    f"Phone call initiated successfully to {to_number} from "
                    f"{from_number}. Call ID: {call_id}"
                ),
            )
        return CallPlacement(
            ok=False, reason_code=REASON_CALL_FAILED,
            detail=(
                f"Failed to initiate phone call to {to_number}. "
                f"Reason: {data.get('reason') or 'Unknown error'}"
            ),
        )
