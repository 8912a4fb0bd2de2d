"""Telephony Handlers — ring a phone into the caller's own conversation (3 methods).

Invariants:
    - Result text starts with "Phone call initiated successfully" or "Failed to initiate";
      the success text is the evidence the dispatcher scans for on later retries
"""

from callrelay.config import Settings
from callrelay.core.boundary_protocols import TelephonyBridge


class TelephonyHandlers:

    def __init__(self, settings: Settings, telephony: TelephonyBridge):
        self.settings = settings
        self.telephony = telephony

    async def call_phone(
        self, app_id: str, user_id: str, channel: str, args: dict,
    ) -> str:
        return await self._call(app_id, channel, str(args.get("phone_number") or ""))

    async def call_hermes_phone(
        self, app_id: str, user_id: str, channel: str, args: dict,
    ) -> str:
        return await self._call(app_id, channel, self.settings.hermes_phone_number)

    async def call_sid_phone(
        self, app_id: str, user_id: str, channel: str, args: dict,
    ) -> str:
        return await self._call(app_id, channel, self.settings.sid_phone_number)

    async def _call(self, app_id: str, channel: str, number: str) -> str:
        placement = await self.telephony.place(
            app_id or self.settings.agora_app_id, channel, number,
        )
        if placement.ok:
            return placement.detail
        if placement.detail.startswith("Failed"):
            return placement.detail
        return f"Failed to initiate phone call: {placement.detail}"
