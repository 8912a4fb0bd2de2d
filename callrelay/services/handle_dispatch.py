"""Dispatch Handlers — tools that send a specialized voice agent to call a business (3 methods).

Invariants:
    - Every handler returns the DispatchResult message verbatim (success ack or corrective error)
    - Validation, phone resolution and mutual exclusion all live in AgentLifecycleManager
"""

from callrelay.core.domain_types import Specialization
from callrelay.services.agent_lifecycle import AgentLifecycleManager


class DispatchHandlers:
    """Inquiry, order and reservation dispatch."""

    def __init__(self, lifecycle: AgentLifecycleManager):
        self.lifecycle = lifecycle

    async def call_and_ask_question_agent(
        self, app_id: str, user_id: str, channel: str, args: dict,
    ) -> str:
        return await self._dispatch(Specialization.INQUIRY, user_id, channel, args)

    async def place_phone_order_agent(
        self, app_id: str, user_id: str, channel: str, args: dict,
    ) -> str:
        return await self._dispatch(Specialization.ORDER, user_id, channel, args)

    async def make_reservation_agent(
        self, app_id: str, user_id: str, channel: str, args: dict,
    ) -> str:
        return await self._dispatch(Specialization.RESERVATION, user_id, channel, args)

    async def _dispatch(
        self, specialization: Specialization, user_id: str, channel: str,
        args: dict,
    ) -> str:
        phone = args.get("phone_number")
        result = await self.lifecycle.dispatch_agent(
            specialization,
            str(phone) if phone is not None else None,
            args, channel, user_id,
        )
        return result.message
