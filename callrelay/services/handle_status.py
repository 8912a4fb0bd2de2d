"""Status Handlers — tools for reading and stopping agent progress (4 methods).

Invariants:
    - Handlers never raise: StatusTracker already converts upstream failures to text
"""

from callrelay.services.status_tracker import StatusTracker


class StatusHandlers:
    """On-demand status, cached updates and stop."""

    def __init__(self, tracker: StatusTracker):
        self.tracker = tracker

    async def get_specialized_agent_status(
        self, app_id: str, user_id: str, channel: str, args: dict,
    ) -> str:
        return await self.tracker.fetch_status(
            user_id, channel, agent_id=args.get("agent_id") or None,
        )

    async def get_latest_agent_status(
        self, app_id: str, user_id: str, channel: str, args: dict,
    ) -> str:
        return await self.tracker.latest_status(user_id, channel)

    async def get_latest_agent_updates(
        self, app_id: str, user_id: str, channel: str, args: dict,
    ) -> str:
        return self.tracker.latest_updates(channel)

    async def stop_agent_polling(
        self, app_id: str, user_id: str, channel: str, args: dict,
    ) -> str:
        return self.tracker.stop(
            channel,
            agent_id=args.get("agent_id") or None,
            reason=args.get("reason") or None,
        )
