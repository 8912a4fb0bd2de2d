"""Agent Lifecycle — provisions a specialized voice agent and bridges an outbound call to it.

Invariants:
    - Checks run in order with zero side effects before the guard:
      configuration → channel → caller fields → phone resolution → DispatchGuard
    - A dispatch without a channel is rejected: the guard is keyed by channel
    - DispatchGuard is acquired synchronously, before the first await
    - Provisioning failure releases the guard; call failure releases the guard but
      still reports the provisioned agent's identity
    - Success records the AgentSession, starts pull-based tracking and returns the
      acknowledgment; the call itself outlives this operation
    - Every outcome is a DispatchResult with a model-facing message (never raises
      for upstream failures)

Design Decisions:
    - Provision + call run under DispatchSupervisor: cancellation of the triggering
      request cannot strand the guard (ADR: supervised task instead of detached promise)
    - Outbound routing resolved per dispatch from CallActionPolicy: test numbers
      (hermes/sid) by default, the business itself only in "live" mode
"""

import logging
import secrets
import time
from collections.abc import Callable, Mapping
from datetime import datetime, timezone

from callrelay.config import Settings
from callrelay.core.boundary_protocols import AgentPlatform, TelephonyBridge
from callrelay.core.call_action_policy import CallActionPolicy
from callrelay.core.call_scripts import (
    CallScript, build_call_script, dispatch_acknowledgment,
)
from callrelay.core.dispatch_guard import DispatchGuard
from callrelay.core.domain_types import CallAction, DispatchState, Specialization
from callrelay.core.errors import AgentPlatformError
from callrelay.core.field_validation import validate_dispatch_fields
from callrelay.core.phone_directory import PhoneDirectory
from callrelay.core.phone_numbers import needs_directory_lookup
from callrelay.core.records import AgentSession, DispatchResult
from callrelay.infrastructure.credentials import CredentialIssuer
from callrelay.services.agent_properties import build_agent_properties
from callrelay.services.dispatch_supervisor import DispatchSupervisor
from callrelay.services.status_tracker import StatusTracker

logger = logging.getLogger(__name__)

REASON_CONFIG = "configuration_missing"
REASON_CHANNEL = "channel_missing"
REASON_FIELDS = "invalid_fields"
REASON_PHONE = "phone_unresolved"
REASON_ACTIVE = "already_active"
REASON_PROVISION = "provision_failed"

ALREADY_ACTIVE = (
    "Error: A specialized agent is already active for this conversation. "
    "Please wait for the current call to complete before starting a new one."
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AgentLifecycleManager:

    def __init__(
        self,
        settings: Settings,
        guard: DispatchGuard,
        directory: PhoneDirectory,
        call_actions: CallActionPolicy,
        tracker: StatusTracker,
        supervisor: DispatchSupervisor,
        platform: AgentPlatform,
        telephony: TelephonyBridge,
        issuer: CredentialIssuer,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._settings = settings
        self._guard = guard
        self._directory = directory
        self._call_actions = call_actions
        self._tracker = tracker
        self._supervisor = supervisor
        self._platform = platform
        self._telephony = telephony
        self._issuer = issuer
        self._clock = clock

    async def dispatch_agent(
        self,
        specialization: Specialization,
        phone_number: str | None,
        fields: Mapping[str, object],
        channel: str,
        user_id: str,
    ) -> DispatchResult:
        missing = self._settings.missing_agent_config()
        if missing:
            return self._rejected(
                "Error: Specialized voice agents require additional "
                "configuration. Missing environment variables: "
                f"{', '.join(missing)}. Please set these variables and "
                "restart the server.",
                REASON_CONFIG, channel,
            )

        if not channel or not channel.strip():
            return self._rejected(
                "Error: Specialized voice agents need a conversation channel. "
                "Include a channel with the request and try again.",
                REASON_CHANNEL, channel,
            )

        invalid = validate_dispatch_fields(specialization, fields)
        if invalid:
            return self._rejected(invalid, REASON_FIELDS, channel)

        restaurant = str(fields["restaurant_name"]).strip()
        phone = self._resolve_phone(user_id, phone_number, restaurant)
        if phone is None:
            return self._rejected(
                f'Error: Could not find phone number for "{restaurant}" in '
                "recent searches. Please search for the restaurant first to "
                "get the correct phone number.",
                REASON_PHONE, channel,
            )

        if not self._guard.try_acquire(channel):
            return self._rejected(ALREADY_ACTIVE, REASON_ACTIVE, channel)
        logger.info(
            "Dispatch guarded",
            extra={
                "channel": channel, "specialization": specialization.value,
                "state": DispatchState.GUARDED.value,
            },
        )

        script = build_call_script(specialization, fields)
        return await self._supervisor.run(
            channel,
            lambda: self._provision_and_call(
                specialization, script, restaurant, phone, channel, user_id,
            ),
            specialization.value,
        )

    # -- Steps -----------------------------------------------------------------

    def _resolve_phone(
        self, user_id: str, phone_number: str | None, restaurant: str,
    ) -> str | None:
        if not needs_directory_lookup(phone_number):
            return phone_number.strip()
        found = self._directory.resolve(user_id, restaurant)
        if found:
            logger.info(f'Resolved phone for "{restaurant}" from directory')
        return found

    async def _provision_and_call(
        self,
        specialization: Specialization,
        script: CallScript,
        restaurant: str,
        phone: str,
        channel: str,
        user_id: str,
    ) -> DispatchResult:
        stamp = int(time.time() * 1000)
        session_channel = (
            f"specialized-{specialization.value}-{stamp}-{secrets.token_hex(3)}"
        )
        try:
            token = self._issuer.issue(session_channel, self._settings.task_agent_uid)
            agent_id = await self._platform.join(
                f"specialized-agent-{stamp}",
                build_agent_properties(self._settings, session_channel, token, script),
            )
        except AgentPlatformError as e:
            self._guard.release(channel)
            logger.error(
                f"Provisioning failed: {e.message}",
                extra={
                    "channel": channel, "error_code": e.code,
                    "state": DispatchState.PROVISION_FAILED.value,
                },
            )
            return DispatchResult(
                ok=False,
                message=f"Error creating {specialization.value} agent: {e.message}",
                state=DispatchState.PROVISION_FAILED,
                reason=REASON_PROVISION,
            )

        session = AgentSession(
            agent_id=agent_id,
            specialization=specialization,
            channel=channel,
            user_id=user_id,
            created_at=self._clock(),
            session_channel=session_channel,
        )
        self._tracker.record_session(session)
        logger.info(
            "Agent provisioned, placing call",
            extra={
                "channel": channel, "agent_id": agent_id,
                "state": DispatchState.CALLING.value,
            },
        )

        placement = await self._telephony.place(
            self._settings.agora_app_id, session_channel,
            self._destination(channel, phone),
        )
        if not placement.ok:
            self._guard.release(channel)
            logger.error(
                f"Call placement failed: {placement.detail}",
                extra={
                    "channel": channel, "agent_id": agent_id,
                    "error_code": placement.reason_code,
                    "state": DispatchState.CALL_FAILED.value,
                },
            )
            return DispatchResult(
                ok=False,
                message=self._call_failed_message(
                    specialization, session_channel, agent_id, phone,
                    placement.detail,
                ),
                state=DispatchState.CALL_FAILED,
                agent_id=agent_id,
                reason=placement.reason_code,
            )

        self._tracker.start_tracking(session)
        return DispatchResult(
            ok=True,
            message=dispatch_acknowledgment(specialization, restaurant, phone, script),
            state=DispatchState.ACTIVE,
            agent_id=agent_id,
        )

    def _destination(self, channel: str, business_phone: str) -> str:
        action = self._call_actions.get(channel)
        if action is CallAction.LIVE:
            return business_phone
        if action is CallAction.CALL_SID:
            return self._settings.sid_phone_number
        return self._settings.hermes_phone_number

    @staticmethod
    def _call_failed_message(
        specialization: Specialization, session_channel: str, agent_id: str,
        phone: str, detail: str,
    ) -> str:
        return (
            f"{specialization.value} agent created successfully, but phone "
            "call failed.\n\n"
            "Agent Details:\n"
            f"- Type: {specialization.value}\n"
            f"- Channel: {session_channel}\n"
            f"- Agent ID: {agent_id}\n"
            f"- Phone Number: {phone}\n\n"
            f"Phone Call Error: {detail}\n\n"
            f"You can try calling {phone} manually to complete the request."
        )

    @staticmethod
    def _rejected(message: str, reason: str, channel: str) -> DispatchResult:
        logger.info(
            f"Dispatch rejected: {reason}",
            extra={"channel": channel, "error_code": reason},
        )
        return DispatchResult(
            ok=False, message=message, state=DispatchState.IDLE, reason=reason,
        )
