"""Service Container — builds the process-wide object graph from Settings.

Invariants:
    - One InMemoryKeyValueStore per process: every orchestration component shares it
    - Infrastructure clients are created once and reused across requests
    - get_container() is cached and overridable via FastAPI dependency_overrides

Design Decisions:
    - Plain constructor wiring over a DI framework: every dependency visible in one place
    - Search client only built when a key is configured; search tools follow the same flag
    - Single-instance assumption made explicit: state lives in this process only
      (ADR: no cross-instance coordination)
"""

from dataclasses import dataclass
from functools import lru_cache

from callrelay.config import Settings, get_settings
from callrelay.core.call_action_policy import CallActionPolicy
from callrelay.core.dispatch_guard import DispatchGuard
from callrelay.core.kv_store import InMemoryKeyValueStore, KeyValueStore
from callrelay.core.phone_directory import PhoneDirectory
from callrelay.infrastructure.agent_api import ConversationalAgentClient
from callrelay.infrastructure.anthropic_client import ResilientAnthropicClient
from callrelay.infrastructure.credentials import RtcCredentialIssuer
from callrelay.infrastructure.telephony import PstnTelephonyBridge
from callrelay.infrastructure.yelp_client import YelpSearchClient
from callrelay.services.agent_lifecycle import AgentLifecycleManager
from callrelay.services.chat_turn import ChatTurnService
from callrelay.services.dispatch_supervisor import DispatchSupervisor
from callrelay.services.handle_directory import DirectoryHandlers
from callrelay.services.handle_dispatch import DispatchHandlers
from callrelay.services.handle_status import StatusHandlers
from callrelay.services.handle_telephony import TelephonyHandlers
from callrelay.services.handler_registry import HandlerSet
from callrelay.services.status_tracker import StatusTracker
from callrelay.services.tool_dispatch import ToolCallDispatcher
from callrelay.services.tools_registry import TOOL_RESPONSE_TYPES


@dataclass
class ServiceContainer:
    settings: Settings
    store: KeyValueStore
    guard: DispatchGuard
    directory: PhoneDirectory
    call_actions: CallActionPolicy
    tracker: StatusTracker
    supervisor: DispatchSupervisor
    lifecycle: AgentLifecycleManager
    handlers: HandlerSet
    chat: ChatTurnService


def build_container(
    settings: Settings,
    *,
    store: KeyValueStore | None = None,
    completion_client=None,
    platform=None,
    telephony=None,
    search=None,
    issuer=None,
) -> ServiceContainer:
    """Wire every collaborator. Keyword overrides replace the real adapters (tests)."""
    store = store if store is not None else InMemoryKeyValueStore()
    guard = DispatchGuard(store)
    directory = PhoneDirectory(store)
    call_actions = CallActionPolicy(store, ttl_seconds=settings.call_action_ttl_seconds)

    issuer = issuer or RtcCredentialIssuer(
        settings.agora_app_id, settings.agora_app_certificate,
        ttl_seconds=settings.credential_ttl_seconds,
    )
    platform = platform or ConversationalAgentClient(
        settings.agora_convo_ai_base_url,
        settings.agora_app_id,
        settings.agora_customer_id,
        settings.agora_customer_secret,
        provision_timeout=settings.provision_timeout_seconds,
        status_timeout=settings.status_timeout_seconds,
    )
    telephony = telephony or PstnTelephonyBridge(
        settings.agora_pstn_api_url,
        settings.agora_pstn_auth_header,
        settings.agora_pstn_from_number,
        issuer,
        settings.pstn_uid,
        region=settings.agora_pstn_region,
        sip_gateway=settings.custom_sip_gateway,
        timeout=settings.provision_timeout_seconds,
    )
    if search is None and settings.search_enabled:
        search = YelpSearchClient(settings.yelp_api_key, settings.yelp_base_url)
    completion_client = completion_client or ResilientAnthropicClient(
        api_key=settings.anthropic_api_key,
        model=settings.agent_model,
        max_tokens=settings.completion_max_tokens,
        max_retries=settings.anthropic_max_retries,
        base_delay_ms=settings.anthropic_base_delay_ms,
        max_delay_ms=settings.anthropic_max_delay_ms,
        timeout_seconds=settings.anthropic_timeout_seconds,
    )

    tracker = StatusTracker(store, guard, platform)
    supervisor = DispatchSupervisor(store, guard)
    lifecycle = AgentLifecycleManager(
        settings, guard, directory, call_actions, tracker, supervisor,
        platform, telephony, issuer,
    )
    handlers = HandlerSet(
        dispatch=DispatchHandlers(lifecycle),
        status=StatusHandlers(tracker),
        directory=DirectoryHandlers(directory, tracker, search),
        telephony=TelephonyHandlers(settings, telephony),
    )
    chat = ChatTurnService(
        completion_client,
        ToolCallDispatcher(completion_client, TOOL_RESPONSE_TYPES),
        handlers,
        search_enabled=search is not None,
    )
    return ServiceContainer(
        settings=settings,
        store=store,
        guard=guard,
        directory=directory,
        call_actions=call_actions,
        tracker=tracker,
        supervisor=supervisor,
        lifecycle=lifecycle,
        handlers=handlers,
        chat=chat,
    )


@lru_cache
def get_container() -> ServiceContainer:
    return build_container(get_settings())
