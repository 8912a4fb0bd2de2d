"""Conversational Agent Client — REST adapter for provisioning agents and reading their history.

Invariants:
    - join() returns a non-empty agent_id or raises AgentPlatformError
    - history() raises AgentNotFoundError on 404, AgentPlatformError on any other failure
    - A 2xx body that is not a JSON object is an AgentPlatformError, never a decode error
    - Each call has its own bounded timeout (provision ~30s, history ~10s)
    - Basic auth with customer id/secret on every request

Design Decisions:
    - One httpx.AsyncClient per call: calls are rare (one per dispatch/status check),
      and an injectable transport makes the client testable with httpx.MockTransport
    - Errors raised, not stringified: the service layer owns the model-facing wording
"""

import logging

import httpx

from callrelay.core.errors import (
    AgentNotFoundError, AgentPlatformError, ErrorContext,
)

logger = logging.getLogger(__name__)

_HISTORY_SEGMENT = "/api/conversational-ai-agent/"


def history_base_url(base_url: str) -> str:
    """The history API lives under a different path prefix than join."""
    if _HISTORY_SEGMENT in base_url:
        return base_url
    return base_url.replace("/v2/projects", "/api/conversational-ai-agent/v2/projects")


def _json_object(response: httpx.Response, ctx: ErrorContext) -> dict:
    """Decoded 2xx body; anything but a JSON object is a platform failure."""
    try:
        data = response.json()
    except ValueError:
        data = None
    if not isinstance(data, dict):
        raise AgentPlatformError(
            f"Agent platform returned an unreadable response ({response.status_code})",
            status_code=response.status_code, context=ctx,
        )
    return data


class ConversationalAgentClient:
    """httpx client for the conversational-agent platform."""

    def __init__(
        self,
        base_url: str,
        app_id: str,
        customer_id: str,
        customer_secret: str,
        provision_timeout: float = 30.0,
        status_timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.app_id = app_id
        self._auth = httpx.BasicAuth(customer_id, customer_secret)
        self.provision_timeout = provision_timeout
        self.status_timeout = status_timeout
        self._transport = transport

    async def join(self, name: str, properties: dict) -> str:
        """Provision an agent. Returns its agent_id."""
        url = f"{self.base_url}/{self.app_id}/join"
        ctx = ErrorContext(debug_info={"url": url})
        try:
            async with self._client(self.provision_timeout) as client:
                response = await client.post(
                    url, json={"name": name, "properties": properties},
                )
        except httpx.TimeoutException:
            raise AgentPlatformError(
                f"Request timed out after {self.provision_timeout:g} seconds. "
                "Please check your network connection and try again.",
                timed_out=True, context=ctx,
            )
        except httpx.HTTPError as e:
            raise AgentPlatformError(
                "Network connection failed. Please check if the conversational "
                f"AI service is accessible and try again. ({e})",
                context=ctx,
            )

        if response.is_error:
            logger.error(
                "Agent creation failed",
                extra={"error_code": str(response.status_code)},
            )
            raise AgentPlatformError(
                f"{response.status_code} {response.reason_phrase} - {response.text}",
                status_code=response.status_code, context=ctx,
            )
        agent_id = _json_object(response, ctx).get("agent_id")
        if not agent_id:
            raise AgentPlatformError(
                "Agent platform response did not include an agent_id",
                status_code=response.status_code, context=ctx,
            )
        logger.info("Agent provisioned", extra={"agent_id": agent_id})
        return agent_id

    async def history(self, agent_id: str) -> dict:
        """Conversation history: {status, contents: [{role, content}], start_ts}."""
        url = f"{history_base_url(self.base_url)}/{self.app_id}/agents/{agent_id}/history"
        ctx = ErrorContext(agent_id=agent_id, debug_info={"url": url})
        try:
            async with self._client(self.status_timeout) as client:
                response = await client.get(url)
        except httpx.TimeoutException:
            raise AgentPlatformError(
                f"Request timed out while checking agent {agent_id} status. "
                "Please try again.",
                timed_out=True, context=ctx,
            )
        except httpx.HTTPError as e:
            raise AgentPlatformError(str(e), context=ctx)

        if response.status_code == 404:
            raise AgentNotFoundError(agent_id, context=ctx)
        if response.is_error:
            raise AgentPlatformError(
                f"{response.status_code} {response.reason_phrase}",
                status_code=response.status_code, context=ctx,
            )
        return _json_object(response, ctx)

    def _client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            auth=self._auth, timeout=timeout, transport=self._transport,
        )
