"""In-process fakes for the boundary protocols.

Invariants:
    - Every fake records its calls so tests can assert "no remote call happened"
    - Behaviour is configured by plain attributes, not mock magic
"""

from callrelay.config import Settings
from callrelay.core.errors import AgentPlatformError
from callrelay.core.records import CallPlacement, CompletionResult, ToolCallRequest

AGENT_ENV = {
    "agora_app_id": "app-123",
    "agora_app_certificate": "cert-secret",
    "agora_customer_id": "customer",
    "agora_customer_secret": "secret",
    "agora_convo_ai_base_url": "https://agents.example.com/api/conversational-ai-agent/v2/projects",
    "agora_pstn_api_url": "https://pstn.example.com/v1/call",
    "agora_pstn_auth_header": "cHN0bjpzZWNyZXQ=",
    "agora_pstn_from_number": "+15550000000",
    "llm_url": "https://llm.example.com/v1/chat/completions",
    "llm_api_key": "llm-key",
    "tts_vendor": "elevenlabs",
    "elevenlabs_api_key": "el-key",
    "elevenlabs_model_id": "eleven_flash_v2_5",
    "elevenlabs_voice_id": "voice-1",
    "hermes_phone_number": "+15551110000",
    "sid_phone_number": "+15552220000",
    "api_auth_token": "",
    "yelp_api_key": "",
}


def make_settings(**overrides) -> Settings:
    """Settings with every dispatch prerequisite filled in."""
    return Settings(_env_file=None, **{**AGENT_ENV, **overrides})


def tool_call(name: str, arguments: str = "{}", call_id: str | None = None) -> ToolCallRequest:
    return ToolCallRequest(id=call_id or f"call_{name}", name=name, arguments=arguments)


class FakeCompletionClient:
    """Returns queued results in order; records every request."""

    def __init__(self, *results: CompletionResult):
        self.results = list(results)
        self.calls: list[dict] = []

    def queue(self, *results: CompletionResult) -> None:
        self.results.extend(results)

    async def complete(self, messages, tools=None, **params) -> CompletionResult:
        self.calls.append({
            "messages": [dict(m) for m in messages], "tools": tools, "params": params,
        })
        if not self.results:
            return CompletionResult(text="(no more results)")
        return self.results.pop(0)


class FakeAgentPlatform:

    def __init__(self):
        self.joined: list[tuple[str, dict]] = []
        self.history_calls: list[str] = []
        self.join_error: Exception | None = None
        self.history_result: dict | Exception = {
            "status": "RUNNING", "contents": [], "start_ts": 1_700_000_000,
        }
        self._next = 0

    async def join(self, name: str, properties: dict) -> str:
        self.joined.append((name, properties))
        if self.join_error is not None:
            raise self.join_error
        self._next += 1
        return f"agent-{self._next}"

    async def history(self, agent_id: str) -> dict:
        self.history_calls.append(agent_id)
        if isinstance(self.history_result, Exception):
            raise self.history_result
        return self.history_result


class FakeTelephony:

    def __init__(self, ok: bool = True):
        self.ok = ok
        self.calls: list[tuple[str, str, str]] = []

    async def place(self, app_id: str, session_id: str, destination: str) -> CallPlacement:
        self.calls.append((app_id, session_id, destination))
        if self.ok:
            return CallPlacement(
                ok=True, call_id="call-1",
                detail=(
                    f"Phone call initiated successfully to {destination} "
                    "from +15550000000. Call ID: call-1"
                ),
            )
        return CallPlacement(
            ok=False, reason_code="call_failed",
            detail=f"Failed to initiate phone call to {destination}. Reason: busy",
        )


class FakeIssuer:

    def __init__(self):
        self.issued: list[tuple[str, str]] = []

    def issue(self, session_id: str, uid: str) -> str:
        self.issued.append((session_id, uid))
        return f"token-{session_id}-{uid}"


def platform_down(message: str = "503 Service Unavailable - down") -> AgentPlatformError:
    return AgentPlatformError(message, status_code=503)
