"""HTTP routes — health, chat completion, pushed updates and dispatch outcomes.

Tests cover:
    - Health probe
    - Chat completion returns an OpenAI-shaped body on both paths
    - call_action is stored for the channel before the turn
    - Unknown version → 404, invalid body → 400, malformed tool arguments → 400
    - Bearer token enforced when configured
    - Pushed updates and dispatch outcome lookup, including an in-flight dispatch
    - Non-ASCII bearer tokens are rejected with 403
"""

import asyncio
from datetime import datetime, timezone

from callrelay.config import get_settings
from callrelay.core.domain_types import CallAction, DispatchState, Specialization
from callrelay.core.records import AgentSession, CompletionResult, DispatchResult

from tests.fakes import make_settings, tool_call

USER_MESSAGE = {"role": "user", "content": "Order 2 bean burritos from Joe's"}


def _body(**extra):
    return {"messages": [USER_MESSAGE], "channel": "c1", "userId": "u1", **extra}


async def test_health(client):
    response = await client.get("/api/v1/health/")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_chat_completion_shape(client, completion):
    completion.queue(CompletionResult(text="What would you like?"))
    response = await client.post("/api/v1/chat/completions", json=_body(model="voice-llm"))

    assert response.status_code == 200
    data = response.json()
    assert data["object"] == "chat.completion"
    assert data["id"].startswith("chatcmpl-")
    assert data["model"] == "voice-llm"
    assert data["choices"][0]["message"] == {
        "role": "assistant", "content": "What would you like?",
    }
    assert data["choices"][0]["finish_reason"] == "stop"


async def test_singular_path_and_call_action_stored(client, completion, container):
    completion.queue(CompletionResult(text="ok"))
    response = await client.post(
        "/api/v2/chat/completion", json=_body(call_action="live"),
    )
    assert response.status_code == 200
    assert container.call_actions.get("c1") is CallAction.LIVE


async def test_unknown_version_is_404(client, completion):
    response = await client.post("/api/v9/chat/completions", json=_body())
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "UNSUPPORTED_VERSION"
    assert completion.calls == []


async def test_invalid_body_is_400(client):
    response = await client.post("/api/v1/chat/completions", json={"messages": []})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    response = await client.post(
        "/api/v1/chat/completions", json=_body(call_action="teleport"),
    )
    assert response.status_code == 400


async def test_malformed_tool_arguments_is_400(client, completion):
    completion.queue(CompletionResult(tool_calls=[
        tool_call("place_phone_order_agent", '{"restaurant_name": '),
    ]))
    response = await client.post("/api/v1/chat/completions", json=_body())
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "TOOL_ARGUMENTS_INVALID"


async def test_bearer_token_enforced(api_app, client, completion):
    api_app.dependency_overrides[get_settings] = lambda: make_settings(
        api_auth_token="s3cret",
    )
    completion.queue(CompletionResult(text="ok"))

    denied = await client.post("/api/v1/chat/completions", json=_body())
    assert denied.status_code == 403
    assert denied.json()["error"]["code"] == "AUTHENTICATION_FAILED"

    wrong = await client.post(
        "/api/v1/chat/completions", json=_body(),
        headers={"Authorization": "Bearer nope"},
    )
    assert wrong.status_code == 403

    allowed = await client.post(
        "/api/v1/chat/completions", json=_body(),
        headers={"Authorization": "Bearer s3cret"},
    )
    assert allowed.status_code == 200


async def test_non_ascii_token_is_rejected_not_crashed(api_app, client):
    api_app.dependency_overrides[get_settings] = lambda: make_settings(
        api_auth_token="s3cret",
    )
    response = await client.post(
        "/api/v1/chat/completions", json=_body(),
        headers={"Authorization": "Bearer s\xe9cret".encode("latin-1")},
    )
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "AUTHENTICATION_FAILED"


async def test_dispatch_turn_and_outcome(client, completion, container, telephony):
    container.directory.record_results(
        "u1", [{"id": "joes", "name": "Joe's", "phone": "+15551234567"}],
    )
    completion.queue(
        CompletionResult(tool_calls=[tool_call(
            "place_phone_order_agent",
            '{"restaurant_name": "Joe\'s", "customer_name": "Maria Lopez", '
            '"food_items": "2 bean burritos", "delivery_type": "pickup"}',
        )]),
        CompletionResult(text="Calling Joe's for you now."),
    )

    response = await client.post("/api/v1/chat/completions", json=_body())
    assert response.json()["choices"][0]["message"]["content"] == "Calling Joe's for you now."
    assert len(telephony.calls) == 1

    outcome = await client.get("/api/v1/agents/c1/dispatch")
    assert outcome.status_code == 200
    data = outcome.json()
    assert data["state"] == "active"
    assert data["ok"] is True
    assert data["agent_id"] == "agent-1"


async def test_dispatch_outcome_reports_in_flight_dispatch(client, container):
    gate = asyncio.Event()

    async def work():
        await gate.wait()
        return DispatchResult(
            ok=True, message="ok", state=DispatchState.ACTIVE, agent_id="agent-7",
        )

    container.guard.try_acquire("c7")
    running = asyncio.create_task(container.supervisor.run("c7", work))
    await asyncio.sleep(0)

    pending = (await client.get("/api/v1/agents/c7/dispatch")).json()
    assert pending["in_progress"] is True
    assert pending["state"] == "guarded"
    assert pending["finished_at"] is None

    gate.set()
    await running
    done = (await client.get("/api/v1/agents/c7/dispatch")).json()
    assert done["in_progress"] is False
    assert done["state"] == "active"
    assert done["agent_id"] == "agent-7"


async def test_dispatch_outcome_missing_is_404(client):
    response = await client.get("/api/v1/agents/nowhere/dispatch")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_pushed_updates(client, container):
    untracked = await client.post("/api/v1/agents/updates", json={
        "channel": "c1", "agentId": "agent-unknown", "type": "UPDATE", "status": "hello",
    })
    assert untracked.status_code == 200
    assert untracked.json() == {"significant": False}

    container.guard.try_acquire("c1")
    session = AgentSession(
        agent_id="agent-1", specialization=Specialization.ORDER,
        channel="c1", user_id="u1", created_at=datetime.now(timezone.utc),
    )
    container.tracker.record_session(session)
    container.tracker.start_tracking(session)

    done = await client.post("/api/v1/agents/updates", json={
        "channel": "c1", "agentId": "agent-1", "type": "COMPLETED",
        "status": "Order confirmed, total is $18",
    })
    assert done.json() == {"significant": True}
    assert not container.guard.is_held("c1")


async def test_blank_update_status_rejected(client):
    response = await client.post("/api/v1/agents/updates", json={
        "channel": "c1", "agentId": "agent-1", "status": "   ",
    })
    assert response.status_code == 400
