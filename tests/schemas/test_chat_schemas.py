"""Chat and agent-update schemas — wire aliases, bounds and response shape.

Invariants:
    - userId/appId accepted camelCase or snake_case
    - call_action restricted to CallAction values
    - message_dicts() drops None fields but keeps extra keys (tool_calls, name)
    - Pushed status is stripped; blank status rejected
"""

import pytest
from pydantic import ValidationError

from callrelay.core.domain_types import CallAction, UpdateKind
from callrelay.schemas.agent_updates import AgentUpdate
from callrelay.schemas.chat import ChatCompletionRequest, ChatCompletionResponse


# --- ChatCompletionRequest ----------------------------------------------------

def test_request_accepts_camel_and_snake_identity():
    camel = ChatCompletionRequest(
        messages=[{"role": "user", "content": "hi"}], userId="u1", appId="a1",
    )
    snake = ChatCompletionRequest(
        messages=[{"role": "user", "content": "hi"}], user_id="u1", app_id="a1",
    )
    assert camel.user_id == snake.user_id == "u1"
    assert camel.app_id == snake.app_id == "a1"


def test_request_requires_messages():
    with pytest.raises(ValidationError):
        ChatCompletionRequest(messages=[])


def test_call_action_must_be_known():
    req = ChatCompletionRequest(
        messages=[{"role": "user", "content": "hi"}], call_action="call_sid",
    )
    assert req.call_action is CallAction.CALL_SID
    with pytest.raises(ValidationError):
        ChatCompletionRequest(
            messages=[{"role": "user", "content": "hi"}], call_action="fax",
        )


def test_sampling_bounds_enforced():
    with pytest.raises(ValidationError):
        ChatCompletionRequest(messages=[{"role": "user", "content": "hi"}], temperature=3)
    with pytest.raises(ValidationError):
        ChatCompletionRequest(messages=[{"role": "user", "content": "hi"}], top_p=1.5)


def test_message_dicts_keep_extra_keys():
    req = ChatCompletionRequest(messages=[
        {"role": "assistant", "content": None, "tool_calls": [{"id": "x"}]},
        {"role": "tool", "content": "done", "tool_call_id": "x"},
    ])
    assert req.message_dicts() == [
        {"role": "assistant", "tool_calls": [{"id": "x"}]},
        {"role": "tool", "content": "done", "tool_call_id": "x"},
    ]


def test_response_from_text():
    resp = ChatCompletionResponse.from_text("Hello", "claude-sonnet-4-5")
    data = resp.model_dump()
    assert data["object"] == "chat.completion"
    assert data["choices"] == [{
        "index": 0,
        "message": {"role": "assistant", "content": "Hello"},
        "finish_reason": "stop",
    }]


# --- AgentUpdate --------------------------------------------------------------

def test_update_defaults_and_strip():
    update = AgentUpdate(channel="c1", agentId="agent-1", status="  ringing  ")
    assert update.kind is UpdateKind.UPDATE
    assert update.status == "ringing"


def test_update_rejects_blank_status_and_unknown_kind():
    with pytest.raises(ValidationError):
        AgentUpdate(channel="c1", agentId="agent-1", status="   ")
    with pytest.raises(ValidationError):
        AgentUpdate(channel="c1", agentId="agent-1", type="DONE", status="x")
