"""Chat Schemas — request/response models for the chat completion routes.

Invariants:
    - messages is a non-empty list of {role, content, ...}; extra message keys pass through
    - userId/appId accepted in camelCase (wire) or snake_case (Python)
    - call_action, when present, must be a known CallAction value
    - The response is OpenAI chat.completion shaped

Design Decisions:
    - Optional identity fields: tools degrade gracefully without a channel
    - stream accepted but ignored: streaming is not supported
"""

import time
import uuid
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from callrelay.core.domain_types import CallAction


class ChatMessage(BaseModel):
    """One chat message. Unknown keys (tool_calls, name, ...) are preserved."""
    model_config = ConfigDict(extra="allow")

    role: Literal["system", "user", "assistant", "tool"]
    content: str | list | None = None


class ChatCompletionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    messages: list[ChatMessage] = Field(min_length=1)
    model: str | None = None
    stream: bool | None = None
    channel: str | None = None
    user_id: str | None = Field(None, alias="userId")
    app_id: str | None = Field(None, alias="appId")
    call_action: CallAction | None = None
    temperature: float | None = Field(None, ge=0.0, le=2.0)
    max_tokens: int | None = Field(None, gt=0)
    top_p: float | None = Field(None, ge=0.0, le=1.0)

    def message_dicts(self) -> list[dict]:
        return [m.model_dump(exclude_none=True) for m in self.messages]

    def completion_params(self) -> dict:
        return {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "top_p": self.top_p,
        }


class AssistantMessage(BaseModel):
    role: Literal["assistant"] = "assistant"
    content: str


class ChatChoice(BaseModel):
    index: int = 0
    message: AssistantMessage
    finish_reason: str = "stop"


class ChatCompletionResponse(BaseModel):
    id: str = Field(default_factory=lambda: f"chatcmpl-{uuid.uuid4().hex}")
    object: Literal["chat.completion"] = "chat.completion"
    created: int = Field(default_factory=lambda: int(time.time()))
    model: str
    choices: list[ChatChoice]

    @classmethod
    def from_text(cls, text: str, model: str) -> "ChatCompletionResponse":
        return cls(
            model=model,
            choices=[ChatChoice(message=AssistantMessage(content=text))],
        )
