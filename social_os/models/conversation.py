"""Conversation request/response models."""

from datetime import datetime
from typing import Any, Literal

from langchain_core.messages import AIMessage, BaseMessage, ToolMessage
from pydantic import BaseModel, Field

from social_os.models.actions import ActionResult, ExternalAction

_ROLES = {"human": "user", "ai": "assistant", "system": "system", "tool": "tool"}


class ConversationRequest(BaseModel):
    """Request model for conversation endpoint."""

    message: str | None = None
    session_id: str | None = None
    user_id: str | None = None
    user_name: str | None = None
    user_style: str | None = None
    actions: list[ExternalAction] = Field(default_factory=list)
    action_results: list[ActionResult] = Field(default_factory=list)


class ToolCallOut(BaseModel):
    """A tool call requested by the assistant."""

    id: str | None
    name: str
    args: dict[str, Any]


class MessageOut(BaseModel):
    """A conversation message as returned by the API."""

    role: Literal["user", "assistant", "system", "tool"]
    content: str | list[Any]
    tool_calls: list[ToolCallOut] = Field(default_factory=list)
    tool_call_id: str | None = None
    name: str | None = None
    is_error: bool = False

    @classmethod
    def from_message(cls, message: BaseMessage) -> "MessageOut":
        """Convert a LangChain message."""
        data: dict[str, Any] = {
            "role": _ROLES.get(message.type, "assistant"),
            "content": message.content,
            "name": message.name,
        }
        if isinstance(message, AIMessage):
            data["tool_calls"] = [
                ToolCallOut(id=tc["id"], name=tc["name"], args=tc["args"]) for tc in message.tool_calls
            ]
        if isinstance(message, ToolMessage):
            data["tool_call_id"] = message.tool_call_id
            data["is_error"] = message.status == "error"
        return cls(**data)


class ConversationResponse(BaseModel):
    """Response model for conversation endpoint."""

    response: str
    session_id: str
    messages: list[MessageOut] = Field(default_factory=list)
    pending_actions: list[ToolCallOut] = Field(default_factory=list)


class ConversationHistoryResponse(BaseModel):
    """Response model for the conversation history endpoint."""

    session_id: str
    messages: list[MessageOut]


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str
    timestamp: datetime
    version: str
