"""Message-related data models."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class MessageState(str, Enum):
    """Lifecycle of a message.

    ``idle`` covers natural completion, a user-initiated stop and a timeout.
    """

    STREAMING = "streaming"
    IDLE = "idle"


class ReviewState(str, Enum):
    """Outcome of a reviewer message."""

    PENDING = "pending"
    APPLIED = "applied"


@dataclass
class Attachment:
    """A file, image or web page attached to a user message."""

    id: str
    type: str  # "image", "pdf", "text", "webpage"
    original_name: str
    path: str
    ephemeral: bool = False  # e.g. a live screen capture

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "original_name": self.original_name,
            "path": self.path,
            "ephemeral": self.ephemeral,
        }


@dataclass
class ToolCall:
    """A tool invocation issued by the assistant."""

    id: str
    namespaced_tool_name: str  # "<toolset>.<tool>"
    args: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "namespaced_tool_name": self.namespaced_tool_name,
            "args": self.args,
        }


@dataclass
class ToolResult:
    """The result returned to the assistant for one tool call."""

    id: str
    namespaced_tool_name: str
    content: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "namespaced_tool_name": self.namespaced_tool_name,
            "content": self.content,
        }


@dataclass
class MessagePart:
    """One increment of a (possibly multi-turn) assistant message.

    Carries text, tool calls the assistant issued, or tool results returned
    to it. Parts are kept in chronological order.
    """

    chat_id: str
    message_id: str
    level: int
    content: str = ""
    tool_calls: list[ToolCall] | None = None
    tool_results: list[ToolResult] | None = None


@dataclass
class Message:
    """One candidate utterance inside a block."""

    id: str
    chat_id: str
    message_set_id: str
    block_type: str
    text: str
    model: str
    selected: bool = False
    attachments: list[Attachment] | None = None
    is_review: bool = False
    state: MessageState = MessageState.IDLE
    streaming_token: str | None = None  # which stream is updating this message
    error_message: str | None = None
    review_state: ReviewState | None = None
    level: int | None = None
    parts: list[MessagePart] = field(default_factory=list)
    reply_chat_id: str | None = None
    branched_from_id: str | None = None
    # Token usage and cost
    prompt_tokens: int | None = None
    completion_tokens: int | None = None
    total_tokens: int | None = None
    cost_usd: float | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_streaming(self) -> bool:
        return self.state == MessageState.STREAMING


def create_ai_message(
    chat_id: str,
    message_set_id: str,
    block_type: str,
    model: str,
    selected: bool = False,
    is_review: bool = False,
    level: int | None = None,
    message_id: str | None = None,
) -> Message:
    """New assistant message, streaming with empty text."""
    return Message(
        id=message_id or str(uuid.uuid4()),
        chat_id=chat_id,
        message_set_id=message_set_id,
        block_type=block_type,
        text="",
        model=model,
        selected=selected,
        is_review=is_review,
        state=MessageState.STREAMING,
        streaming_token=str(uuid.uuid4()),
        level=level,
    )


def create_user_message(
    chat_id: str,
    message_set_id: str,
    text: str,
    attachments: list[Attachment] | None = None,
    message_id: str | None = None,
) -> Message:
    """New user message. User messages are always selected and idle."""
    return Message(
        id=message_id or str(uuid.uuid4()),
        chat_id=chat_id,
        message_set_id=message_set_id,
        block_type="user",
        text=text,
        model="user",
        selected=True,
        attachments=attachments,
        state=MessageState.IDLE,
    )
