"""Protocol messages: the flat sequence sent to a language model."""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Union

from .messages import Attachment, ToolCall, ToolResult


@dataclass
class UserLLMMessage:
    role: ClassVar[str] = "user"

    content: str
    attachments: list[Attachment] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "role": self.role,
            "content": self.content,
            "attachments": [a.to_dict() for a in self.attachments],
        }


@dataclass
class AssistantLLMMessage:
    role: ClassVar[str] = "assistant"

    content: str
    tool_calls: list[ToolCall] = field(default_factory=list)
    model: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "role": self.role,
            "content": self.content,
            "tool_calls": [c.to_dict() for c in self.tool_calls],
        }
        if self.model is not None:
            data["model"] = self.model
        return data


@dataclass
class ToolResultsLLMMessage:
    role: ClassVar[str] = "tool_results"

    tool_results: list[ToolResult]

    def to_dict(self) -> dict[str, Any]:
        return {
            "role": self.role,
            "tool_results": [r.to_dict() for r in self.tool_results],
        }


LLMMessage = Union[UserLLMMessage, AssistantLLMMessage, ToolResultsLLMMessage]
