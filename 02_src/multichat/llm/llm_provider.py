"""LLM Provider implementation using Anthropic Claude API."""

import os
from dataclasses import dataclass
from typing import Any, Protocol, Sequence

import anthropic

from ..config import DEFAULT_ANTHROPIC_MODEL
from ..models import (
    AssistantLLMMessage,
    Attachment,
    LLMMessage,
    ToolResultsLLMMessage,
    UserLLMMessage,
)


@dataclass
class Completion:
    """Text and token usage of one model call."""

    text: str
    prompt_tokens: int
    completion_tokens: int
    model: str


class ILLMProvider(Protocol):
    """Abstraction for LLM access."""

    async def complete(
        self,
        conversation: Sequence[LLMMessage],
        system: str | None = None,
        max_tokens: int = 1024,
    ) -> Completion:
        """Generate completion."""
        ...


def wire_tool_name(namespaced_tool_name: str) -> str:
    """Anthropic tool names may not contain dots: "files.read" -> "files__read"."""
    return namespaced_tool_name.replace(".", "__")


def _attachment_block(attachment: Attachment) -> dict[str, Any]:
    if attachment.type == "image":
        return {"type": "image", "source": {"type": "url", "url": attachment.path}}
    if attachment.type == "pdf":
        return {"type": "document", "source": {"type": "url", "url": attachment.path}}
    return {
        "type": "text",
        "text": f'<attachment name="{attachment.original_name}" path="{attachment.path}" />',
    }


def _append_turn(
    converted: list[dict[str, Any]], role: str, content: list[dict[str, Any]]
) -> None:
    # Empty turns are rejected by the API; adjacent same-role turns are merged.
    if not content:
        return
    if converted and converted[-1]["role"] == role:
        converted[-1]["content"].extend(content)
    else:
        converted.append({"role": role, "content": content})


def to_anthropic_messages(conversation: Sequence[LLMMessage]) -> list[dict[str, Any]]:
    """Convert protocol messages to the Messages API format.

    Tool results travel as a user turn of ``tool_result`` blocks. Turns with
    no text, attachments or tool blocks (an errored answer, an empty user
    message) are dropped, and the turns around them merged.
    """
    converted: list[dict[str, Any]] = []

    for llm_message in conversation:
        if isinstance(llm_message, UserLLMMessage):
            content: list[dict[str, Any]] = [
                _attachment_block(a) for a in llm_message.attachments
            ]
            if llm_message.content:
                content.append({"type": "text", "text": llm_message.content})
            _append_turn(converted, "user", content)

        elif isinstance(llm_message, AssistantLLMMessage):
            content = []
            if llm_message.content:
                content.append({"type": "text", "text": llm_message.content})
            for call in llm_message.tool_calls:
                content.append(
                    {
                        "type": "tool_use",
                        "id": call.id,
                        "name": wire_tool_name(call.namespaced_tool_name),
                        "input": call.args,
                    }
                )
            _append_turn(converted, "assistant", content)

        elif isinstance(llm_message, ToolResultsLLMMessage):
            _append_turn(
                converted,
                "user",
                [
                    {
                        "type": "tool_result",
                        "tool_use_id": result.id,
                        "content": result.content,
                    }
                    for result in llm_message.tool_results
                ],
            )

    return converted


class LLMProvider:
    """Anthropic Claude API provider."""

    def __init__(self, api_key: str | None = None, model: str | None = None):
        self._api_key = api_key or os.getenv("ANTHROPIC_API_KEY")
        if not self._api_key:
            raise ValueError("ANTHROPIC_API_KEY environment variable not set")

        self._model = model or os.getenv("ANTHROPIC_MODEL", DEFAULT_ANTHROPIC_MODEL)
        self._client = anthropic.AsyncAnthropic(api_key=self._api_key)

    @property
    def model(self) -> str:
        return self._model

    async def complete(
        self,
        conversation: Sequence[LLMMessage],
        system: str | None = None,
        max_tokens: int = 1024,
    ) -> Completion:
        """Generate completion using Claude API."""
        kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": to_anthropic_messages(conversation),
            "max_tokens": max_tokens,
        }
        if system:
            kwargs["system"] = system

        try:
            response = await self._client.messages.create(**kwargs)
        except Exception as e:
            # Re-raise for handling by caller
            raise RuntimeError(f"LLM API error: {e}") from e

        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        return Completion(
            text=text,
            prompt_tokens=response.usage.input_tokens,
            completion_tokens=response.usage.output_tokens,
            model=self._model,
        )
