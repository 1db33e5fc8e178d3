"""LLM module."""

from .llm_provider import (
    Completion,
    ILLMProvider,
    LLMProvider,
    to_anthropic_messages,
    wire_tool_name,
)

__all__ = [
    "Completion",
    "ILLMProvider",
    "LLMProvider",
    "to_anthropic_messages",
    "wire_tool_name",
]
