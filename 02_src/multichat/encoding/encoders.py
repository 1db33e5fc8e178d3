"""Per-block encoders.

Each encoder turns one block into zero or more protocol messages. They are
pure: blocks are never mutated, and missing data yields an empty list rather
than an error, so an answer that has not arrived yet simply contributes
nothing. User and brainstorm blocks always emit exactly one message.
"""

from typing import Callable

from ..logging_config import get_logger, log_context
from ..models import (
    AssistantLLMMessage,
    BrainstormBlock,
    ChatBlock,
    CompareBlock,
    LLMMessage,
    ReviewState,
    ToolResult,
    ToolResultsLLMMessage,
    ToolsBlock,
    UserBlock,
    UserLLMMessage,
)
from ..prompts import TOOL_CALL_INTERRUPTED_MESSAGE
from ..reviews import ParsedReview, parse_review

logger = get_logger(__name__)

ReviewParser = Callable[[str, bool], ParsedReview]


def encode_user_block(block: UserBlock) -> list[LLMMessage]:
    """Always exactly one user message, so turn order survives empty input."""
    message = block.message
    return [
        UserLLMMessage(
            content=message.text if message else "",
            attachments=list(message.attachments or []) if message else [],
        )
    ]


def applied_revision(
    block: ChatBlock, review_parser: ReviewParser = parse_review
) -> str | None:
    """Revision text of the first applied review, if it has one."""
    for review in block.reviews:
        if review.review_state == ReviewState.APPLIED:
            return review_parser(review.text, True).revision or None
    return None


def resolve_chat_block_text(
    block: ChatBlock, review_parser: ReviewParser = parse_review
) -> str | None:
    """Text shown for the block's answer: an applied revision wins."""
    if block.message is None:
        return None
    return applied_revision(block, review_parser) or block.message.text


def encode_chat_block(
    block: ChatBlock, review_parser: ReviewParser = parse_review
) -> list[LLMMessage]:
    # An applied revision replaces the answer; the UI still shows both.
    revision = applied_revision(block, review_parser)
    if revision:
        return [AssistantLLMMessage(content=revision)]

    if block.message is None:
        return []

    return [AssistantLLMMessage(content=block.message.text, model=block.message.model)]


def encode_compare_block(block: CompareBlock) -> list[LLMMessage]:
    if block.synthesis is not None and block.synthesis.selected:
        return [AssistantLLMMessage(content=block.synthesis.text)]

    selected = [m for m in block.messages if m.selected]
    if not selected:
        return []
    if len(selected) == 1:
        return [AssistantLLMMessage(content=selected[0].text)]

    # Joined candidates lose their model attribution.
    return [AssistantLLMMessage(content="\n\n".join(m.text for m in selected))]


def encode_brainstorm_block(block: BrainstormBlock) -> list[LLMMessage]:
    """Always exactly one message; no ideas gives empty content."""
    return [
        AssistantLLMMessage(
            content="\n".join(f"<idea>{m.text}</idea>" for m in block.idea_messages)
        )
    ]


def encode_tools_block(block: ToolsBlock) -> list[LLMMessage]:
    """Replay the selected message's parts as a tool-use transcript."""
    selected = next((m for m in block.chat_messages if m.selected), None)
    if selected is None or not selected.parts:
        return []

    result: list[LLMMessage] = []
    for index, part in enumerate(selected.parts):
        if part.tool_results is not None:
            if not part.tool_results:
                logger.warning(
                    "Tool results part without results, skipping",
                    extra=log_context(message_id=selected.id, part_index=index),
                )
                continue
            result.append(ToolResultsLLMMessage(tool_results=list(part.tool_results)))
        else:
            result.append(
                AssistantLLMMessage(
                    content=part.content,
                    model=selected.model,
                    tool_calls=list(part.tool_calls or []),
                )
            )

    # The exchange stopped before its tool calls were answered. Close them
    # off so the conversation never ends on a dangling tool call.
    last_part = selected.parts[-1]
    if last_part.tool_calls:
        result.append(
            ToolResultsLLMMessage(
                tool_results=[
                    ToolResult(
                        id=call.id,
                        namespaced_tool_name=call.namespaced_tool_name,
                        content=TOOL_CALL_INTERRUPTED_MESSAGE,
                    )
                    for call in last_part.tool_calls
                ]
            )
        )

    return result
