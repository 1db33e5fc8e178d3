"""Conversation assembly: message sets in, protocol messages out."""

from typing import Sequence

from ..logging_config import get_logger, log_context
from ..models import (
    BlockType,
    CompareBlock,
    LLMMessage,
    MessageSetDetail,
    UserLLMMessage,
)
from ..prompts import SYNTHESIS_INTERJECTION
from ..reviews import parse_review
from .attachments import last_user_message_set_index, strip_ephemeral_attachments
from .encoders import (
    ReviewParser,
    encode_brainstorm_block,
    encode_chat_block,
    encode_compare_block,
    encode_tools_block,
    encode_user_block,
)

logger = get_logger(__name__)


def encode_message_set(
    message_set: MessageSetDetail, review_parser: ReviewParser = parse_review
) -> list[LLMMessage]:
    """Encode the selected block of one message set."""
    try:
        block_type = BlockType(message_set.selected_block_type)
    except ValueError:
        logger.warning(
            "Unknown block type, skipping message set",
            extra=log_context(
                message_set_id=message_set.id,
                block_type=message_set.selected_block_type,
            ),
        )
        return []

    if block_type == BlockType.USER:
        return encode_user_block(message_set.user_block)
    if block_type == BlockType.CHAT:
        return encode_chat_block(message_set.chat_block, review_parser)
    if block_type == BlockType.COMPARE:
        return encode_compare_block(message_set.compare_block)
    if block_type == BlockType.TOOLS:
        return encode_tools_block(message_set.tools_block)
    return encode_brainstorm_block(message_set.brainstorm_block)


def encode_conversation(
    message_sets: Sequence[MessageSetDetail],
    review_parser: ReviewParser = parse_review,
) -> list[LLMMessage]:
    """This is the conversation that will be sent to the LLM."""
    conversation: list[LLMMessage] = []
    last_user_index = last_user_message_set_index(message_sets)

    for index, message_set in enumerate(message_sets):
        conversation.extend(
            strip_ephemeral_attachments(
                encode_message_set(message_set, review_parser),
                is_last_user_message_set=index == last_user_index,
            )
        )

    return conversation


def synthesis_request(block: CompareBlock) -> UserLLMMessage:
    """User turn asking for a merge of every candidate, selected or not."""
    perspectives = "\n\n".join(
        f'<perspective sender="{message.model}">\n{message.text}\n</perspective>'
        for message in block.messages
    )
    return UserLLMMessage(content=f"{SYNTHESIS_INTERJECTION}\n\n{perspectives}")


def encode_conversation_for_synthesis(
    message_sets: Sequence[MessageSetDetail],
    review_parser: ReviewParser = parse_review,
) -> list[LLMMessage]:
    """Everything but the last message set, then a synthesis request for it."""
    if not message_sets:
        logger.warning("Synthesis requested for an empty conversation")
        return []

    *history, final = message_sets
    conversation = encode_conversation(history, review_parser)

    if not final.compare_block.messages:
        logger.warning(
            "No compare candidates to synthesize",
            extra=log_context(message_set_id=final.id),
        )
        return conversation

    conversation.append(synthesis_request(final.compare_block))
    return conversation


def is_message_set_shape_empty(detail: MessageSetDetail, block_type: str) -> bool:
    """Whether the given AI block of a message set has anything to show."""
    if block_type == BlockType.CHAT:
        return detail.chat_block.message is None and not detail.chat_block.reviews
    if block_type == BlockType.COMPARE:
        return not detail.compare_block.messages
    if block_type == BlockType.TOOLS:
        return not detail.tools_block.chat_messages
    if block_type == BlockType.BRAINSTORM:
        return not detail.brainstorm_block.idea_messages
    raise ValueError(f"Unexpected block type for is_message_set_shape_empty: {block_type}")
