"""Ephemeral attachment filtering."""

from dataclasses import replace
from typing import Sequence

from ..models import BlockType, LLMMessage, MessageSet, UserLLMMessage


def last_user_message_set_index(message_sets: Sequence[MessageSet]) -> int:
    """Index of the last user-shaped message set, or -1 if there is none.

    The last message set is not always a user one: a multi-part tools answer
    may already have an AI message set after the latest user turn.
    """
    for index in range(len(message_sets) - 1, -1, -1):
        if message_sets[index].selected_block_type == BlockType.USER:
            return index
    return -1


def strip_ephemeral_attachments(
    llm_messages: list[LLMMessage], is_last_user_message_set: bool
) -> list[LLMMessage]:
    """Drop ephemeral attachments from user messages of older turns."""
    if is_last_user_message_set:
        return llm_messages

    stripped: list[LLMMessage] = []
    for llm_message in llm_messages:
        if isinstance(llm_message, UserLLMMessage):
            llm_message = replace(
                llm_message,
                attachments=[a for a in llm_message.attachments if not a.ephemeral],
            )
        stripped.append(llm_message)
    return stripped
