"""Conversation encoding module."""

from .attachments import last_user_message_set_index, strip_ephemeral_attachments
from .conversation import (
    encode_conversation,
    encode_conversation_for_synthesis,
    encode_message_set,
    is_message_set_shape_empty,
    synthesis_request,
)
from .encoders import (
    applied_revision,
    encode_brainstorm_block,
    encode_chat_block,
    encode_compare_block,
    encode_tools_block,
    encode_user_block,
    resolve_chat_block_text,
)

__all__ = [
    "applied_revision",
    "encode_brainstorm_block",
    "encode_chat_block",
    "encode_compare_block",
    "encode_conversation",
    "encode_conversation_for_synthesis",
    "encode_message_set",
    "encode_tools_block",
    "encode_user_block",
    "is_message_set_shape_empty",
    "last_user_message_set_index",
    "resolve_chat_block_text",
    "strip_ephemeral_attachments",
    "synthesis_request",
]
