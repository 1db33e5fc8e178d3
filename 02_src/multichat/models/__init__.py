"""Core data models for multichat."""

from .blocks import (
    SELECTABLE_BLOCK_TYPES,
    SYNTHESIS_MODEL_ID,
    Block,
    BlockType,
    BrainstormBlock,
    ChatBlock,
    CompareBlock,
    MessageSet,
    MessageSetDetail,
    ToolsBlock,
    UserBlock,
    is_selectable_block_type,
)
from .chats import Chat, Project
from .messages import (
    Attachment,
    Message,
    MessagePart,
    MessageState,
    ReviewState,
    ToolCall,
    ToolResult,
    create_ai_message,
    create_user_message,
)
from .protocol import (
    AssistantLLMMessage,
    LLMMessage,
    ToolResultsLLMMessage,
    UserLLMMessage,
)

__all__ = [
    # Messages
    "Attachment",
    "Message",
    "MessagePart",
    "MessageState",
    "ReviewState",
    "ToolCall",
    "ToolResult",
    "create_ai_message",
    "create_user_message",
    # Blocks
    "Block",
    "BlockType",
    "BrainstormBlock",
    "ChatBlock",
    "CompareBlock",
    "MessageSet",
    "MessageSetDetail",
    "ToolsBlock",
    "UserBlock",
    "SELECTABLE_BLOCK_TYPES",
    "SYNTHESIS_MODEL_ID",
    "is_selectable_block_type",
    # Protocol
    "AssistantLLMMessage",
    "LLMMessage",
    "ToolResultsLLMMessage",
    "UserLLMMessage",
    # Chats
    "Chat",
    "Project",
]
