"""Block model: the five shapes a message set can take."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import ClassVar, Literal, Union

from .messages import Message

# Model id stored on the merged answer of a compare block
SYNTHESIS_MODEL_ID = "multichat::synthesize"


class BlockType(str, Enum):
    """Discriminant of a block / message set."""

    USER = "user"
    CHAT = "chat"
    COMPARE = "compare"
    TOOLS = "tools"
    BRAINSTORM = "brainstorm"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    BlockType.USER: "User",
    BlockType.CHAT: "Reviews",
    BlockType.COMPARE: "Compare",
    BlockType.TOOLS: "Default",
    BlockType.BRAINSTORM: "Brainstorm",
}

SELECTABLE_BLOCK_TYPES: tuple[BlockType, ...] = (
    BlockType.TOOLS,
    BlockType.CHAT,
    BlockType.COMPARE,
)


def is_selectable_block_type(value: str) -> bool:
    """Whether the user can switch an AI message set to this shape."""
    return value in {b.value for b in SELECTABLE_BLOCK_TYPES}


@dataclass
class UserBlock:
    block_type: ClassVar[BlockType] = BlockType.USER

    message: Message | None = None


@dataclass
class ChatBlock:
    """An answer plus the reviewer messages that critique it."""

    block_type: ClassVar[BlockType] = BlockType.CHAT

    message: Message | None = None
    reviews: list[Message] = field(default_factory=list)


@dataclass
class CompareBlock:
    """Side-by-side candidates, optionally merged by a synthesis message."""

    block_type: ClassVar[BlockType] = BlockType.COMPARE

    messages: list[Message] = field(default_factory=list)
    synthesis: Message | None = None


@dataclass
class ToolsBlock:
    block_type: ClassVar[BlockType] = BlockType.TOOLS

    chat_messages: list[Message] = field(default_factory=list)


@dataclass
class BrainstormBlock:
    block_type: ClassVar[BlockType] = BlockType.BRAINSTORM

    idea_messages: list[Message] = field(default_factory=list)


Block = Union[UserBlock, ChatBlock, CompareBlock, ToolsBlock, BrainstormBlock]


@dataclass
class MessageSet:
    """One turn-slot in a conversation."""

    id: str
    chat_id: str
    type: Literal["user", "ai"]
    level: int
    selected_block_type: str  # a BlockType value; unknown values are tolerated on read
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class MessageSetDetail(MessageSet):
    """A message set with its blocks assembled from message rows.

    All five shapes are kept side by side rather than as one union value:
    ``selected_block_type`` picks the authoritative one, and the others stay
    readable for is_message_set_shape_empty() and for switching shapes.
    """

    user_block: UserBlock = field(default_factory=UserBlock)
    chat_block: ChatBlock = field(default_factory=ChatBlock)
    compare_block: CompareBlock = field(default_factory=CompareBlock)
    tools_block: ToolsBlock = field(default_factory=ToolsBlock)
    brainstorm_block: BrainstormBlock = field(default_factory=BrainstormBlock)

    def block(self, block_type: BlockType) -> Block:
        return {
            BlockType.USER: self.user_block,
            BlockType.CHAT: self.chat_block,
            BlockType.COMPARE: self.compare_block,
            BlockType.TOOLS: self.tools_block,
            BlockType.BRAINSTORM: self.brainstorm_block,
        }[block_type]

    @property
    def selected_block(self) -> Block | None:
        """The authoritative block, or None for an unknown shape."""
        try:
            return self.block(BlockType(self.selected_block_type))
        except ValueError:
            return None
