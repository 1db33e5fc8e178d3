"""Tests for data models."""

from datetime import datetime

import pytest

from multichat.models import (
    SELECTABLE_BLOCK_TYPES,
    AssistantLLMMessage,
    Attachment,
    BlockType,
    ChatBlock,
    CompareBlock,
    MessageSetDetail,
    MessageState,
    ToolCall,
    ToolResult,
    ToolResultsLLMMessage,
    UserLLMMessage,
    create_ai_message,
    create_user_message,
    is_selectable_block_type,
)


class TestBlockType:
    """Tests for BlockType."""

    @pytest.mark.parametrize(
        "block_type,name",
        [
            (BlockType.USER, "User"),
            (BlockType.CHAT, "Reviews"),
            (BlockType.COMPARE, "Compare"),
            (BlockType.TOOLS, "Default"),
            (BlockType.BRAINSTORM, "Brainstorm"),
        ],
    )
    def test_display_name(self, block_type, name):
        assert block_type.display_name == name

    def test_selectable_block_types(self):
        """Test that user and brainstorm shapes cannot be chosen."""
        assert SELECTABLE_BLOCK_TYPES == (BlockType.TOOLS, BlockType.CHAT, BlockType.COMPARE)
        assert is_selectable_block_type("chat") is True
        assert is_selectable_block_type("brainstorm") is False
        assert is_selectable_block_type("user") is False
        assert is_selectable_block_type("canvas") is False

    def test_string_comparison(self):
        assert BlockType.CHAT == "chat"


class TestMessageFactories:
    """Tests for create_ai_message() and create_user_message()."""

    def test_create_ai_message(self):
        """Test that a new AI message is streaming with empty text."""
        msg = create_ai_message("chat1", "set1", "compare", "openai::gpt-4o")

        assert msg.id
        assert msg.text == ""
        assert msg.state == MessageState.STREAMING
        assert msg.is_streaming is True
        assert msg.streaming_token
        assert msg.selected is False
        assert isinstance(msg.created_at, datetime)

    def test_ai_messages_get_distinct_ids(self):
        first = create_ai_message("chat1", "set1", "chat", "m")
        second = create_ai_message("chat1", "set1", "chat", "m")

        assert first.id != second.id
        assert first.streaming_token != second.streaming_token

    def test_create_user_message(self):
        """Test that user messages are selected and idle."""
        attachment = Attachment(id="a", type="pdf", original_name="d.pdf", path="/d.pdf")
        msg = create_user_message("chat1", "set1", "Hello", [attachment], message_id="u1")

        assert msg.id == "u1"
        assert msg.block_type == "user"
        assert msg.selected is True
        assert msg.state == MessageState.IDLE
        assert msg.is_streaming is False
        assert msg.attachments == [attachment]


class TestMessageSetDetail:
    """Tests for MessageSetDetail."""

    def _detail(self, selected_block_type):
        return MessageSetDetail(
            id="set1",
            chat_id="chat1",
            type="ai",
            level=0,
            selected_block_type=selected_block_type,
        )

    def test_blocks_default_to_empty(self):
        detail = self._detail("chat")

        assert detail.chat_block == ChatBlock()
        assert detail.compare_block == CompareBlock()
        assert detail.user_block.message is None

    def test_block_lookup(self):
        detail = self._detail("chat")

        assert detail.block(BlockType.COMPARE) is detail.compare_block
        assert detail.block(BlockType.TOOLS) is detail.tools_block

    def test_selected_block(self):
        """Test that selected_block follows selected_block_type."""
        detail = self._detail("brainstorm")

        assert detail.selected_block is detail.brainstorm_block

    def test_selected_block_unknown(self):
        """Test that an unknown shape has no selected block."""
        assert self._detail("canvas").selected_block is None


class TestProtocolMessages:
    """Tests for protocol message serialization."""

    def test_user_to_dict(self):
        attachment = Attachment(id="a", type="image", original_name="a.png", path="/a.png")
        msg = UserLLMMessage(content="Hi", attachments=[attachment])

        assert msg.role == "user"
        assert msg.to_dict() == {
            "role": "user",
            "content": "Hi",
            "attachments": [
                {
                    "id": "a",
                    "type": "image",
                    "original_name": "a.png",
                    "path": "/a.png",
                    "ephemeral": False,
                }
            ],
        }

    def test_assistant_to_dict(self):
        """Test that the model key is present only when set."""
        plain = AssistantLLMMessage(content="A")
        attributed = AssistantLLMMessage(
            content="B",
            tool_calls=[ToolCall(id="1", namespaced_tool_name="x.y")],
            model="m",
        )

        assert plain.to_dict() == {"role": "assistant", "content": "A", "tool_calls": []}
        assert attributed.to_dict() == {
            "role": "assistant",
            "content": "B",
            "tool_calls": [{"id": "1", "namespaced_tool_name": "x.y", "args": {}}],
            "model": "m",
        }

    def test_tool_results_to_dict(self):
        msg = ToolResultsLLMMessage(
            tool_results=[ToolResult(id="1", namespaced_tool_name="x.y", content="ok")]
        )

        assert msg.to_dict() == {
            "role": "tool_results",
            "tool_results": [{"id": "1", "namespaced_tool_name": "x.y", "content": "ok"}],
        }
