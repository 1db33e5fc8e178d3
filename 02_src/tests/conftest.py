"""Pytest configuration and fixtures."""

import itertools
import sys
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from multichat.models import (  # noqa: E402
    BlockType,
    BrainstormBlock,
    ChatBlock,
    CompareBlock,
    Message,
    MessageSetDetail,
    ToolsBlock,
    UserBlock,
)


@pytest_asyncio.fixture
async def storage():
    """Create in-memory storage for testing."""
    from multichat.storage import Storage

    st = Storage(":memory:")
    await st.init()
    yield st
    await st.close()


@pytest.fixture
def cost_rollup(storage):
    """CostRollup over in-memory storage, no retry delay."""
    from multichat.config import CostRollupSettings
    from multichat.costs import CostRollup

    return CostRollup(storage, CostRollupSettings(max_attempts=3, retry_delay=0))


@pytest.fixture
def make_message():
    """Factory for messages with sequential ids."""
    counter = itertools.count(1)

    def factory(text: str = "", block_type: str = "chat", **kwargs) -> Message:
        n = next(counter)
        kwargs.setdefault("id", f"msg{n}")
        kwargs.setdefault("chat_id", "chat1")
        kwargs.setdefault("message_set_id", "set1")
        kwargs.setdefault("model", "anthropic::claude")
        return Message(text=text, block_type=block_type, **kwargs)

    return factory


@pytest.fixture
def make_message_set():
    """Factory for message set details holding one populated block."""
    counter = itertools.count(1)

    def factory(block, **kwargs) -> MessageSetDetail:
        n = next(counter)
        block_type = kwargs.pop("selected_block_type", block.block_type.value)
        detail = MessageSetDetail(
            id=kwargs.pop("id", f"set{n}"),
            chat_id=kwargs.pop("chat_id", "chat1"),
            type="user" if block.block_type == BlockType.USER else "ai",
            level=0,
            selected_block_type=block_type,
        )
        if isinstance(block, UserBlock):
            detail.user_block = block
        elif isinstance(block, ChatBlock):
            detail.chat_block = block
        elif isinstance(block, CompareBlock):
            detail.compare_block = block
        elif isinstance(block, ToolsBlock):
            detail.tools_block = block
        elif isinstance(block, BrainstormBlock):
            detail.brainstorm_block = block
        return detail

    return factory


@pytest.fixture
def mock_llm():
    """Create mock LLM provider."""
    from multichat.llm import Completion

    llm = Mock()
    llm.complete = AsyncMock(
        return_value=Completion(
            text="Test response",
            prompt_tokens=1000,
            completion_tokens=500,
            model="claude-test",
        )
    )
    return llm
