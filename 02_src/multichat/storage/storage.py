"""SQLite storage implementation."""

import json
import uuid
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Protocol

import aiosqlite

from ..config import resolve_db_path
from ..logging_config import get_logger, log_context
from ..models import (
    SYNTHESIS_MODEL_ID,
    Attachment,
    BlockType,
    Chat,
    Message,
    MessagePart,
    MessageSet,
    MessageSetDetail,
    MessageState,
    Project,
    ReviewState,
    ToolCall,
    ToolResult,
)

logger = get_logger(__name__)

_MESSAGE_COLUMNS = """
    id, chat_id, message_set_id, block_type, text, model, selected, is_review,
    state, streaming_token, error_message, review_state, level, reply_chat_id,
    branched_from_id, prompt_tokens, completion_tokens, total_tokens, cost_usd,
    created_at
"""


class IStorage(Protocol):
    """Persistent storage for chats, message sets and cost totals (SQLite)."""

    async def init(self) -> None:
        """Initialize database and create tables."""
        ...

    async def close(self) -> None:
        """Close database connection."""
        ...

    # Projects / Chats
    async def save_project(self, project: Project) -> None:
        ...

    async def get_project(self, project_id: str) -> Project | None:
        ...

    async def save_chat(self, chat: Chat) -> None:
        ...

    async def get_chat(self, chat_id: str) -> Chat | None:
        ...

    async def get_project_id_for_chat(self, chat_id: str) -> str | None:
        """Project id of a chat without loading the chat."""
        ...

    # Message sets / Messages
    async def save_message_set(self, message_set: MessageSet) -> None:
        ...

    async def save_message(self, message: Message) -> None:
        """Insert a message with its parts and attachments."""
        ...

    async def update_message(
        self,
        message_id: str,
        *,
        text: str | None = None,
        state: MessageState | None = None,
        error_message: str | None = None,
        selected: bool | None = None,
        review_state: ReviewState | None = None,
    ) -> None:
        """Update the mutable fields of a message that are not None."""
        ...

    async def record_message_usage(
        self,
        message_id: str,
        prompt_tokens: int,
        completion_tokens: int,
        cost_usd: float | None,
    ) -> None:
        ...

    async def get_message(self, message_id: str) -> Message | None:
        ...

    async def get_message_set_details(self, chat_id: str) -> list[MessageSetDetail]:
        """Message sets of a chat in stored order, blocks assembled."""
        ...

    # Cost aggregation
    async def sum_chat_message_costs(self, chat_id: str) -> float:
        ...

    async def set_chat_total_cost(self, chat_id: str, total_cost_usd: float) -> None:
        ...

    async def sum_project_chat_costs(self, project_id: str) -> float:
        ...

    async def set_project_total_cost(self, project_id: str, total_cost_usd: float) -> None:
        ...

    # Lifecycle
    async def clear(self) -> None:
        """Clear all data."""
        ...


def _enum_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _to_db_timestamp(value: datetime) -> str:
    return value.isoformat()


def _from_db_timestamp(value: str) -> datetime:
    ts = datetime.fromisoformat(value)
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


def _dump_tool_calls(calls: list[ToolCall] | None) -> str | None:
    if calls is None:
        return None
    return json.dumps([c.to_dict() for c in calls])


def _dump_tool_results(results: list[ToolResult] | None) -> str | None:
    if results is None:
        return None
    return json.dumps([r.to_dict() for r in results])


def _load_tool_calls(raw: str | None) -> list[ToolCall] | None:
    if raw is None:
        return None
    return [ToolCall(**item) for item in json.loads(raw)]


def _load_tool_results(raw: str | None) -> list[ToolResult] | None:
    if raw is None:
        return None
    return [ToolResult(**item) for item in json.loads(raw)]


class Storage:
    """SQLite storage implementation."""

    def __init__(self, db_path: str | Path | None = None):
        if db_path is None:
            self._db_path = resolve_db_path()
        else:
            self._db_path = resolve_db_path(db_path)
        self._conn: aiosqlite.Connection | None = None

    async def init(self) -> None:
        """Initialize database and create tables."""
        self._conn = await aiosqlite.connect(self._db_path)

        schema_path = Path(__file__).parent / "schema.sql"
        with open(schema_path, "r", encoding="utf-8") as f:
            schema_sql = f.read()
        await self._conn.executescript(schema_sql)
        await self._conn.commit()

    async def close(self) -> None:
        """Close database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    def _require_conn(self) -> aiosqlite.Connection:
        if not self._conn:
            raise RuntimeError("Storage not initialized")
        return self._conn

    # Projects / Chats
    async def save_project(self, project: Project) -> None:
        """Save a project."""
        conn = self._require_conn()
        await conn.execute(
            """
            INSERT OR REPLACE INTO projects (id, name, total_cost_usd)
            VALUES (?, ?, ?)
            """,
            (project.id, project.name, project.total_cost_usd),
        )
        await conn.commit()

    async def get_project(self, project_id: str) -> Project | None:
        """Get a project by ID."""
        conn = self._require_conn()
        cursor = await conn.execute(
            "SELECT id, name, total_cost_usd FROM projects WHERE id = ?",
            (project_id,),
        )
        row = await cursor.fetchone()
        if not row:
            return None
        return Project(id=row[0], name=row[1], total_cost_usd=row[2])

    async def save_chat(self, chat: Chat) -> None:
        """Save a chat."""
        conn = self._require_conn()
        await conn.execute(
            """
            INSERT OR REPLACE INTO chats (id, project_id, title, total_cost_usd, created_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                chat.id,
                chat.project_id,
                chat.title,
                chat.total_cost_usd,
                _to_db_timestamp(chat.created_at),
            ),
        )
        await conn.commit()

    async def get_chat(self, chat_id: str) -> Chat | None:
        """Get a chat by ID."""
        conn = self._require_conn()
        cursor = await conn.execute(
            """
            SELECT id, project_id, title, total_cost_usd, created_at
            FROM chats
            WHERE id = ?
            """,
            (chat_id,),
        )
        row = await cursor.fetchone()
        if not row:
            return None
        return Chat(
            id=row[0],
            project_id=row[1],
            title=row[2],
            total_cost_usd=row[3],
            created_at=_from_db_timestamp(row[4]),
        )

    async def get_project_id_for_chat(self, chat_id: str) -> str | None:
        """Project id of a chat without loading the chat."""
        conn = self._require_conn()
        cursor = await conn.execute(
            "SELECT project_id FROM chats WHERE id = ?", (chat_id,)
        )
        row = await cursor.fetchone()
        return row[0] if row and row[0] else None

    # Message sets / Messages
    async def save_message_set(self, message_set: MessageSet) -> None:
        """Save a message set."""
        conn = self._require_conn()
        await conn.execute(
            """
            INSERT OR REPLACE INTO message_sets
            (id, chat_id, type, level, selected_block_type, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                message_set.id,
                message_set.chat_id,
                message_set.type,
                message_set.level,
                _enum_value(message_set.selected_block_type),
                _to_db_timestamp(message_set.created_at),
            ),
        )
        await conn.commit()

    async def save_message(self, message: Message) -> None:
        """Insert a message with its parts and attachments."""
        conn = self._require_conn()

        # Generate ID if not provided
        if not message.id:
            message.id = str(uuid.uuid4())

        await conn.execute(
            f"""
            INSERT INTO messages ({_MESSAGE_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                message.id,
                message.chat_id,
                message.message_set_id,
                _enum_value(message.block_type),
                message.text,
                message.model,
                int(message.selected),
                int(message.is_review),
                _enum_value(message.state),
                message.streaming_token,
                message.error_message,
                _enum_value(message.review_state),
                message.level,
                message.reply_chat_id,
                message.branched_from_id,
                message.prompt_tokens,
                message.completion_tokens,
                message.total_tokens,
                message.cost_usd,
                _to_db_timestamp(message.created_at),
            ),
        )

        for part in message.parts:
            await conn.execute(
                """
                INSERT INTO message_parts
                (message_id, chat_id, level, content, tool_calls, tool_results)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    message.id,
                    part.chat_id,
                    part.level,
                    part.content,
                    _dump_tool_calls(part.tool_calls),
                    _dump_tool_results(part.tool_results),
                ),
            )

        for position, attachment in enumerate(message.attachments or []):
            await conn.execute(
                """
                INSERT INTO attachments
                (id, message_id, type, original_name, path, ephemeral, position)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    attachment.id or str(uuid.uuid4()),
                    message.id,
                    attachment.type,
                    attachment.original_name,
                    attachment.path,
                    int(attachment.ephemeral),
                    position,
                ),
            )

        await conn.commit()

    async def update_message(
        self,
        message_id: str,
        *,
        text: str | None = None,
        state: MessageState | None = None,
        error_message: str | None = None,
        selected: bool | None = None,
        review_state: ReviewState | None = None,
    ) -> None:
        """Update the mutable fields of a message that are not None."""
        conn = self._require_conn()

        assignments = []
        params: list[Any] = []
        if text is not None:
            assignments.append("text = ?")
            params.append(text)
        if state is not None:
            assignments.append("state = ?")
            params.append(_enum_value(state))
            if state == MessageState.IDLE:
                assignments.append("streaming_token = NULL")
        if error_message is not None:
            assignments.append("error_message = ?")
            params.append(error_message)
        if selected is not None:
            assignments.append("selected = ?")
            params.append(int(selected))
        if review_state is not None:
            assignments.append("review_state = ?")
            params.append(_enum_value(review_state))

        if not assignments:
            return

        params.append(message_id)
        await conn.execute(
            f"UPDATE messages SET {', '.join(assignments)} WHERE id = ?", params
        )
        await conn.commit()

    async def record_message_usage(
        self,
        message_id: str,
        prompt_tokens: int,
        completion_tokens: int,
        cost_usd: float | None,
    ) -> None:
        """Store token counts and cost on a message."""
        conn = self._require_conn()
        await conn.execute(
            """
            UPDATE messages
            SET prompt_tokens = ?, completion_tokens = ?, total_tokens = ?, cost_usd = ?
            WHERE id = ?
            """,
            (
                prompt_tokens,
                completion_tokens,
                prompt_tokens + completion_tokens,
                cost_usd,
                message_id,
            ),
        )
        await conn.commit()

    async def get_message(self, message_id: str) -> Message | None:
        """Get a message with its parts and attachments."""
        conn = self._require_conn()
        cursor = await conn.execute(
            f"SELECT {_MESSAGE_COLUMNS} FROM messages WHERE id = ?", (message_id,)
        )
        row = await cursor.fetchone()
        if not row:
            return None
        return await self._hydrate_message(row)

    async def _hydrate_message(self, row: tuple) -> Message:
        conn = self._require_conn()

        part_cursor = await conn.execute(
            """
            SELECT chat_id, level, content, tool_calls, tool_results
            FROM message_parts
            WHERE message_id = ?
            ORDER BY level ASC
            """,
            (row[0],),
        )
        parts = [
            MessagePart(
                chat_id=part[0],
                message_id=row[0],
                level=part[1],
                content=part[2],
                tool_calls=_load_tool_calls(part[3]),
                tool_results=_load_tool_results(part[4]),
            )
            for part in await part_cursor.fetchall()
        ]

        att_cursor = await conn.execute(
            """
            SELECT id, type, original_name, path, ephemeral
            FROM attachments
            WHERE message_id = ?
            ORDER BY position ASC
            """,
            (row[0],),
        )
        att_rows = await att_cursor.fetchall()
        attachments = [
            Attachment(
                id=att[0],
                type=att[1],
                original_name=att[2],
                path=att[3],
                ephemeral=bool(att[4]),
            )
            for att in att_rows
        ]

        return Message(
            id=row[0],
            chat_id=row[1],
            message_set_id=row[2],
            block_type=row[3],
            text=row[4],
            model=row[5],
            selected=bool(row[6]),
            is_review=bool(row[7]),
            state=MessageState(row[8]),
            streaming_token=row[9],
            error_message=row[10],
            review_state=ReviewState(row[11]) if row[11] else None,
            level=row[12],
            reply_chat_id=row[13],
            branched_from_id=row[14],
            prompt_tokens=row[15],
            completion_tokens=row[16],
            total_tokens=row[17],
            cost_usd=row[18],
            created_at=_from_db_timestamp(row[19]),
            parts=parts,
            attachments=attachments or None,
        )

    async def get_message_set_details(self, chat_id: str) -> list[MessageSetDetail]:
        """Message sets of a chat in stored order, blocks assembled."""
        conn = self._require_conn()

        cursor = await conn.execute(
            """
            SELECT id, chat_id, type, level, selected_block_type, created_at
            FROM message_sets
            WHERE chat_id = ?
            ORDER BY created_at ASC, rowid ASC
            """,
            (chat_id,),
        )
        details = {
            row[0]: MessageSetDetail(
                id=row[0],
                chat_id=row[1],
                type=row[2],
                level=row[3],
                selected_block_type=row[4],
                created_at=_from_db_timestamp(row[5]),
            )
            for row in await cursor.fetchall()
        }

        msg_cursor = await conn.execute(
            f"""
            SELECT {_MESSAGE_COLUMNS}
            FROM messages
            WHERE chat_id = ?
            ORDER BY rowid ASC
            """,
            (chat_id,),
        )
        for row in await msg_cursor.fetchall():
            message = await self._hydrate_message(row)
            detail = details.get(message.message_set_id)
            if detail is None:
                logger.warning(
                    "Message without a message set",
                    extra=log_context(message_id=message.id, chat_id=chat_id),
                )
                continue
            self._place_message(detail, message)

        return list(details.values())

    @staticmethod
    def _place_message(detail: MessageSetDetail, message: Message) -> None:
        if message.block_type == BlockType.USER:
            detail.user_block.message = message
        elif message.block_type == BlockType.CHAT:
            if message.is_review:
                detail.chat_block.reviews.append(message)
            else:
                detail.chat_block.message = message
        elif message.block_type == BlockType.COMPARE:
            if message.model == SYNTHESIS_MODEL_ID:
                detail.compare_block.synthesis = message
            else:
                detail.compare_block.messages.append(message)
        elif message.block_type == BlockType.TOOLS:
            detail.tools_block.chat_messages.append(message)
        elif message.block_type == BlockType.BRAINSTORM:
            detail.brainstorm_block.idea_messages.append(message)
        else:
            logger.warning(
                "Message with unknown block type",
                extra=log_context(message_id=message.id, block_type=message.block_type),
            )

    # Cost aggregation
    async def sum_chat_message_costs(self, chat_id: str) -> float:
        """Sum of cost_usd over the chat's priced messages."""
        conn = self._require_conn()
        cursor = await conn.execute(
            """
            SELECT COALESCE(SUM(cost_usd), 0)
            FROM messages
            WHERE chat_id = ? AND cost_usd IS NOT NULL
            """,
            (chat_id,),
        )
        row = await cursor.fetchone()
        return float(row[0]) if row else 0.0

    async def set_chat_total_cost(self, chat_id: str, total_cost_usd: float) -> None:
        conn = self._require_conn()
        await conn.execute(
            "UPDATE chats SET total_cost_usd = ? WHERE id = ?",
            (total_cost_usd, chat_id),
        )
        await conn.commit()

    async def sum_project_chat_costs(self, project_id: str) -> float:
        """Sum of total_cost_usd over the project's chats that have one."""
        conn = self._require_conn()
        cursor = await conn.execute(
            """
            SELECT COALESCE(SUM(total_cost_usd), 0)
            FROM chats
            WHERE project_id = ? AND total_cost_usd IS NOT NULL
            """,
            (project_id,),
        )
        row = await cursor.fetchone()
        return float(row[0]) if row else 0.0

    async def set_project_total_cost(self, project_id: str, total_cost_usd: float) -> None:
        conn = self._require_conn()
        await conn.execute(
            "UPDATE projects SET total_cost_usd = ? WHERE id = ?",
            (total_cost_usd, project_id),
        )
        await conn.commit()

    # Lifecycle
    async def clear(self) -> None:
        """Clear all data."""
        conn = self._require_conn()

        tables = [
            "attachments",
            "message_parts",
            "messages",
            "message_sets",
            "chats",
            "projects",
        ]

        for table in tables:
            await conn.execute(f"DELETE FROM {table}")

        await conn.commit()
