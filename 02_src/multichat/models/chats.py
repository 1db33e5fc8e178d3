"""Chat and project records that carry cost totals."""

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class Project:
    """A folder of chats."""

    id: str
    name: str
    total_cost_usd: float | None = None


@dataclass
class Chat:
    """A conversation, optionally inside a project."""

    id: str
    title: str = ""
    project_id: str | None = None
    total_cost_usd: float | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
