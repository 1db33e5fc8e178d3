"""Project-level configuration and path helpers."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DATA_DIR = PROJECT_ROOT / "03_data"
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_DB_PATH = DATA_DIR / "multichat.db"
DEFAULT_LOG_PATH = LOGS_DIR / "app.log"

DATA_DIR.mkdir(parents=True, exist_ok=True)
LOGS_DIR.mkdir(parents=True, exist_ok=True)

DEFAULT_ANTHROPIC_MODEL = "claude-3-5-sonnet-20241022"


PathLike = Union[str, Path]


def resolve_db_path(env_value: PathLike | None = None) -> PathLike:
    """Resolve DATABASE_URL to an absolute path."""
    if not env_value:
        return DEFAULT_DB_PATH

    if str(env_value) == ":memory:":
        return ":memory:"

    candidate = Path(env_value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


@dataclass(frozen=True)
class CostRollupSettings:
    """Retry policy for chat/project cost rollups."""

    max_attempts: int = 3
    retry_delay: float = 0.2  # seconds, multiplied by the attempt number


def load_cost_rollup_settings() -> CostRollupSettings:
    """Read COST_ROLLUP_* environment variables."""
    max_attempts = int(os.getenv("COST_ROLLUP_MAX_ATTEMPTS", "3"))
    retry_delay = float(os.getenv("COST_ROLLUP_RETRY_DELAY", "0.2"))

    if max_attempts < 1:
        raise ValueError("COST_ROLLUP_MAX_ATTEMPTS must be at least 1")
    if retry_delay < 0:
        raise ValueError("COST_ROLLUP_RETRY_DELAY must not be negative")

    return CostRollupSettings(max_attempts=max_attempts, retry_delay=retry_delay)
