"""Chat and project cost totals.

Totals are recomputed from their parts (read, aggregate, write) rather than
incremented, so late or repeated usage records and backfills always converge
on the right value. The cycle for one chat or project runs under a per-key
lock; different keys proceed in parallel.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, TypeVar

import aiosqlite

from ..config import CostRollupSettings
from ..logging_config import get_logger, log_context
from ..storage import IStorage

logger = get_logger(__name__)

T = TypeVar("T")


class CostRollup:
    """Recomputes stored chat and project cost totals."""

    def __init__(self, storage: IStorage, settings: CostRollupSettings | None = None):
        self._storage = storage
        self._settings = settings or CostRollupSettings()
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}
        self._pending: set[asyncio.Task] = set()

    def _lock_for(self, key: str) -> asyncio.Lock:
        return self._locks.setdefault(key, asyncio.Lock())

    @asynccontextmanager
    async def _locked(self, key: str) -> AsyncIterator[None]:
        # Locks live only while a rollup for the key holds or waits on them.
        lock = self._lock_for(key)
        self._lock_users[key] = self._lock_users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[key] -= 1
            if not self._lock_users[key]:
                del self._lock_users[key]
                del self._locks[key]

    async def _with_retry(self, operation: Callable[[], Awaitable[T]], **context) -> T:
        attempt = 1
        while True:
            try:
                return await operation()
            except aiosqlite.OperationalError as e:
                if attempt >= self._settings.max_attempts:
                    raise
                logger.warning(
                    f"Cost rollup failed (attempt {attempt}), retrying: {e}",
                    extra=log_context(**context),
                )
                await asyncio.sleep(self._settings.retry_delay * attempt)
                attempt += 1

    async def recompute_chat_cost(self, chat_id: str) -> float:
        """Store the sum of the chat's priced messages as its total."""

        async def cycle() -> float:
            total = await self._storage.sum_chat_message_costs(chat_id)
            await self._storage.set_chat_total_cost(chat_id, total)
            return total

        async with self._locked(f"chat:{chat_id}"):
            return await self._with_retry(cycle, chat_id=chat_id)

    async def recompute_project_cost(self, project_id: str) -> float:
        """Store the sum of the project's chat totals as its total."""

        async def cycle() -> float:
            total = await self._storage.sum_project_chat_costs(project_id)
            await self._storage.set_project_total_cost(project_id, total)
            return total

        async with self._locked(f"project:{project_id}"):
            return await self._with_retry(cycle, project_id=project_id)

    async def recompute_chat_and_project_cost(self, chat_id: str) -> str | None:
        """Recompute a chat, then its project. Returns the project id, if any."""
        await self.recompute_chat_cost(chat_id)

        project_id = await self._storage.get_project_id_for_chat(chat_id)
        if project_id:
            await self.recompute_project_cost(project_id)

        return project_id

    def schedule(self, chat_id: str) -> asyncio.Task:
        """Run the chat/project rollup in the background."""
        task = asyncio.create_task(self._run_scheduled(chat_id))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _run_scheduled(self, chat_id: str) -> None:
        try:
            await self.recompute_chat_and_project_cost(chat_id)
        except aiosqlite.Error:
            logger.exception(
                "Cost rollup gave up", extra=log_context(chat_id=chat_id)
            )

    async def aclose(self) -> None:
        """Wait for scheduled rollups to finish."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
