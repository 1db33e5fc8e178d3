"""Application bootstrap and lifecycle management."""

import os
from typing import Protocol

from .chat import ChatService
from .config import load_cost_rollup_settings, resolve_db_path
from .costs import CostRollup, GenerationCostFetcher
from .llm import ILLMProvider, LLMProvider
from .logging_config import get_logger
from .storage import IStorage, Storage

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...

    async def reset(self) -> None:
        """Reset data between test runs."""
        ...

    @property
    def storage(self) -> IStorage:
        ...

    @property
    def cost_rollup(self) -> CostRollup:
        ...

    @property
    def chat_service(self) -> ChatService:
        ...


class Application:
    """Main application bootstrap."""

    def __init__(self, db_path: str | None = None):
        env_db_path = os.getenv("DATABASE_URL") if db_path is None else db_path
        self._db_path = resolve_db_path(env_db_path)

        # Components (will be initialized in start())
        self._storage: IStorage | None = None
        self._cost_rollup: CostRollup | None = None
        self._llm: ILLMProvider | None = None
        self._cost_fetcher: GenerationCostFetcher | None = None
        self._chat_service: ChatService | None = None

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting application")

        # 1. Storage (no dependencies)
        self._storage = Storage(self._db_path)
        await self._storage.init()
        logger.info("Storage initialized")

        # 2. CostRollup (depends on Storage)
        self._cost_rollup = CostRollup(self._storage, load_cost_rollup_settings())

        # 3. LLMProvider (optional: conversations and costs work without it)
        if os.getenv("ANTHROPIC_API_KEY"):
            self._llm = LLMProvider()
            logger.info("LLM provider initialized")
        else:
            logger.warning("ANTHROPIC_API_KEY not set, completions disabled")

        # 4. Provider cost lookup (optional: pricing tables are the fallback)
        if os.getenv("OPENROUTER_API_KEY"):
            self._cost_fetcher = GenerationCostFetcher()
            logger.info("Provider cost lookup initialized")

        # 5. ChatService (depends on Storage, CostRollup, LLM, cost lookup)
        self._chat_service = ChatService(
            self._storage, self._cost_rollup, self._llm, self._cost_fetcher
        )
        logger.info("All components initialized successfully")

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        if self._cost_fetcher:
            await self._cost_fetcher.aclose()
            self._cost_fetcher = None
        if self._cost_rollup:
            await self._cost_rollup.aclose()
        if self._storage:
            await self._storage.close()
            logger.info("Storage closed")

    async def reset(self) -> None:
        """Reset data between test runs."""
        if self._cost_rollup:
            await self._cost_rollup.aclose()
        if self._storage:
            await self._storage.clear()
            logger.info("Storage cleared")

    @property
    def storage(self) -> IStorage:
        """Get storage instance."""
        if not self._storage:
            raise RuntimeError("Application not started")
        return self._storage

    @property
    def cost_rollup(self) -> CostRollup:
        if not self._cost_rollup:
            raise RuntimeError("Application not started")
        return self._cost_rollup

    @property
    def chat_service(self) -> ChatService:
        if not self._chat_service:
            raise RuntimeError("Application not started")
        return self._chat_service
