"""ChatService: builds model conversations and records what calls cost."""

from typing import Protocol

from ..costs import CostRollup, GenerationCostFetcher, ModelPricing, calculate_cost
from ..encoding import encode_conversation, encode_conversation_for_synthesis
from ..llm import Completion, ILLMProvider
from ..logging_config import get_logger, log_context
from ..models import LLMMessage, MessageState
from ..storage import IStorage

logger = get_logger(__name__)


class ChatNotFoundError(LookupError):
    """Raised for an id that has no chat row."""


class IChatService(Protocol):
    """Conversation building and completion bookkeeping for one chat."""

    async def build_conversation(self, chat_id: str) -> list[LLMMessage]:
        ...

    async def build_synthesis_conversation(self, chat_id: str) -> list[LLMMessage]:
        ...

    async def record_usage(
        self,
        message_id: str,
        prompt_tokens: int,
        completion_tokens: int,
        pricing: ModelPricing | None,
        generation_id: str | None = None,
    ) -> float | None:
        ...

    async def complete_message(
        self,
        chat_id: str,
        message_id: str,
        pricing: ModelPricing | None = None,
        system: str | None = None,
    ) -> Completion:
        ...


class ChatService:
    """Glue between storage, encoding, the LLM and cost rollups."""

    def __init__(
        self,
        storage: IStorage,
        cost_rollup: CostRollup,
        llm_provider: ILLMProvider | None = None,
        cost_fetcher: GenerationCostFetcher | None = None,
    ):
        self._storage = storage
        self._cost_rollup = cost_rollup
        self._llm = llm_provider
        self._cost_fetcher = cost_fetcher

    async def _require_chat(self, chat_id: str) -> None:
        if await self._storage.get_chat(chat_id) is None:
            raise ChatNotFoundError(chat_id)

    async def build_conversation(self, chat_id: str) -> list[LLMMessage]:
        await self._require_chat(chat_id)
        message_sets = await self._storage.get_message_set_details(chat_id)
        return encode_conversation(message_sets)

    async def build_synthesis_conversation(self, chat_id: str) -> list[LLMMessage]:
        await self._require_chat(chat_id)
        message_sets = await self._storage.get_message_set_details(chat_id)
        return encode_conversation_for_synthesis(message_sets)

    async def _provider_cost(self, generation_id: str | None) -> float | None:
        if not generation_id or self._cost_fetcher is None:
            return None
        generation_cost = await self._cost_fetcher.fetch(generation_id)
        return generation_cost.total_cost_usd if generation_cost else None

    async def record_usage(
        self,
        message_id: str,
        prompt_tokens: int,
        completion_tokens: int,
        pricing: ModelPricing | None,
        generation_id: str | None = None,
    ) -> float | None:
        """Store usage on the message and roll its cost up in the background.

        The provider's reported cost for ``generation_id`` wins when it can be
        fetched; otherwise the cost is computed from ``pricing``. With neither
        the tokens are stored and the cost stays unknown.
        """
        cost_usd = await self._provider_cost(generation_id)
        if cost_usd is None and pricing is not None:
            cost_usd = calculate_cost(
                prompt_tokens,
                completion_tokens,
                pricing.prompt_price_per_token,
                pricing.completion_price_per_token,
            )

        await self._storage.record_message_usage(
            message_id, prompt_tokens, completion_tokens, cost_usd
        )

        message = await self._storage.get_message(message_id)
        if message is None:
            logger.warning(
                "Usage recorded for unknown message",
                extra=log_context(message_id=message_id),
            )
            return cost_usd

        self._cost_rollup.schedule(message.chat_id)
        return cost_usd

    async def complete_message(
        self,
        chat_id: str,
        message_id: str,
        pricing: ModelPricing | None = None,
        system: str | None = None,
    ) -> Completion:
        """Answer the conversation into an existing streaming message."""
        if self._llm is None:
            raise RuntimeError("LLM provider not configured")

        conversation = await self.build_conversation(chat_id)

        try:
            completion = await self._llm.complete(conversation, system=system)
        except Exception as e:
            logger.error(
                f"Completion failed: {e}",
                extra=log_context(chat_id=chat_id, message_id=message_id),
            )
            await self._storage.update_message(
                message_id, state=MessageState.IDLE, error_message=str(e)
            )
            raise

        await self._storage.update_message(
            message_id, text=completion.text, state=MessageState.IDLE
        )
        await self.record_usage(
            message_id, completion.prompt_tokens, completion.completion_tokens, pricing
        )
        logger.info(
            "Message completed",
            extra=log_context(
                chat_id=chat_id,
                message_id=message_id,
                prompt_tokens=completion.prompt_tokens,
                completion_tokens=completion.completion_tokens,
            ),
        )
        return completion
