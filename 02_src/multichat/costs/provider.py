"""Authoritative per-generation cost from OpenRouter."""

import os
from dataclasses import dataclass

import httpx

from ..logging_config import get_logger, log_context

logger = get_logger(__name__)

OPENROUTER_GENERATION_URL = "https://openrouter.ai/api/v1/generation"


@dataclass(frozen=True)
class GenerationCost:
    total_cost_usd: float
    prompt_tokens: int | None = None
    completion_tokens: int | None = None


class GenerationCostFetcher:
    """Looks up what a completed generation actually cost.

    Any failure degrades to ``None``: missing cost data must never fail the
    call that produced the message.
    """

    def __init__(
        self,
        api_key: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ):
        self._api_key = api_key or os.getenv("OPENROUTER_API_KEY")
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def fetch(self, generation_id: str) -> GenerationCost | None:
        if not self._api_key:
            logger.warning(
                "OPENROUTER_API_KEY not set, no cost data",
                extra=log_context(generation_id=generation_id),
            )
            return None

        try:
            response = await self._client.get(
                OPENROUTER_GENERATION_URL,
                params={"id": generation_id},
                headers={"Authorization": f"Bearer {self._api_key}"},
            )
            response.raise_for_status()
            data = response.json()["data"]
            return GenerationCost(
                total_cost_usd=float(data["total_cost"]),
                prompt_tokens=data.get("native_tokens_prompt"),
                completion_tokens=data.get("native_tokens_completion"),
            )
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as e:
            logger.warning(
                f"Failed to fetch generation cost: {e}",
                extra=log_context(generation_id=generation_id),
            )
            return None

    async def aclose(self) -> None:
        await self._client.aclose()
