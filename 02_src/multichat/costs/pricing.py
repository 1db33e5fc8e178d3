"""Per-call cost and its display formatting."""

from dataclasses import dataclass

NO_COST_PLACEHOLDER = "–"


@dataclass(frozen=True)
class ModelPricing:
    """USD price per token for one model."""

    prompt_price_per_token: float
    completion_price_per_token: float


def calculate_cost(
    prompt_tokens: int,
    completion_tokens: int,
    prompt_price_per_token: float,
    completion_price_per_token: float,
) -> float:
    """Cost in USD. Unrounded; callers pass non-negative values."""
    input_cost = prompt_tokens * prompt_price_per_token
    output_cost = completion_tokens * completion_price_per_token
    return input_cost + output_cost


def format_cost(cost_usd: float | None) -> str:
    """
    Format cost for display.

    Examples: "0.23¢", "$0.0123", "$0.5000", "$3.20".
    LLM calls often cost a fraction of a cent, which two-decimal dollars would
    show as "$0.00", so small amounts are shown in cents.
    """
    if cost_usd is None:
        return NO_COST_PLACEHOLDER
    if cost_usd == 0:
        return "$0.00"

    if cost_usd < 0.01:
        return f"{cost_usd * 100:.2f}¢"

    if cost_usd < 1.0:
        return f"${cost_usd:.4f}"

    return f"${cost_usd:.2f}"


def format_token_usage(prompt_tokens: int | None, completion_tokens: int | None) -> str:
    """"(1,200 → 350 tokens)", or "" when either count is unknown."""
    if not prompt_tokens or not completion_tokens:
        return ""
    return f"({prompt_tokens:,} → {completion_tokens:,} tokens)"
