"""Cost accounting module."""

from .pricing import (
    NO_COST_PLACEHOLDER,
    ModelPricing,
    calculate_cost,
    format_cost,
    format_token_usage,
)
from .provider import GenerationCost, GenerationCostFetcher
from .rollup import CostRollup

__all__ = [
    "NO_COST_PLACEHOLDER",
    "CostRollup",
    "GenerationCost",
    "GenerationCostFetcher",
    "ModelPricing",
    "calculate_cost",
    "format_cost",
    "format_token_usage",
]
