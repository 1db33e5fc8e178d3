"""Human-readable names for the model ids stored on messages."""

from dataclasses import dataclass
from typing import Iterable, Mapping

from .brainstorm import BRAINSTORMERS, BrainstormerInfo
from .reviews import REVIEWERS, ReviewerInfo

UNKNOWN_SENDER = "Unknown sender"
_LEGACY_PROVIDER = "unknown_provider"
_LEGACY_MODEL = "unknown_model"


@dataclass(frozen=True)
class ModelConfig:
    id: str
    display_name: str


def get_message_model_name(model: str, model_configs: Iterable[ModelConfig]) -> str:
    """Display name for the ``model`` value of a message row.

    Older rows may hold ``unknown_provider::unknown_model::<name>`` instead of
    a configured model id.
    """
    for config in model_configs:
        if config.id == model:
            return config.display_name

    pieces = model.split("::")
    if len(pieces) == 3 and pieces[0] == _LEGACY_PROVIDER and pieces[1] == _LEGACY_MODEL:
        return pieces[2]

    return UNKNOWN_SENDER


def get_reviewer_long_name(
    model: str,
    model_configs: Iterable[ModelConfig],
    reviewers: Mapping[str, ReviewerInfo] = REVIEWERS,
) -> str:
    if model in reviewers:
        return reviewers[model].long_name
    return get_message_model_name(model, model_configs)


def get_brainstormer_long_name(
    model: str,
    model_configs: Iterable[ModelConfig],
    brainstormers: Mapping[str, BrainstormerInfo] = BRAINSTORMERS,
) -> str:
    if model in brainstormers:
        return brainstormers[model].long_name
    return get_message_model_name(model, model_configs)
