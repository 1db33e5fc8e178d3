"""Brainstorm idea parsing and the brainstormer registry."""

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

_IDEA_RE = re.compile(r"<idea>(.*?)</idea>", re.DOTALL)
_ADVANTAGE_RE = re.compile(r"<advantage>(.*?)</advantage>", re.DOTALL)


@dataclass(frozen=True)
class Idea:
    idea: str
    advantage: str | None = None


@dataclass(frozen=True)
class BrainstormerInfo:
    long_name: str
    provider: str


class UnknownBrainstormerError(KeyError):
    """Raised when a model id is not a registered brainstormer."""


BRAINSTORMERS: Mapping[str, BrainstormerInfo] = MappingProxyType(
    {
        "brainstormer::wild": BrainstormerInfo(
            long_name="Wild ideas", provider="anthropic"
        ),
        "brainstormer::practical": BrainstormerInfo(
            long_name="Practical ideas", provider="openai"
        ),
        "brainstormer::contrarian": BrainstormerInfo(
            long_name="Contrarian ideas", provider="google"
        ),
    }
)


def parse_idea_message(text: str) -> list[Idea]:
    """Extract every complete ``<idea>`` element from a brainstormer message."""
    ideas = []
    for match in _IDEA_RE.finditer(text):
        body = match.group(1)
        advantage_match = _ADVANTAGE_RE.search(body)
        advantage = advantage_match.group(1).strip() if advantage_match else None
        idea_text = _ADVANTAGE_RE.sub("", body).strip()
        if idea_text:
            ideas.append(Idea(idea=idea_text, advantage=advantage or None))
    return ideas


def get_brainstormer_provider(
    model: str, brainstormers: Mapping[str, BrainstormerInfo] = BRAINSTORMERS
) -> str:
    if model not in brainstormers:
        raise UnknownBrainstormerError(f"Unknown brainstormer model: {model}")
    return brainstormers[model].provider
