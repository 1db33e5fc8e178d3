"""Brainstorm module."""

from .ideas import (
    BRAINSTORMERS,
    BrainstormerInfo,
    Idea,
    UnknownBrainstormerError,
    get_brainstormer_provider,
    parse_idea_message,
)

__all__ = [
    "BRAINSTORMERS",
    "BrainstormerInfo",
    "Idea",
    "UnknownBrainstormerError",
    "get_brainstormer_provider",
    "parse_idea_message",
]
