"""Reviewer output parsing and the reviewer registry."""

import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping

from ..models import Message


class ReviewDecision(str, Enum):
    AGREE = "AGREE"
    DISAGREE = "DISAGREE"
    INFO = "INFO"


@dataclass(frozen=True)
class ParsedReview:
    """Decision/explanation/revision triple extracted from a review."""

    decision: ReviewDecision | None = None
    explanation: str | None = None
    revision: str | None = None


@dataclass(frozen=True)
class ReviewerInfo:
    long_name: str
    provider: str


class UnknownReviewerError(KeyError):
    """Raised when a model id is not a registered reviewer."""


REVIEWERS: Mapping[str, ReviewerInfo] = MappingProxyType(
    {
        "reviewer::critic": ReviewerInfo(
            long_name="Critic (finds flaws in reasoning)", provider="anthropic"
        ),
        "reviewer::fact-checker": ReviewerInfo(
            long_name="Fact checker (verifies claims)", provider="openai"
        ),
        "reviewer::editor": ReviewerInfo(
            long_name="Editor (tightens wording)", provider="google"
        ),
    }
)

ACTIVE_REVIEWERS_ORDER: tuple[str, ...] = (
    "reviewer::critic",
    "reviewer::fact-checker",
    "reviewer::editor",
)


def _extract(text: str, tag: str, is_final: bool) -> str | None:
    closed = re.search(rf"<{tag}>(.*?)</{tag}>", text, re.DOTALL)
    if closed:
        return closed.group(1).strip()
    if is_final:
        return None
    # Still streaming: an opened element yields what has arrived so far
    opened = re.search(rf"<{tag}>(.*)$", text, re.DOTALL)
    if opened:
        partial = opened.group(1).strip()
        return partial or None
    return None


def parse_review(text: str, is_final: bool) -> ParsedReview:
    """Parse reviewer output.

    While the review is streaming (``is_final=False``) any field may be
    missing or partial; that is expected and not an error.
    """
    raw_decision = _extract(text, "decision", is_final)
    decision = None
    if raw_decision is not None:
        try:
            decision = ReviewDecision(raw_decision.upper())
        except ValueError:
            decision = None

    return ParsedReview(
        decision=decision,
        explanation=_extract(text, "explanation", is_final),
        revision=_extract(text, "revision", is_final),
    )


def get_reviewer_provider(
    model: str, reviewers: Mapping[str, ReviewerInfo] = REVIEWERS
) -> str:
    if model not in reviewers:
        raise UnknownReviewerError(f"Unknown reviewer model: {model}")
    return reviewers[model].provider


def sort_reviews(
    reviews: Iterable[Message], order: tuple[str, ...] = ACTIVE_REVIEWERS_ORDER
) -> list[Message]:
    """Display order for reviews; unlisted reviewers go last."""

    def rank(message: Message) -> int:
        try:
            return order.index(message.model)
        except ValueError:
            return len(order)

    return sorted(reviews, key=rank)
