"""Reviews module."""

from .reviews import (
    ACTIVE_REVIEWERS_ORDER,
    REVIEWERS,
    ParsedReview,
    ReviewDecision,
    ReviewerInfo,
    UnknownReviewerError,
    get_reviewer_provider,
    parse_review,
    sort_reviews,
)

__all__ = [
    "ACTIVE_REVIEWERS_ORDER",
    "REVIEWERS",
    "ParsedReview",
    "ReviewDecision",
    "ReviewerInfo",
    "UnknownReviewerError",
    "get_reviewer_provider",
    "parse_review",
    "sort_reviews",
]
