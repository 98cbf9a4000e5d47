"""Duplicate matching package."""

from reconciler.matching.duplicates import (
    DEFAULT_POLICY,
    MatchPolicy,
    best_matches,
    days_between,
    extract_words,
    find_duplicates,
    match_transaction,
    score_candidate,
)

__all__ = [
    "DEFAULT_POLICY",
    "MatchPolicy",
    "best_matches",
    "days_between",
    "extract_words",
    "find_duplicates",
    "match_transaction",
    "score_candidate",
]
