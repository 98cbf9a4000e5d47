"""
Duplicate Matcher

Finds statement transactions that were probably already logged by hand.

A candidate expense must pass ALL THREE gates:
- Date: within the date tolerance (2 days)
- Amount: within the amount tolerance (5 currency units)
- Description: at least one common word (2+ characters)

Surviving candidates are scored: more common words, closer date and closer
amount all score higher. The matcher only ranks. Whether a flagged
transaction really is a duplicate is decided by the household.

Each transaction is matched independently of all others, so
`match_transaction` can be fanned out per transaction for large imports.
"""

import re
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from reconciler.models.expense import DuplicateMatch, Expense, Transaction


# Swedish letters are part of the alphabet, not punctuation
_NON_WORD_CHARS = re.compile(r"[^a-zåäö0-9\s]")


class MatchPolicy(BaseModel):
    """
    Tolerances and score weights for the duplicate matcher.

    The defaults were tuned by hand against real statements.
    """
    model_config = ConfigDict(frozen=True)

    date_tolerance_days: int = Field(default=2, ge=0)
    amount_tolerance: Decimal = Field(default=Decimal("5"), ge=0)
    min_word_length: int = Field(default=2, ge=1)
    word_weight: int = Field(default=10, ge=0)
    date_weight: int = Field(default=3, ge=0)
    exact_amount_bonus: int = Field(default=10, ge=0)


DEFAULT_POLICY = MatchPolicy()


def extract_words(text: Optional[str], min_length: int = 2) -> list[str]:
    """
    Split a description into comparable words.

    Lower-cases, turns everything except a-z, å/ä/ö, digits and whitespace
    into spaces, and drops words shorter than `min_length`.
    """
    if not text:
        return []
    cleaned = _NON_WORD_CHARS.sub(" ", text.lower())
    return [word for word in cleaned.split() if len(word) >= min_length]


def days_between(first: date, second: date) -> int:
    """Absolute number of calendar days between two dates."""
    return abs((first - second).days)


def score_candidate(
    common_word_count: int,
    date_distance: int,
    amount_diff: Decimal,
    policy: MatchPolicy = DEFAULT_POLICY,
) -> Decimal:
    """
    Score one candidate that already passed all three gates.

    A candidate at the edge of both tolerances with a single common word
    scores exactly one word weight.
    """
    word_score = policy.word_weight * common_word_count
    date_score = policy.date_weight * (policy.date_tolerance_days - date_distance)
    if amount_diff == 0:
        amount_score = Decimal(policy.exact_amount_bonus)
    else:
        amount_score = policy.amount_tolerance - amount_diff
    return word_score + date_score + amount_score


def match_transaction(
    transaction: Transaction,
    expenses: Iterable[Expense],
    policy: MatchPolicy = DEFAULT_POLICY,
) -> list[DuplicateMatch]:
    """
    Rank the expenses that might duplicate one transaction.

    Returns candidates best first. Equal scores keep the order in which the
    expenses were given. A transaction without usable description words has
    no candidates.
    """
    tx_words = extract_words(transaction.description, policy.min_word_length)
    if not tx_words:
        return []

    matches: list[DuplicateMatch] = []

    for expense in expenses:
        date_distance = days_between(transaction.date, expense.date)
        if date_distance > policy.date_tolerance_days:
            continue

        amount_diff = abs(transaction.amount - expense.amount)
        if amount_diff > policy.amount_tolerance:
            continue

        expense_words = set(extract_words(expense.description, policy.min_word_length))
        common_words = [word for word in tx_words if word in expense_words]
        if not common_words:
            continue

        matches.append(DuplicateMatch(
            expense=expense,
            score=score_candidate(len(common_words), date_distance, amount_diff, policy),
            date_distance=date_distance,
            amount_diff=amount_diff,
            common_words=common_words,
        ))

    # sorted() is stable, ties keep expense order
    return sorted(matches, key=lambda match: match.score, reverse=True)


def find_duplicates(
    transactions: Iterable[Transaction],
    expenses: Sequence[Expense],
    policy: Optional[MatchPolicy] = None,
) -> dict[str, list[DuplicateMatch]]:
    """
    Find potential duplicates for statement transactions among existing expenses.

    Returns a dict from transaction ID to its candidates, best first.
    Only transactions with at least one candidate are included, in the order
    the transactions were given.
    """
    policy = policy or DEFAULT_POLICY
    result: dict[str, list[DuplicateMatch]] = {}

    for transaction in transactions:
        matches = match_transaction(transaction, expenses, policy)
        if matches:
            result[transaction.id] = matches

    return result


def best_matches(
    duplicates: dict[str, list[DuplicateMatch]],
) -> dict[str, DuplicateMatch]:
    """Top-ranked candidate per flagged transaction."""
    return {tx_id: matches[0] for tx_id, matches in duplicates.items() if matches}
