"""Tests for the duplicate matcher."""

import pytest
from datetime import date, timedelta
from decimal import Decimal

from reconciler.matching import (
    MatchPolicy,
    best_matches,
    days_between,
    extract_words,
    find_duplicates,
    match_transaction,
    score_candidate,
)
from reconciler.models.expense import Expense, Transaction


BASE_DATE = date(2025, 3, 10)


def make_tx(tx_id="tx-1", days=0, amount="100", description="ICA Maxi"):
    return Transaction(
        id=tx_id,
        date=BASE_DATE + timedelta(days=days),
        amount=Decimal(amount),
        description=description,
    )


def make_expense(expense_id="exp-1", days=0, amount="100", description="ICA Maxi"):
    return Expense(
        id=expense_id,
        date=BASE_DATE + timedelta(days=days),
        amount=Decimal(amount),
        description=description,
        owner="user-1",
    )


class TestExtractWords:
    """Tests for description tokenization."""

    def test_lowercases_and_splits(self):
        assert extract_words("ICA Maxi Stormarknad") == ["ica", "maxi", "stormarknad"]

    def test_keeps_swedish_letters(self):
        """Test that å, ä and ö are letters, not punctuation."""
        assert extract_words("ÅÄÖ-Butiken: Köpt 2st") == ["åäö", "butiken", "köpt", "2st"]

    def test_other_characters_become_separators(self):
        """Test that characters outside the alphabet split words."""
        assert extract_words("Café*Åhléns 24/7") == ["caf", "åhl", "ns", "24"]

    def test_drops_short_words(self):
        assert extract_words("a b Coop x 7") == ["coop"]

    def test_empty_and_missing(self):
        assert extract_words(None) == []
        assert extract_words("") == []
        assert extract_words("  !!  ") == []

    def test_custom_min_length(self):
        assert extract_words("ab abc abcd", min_length=4) == ["abcd"]


class TestScoring:
    """Tests for day distance and candidate scoring."""

    def test_days_between_is_absolute(self):
        assert days_between(date(2025, 3, 10), date(2025, 3, 12)) == 2
        assert days_between(date(2025, 3, 12), date(2025, 3, 10)) == 2
        assert days_between(date(2025, 2, 28), date(2025, 3, 1)) == 1

    def test_best_possible_single_word_score(self):
        """Test exact date and amount: 10 per word + 6 + 10."""
        assert score_candidate(1, 0, Decimal("0")) == Decimal("26")

    def test_edge_of_tolerances_scores_word_weight_only(self):
        assert score_candidate(1, 2, Decimal("5")) == Decimal("10")

    def test_fractional_amount_difference(self):
        assert score_candidate(1, 0, Decimal("2.50")) == Decimal("18.50")


class TestFindDuplicates:
    """Tests for find_duplicates."""

    def test_exact_duplicate(self):
        """Test the same purchase on the same day with the same amount."""
        result = find_duplicates([make_tx()], [make_expense()])

        assert list(result) == ["tx-1"]
        match = result["tx-1"][0]
        assert match.expense.id == "exp-1"
        assert match.date_distance == 0
        assert match.amount_diff == Decimal("0")
        assert match.common_words == ["ica", "maxi"]
        assert match.score == Decimal("36")

    def test_threshold_boundary_matches(self):
        """Test 2 days apart, 5 units apart and one common word still match."""
        tx = make_tx(amount="105", description="ICA Maxi")
        expense = make_expense(days=2, amount="100", description="ica")

        result = find_duplicates([tx], [expense])

        assert "tx-1" in result
        match = result["tx-1"][0]
        assert match.date_distance == 2
        assert match.amount_diff == Decimal("5")
        assert match.common_words == ["ica"]
        assert match.score == Decimal("10")

    def test_three_days_apart_does_not_match(self):
        tx = make_tx(amount="105")
        expense = make_expense(days=3, amount="100", description="ica")
        assert find_duplicates([tx], [expense]) == {}

    def test_earlier_expense_within_tolerance_matches(self):
        tx = make_tx()
        expense = make_expense(days=-2)
        assert "tx-1" in find_duplicates([tx], [expense])

    def test_six_units_apart_does_not_match(self):
        tx = make_tx(amount="106")
        expense = make_expense(days=2, amount="100", description="ica")
        assert find_duplicates([tx], [expense]) == {}

    def test_no_common_word_does_not_match(self):
        tx = make_tx(description="Willys")
        expense = make_expense(description="ICA Maxi")
        assert find_duplicates([tx], [expense]) == {}

    def test_expense_without_description_does_not_match(self):
        expense = make_expense(description=None)
        assert find_duplicates([make_tx()], [expense]) == {}

    def test_signed_amounts_are_compared_as_given(self):
        """Test that a negative statement amount is not matched to a positive expense."""
        tx = make_tx(amount="-100")
        assert find_duplicates([tx], [make_expense()]) == {}

    def test_transactions_without_words_are_skipped(self):
        """Test missing, empty and too-short descriptions."""
        transactions = [
            make_tx("tx-none", description=None),
            make_tx("tx-empty", description=""),
            make_tx("tx-short", description="a b"),
        ]
        expenses = [make_expense(description="a b ICA")]
        assert find_duplicates(transactions, expenses) == {}

    def test_ranking_best_first(self):
        """Test more words, closer date and amount rank strictly higher."""
        weak = make_expense("exp-weak", days=2, amount="105", description="ICA")
        strong = make_expense("exp-strong", days=0, amount="100", description="ICA Maxi")

        result = find_duplicates([make_tx()], [weak, strong])

        ranked = [match.expense.id for match in result["tx-1"]]
        assert ranked == ["exp-strong", "exp-weak"]
        assert result["tx-1"][0].score > result["tx-1"][1].score

    def test_ties_keep_expense_order(self):
        first = make_expense("exp-a")
        second = make_expense("exp-b")
        third = make_expense("exp-c")

        result = find_duplicates([make_tx()], [first, second, third])

        assert [m.expense.id for m in result["tx-1"]] == ["exp-a", "exp-b", "exp-c"]

    def test_repeated_transaction_words_count_each_time(self):
        tx = make_tx(description="Systembolaget systembolaget")
        expense = make_expense(description="Systembolaget")

        match = find_duplicates([tx], [expense])["tx-1"][0]

        assert match.common_words == ["systembolaget", "systembolaget"]
        assert match.score == Decimal("36")

    def test_only_matched_transactions_in_result(self):
        transactions = [
            make_tx("tx-1"),
            make_tx("tx-2", description="Spotify"),
            make_tx("tx-3", amount="99"),
        ]
        result = find_duplicates(transactions, [make_expense()])
        assert list(result) == ["tx-1", "tx-3"]

    def test_one_expense_can_match_many_transactions(self):
        """Test that the matcher ranks only and does not consume expenses."""
        transactions = [make_tx("tx-1"), make_tx("tx-2", days=1)]
        result = find_duplicates(transactions, [make_expense()])
        assert set(result) == {"tx-1", "tx-2"}

    def test_idempotent(self):
        transactions = [make_tx("tx-1"), make_tx("tx-2", days=1, amount="102")]
        expenses = [
            make_expense("exp-1"),
            make_expense("exp-2", days=2, description="Maxi"),
        ]

        first = find_duplicates(transactions, expenses)
        second = find_duplicates(transactions, expenses)

        assert first == second

    def test_custom_policy(self):
        """Test that tolerances come from the policy."""
        policy = MatchPolicy(date_tolerance_days=3)
        tx = make_tx()
        expense = make_expense(days=3, description="ICA")

        assert find_duplicates([tx], [expense]) == {}
        match = find_duplicates([tx], [expense], policy)["tx-1"][0]
        assert match.score == Decimal("20")

    def test_match_transaction_directly(self):
        matches = match_transaction(make_tx(), [make_expense(), make_expense("exp-2", days=5)])
        assert [m.expense.id for m in matches] == ["exp-1"]


class TestBestMatches:
    """Tests for best_matches."""

    def test_picks_head_of_each_list(self):
        weak = make_expense("exp-weak", days=2, amount="105", description="ICA")
        strong = make_expense("exp-strong")
        duplicates = find_duplicates([make_tx()], [weak, strong])

        best = best_matches(duplicates)

        assert best["tx-1"].expense.id == "exp-strong"

    def test_empty(self):
        assert best_matches({}) == {}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
