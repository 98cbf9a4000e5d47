"""Tests for the cost split calculator."""

import pytest
from datetime import date
from decimal import Decimal

from reconciler.models.expense import CostAssignment, Expense, SwishRecipient
from reconciler.splitting import calculate_split, registered_total, route_cost, route_swish


USER = "user-1"
PARTNER = "partner-1"


def make_expense(
    expense_id,
    amount,
    assignment=CostAssignment.PERSONAL,
    owner=USER,
    **group_fields,
):
    return Expense(
        id=expense_id,
        date=date(2025, 3, 10),
        amount=Decimal(amount),
        owner=owner,
        cost_assignment=assignment,
        is_credit_card=True,
        **group_fields,
    )


def group_purchase(expense_id, amount, total, swish, recipient, assignment=CostAssignment.SHARED):
    return make_expense(
        expense_id,
        amount,
        assignment,
        is_group_purchase=True,
        group_purchase_total=Decimal(total),
        group_purchase_swish_amount=Decimal(swish),
        group_purchase_swish_recipient=recipient,
    )


@pytest.fixture
def mixed_expenses():
    return [
        make_expense("exp-1", "100"),
        make_expense("exp-2", "50", owner=PARTNER),
        make_expense("exp-3", "80", CostAssignment.SHARED),
        make_expense("exp-4", "30", CostAssignment.PARTNER, owner=USER),
    ]


class TestRouting:
    """Tests for routing a single expense."""

    def test_personal_goes_to_owner(self):
        assert route_cost(make_expense("e", "100"), USER) == (
            Decimal("100"), 0, 0, 0
        )
        assert route_cost(make_expense("e", "100", owner=PARTNER), USER) == (
            0, 0, Decimal("100"), 0
        )

    def test_unknown_owner_is_attributed_to_partner(self):
        """Test the two-member assumption: anyone but the user is the partner."""
        expense = make_expense("e", "100", owner="someone-else")
        assert route_cost(expense, USER) == (0, 0, Decimal("100"), 0)

    def test_shared_is_halved(self):
        expense = make_expense("e", "75", CostAssignment.SHARED)
        assert route_cost(expense, USER) == (0, Decimal("37.5"), 0, Decimal("37.5"))

    def test_partner_assignment_overrides_owner(self):
        expense = make_expense("e", "40", CostAssignment.PARTNER, owner=USER)
        assert route_cost(expense, USER) == (0, 0, Decimal("40"), 0)

    def test_swish_routing(self):
        to_user = group_purchase("e1", "300", "600", "300", SwishRecipient.USER)
        to_partner = group_purchase("e2", "300", "600", "300", SwishRecipient.PARTNER)
        shared = group_purchase("e3", "300", "600", "300", SwishRecipient.SHARED)

        assert route_swish(to_user) == (Decimal("300"), 0)
        assert route_swish(to_partner) == (0, Decimal("300"))
        assert route_swish(shared) == (Decimal("150"), Decimal("150"))

    def test_swish_without_recipient_is_not_routed(self):
        expense = make_expense(
            "e", "300",
            is_group_purchase=True,
            group_purchase_total=Decimal("600"),
            group_purchase_swish_amount=Decimal("300"),
        )
        assert route_swish(expense) == (0, 0)


class TestCalculateSplit:
    """Tests for calculate_split."""

    def test_conservation_when_invoice_matches(self, mixed_expenses):
        """Test that everything registered is attributed to exactly one side."""
        split = calculate_split(mixed_expenses, Decimal("260"), USER, PARTNER)

        assert split.registered_total == Decimal("260")
        assert split.unregistered_difference == Decimal("0")
        assert split.user_amount == Decimal("140")
        assert split.partner_amount == Decimal("120")
        assert split.user_amount + split.partner_amount == split.registered_total
        assert split.has_warning is False

    def test_breakdown(self, mixed_expenses):
        split = calculate_split(mixed_expenses, Decimal("260"), USER, PARTNER)

        assert split.user_personal == Decimal("100")
        assert split.user_shared == Decimal("40")
        assert split.partner_personal == Decimal("80")
        assert split.partner_shared == Decimal("40")
        assert split.user_swish == Decimal("0")
        assert split.partner_swish == Decimal("0")

    def test_unregistered_difference_split_evenly(self):
        """Test invoice 1000 with 800 registered: 100 extra each."""
        expenses = [
            make_expense("exp-1", "500"),
            make_expense("exp-2", "300", owner=PARTNER),
        ]

        split = calculate_split(expenses, Decimal("1000"), USER, PARTNER)

        assert split.registered_total == Decimal("800")
        assert split.unregistered_difference == Decimal("200")
        assert split.user_unregistered == Decimal("100")
        assert split.partner_unregistered == Decimal("100")
        assert split.user_amount == Decimal("600")
        assert split.partner_amount == Decimal("400")
        assert split.has_warning is False

    def test_over_registration_warns(self):
        """Test invoice 500 with 700 registered: nothing extra, warning raised."""
        expenses = [
            make_expense("exp-1", "400"),
            make_expense("exp-2", "300", CostAssignment.SHARED),
        ]

        split = calculate_split(expenses, Decimal("500"), USER, PARTNER)

        assert split.registered_total == Decimal("700")
        assert split.unregistered_difference == Decimal("-200")
        assert split.user_unregistered == Decimal("0")
        assert split.partner_unregistered == Decimal("0")
        assert split.user_amount == Decimal("550")
        assert split.partner_amount == Decimal("150")
        assert split.has_warning is True

    def test_no_invoice_never_warns(self):
        """Test that a zero invoice amount does not raise the warning."""
        split = calculate_split([make_expense("exp-1", "400")], 0, USER, PARTNER)

        assert split.unregistered_difference == Decimal("-400")
        assert split.has_warning is False
        assert split.user_amount == Decimal("400")

    def test_group_purchase(self):
        """Test a shared 600 purchase where 300 came back via Swish to the user."""
        expense = group_purchase("exp-1", "300", "600", "300", SwishRecipient.USER)

        split = calculate_split([expense], Decimal("600"), USER, PARTNER)

        assert split.user_shared == Decimal("150")
        assert split.partner_shared == Decimal("150")
        assert split.user_swish == Decimal("300")
        assert split.partner_swish == Decimal("0")
        assert split.registered_total == Decimal("600")
        assert split.user_amount == Decimal("450")
        assert split.partner_amount == Decimal("150")
        assert split.has_warning is False

    def test_group_purchase_shared_swish(self):
        expense = group_purchase(
            "exp-1", "200", "500", "300", SwishRecipient.SHARED,
            assignment=CostAssignment.PERSONAL,
        )

        split = calculate_split([expense], Decimal("500"), USER, PARTNER)

        assert split.user_personal == Decimal("200")
        assert split.user_swish == Decimal("150")
        assert split.partner_swish == Decimal("150")
        assert split.total_attributed == Decimal("500")

    def test_swish_fields_ignored_on_regular_expense(self):
        expense = make_expense(
            "exp-1", "100",
            group_purchase_swish_amount=Decimal("50"),
            group_purchase_swish_recipient=SwishRecipient.USER,
        )

        split = calculate_split([expense], Decimal("100"), USER, PARTNER)

        assert split.user_swish == Decimal("0")
        assert split.user_amount == Decimal("100")

    def test_group_purchase_without_total_counts_amount(self):
        expense = make_expense("exp-1", "300", is_group_purchase=True)
        assert registered_total([expense]) == Decimal("300")

    def test_without_partner(self):
        split = calculate_split([make_expense("exp-1", "100")], Decimal("100"), USER, None)
        assert split.user_amount == Decimal("100")
        assert split.partner_amount == Decimal("0")

    def test_empty_expenses(self):
        split = calculate_split([], Decimal("300"), USER, PARTNER)

        assert split.registered_total == Decimal("0")
        assert split.user_amount == Decimal("150")
        assert split.partner_amount == Decimal("150")
        assert split.has_warning is False

    def test_accepts_plain_numbers(self):
        split = calculate_split([make_expense("exp-1", "100")], 100.5, USER, PARTNER)
        assert split.actual_invoice == Decimal("100.5")
        assert split.user_unregistered == Decimal("0.25")

    def test_idempotent(self, mixed_expenses):
        first = calculate_split(mixed_expenses, Decimal("900"), USER, PARTNER)
        second = calculate_split(mixed_expenses, Decimal("900"), USER, PARTNER)
        assert first == second

    def test_accepts_generator(self, mixed_expenses):
        split = calculate_split((e for e in mixed_expenses), Decimal("260"), USER, PARTNER)
        assert split.registered_total == Decimal("260")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
