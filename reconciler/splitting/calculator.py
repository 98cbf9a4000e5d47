"""
Cost Split Calculator

Proposes how one credit card invoice is paid by the two household members.

Every expense is routed exactly once:
- The expense amount goes by cost assignment (personal, shared, partner)
- For group purchases, the Swish part goes by Swish recipient, on top
- Whatever the invoice bills beyond the registered expenses is split 50/50

The household is assumed to be exactly two members. An expense that is
personal and not owned by the user is attributed to the partner.
"""

from decimal import Decimal
from typing import Iterable, Optional

from reconciler.models.expense import (
    CostAssignment,
    Expense,
    PaymentSplit,
    SwishRecipient,
)

ZERO = Decimal("0")
TWO = Decimal("2")


def route_cost(expense: Expense, user_id: str) -> tuple[Decimal, Decimal, Decimal, Decimal]:
    """
    Route an expense amount by its cost assignment.

    Returns (user_personal, user_shared, partner_personal, partner_shared).
    """
    amount = expense.amount

    if expense.cost_assignment == CostAssignment.PERSONAL:
        if expense.owner == user_id:
            return amount, ZERO, ZERO, ZERO
        return ZERO, ZERO, amount, ZERO
    if expense.cost_assignment == CostAssignment.SHARED:
        half = amount / TWO
        return ZERO, half, ZERO, half
    # PARTNER overrides the owner
    return ZERO, ZERO, amount, ZERO


def route_swish(expense: Expense) -> tuple[Decimal, Decimal]:
    """
    Route the Swish part of a group purchase by its recipient.

    Returns (user_swish, partner_swish). Nothing is routed without a
    recipient.
    """
    swish_amount = expense.swish_amount
    recipient = expense.group_purchase_swish_recipient

    if recipient == SwishRecipient.USER:
        return swish_amount, ZERO
    if recipient == SwishRecipient.PARTNER:
        return ZERO, swish_amount
    if recipient == SwishRecipient.SHARED:
        half = swish_amount / TWO
        return half, half
    return ZERO, ZERO


def registered_total(expenses: Iterable[Expense]) -> Decimal:
    """Sum of what was logged, counting group purchases at their full price."""
    return sum((expense.registered_value for expense in expenses), ZERO)


def calculate_split(
    expenses: Iterable[Expense],
    actual_invoice_amount: Decimal,
    user_id: str,
    partner_id: Optional[str] = None,
) -> PaymentSplit:
    """
    Calculate the per-member payment split for one invoice.

    Args:
        expenses: Expenses billed on the invoice
        actual_invoice_amount: Amount the card issuer actually billed
        user_id: The household member viewing the split
        partner_id: The other member, None if no partner is linked yet

    `partner_id` does not take part in attribution: whatever is not the
    user's is the partner's.
    """
    expenses = list(expenses)
    actual_invoice = Decimal(str(actual_invoice_amount))

    user_personal = user_shared = user_swish = ZERO
    partner_personal = partner_shared = partner_swish = ZERO

    for expense in expenses:
        u_personal, u_shared, p_personal, p_shared = route_cost(expense, user_id)
        user_personal += u_personal
        user_shared += u_shared
        partner_personal += p_personal
        partner_shared += p_shared

        if expense.is_group_purchase:
            u_swish, p_swish = route_swish(expense)
            user_swish += u_swish
            partner_swish += p_swish

    registered = registered_total(expenses)
    unregistered_difference = actual_invoice - registered

    # Only spend that the invoice shows but nobody logged is shared out
    if unregistered_difference > 0:
        unregistered_half = unregistered_difference / TWO
    else:
        unregistered_half = ZERO

    return PaymentSplit(
        user_amount=user_personal + user_shared + user_swish + unregistered_half,
        partner_amount=partner_personal + partner_shared + partner_swish + unregistered_half,
        registered_total=registered,
        unregistered_difference=unregistered_difference,
        actual_invoice=actual_invoice,
        has_warning=registered > actual_invoice and actual_invoice > 0,
        user_personal=user_personal,
        user_shared=user_shared,
        user_swish=user_swish,
        user_unregistered=unregistered_half,
        partner_personal=partner_personal,
        partner_shared=partner_shared,
        partner_swish=partner_swish,
        partner_unregistered=unregistered_half,
    )
