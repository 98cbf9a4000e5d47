"""
Group purchase construction.

A group purchase is paid in full with the credit card by one member while
part of it belongs to people outside the household, who pay their part
back via Swish. Only the household's own shares are budget spend.
"""

from datetime import date
from decimal import Decimal
from typing import Optional
from uuid import uuid4

from reconciler.models.expense import (
    CostAssignment,
    Expense,
    SwishRecipient,
)


class GroupPurchaseError(ValueError):
    """Shares of a group purchase do not add up."""
    pass


def derive_cost_assignment(user_share: Decimal, partner_share: Decimal) -> CostAssignment:
    """Cost assignment implied by the household's two shares."""
    if user_share > 0 and partner_share > 0:
        return CostAssignment.SHARED
    if partner_share > 0:
        return CostAssignment.PARTNER
    return CostAssignment.PERSONAL


def build_group_purchase(
    *,
    owner: str,
    purchase_date: date,
    total_amount: Decimal,
    user_share: Decimal,
    partner_share: Decimal,
    swish_recipient: SwishRecipient,
    description: Optional[str] = None,
    category: Optional[str] = None,
    expense_id: Optional[str] = None,
) -> Expense:
    """
    Build the expense record for a group purchase.

    The recorded amount is the household's shares. The rest of the total
    is the Swish amount owed to `swish_recipient`.

    Raises:
        GroupPurchaseError: If a share is negative or the shares exceed the total
    """
    if user_share < 0 or partner_share < 0:
        raise GroupPurchaseError("Shares cannot be negative")

    household_amount = user_share + partner_share
    swish_amount = total_amount - household_amount
    if swish_amount < 0:
        raise GroupPurchaseError(
            f"Shares ({household_amount}) exceed the purchase total ({total_amount})"
        )

    return Expense(
        id=expense_id or str(uuid4()),
        date=purchase_date,
        amount=household_amount,
        description=description,
        owner=owner,
        category=category,
        cost_assignment=derive_cost_assignment(user_share, partner_share),
        is_credit_card=True,
        is_group_purchase=True,
        group_purchase_total=total_amount,
        group_purchase_swish_amount=swish_amount,
        group_purchase_swish_recipient=swish_recipient,
    )
