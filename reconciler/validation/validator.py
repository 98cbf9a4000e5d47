"""
Expense Data-Quality Validation

Checks the expenses of an invoice period before a split is proposed.

The split calculator trusts its input: a group purchase whose Swish part
has no recipient simply drops that money, and a total below the recorded
amount inflates nothing but confuses everyone. These checks make such
records visible.

IMPORTANT: Validation NEVER silently fixes issues.
It reports them for human review.
"""

from typing import Iterable

from reconciler.models.expense import (
    Expense,
    ValidationIssue,
    ValidationResult,
)


class ExpenseValidator:
    """
    Validates expenses ahead of cost splitting.

    Group purchases get the strictest checks since their swish fields carry
    money that exists nowhere else in the ledger.
    """

    def _validate_group_purchase(self, expense: Expense) -> list[ValidationIssue]:
        issues = []

        if expense.group_purchase_total is None:
            issues.append(ValidationIssue(
                expense_id=expense.id,
                field="group_purchase_total",
                issue_type="missing",
                message="Group purchase has no total, its own amount is used instead",
                severity="warning",
                suggested_fix="Enter the full price that was charged to the card",
            ))
            return issues

        if expense.group_purchase_total < expense.amount:
            issues.append(ValidationIssue(
                expense_id=expense.id,
                field="group_purchase_total",
                issue_type="inconsistent",
                message=(
                    f"Group purchase total ({expense.group_purchase_total}) is less "
                    f"than the household share ({expense.amount})"
                ),
                severity="error",
                suggested_fix="Check the total and the shares",
            ))

        if expense.swish_amount > 0 and expense.group_purchase_swish_recipient is None:
            issues.append(ValidationIssue(
                expense_id=expense.id,
                field="group_purchase_swish_recipient",
                issue_type="missing",
                message=(
                    f"Swish amount {expense.swish_amount} has no recipient and "
                    "would not be attributed to anyone"
                ),
                severity="error",
                suggested_fix="Choose who received the Swish payment",
            ))

        attributed = expense.amount + expense.swish_amount
        if attributed != expense.group_purchase_total:
            issues.append(ValidationIssue(
                expense_id=expense.id,
                field="group_purchase_swish_amount",
                issue_type="unattributed",
                message=(
                    f"Shares and Swish add up to {attributed}, "
                    f"not the total {expense.group_purchase_total}"
                ),
                severity="warning",
                suggested_fix="Adjust the Swish amount so nothing is left over",
            ))

        return issues

    def _validate_regular(self, expense: Expense) -> list[ValidationIssue]:
        has_group_fields = (
            expense.group_purchase_total is not None
            or expense.group_purchase_swish_amount is not None
            or expense.group_purchase_swish_recipient is not None
        )
        if not has_group_fields:
            return []

        return [ValidationIssue(
            expense_id=expense.id,
            field="is_group_purchase",
            issue_type="ignored",
            message="Group purchase fields are set but the expense is not a group purchase",
            severity="warning",
            suggested_fix="Mark it as a group purchase or clear the fields",
        )]

    def validate(self, expenses: Iterable[Expense]) -> ValidationResult:
        """
        Check a set of expenses.

        The result is valid when there are no error-level issues;
        warnings are okay.
        """
        expenses = list(expenses)
        issues: list[ValidationIssue] = []

        for expense in expenses:
            if expense.is_group_purchase:
                issues.extend(self._validate_group_purchase(expense))
            else:
                issues.extend(self._validate_regular(expense))

        return ValidationResult(
            checked_count=len(expenses),
            is_valid=not any(issue.severity == "error" for issue in issues),
            issues=issues,
        )
