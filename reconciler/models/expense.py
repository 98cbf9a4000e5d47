"""
Core Data Models for Household Reconciler

These models define the schemas for everything that flows through the
reconciliation engine. They are designed to:
1. Enforce type safety at the boundary where records are built
2. Stay immutable once built (the engine never edits a record)
3. Be serializable for storage and logging

DESIGN DECISION: Money is always Decimal. Halving a shared amount or
comparing two amounts for exact equality must not drift the way floats do.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class CostAssignment(str, Enum):
    """
    Who bears the cost of an expense.

    PARTNER is an explicit override: the cost belongs to the partner no
    matter who logged it.
    """
    PERSONAL = "personal"
    SHARED = "shared"
    PARTNER = "partner"


class SwishRecipient(str, Enum):
    """Who is owed the instant-payment part of a group purchase."""
    USER = "user"
    PARTNER = "partner"
    SHARED = "shared"


# =============================================================================
# INPUT RECORDS
# =============================================================================

class Transaction(BaseModel):
    """
    A row from an imported bank or card statement.

    Produced by statement ingestion, read-only here. The amount is signed.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Opaque transaction identifier"
    )
    date: date
    amount: Decimal = Field(
        ...,
        description="Signed amount, same currency unit as expenses"
    )
    description: Optional[str] = Field(
        default=None,
        description="Statement text, may be missing"
    )


class Expense(BaseModel):
    """
    An expense recorded by one of the two household members.

    For a group purchase `amount` is the household's own share and
    `group_purchase_total` the full price. Whatever the household did not
    pay itself was collected through Swish and is attributed with the
    swish fields.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Expense identifier"
    )
    date: date
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Cost of the item"
    )
    description: Optional[str] = None
    owner: str = Field(
        ...,
        min_length=1,
        description="ID of the household member who logged the expense"
    )
    category: Optional[str] = None

    # Cost splitting
    cost_assignment: CostAssignment = CostAssignment.PERSONAL
    is_credit_card: bool = Field(
        default=False,
        description="Paid with the shared credit card (billed on the invoice)"
    )
    is_group_purchase: bool = False
    group_purchase_total: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Full price of the group purchase"
    )
    group_purchase_swish_amount: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Part collected via Swish on behalf of the group"
    )
    group_purchase_swish_recipient: Optional[SwishRecipient] = None

    @property
    def registered_value(self) -> Decimal:
        """Full priced value this expense adds to the invoice total."""
        if self.is_group_purchase and self.group_purchase_total:
            return self.group_purchase_total
        return self.amount

    @property
    def swish_amount(self) -> Decimal:
        return self.group_purchase_swish_amount or Decimal("0")


class InvoiceRecord(BaseModel):
    """
    The amount actually billed on one credit card invoice.

    Entered by hand from the card issuer's invoice.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4)
    period: str = Field(
        ...,
        pattern=r"^\d{4}-(0[1-9]|1[0-2])$",
        description="Invoice period as YYYY-MM"
    )
    actual_amount: Decimal
    notes: Optional[str] = Field(
        default=None,
        max_length=1000
    )
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# =============================================================================
# DUPLICATE MATCHING RESULTS
# =============================================================================

class DuplicateMatch(BaseModel):
    """
    One candidate pairing of a statement transaction to an existing expense.

    Recomputed on demand, never persisted. Higher score means more likely
    to be the same purchase.
    """
    model_config = ConfigDict(frozen=True)

    expense: Expense
    score: Decimal
    date_distance: int = Field(ge=0, description="Days apart")
    amount_diff: Decimal = Field(ge=0, description="Absolute amount difference")
    common_words: list[str] = Field(default_factory=list)


class StatementReview(BaseModel):
    """Outcome of checking one imported statement for duplicates."""

    reviewed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    transaction_count: int = Field(ge=0)
    expense_count: int = Field(ge=0)
    duplicates: dict[str, list[DuplicateMatch]] = Field(default_factory=dict)
    clean_transaction_ids: list[str] = Field(
        default_factory=list,
        description="Transactions with no candidate, safe to import"
    )

    @property
    def flagged_transaction_ids(self) -> list[str]:
        return list(self.duplicates)

    @property
    def flagged_count(self) -> int:
        return len(self.duplicates)


# =============================================================================
# COST SPLITTING RESULTS
# =============================================================================

class PaymentSplit(BaseModel):
    """
    Per-member breakdown of one credit card invoice.

    Derived from the current expense set and the manually entered invoice
    amount. Not a source of truth.
    """
    model_config = ConfigDict(frozen=True)

    user_amount: Decimal
    partner_amount: Decimal
    registered_total: Decimal
    unregistered_difference: Decimal = Field(
        ...,
        description="Invoice minus registered total, negative when over-registered"
    )
    actual_invoice: Decimal
    has_warning: bool

    # Breakdown
    user_personal: Decimal = Decimal("0")
    user_shared: Decimal = Decimal("0")
    user_swish: Decimal = Decimal("0")
    user_unregistered: Decimal = Decimal("0")
    partner_personal: Decimal = Decimal("0")
    partner_shared: Decimal = Decimal("0")
    partner_swish: Decimal = Decimal("0")
    partner_unregistered: Decimal = Decimal("0")

    @property
    def total_attributed(self) -> Decimal:
        return self.user_amount + self.partner_amount


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single data-quality issue found on an expense."""

    expense_id: str
    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'inconsistent', 'ignored')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = None


class ValidationResult(BaseModel):
    """
    Result of checking a set of expenses before splitting.

    Issues are reported for human review, never fixed.
    """

    validated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    checked_count: int = Field(ge=0)
    is_valid: bool = Field(
        ...,
        description="False when any error-level issue exists"
    )
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warning_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity == "warning")


class InvoiceSplitReport(BaseModel):
    """Everything the invoice screen needs for one period."""

    period: str
    period_start: date
    period_end: date
    expense_count: int = Field(ge=0)
    invoice_recorded: bool = Field(
        ...,
        description="Was an actual invoice amount on file?"
    )
    split: PaymentSplit
    validation: ValidationResult

    @field_validator("period")
    @classmethod
    def validate_period(cls, v: str) -> str:
        year, _, month = v.partition("-")
        if not (year.isdigit() and month.isdigit() and 1 <= int(month) <= 12):
            raise ValueError(f"Invalid invoice period: {v}")
        return v
