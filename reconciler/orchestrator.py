"""
Main Orchestrator for Household Reconciler

This module ties together storage, the pure reconciliation engine and the
audit trail, and defines the end-to-end flows for:
1. Statement Review (imported transactions → duplicate candidates)
2. Invoice Split (invoice period → validated expenses → payment split)

DESIGN DECISION: The orchestrator enforces the boundaries:
- The engine functions stay pure; all I/O and logging happens here
- Nothing is accepted or rejected on the household's behalf
- Every flow is audited
"""

from datetime import timedelta
from decimal import Decimal
from typing import Optional, Sequence
from uuid import UUID

from reconciler.audit import AuditLogger, configure_logging, create_correlation_id
from reconciler.config import get_settings
from reconciler.matching import MatchPolicy, best_matches, find_duplicates
from reconciler.models.expense import (
    InvoiceRecord,
    InvoiceSplitReport,
    StatementReview,
    Transaction,
)
from reconciler.services.storage import (
    ExpenseStorageInterface,
    InMemoryExpenseStorage,
    StorageError,
)
from reconciler.splitting import calculate_split, period_bounds
from reconciler.validation import ExpenseValidator


class StatementReviewFlow:
    """
    Orchestrates the statement review flow.

    Flow:
    1. Load existing expenses around the statement's dates
    2. Match every transaction against them
    3. Audit what was flagged
    4. Hand the ranked candidates back for the household to accept or reject
    """

    def __init__(
        self,
        storage: ExpenseStorageInterface,
        policy: Optional[MatchPolicy] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._policy = policy or get_settings().matching.to_policy()
        self._audit_logger = audit_logger

    async def review(
        self,
        transactions: Sequence[Transaction],
        statement_id: str = "statement",
        correlation_id: Optional[UUID] = None,
    ) -> StatementReview:
        """
        Check imported transactions for duplicates of existing expenses.

        Expenses are loaded for the statement's date range widened by the
        date tolerance on both sides.

        Raises:
            StorageError: If expenses could not be loaded
        """
        correlation_id = correlation_id or create_correlation_id()

        if not transactions:
            return StatementReview(transaction_count=0, expense_count=0)

        margin = timedelta(days=self._policy.date_tolerance_days)
        date_from = min(tx.date for tx in transactions) - margin
        date_to = max(tx.date for tx in transactions) + margin

        try:
            expenses = await self._storage.list_expenses(
                date_from=date_from,
                date_to=date_to,
            )
        except StorageError as e:
            if self._audit_logger:
                await self._audit_logger.log_storage_error(
                    operation="list_expenses",
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise

        if self._audit_logger:
            await self._audit_logger.log_statement_review_started(
                statement_id=statement_id,
                transaction_count=len(transactions),
                expense_count=len(expenses),
                correlation_id=correlation_id,
            )

        duplicates = find_duplicates(transactions, expenses, self._policy)
        clean_ids = [tx.id for tx in transactions if tx.id not in duplicates]

        if self._audit_logger:
            await self._audit_logger.log_duplicates_flagged(
                statement_id=statement_id,
                flagged_count=len(duplicates),
                transaction_count=len(transactions),
                correlation_id=correlation_id,
                best_scores={
                    tx_id: match.score
                    for tx_id, match in best_matches(duplicates).items()
                },
            )
            await self._audit_logger.log_statement_review_completed(
                statement_id=statement_id,
                flagged_count=len(duplicates),
                clean_count=len(clean_ids),
                correlation_id=correlation_id,
            )

        return StatementReview(
            transaction_count=len(transactions),
            expense_count=len(expenses),
            duplicates=duplicates,
            clean_transaction_ids=clean_ids,
        )


class InvoiceSplitFlow:
    """
    Orchestrates the credit card invoice split flow.

    Flow:
    1. Work out which purchase dates the invoice period covers
    2. Load the credit card expenses and the entered invoice amount
    3. Validate the expenses (report, never fix)
    4. Propose the split and audit it

    The split is a proposal. Manual overrides belong to the caller.
    """

    def __init__(
        self,
        storage: ExpenseStorageInterface,
        validator: Optional[ExpenseValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        invoice_break_day: Optional[int] = None,
        currency: Optional[str] = None,
    ):
        split_settings = get_settings().split
        self._storage = storage
        self._validator = validator or ExpenseValidator()
        self._audit_logger = audit_logger
        self._break_day = invoice_break_day or split_settings.invoice_break_day
        self._currency = currency or split_settings.currency

    async def record_invoice(
        self,
        period: str,
        actual_amount: Decimal,
        notes: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> InvoiceRecord:
        """Store the amount actually billed for a period, replacing any earlier entry."""
        correlation_id = correlation_id or create_correlation_id()

        invoice = InvoiceRecord(
            period=period,
            actual_amount=actual_amount,
            notes=notes,
        )
        await self._storage.save_invoice(invoice)

        if self._audit_logger:
            await self._audit_logger.log_invoice_saved(
                period=period,
                actual_amount=invoice.actual_amount,
                correlation_id=correlation_id,
                currency=self._currency,
            )

        return invoice

    async def split_period(
        self,
        period: str,
        user_id: str,
        partner_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> InvoiceSplitReport:
        """
        Propose the payment split for one invoice period (YYYY-MM).

        Without an entered invoice the actual amount is zero, which never
        raises the over-registration warning.

        Raises:
            ValueError: If the period string is malformed
            StorageError: If expenses or the invoice could not be loaded
        """
        correlation_id = correlation_id or create_correlation_id()
        period_start, period_end = period_bounds(period, self._break_day)

        try:
            expenses = await self._storage.list_expenses(
                date_from=period_start,
                date_to=period_end,
                credit_card_only=True,
            )
            invoice = await self._storage.get_invoice(period)
        except StorageError as e:
            if self._audit_logger:
                await self._audit_logger.log_storage_error(
                    operation="load_invoice_period",
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise

        if invoice is None and self._audit_logger:
            await self._audit_logger.log_invoice_missing(
                period=period,
                correlation_id=correlation_id,
            )
        actual_amount = invoice.actual_amount if invoice else Decimal("0")

        validation = self._validator.validate(expenses)
        if self._audit_logger:
            await self._audit_logger.log_validation(
                period=period,
                issues=[
                    {
                        "expense_id": i.expense_id,
                        "field": i.field,
                        "type": i.issue_type,
                        "message": i.message,
                    }
                    for i in validation.issues
                ],
                is_valid=validation.is_valid,
                correlation_id=correlation_id,
            )

        split = calculate_split(expenses, actual_amount, user_id, partner_id)

        if self._audit_logger:
            await self._audit_logger.log_split_calculated(
                period=period,
                split=split,
                correlation_id=correlation_id,
                currency=self._currency,
            )

        return InvoiceSplitReport(
            period=period,
            period_start=period_start,
            period_end=period_end,
            expense_count=len(expenses),
            invoice_recorded=invoice is not None,
            split=split,
            validation=validation,
        )


def create_app_components(
    storage: Optional[ExpenseStorageInterface] = None,
    audit_logger: Optional[AuditLogger] = None,
) -> tuple[StatementReviewFlow, InvoiceSplitFlow]:
    """
    Factory function to create both flows from settings.

    Args:
        storage: Record store adapter. Defaults to an empty in-memory store.
        audit_logger: Defaults to local-only logging.

    Returns:
        (statement_review_flow, invoice_split_flow)
    """
    settings = get_settings()
    app_settings = settings.app
    configure_logging("DEBUG" if app_settings.debug_mode else app_settings.log_level)

    storage = storage or InMemoryExpenseStorage()
    audit_logger = audit_logger or AuditLogger()

    statement_flow = StatementReviewFlow(
        storage=storage,
        policy=settings.matching.to_policy(),
        audit_logger=audit_logger,
    )
    invoice_flow = InvoiceSplitFlow(
        storage=storage,
        audit_logger=audit_logger,
        invoice_break_day=settings.split.invoice_break_day,
        currency=settings.split.currency,
    )

    return statement_flow, invoice_flow
