"""
In-memory storage.

Implements the storage interfaces with plain dicts and lists. Used in tests
and by callers that fetch records themselves and only need the flows.
"""

from datetime import date
from typing import Iterable, Optional
from uuid import UUID

import structlog

from reconciler.models.audit import AuditEvent
from reconciler.models.expense import Expense, InvoiceRecord
from reconciler.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    ExpenseStorageInterface,
)

logger = structlog.get_logger(__name__)


class InMemoryExpenseStorage(ExpenseStorageInterface):
    """Expense and invoice storage kept in process memory."""

    def __init__(
        self,
        expenses: Optional[Iterable[Expense]] = None,
        invoices: Optional[Iterable[InvoiceRecord]] = None,
    ):
        self._expenses: dict[str, Expense] = {}
        self._invoices: dict[str, InvoiceRecord] = {}

        for expense in expenses or []:
            self._expenses[expense.id] = expense
        for invoice in invoices or []:
            self._invoices[invoice.period] = invoice

    async def save_expense(self, expense: Expense) -> bool:
        if expense.id in self._expenses:
            raise DuplicateError(f"Expense {expense.id} already exists")
        self._expenses[expense.id] = expense
        logger.debug("expense_saved", expense_id=expense.id)
        return True

    async def get_expense_by_id(self, expense_id: str) -> Optional[Expense]:
        return self._expenses.get(expense_id)

    async def list_expenses(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        credit_card_only: bool = False,
    ) -> list[Expense]:
        results = []
        for expense in self._expenses.values():
            if date_from and expense.date < date_from:
                continue
            if date_to and expense.date > date_to:
                continue
            if credit_card_only and not expense.is_credit_card:
                continue
            results.append(expense)

        # Stable, so same-day expenses keep insertion order
        return sorted(results, key=lambda expense: expense.date)

    async def get_invoice(self, period: str) -> Optional[InvoiceRecord]:
        return self._invoices.get(period)

    async def save_invoice(self, invoice: InvoiceRecord) -> bool:
        self._invoices[invoice.period] = invoice
        logger.debug("invoice_saved", period=invoice.period)
        return True


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only audit log kept in process memory."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    @property
    def events(self) -> list[AuditEvent]:
        return list(self._events)

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        return [e for e in self._events if e.correlation_id == correlation_id]

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]
