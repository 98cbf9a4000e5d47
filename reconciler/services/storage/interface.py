"""
Abstract Storage Interface

DESIGN DECISION: The record store behind the household app is an external
collaborator. We define only the reads and writes the reconciliation flows
need, so that:
1. The hosted backend can be plugged in without touching the engine
2. In-memory storage can be used for testing
3. Business logic stays decoupled from storage implementation
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional
from uuid import UUID

from reconciler.models.audit import AuditEvent
from reconciler.models.expense import Expense, InvoiceRecord


class ExpenseStorageInterface(ABC):
    """
    Abstract interface for expense and invoice storage.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    async def save_expense(self, expense: Expense) -> bool:
        """
        Save a new expense.

        Returns:
            True if saved successfully

        Raises:
            DuplicateError: If an expense with the same ID exists
            StorageError: If save fails
        """
        pass

    @abstractmethod
    async def get_expense_by_id(self, expense_id: str) -> Optional[Expense]:
        """
        Retrieve an expense by its ID.

        Returns:
            The expense if found, None otherwise
        """
        pass

    @abstractmethod
    async def list_expenses(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        credit_card_only: bool = False,
    ) -> list[Expense]:
        """
        List expenses with optional filters.

        Args:
            date_from: Filter expenses on or after this date
            date_to: Filter expenses on or before this date
            credit_card_only: Only expenses paid with the credit card

        Returns:
            Matching expenses ordered by date
        """
        pass

    @abstractmethod
    async def get_invoice(self, period: str) -> Optional[InvoiceRecord]:
        """
        Get the recorded invoice amount for a period (YYYY-MM).

        Returns:
            The invoice if one was entered, None otherwise
        """
        pass

    @abstractmethod
    async def save_invoice(self, invoice: InvoiceRecord) -> bool:
        """
        Insert or replace the invoice for its period.

        Returns:
            True if saved successfully
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g., one statement review).

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass
