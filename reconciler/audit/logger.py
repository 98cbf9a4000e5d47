"""
Audit Logger

DESIGN DECISION: Every reconciliation run is logged.
This provides:
1. Traceability of flagged duplicates and proposed splits
2. Debugging capability
3. A history the household can look back on

The audit logger:
- Is async to not block main flow
- Gracefully handles failures (doesn't crash the app if logging fails)
- Supports correlation IDs to trace related events
"""

import logging
import sys
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

import structlog

from reconciler.models.audit import AuditEvent, AuditEventBuilder
from reconciler.models.expense import PaymentSplit
from reconciler.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(default=str)
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route structured logs to stdout at the given level."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=numeric_level,
    )
    # basicConfig leaves an already configured root logger alone
    logging.getLogger().setLevel(numeric_level)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage, when one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("reconciler.audit")

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Audit persistence must never break a flow
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_statement_review_started(
        self,
        statement_id: str,
        transaction_count: int,
        expense_count: int,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.statement_review_started(
            statement_id=statement_id,
            transaction_count=transaction_count,
            expense_count=expense_count,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_statement_review_completed(
        self,
        statement_id: str,
        flagged_count: int,
        clean_count: int,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.statement_review_completed(
            statement_id=statement_id,
            flagged_count=flagged_count,
            clean_count=clean_count,
            correlation_id=correlation_id,
        ))

    async def log_duplicates_flagged(
        self,
        statement_id: str,
        flagged_count: int,
        transaction_count: int,
        correlation_id: UUID,
        best_scores: Optional[dict[str, Decimal]] = None,
    ) -> None:
        """Log the outcome of a duplicate check."""
        event = AuditEventBuilder.duplicates_flagged(
            statement_id=statement_id,
            flagged_count=flagged_count,
            transaction_count=transaction_count,
            correlation_id=correlation_id,
            best_scores={k: str(v) for k, v in (best_scores or {}).items()},
        )
        await self.log(event)

    async def log_split_calculated(
        self,
        period: str,
        split: PaymentSplit,
        correlation_id: UUID,
        currency: str = "SEK",
    ) -> None:
        """Log a proposed split, plus a warning if the invoice is over-registered."""
        event = AuditEventBuilder.split_calculated(
            period=period,
            user_amount=str(split.user_amount),
            partner_amount=str(split.partner_amount),
            registered_total=str(split.registered_total),
            actual_invoice=str(split.actual_invoice),
            correlation_id=correlation_id,
            currency=currency,
        )
        await self.log(event)

        if split.has_warning:
            await self.log(AuditEventBuilder.invoice_over_registered(
                period=period,
                registered_total=str(split.registered_total),
                actual_invoice=str(split.actual_invoice),
                correlation_id=correlation_id,
                currency=currency,
            ))

    async def log_invoice_missing(
        self,
        period: str,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.invoice_missing(
            period=period,
            correlation_id=correlation_id,
        ))

    async def log_invoice_saved(
        self,
        period: str,
        actual_amount: Decimal,
        correlation_id: UUID,
        currency: str = "SEK",
    ) -> None:
        await self.log(AuditEventBuilder.invoice_saved(
            period=period,
            actual_amount=str(actual_amount),
            correlation_id=correlation_id,
            currency=currency,
        ))

    async def log_validation(
        self,
        period: str,
        issues: list[dict],
        is_valid: bool,
        correlation_id: UUID,
    ) -> None:
        """Log expense validation results."""
        event = AuditEventBuilder.validation_completed(
            period=period,
            issues=issues,
            is_valid=is_valid,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_storage_error(
        self,
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.storage_error(
            operation=operation,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., a statement import).
    Pass it through all subsequent operations.
    """
    return uuid4()
