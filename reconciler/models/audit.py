"""
Audit Models for Household Reconciler

Every reconciliation run is logged for audit purposes.
This provides:
1. Traceability of which duplicates were flagged and why
2. A history of the splits proposed for each invoice
3. Debugging information when storage misbehaves

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Statement review
    STATEMENT_REVIEW_STARTED = "statement_review_started"
    STATEMENT_REVIEW_COMPLETED = "statement_review_completed"
    DUPLICATES_FLAGGED = "duplicates_flagged"

    # Invoice splitting
    SPLIT_CALCULATED = "split_calculated"
    INVOICE_OVER_REGISTERED = "invoice_over_registered"
    INVOICE_MISSING = "invoice_missing"
    INVOICE_SAVED = "invoice_saved"

    # Validation
    EXPENSE_VALIDATION_PASSED = "expense_validation_passed"
    EXPENSE_VALIDATION_FAILED = "expense_validation_failed"

    # System events
    STORAGE_ERROR = "storage_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'statement', 'invoice')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one statement review)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
        }

    def to_row(self) -> list:
        """
        Flatten into a row for tabular audit storage.

        Columns:
        [event_id, timestamp, event_type, severity, entity_type, entity_id,
         correlation_id, description, details_json, error_message]
        """
        return [
            str(self.event_id),
            self.timestamp.isoformat(),
            self.event_type.value,
            self.severity.value,
            self.entity_type or "",
            self.entity_id or "",
            str(self.correlation_id) if self.correlation_id else "",
            self.description,
            json.dumps(self.details, default=str) if self.details else "",
            self.error_message or "",
        ]


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.duplicates_flagged(statement_id, 3, 12, cid)
        event = AuditEventBuilder.split_calculated("2025-03", split, cid)
    """

    @staticmethod
    def statement_review_started(
        statement_id: str,
        transaction_count: int,
        expense_count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATEMENT_REVIEW_STARTED,
            entity_type="statement",
            entity_id=statement_id,
            correlation_id=correlation_id,
            description=(
                f"Checking {transaction_count} transactions against "
                f"{expense_count} expenses"
            ),
            details={
                "transaction_count": transaction_count,
                "expense_count": expense_count,
            },
        )

    @staticmethod
    def statement_review_completed(
        statement_id: str,
        flagged_count: int,
        clean_count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATEMENT_REVIEW_COMPLETED,
            entity_type="statement",
            entity_id=statement_id,
            correlation_id=correlation_id,
            description=(
                f"Review finished: {flagged_count} flagged, {clean_count} clean"
            ),
            details={
                "flagged_count": flagged_count,
                "clean_count": clean_count,
            },
        )

    @staticmethod
    def duplicates_flagged(
        statement_id: str,
        flagged_count: int,
        transaction_count: int,
        correlation_id: UUID,
        best_scores: Optional[dict[str, str]] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DUPLICATES_FLAGGED,
            severity=AuditSeverity.WARNING if flagged_count else AuditSeverity.INFO,
            entity_type="statement",
            entity_id=statement_id,
            correlation_id=correlation_id,
            description=(
                f"{flagged_count} of {transaction_count} transactions "
                "look like existing expenses"
            ),
            details={
                "flagged_count": flagged_count,
                "transaction_count": transaction_count,
                "best_scores": best_scores or {},
            },
        )

    @staticmethod
    def split_calculated(
        period: str,
        user_amount: str,
        partner_amount: str,
        registered_total: str,
        actual_invoice: str,
        correlation_id: UUID,
        currency: str = "SEK",
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SPLIT_CALCULATED,
            entity_type="invoice",
            entity_id=period,
            correlation_id=correlation_id,
            description=(
                f"Split for {period}: {user_amount} / {partner_amount} {currency}"
            ),
            details={
                "currency": currency,
                "user_amount": user_amount,
                "partner_amount": partner_amount,
                "registered_total": registered_total,
                "actual_invoice": actual_invoice,
            },
        )

    @staticmethod
    def invoice_over_registered(
        period: str,
        registered_total: str,
        actual_invoice: str,
        correlation_id: UUID,
        currency: str = "SEK",
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INVOICE_OVER_REGISTERED,
            severity=AuditSeverity.WARNING,
            entity_type="invoice",
            entity_id=period,
            correlation_id=correlation_id,
            description=(
                f"Registered {registered_total} {currency} exceeds invoice "
                f"{actual_invoice} {currency} for {period}"
            ),
            details={
                "currency": currency,
                "registered_total": registered_total,
                "actual_invoice": actual_invoice,
            },
        )

    @staticmethod
    def invoice_missing(
        period: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INVOICE_MISSING,
            severity=AuditSeverity.WARNING,
            entity_type="invoice",
            entity_id=period,
            correlation_id=correlation_id,
            description=f"No invoice amount recorded for {period}",
        )

    @staticmethod
    def invoice_saved(
        period: str,
        actual_amount: str,
        correlation_id: UUID,
        currency: str = "SEK",
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INVOICE_SAVED,
            entity_type="invoice",
            entity_id=period,
            correlation_id=correlation_id,
            description=f"Invoice amount saved for {period}: {actual_amount} {currency}",
            details={"actual_amount": actual_amount, "currency": currency},
        )

    @staticmethod
    def validation_completed(
        period: str,
        issues: list[dict],
        is_valid: bool,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=(
                AuditEventType.EXPENSE_VALIDATION_PASSED
                if is_valid
                else AuditEventType.EXPENSE_VALIDATION_FAILED
            ),
            severity=AuditSeverity.INFO if is_valid else AuditSeverity.WARNING,
            entity_type="invoice",
            entity_id=period,
            correlation_id=correlation_id,
            description=f"Expense validation found {len(issues)} issues",
            details={"issues": issues},
        )

    @staticmethod
    def storage_error(
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"Storage error during {operation}",
            error_message=error_message,
            details={"operation": operation},
            correlation_id=correlation_id,
        )
