"""
Data Models Package

This package contains all Pydantic models used in the Household Reconciler.
All data flowing through the engine must conform to these schemas.
"""

from reconciler.models.expense import (
    CostAssignment,
    DuplicateMatch,
    Expense,
    InvoiceRecord,
    InvoiceSplitReport,
    PaymentSplit,
    StatementReview,
    SwishRecipient,
    Transaction,
    ValidationIssue,
    ValidationResult,
)
from reconciler.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Expense models
    "CostAssignment",
    "DuplicateMatch",
    "Expense",
    "InvoiceRecord",
    "InvoiceSplitReport",
    "PaymentSplit",
    "StatementReview",
    "SwishRecipient",
    "Transaction",
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
