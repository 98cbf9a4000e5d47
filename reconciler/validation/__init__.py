"""Validation package."""

from reconciler.validation.validator import ExpenseValidator

__all__ = ["ExpenseValidator"]
