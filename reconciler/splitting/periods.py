"""
Credit card invoice periods.

A purchase made on or after the invoice break day is billed on the next
month's invoice. With break day 25, the "2025-03" invoice covers
2025-02-25 through 2025-03-24.
"""

from datetime import date, timedelta
from typing import Iterable

from reconciler.models.expense import Expense

MAX_BREAK_DAY = 28


def _check_break_day(break_day: int) -> None:
    # Day 28 exists in every month, so periods never overlap or leave gaps
    if not 1 <= break_day <= MAX_BREAK_DAY:
        raise ValueError(
            f"Invoice break day must be between 1 and {MAX_BREAK_DAY}, got {break_day}"
        )


def _format_period(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def parse_period(period: str) -> tuple[int, int]:
    """Parse a YYYY-MM period string into (year, month)."""
    year_str, sep, month_str = period.partition("-")
    if not sep or not (year_str.isdigit() and month_str.isdigit()):
        raise ValueError(f"Invalid invoice period: {period!r}")
    year, month = int(year_str), int(month_str)
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid invoice period: {period!r}")
    return year, month


def invoice_period_for(expense_date: date, break_day: int) -> str:
    """Invoice period (YYYY-MM) that a purchase on `expense_date` is billed on."""
    _check_break_day(break_day)

    year, month = expense_date.year, expense_date.month
    if expense_date.day >= break_day:
        if month == 12:
            return _format_period(year + 1, 1)
        return _format_period(year, month + 1)
    return _format_period(year, month)


def period_bounds(period: str, break_day: int) -> tuple[date, date]:
    """First and last purchase date billed on the given invoice period."""
    _check_break_day(break_day)
    year, month = parse_period(period)

    if month == 1:
        start = date(year - 1, 12, break_day)
    else:
        start = date(year, month - 1, break_day)
    end = date(year, month, break_day) - timedelta(days=1)
    return start, end


def group_by_invoice_period(
    expenses: Iterable[Expense],
    break_day: int,
) -> dict[str, list[Expense]]:
    """
    Group expenses by the invoice they are billed on.

    Periods are ordered newest first. Expenses keep their given order
    within a period.
    """
    _check_break_day(break_day)

    grouped: dict[str, list[Expense]] = {}
    for expense in expenses:
        period = invoice_period_for(expense.date, break_day)
        grouped.setdefault(period, []).append(expense)

    return {period: grouped[period] for period in sorted(grouped, reverse=True)}
