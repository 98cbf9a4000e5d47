"""Cost splitting package."""

from reconciler.splitting.calculator import (
    calculate_split,
    registered_total,
    route_cost,
    route_swish,
)
from reconciler.splitting.group_purchase import (
    GroupPurchaseError,
    build_group_purchase,
    derive_cost_assignment,
)
from reconciler.splitting.periods import (
    group_by_invoice_period,
    invoice_period_for,
    parse_period,
    period_bounds,
)

__all__ = [
    "GroupPurchaseError",
    "build_group_purchase",
    "calculate_split",
    "derive_cost_assignment",
    "group_by_invoice_period",
    "invoice_period_for",
    "parse_period",
    "period_bounds",
    "registered_total",
    "route_cost",
    "route_swish",
]
