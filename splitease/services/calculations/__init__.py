"""Balance and settlement engine"""

from .analytics import compute_analytics, expense_timeline, spending_by_category, spending_by_member
from .balances import compute_balances, compute_member_totals, expense_shares
from .money import CENT, EPSILON, allocate_cents, quantize_amount, split_evenly, to_decimal
from .settlement_planner import apply_completed_settlements, compute_settlement_plan
from .validation import check_custom_splits

__all__ = [
    "CENT",
    "EPSILON",
    "allocate_cents",
    "apply_completed_settlements",
    "check_custom_splits",
    "compute_analytics",
    "compute_balances",
    "compute_member_totals",
    "compute_settlement_plan",
    "expense_shares",
    "expense_timeline",
    "quantize_amount",
    "spending_by_category",
    "spending_by_member",
    "split_evenly",
    "to_decimal",
]
