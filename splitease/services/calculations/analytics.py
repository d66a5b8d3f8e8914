"""
Spending analytics for a session: totals per category, per payer and a
cumulative timeline. These are gross figures over expense amounts and do
not look at splits or settlements.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Iterable, List

from splitease.models.category import get_category
from splitease.models.expense import Expense
from splitease.models.member import Member

from .money import ZERO, quantize_amount


def spending_by_category(expenses: Iterable[Expense]) -> List[Dict[str, Any]]:
    """Total spent per category, largest first; unknown IDs count as Other"""
    totals: Dict[str, Decimal] = {}
    for expense in expenses:
        category = get_category(expense.category)
        totals[category.id] = totals.get(category.id, ZERO) + quantize_amount(expense.amount)

    rows = []
    for category_id, amount in totals.items():
        if amount <= 0:
            continue
        category = get_category(category_id)
        rows.append({"category": category.id, "name": category.name, "icon": category.icon, "amount": amount})
    return sorted(rows, key=lambda row: row["amount"], reverse=True)


def spending_by_member(members: Iterable[Member], expenses: Iterable[Expense]) -> List[Dict[str, Any]]:
    """Total paid per member, largest first. Members who paid nothing are left out."""
    members = list(members)
    paid: Dict[str, Decimal] = {member.id: ZERO for member in members}
    for expense in expenses:
        if expense.paid_by in paid:
            paid[expense.paid_by] += quantize_amount(expense.amount)

    rows = [
        {"member_id": member.id, "name": member.name, "amount": paid[member.id]}
        for member in members
        if paid[member.id] > 0
    ]
    return sorted(rows, key=lambda row: row["amount"], reverse=True)


def expense_timeline(expenses: Iterable[Expense]) -> List[Dict[str, Any]]:
    """Running total of spending, one point per expense in date order"""
    points: List[Dict[str, Any]] = []
    running = ZERO
    for expense in sorted(expenses, key=lambda e: e.date):
        running += quantize_amount(expense.amount)
        points.append({"date": expense.date, "expense_id": expense.id, "cumulative": running})
    return points


def compute_analytics(members: Iterable[Member], expenses: Iterable[Expense]) -> Dict[str, List[Dict[str, Any]]]:
    expenses = list(expenses)
    return {
        "by_category": spending_by_category(expenses),
        "by_member": spending_by_member(members, expenses),
        "timeline": expense_timeline(expenses),
    }
