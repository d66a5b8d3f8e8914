"""
Balance calculator.

Reduces the expense history of a session to one signed balance per member:
positive means the group owes that member money, negative means the member
owes the group. Each expense credits its payer with the full amount and
debits its participants according to the split policy, so balances sum to
zero whenever every expense is well formed.

Malformed input never raises. Unknown payers or participants are skipped,
and an expense without participants keeps its payer credit but debits
nobody.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, Iterable, List

from splitease.models.expense import Expense, SplitType
from splitease.models.member import Member
from splitease.utils.logger import get_logger

from .money import SPLIT_TOLERANCE, ZERO, allocate_cents, quantize_amount, split_evenly, to_decimal

logger = get_logger(__name__)

HUNDRED = Decimal(100)


def _unique_participants(expense: Expense) -> List[str]:
    # keep first occurrence order
    return list(dict.fromkeys(p for p in expense.participants if p))


def expense_shares(expense: Expense) -> Dict[str, Decimal]:
    """Amount each participant owes for one expense, keyed by member ID.

    Member references are not checked here; callers drop the IDs they do
    not know.
    """
    participants = _unique_participants(expense)
    if not participants:
        return {}

    amount = quantize_amount(expense.amount)

    if expense.split == SplitType.EQUAL:
        return split_evenly(amount, participants)

    if not expense.custom_splits:
        logger.debug(f"Expense {expense.id} uses {expense.split.value} split without custom splits")
        return {}

    values = {member_id: to_decimal(value) for member_id, value in expense.custom_splits.items()}
    total = sum(values.values(), Decimal(0))

    if expense.split == SplitType.PERCENTAGE:
        exact = {member_id: amount * value / HUNDRED for member_id, value in values.items()}
        complete = abs(total - HUNDRED) <= SPLIT_TOLERANCE
    else:
        exact = values
        complete = abs(total - amount) <= SPLIT_TOLERANCE

    # a complete split debits exactly the expense amount
    target = amount if complete else quantize_amount(sum(exact.values(), Decimal(0)))
    return allocate_cents(exact, target)


def compute_balances(members: Iterable[Member], expenses: Iterable[Expense]) -> Dict[str, Decimal]:
    """Net balance per member, rounded to 2 dp.

    Every member in ``members`` appears in the result, starting at 0.00.
    The result does not depend on the order of ``expenses``.
    """
    balances: Dict[str, Decimal] = {member.id: ZERO for member in members}

    for expense in expenses:
        if expense.paid_by in balances:
            balances[expense.paid_by] += quantize_amount(expense.amount)
        else:
            logger.warning(f"Expense {expense.id} paid by unknown member {expense.paid_by!r}, skipping credit")

        for member_id, share in expense_shares(expense).items():
            if member_id not in balances:
                logger.warning(f"Expense {expense.id} references unknown member {member_id!r}, skipping debit")
                continue
            balances[member_id] -= share

    return {member_id: quantize_amount(amount) for member_id, amount in balances.items()}


def compute_member_totals(members: Iterable[Member], expenses: Iterable[Expense]) -> Dict[str, Dict[str, Decimal]]:
    """Per member: total paid, total share consumed and the resulting balance"""
    members = list(members)
    expenses = list(expenses)

    paid: Dict[str, Decimal] = {member.id: ZERO for member in members}
    share: Dict[str, Decimal] = {member.id: ZERO for member in members}

    for expense in expenses:
        if expense.paid_by in paid:
            paid[expense.paid_by] += quantize_amount(expense.amount)
        for member_id, amount in expense_shares(expense).items():
            if member_id in share:
                share[member_id] += amount

    balances = compute_balances(members, expenses)
    return {
        member.id: {
            "paid": quantize_amount(paid[member.id]),
            "share": quantize_amount(share[member.id]),
            "balance": balances[member.id],
        }
        for member in members
    }
