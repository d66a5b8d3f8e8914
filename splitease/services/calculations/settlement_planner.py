"""
Settlement planner.

Greedy debt netting: after offsetting the completed settlements, debtors
and creditors are each sorted by amount (smallest first) and matched with
two pointers. Every step settles at least one side fully, so a plan never
has more than ``debtors + creditors - 1`` transfers.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional

from splitease.models.settlement import Settlement
from splitease.utils.logger import get_logger

from .money import EPSILON, quantize_amount, to_decimal

logger = get_logger(__name__)


def apply_completed_settlements(
    balances: Mapping[str, Decimal],
    completed: Optional[Iterable[Settlement]] = None,
) -> Dict[str, Decimal]:
    """Return a copy of ``balances`` with completed transfers offset.

    A completed ``from -> to`` transfer raises the payer's balance and lowers
    the receiver's. Records naming a member missing from ``balances`` are
    ignored.
    """
    working = {member_id: quantize_amount(amount) for member_id, amount in balances.items()}

    for record in completed or ():
        if record.from_member not in working or record.to_member not in working:
            logger.warning(
                f"Ignoring completed settlement {record.from_member} -> {record.to_member}: unknown member"
            )
            continue
        amount = quantize_amount(to_decimal(record.amount))
        working[record.from_member] += amount
        working[record.to_member] -= amount

    return working


def compute_settlement_plan(
    balances: Mapping[str, Decimal],
    completed: Optional[Iterable[Settlement]] = None,
) -> List[Settlement]:
    """Ordered list of transfers that brings every balance to zero"""
    working = apply_completed_settlements(balances, completed)

    debtors = [[member_id, -amount] for member_id, amount in working.items() if amount < 0]
    creditors = [[member_id, amount] for member_id, amount in working.items() if amount > 0]

    # stable sorts; ties keep member order
    debtors.sort(key=lambda entry: entry[1])
    creditors.sort(key=lambda entry: entry[1])

    plan: List[Settlement] = []
    i = j = 0

    while i < len(debtors) and j < len(creditors):
        debtor = debtors[i]
        creditor = creditors[j]
        amount = min(debtor[1], creditor[1])

        if amount > EPSILON:
            plan.append(Settlement(from_member=debtor[0], to_member=creditor[0], amount=amount))

        debtor[1] -= amount
        creditor[1] -= amount

        if debtor[1] < EPSILON:
            i += 1
        if creditor[1] < EPSILON:
            j += 1

    logger.debug(f"Planned {len(plan)} transfers for {len(debtors)} debtors and {len(creditors)} creditors")
    return plan
