"""
Builders for test data.
"""

from datetime import datetime, timezone
from decimal import Decimal

from splitease.models.expense import Expense, SplitType
from splitease.models.member import Member

NOW = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


def make_member(member_id, name=None):
    return Member(id=member_id, name=name or member_id.upper())


def make_expense(expense_id, amount, paid_by, participants, split=SplitType.EQUAL, custom_splits=None):
    return Expense(
        id=expense_id,
        title=f"Expense {expense_id}",
        amount=Decimal(str(amount)),
        paid_by=paid_by,
        participants=list(participants),
        split=split,
        custom_splits=(
            {k: Decimal(str(v)) for k, v in custom_splits.items()} if custom_splits is not None else None
        ),
        date=NOW,
        created_at=NOW,
    )
