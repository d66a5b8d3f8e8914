"""
Activity log records.

Every mutation of a session appends one activity. Each kind carries its own
typed payload so consumers can switch on ``type`` without guessing at the
shape of the details.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from splitease.utils.helpers import generate_id


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ActivityBase(BaseModel):
    id: str = Field(default_factory=generate_id)
    timestamp: datetime = Field(default_factory=_utcnow)
    description: str


class SessionCreatedActivity(ActivityBase):
    type: Literal["session_created"] = "session_created"
    title: str


class SessionUpdatedActivity(ActivityBase):
    type: Literal["session_updated"] = "session_updated"
    title: Optional[str] = None
    currency: Optional[str] = None


class MemberAddedActivity(ActivityBase):
    type: Literal["member_added"] = "member_added"
    member_id: str
    member_name: str


class MemberUpdatedActivity(ActivityBase):
    type: Literal["member_updated"] = "member_updated"
    member_id: str
    old_name: str
    new_name: str


class MemberRemovedActivity(ActivityBase):
    type: Literal["member_removed"] = "member_removed"
    member_id: str
    member_name: str


class ExpenseAddedActivity(ActivityBase):
    type: Literal["expense_added"] = "expense_added"
    expense_id: str
    title: str
    amount: Decimal
    paid_by: str


class ExpenseUpdatedActivity(ActivityBase):
    type: Literal["expense_updated"] = "expense_updated"
    expense_id: str
    title: str
    amount: Decimal


class ExpenseRemovedActivity(ActivityBase):
    type: Literal["expense_removed"] = "expense_removed"
    expense_id: str
    title: str
    amount: Decimal


class SettlementCompletedActivity(ActivityBase):
    type: Literal["settlement_completed"] = "settlement_completed"
    from_member: str
    to_member: str
    amount: Decimal


Activity = Annotated[
    Union[
        SessionCreatedActivity,
        SessionUpdatedActivity,
        MemberAddedActivity,
        MemberUpdatedActivity,
        MemberRemovedActivity,
        ExpenseAddedActivity,
        ExpenseUpdatedActivity,
        ExpenseRemovedActivity,
        SettlementCompletedActivity,
    ],
    Field(discriminator="type"),
]
