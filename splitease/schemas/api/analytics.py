from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List

from pydantic import BaseModel, Field


class CategorySpending(BaseModel):
    """Total spent in one category."""
    category: str = Field(..., description="Category ID")
    name: str
    icon: str
    amount: Decimal


class MemberSpending(BaseModel):
    """Total paid by one member."""
    member_id: str
    name: str
    amount: Decimal


class TimelinePoint(BaseModel):
    """Running total of spending after one expense."""
    date: datetime
    expense_id: str
    cumulative: Decimal


class SessionAnalytics(BaseModel):
    """Spending breakdown of a session."""
    currency: str
    total_spent: Decimal = Field(..., description="Sum of all expense amounts")
    by_category: List[CategorySpending] = Field(default_factory=list)
    by_member: List[MemberSpending] = Field(default_factory=list)
    timeline: List[TimelinePoint] = Field(default_factory=list)
