from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .activity import Activity
from .expense import Expense
from .member import Member
from .settlement import Settlement


class Session(BaseModel):
    """A group of members sharing expenses, joined through its PIN"""

    id: str
    pin: str
    title: str
    created_at: datetime
    currency: str = "INR"
    members: List[Member] = Field(default_factory=list)
    expenses: List[Expense] = Field(default_factory=list)
    # append-only; never edited or removed
    settlements_completed: List[Settlement] = Field(default_factory=list)
    activities: List[Activity] = Field(default_factory=list)

    def get_member(self, member_id: str) -> Optional[Member]:
        for member in self.members:
            if member.id == member_id:
                return member
        return None

    def get_expense(self, expense_id: str) -> Optional[Expense]:
        for expense in self.expenses:
            if expense.id == expense_id:
                return expense
        return None

    def member_names(self) -> Dict[str, str]:
        return {member.id: member.name for member in self.members}
