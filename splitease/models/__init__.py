"""
Domain models package for SplitEase
"""

from .activity import (
    Activity,
    ExpenseAddedActivity,
    ExpenseRemovedActivity,
    ExpenseUpdatedActivity,
    MemberAddedActivity,
    MemberRemovedActivity,
    MemberUpdatedActivity,
    SessionCreatedActivity,
    SessionUpdatedActivity,
    SettlementCompletedActivity,
)
from .category import DEFAULT_CATEGORIES, OTHER_CATEGORY, Category, get_category
from .expense import Expense, SplitType
from .member import Member
from .session import Session
from .settlement import Settlement

__all__ = [
    "Activity",
    "Category",
    "DEFAULT_CATEGORIES",
    "Expense",
    "ExpenseAddedActivity",
    "ExpenseRemovedActivity",
    "ExpenseUpdatedActivity",
    "Member",
    "MemberAddedActivity",
    "MemberRemovedActivity",
    "MemberUpdatedActivity",
    "OTHER_CATEGORY",
    "Session",
    "SessionCreatedActivity",
    "SessionUpdatedActivity",
    "Settlement",
    "SettlementCompletedActivity",
    "SplitType",
    "get_category",
]
