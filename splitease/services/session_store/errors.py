from __future__ import annotations


class SessionStoreError(Exception):
    """Base class for session store failures"""


class SessionNotFoundError(SessionStoreError):
    def __init__(self, key: str):
        super().__init__(f"Session {key} not found")
        self.key = key


class MemberNotFoundError(SessionStoreError):
    def __init__(self, member_id: str):
        super().__init__(f"Member {member_id} not found in session")
        self.member_id = member_id


class ExpenseNotFoundError(SessionStoreError):
    def __init__(self, expense_id: str):
        super().__init__(f"Expense {expense_id} not found in session")
        self.expense_id = expense_id


class MemberInUseError(SessionStoreError):
    """Raised when removing a member that is still payer or participant of an expense"""

    def __init__(self, member_id: str):
        super().__init__("This member is involved in expenses and cannot be removed.")
        self.member_id = member_id


class InvalidSettlementError(SessionStoreError):
    """Raised when a completed settlement cannot be recorded"""
