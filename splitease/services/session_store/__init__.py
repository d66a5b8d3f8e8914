"""Session store module for SplitEase"""

from .errors import (
    ExpenseNotFoundError,
    InvalidSettlementError,
    MemberInUseError,
    MemberNotFoundError,
    SessionNotFoundError,
    SessionStoreError,
)
from .snapshot import load_session_file, save_session_file
from .store import SessionStore, get_session_store

__all__ = [
    "ExpenseNotFoundError",
    "InvalidSettlementError",
    "MemberInUseError",
    "MemberNotFoundError",
    "SessionNotFoundError",
    "SessionStore",
    "SessionStoreError",
    "get_session_store",
    "load_session_file",
    "save_session_file",
]
