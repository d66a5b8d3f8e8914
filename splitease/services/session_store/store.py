"""
In-memory session store.

The store is the single owner of mutable session state. Reads go straight
to the current session objects; every mutation runs under a per-session
``asyncio.Lock`` so that concurrent writers (two members marking different
settlements done at the same moment, say) never lose an update. Each
mutation also appends an activity record to the session.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from decimal import Decimal
from functools import lru_cache
from typing import Any, Dict, Iterable, List, Optional

from splitease.models.activity import (
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
from splitease.models.category import OTHER_CATEGORY
from splitease.models.expense import Expense, SplitType
from splitease.models.member import Member
from splitease.models.session import Session
from splitease.models.settlement import Settlement
from splitease.services.calculations import (
    check_custom_splits,
    compute_analytics,
    compute_balances,
    compute_member_totals,
    compute_settlement_plan,
    quantize_amount,
)
from splitease.utils.helpers import generate_id, generate_pin, random_avatar_color
from splitease.utils.logger import get_logger
from splitease.utils.settings import Settings, get_settings

from .errors import (
    ExpenseNotFoundError,
    InvalidSettlementError,
    MemberInUseError,
    MemberNotFoundError,
    SessionNotFoundError,
)

logger = get_logger(__name__)

EXPENSE_FIELDS = {
    "title", "amount", "paid_by", "participants", "split", "custom_splits", "category", "date", "description",
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionStore:
    """Owns all sessions and serializes their mutations"""

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or get_settings()
        self._sessions: Dict[str, Session] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _lock_for(self, session_id: str) -> asyncio.Lock:
        # only existing sessions get a lock; delete_session drops it again
        self._require_session(session_id)
        return self._locks.setdefault(session_id, asyncio.Lock())

    def _require_session(self, session_id: str) -> Session:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    @staticmethod
    def _require_member(session: Session, member_id: str) -> Member:
        member = session.get_member(member_id)
        if member is None:
            raise MemberNotFoundError(member_id)
        return member

    @staticmethod
    def _require_expense(session: Session, expense_id: str) -> Expense:
        expense = session.get_expense(expense_id)
        if expense is None:
            raise ExpenseNotFoundError(expense_id)
        return expense

    @staticmethod
    def _validate_expense(session: Session, expense: Expense) -> None:
        """Check member references, then that the split divides the amount.

        Raises ``MemberNotFoundError`` or ``ValueError``.
        """
        SessionStore._require_member(session, expense.paid_by)
        for member_id in expense.participants:
            SessionStore._require_member(session, member_id)
        for member_id in (expense.custom_splits or {}):
            SessionStore._require_member(session, member_id)
        check_custom_splits(expense.amount, expense.participants, expense.split, expense.custom_splits)

    def _new_pin(self) -> str:
        used = {session.pin for session in self._sessions.values()}
        pin = generate_pin(self._settings.SESSION_PIN_LENGTH)
        while pin in used:
            pin = generate_pin(self._settings.SESSION_PIN_LENGTH)
        return pin

    @staticmethod
    def _log_activity(session: Session, activity: Activity) -> None:
        session.activities.append(activity)

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    async def create_session(self, title: str = "", currency: Optional[str] = None) -> Session:
        session_id = generate_id()
        while session_id in self._sessions:
            session_id = generate_id()

        session = Session(
            id=session_id,
            pin=self._new_pin(),
            title=title.strip() or self._settings.DEFAULT_SESSION_TITLE,
            created_at=_utcnow(),
            currency=currency or self._settings.DEFAULT_CURRENCY,
        )
        self._log_activity(
            session,
            SessionCreatedActivity(description=f"Created session '{session.title}'", title=session.title),
        )
        self._sessions[session.id] = session

        logger.info(f"Created session {session.id} ({session.title})")
        return session

    def load_session(self, session: Session) -> Session:
        """Register an existing session, e.g. one read from a snapshot file"""
        self._sessions[session.id] = session
        logger.info(f"Loaded session {session.id} with {len(session.expenses)} expenses")
        return session

    async def join_session(self, pin: str) -> Session:
        for session in self._sessions.values():
            if session.pin == pin:
                return session
        raise SessionNotFoundError(f"with PIN {pin}")

    def get_session(self, session_id: str) -> Session:
        return self._require_session(session_id)

    def list_sessions(self) -> List[Session]:
        return sorted(self._sessions.values(), key=lambda s: s.created_at, reverse=True)

    async def update_session(
        self, session_id: str, title: Optional[str] = None, currency: Optional[str] = None
    ) -> Session:
        async with self._lock_for(session_id):
            session = self._require_session(session_id)
            if title is not None:
                session.title = title.strip() or self._settings.DEFAULT_SESSION_TITLE
            if currency is not None:
                session.currency = currency
            self._log_activity(
                session,
                SessionUpdatedActivity(
                    description=f"Updated session '{session.title}'", title=title, currency=currency
                ),
            )
            logger.info(f"Updated session {session_id}")
            return session

    async def delete_session(self, session_id: str) -> None:
        async with self._lock_for(session_id):
            self._require_session(session_id)
            del self._sessions[session_id]
        self._locks.pop(session_id, None)
        logger.info(f"Deleted session {session_id}")

    # ------------------------------------------------------------------
    # Members
    # ------------------------------------------------------------------

    async def add_member(self, session_id: str, name: str) -> Member:
        async with self._lock_for(session_id):
            session = self._require_session(session_id)

            member_id = generate_id()
            while session.get_member(member_id) is not None:
                member_id = generate_id()

            member = Member(id=member_id, name=name, avatar_color=random_avatar_color())
            session.members.append(member)
            self._log_activity(
                session,
                MemberAddedActivity(description=f"Added {name}", member_id=member.id, member_name=name),
            )
            logger.info(f"Added member {member.name} ({member.id}) to session {session_id}")
            return member

    async def update_member(self, session_id: str, member_id: str, name: str) -> Member:
        async with self._lock_for(session_id):
            session = self._require_session(session_id)
            member = self._require_member(session, member_id)

            old_name = member.name
            member.name = name
            self._log_activity(
                session,
                MemberUpdatedActivity(
                    description=f"Renamed {old_name} to {name}",
                    member_id=member_id,
                    old_name=old_name,
                    new_name=name,
                ),
            )
            logger.info(f"Renamed member {member_id} in session {session_id}")
            return member

    async def remove_member(self, session_id: str, member_id: str) -> None:
        async with self._lock_for(session_id):
            session = self._require_session(session_id)
            member = self._require_member(session, member_id)

            in_use = any(
                expense.paid_by == member_id
                or member_id in expense.participants
                or member_id in (expense.custom_splits or {})
                for expense in session.expenses
            )
            if in_use:
                raise MemberInUseError(member_id)

            session.members = [m for m in session.members if m.id != member_id]
            self._log_activity(
                session,
                MemberRemovedActivity(
                    description=f"Removed {member.name}", member_id=member_id, member_name=member.name
                ),
            )
            logger.info(f"Removed member {member_id} from session {session_id}")

    # ------------------------------------------------------------------
    # Expenses
    # ------------------------------------------------------------------

    async def add_expense(
        self,
        session_id: str,
        *,
        title: str,
        amount: Decimal,
        paid_by: str,
        participants: Iterable[str],
        split: SplitType = SplitType.EQUAL,
        custom_splits: Optional[Dict[str, Decimal]] = None,
        category: str = OTHER_CATEGORY,
        date: Optional[datetime] = None,
        description: Optional[str] = None,
    ) -> Expense:
        async with self._lock_for(session_id):
            session = self._require_session(session_id)

            expense_id = generate_id()
            while session.get_expense(expense_id) is not None:
                expense_id = generate_id()

            now = _utcnow()
            expense = Expense(
                id=expense_id,
                title=title,
                amount=quantize_amount(amount),
                paid_by=paid_by,
                participants=list(participants),
                split=split,
                custom_splits=custom_splits,
                category=category,
                date=date or now,
                created_at=now,
                description=description,
            )
            self._validate_expense(session, expense)

            session.expenses.append(expense)
            self._log_activity(
                session,
                ExpenseAddedActivity(
                    description=f"Added expense '{expense.title}'",
                    expense_id=expense.id,
                    title=expense.title,
                    amount=expense.amount,
                    paid_by=expense.paid_by,
                ),
            )
            logger.info(f"Added expense {expense.id} ({expense.amount}) to session {session_id}")
            return expense

    async def update_expense(self, session_id: str, expense_id: str, **changes: Any) -> Expense:
        unknown = set(changes) - EXPENSE_FIELDS
        if unknown:
            raise ValueError(f"Unknown expense fields: {', '.join(sorted(unknown))}")

        async with self._lock_for(session_id):
            session = self._require_session(session_id)
            current = self._require_expense(session, expense_id)

            if "amount" in changes and changes["amount"] is not None:
                changes["amount"] = quantize_amount(changes["amount"])
            updated = Expense.model_validate({**current.model_dump(), **changes})
            self._validate_expense(session, updated)

            session.expenses = [updated if e.id == expense_id else e for e in session.expenses]
            self._log_activity(
                session,
                ExpenseUpdatedActivity(
                    description=f"Updated expense '{updated.title}'",
                    expense_id=expense_id,
                    title=updated.title,
                    amount=updated.amount,
                ),
            )
            logger.info(f"Updated expense {expense_id} in session {session_id}")
            return updated

    async def remove_expense(self, session_id: str, expense_id: str) -> None:
        async with self._lock_for(session_id):
            session = self._require_session(session_id)
            expense = self._require_expense(session, expense_id)

            session.expenses = [e for e in session.expenses if e.id != expense_id]
            self._log_activity(
                session,
                ExpenseRemovedActivity(
                    description=f"Removed expense '{expense.title}'",
                    expense_id=expense_id,
                    title=expense.title,
                    amount=expense.amount,
                ),
            )
            logger.info(f"Removed expense {expense_id} from session {session_id}")

    # ------------------------------------------------------------------
    # Balances and settlements
    # ------------------------------------------------------------------

    def get_balances(self, session_id: str) -> Dict[str, Decimal]:
        session = self._require_session(session_id)
        return compute_balances(session.members, session.expenses)

    def get_member_totals(self, session_id: str) -> Dict[str, Dict[str, Decimal]]:
        session = self._require_session(session_id)
        return compute_member_totals(session.members, session.expenses)

    def get_analytics(self, session_id: str) -> Dict[str, List[Dict[str, Any]]]:
        session = self._require_session(session_id)
        return compute_analytics(session.members, session.expenses)

    def get_settlement_plan(self, session_id: str) -> List[Settlement]:
        session = self._require_session(session_id)
        balances = compute_balances(session.members, session.expenses)
        return compute_settlement_plan(balances, session.settlements_completed)

    async def record_settlement_completed(self, session_id: str, settlement: Settlement) -> Settlement:
        """Append a completed transfer to the session's settlement log.

        Raises instead of returning quietly: an unrecorded settlement is a
        real payment the group would otherwise ask for twice.
        """
        async with self._lock_for(session_id):
            session = self._require_session(session_id)
            payer = self._require_member(session, settlement.from_member)
            receiver = self._require_member(session, settlement.to_member)

            if payer.id == receiver.id:
                raise InvalidSettlementError("A member cannot settle with themselves")
            if not settlement.amount.is_finite():
                raise InvalidSettlementError(f"Settlement amount must be finite, got {settlement.amount}")
            amount = quantize_amount(settlement.amount)
            if amount <= 0:
                raise InvalidSettlementError(f"Settlement amount must be positive, got {settlement.amount}")

            record = Settlement(from_member=payer.id, to_member=receiver.id, amount=amount)
            session.settlements_completed.append(record)
            self._log_activity(
                session,
                SettlementCompletedActivity(
                    description=f"{payer.name} paid {receiver.name} {amount}",
                    from_member=payer.id,
                    to_member=receiver.id,
                    amount=amount,
                ),
            )
            logger.info(f"Recorded settlement {payer.id} -> {receiver.id} ({amount}) in session {session_id}")
            return record

    def get_completed_settlements(self, session_id: str) -> List[Settlement]:
        return list(self._require_session(session_id).settlements_completed)

    def get_activities(self, session_id: str) -> List[Activity]:
        """Activities newest first"""
        session = self._require_session(session_id)
        return sorted(reversed(session.activities), key=lambda a: a.timestamp, reverse=True)


@lru_cache(maxsize=1)
def get_session_store() -> SessionStore:
    return SessionStore()
