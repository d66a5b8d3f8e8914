"""
Shared FastAPI dependencies and error mapping for the session routes.
"""

from __future__ import annotations

from fastapi import HTTPException

from splitease.services.session_store import (
    ExpenseNotFoundError,
    InvalidSettlementError,
    MemberInUseError,
    MemberNotFoundError,
    SessionNotFoundError,
    SessionStore,
    SessionStoreError,
    get_session_store,
)


def get_store() -> SessionStore:
    """Dependency returning the process-wide session store"""
    return get_session_store()


def store_error_to_http(error: SessionStoreError, member_not_found_status: int = 404) -> HTTPException:
    """Translate a session store failure into the matching HTTP error.

    ``member_not_found_status`` lets routes that take member IDs in the body
    (expenses, settlements) report an unknown member as a bad request rather
    than a missing resource.
    """
    if isinstance(error, (SessionNotFoundError, ExpenseNotFoundError)):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, MemberNotFoundError):
        return HTTPException(status_code=member_not_found_status, detail=str(error))
    if isinstance(error, (MemberInUseError, InvalidSettlementError)):
        return HTTPException(status_code=400, detail=str(error))
    return HTTPException(status_code=500, detail=str(error))
