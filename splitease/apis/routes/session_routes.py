"""
FastAPI routes for session management, activity log, analytics and CSV export.
"""

from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Response

from splitease.apis.dependencies import get_store, store_error_to_http
from splitease.models.session import Session
from splitease.schemas.api.analytics import SessionAnalytics
from splitease.schemas.api.common import ApiResponse
from splitease.schemas.api.members import MemberResponse
from splitease.schemas.api.sessions import SessionCreate, SessionJoin, SessionSummary, SessionUpdate
from splitease.services.export import EXPORT_KINDS, CSVExporter
from splitease.services.session_store import SessionStore, SessionStoreError
from splitease.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _summary(session: Session) -> dict:
    return SessionSummary(
        id=session.id,
        pin=session.pin,
        title=session.title,
        currency=session.currency,
        created_at=session.created_at,
        members=[MemberResponse.model_validate(m) for m in session.members],
        expense_count=len(session.expenses),
        settlement_count=len(session.settlements_completed),
    ).model_dump(mode="json")


# ============================================================================
# SESSION ROUTES
# ============================================================================


@router.get("/", response_model=ApiResponse)
async def list_sessions(store: SessionStore = Depends(get_store)):
    """List all sessions, newest first."""
    try:
        sessions = store.list_sessions()
        return ApiResponse(
            data=[_summary(s) for s in sessions],
            message=f"Found {len(sessions)} sessions"
        )
    except Exception as e:
        logger.error(f"Error listing sessions: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to list sessions: {str(e)}")


@router.post("/", response_model=ApiResponse, status_code=201)
async def create_session(payload: SessionCreate, store: SessionStore = Depends(get_store)):
    """
    Create a new session.

    - **title**: Session title (optional, defaults to 'Untitled Session')
    - **currency**: Display currency code (optional)
    """
    try:
        session = await store.create_session(payload.title, payload.currency)
        return ApiResponse(data=_summary(session), message="Session created successfully")
    except Exception as e:
        logger.error(f"Error creating session: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to create session: {str(e)}")


@router.post("/join", response_model=ApiResponse)
async def join_session(payload: SessionJoin, store: SessionStore = Depends(get_store)):
    """Join a session by its PIN."""
    try:
        session = await store.join_session(payload.pin)
        return ApiResponse(data=_summary(session), message=f"Joined session {session.title}")
    except SessionStoreError as e:
        raise store_error_to_http(e)
    except Exception as e:
        logger.error(f"Error joining session: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to join session: {str(e)}")


@router.get("/{session_id}", response_model=ApiResponse)
async def get_session(session_id: str, store: SessionStore = Depends(get_store)):
    """Get a session with its members, expenses and completed settlements."""
    try:
        session = store.get_session(session_id)
        return ApiResponse(data=session.model_dump(mode="json", by_alias=True, exclude={"activities"}))
    except SessionStoreError as e:
        raise store_error_to_http(e)
    except Exception as e:
        logger.error(f"Error getting session {session_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to get session: {str(e)}")


@router.patch("/{session_id}", response_model=ApiResponse)
async def update_session(session_id: str, payload: SessionUpdate, store: SessionStore = Depends(get_store)):
    """Rename a session or change its display currency."""
    try:
        session = await store.update_session(session_id, title=payload.title, currency=payload.currency)
        return ApiResponse(data=_summary(session), message="Session updated successfully")
    except SessionStoreError as e:
        raise store_error_to_http(e)
    except Exception as e:
        logger.error(f"Error updating session {session_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to update session: {str(e)}")


@router.delete("/{session_id}", status_code=204)
async def delete_session(session_id: str, store: SessionStore = Depends(get_store)):
    """Delete a session and everything recorded in it."""
    try:
        await store.delete_session(session_id)
        return Response(status_code=204)
    except SessionStoreError as e:
        raise store_error_to_http(e)
    except Exception as e:
        logger.error(f"Error deleting session {session_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to delete session: {str(e)}")


@router.get("/{session_id}/activities", response_model=ApiResponse)
async def get_activities(session_id: str, store: SessionStore = Depends(get_store)):
    """Activity log of a session, newest first."""
    try:
        activities = store.get_activities(session_id)
        return ApiResponse(
            data=[a.model_dump(mode="json") for a in activities],
            message=f"Found {len(activities)} activities"
        )
    except SessionStoreError as e:
        raise store_error_to_http(e)
    except Exception as e:
        logger.error(f"Error getting activities for session {session_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to get activities: {str(e)}")


@router.get("/{session_id}/analytics", response_model=ApiResponse)
async def get_analytics(session_id: str, store: SessionStore = Depends(get_store)):
    """Spending per category, per payer and over time."""
    try:
        session = store.get_session(session_id)
        analytics = store.get_analytics(session_id)
        timeline = analytics["timeline"]
        summary = SessionAnalytics(
            currency=session.currency,
            total_spent=timeline[-1]["cumulative"] if timeline else Decimal("0.00"),
            **analytics,
        )
        return ApiResponse(data=summary.model_dump(mode="json"))
    except SessionStoreError as e:
        raise store_error_to_http(e)
    except Exception as e:
        logger.error(f"Error getting analytics for session {session_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to get analytics: {str(e)}")


@router.get("/{session_id}/export/{kind}.csv")
async def export_csv(session_id: str, kind: str, store: SessionStore = Depends(get_store)):
    """
    Download a CSV export.

    - **kind**: one of `expenses`, `balances`, `settlements`
    """
    if kind not in EXPORT_KINDS:
        raise HTTPException(status_code=404, detail=f"Unknown export '{kind}'")
    try:
        session = store.get_session(session_id)
        exporter = CSVExporter(session)
        csv_text = exporter.to_csv(kind)
        return Response(
            content=csv_text,
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{exporter.default_filename(kind)}"'},
        )
    except SessionStoreError as e:
        raise store_error_to_http(e)
    except Exception as e:
        logger.error(f"Error exporting {kind} for session {session_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to export {kind}: {str(e)}")
