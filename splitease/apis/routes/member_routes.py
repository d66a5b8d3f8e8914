"""
FastAPI routes for session members.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response

from splitease.apis.dependencies import get_store, store_error_to_http
from splitease.schemas.api.common import ApiResponse
from splitease.schemas.api.members import MemberCreate, MemberResponse, MemberUpdate
from splitease.services.session_store import SessionStore, SessionStoreError
from splitease.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/sessions/{session_id}/members", tags=["members"])


# ============================================================================
# MEMBER ROUTES
# ============================================================================


@router.get("/", response_model=ApiResponse)
async def list_members(session_id: str, store: SessionStore = Depends(get_store)):
    """List the members of a session."""
    try:
        session = store.get_session(session_id)
        return ApiResponse(
            data=[MemberResponse.model_validate(m).model_dump() for m in session.members],
            message=f"Found {len(session.members)} members"
        )
    except SessionStoreError as e:
        raise store_error_to_http(e)
    except Exception as e:
        logger.error(f"Error listing members of session {session_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to list members: {str(e)}")


@router.post("/", response_model=ApiResponse, status_code=201)
async def add_member(session_id: str, member: MemberCreate, store: SessionStore = Depends(get_store)):
    """
    Add a member to a session.

    - **name**: Display name of the member (required)
    """
    try:
        new_member = await store.add_member(session_id, member.name)
        return ApiResponse(
            data=MemberResponse.model_validate(new_member).model_dump(),
            message=f"Added {new_member.name}"
        )
    except SessionStoreError as e:
        raise store_error_to_http(e)
    except Exception as e:
        logger.error(f"Error adding member to session {session_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to add member: {str(e)}")


@router.put("/{member_id}", response_model=ApiResponse)
async def update_member(
    session_id: str, member_id: str, member_update: MemberUpdate, store: SessionStore = Depends(get_store)
):
    """Rename a member."""
    try:
        member = await store.update_member(session_id, member_id, member_update.name)
        return ApiResponse(
            data=MemberResponse.model_validate(member).model_dump(),
            message=f"Renamed member to {member.name}"
        )
    except SessionStoreError as e:
        raise store_error_to_http(e)
    except Exception as e:
        logger.error(f"Error updating member {member_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to update member: {str(e)}")


@router.delete("/{member_id}", status_code=204)
async def remove_member(session_id: str, member_id: str, store: SessionStore = Depends(get_store)):
    """
    Remove a member.

    Members that paid for or take part in any expense cannot be removed.
    """
    try:
        await store.remove_member(session_id, member_id)
        return Response(status_code=204)
    except SessionStoreError as e:
        raise store_error_to_http(e)
    except Exception as e:
        logger.error(f"Error removing member {member_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to remove member: {str(e)}")
