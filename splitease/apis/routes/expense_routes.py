"""
FastAPI routes for session expenses.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response

from splitease.apis.dependencies import get_store, store_error_to_http
from splitease.schemas.api.common import ApiResponse
from splitease.schemas.api.expenses import ExpenseCreate, ExpenseUpdate
from splitease.services.session_store import SessionStore, SessionStoreError
from splitease.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/sessions/{session_id}/expenses", tags=["expenses"])


# ============================================================================
# EXPENSE ROUTES
# ============================================================================


@router.get("/", response_model=ApiResponse)
async def list_expenses(session_id: str, store: SessionStore = Depends(get_store)):
    """List the expenses of a session, most recent first."""
    try:
        session = store.get_session(session_id)
        expenses = sorted(session.expenses, key=lambda e: e.date, reverse=True)
        return ApiResponse(
            data=[e.model_dump(mode="json") for e in expenses],
            message=f"Found {len(expenses)} expenses"
        )
    except SessionStoreError as e:
        raise store_error_to_http(e)
    except Exception as e:
        logger.error(f"Error listing expenses of session {session_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to list expenses: {str(e)}")


@router.post("/", response_model=ApiResponse, status_code=201)
async def add_expense(session_id: str, expense: ExpenseCreate, store: SessionStore = Depends(get_store)):
    """
    Add an expense.

    - **paid_by** and every **participants** entry must be members of the session
    - **custom_splits** is required for `percentage` (must add up to 100) and
      `amount` (must add up to the expense amount) splits
    """
    try:
        new_expense = await store.add_expense(session_id, **expense.model_dump())
        return ApiResponse(data=new_expense.model_dump(mode="json"), message="Expense added successfully")
    except SessionStoreError as e:
        raise store_error_to_http(e, member_not_found_status=400)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.error(f"Error adding expense to session {session_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to add expense: {str(e)}")


@router.put("/{expense_id}", response_model=ApiResponse)
async def update_expense(
    session_id: str, expense_id: str, expense_update: ExpenseUpdate, store: SessionStore = Depends(get_store)
):
    """Update an expense. Only provided fields are changed."""
    try:
        changes = expense_update.model_dump(exclude_unset=True)
        updated = await store.update_expense(session_id, expense_id, **changes)
        return ApiResponse(data=updated.model_dump(mode="json"), message="Expense updated successfully")
    except SessionStoreError as e:
        raise store_error_to_http(e, member_not_found_status=400)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.error(f"Error updating expense {expense_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to update expense: {str(e)}")


@router.delete("/{expense_id}", status_code=204)
async def remove_expense(session_id: str, expense_id: str, store: SessionStore = Depends(get_store)):
    """Delete an expense."""
    try:
        await store.remove_expense(session_id, expense_id)
        return Response(status_code=204)
    except SessionStoreError as e:
        raise store_error_to_http(e)
    except Exception as e:
        logger.error(f"Error removing expense {expense_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to remove expense: {str(e)}")
