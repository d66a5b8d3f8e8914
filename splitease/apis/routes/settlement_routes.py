from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException

from splitease.apis.dependencies import get_store, store_error_to_http
from splitease.models.settlement import Settlement
from splitease.schemas.api.common import ApiResponse
from splitease.schemas.api.settlements import (
    BalanceSummary,
    MemberBalance,
    SettlementEntry,
    SettlementPlan,
)
from splitease.services.session_store import SessionStore, SessionStoreError
from splitease.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/sessions/{session_id}", tags=["settlements"])


def _entry(settlement: Settlement) -> SettlementEntry:
    return SettlementEntry(
        from_member=settlement.from_member,
        to_member=settlement.to_member,
        amount=settlement.amount,
    )


@router.get("/balances", response_model=ApiResponse)
async def get_balances(session_id: str, store: SessionStore = Depends(get_store)):
    """Net balance of every member, with what they paid and what they consumed."""
    try:
        session = store.get_session(session_id)
        totals = store.get_member_totals(session_id)
        names = session.member_names()

        balances = [
            MemberBalance(
                member_id=member_id,
                name=names.get(member_id, member_id),
                paid=values["paid"],
                share=values["share"],
                balance=values["balance"],
            )
            for member_id, values in totals.items()
        ]
        summary = BalanceSummary(
            currency=session.currency,
            balances=balances,
            total_outstanding=sum((b.balance for b in balances if b.balance > 0), Decimal("0.00")),
        )

        return ApiResponse(
            data=summary.model_dump(mode="json"),
            message="Balances calculated successfully"
        )

    except SessionStoreError as e:
        raise store_error_to_http(e)
    except Exception as e:
        logger.error(f"Error getting balances for session {session_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/settlements", response_model=ApiResponse)
async def get_settlement_plan(session_id: str, store: SessionStore = Depends(get_store)):
    """Suggested transfers that would settle all outstanding balances."""
    try:
        session = store.get_session(session_id)
        plan = store.get_settlement_plan(session_id)

        settlement_plan = SettlementPlan(
            currency=session.currency,
            settlements=[_entry(s) for s in plan],
            total_amount=sum((s.amount for s in plan), Decimal("0.00")),
        )

        return ApiResponse(
            data=settlement_plan.model_dump(mode="json", by_alias=True),
            message="All settled up" if not plan else f"{len(plan)} settlements suggested"
        )

    except SessionStoreError as e:
        raise store_error_to_http(e)
    except Exception as e:
        logger.error(f"Error getting settlement plan for session {session_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/settlements/completed", response_model=ApiResponse)
async def get_completed_settlements(session_id: str, store: SessionStore = Depends(get_store)):
    """Settlements already marked as done, oldest first."""
    try:
        completed = store.get_completed_settlements(session_id)
        return ApiResponse(
            data=[_entry(s).model_dump(mode="json", by_alias=True) for s in completed],
            message=f"Found {len(completed)} completed settlements"
        )

    except SessionStoreError as e:
        raise store_error_to_http(e)
    except Exception as e:
        logger.error(f"Error getting completed settlements for session {session_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/settlements/complete", response_model=ApiResponse, status_code=201)
async def complete_settlement(
    session_id: str,
    entry: SettlementEntry,
    store: SessionStore = Depends(get_store)
):
    """
    Mark a transfer as done.

    The record is permanent and offsets every later settlement plan.
    """
    try:
        record = await store.record_settlement_completed(
            session_id,
            Settlement(from_member=entry.from_member, to_member=entry.to_member, amount=entry.amount),
        )
        return ApiResponse(
            data=_entry(record).model_dump(mode="json", by_alias=True),
            message="Settlement recorded successfully"
        )

    except SessionStoreError as e:
        raise store_error_to_http(e, member_not_found_status=400)
    except Exception as e:
        logger.error(f"Error recording settlement for session {session_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))
