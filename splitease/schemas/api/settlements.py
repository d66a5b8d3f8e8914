from __future__ import annotations

from decimal import Decimal
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class SettlementEntry(BaseModel):
    """A single transfer, as suggested by the plan or recorded as done."""
    model_config = ConfigDict(populate_by_name=True)

    from_member: str = Field(..., alias="from", description="Member ID paying")
    to_member: str = Field(..., alias="to", description="Member ID receiving")
    amount: Decimal = Field(..., gt=Decimal("0"), decimal_places=2, description="Transfer amount")


class MemberBalance(BaseModel):
    """Net position of one member."""
    member_id: str = Field(..., description="Member ID")
    name: str = Field(..., description="Member display name")
    paid: Decimal = Field(..., description="Total this member paid for")
    share: Decimal = Field(..., description="Total of this member's shares")
    balance: Decimal = Field(..., description="Positive: owed by the group, negative: owes the group")


class BalanceSummary(BaseModel):
    """Balances of every member in a session."""
    currency: str
    balances: List[MemberBalance] = Field(default_factory=list)
    total_outstanding: Decimal = Field(..., description="Sum of positive balances")


class SettlementPlan(BaseModel):
    """Transfers that would settle every balance."""
    currency: str
    settlements: List[SettlementEntry] = Field(default_factory=list)
    total_amount: Decimal = Field(..., description="Sum of all suggested transfers")
