from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class Settlement(BaseModel):
    """A transfer from a debtor to a creditor.

    Used both for suggested plan entries and for completed records.
    Serialized as ``{"from": ..., "to": ..., "amount": ...}``.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    from_member: str = Field(..., alias="from", description="Member ID paying")
    to_member: str = Field(..., alias="to", description="Member ID receiving")
    amount: Decimal = Field(..., description="Transfer amount")
