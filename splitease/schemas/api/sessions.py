"""
API schemas for session endpoints.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from splitease.schemas.api.members import MemberResponse


class SessionCreate(BaseModel):
    """Schema for creating a session"""
    title: str = Field("", max_length=255, description="Session title, defaults to 'Untitled Session'")
    currency: Optional[str] = Field(None, min_length=3, max_length=3, description="ISO currency code for display")


class SessionUpdate(BaseModel):
    """Schema for updating a session (all fields optional)"""
    title: Optional[str] = Field(None, max_length=255)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)


class SessionJoin(BaseModel):
    """Schema for joining a session by PIN"""
    pin: str = Field(..., pattern=r"^\d{4,10}$", description="Numeric session PIN")


class SessionSummary(BaseModel):
    """Session without its expense and activity history"""
    id: str
    pin: str
    title: str
    currency: str
    created_at: datetime
    members: List[MemberResponse]
    expense_count: int
    settlement_count: int

    model_config = ConfigDict(from_attributes=True)
