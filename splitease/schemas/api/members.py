"""
API schemas for member endpoints.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class MemberBase(BaseModel):
    """Base member schema with common fields"""
    name: str = Field(..., min_length=1, max_length=255, description="Display name of the member")


class MemberCreate(MemberBase):
    """Schema for adding a member to a session"""
    pass


class MemberUpdate(MemberBase):
    """Schema for renaming a member"""
    pass


class MemberResponse(MemberBase):
    """Schema for member response"""
    id: str
    avatar_color: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
