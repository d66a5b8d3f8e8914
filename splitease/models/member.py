from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class Member(BaseModel):
    """A person taking part in a session"""

    id: str = Field(..., description="Member ID, unique within the session")
    name: str = Field(..., description="Display name")
    avatar_color: Optional[str] = Field(None, description="Display colour, e.g. hsl(210, 70%, 70%)")
