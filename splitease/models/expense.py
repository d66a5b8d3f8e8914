from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .category import OTHER_CATEGORY


class SplitType(str, Enum):
    """How an expense amount is divided among its participants"""

    EQUAL = "equal"
    PERCENTAGE = "percentage"
    AMOUNT = "amount"


class Expense(BaseModel):
    """Shared expense paid by one member on behalf of the participants"""

    id: str
    title: str
    amount: Decimal = Field(..., description="Total amount paid")
    paid_by: str = Field(..., description="Member ID of the payer")
    participants: List[str] = Field(default_factory=list, description="Member IDs sharing the expense")
    split: SplitType = SplitType.EQUAL
    # percentage points for PERCENTAGE, absolute amounts for AMOUNT
    custom_splits: Optional[Dict[str, Decimal]] = None
    category: str = Field(OTHER_CATEGORY, description="Category ID, see DEFAULT_CATEGORIES")
    date: datetime
    created_at: datetime
    description: Optional[str] = None
