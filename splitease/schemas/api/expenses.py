"""
API schemas for expense endpoints.

These models are the entry-form validation layer: the balance calculator
trusts what gets past them.
"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

from splitease.models.category import OTHER_CATEGORY
from splitease.models.expense import SplitType
from splitease.services.calculations.validation import check_custom_splits


class ExpenseCreate(BaseModel):
    """Request model for adding an expense"""
    title: str = Field(..., min_length=1, max_length=255)
    amount: Decimal = Field(..., ge=Decimal("0.01"), decimal_places=2, description="Total amount paid")
    paid_by: str = Field(..., min_length=1, description="Member ID of the payer")
    participants: List[str] = Field(..., min_length=1, description="Member IDs sharing the expense")
    split: SplitType = SplitType.EQUAL
    custom_splits: Optional[Dict[str, Decimal]] = None
    category: str = Field(OTHER_CATEGORY, max_length=50, description="Category ID")
    date: Optional[datetime] = None
    description: Optional[str] = None

    @model_validator(mode="after")
    def validate_splits(self):
        check_custom_splits(self.amount, self.participants, self.split, self.custom_splits)
        return self


class ExpenseUpdate(BaseModel):
    """Request model for updating an expense (all fields optional)"""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    amount: Optional[Decimal] = Field(None, ge=Decimal("0.01"), decimal_places=2)
    paid_by: Optional[str] = None
    participants: Optional[List[str]] = Field(None, min_length=1)
    split: Optional[SplitType] = None
    custom_splits: Optional[Dict[str, Decimal]] = None
    category: Optional[str] = Field(None, max_length=50)
    date: Optional[datetime] = None
    description: Optional[str] = None

    @model_validator(mode="after")
    def validate_splits(self):
        if self.custom_splits is not None:
            check_custom_splits(self.amount, self.participants, self.split, self.custom_splits)
        return self
