"""
Split validation shared by the API schemas and the session store.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, List, Optional

from splitease.models.expense import SplitType

from .money import SPLIT_TOLERANCE


def check_custom_splits(
    amount: Optional[Decimal],
    participants: Optional[List[str]],
    split: Optional[SplitType],
    custom_splits: Optional[Dict[str, Decimal]],
) -> None:
    """Raise ``ValueError`` if ``custom_splits`` cannot divide the expense.

    Arguments left as ``None`` are not checked, so partial request bodies
    can be validated as far as they go. Equal splits ignore the map.
    """
    if split in (None, SplitType.EQUAL):
        return
    if not custom_splits:
        raise ValueError(f"custom_splits is required for {split.value} split")

    if participants is not None:
        extra = set(custom_splits) - set(participants)
        if extra:
            raise ValueError(f"custom_splits references non-participants: {', '.join(sorted(extra))}")

    if any(value < 0 for value in custom_splits.values()):
        raise ValueError("custom_splits values must not be negative")

    total = sum(custom_splits.values(), Decimal(0))
    if split == SplitType.PERCENTAGE:
        if abs(total - Decimal(100)) > SPLIT_TOLERANCE:
            raise ValueError(f"percentages must add up to 100, got {total}")
    elif amount is not None and abs(total - amount) > SPLIT_TOLERANCE:
        raise ValueError(f"split amounts must add up to {amount}, got {total}")
