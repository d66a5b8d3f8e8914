"""
Decimal helpers for money arithmetic.

All amounts are carried as ``Decimal`` and quantized to the minor unit
(cents) with ``ROUND_HALF_UP``. Even splits hand leftover cents to the
leading keys so that shares always add back up to the original amount.
"""

from __future__ import annotations

from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, Mapping, Sequence

from splitease.utils.logger import get_logger

logger = get_logger(__name__)

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
MINOR_UNITS_PER_MAJOR = 100
ROUNDING = ROUND_HALF_UP

# Fixed tolerance below which planner amounts are treated as zero
EPSILON = Decimal("1e-9")

# Slack allowed between custom splits and the total they divide
SPLIT_TOLERANCE = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    """Coerce ints, floats, strings and Decimals to Decimal.

    Floats go through ``str`` so that ``0.1`` becomes ``Decimal("0.1")``
    rather than its binary expansion. Values that cannot be parsed become
    zero and are logged; callers in the calculation path must not raise.
    """
    if isinstance(value, Decimal):
        return value
    if value is None:
        return Decimal(0)
    try:
        if isinstance(value, float):
            return Decimal(str(value))
        return Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        logger.warning(f"Could not interpret {value!r} as an amount, treating it as 0")
        return Decimal(0)


def quantize_amount(value: Any) -> Decimal:
    """Round to the nearest cent"""
    return to_decimal(value).quantize(CENT, rounding=ROUNDING)


def to_minor_units(value: Any) -> int:
    """Convert a major-unit amount to integer cents"""
    cents = (to_decimal(value) * MINOR_UNITS_PER_MAJOR).quantize(Decimal(1), rounding=ROUNDING)
    return int(cents)


def from_minor_units(cents: int) -> Decimal:
    """Convert integer cents back to a 2 dp Decimal"""
    return (Decimal(cents) / MINOR_UNITS_PER_MAJOR).quantize(CENT)


def split_evenly(amount: Any, keys: Sequence[str]) -> Dict[str, Decimal]:
    """Split ``amount`` into equal cent shares, one per key.

    Leftover cents are given one at a time to the first keys in order, e.g.
    10.00 over three keys gives 3.34, 3.33, 3.33.
    """
    if not keys:
        return {}

    cents = to_minor_units(amount)
    base, remainder = divmod(cents, len(keys))

    shares: Dict[str, Decimal] = {}
    for index, key in enumerate(keys):
        share = base + 1 if index < remainder else base
        shares[key] = from_minor_units(share)
    return shares


def allocate_cents(amounts: Mapping[str, Any], total: Any) -> Dict[str, Decimal]:
    """Round ``amounts`` to cents so that they add up to ``total`` exactly.

    Every amount is floored to whole cents first. The cents still missing
    go one at a time to the keys with the largest dropped fraction, ties in
    key order. Surplus cents are taken back from the smallest fractions.
    """
    if not amounts:
        return {}

    exact = {key: to_decimal(value) * MINOR_UNITS_PER_MAJOR for key, value in amounts.items()}
    cents = {key: int(value.to_integral_value(rounding=ROUND_FLOOR)) for key, value in exact.items()}
    leftover = to_minor_units(total) - sum(cents.values())

    # sorted() is stable with reverse=True, so ties keep key order
    order = sorted(cents, key=lambda key: exact[key] - cents[key], reverse=True)
    step = 1
    if leftover < 0:
        order.reverse()
        step = -1

    for index in range(abs(leftover)):
        cents[order[index % len(order)]] += step

    return {key: from_minor_units(value) for key, value in cents.items()}
