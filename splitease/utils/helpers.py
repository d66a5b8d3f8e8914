"""
Small helpers shared by the session store, the API and the CLI.
"""

from __future__ import annotations

import random
import time
from decimal import Decimal
from typing import Optional

_last_id_timestamp = 0
_last_id_counter = 0

CURRENCY_SYMBOLS = {
    "INR": "₹",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
}

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_id() -> str:
    """Millisecond timestamp in base36 plus a counter for ids minted in the same millisecond."""
    global _last_id_timestamp, _last_id_counter

    now = int(time.time() * 1000)
    if now == _last_id_timestamp:
        _last_id_counter += 1
    else:
        _last_id_timestamp = now
        _last_id_counter = 0
    return f"{_to_base36(now)}{_to_base36(_last_id_counter)}"


def generate_pin(length: int = 6) -> str:
    return str(random.randrange(10 ** length)).zfill(length)


def random_avatar_color() -> str:
    return f"hsl({random.randrange(360)}, 70%, 70%)"


def get_currency_symbol(currency: Optional[str] = "INR") -> str:
    if not currency:
        return ""
    return CURRENCY_SYMBOLS.get(currency.upper(), currency)


def format_currency(amount: Decimal, currency: Optional[str] = None) -> str:
    """Format an amount with two decimals and thousands separators, optionally prefixed by a symbol."""
    amount = Decimal(amount)
    formatted = f"{abs(amount):,.2f}"
    sign = "-" if amount < 0 else ""
    if currency:
        return f"{sign}{get_currency_symbol(currency)}{formatted}"
    return f"{sign}{formatted}"
