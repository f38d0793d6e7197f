"""Price parsing for Wallos subscriptions.

Wallos renders prices for display ("$15.99", "€9.99", "1,299.00 USD").
``parse_price`` strips everything but digits and periods and converts the
leading decimal number to integer minor units.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

_NON_NUMERIC_RE = re.compile(r"[^\d.]")
# Leading decimal number of the cleaned text; trailing garbage such as a
# second period ("1.2.3") is ignored.
_LEADING_NUMBER_RE = re.compile(r"\d+(?:\.\d*)?|\.\d+")


def parse_price(text: str | None) -> int:
    """Return the price in minor units (cents), or ``0`` when unparseable.

    The result is never negative; expense sign handling happens in the
    normalizer.
    """

    cleaned = _NON_NUMERIC_RE.sub("", text or "")
    m = _LEADING_NUMBER_RE.match(cleaned)
    if m is None:
        return 0
    try:
        value = Decimal(m.group(0))
    except InvalidOperation:  # pragma: no cover - the regex only admits valid literals
        return 0
    return int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


__all__ = ["parse_price"]
