"""Payment-cycle parsing for Wallos subscriptions.

Wallos stores the billing cycle as free text ("Monthly", "Every 3 Weeks",
"Bi-weekly", ...). ``parse_cycle`` maps that text onto an Actual recurrence
``(frequency, interval)`` using an ordered rule table; the first matching rule
wins and anything unrecognized falls back to monthly with a warning.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import NamedTuple

from .logging_setup import get_logger
from .models import Frequency

logger = get_logger("wallos_import.cycles")


class Cycle(NamedTuple):
    frequency: Frequency
    interval: int


DEFAULT_CYCLE = Cycle("monthly", 1)

_EXACT: dict[str, Cycle] = {
    "daily": Cycle("daily", 1),
    "weekly": Cycle("weekly", 1),
    "monthly": Cycle("monthly", 1),
    "yearly": Cycle("yearly", 1),
    "annually": Cycle("yearly", 1),
}

_EVERY_RE = re.compile(r"every\s+(\d+)\s*(day|week|month|year)s?", re.IGNORECASE)

_UNIT_FREQUENCY: dict[str, Frequency] = {
    "day": "daily",
    "week": "weekly",
    "month": "monthly",
    "year": "yearly",
}


def _exact(text: str) -> Cycle | None:
    return _EXACT.get(text)


def _every_n(text: str) -> Cycle | None:
    m = _EVERY_RE.search(text)
    if m is None:
        return None
    try:
        interval = int(m.group(1))
    except ValueError:
        return None
    # "every 0 weeks" is not a usable recurrence; let later rules decide.
    if interval < 1:
        return None
    return Cycle(_UNIT_FREQUENCY[m.group(2).lower()], interval)


def _contains(*needles: str, result: Cycle) -> Callable[[str], Cycle | None]:
    def rule(text: str) -> Cycle | None:
        return result if any(n in text for n in needles) else None

    return rule


# Order matters: the first rule returning a cycle wins.
_RULES: tuple[Callable[[str], Cycle | None], ...] = (
    _exact,
    _every_n,
    _contains("biweekly", "bi-weekly", result=Cycle("weekly", 2)),
    _contains("bimonthly", "bi-monthly", result=Cycle("monthly", 2)),
    _contains("quarterly", result=Cycle("monthly", 3)),
    _contains("semi-annual", "semiannual", result=Cycle("monthly", 6)),
)


def parse_cycle(text: str | None) -> Cycle:
    """Return the recurrence for a Wallos payment-cycle description.

    Matching is case-insensitive and ignores surrounding whitespace. The
    function never raises: unrecognized input yields ``monthly``/``1`` and a
    warning naming the original text.
    """

    normalized = (text or "").strip().lower()
    for rule in _RULES:
        cycle = rule(normalized)
        if cycle is not None:
            return cycle
    logger.warning('Unrecognized payment cycle: "%s", defaulting to monthly', text)
    return DEFAULT_CYCLE


__all__ = ["Cycle", "DEFAULT_CYCLE", "parse_cycle"]
