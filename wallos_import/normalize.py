"""Raw Wallos record -> ``NormalizedSubscription`` mapping.

Mapping rules:
- ``amount``: ``-parse_price(Price)``; subscriptions are always outflows
- ``frequency``/``interval``: ``parse_cycle(Payment Cycle)``
- ``is_active``: ``State == "Enabled"`` and ``Active == "Yes"`` (exact match)
- ``id``: fresh UUID4 per call, so repeated runs never share identifiers
- everything else is passed through verbatim
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Mapping
from typing import Any

from .cycles import parse_cycle
from .models import NormalizedSubscription, RawSubscription, RecurrenceSpec
from .prices import parse_price


def normalize_subscription(raw: RawSubscription | Mapping[str, Any]) -> NormalizedSubscription:
    """Build the canonical view of a single Wallos subscription."""

    if not isinstance(raw, RawSubscription):
        raw = RawSubscription.model_validate(raw)

    cycle = parse_cycle(raw.payment_cycle)
    return NormalizedSubscription(
        id=str(uuid.uuid4()),
        name=raw.name,
        amount=-parse_price(raw.price),
        next_payment_date=raw.next_payment,
        frequency=cycle.frequency,
        interval=cycle.interval,
        category=raw.category,
        payment_method=raw.payment_method,
        notes=raw.notes,
        url=raw.url,
        is_active=raw.state == "Enabled" and raw.active == "Yes",
        original_price=raw.price,
    )


def normalize_all(
    records: Iterable[RawSubscription | Mapping[str, Any]],
) -> list[NormalizedSubscription]:
    return [normalize_subscription(r) for r in records]


def to_recurrence_spec(sub: NormalizedSubscription) -> RecurrenceSpec:
    """Recurrence for an Actual schedule; open-ended, starting at the next payment."""

    return RecurrenceSpec(
        frequency=sub.frequency,
        interval=sub.interval,
        start=sub.next_payment_date,
        end_mode="never",
    )


__all__ = ["normalize_all", "normalize_subscription", "to_recurrence_spec"]
