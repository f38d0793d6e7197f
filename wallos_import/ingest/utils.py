"""Ingest helpers shared by the export-file and API adapters.

Both sources deliver the same Wallos record shape, wrapped differently. This
module unwraps the payload, checks that each record is a JSON object, and
hands the records to the normalizer.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ..models import NormalizedSubscription, RawSubscription
from ..normalize import normalize_all


class InvalidExportFormat(ValueError):
    """Raised when a Wallos payload does not have a recognized shape."""


def unwrap_records(data: Any, *, keys: Sequence[str], what: str) -> list[Any]:
    """Return the list of records from ``data``.

    ``data`` may be a bare list or an object holding the list under one of
    ``keys`` (checked in order). Anything else raises
    :class:`InvalidExportFormat` mentioning the accepted shapes.
    """

    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for key in keys:
            value = data.get(key)
            if isinstance(value, list):
                return value
    shapes = " or ".join(["array", *(f"{{ {k}: [...] }}" for k in keys)])
    raise InvalidExportFormat(f"{what}: expected {shapes}")


def to_normalized(records: list[Any], *, what: str) -> list[NormalizedSubscription]:
    raw: list[RawSubscription] = []
    for pos, rec in enumerate(records):
        if not isinstance(rec, dict):
            raise InvalidExportFormat(
                f"{what}: subscription #{pos} is {type(rec).__name__}, expected an object"
            )
        raw.append(RawSubscription.model_validate(rec))
    return normalize_all(raw)


__all__ = ["InvalidExportFormat", "to_normalized", "unwrap_records"]
