"""Adapter for Wallos JSON export files.

Accepted top-level shapes:
- a bare array of subscription objects
- ``{"subscriptions": [...]}``

Each object uses the Wallos export column names (``Name``, ``Payment Cycle``,
``Next Payment``, ``Price``, ``State``, ``Active``, ...).
"""

from __future__ import annotations

import json
from os import PathLike
from pathlib import Path

from ...logging_setup import get_logger
from ...models import NormalizedSubscription
from ..utils import InvalidExportFormat, to_normalized, unwrap_records

logger = get_logger("wallos_import.ingest.wallos_export")

_WHAT = "Invalid Wallos export format"


def parse_export(content: str) -> list[NormalizedSubscription]:
    """Parse the text of a Wallos export into normalized subscriptions."""

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise InvalidExportFormat(f"{_WHAT}: not valid JSON ({e})") from e
    records = unwrap_records(data, keys=("subscriptions",), what=_WHAT)
    return to_normalized(records, what=_WHAT)


def load_export(path: str | PathLike[str]) -> list[NormalizedSubscription]:
    """Read ``path`` as UTF-8 and parse it with :func:`parse_export`.

    ``OSError`` (missing file, permissions) propagates to the caller.
    """

    p = Path(path)
    logger.debug("Reading Wallos export from %s", p)
    return parse_export(p.read_text(encoding="utf-8"))


__all__ = ["load_export", "parse_export"]
