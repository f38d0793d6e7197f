"""Data models for ``wallos_import``.

``RawSubscription`` mirrors one record of a Wallos export (or API response)
and is validated with pydantic using the exact Wallos column names as aliases.
Everything downstream of the normalizer is a small frozen dataclass.

Amounts are always integer minor units (cents). Negative amounts are outflows.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

type Frequency = Literal["daily", "weekly", "monthly", "yearly"]
"""Recurrence units understood by Actual Budget schedules."""

# ---------------------------------------------------------------------------
# Source records
# ---------------------------------------------------------------------------


class RawSubscription(BaseModel):
    """A subscription exactly as Wallos exports it.

    Only the shape is checked: every field is optional and coerced to a string
    so hand-edited exports and API payloads with numeric prices still load.
    Unknown keys are ignored.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    name: str = Field("", alias="Name")
    payment_cycle: str = Field("", alias="Payment Cycle")
    next_payment: str = Field("", alias="Next Payment")
    renewal: str = Field("", alias="Renewal")
    category: str = Field("", alias="Category")
    payment_method: str = Field("", alias="Payment Method")
    paid_by: str = Field("", alias="Paid By")
    price: str = Field("", alias="Price")
    notes: str = Field("", alias="Notes")
    url: str = Field("", alias="URL")
    state: str = Field("", alias="State")
    notifications: str = Field("", alias="Notifications")
    cancellation_date: str | None = Field(None, alias="Cancellation Date")
    active: str = Field("", alias="Active")

    @field_validator(
        "name",
        "payment_cycle",
        "next_payment",
        "renewal",
        "category",
        "payment_method",
        "paid_by",
        "price",
        "notes",
        "url",
        "state",
        "notifications",
        "active",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, v: Any) -> str:
        if v is None:
            return ""
        if isinstance(v, bool):
            return "Yes" if v else "No"
        return v if isinstance(v, str) else str(v)

    @field_validator("cancellation_date", mode="before")
    @classmethod
    def _coerce_optional_text(cls, v: Any) -> str | None:
        if v is None or v == "":
            return None
        return v if isinstance(v, str) else str(v)


# ---------------------------------------------------------------------------
# Normalized view
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class NormalizedSubscription:
    """Canonical subscription produced once per raw record by the normalizer.

    Attributes
    ----------
    id:
        Random UUID4 string generated at normalization time. Not stable across
        runs.
    amount:
        Signed minor units; always ``<= 0`` because subscriptions are expenses.
    frequency / interval:
        Parsed recurrence. ``interval`` is always ``>= 1``.
    is_active:
        ``True`` only when the Wallos state is ``Enabled`` and the active flag
        is ``Yes``.
    original_price:
        The unparsed Wallos price string, kept for display.
    """

    id: str
    name: str
    amount: int
    next_payment_date: str
    frequency: Frequency
    interval: int
    category: str
    payment_method: str
    notes: str
    url: str
    is_active: bool
    original_price: str


@dataclass(frozen=True, slots=True)
class RecurrenceSpec:
    """Recurrence rule in the shape Actual expects for a schedule date."""

    frequency: Frequency
    interval: int
    start: str
    end_mode: Literal["never"] = "never"


# ---------------------------------------------------------------------------
# Destination entities
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Account:
    id: str
    name: str
    closed: bool = False


@dataclass(frozen=True, slots=True)
class Payee:
    id: str
    name: str


@dataclass(frozen=True, slots=True)
class Budget:
    id: str
    name: str


@dataclass(frozen=True, slots=True)
class ScheduleRequest:
    """Arguments for creating one schedule in the destination budget."""

    name: str
    payee_id: str
    account_id: str
    amount: int
    recurrence: RecurrenceSpec
    amount_op: Literal["is"] = "is"


@dataclass(slots=True)
class ImportOutcome:
    """Per-run tally; lives only for the duration of one import."""

    created: int = 0
    skipped: int = 0
    failed: int = 0
