"""Public interface for the ``wallos_import`` package.

Imports Wallos subscription records into Actual Budget as recurring
schedules. This module only re-exports the stable import surface.
"""

from .accounts import SKIP, AccountResolver, SkipSubscription
from .config import ImportSettings, UsageError
from .cycles import Cycle, parse_cycle
from .destination import ActualBudgetClient, BudgetClient
from .importer import NoBudgetsError, run_import
from .ingest import (
    InvalidExportFormat,
    WallosApiError,
    fetch_subscriptions,
    load_export,
    parse_export,
)
from .models import (
    Account,
    Budget,
    ImportOutcome,
    NormalizedSubscription,
    Payee,
    RawSubscription,
    RecurrenceSpec,
    ScheduleRequest,
)
from .normalize import normalize_subscription, to_recurrence_spec
from .prices import parse_price

__all__ = [
    # Parsing / normalization
    "parse_cycle",
    "parse_price",
    "normalize_subscription",
    "to_recurrence_spec",
    # Sources
    "parse_export",
    "load_export",
    "fetch_subscriptions",
    # Resolution / import
    "AccountResolver",
    "SKIP",
    "SkipSubscription",
    "run_import",
    "BudgetClient",
    "ActualBudgetClient",
    "ImportSettings",
    # Errors
    "InvalidExportFormat",
    "WallosApiError",
    "UsageError",
    "NoBudgetsError",
    # Models / types
    "Cycle",
    "RawSubscription",
    "NormalizedSubscription",
    "RecurrenceSpec",
    "Account",
    "Payee",
    "Budget",
    "ScheduleRequest",
    "ImportOutcome",
]
