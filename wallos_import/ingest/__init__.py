"""Subscription sources: Wallos JSON exports and the Wallos HTTP API."""

from .adapters.wallos_api import WallosApiError, fetch_subscriptions
from .adapters.wallos_export import load_export, parse_export
from .utils import InvalidExportFormat

__all__ = [
    "InvalidExportFormat",
    "WallosApiError",
    "fetch_subscriptions",
    "load_export",
    "parse_export",
]
