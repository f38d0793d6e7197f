"""Thin client for the Wallos subscriptions API.

Single ``GET {base_url}/api/subscriptions`` authenticated with a bearer token.
The response body may be a bare array, ``{"subscriptions": [...]}`` or
``{"data": [...]}``.

This client intentionally omits retries, timeouts and pagination.
"""

from __future__ import annotations

import json
import urllib.error
import urllib.request

from ...logging_setup import get_logger
from ...models import NormalizedSubscription
from ..utils import InvalidExportFormat, to_normalized, unwrap_records

logger = get_logger("wallos_import.ingest.wallos_api")

_WHAT = "Unexpected API response format"


class WallosApiError(RuntimeError):
    """Non-success response (or transport failure) from the Wallos API."""

    def __init__(self, message: str, *, status: int | None = None, reason: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.reason = reason


def subscriptions_endpoint(base_url: str) -> str:
    base = base_url[:-1] if base_url.endswith("/") else base_url
    return f"{base}/api/subscriptions"


def fetch_subscriptions(base_url: str, api_key: str) -> list[NormalizedSubscription]:
    """Fetch every subscription from a Wallos instance and normalize it."""

    endpoint = subscriptions_endpoint(base_url)
    logger.info("Fetching subscriptions from: %s", endpoint)

    req = urllib.request.Request(endpoint, method="GET")
    req.add_header("Authorization", f"Bearer {api_key}")
    req.add_header("Accept", "application/json")

    try:
        with urllib.request.urlopen(req) as resp:
            body = resp.read()
    except urllib.error.HTTPError as e:
        raise WallosApiError(
            f"Wallos API request failed: {e.code} {e.reason}", status=e.code, reason=str(e.reason)
        ) from e
    except urllib.error.URLError as e:
        raise WallosApiError(f"Wallos API request failed: {e.reason}") from e

    try:
        data = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise InvalidExportFormat(f"{_WHAT}: body is not valid JSON") from e

    records = unwrap_records(data, keys=("subscriptions", "data"), what=_WHAT)
    return to_normalized(records, what=_WHAT)


__all__ = ["WallosApiError", "fetch_subscriptions", "subscriptions_endpoint"]
