"""Environment-driven settings for an import run.

Variables
---------
- ``ACTUAL_DATA_DIR``: local Actual data directory (default ``./actual-data``)
- ``ACTUAL_BUDGET_ID``: budget to open; the first available budget otherwise
- ``ACTUAL_SERVER_URL`` / ``ACTUAL_PASSWORD``: Actual sync server credentials
- ``ACTUAL_ENCRYPTION_PASSWORD``: only for end-to-end encrypted budgets
- ``WALLOS_URL`` / ``WALLOS_API_KEY``: required for ``--api`` mode only

Blank values count as unset. The CLI loads ``.env`` before calling
:meth:`ImportSettings.from_env`.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_DATA_DIR = "./actual-data"


class UsageError(ValueError):
    """Missing or invalid command-line input or environment for the chosen mode."""


def _get(env: Mapping[str, str], key: str) -> str | None:
    value = env.get(key)
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True, slots=True)
class ImportSettings:
    data_dir: str = DEFAULT_DATA_DIR
    budget_id: str | None = None
    server_url: str | None = None
    password: str | None = None
    encryption_password: str | None = None
    wallos_url: str | None = None
    wallos_api_key: str | None = None

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> ImportSettings:
        env = os.environ if env is None else env
        return cls(
            data_dir=_get(env, "ACTUAL_DATA_DIR") or DEFAULT_DATA_DIR,
            budget_id=_get(env, "ACTUAL_BUDGET_ID"),
            server_url=_get(env, "ACTUAL_SERVER_URL"),
            password=_get(env, "ACTUAL_PASSWORD"),
            encryption_password=_get(env, "ACTUAL_ENCRYPTION_PASSWORD"),
            wallos_url=_get(env, "WALLOS_URL"),
            wallos_api_key=_get(env, "WALLOS_API_KEY"),
        )

    def require_wallos(self) -> tuple[str, str]:
        """Return ``(WALLOS_URL, WALLOS_API_KEY)`` or raise :class:`UsageError`."""

        if not self.wallos_url or not self.wallos_api_key:
            raise UsageError(
                "--api mode requires WALLOS_URL and WALLOS_API_KEY environment variables"
            )
        return self.wallos_url, self.wallos_api_key


__all__ = ["DEFAULT_DATA_DIR", "ImportSettings", "UsageError"]
