"""Destination budget: capability interface and the Actual Budget client.

The importer only talks to :class:`BudgetClient`. :class:`ActualBudgetClient`
implements it with the ``actualpy`` library; tests substitute an in-memory
fake. Amounts cross this boundary as integer minor units.

``actualpy`` is imported lazily so that importing this module (and running
the parsers or tests) does not require the library or a reachable server.
"""

from __future__ import annotations

import datetime
from contextlib import ExitStack
from decimal import Decimal
from typing import Any, Protocol

from .logging_setup import get_logger
from .models import Account, Budget, Payee, ScheduleRequest

logger = get_logger("wallos_import.destination")


class BudgetClient(Protocol):
    """Operations the import needs from the destination budgeting application."""

    def connect(self) -> None: ...

    def list_budgets(self) -> list[Budget]: ...

    def open_budget(self, budget_id: str) -> None: ...

    def list_payees(self) -> list[Payee]: ...

    def list_accounts(self) -> list[Account]: ...

    def create_payee(self, name: str) -> str: ...

    def create_schedule(self, request: ScheduleRequest) -> str: ...

    def sync(self) -> None: ...

    def shutdown(self) -> None: ...


def cents_to_decimal(amount: int) -> Decimal:
    return Decimal(amount) / Decimal(100)


class ActualBudgetClient:
    """:class:`BudgetClient` backed by an Actual sync server via ``actualpy``.

    Parameters
    ----------
    server_url / password:
        Actual server login. ``actualpy`` always works against a server, so a
        missing URL is reported when :meth:`connect` runs.
    data_dir:
        Directory where the downloaded budget is stored.
    encryption_password:
        Only needed for end-to-end encrypted budget files.
    """

    def __init__(
        self,
        *,
        server_url: str | None,
        password: str | None,
        data_dir: str,
        encryption_password: str | None = None,
    ) -> None:
        self._server_url = server_url
        self._password = password
        self._data_dir = data_dir
        self._encryption_password = encryption_password
        self._actual: Any | None = None
        self._budget: ExitStack | None = None
        self._synced = False

    # -- lifecycle ----------------------------------------------------------

    def connect(self) -> None:
        if not self._server_url:
            raise RuntimeError("ACTUAL_SERVER_URL is required to connect to Actual")

        from actual import Actual

        logger.info("Connecting to Actual server at %s", self._server_url)
        self._actual = Actual(
            base_url=self._server_url,
            password=self._password,
            encryption_password=self._encryption_password,
            data_dir=self._data_dir,
        )

    def _client(self) -> Any:
        if self._actual is None:
            raise RuntimeError("Actual client is not connected")
        return self._actual

    def list_budgets(self) -> list[Budget]:
        files = self._client().list_user_files().data
        return [Budget(id=f.file_id, name=f.name) for f in files if not f.deleted]

    def open_budget(self, budget_id: str) -> None:
        """Open a budget by file id, sync id (group id) or name.

        Entering the ``Actual`` context downloads the selected file and opens
        the database session used by every later query.
        """

        actual = self._client()
        match = None
        for f in actual.list_user_files().data:
            if f.deleted:
                continue
            if budget_id in (f.file_id, f.group_id, f.name):
                match = f
                break
        if match is None:
            raise RuntimeError(f"Budget not found: {budget_id}")
        actual.set_file(match)
        stack = ExitStack()
        stack.enter_context(actual)
        self._budget = stack
        logger.info("Opened budget %s (%s)", match.name, match.file_id)

    def shutdown(self) -> None:
        if self._actual is None:
            return
        if self._budget is not None:
            with self._budget:
                if not self._synced:
                    # Keep unsynced changes in the local copy under data_dir.
                    self._actual.session.commit()
        self._actual = None
        self._budget = None

    def sync(self) -> None:
        # Actual.commit() flushes the session and uploads the change messages.
        self._client().commit()
        self._synced = True

    # -- entities -----------------------------------------------------------

    def list_payees(self) -> list[Payee]:
        from actual.queries import get_payees

        return [Payee(id=p.id, name=p.name) for p in get_payees(self._client().session) if p.name]

    def list_accounts(self) -> list[Account]:
        from actual.queries import get_accounts

        return [
            Account(id=a.id, name=a.name or "", closed=bool(a.closed))
            for a in get_accounts(self._client().session)
        ]

    def create_payee(self, name: str) -> str:
        from actual.queries import create_payee

        payee = create_payee(self._client().session, name)
        return payee.id

    def create_schedule(self, request: ScheduleRequest) -> str:
        from actual.queries import create_schedule
        from actual.schedules import Schedule

        rec = request.recurrence
        recurrence = Schedule(
            start=datetime.date.fromisoformat(rec.start),
            frequency=rec.frequency,
            interval=rec.interval,
        )
        schedule = create_schedule(
            self._client().session,
            recurrence,
            cents_to_decimal(request.amount),
            request.amount_op,
            name=request.name,
            payee=request.payee_id,
            account=request.account_id,
        )
        return schedule.id


__all__ = ["ActualBudgetClient", "BudgetClient", "cents_to_decimal"]
