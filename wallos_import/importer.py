"""End-to-end import of Wallos subscriptions as Actual schedules.

Stages (linear, no backtracking):

1. fetch subscriptions from the source and keep the active ones
2. connect to the destination and open a budget
3. load payees and accounts; resolve the default account once
4. for each active subscription: payee -> account -> schedule
5. print the tally and optionally sync

A failure while processing one subscription is reported and counted; the
loop continues with the next one. Everything else propagates.

Re-running the same import creates the schedules again. Payees are reused by
name, schedules are not deduplicated.
"""

from __future__ import annotations

import builtins
from collections.abc import Callable, Sequence

from .accounts import SKIP, AccountChooser, AccountResolver, name_key
from .destination import BudgetClient
from .logging_setup import get_logger
from .models import Account, ImportOutcome, NormalizedSubscription, Payee, ScheduleRequest
from .normalize import to_recurrence_spec
from .term_ui import SEPARATOR, confirm, prompt_account_selection

logger = get_logger("wallos_import.importer")

type SubscriptionSource = Callable[[], Sequence[NormalizedSubscription]]


class NoBudgetsError(RuntimeError):
    """No budget id was configured and the destination has no budgets."""


class PayeeCache:
    """Case-insensitive payee name -> id map that creates missing payees."""

    def __init__(
        self,
        client: BudgetClient,
        payees: Sequence[Payee],
        *,
        print_fn: Callable[..., None] = builtins.print,
    ) -> None:
        self._client = client
        self._print = print_fn
        self._ids: dict[str, str] = {name_key(p.name): p.id for p in payees}

    def get_or_create(self, name: str) -> str:
        key = name_key(name)
        payee_id = self._ids.get(key)
        if payee_id is None:
            self._print(f"  Creating payee: {name}")
            payee_id = self._client.create_payee(name)
            self._ids[key] = payee_id
        return payee_id


def describe_schedule(sub: NormalizedSubscription, account_name: str) -> str:
    repeat = f" x{sub.interval}" if sub.interval > 1 else ""
    return (
        f"✓ Created schedule: {sub.name} "
        f"({sub.original_price}, {sub.frequency}{repeat}) → {account_name}"
    )


def _open_budget(
    client: BudgetClient, budget_id: str | None, print_fn: Callable[..., None]
) -> None:
    if budget_id:
        print_fn(f"Downloading budget: {budget_id}")
        client.open_budget(budget_id)
        return
    budgets = client.list_budgets()
    if not budgets:
        raise NoBudgetsError("No budgets found. Please specify ACTUAL_BUDGET_ID.")
    print_fn(f"Using first available budget: {budgets[0].name}")
    client.open_budget(budgets[0].id)


def _interactive_chooser(print_fn: Callable[..., None]) -> AccountChooser:
    def choose(sub: NormalizedSubscription, accounts: Sequence[Account]) -> str | None:
        return prompt_account_selection(
            accounts,
            subscription_name=sub.name,
            payment_method=sub.payment_method,
            notes=sub.notes,
            print_fn=print_fn,
        )

    return choose


def _ask_sync() -> bool:
    return confirm("Sync changes to server?", default_yes=True)


def print_summary(outcome: ImportOutcome, print_fn: Callable[..., None] = builtins.print) -> None:
    print_fn("")
    print_fn(SEPARATOR)
    print_fn("Import complete:")
    print_fn(f"  ✓ {outcome.created} schedules created")
    if outcome.skipped > 0:
        print_fn(f"  ⊘ {outcome.skipped} skipped")
    if outcome.failed > 0:
        print_fn(f"  ✗ {outcome.failed} failed")


def run_import(
    source: SubscriptionSource,
    client: BudgetClient,
    *,
    budget_id: str | None = None,
    default_account: str | None = None,
    sync_configured: bool = False,
    chooser: AccountChooser | None = None,
    confirm_sync: Callable[[], bool] | None = None,
    print_fn: Callable[..., None] = builtins.print,
) -> ImportOutcome:
    """Import active subscriptions from ``source`` into the destination budget.

    Parameters
    ----------
    source:
        Zero-argument callable returning normalized subscriptions (file or
        API adapter). Its errors are fatal.
    client:
        Destination budget. It is connected here and always shut down once
        connected.
    budget_id:
        Budget to open; the first listed budget when ``None``.
    default_account:
        Account name used when neither payment method nor notes match.
    sync_configured:
        When ``True`` the operator is asked whether to sync after the loop.
    chooser / confirm_sync:
        Injection points for the interactive prompts. Default to the
        prompt_toolkit prompts in :mod:`wallos_import.term_ui`.
    print_fn:
        Function used for user-facing progress output.

    Returns
    -------
    ImportOutcome
        Created/skipped/failed counts. Inactive subscriptions are not counted.
    """

    subscriptions = list(source())
    print_fn(f"Parsed {len(subscriptions)} subscriptions")

    active = [s for s in subscriptions if s.is_active]
    print_fn(f"{len(active)} active subscriptions to import")

    outcome = ImportOutcome()
    if not active:
        print_fn("No active subscriptions to import.")
        return outcome

    choose = chooser or _interactive_chooser(print_fn)
    ask_sync = confirm_sync or _ask_sync

    print_fn("Initializing Actual API...")
    client.connect()
    try:
        _open_budget(client, budget_id, print_fn)

        payees = PayeeCache(client, client.list_payees(), print_fn=print_fn)
        accounts = client.list_accounts()
        logger.debug("Loaded %d accounts", len(accounts))

        resolver = AccountResolver(accounts, choose)
        if default_account and resolver.use_default(default_account):
            print_fn(f"Default account: {default_account}")

        print_fn("")
        print_fn("Starting import...")
        print_fn("")

        for sub in active:
            try:
                payee_id = payees.get_or_create(sub.name)
                account_id = resolver.resolve(sub)
                if account_id is SKIP:
                    print_fn(f"⊘ Skipped: {sub.name}")
                    outcome.skipped += 1
                    continue
                client.create_schedule(
                    ScheduleRequest(
                        name=sub.name,
                        payee_id=payee_id,
                        account_id=account_id,
                        amount=sub.amount,
                        recurrence=to_recurrence_spec(sub),
                    )
                )
                print_fn(describe_schedule(sub, resolver.account_name(account_id)))
                outcome.created += 1
            except Exception as e:
                logger.debug("Schedule creation failed for %r", sub.name, exc_info=True)
                print_fn(f'✗ Failed to create schedule for "{sub.name}": {e}')
                outcome.failed += 1

        print_summary(outcome, print_fn)

        if sync_configured and ask_sync():
            print_fn("Syncing to server...")
            client.sync()
            print_fn("Sync complete.")
    finally:
        client.shutdown()

    return outcome


__all__ = [
    "NoBudgetsError",
    "PayeeCache",
    "SubscriptionSource",
    "describe_schedule",
    "print_summary",
    "run_import",
]
