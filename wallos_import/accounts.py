"""Account resolution for imported subscriptions.

Each subscription must be booked to one Actual account. Candidates are tried
in a fixed order and the first hit wins:

1. the subscription's Wallos payment method equals an account name
2. the subscription's notes equal an account name
3. the run-wide default account (``--account``), when it resolved
4. the operator picks from a numbered list of open accounts, or skips

Name comparisons are case-insensitive on trimmed text. Steps 1-3 consider
every known account, closed ones included; the interactive list offers open
accounts only.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from .logging_setup import get_logger
from .models import Account, NormalizedSubscription

logger = get_logger("wallos_import.accounts")


class SkipSubscription:
    """Marker returned when the operator chose not to import a subscription."""

    __slots__ = ()

    def __repr__(self) -> str:  # pragma: no cover - trivial repr
        return "SKIP"


SKIP = SkipSubscription()

type AccountChooser = Callable[[NormalizedSubscription, Sequence[Account]], str | None]
"""Interactive fallback: returns an account id, or ``None`` to skip."""


def name_key(name: str) -> str:
    return name.strip().lower()


@dataclass(slots=True)
class AccountResolver:
    accounts: Sequence[Account]
    chooser: AccountChooser
    default_account_id: str | None = None
    _by_name: dict[str, str] = field(init=False, repr=False)
    _by_id: dict[str, Account] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        # Later accounts win on duplicate names.
        self._by_name = {name_key(a.name): a.id for a in self.accounts}
        self._by_id = {a.id: a for a in self.accounts}

    def lookup(self, name: str | None) -> str | None:
        """Return the id of the account named ``name`` (case-insensitive)."""

        if not name or not name.strip():
            return None
        return self._by_name.get(name_key(name))

    def use_default(self, name: str | None) -> str | None:
        """Resolve the run-wide default account once, before the import loop.

        An unknown name is not fatal: it is logged and the resolver carries on
        without a default, so every unmatched subscription is prompted.
        """

        if not name:
            self.default_account_id = None
            return None
        self.default_account_id = self.lookup(name)
        if self.default_account_id is None:
            logger.warning('Default account "%s" not found.', name)
            logger.warning("You will be prompted to select an account for each subscription.")
        return self.default_account_id

    def resolve(self, sub: NormalizedSubscription) -> str | SkipSubscription:
        account_id = (
            self.lookup(sub.payment_method)
            or self.lookup(sub.notes)
            or self.default_account_id
        )
        if account_id:
            return account_id
        chosen = self.chooser(sub, self.accounts)
        return chosen if chosen else SKIP

    def account_name(self, account_id: str) -> str:
        account = self._by_id.get(account_id)
        return account.name if account is not None else account_id


__all__ = ["SKIP", "AccountChooser", "AccountResolver", "SkipSubscription", "name_key"]
