"""Tiny terminal UI helpers (prompt_toolkit-based).

Two blocking prompts are used during an import: choosing an account for a
subscription that could not be matched automatically, and confirming the
final sync. They are kept apart from the import logic so they can be tested
with a pipe input or a scripted ``input_fn``.
"""

from __future__ import annotations

import builtins
from collections.abc import Callable, Sequence

from prompt_toolkit import PromptSession

from .models import Account

SEPARATOR = "━" * 60


def _line_reader(session: PromptSession | None) -> Callable[[str], str]:
    sess: PromptSession | None = session

    def read(message: str) -> str:
        nonlocal sess
        if sess is None:
            sess = PromptSession()
        return sess.prompt(message)

    return read


def prompt_account_selection(
    accounts: Sequence[Account],
    *,
    subscription_name: str,
    payment_method: str = "",
    notes: str = "",
    session: PromptSession | None = None,
    input_fn: Callable[[str], str] | None = None,
    print_fn: Callable[..., None] = builtins.print,
) -> str | None:
    """Ask the operator which account a subscription should be booked to.

    Only open accounts are offered, numbered from 1; ``0`` skips the
    subscription. Non-numeric or out-of-range answers are rejected and the
    question is asked again.

    Returns the chosen account id, or ``None`` when the operator skips.
    """

    open_accounts = [a for a in accounts if not a.closed]
    count = len(open_accounts)

    print_fn("")
    print_fn(SEPARATOR)
    print_fn(f"No matching account found for: {subscription_name}")
    if payment_method:
        print_fn(f"  Payment Method: {payment_method}")
    if notes:
        print_fn(f"  Notes: {notes}")
    print_fn("")
    print_fn("Available accounts:")
    print_fn("  0. Skip this subscription")
    for n, account in enumerate(open_accounts, start=1):
        print_fn(f"  {n}. {account.name}")
    print_fn("")

    ask = input_fn or _line_reader(session)
    question = (
        f"Select account (1-{count}, or 0 to skip): " if count else "Select account (0 to skip): "
    )
    while True:
        answer = ask(question).strip()
        try:
            selection = int(answer)
        except ValueError:
            selection = -1
        if selection == 0:
            return None
        if 1 <= selection <= count:
            return open_accounts[selection - 1].id
        print_fn(f"Invalid selection. Please enter a number between 0 and {count}.")


def confirm(
    question: str,
    *,
    default_yes: bool = True,
    session: PromptSession | None = None,
    input_fn: Callable[[str], str] | None = None,
) -> bool:
    """Yes/no prompt; an empty answer returns ``default_yes``."""

    hint = "[Y/n]" if default_yes else "[y/N]"
    ask = input_fn or _line_reader(session)
    answer = ask(f"{question} {hint}: ").strip()
    if answer == "":
        return default_yes
    return answer.lower().startswith("y")


__all__ = ["SEPARATOR", "confirm", "prompt_account_selection"]
