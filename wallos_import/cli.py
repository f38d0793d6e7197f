"""CLI for the ``wallos_import`` package.

This module exposes the callable command handler ``cmd_import`` and a
Typer-based console interface around it. Environment variables are loaded
from a local ``.env`` using ``python-dotenv`` before the handler runs. Import
logic lives in :mod:`wallos_import.importer`.
"""

from __future__ import annotations

import builtins
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import typer
from dotenv import load_dotenv
from typer.models import OptionInfo

from .config import ImportSettings, UsageError
from .destination import ActualBudgetClient, BudgetClient
from .importer import SubscriptionSource, run_import
from .ingest import fetch_subscriptions, load_export
from .logging_setup import configure_logging, get_logger

logger = get_logger("wallos_import.cli")

PROG = "wallos-actual-import"

USAGE = f"""\
Usage:
  {PROG} --file <subscriptions.json> [--account <name>]
  {PROG} --api [--account <name>]

Options:
  --file <path>     Import from Wallos JSON export file
  --api             Import directly from Wallos API
  --account <name>  Default account for subscriptions

Environment variables:
  ACTUAL_DATA_DIR     - Path to Actual data directory
  ACTUAL_BUDGET_ID    - Budget sync ID (optional, uses first available)
  ACTUAL_SERVER_URL   - Sync server URL (optional)
  ACTUAL_PASSWORD     - Sync server password (optional)

For --api mode:
  WALLOS_URL          - Base URL of Wallos instance
  WALLOS_API_KEY      - Wallos API key"""


@dataclass(slots=True)
class CliArgs:
    file: str | None = None
    api: bool = False
    account: str | None = None
    unknown: list[str] = field(default_factory=list)


_VALUE_FLAGS = {"--file": "file", "--account": "account"}


def resolve_args(
    file: str | None, api: bool, account: str | None, extra: Sequence[str]
) -> CliArgs:
    """Reconcile Click's parse with the ``--flag <value>`` lookahead rule.

    ``--file`` and ``--account`` take the next token only when it is not
    itself a ``--flag``. Click always consumes the next token, so a swallowed
    flag is handed back and read again, in order, ahead of the extra
    arguments Click left over.
    """

    args = CliArgs(api=api)
    pending: list[str] = []
    for attr, value in (("file", file), ("account", account)):
        if value is not None and value.startswith("--"):
            pending.append(value)
        else:
            setattr(args, attr, value)
    pending.extend(extra)

    i = 0
    while i < len(pending):
        tok = pending[i]
        if tok in _VALUE_FLAGS:
            nxt = pending[i + 1] if i + 1 < len(pending) else None
            if nxt is not None and not nxt.startswith("--"):
                setattr(args, _VALUE_FLAGS[tok], nxt)
                i += 1
        elif tok == "--api":
            args.api = True
        elif tok.startswith("--"):
            args.unknown.append(tok)
        i += 1
    return args


def build_client(settings: ImportSettings) -> BudgetClient:
    return ActualBudgetClient(
        server_url=settings.server_url,
        password=settings.password,
        data_dir=settings.data_dir,
        encryption_password=settings.encryption_password,
    )


def _select_source(
    *,
    file_path: str | None,
    use_api: bool,
    settings: ImportSettings,
    print_fn: Callable[..., None],
) -> SubscriptionSource:
    if use_api:
        url, api_key = settings.require_wallos()
        return lambda: fetch_subscriptions(url, api_key)

    if not file_path:
        raise UsageError("--file mode requires a file path")

    def read_file():
        print_fn(f"Reading Wallos export from: {file_path}")
        return load_export(file_path)

    return read_file


def cmd_import(
    *,
    file_path: str | None,
    use_api: bool,
    account_name: str | None = None,
    settings: ImportSettings | None = None,
    client: BudgetClient | None = None,
    print_fn: Callable[..., None] = builtins.print,
) -> int:
    """Import Wallos subscriptions into Actual and return a process exit code.

    Usage errors (missing file path, missing Wallos credentials in API mode)
    print the message and the usage text to stderr and return ``1``. Any
    other error reaching this level is reported as ``Fatal error: ...`` and
    also returns ``1``.
    """

    settings = settings or ImportSettings.from_env()
    try:
        source = _select_source(
            file_path=file_path,
            use_api=use_api,
            settings=settings,
            print_fn=print_fn,
        )
    except UsageError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("", file=sys.stderr)
        print(USAGE, file=sys.stderr)
        return 1

    try:
        run_import(
            source,
            client or build_client(settings),
            budget_id=settings.budget_id,
            default_account=account_name,
            sync_configured=bool(settings.server_url),
            print_fn=print_fn,
        )
    except Exception as e:
        logger.debug("Import aborted", exc_info=True)
        print(f"Fatal error: {e}", file=sys.stderr)
        return 1
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    add_completion=False,
    help=(
        "Import Wallos subscriptions into Actual Budget as schedules. "
        "Loads environment variables from a local .env before running."
    ),
)

# Module-level option object to satisfy ruff B008 (no calls in parameter
# defaults).
FILE_OPTION: OptionInfo = typer.Option(
    None,
    "--file",
    help="Import from a Wallos JSON export file",
)


@app.command(context_settings={"allow_extra_args": True, "ignore_unknown_options": True})
def import_subscriptions(
    ctx: typer.Context,
    file: str | None = FILE_OPTION,
    api: bool = typer.Option(False, "--api", help="Import directly from the Wallos API"),
    account: str | None = typer.Option(
        None, "--account", help="Default account for subscriptions"
    ),
) -> None:
    """Import Wallos subscriptions as Actual schedules."""

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging()

    args = resolve_args(file, api, account, ctx.args)
    for flag in args.unknown:
        logger.warning("Unknown option: %s", flag)

    code = cmd_import(file_path=args.file, use_api=args.api, account_name=args.account)
    if code != 0:
        raise typer.Exit(code)


def main() -> None:
    app(prog_name=PROG)


if __name__ == "__main__":  # pragma: no cover
    main()
