import json

import pytest
from typer.testing import CliRunner

import wallos_import.cli as cli
from tests.helpers.fake_budget import FakeBudgetClient
from tests.helpers.records import export_json, wallos_record
from wallos_import.models import Account

runner = CliRunner()


@pytest.fixture
def fake_client(monkeypatch):
    client = FakeBudgetClient(accounts=[Account(id="acc-cc", name="Credit Card")])
    monkeypatch.setattr(cli, "build_client", lambda settings: client)
    return client


@pytest.fixture
def export_file(tmp_path):
    path = tmp_path / "subs.json"
    path.write_text(export_json([wallos_record()], wrapped=True), encoding="utf-8")
    return path


def test_file_import_end_to_end(fake_client, export_file):
    result = runner.invoke(cli.app, ["--file", str(export_file)])

    assert result.exit_code == 0, result.output
    assert f"Reading Wallos export from: {export_file}" in result.output
    assert "✓ Created schedule: Netflix ($15.99, monthly) → Credit Card" in result.output
    assert len(fake_client.schedules) == 1


def test_missing_file_path_is_a_usage_error(fake_client):
    result = runner.invoke(cli.app, [])

    assert result.exit_code == 1
    assert "--file mode requires a file path" in result.output
    assert "Usage:" in result.output
    assert fake_client.calls == []


def test_flag_in_place_of_file_path_is_a_usage_error(fake_client):
    result = runner.invoke(cli.app, ["--file", "--account"])

    assert result.exit_code == 1
    assert "--file mode requires a file path" in result.output
    assert fake_client.calls == []


def test_api_mode_requires_wallos_environment(fake_client, monkeypatch):
    monkeypatch.setenv("WALLOS_URL", "https://wallos.example.com")

    result = runner.invoke(cli.app, ["--api"])

    assert result.exit_code == 1
    assert "WALLOS_URL and WALLOS_API_KEY" in result.output


def test_api_mode_fetches_from_wallos(fake_client, monkeypatch):
    monkeypatch.setenv("WALLOS_URL", "https://wallos.example.com/")
    monkeypatch.setenv("WALLOS_API_KEY", "k")
    seen = {}

    def fake_fetch(url, api_key):
        seen["args"] = (url, api_key)
        from wallos_import.normalize import normalize_all

        return normalize_all([wallos_record()])

    monkeypatch.setattr(cli, "fetch_subscriptions", fake_fetch)

    result = runner.invoke(cli.app, ["--api"])

    assert result.exit_code == 0, result.output
    assert seen["args"] == ("https://wallos.example.com/", "k")
    assert len(fake_client.schedules) == 1


def test_unknown_flags_warn_and_are_ignored(fake_client, export_file):
    result = runner.invoke(cli.app, ["--verbose", "--file", str(export_file)])

    assert result.exit_code == 0, result.output
    assert "WARNING wallos_import.cli: Unknown option: --verbose" in result.output
    assert len(fake_client.schedules) == 1


def test_default_account_flag(monkeypatch, export_file):
    client = FakeBudgetClient(accounts=[Account(id="acc-chk", name="Checking")])
    monkeypatch.setattr(cli, "build_client", lambda settings: client)

    result = runner.invoke(cli.app, ["--file", str(export_file), "--account", "Checking"])

    assert result.exit_code == 0, result.output
    assert "Default account: Checking" in result.output
    assert client.schedules[0].account_id == "acc-chk"


def test_invalid_export_is_fatal(fake_client, tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"items": []}), encoding="utf-8")

    result = runner.invoke(cli.app, ["--file", str(path)])

    assert result.exit_code == 1
    assert "Fatal error: Invalid Wallos export format" in result.output
    assert fake_client.calls == []


def test_missing_export_file_is_fatal(fake_client, tmp_path):
    result = runner.invoke(cli.app, ["--file", str(tmp_path / "nope.json")])

    assert result.exit_code == 1
    assert "Fatal error:" in result.output


def test_env_file_in_working_directory_is_loaded(fake_client, export_file, tmp_path):
    # conftest runs each test in tmp_path, so this .env is in the CWD.
    (tmp_path / ".env").write_text("ACTUAL_BUDGET_ID=from-dotenv\n", encoding="utf-8")

    result = runner.invoke(cli.app, ["--file", str(export_file)])

    assert result.exit_code == 0, result.output
    assert fake_client.opened == "from-dotenv"


def test_sync_prompt_runs_when_server_configured(monkeypatch, fake_client, export_file):
    monkeypatch.setenv("ACTUAL_SERVER_URL", "http://localhost:5006")
    monkeypatch.setattr("wallos_import.importer.confirm", lambda *a, **k: True)

    result = runner.invoke(cli.app, ["--file", str(export_file)])

    assert result.exit_code == 0, result.output
    assert fake_client.synced


def test_cmd_import_returns_exit_codes(export_file):
    client = FakeBudgetClient(accounts=[Account(id="acc-cc", name="Credit Card")])
    lines: list[str] = []

    code = cli.cmd_import(
        file_path=str(export_file),
        use_api=False,
        settings=cli.ImportSettings(),
        client=client,
        print_fn=lines.append,
    )

    assert code == 0
    assert "  ✓ 1 schedules created" in lines


def test_account_followed_by_file_flag_keeps_both(fake_client, export_file):
    result = runner.invoke(cli.app, ["--account", "--file", str(export_file)])

    assert result.exit_code == 0, result.output
    assert f"Reading Wallos export from: {export_file}" in result.output
    assert "Default account:" not in result.output
    assert len(fake_client.schedules) == 1


def test_file_followed_by_api_flag_selects_api_mode(fake_client, monkeypatch):
    monkeypatch.setenv("WALLOS_URL", "https://wallos.example.com")
    monkeypatch.setenv("WALLOS_API_KEY", "k")
    from wallos_import.normalize import normalize_all

    monkeypatch.setattr(
        cli, "fetch_subscriptions", lambda url, key: normalize_all([wallos_record()])
    )

    result = runner.invoke(cli.app, ["--file", "--api"])

    assert result.exit_code == 0, result.output
    assert len(fake_client.schedules) == 1


@pytest.mark.parametrize(
    ("parsed", "expected"),
    [
        ((None, False, None, []), cli.CliArgs()),
        (("--api", False, None, []), cli.CliArgs(api=True)),
        ((None, False, "--file", ["subs.json"]), cli.CliArgs(file="subs.json")),
        (("--account", False, None, ["Checking"]), cli.CliArgs(account="Checking")),
        (("--account", False, None, []), cli.CliArgs()),
        (
            ("a.json", True, "Bank", ["--verbose", "x"]),
            cli.CliArgs("a.json", True, "Bank", ["--verbose"]),
        ),
        ((None, False, "--file", ["--api"]), cli.CliArgs(api=True)),
    ],
)
def test_resolve_args_applies_the_lookahead_rule(parsed, expected):
    assert cli.resolve_args(*parsed) == expected
