import dataclasses
import io
import json
import urllib.error
import urllib.request

import pytest

from tests.helpers.records import export_json, wallos_record
from wallos_import.ingest import (
    InvalidExportFormat,
    WallosApiError,
    fetch_subscriptions,
    load_export,
    parse_export,
)
from wallos_import.ingest.adapters.wallos_api import subscriptions_endpoint


def _without_ids(subs):
    return [dataclasses.replace(s, id="") for s in subs]


# ---- export files ------------------------------------------------------------


def test_bare_array_and_wrapped_object_give_identical_results():
    records = [wallos_record(), wallos_record({"Name": "Spotify", "Price": "€9.99"})]

    bare = parse_export(export_json(records))
    wrapped = parse_export(export_json(records, wrapped=True))

    assert [s.name for s in bare] == ["Netflix", "Spotify"]
    assert _without_ids(bare) == _without_ids(wrapped)


def test_object_without_subscriptions_array_is_rejected():
    with pytest.raises(InvalidExportFormat, match="Invalid Wallos export format"):
        parse_export(json.dumps({"items": [wallos_record()]}))


def test_subscriptions_field_must_be_an_array():
    with pytest.raises(InvalidExportFormat):
        parse_export(json.dumps({"subscriptions": {"Name": "Netflix"}}))


@pytest.mark.parametrize("payload", ['"just a string"', "42", "null"])
def test_scalar_payloads_are_rejected(payload):
    with pytest.raises(InvalidExportFormat):
        parse_export(payload)


def test_non_object_records_are_rejected():
    with pytest.raises(InvalidExportFormat, match="subscription #1"):
        parse_export(json.dumps([wallos_record(), "oops"]))


def test_invalid_json_is_an_export_format_error():
    with pytest.raises(InvalidExportFormat, match="not valid JSON"):
        parse_export("{not json")


def test_empty_array_is_valid():
    assert parse_export("[]") == []


def test_load_export_reads_utf8_file(tmp_path):
    path = tmp_path / "subs.json"
    path.write_text(export_json([wallos_record({"Name": "Crème TV"})]), encoding="utf-8")

    subs = load_export(path)

    assert [s.name for s in subs] == ["Crème TV"]


def test_load_export_missing_file_propagates(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_export(tmp_path / "missing.json")


# ---- Wallos API --------------------------------------------------------------


class _Response(io.BytesIO):
    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


@pytest.fixture
def captured(monkeypatch):
    """Patch ``urlopen`` to return ``captured["body"]`` and record the request."""

    state: dict = {"body": b"[]"}

    def fake_urlopen(req):
        state["request"] = req
        if "error" in state:
            raise state["error"]
        return _Response(state["body"])

    monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)
    return state


def test_endpoint_strips_one_trailing_slash():
    assert subscriptions_endpoint("https://wallos.example.com/") == (
        "https://wallos.example.com/api/subscriptions"
    )
    assert subscriptions_endpoint("https://wallos.example.com") == (
        "https://wallos.example.com/api/subscriptions"
    )


def test_fetch_sends_bearer_token_and_accept_header(captured):
    fetch_subscriptions("https://wallos.example.com/", "secret")

    req = captured["request"]
    assert req.full_url == "https://wallos.example.com/api/subscriptions"
    assert req.get_method() == "GET"
    assert req.get_header("Authorization") == "Bearer secret"
    assert req.get_header("Accept") == "application/json"


@pytest.mark.parametrize("wrap", [None, "subscriptions", "data"])
def test_fetch_accepts_all_response_shapes(captured, wrap):
    records = [wallos_record({"Payment Cycle": "Yearly", "Price": "$99.00"})]
    payload = records if wrap is None else {wrap: records}
    captured["body"] = json.dumps(payload).encode("utf-8")

    subs = fetch_subscriptions("https://wallos.example.com", "k")

    assert len(subs) == 1
    assert (subs[0].frequency, subs[0].amount) == ("yearly", -9900)


def test_fetch_rejects_unknown_shape(captured):
    captured["body"] = json.dumps({"results": []}).encode("utf-8")
    with pytest.raises(InvalidExportFormat, match="Unexpected API response format"):
        fetch_subscriptions("https://wallos.example.com", "k")


def test_fetch_non_2xx_carries_status(captured):
    captured["error"] = urllib.error.HTTPError(
        "https://wallos.example.com/api/subscriptions", 401, "Unauthorized", {}, None
    )
    with pytest.raises(WallosApiError, match="401 Unauthorized") as excinfo:
        fetch_subscriptions("https://wallos.example.com", "bad")
    assert excinfo.value.status == 401


def test_fetch_transport_error_is_wrapped(captured):
    captured["error"] = urllib.error.URLError("connection refused")
    with pytest.raises(WallosApiError) as excinfo:
        fetch_subscriptions("https://wallos.example.com", "k")
    assert excinfo.value.status is None
