import io
import logging

from wallos_import.logging_setup import configure_logging, get_logger


def test_configure_logging_writes_to_stream_once():
    stream = io.StringIO()
    configure_logging("WARNING", stream=stream)
    configure_logging("DEBUG", stream=io.StringIO())  # ignored: already configured

    log = get_logger("wallos_import.test")
    log.info("hidden")
    log.warning("shown")

    assert "shown" in stream.getvalue()
    assert "hidden" not in stream.getvalue()
    assert len(logging.getLogger("wallos_import").handlers) == 1


def test_level_from_environment(monkeypatch):
    monkeypatch.setenv("WALLOS_IMPORT_LOG_LEVEL", "debug")
    stream = io.StringIO()
    configure_logging(stream=stream)

    get_logger("wallos_import.test").debug("details")

    assert "details" in stream.getvalue()


def test_invalid_level_falls_back_to_info(monkeypatch):
    monkeypatch.setenv("WALLOS_IMPORT_LOG_LEVEL", "loud")
    stream = io.StringIO()
    configure_logging("verbose", stream=stream)

    log = get_logger("wallos_import.test")
    log.debug("no")
    log.info("yes")

    assert stream.getvalue().strip().endswith("yes")
