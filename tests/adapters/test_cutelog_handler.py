from __future__ import annotations

import json
import logging
from collections.abc import Iterator

import pytest

from lib_cutelog.adapters.handler import CutelogHandler
from lib_cutelog.adapters.writer import CutelogWriter
from lib_cutelog.config import WriterSettings
from lib_cutelog.domain.result import WriteResult
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]


class _FakeWriter:
    def __init__(self, *, error: Exception | None = None) -> None:
        self.payloads: list[bytes] = []
        self.synced = 0
        self.closed = False
        self._error = error

    def write(self, payload: bytes) -> WriteResult:
        self.payloads.append(payload)
        return WriteResult(len(payload), self._error)

    def sync(self) -> None:
        self.synced += 1

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def writer() -> _FakeWriter:
    return _FakeWriter()


@pytest.fixture
def app_logger(writer: _FakeWriter) -> Iterator[logging.Logger]:
    logger = logging.getLogger("tests.cutelog.app")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    handler = CutelogHandler(writer=writer)
    logger.addHandler(handler)
    try:
        yield logger
    finally:
        logger.removeHandler(handler)
        handler.close()
        logger.propagate = True


def documents(writer: _FakeWriter) -> list[dict[str, object]]:
    return [json.loads(payload.decode("utf-8")) for payload in writer.payloads]


def test_handler_serializes_record_fields(app_logger: logging.Logger, writer: _FakeWriter) -> None:
    app_logger.warning("disk %s is %d%% full", "/var", 93)

    (document,) = documents(writer)
    assert document["name"] == "tests.cutelog.app"
    assert document["msg"] == "disk /var is 93% full"
    assert document["levelname"] == "WARNING"
    assert document["levelno"] == logging.WARNING
    assert document["funcName"] == "test_handler_serializes_record_fields"
    assert isinstance(document["created"], float)
    assert "exc_text" not in document


def test_handler_includes_extra_fields(app_logger: logging.Logger, writer: _FakeWriter) -> None:
    app_logger.info("user registered", extra={"username": "bob", "id": 13525, "tags": {"a", "b"}})

    (document,) = documents(writer)
    assert document["username"] == "bob"
    assert document["id"] == 13525
    assert isinstance(document["tags"], str)
    assert "args" not in document
    assert "exc_info" not in document


def test_handler_attaches_exception_text(app_logger: logging.Logger, writer: _FakeWriter) -> None:
    try:
        raise KeyError("missing")
    except KeyError:
        app_logger.exception("lookup failed")

    (document,) = documents(writer)
    assert document["levelname"] == "ERROR"
    assert "Traceback (most recent call last)" in document["exc_text"]
    assert "KeyError: 'missing'" in document["exc_text"]


def test_handler_respects_level_threshold(writer: _FakeWriter) -> None:
    handler = CutelogHandler(writer=writer, level="WARNING")
    record = logging.LogRecord("tests", logging.INFO, __file__, 1, "quiet", None, None)
    handler.handle(record)
    assert writer.payloads == []


def test_handler_skips_its_own_package_records(writer: _FakeWriter) -> None:
    handler = CutelogHandler(writer=writer)
    handler.handle(logging.LogRecord("lib_cutelog.adapters.writer", logging.WARNING, __file__, 1, "write failed", None, None))
    handler.handle(logging.LogRecord("lib_cutelog_fan", logging.WARNING, __file__, 1, "unrelated", None, None))
    assert len(writer.payloads) == 1
    assert json.loads(writer.payloads[0])["name"] == "lib_cutelog_fan"


def test_transport_errors_do_not_reach_handle_error(monkeypatch: pytest.MonkeyPatch) -> None:
    writer = _FakeWriter(error=BrokenPipeError("broken pipe"))
    handler = CutelogHandler(writer=writer)
    calls: list[logging.LogRecord] = []
    monkeypatch.setattr(handler, "handleError", calls.append)

    handler.handle(logging.LogRecord("tests", logging.ERROR, __file__, 1, "boom", None, None))

    assert len(writer.payloads) == 1
    assert calls == []


def test_serialization_errors_go_through_handle_error(monkeypatch: pytest.MonkeyPatch, writer: _FakeWriter) -> None:
    handler = CutelogHandler(writer=writer)
    calls: list[logging.LogRecord] = []
    monkeypatch.setattr(handler, "handleError", calls.append)
    record = logging.LogRecord("tests", logging.ERROR, __file__, 1, "%d apples", ("many",), None)

    handler.handle(record)

    assert writer.payloads == []
    assert calls == [record]


def test_flush_and_close_delegate_to_writer(writer: _FakeWriter) -> None:
    handler = CutelogHandler(writer=writer)
    handler.flush()
    handler.close()
    assert writer.synced == 1
    assert writer.closed is True


def test_handler_builds_json_writer_from_address() -> None:
    settings = WriterSettings(connect_wait=0.01, retry_interval=5.0, write_timeout=0.5, dial_timeout=0.1)
    handler = CutelogHandler("127.0.0.1:9", settings=settings)
    try:
        assert isinstance(handler.writer, CutelogWriter)
        assert handler.writer.endpoint.format_tag == "json"
        assert handler.writer.endpoint.address == ("127.0.0.1", 9)
    finally:
        handler.close()


def test_handler_output_round_trips_non_ascii_text(writer: _FakeWriter) -> None:
    handler = CutelogHandler(writer=writer)
    handler.handle(logging.LogRecord("tests", logging.INFO, __file__, 1, "grüße", None, None))
    assert json.loads(writer.payloads[0].decode("utf-8"))["msg"] == "grüße"
