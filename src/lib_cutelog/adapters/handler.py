"""Stdlib :mod:`logging` handler that ships records to cutelog as JSON.

Purpose
-------
Let applications point ordinary ``logging`` calls at a running cutelog
instance by attaching one handler, the same way Go programs hand the writer
to their logging library as an output stream.

Contents
--------
* :class:`CutelogHandler` - :class:`logging.Handler` backed by a
  :class:`~lib_cutelog.adapters.writer.CutelogWriter`.

System Role
-----------
Owns serialization (``json``); the writer only sees opaque bytes. Transport
failures are the writer's concern and never reach ``handleError``.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from lib_cutelog.application.ports.writer import WriterPort
from lib_cutelog.config import WriterSettings, resolve_endpoint

from .writer import CutelogWriter

_OWN_LOGGER_PREFIX = "lib_cutelog"

#: Attributes every :class:`logging.LogRecord` carries; anything else came from ``extra``.
_RESERVED_ATTRS = frozenset(vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))) | {"message", "asctime"}


class CutelogHandler(logging.Handler):
    """Serialize log records to JSON and send them through a cutelog writer.

    Parameters
    ----------
    address:
        ``HOST:PORT`` of the cutelog instance; falls back to
        ``CUTELOG_ADDRESS`` and then ``localhost:19996``. Ignored when
        ``writer`` is given.
    level:
        Handler threshold, as for :class:`logging.Handler`.
    writer:
        Pre-built writer to send through. The handler announces ``json`` when
        it builds its own writer; a supplied writer must have been created for
        the ``json`` format.
    settings:
        Timing configuration for a writer built by the handler.
    """

    def __init__(
        self,
        address: str | None = None,
        *,
        level: int | str = logging.NOTSET,
        writer: WriterPort | None = None,
        settings: WriterSettings | None = None,
    ) -> None:
        super().__init__(level)
        if writer is None:
            endpoint = resolve_endpoint(address, "json")
            writer = CutelogWriter(endpoint, settings=settings or WriterSettings.from_env())
        self._writer = writer

    @property
    def writer(self) -> WriterPort:
        return self._writer

    def emit(self, record: logging.LogRecord) -> None:
        if record.name == _OWN_LOGGER_PREFIX or record.name.startswith(_OWN_LOGGER_PREFIX + "."):
            return
        try:
            payload = self.serialize(record)
        except Exception:  # noqa: BLE001
            self.handleError(record)
            return
        self._writer.write(payload)

    def serialize(self, record: logging.LogRecord) -> bytes:
        """Return the UTF-8 JSON document cutelog renders for ``record``."""
        return json.dumps(self._build_document(record), default=str).encode("utf-8")

    def _build_document(self, record: logging.LogRecord) -> dict[str, Any]:
        document: dict[str, Any] = {
            "name": record.name,
            "msg": record.getMessage(),
            "levelname": record.levelname,
            "levelno": record.levelno,
            "created": record.created,
            "process": record.process,
            "processName": record.processName,
            "thread": record.thread,
            "threadName": record.threadName,
            "module": record.module,
            "funcName": record.funcName,
            "lineno": record.lineno,
            "pathname": record.pathname,
        }
        exc_text = self._exception_text(record)
        if exc_text:
            document["exc_text"] = exc_text
        for key, value in vars(record).items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                document[key] = value
        return document

    def _exception_text(self, record: logging.LogRecord) -> str | None:
        if record.exc_info:
            formatter = self.formatter or logging.Formatter()
            return formatter.formatException(record.exc_info)
        return record.exc_text

    def flush(self) -> None:
        self._writer.sync()

    def close(self) -> None:
        try:
            self._writer.close()
        finally:
            super().close()


__all__ = ["CutelogHandler"]
