"""Connection manager forwarding framed log payloads to cutelog.

Purpose
-------
Own a single outbound TCP connection to a cutelog instance: dial it lazily on
a background thread, announce the payload format, send length-prefixed frames
and reconnect after failures, all without ever blocking or failing the
logging caller.

Contents
--------
* :class:`CutelogWriter` - concrete :class:`WriterPort` implementation.
* :func:`create_writer` - convenience constructor resolving configuration.

System Role
-----------
The data path of the package. :class:`~lib_cutelog.adapters.handler.CutelogHandler`
and the CLI sit on top of it; the wire format comes from
:mod:`lib_cutelog.domain.framing`.

Concurrency
-----------
One lock guards the connection status, the socket and the framed write, so
frames never interleave and no write targets a socket that is being
replaced. Dialing, retry sleeps, logging and diagnostic callbacks all happen
outside that lock. Starting a connection attempt is a compare-and-set on the
status: at most one connect thread runs per writer.
"""

from __future__ import annotations

import logging
import socket
import threading
import time
from collections.abc import Callable
from typing import Any

from lib_cutelog.application.ports.transport import Connection, Dialer
from lib_cutelog.application.ports.writer import WriterPort
from lib_cutelog.config import WriterSettings, resolve_endpoint
from lib_cutelog.domain.endpoint import Endpoint
from lib_cutelog.domain.framing import encode_frame, handshake_payload
from lib_cutelog.domain.result import WriteResult
from lib_cutelog.domain.status import ConnectionStatus


LOGGER = logging.getLogger(__name__)

Diagnostic = Callable[[str, dict[str, Any]], None]


def _default_dialer(address: tuple[str, int], timeout: float) -> Connection:
    """Open a TCP connection via :func:`socket.create_connection`."""
    return socket.create_connection(address, timeout=timeout)


class CutelogWriter(WriterPort):
    """Send length-prefixed payloads to cutelog over one reconnecting socket.

    Construction starts a connection attempt immediately and waits at most
    ``settings.connect_wait`` seconds for it; it never raises for network
    problems. Payloads written while not connected are dropped silently.
    """

    def __init__(
        self,
        endpoint: Endpoint,
        *,
        settings: WriterSettings | None = None,
        dialer: Dialer | None = None,
        diagnostic: Diagnostic | None = None,
    ) -> None:
        """Create the writer and start connecting.

        Parameters
        ----------
        endpoint:
            Address and format tag of the cutelog instance.
        settings:
            Timing configuration; defaults to :class:`WriterSettings()`.
        dialer:
            Callable opening the connection; defaults to
            :func:`socket.create_connection`. Tests inject fakes here.
        diagnostic:
            Optional hook receiving ``(event_name, payload)`` for connection
            lifecycle events. Exceptions raised by the hook are logged and
            ignored.
        """
        self._endpoint = endpoint
        self._settings = settings or WriterSettings()
        self._dialer = dialer or _default_dialer
        self._diagnostic = diagnostic
        self._lock = threading.Lock()
        self._status = ConnectionStatus.DISCONNECTED
        self._conn: Connection | None = None
        self._connected_event = threading.Event()

        if self._start_connecting():
            self._connected_event.wait(self._settings.connect_wait)

    @property
    def endpoint(self) -> Endpoint:
        return self._endpoint

    @property
    def settings(self) -> WriterSettings:
        return self._settings

    @property
    def status(self) -> ConnectionStatus:
        """Return the current connection status (diagnostic snapshot)."""
        with self._lock:
            return self._status

    def wait_until_connected(self, timeout: float | None = None) -> bool:
        """Block until a connection is established or ``timeout`` elapses.

        Returns ``True`` when connected. Does not start a connection attempt
        by itself; a dropped :meth:`write` or construction does that.
        """

        return self._connected_event.wait(timeout)

    def write(self, payload: bytes) -> WriteResult:
        """Send ``payload`` as one frame, or drop it while not connected.

        ``accepted`` is always the full payload length. Any exception raised
        while sending closes the socket, schedules a reconnect and is reported
        in ``error``; a payload that cannot be framed is reported the same way
        without touching the connection.
        """
        accepted = 0
        try:
            accepted = len(payload)
            frame = encode_frame(payload)
            with self._lock:
                conn = self._conn if self._status.is_connected else None
                failure = None if conn is None else self._send_locked(conn, frame)

            if conn is None:
                self._start_connecting()
                return WriteResult(accepted)
            if failure is None:
                return WriteResult(accepted)

            LOGGER.warning("Write to cutelog at %s failed: %s", self._endpoint, failure)
            self._emit_diagnostic("cutelog_write_failed", {"endpoint": str(self._endpoint), "exception": repr(failure)})
            self._start_connecting()
            return WriteResult(accepted, failure)
        except Exception as exc:  # noqa: BLE001
            LOGGER.debug("Unexpected failure while sending to %s", self._endpoint, exc_info=exc)
            return WriteResult(accepted, exc)

    def sync(self) -> None:
        """No-op: frames are written immediately, nothing is buffered."""

    def flush(self) -> None:
        """Alias of :meth:`sync` for :mod:`logging` and file-like callers."""

    def close(self) -> None:
        """Close the socket if one is open. Safe to call repeatedly.

        A connection attempt already in progress keeps running; the next
        :meth:`write` after closing reconnects.
        """
        with self._lock:
            conn = self._conn
            if conn is None:
                return
            self._discard_locked(conn)
        self._emit_diagnostic("cutelog_closed", {"endpoint": str(self._endpoint)})

    def __enter__(self) -> "CutelogWriter":
        return self

    def __exit__(self, *_exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"CutelogWriter(endpoint={self._endpoint!s}, format={self._endpoint.format_tag!r}, status={self.status.value})"

    def _start_connecting(self) -> bool:
        """Launch the connect thread unless one is running or we are connected."""
        with self._lock:
            if self._status is not ConnectionStatus.DISCONNECTED:
                return False
            self._status = ConnectionStatus.CONNECTING
            self._connected_event.clear()
            thread = threading.Thread(target=self._connect_loop, name=f"cutelog-connect-{self._endpoint}", daemon=True)
        try:
            thread.start()
        except RuntimeError:
            with self._lock:
                self._status = ConnectionStatus.DISCONNECTED
            raise
        return True

    def _connect_loop(self) -> None:
        """Run :meth:`_dial_until_connected`, releasing the connecting state if it dies."""
        connected = False
        try:
            connected = self._dial_until_connected()
        finally:
            if not connected:
                with self._lock:
                    if self._status is ConnectionStatus.CONNECTING:
                        self._status = ConnectionStatus.DISCONNECTED

    def _dial_until_connected(self) -> bool:
        """Dial until a connection accepts the handshake, pausing between tries."""
        attempt = 0
        handshake = encode_frame(handshake_payload(self._endpoint.format_tag))
        while True:
            attempt += 1
            try:
                conn = self._dialer(self._endpoint.address, self._settings.dial_timeout)
            except Exception as exc:  # noqa: BLE001
                LOGGER.debug("Connecting to cutelog at %s failed (attempt %d): %s", self._endpoint, attempt, exc)
                self._emit_diagnostic("cutelog_connect_failed", {"endpoint": str(self._endpoint), "attempt": attempt, "exception": repr(exc)})
                time.sleep(self._settings.retry_interval)
                continue

            try:
                conn.settimeout(self._settings.write_timeout)
                conn.sendall(handshake)
            except Exception as exc:  # noqa: BLE001
                self._close_quietly(conn)
                LOGGER.debug("Handshake with cutelog at %s failed (attempt %d): %s", self._endpoint, attempt, exc)
                self._emit_diagnostic("cutelog_handshake_failed", {"endpoint": str(self._endpoint), "attempt": attempt, "exception": repr(exc)})
                time.sleep(self._settings.retry_interval)
                continue

            with self._lock:
                self._conn = conn
                self._status = ConnectionStatus.CONNECTED
                self._connected_event.set()
            LOGGER.info("Connected to cutelog at %s (format=%s)", self._endpoint, self._endpoint.format_tag)
            self._emit_diagnostic("cutelog_connected", {"endpoint": str(self._endpoint), "attempt": attempt})
            return True

    def _send_locked(self, conn: Connection, frame: bytes) -> Exception | None:
        """Write ``frame`` under the deadline; on failure drop ``conn``. Caller holds the lock."""
        try:
            conn.settimeout(self._settings.write_timeout)
            conn.sendall(frame)
        except Exception as exc:  # noqa: BLE001
            self._discard_locked(conn)
            return exc
        return None

    def _discard_locked(self, conn: Connection) -> None:
        """Drop ``conn`` and mark the writer disconnected. Caller holds the lock."""
        if self._conn is conn:
            self._conn = None
            self._status = ConnectionStatus.DISCONNECTED
            self._connected_event.clear()
        self._close_quietly(conn)

    def _close_quietly(self, conn: Connection) -> None:
        try:
            conn.close()
        except OSError as exc:
            LOGGER.debug("Closing cutelog socket raised %s", exc)

    def _emit_diagnostic(self, name: str, payload: dict[str, Any]) -> None:
        """Invoke the diagnostic hook while guarding against callback failures."""

        if self._diagnostic is None:
            return
        try:
            self._diagnostic(name, payload)
        except Exception as diagnostic_exc:  # noqa: BLE001
            LOGGER.error("Cutelog diagnostic hook raised while reporting %s", name, exc_info=diagnostic_exc)


def create_writer(
    address: str | None = None,
    format_tag: str | None = None,
    *,
    settings: WriterSettings | None = None,
    diagnostic: Diagnostic | None = None,
) -> CutelogWriter:
    """Return a :class:`CutelogWriter` for ``address`` announcing ``format_tag``.

    Missing arguments fall back to ``CUTELOG_ADDRESS`` / ``CUTELOG_FORMAT``
    and then to ``localhost:19996`` / ``json``; missing settings come from
    the ``CUTELOG_*`` timing variables. Blocks for at most
    ``settings.connect_wait`` seconds.
    """

    endpoint = resolve_endpoint(address, format_tag)
    return CutelogWriter(endpoint, settings=settings or WriterSettings.from_env(), diagnostic=diagnostic)


__all__ = ["CutelogWriter", "Diagnostic", "create_writer"]
