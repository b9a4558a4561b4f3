"""Port describing the stream socket the writer talks through.

Only the handful of :class:`socket.socket` methods the writer calls are
listed, so tests can substitute in-memory connections.
"""

from __future__ import annotations

from typing import Callable, Protocol, runtime_checkable


@runtime_checkable
class Connection(Protocol):
    """Connected stream socket."""

    def settimeout(self, value: float | None) -> None:
        """Apply a deadline to subsequent blocking operations."""

    def sendall(self, data: bytes) -> None:
        """Write every byte of ``data`` or raise :class:`OSError`."""

    def close(self) -> None:
        """Close the socket."""


Dialer = Callable[[tuple[str, int], float], Connection]
#: Open a connection to ``(host, port)`` within ``timeout`` seconds or raise :class:`OSError`.


__all__ = ["Connection", "Dialer"]
