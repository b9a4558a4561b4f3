"""Connection status of a cutelog writer."""

from __future__ import annotations

from enum import Enum


class ConnectionStatus(Enum):
    """Lifecycle states of the single outbound connection.

    ``CONNECTING`` covers the whole dial/handshake/retry loop; at most one
    such loop runs per writer.
    """

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"

    @property
    def is_connected(self) -> bool:
        return self is ConnectionStatus.CONNECTED


__all__ = ["ConnectionStatus"]
