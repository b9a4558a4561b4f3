"""Port describing a framed log writer."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from lib_cutelog.domain.result import WriteResult


@runtime_checkable
class WriterPort(Protocol):
    """Send opaque log payloads to a log viewer without blocking the caller."""

    def write(self, payload: bytes) -> WriteResult:
        """Send ``payload`` as one frame, or drop it when disconnected."""

    def sync(self) -> None:
        """Flush buffered data (if any)."""

    def close(self) -> None:
        """Release the underlying transport."""


__all__ = ["WriterPort"]
