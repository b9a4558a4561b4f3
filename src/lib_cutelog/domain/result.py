"""Outcome of a single send attempt."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class WriteResult:
    """Value returned by :meth:`CutelogWriter.write` instead of raising.

    Attributes
    ----------
    accepted:
        Length of the caller's payload. Always the full length, whether the
        payload was sent, dropped while disconnected, or lost to a failed
        write; partial writes are never reported.
    error:
        The failure observed on the send path, or ``None``.

    Examples
    --------
    >>> WriteResult(accepted=2).ok
    True
    >>> WriteResult(accepted=2, error=TimeoutError("timed out")).ok
    False
    """

    accepted: int
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __iter__(self) -> Iterator[int | Exception | None]:
        # Allows ``accepted, error = writer.write(payload)``.
        yield self.accepted
        yield self.error


__all__ = ["WriteResult"]
