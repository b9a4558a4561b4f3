"""Protocol definitions decoupling the writer from sockets and callers."""

from __future__ import annotations

from .transport import Connection, Dialer
from .writer import WriterPort

__all__ = ["Connection", "Dialer", "WriterPort"]
