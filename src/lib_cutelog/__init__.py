"""Forward log records to a cutelog instance over a reconnecting TCP socket.

Typical use attaches :class:`CutelogHandler` to a logger; code that produces
its own serialized records calls :func:`create_writer` and writes bytes to
the returned :class:`CutelogWriter`.
"""

from __future__ import annotations

from .__init__conf__ import summary_info
from .adapters import CutelogHandler, CutelogWriter, create_writer
from .config import WriterSettings
from .domain import (
    ConnectionStatus,
    Endpoint,
    EndpointError,
    FrameDecoder,
    FrameTooLargeError,
    WriteResult,
    encode_frame,
    handshake_payload,
)

__all__ = [
    "ConnectionStatus",
    "CutelogHandler",
    "CutelogWriter",
    "Endpoint",
    "EndpointError",
    "FrameDecoder",
    "FrameTooLargeError",
    "WriteResult",
    "WriterSettings",
    "create_writer",
    "encode_frame",
    "handshake_payload",
    "summary_info",
]
