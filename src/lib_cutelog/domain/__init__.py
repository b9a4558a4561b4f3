"""Domain value objects shared by the cutelog writer and its adapters."""

from __future__ import annotations

from .endpoint import DEFAULT_FORMAT, DEFAULT_HOST, DEFAULT_PORT, Endpoint, EndpointError
from .framing import FrameDecoder, FrameTooLargeError, encode_frame, handshake_payload
from .result import WriteResult
from .status import ConnectionStatus

__all__ = [
    "ConnectionStatus",
    "DEFAULT_FORMAT",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "Endpoint",
    "EndpointError",
    "FrameDecoder",
    "FrameTooLargeError",
    "WriteResult",
    "encode_frame",
    "handshake_payload",
]
