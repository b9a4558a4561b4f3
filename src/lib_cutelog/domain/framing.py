"""Length-prefixed framing used on the cutelog wire.

Purpose
-------
Encode and decode the frames understood by cutelog: a 4-byte unsigned
big-endian length followed by exactly that many payload bytes.

Contents
--------
* :func:`encode_frame` - prefix a payload with its length.
* :func:`handshake_payload` - the format announcement sent first on every
  connection.
* :class:`FrameDecoder` - incremental decoder for byte streams.
* :class:`FrameTooLargeError` - raised when a payload overflows the prefix.

System Role
-----------
Pure protocol code shared by the connection manager (encoding) and by
anything reading the stream back (decoding). Payloads stay opaque bytes.
"""

from __future__ import annotations

import struct

HEADER = struct.Struct(">I")
#: Size in bytes of the length prefix.
HEADER_SIZE = HEADER.size
#: Largest payload length representable by the prefix.
MAX_PAYLOAD = 2**32 - 1
HANDSHAKE_PREFIX = b"!!cutelog!!format="


class FrameTooLargeError(ValueError):
    """Raised when a payload does not fit a 32-bit length prefix."""


def encode_frame(payload: bytes | bytearray | memoryview) -> bytes:
    """Return ``payload`` prefixed with its big-endian uint32 length.

    Examples
    --------
    >>> encode_frame(b"")
    b'\\x00\\x00\\x00\\x00'
    >>> encode_frame(b"{}")
    b'\\x00\\x00\\x00\\x02{}'
    """
    data = bytes(payload)
    if len(data) > MAX_PAYLOAD:
        raise FrameTooLargeError(f"payload of {len(data)} bytes exceeds the {MAX_PAYLOAD} byte frame limit")
    return HEADER.pack(len(data)) + data


def handshake_payload(format_tag: str) -> bytes:
    """Return the unframed handshake announcing ``format_tag``.

    >>> handshake_payload("json")
    b'!!cutelog!!format=json'
    """
    return HANDSHAKE_PREFIX + format_tag.encode("ascii")


class FrameDecoder:
    """Split a byte stream into frame payloads.

    Bytes may arrive in arbitrary chunks; :meth:`feed` buffers partial frames
    and returns every payload completed by the new data.

    Examples
    --------
    >>> decoder = FrameDecoder()
    >>> decoder.feed(b"\\x00\\x00\\x00\\x02{")
    []
    >>> decoder.feed(b"}\\x00\\x00\\x00\\x00")
    [b'{}', b'']
    >>> decoder.pending
    0
    """

    def __init__(self) -> None:
        self._buffer = bytearray()

    @property
    def pending(self) -> int:
        """Number of buffered bytes not yet forming a complete frame."""
        return len(self._buffer)

    def feed(self, data: bytes) -> list[bytes]:
        self._buffer.extend(data)
        frames: list[bytes] = []
        while len(self._buffer) >= HEADER_SIZE:
            (length,) = HEADER.unpack_from(self._buffer)
            end = HEADER_SIZE + length
            if len(self._buffer) < end:
                break
            frames.append(bytes(self._buffer[HEADER_SIZE:end]))
            del self._buffer[:end]
        return frames


__all__ = [
    "FrameDecoder",
    "FrameTooLargeError",
    "HANDSHAKE_PREFIX",
    "HEADER_SIZE",
    "MAX_PAYLOAD",
    "encode_frame",
    "handshake_payload",
]
