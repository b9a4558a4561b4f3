from __future__ import annotations

import pytest

from lib_cutelog.domain import framing
from lib_cutelog.domain.framing import FrameDecoder, FrameTooLargeError, encode_frame, handshake_payload
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]

RECORD_130 = (
    b'{"name": "MyServer.ReqHandler", "level": "debug", "created": 1528702099, '
    b'"msg": "User registered", "username": "bob", "id": 13525}'
)


@pytest.mark.parametrize(
    "payload, header",
    [
        (b"", b"\x00\x00\x00\x00"),
        (b"{}", b"\x00\x00\x00\x02"),
        (RECORD_130, b"\x00\x00\x00\x82"),
    ],
)
def test_encode_frame_prefixes_big_endian_length(payload: bytes, header: bytes) -> None:
    assert encode_frame(payload) == header + payload


def test_sample_record_is_130_bytes() -> None:
    assert len(RECORD_130) == 130


def test_encode_frame_accepts_bytearray_and_memoryview() -> None:
    assert encode_frame(bytearray(b"ab")) == b"\x00\x00\x00\x02ab"
    assert encode_frame(memoryview(b"abc")) == b"\x00\x00\x00\x03abc"


def test_encode_frame_uses_all_four_length_bytes() -> None:
    payload = b"x" * 70_000
    assert encode_frame(payload)[:4] == b"\x00\x01\x11\x70"


def test_encode_frame_rejects_payload_beyond_prefix(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(framing, "MAX_PAYLOAD", 3)
    with pytest.raises(FrameTooLargeError, match="frame limit"):
        encode_frame(b"abcd")


def test_handshake_payload_announces_format() -> None:
    assert handshake_payload("json") == b"!!cutelog!!format=json"
    assert handshake_payload("msgpack") == b"!!cutelog!!format=msgpack"


def test_handshake_is_framed_like_any_payload() -> None:
    frame = encode_frame(handshake_payload("cbor"))
    assert frame == b"\x00\x00\x00\x16!!cutelog!!format=cbor"


def test_decoder_reassembles_frames_split_byte_by_byte() -> None:
    stream = encode_frame(b"{}") + encode_frame(b"") + encode_frame(RECORD_130)
    decoder = FrameDecoder()
    frames: list[bytes] = []
    for index in range(len(stream)):
        frames.extend(decoder.feed(stream[index : index + 1]))
    assert frames == [b"{}", b"", RECORD_130]
    assert decoder.pending == 0


def test_decoder_keeps_incomplete_tail() -> None:
    decoder = FrameDecoder()
    assert decoder.feed(encode_frame(b"done") + b"\x00\x00\x00\x05ab") == [b"done"]
    assert decoder.pending == 6
    assert decoder.feed(b"cde") == [b"abcde"]
