"""Endpoint descriptor naming the cutelog instance and payload format.

Purpose
-------
Capture the immutable ``(host, port, format_tag)`` triple a writer connects
to, and parse the ``HOST:PORT`` strings used by callers, the environment and
the CLI.

Contents
--------
* :class:`Endpoint` - frozen value object with :meth:`Endpoint.parse`.
* :class:`EndpointError` - raised for malformed addresses or format tags.
* :data:`DEFAULT_PORT` / :data:`DEFAULT_FORMAT` - cutelog defaults.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 19996
DEFAULT_FORMAT = "json"


class EndpointError(ValueError):
    """Raised when an address or format tag cannot be used."""


@dataclass(slots=True, frozen=True)
class Endpoint:
    """Where to send frames and which serialization to announce.

    Attributes
    ----------
    host:
        Hostname or IP literal (IPv6 without brackets).
    port:
        TCP port in ``1..65535``.
    format_tag:
        Short ASCII identifier sent in the handshake (``json``, ``msgpack``...).
    """

    host: str
    port: int
    format_tag: str = DEFAULT_FORMAT

    def __post_init__(self) -> None:
        if not self.host:
            raise EndpointError("host must not be empty")
        if isinstance(self.port, bool) or not isinstance(self.port, int):
            raise EndpointError(f"port must be an integer, got {self.port!r}")
        if not 0 < self.port < 65536:
            raise EndpointError(f"port must be positive and below 65536, got {self.port}")
        if not self.format_tag or not self.format_tag.strip():
            raise EndpointError("format tag must not be empty")
        if not (self.format_tag.isascii() and self.format_tag.isprintable()) or any(char.isspace() for char in self.format_tag):
            raise EndpointError(f"format tag must be printable ASCII without spaces, got {self.format_tag!r}")

    @property
    def address(self) -> tuple[str, int]:
        """Return the ``(host, port)`` pair accepted by :mod:`socket`."""
        return self.host, self.port

    def __str__(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{host}:{self.port}"

    @classmethod
    def parse(cls, value: str, format_tag: str = DEFAULT_FORMAT) -> "Endpoint":
        """Parse ``HOST:PORT`` (or ``[V6ADDR]:PORT``) into an endpoint.

        Examples
        --------
        >>> Endpoint.parse("localhost:19996")
        Endpoint(host='localhost', port=19996, format_tag='json')
        >>> Endpoint.parse("[::1]:9000", "msgpack").address
        ('::1', 9000)
        >>> Endpoint.parse("localhost")
        Traceback (most recent call last):
        ...
        lib_cutelog.domain.endpoint.EndpointError: expected HOST:PORT, got 'localhost'
        """
        raw = value.strip()
        host, sep, port_str = raw.rpartition(":")
        if not sep or not host:
            raise EndpointError(f"expected HOST:PORT, got {value!r}")
        if host.startswith("[") and host.endswith("]"):
            host = host[1:-1]
        elif ":" in host:
            raise EndpointError(f"IPv6 hosts must be bracketed as [ADDR]:PORT, got {value!r}")
        try:
            port = int(port_str)
        except ValueError as exc:
            raise EndpointError(f"port must be an integer, got {port_str!r}") from exc
        return cls(host=host, port=port, format_tag=format_tag)


__all__ = ["DEFAULT_FORMAT", "DEFAULT_HOST", "DEFAULT_PORT", "Endpoint", "EndpointError"]
