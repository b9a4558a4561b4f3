"""Configuration helpers: writer timings, environment overrides and ``.env`` support.

Purpose
-------
Translate environment variables (optionally seeded from a ``.env`` file) into
the :class:`WriterSettings` and :class:`~lib_cutelog.domain.endpoint.Endpoint`
used by :func:`lib_cutelog.create_writer` and the CLI.

Contents
--------
* :class:`WriterSettings` - timing knobs of the connection manager.
* :func:`resolve_endpoint` - explicit arguments > environment > defaults.
* :func:`enable_dotenv` / :func:`should_use_dotenv` - opt-in ``.env`` loading.

Precedence is always: explicit argument, then environment variable, then
built-in default. ``.env`` files never override variables already present in
the process environment.
"""

from __future__ import annotations

import logging
import math
import os
import threading
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Mapping

from dotenv import find_dotenv, load_dotenv

from lib_cutelog.domain.endpoint import DEFAULT_FORMAT, DEFAULT_HOST, DEFAULT_PORT, Endpoint

LOGGER = logging.getLogger(__name__)

DOTENV_ENV_VAR = "CUTELOG_USE_DOTENV"
ADDRESS_ENV_VAR = "CUTELOG_ADDRESS"
FORMAT_ENV_VAR = "CUTELOG_FORMAT"
DEFAULT_ADDRESS = f"{DEFAULT_HOST}:{DEFAULT_PORT}"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}

_SETTINGS_ENV_VARS: Mapping[str, str] = {
    "connect_wait": "CUTELOG_CONNECT_WAIT",
    "retry_interval": "CUTELOG_RETRY_INTERVAL",
    "write_timeout": "CUTELOG_WRITE_TIMEOUT",
    "dial_timeout": "CUTELOG_DIAL_TIMEOUT",
}

_dotenv_path: Path | None = None


@dataclass(slots=True, frozen=True)
class WriterSettings:
    """Timing configuration of :class:`~lib_cutelog.adapters.writer.CutelogWriter`.

    Attributes
    ----------
    connect_wait:
        Longest time construction blocks waiting for the first connection.
    retry_interval:
        Fixed pause between failed connection attempts. Retries never stop.
    write_timeout:
        Deadline applied to each framed write, the handshake included.
    dial_timeout:
        Deadline for a single TCP connect.

    Examples
    --------
    >>> WriterSettings().retry_interval
    1.0
    >>> WriterSettings(write_timeout=0)
    Traceback (most recent call last):
    ...
    ValueError: write_timeout must be positive, got 0
    """

    connect_wait: float = 0.1
    retry_interval: float = 1.0
    write_timeout: float = 2.0
    dial_timeout: float = 5.0

    def __post_init__(self) -> None:
        for item in fields(self):
            value = getattr(self, item.name)
            if not math.isfinite(value) or value > threading.TIMEOUT_MAX:
                raise ValueError(f"{item.name} must be a finite number of seconds, got {value}")
            if value <= 0:
                raise ValueError(f"{item.name} must be positive, got {value}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "WriterSettings":
        """Build settings from ``CUTELOG_*`` variables, defaulting the rest."""

        env = os.environ if environ is None else environ
        overrides: dict[str, float] = {}
        for name, variable in _SETTINGS_ENV_VARS.items():
            raw = env.get(variable)
            if raw is None or not raw.strip():
                continue
            try:
                overrides[name] = float(raw)
            except ValueError as exc:
                raise ValueError(f"{variable} must be a number of seconds, got {raw!r}") from exc
        return cls(**overrides)


def resolve_endpoint(
    address: str | None = None,
    format_tag: str | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> Endpoint:
    """Return the endpoint to use, filling gaps from the environment.

    Examples
    --------
    >>> resolve_endpoint("127.0.0.1:9000", environ={})
    Endpoint(host='127.0.0.1', port=9000, format_tag='json')
    >>> resolve_endpoint(environ={"CUTELOG_ADDRESS": "viewer:19996", "CUTELOG_FORMAT": "msgpack"})
    Endpoint(host='viewer', port=19996, format_tag='msgpack')
    """

    env = os.environ if environ is None else environ
    chosen_address = address or env.get(ADDRESS_ENV_VAR) or DEFAULT_ADDRESS
    chosen_format = format_tag or env.get(FORMAT_ENV_VAR) or DEFAULT_FORMAT
    return Endpoint.parse(chosen_address, chosen_format)


def should_use_dotenv(*, explicit: bool | None = None, env_value: str | None = None) -> bool:
    """Decide whether ``.env`` loading is enabled.

    An explicit CLI flag wins; otherwise ``CUTELOG_USE_DOTENV`` decides.

    >>> should_use_dotenv(explicit=False, env_value="1")
    False
    >>> should_use_dotenv(env_value="yes")
    True
    """

    if explicit is not None:
        return explicit
    if env_value is None:
        return False
    normalized = env_value.strip().lower()
    if normalized in _TRUTHY:
        return True
    if normalized not in _FALSY:
        LOGGER.debug("Ignoring unrecognised %s value %r", DOTENV_ENV_VAR, env_value)
    return False


def enable_dotenv() -> Path | None:
    """Load the nearest ``.env`` (searching upwards from the cwd).

    Existing environment variables keep precedence. Returns the resolved
    path of the loaded file, or ``None`` when no file was found. Subsequent
    calls return the cached path without reloading.
    """

    global _dotenv_path
    if _dotenv_path is not None:
        return _dotenv_path
    candidate = find_dotenv(usecwd=True)
    if not candidate:
        LOGGER.debug("No .env file found above %s", Path.cwd())
        return None
    path = Path(candidate).resolve()
    load_dotenv(path, override=False)
    _dotenv_path = path
    LOGGER.debug("Loaded environment defaults from %s", path)
    return path


def _reset_dotenv_state_for_testing() -> None:
    """Forget the cached ``.env`` path so tests can load a fresh file."""

    global _dotenv_path
    _dotenv_path = None


__all__ = [
    "ADDRESS_ENV_VAR",
    "DEFAULT_ADDRESS",
    "DOTENV_ENV_VAR",
    "FORMAT_ENV_VAR",
    "WriterSettings",
    "enable_dotenv",
    "resolve_endpoint",
    "should_use_dotenv",
]
