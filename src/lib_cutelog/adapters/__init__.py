"""Concrete adapters: the reconnecting socket writer and the logging handler."""

from __future__ import annotations

from .handler import CutelogHandler
from .writer import CutelogWriter, create_writer

__all__ = ["CutelogHandler", "CutelogWriter", "create_writer"]
