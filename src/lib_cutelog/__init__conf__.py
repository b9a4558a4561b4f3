"""Static package metadata surfaced by the CLI ``info`` command."""

from __future__ import annotations

import sys
from typing import Callable

name = "lib_cutelog"
title = "Send Python log records to a cutelog viewer over TCP"
version = "0.1.0"
shell_command = "lib_cutelog"


def print_info(writer: Callable[[str], object] | None = None) -> None:
    """Write the metadata banner, one ``key = value`` line per field."""

    emit = writer or sys.stdout.write
    fields = [
        ("name", name),
        ("title", title),
        ("version", version),
        ("shell_command", shell_command),
    ]
    pad = max(len(label) for label, _ in fields)
    emit(f"Info for {name}:\n\n")
    for label, value in fields:
        emit(f"    {label:<{pad}} = {value}\n")


def summary_info() -> str:
    """Return the metadata banner printed by ``lib_cutelog info``.

    >>> banner = summary_info()
    >>> "version" in banner and banner.endswith("\\n")
    True
    """
    lines: list[str] = []
    print_info(writer=lines.append)
    return "".join(lines)
