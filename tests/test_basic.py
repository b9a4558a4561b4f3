"""Behavioral tests for the package surface and metadata banner."""

from __future__ import annotations

import pytest

import lib_cutelog
from lib_cutelog import summary_info


def test_summary_info_contains_metadata() -> None:
    """Verify the metadata banner lists every documented field."""

    summary = summary_info()
    assert "Info for lib_cutelog" in summary
    assert "version" in summary
    assert lib_cutelog.__init__conf__.version in summary
    assert summary.endswith("\n")


def test_summary_info_is_idempotent() -> None:
    assert summary_info() == summary_info()


def test_print_info_writes_to_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    lib_cutelog.__init__conf__.print_info()
    captured = capsys.readouterr()
    assert captured.out == summary_info()
    assert captured.err == ""


@pytest.mark.parametrize("name", lib_cutelog.__all__)
def test_public_names_are_importable(name: str) -> None:
    assert getattr(lib_cutelog, name) is not None
