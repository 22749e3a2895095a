"""Tests for running flowtrace as a module (`python -m flowtrace`)."""

from __future__ import annotations

import runpy
from unittest.mock import patch

import pytest


def test_module_help_exits_zero() -> None:
    with patch("sys.argv", ["flowtrace", "--help"]):
        with pytest.raises(SystemExit) as exc_info:
            runpy.run_module("flowtrace", run_name="__main__")
    assert exc_info.value.code == 0


def test_module_run_help_exits_zero(capsys) -> None:
    with patch("sys.argv", ["flowtrace", "run", "--help"]):
        with pytest.raises(SystemExit) as exc_info:
            runpy.run_module("flowtrace", run_name="__main__")
    assert exc_info.value.code == 0
    assert "--tick-ms" in capsys.readouterr().out
