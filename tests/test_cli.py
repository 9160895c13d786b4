"""
Tests the command line entry point.
"""

import sys

import pytest

from library.scripts.cli import main


def test_usage_mentions_dev_extra(monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["library"])

    with pytest.raises(SystemExit) as excinfo:
        main()

    assert excinfo.value.code == 1
    assert "library[dev]" in capsys.readouterr().out


def test_run_dev_without_testcontainers(monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["library", "run", "dev"])
    # A None entry makes the import fail as if the package were not installed
    monkeypatch.setitem(sys.modules, "testcontainers.postgres", None)

    with pytest.raises(SystemExit) as excinfo:
        main()

    assert excinfo.value.code == 1
    assert "pip install library[dev]" in capsys.readouterr().out
