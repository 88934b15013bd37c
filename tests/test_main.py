"""Tests for the ``python -m tictactoe`` entry point."""

import logging

import pytest

from tictactoe import __main__ as entry


@pytest.fixture
def uvicorn_calls(monkeypatch):
    calls = []
    monkeypatch.setattr(entry.uvicorn, "run", lambda *args, **kwargs: calls.append(kwargs))
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: None)
    return calls


def test_reads_server_settings_from_environment(monkeypatch, uvicorn_calls):
    monkeypatch.setenv("TICTACTOE_HOST", "127.0.0.1")
    monkeypatch.setenv("TICTACTOE_PORT", "9000")
    monkeypatch.setenv("TICTACTOE_LOG_LEVEL", "DEBUG")

    entry.main()

    assert uvicorn_calls == [
        {"host": "127.0.0.1", "port": 9000, "reload": False, "log_level": "debug"}
    ]


def test_unknown_log_level_names_the_variable(monkeypatch, uvicorn_calls):
    monkeypatch.setenv("TICTACTOE_LOG_LEVEL", "loud")

    with pytest.raises(ValueError, match="TICTACTOE_LOG_LEVEL"):
        entry.main()
    assert uvicorn_calls == []
