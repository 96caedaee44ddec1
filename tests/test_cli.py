"""Tests for the command-line interface."""
import pytest

from pitch import cli


def test_simulate_reports_results(capsys):
    cli.main(["simulate", "--games", "3", "--seed", "1"])
    out = capsys.readouterr().out
    assert "games=3" in out
    assert "avg_rounds=" in out
    wins = [int(part.split("=")[1]) for part in out.split() if part.startswith("team")]
    assert sum(wins) == 3


def test_play_quits_on_q(monkeypatch, capsys):
    monkeypatch.setattr("builtins.input", lambda prompt="": "q")
    cli.main(["play", "--seed", "2"])
    out = capsys.readouterr().out
    assert "Your hand:" in out


def test_command_is_required():
    with pytest.raises(SystemExit):
        cli.main([])
