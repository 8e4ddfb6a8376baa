"""Tests for output formatters: Rich tables, JSON, CSV."""

from __future__ import annotations

import csv
import io
import json
from dataclasses import replace
from datetime import date

import pytest
from conftest import SLATE_DATE, make_signal
from rich.console import Console

from prop_tracker.betting.simulator import BankrollPoint, BankrollSeries
from prop_tracker.betting.sizing import KellyFraction
from prop_tracker.live.models import LiveScoresPayload, SignalStatus
from prop_tracker.pipeline import build_board
from prop_tracker.signals.formatters import (
    format_bankroll,
    format_bankroll_csv,
    format_board,
    format_board_json,
    format_recent,
    format_stats,
)
from prop_tracker.signals.models import Outcome
from prop_tracker.signals.performance import daily_pnl, performance_stats
from prop_tracker.signals.transitions import TransitionEvent, TransitionKind


def _console() -> Console:
    return Console(file=io.StringIO(), width=160, force_terminal=False)


def _text(console: Console) -> str:
    return console.file.getvalue()


@pytest.fixture
def board(live_game, final_game):
    signals = [
        make_signal("curry", player_name="Stephen Curry", line=4.5),
        make_signal("tatum", player_name="Jayson Tatum", line=2.5,
                    outcome=Outcome.WIN, profit=0.91),
        make_signal("ghost", player_name="Unknown Guy", team="IND"),
    ]
    payload = LiveScoresPayload(games=(final_game, live_game), timestamp="2026-03-15T01:00:00+00:00")
    return build_board(
        signals, payload, connected=True, bankroll=1000.0,
        kelly_fraction=KellyFraction.QUARTER, signal_date=SLATE_DATE,
    )


@pytest.fixture
def series():
    return BankrollSeries(
        starting_bankroll=1000.0,
        points=(
            BankrollPoint(date(2026, 3, 1), 1036.36),
            BankrollPoint(date(2026, 3, 2), 984.54),
        ),
    )


class TestBoard:
    def test_table_output(self, board):
        console = _console()
        format_board(board, console)
        out = _text(console)
        assert "Signals for 2026-03-14" in out
        assert "Stephen Curry" in out
        assert "Jayson Tatum" in out
        assert "Other Signals" in out
        assert "TRACKING" in out
        assert "HIT" in out
        assert "connection lost" not in out

    def test_disconnected_marker(self, board):
        console = _console()
        format_board(replace(board, connected=False), console)
        assert "connection lost" in _text(console)

    def test_empty_board(self):
        empty = build_board(
            [], LiveScoresPayload(games=(), timestamp=""), connected=True,
            bankroll=None, kelly_fraction=KellyFraction.FULL,
        )
        console = _console()
        format_board(empty, console)
        assert "No signals" in _text(console)

    def test_json(self, board):
        data = json.loads(format_board_json(board))
        assert data["signal_date"] == "2026-03-14"
        assert data["connected"] is True
        assert [g["status"] for g in data["games"]] == ["live", "final"]

        curry = data["games"][0]["signals"][0]
        assert curry["signal_status"] == "tracking"
        assert curry["resolved"] is False
        assert curry["live_three_pointers_made"] == 5
        assert curry["dollar_bet"] == pytest.approx(10.0)
        assert curry["edge_quality"] == "sweet-spot"

        tatum = data["games"][1]["signals"][0]
        assert tatum["resolved"] is True

        assert data["unmatched_signals"][0]["team"] == "IND"
        assert data["active_bets"] == 2
        assert data["events"] == []

    def test_json_events(self, board):
        flashed = replace(
            board, events=[TransitionEvent("curry", TransitionKind.FLASH, SignalStatus.HIT)],
        )
        data = json.loads(format_board_json(flashed))
        assert data["events"] == [{"signal_id": "curry", "kind": "flash", "status": "hit"}]


class TestBankroll:
    def test_table(self, series):
        console = _console()
        format_bankroll(series, console)
        out = _text(console)
        assert "Bankroll Growth" in out
        assert "2026-03-02" in out
        assert "-1.5%" in out

    def test_empty(self):
        console = _console()
        format_bankroll(BankrollSeries(starting_bankroll=1000.0, points=()), console)
        assert "No settled trades" in _text(console)

    def test_csv(self, series):
        rows = list(csv.reader(io.StringIO(format_bankroll_csv(series))))
        assert rows[0] == ["date", "bankroll"]
        assert rows[1] == ["2026-03-01", "1036.36"]
        assert len(rows) == 3


def test_format_stats():
    signals = [
        make_signal("w", outcome=Outcome.WIN, profit=0.91),
        make_signal("l", outcome=Outcome.LOSS, profit=-1.0),
        make_signal("p"),
    ]
    console = _console()
    format_stats(performance_stats(signals), daily_pnl(signals), console)
    out = _text(console)
    assert "Signal Performance Summary" in out
    assert "1-1-0" in out
    assert "50.0%" in out
    assert "Daily P&L" in out


def test_format_recent():
    console = _console()
    format_recent([make_signal("w", outcome=Outcome.WIN, profit=0.91)], console)
    out = _text(console)
    assert "Recent Results" in out
    assert "WIN" in out


def test_format_recent_empty():
    console = _console()
    format_recent([], console)
    assert "No settled results" in _text(console)


def test_bracketed_names_render_literally():
    signals = [make_signal("odd", player_name="Ty [/x] Jr", team="[b]")]
    board = build_board(
        signals, LiveScoresPayload(games=(), timestamp=""), connected=True,
        bankroll=None, kelly_fraction=KellyFraction.FULL, signal_date=SLATE_DATE,
    )
    console = _console()
    format_board(board, console)
    out = _text(console)
    assert "Ty [/x] Jr" in out
    assert "[b]" in out

    console = _console()
    format_recent([make_signal("w", player_name="[red]Ty[/red]", outcome=Outcome.WIN, profit=0.91)], console)
    assert "[red]Ty[/red]" in _text(console)
