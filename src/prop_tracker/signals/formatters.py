"""Output formatters for the live board, bankroll series and stats: Rich, JSON, CSV."""

from __future__ import annotations

import csv
import io
import json

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from prop_tracker.betting.simulator import BankrollSeries
from prop_tracker.betting.sizing import SizedSignal
from prop_tracker.live.models import GameStatus, LiveGame, SignalStatus
from prop_tracker.pipeline import LiveBoard
from prop_tracker.signals.models import EnrichedSignal, Signal
from prop_tracker.signals.performance import DailyPnL, PerformanceStats
from prop_tracker.signals.transitions import TransitionKind

_STATUS_STYLE = {
    SignalStatus.SCHEDULED: "yellow",
    SignalStatus.TRACKING: "cyan",
    SignalStatus.HIT: "green",
    SignalStatus.MISS: "red",
    SignalStatus.PUSH: "white",
}


def _money(value: float | None) -> str:
    return "-" if value is None else f"${value:,.2f}"


def _game_title(game: LiveGame) -> str:
    away = escape(game.away_team.tricode)
    home = escape(game.home_team.tricode)
    matchup = f"{away} {game.away_team.score} @ {home} {game.home_team.score}"
    if game.status is GameStatus.LIVE:
        return f"{matchup}  Q{game.period} {escape(game.clock)}"
    if game.status is GameStatus.FINAL:
        return f"{matchup}  FINAL"
    return f"{away} @ {home}  {escape(game.start_time_utc)}"


def _signal_table(
    title: str,
    signals: tuple[EnrichedSignal, ...],
    stakes: dict[str, SizedSignal],
    flashes: set[str],
    ticks: set[str],
) -> Table:
    table = Table(title=title, show_lines=False)
    table.add_column("Player", width=22)
    table.add_column("Team", width=4)
    table.add_column("Side", width=10)
    table.add_column("3PM", justify="right", width=4)
    table.add_column("Min", justify="right", width=6)
    table.add_column("Edge", justify="right", width=7)
    table.add_column("Bet", justify="right", width=10)
    table.add_column("Status", width=10)

    for s in signals:
        sig = s.signal
        style = _STATUS_STYLE[s.signal_status]
        status = s.signal_status.value.upper()
        if s.signal_id in flashes:
            status = f"[reverse]{status}[/reverse]"
        three_pm = "-" if s.live_three_pointers_made is None else str(s.live_three_pointers_made)
        if s.signal_id in ticks:
            three_pm = f"[bold]{three_pm}+[/bold]"
        player = sig.player_name + (" *" if s.is_on_court else "")
        sized = stakes.get(s.signal_id)
        table.add_row(
            escape(player[:22]),
            escape(sig.team or ""),
            f"{sig.side.value.upper()} {sig.line:g}",
            three_pm,
            escape(s.minutes_played or "-"),
            f"{sig.edge_pct:+.1f}%",
            _money(sized.dollar_bet if sized else None),
            f"[{style}]{status}[/{style}]",
        )
    return table


def format_board(board: LiveBoard, console: Console | None = None) -> None:
    """Print the live board: one table per game, then unmatched signals."""
    if console is None:
        console = Console()

    rec = board.reconciliation
    if not rec.games_with_signals and not rec.unmatched_signals:
        console.print("[yellow]No signals for the latest slate.[/yellow]")
        return

    stakes = {s.signal.signal_id: s for s in board.sizing.signals}
    flashes = {e.signal_id for e in board.events if e.kind is TransitionKind.FLASH}
    ticks = {e.signal_id for e in board.events if e.kind is TransitionKind.TICK}

    header = f"[bold]Signals for {board.signal_date}[/bold]"
    if not board.connected:
        header += "  [red](connection lost)[/red]"
    console.print(header)

    counts = board.summary.counts
    chips = [
        f"{counts.get(status, 0)} {status.value}"
        for status in SignalStatus
        if counts.get(status, 0)
    ]
    line = " | ".join(chips)
    if board.summary.has_confirmed_results:
        line += f" | P&L {board.summary.confirmed_pnl:+.2f}u"
    console.print(f"[dim]{line}[/dim]")

    for group in rec.games_with_signals:
        console.print(_signal_table(_game_title(group.game), group.signals, stakes, flashes, ticks))

    if rec.unmatched_signals:
        title = "Other Signals" if rec.games_with_signals else "Today's Signals"
        console.print(_signal_table(title, rec.unmatched_signals, stakes, flashes, ticks))

    console.print(
        f"\n[dim]{board.sizing.active_bets} active bet(s), "
        f"total risk {_money(board.sizing.total_risk)}[/dim]"
    )


def format_board_json(board: LiveBoard) -> str:
    """Format the live board as a JSON string."""
    stakes = {s.signal.signal_id: s for s in board.sizing.signals}

    def _signal(s: EnrichedSignal) -> dict:
        sized = stakes.get(s.signal_id)
        return {
            "signal_id": s.signal_id,
            "player_name": s.signal.player_name,
            "team": s.signal.team,
            "line": s.signal.line,
            "side": s.signal.side.value,
            "odds": s.signal.odds,
            "edge_pct": s.signal.edge_pct,
            "live_three_pointers_made": s.live_three_pointers_made,
            "is_on_court": s.is_on_court,
            "minutes_played": s.minutes_played,
            "signal_status": s.signal_status.value,
            "resolved": s.signal_status.is_resolved,
            "dollar_bet": sized.dollar_bet if sized else None,
            "edge_quality": sized.edge_quality.value if sized else None,
        }

    return json.dumps(
        {
            "signal_date": board.signal_date.isoformat() if board.signal_date else None,
            "timestamp": board.payload.timestamp,
            "connected": board.connected,
            "games": [
                {
                    "game_id": g.game.game_id,
                    "status": g.game.status.value,
                    "home": g.game.home_team.tricode,
                    "away": g.game.away_team.tricode,
                    "period": g.game.period,
                    "clock": g.game.clock,
                    "signals": [_signal(s) for s in g.signals],
                }
                for g in board.reconciliation.games_with_signals
            ],
            "unmatched_signals": [_signal(s) for s in board.reconciliation.unmatched_signals],
            "total_risk": board.sizing.total_risk,
            "active_bets": board.sizing.active_bets,
            "events": [
                {"signal_id": e.signal_id, "kind": e.kind.value,
                 "status": e.status.value if e.status else None}
                for e in board.events
            ],
        },
        indent=2,
    )


def format_bankroll(series: BankrollSeries, console: Console | None = None) -> None:
    if console is None:
        console = Console()

    if not series.points:
        console.print("[yellow]No settled trades to simulate.[/yellow]")
        return

    table = Table(title="Bankroll Growth", show_lines=False)
    table.add_column("Date", width=10)
    table.add_column("Bankroll", justify="right", width=12)
    table.add_column("Change", justify="right", width=10)

    previous = series.starting_bankroll
    for point in series.points:
        change = point.bankroll - previous
        color = "green" if change >= 0 else "red"
        table.add_row(
            point.date.isoformat(),
            _money(point.bankroll),
            f"[{color}]{change:+,.2f}[/{color}]",
        )
        previous = point.bankroll

    console.print(table)
    console.print(
        f"\n[bold]{_money(series.starting_bankroll)} -> {_money(series.final_bankroll)}"
        f" ({series.return_pct:+.1f}%)[/bold]"
    )


def format_bankroll_csv(series: BankrollSeries) -> str:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["date", "bankroll"])
    for point in series.points:
        writer.writerow([point.date.isoformat(), f"{point.bankroll:.2f}"])
    return output.getvalue()


def format_stats(
    stats: PerformanceStats, daily: list[DailyPnL], console: Console | None = None,
) -> None:
    if console is None:
        console = Console()

    console.print("[bold]Signal Performance Summary[/bold]")
    console.print(f"  Settled bets:   {stats.total_bets}")
    console.print(f"  Pending bets:   {stats.pending_bets}")
    console.print(f"  Record:         {stats.wins}-{stats.losses}-{stats.pushes}")
    if stats.win_rate is not None:
        console.print(f"  Win rate:       {stats.win_rate:.1%}")
    else:
        console.print("  Win rate:       N/A (no decided bets)")
    console.print(f"  Total P&L:      {stats.total_pnl:+.2f}u")

    if daily:
        table = Table(title="Daily P&L")
        table.add_column("Date", width=10)
        table.add_column("Bets", justify="right")
        table.add_column("W-L", justify="right")
        table.add_column("P&L", justify="right")
        table.add_column("Cumulative", justify="right")
        for row in daily:
            table.add_row(
                row.date.isoformat(),
                str(row.bets),
                f"{row.wins}-{row.losses}",
                f"{row.profit:+.2f}",
                f"{row.cumulative_profit:+.2f}",
            )
        console.print(table)


def format_recent(results: list[Signal], console: Console | None = None) -> None:
    if console is None:
        console = Console()

    if not results:
        console.print("[yellow]No settled results yet.[/yellow]")
        return

    table = Table(title="Recent Results")
    table.add_column("Date", width=10)
    table.add_column("Player", width=22)
    table.add_column("Side", width=10)
    table.add_column("Actual", justify="right", width=6)
    table.add_column("Result", width=7)
    table.add_column("Profit", justify="right", width=8)
    for s in results:
        outcome = s.outcome.value if s.outcome else ""
        color = {"win": "green", "loss": "red"}.get(outcome, "white")
        table.add_row(
            s.signal_date.isoformat(),
            escape(s.player_name[:22]),
            f"{s.side.value.upper()} {s.line:g}",
            "-" if s.actual is None else f"{s.actual:g}",
            f"[{color}]{outcome.upper()}[/{color}]",
            "-" if s.profit is None else f"{s.profit:+.2f}",
        )
    console.print(table)
