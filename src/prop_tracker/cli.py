"""Typer CLI: prop-tracker live, bankroll, stats, recent, import-signals, settle."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from prop_tracker.config import get_settings

app = typer.Typer(
    name="prop-tracker",
    help="Track NBA three-pointers-made prop signals against live games",
    no_args_is_help=True,
)
console = Console()


def _kelly(value: Optional[float]):
    from prop_tracker.betting.sizing import KellyFraction

    if value is None:
        value = get_settings().kelly_fraction
    try:
        return KellyFraction(value)
    except ValueError:
        raise typer.BadParameter(f"kelly fraction must be 1, 0.5 or 0.25, got {value}")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


@app.command()
def live(
    output: str = typer.Option(
        "table", "--output", "-o",
        help="Output format: table, json",
    ),
    bankroll: Optional[float] = typer.Option(
        None, "--bankroll", "-b",
        help="Current bankroll for bet sizing (omit to disable sizing)",
    ),
    kelly: Optional[float] = typer.Option(
        None, "--kelly", "-k",
        help="Kelly fraction: 1, 0.5 or 0.25",
    ),
    watch: bool = typer.Option(
        False, "--watch", "-w",
        help="Keep polling until every game is final",
    ),
) -> None:
    """Show the latest slate's signals matched against live games."""
    kelly_fraction = _kelly(kelly)
    settings = get_settings()
    if bankroll is None:
        bankroll = settings.bankroll

    async def _run() -> None:
        from prop_tracker.live.poller import PollResult, poll_live_scores
        from prop_tracker.live.proxy import LiveScoresProxy
        from prop_tracker.pipeline import LiveBoard, build_board, load_slate, run_live_pass
        from prop_tracker.signals.formatters import format_board, format_board_json
        from prop_tracker.signals.store import SignalStore
        from prop_tracker.signals.transitions import EventBoard, TransitionDetector

        store = SignalStore()
        proxy = LiveScoresProxy()
        detector = TransitionDetector()
        slate = await load_slate(store)

        def _show(board: LiveBoard) -> None:
            if output == "json":
                console.print_json(format_board_json(board))
            else:
                format_board(board, console)

        if not watch:
            board = await run_live_pass(
                store, proxy,
                bankroll=bankroll, kelly_fraction=kelly_fraction,
                detector=detector, slate=slate,
            )
            _show(board)
            return

        event_board = EventBoard()

        def _on_update(result: PollResult) -> None:
            board = build_board(
                slate.signals,
                result.payload,
                connected=result.connected,
                bankroll=bankroll,
                kelly_fraction=kelly_fraction,
                signal_date=slate.signal_date,
                team_lookup=slate.team_lookup,
                detector=detector,
            )
            event_board.post(board.events)
            _show(board)
            for signal_id, status in event_board.flashes().items():
                console.print(f"[bold]{escape(signal_id)} just resolved: {status.value.upper()}[/bold]")

        await poll_live_scores(proxy, _on_update, settings.poll_interval_seconds)

    asyncio.run(_run())


@app.command(name="bankroll")
def bankroll_cmd(
    kelly: Optional[float] = typer.Option(
        None, "--kelly", "-k",
        help="Kelly fraction: 1, 0.5 or 0.25",
    ),
    start: Optional[float] = typer.Option(
        None, "--start", "-s",
        help="Starting bankroll",
    ),
    output: str = typer.Option(
        "table", "--output", "-o",
        help="Output format: table, csv",
    ),
) -> None:
    """Replay settled trades into a bankroll series."""
    kelly_fraction = _kelly(kelly)
    starting = start if start is not None else get_settings().starting_bankroll
    if starting <= 0:
        raise typer.BadParameter("starting bankroll must be > 0")

    async def _run() -> None:
        from prop_tracker.pipeline import run_bankroll_simulation
        from prop_tracker.signals.formatters import format_bankroll, format_bankroll_csv
        from prop_tracker.signals.store import SignalStore

        series = await run_bankroll_simulation(SignalStore(), kelly_fraction, starting)
        if output == "csv":
            console.print(format_bankroll_csv(series), end="")
        else:
            format_bankroll(series, console)

    asyncio.run(_run())


@app.command()
def stats() -> None:
    """Show historical signal performance statistics."""

    async def _run() -> None:
        from prop_tracker.signals.formatters import format_stats
        from prop_tracker.signals.performance import daily_pnl, performance_stats
        from prop_tracker.signals.store import SignalStore

        signals = await SignalStore().get_all_signals()
        format_stats(performance_stats(signals), daily_pnl(signals), console)

    asyncio.run(_run())


@app.command()
def recent(
    limit: int = typer.Option(10, "--limit", "-n", help="Number of results"),
) -> None:
    """List the most recent settled results."""

    async def _run() -> None:
        from prop_tracker.signals.formatters import format_recent
        from prop_tracker.signals.store import SignalStore

        format_recent(await SignalStore().get_recent_results(limit), console)

    asyncio.run(_run())


@app.command(name="import-signals")
def import_signals(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="CSV export of signals"),
) -> None:
    """Load signals from a CSV file; rows already stored are skipped."""

    async def _run() -> None:
        from prop_tracker.signals.importer import read_signals_csv
        from prop_tracker.signals.store import SignalStore

        signals, errors = read_signals_csv(path, created_at=datetime.now(timezone.utc))
        for error in errors:
            console.print(f"[red]{escape(error)}[/red]")
        inserted = await SignalStore().import_signals(signals)
        console.print(
            f"Imported {inserted} new signal(s), "
            f"{len(signals) - inserted} already stored, {len(errors)} invalid"
        )

    asyncio.run(_run())


@app.command()
def settle(
    signal_id: str = typer.Argument(..., help="Signal to settle"),
    outcome: str = typer.Argument(..., help="win, loss, push or voided"),
    profit: Optional[float] = typer.Option(
        None, "--profit", "-p",
        help="Realized return per unit staked (required unless voided)",
    ),
    actual: Optional[float] = typer.Option(None, "--actual", "-a", help="Final 3PM"),
) -> None:
    """Record the outcome of a pending signal."""
    from prop_tracker.signals.models import Outcome

    try:
        result = Outcome(outcome.lower())
    except ValueError:
        raise typer.BadParameter(f"outcome must be win, loss, push or voided, got {outcome!r}")
    if profit is None and result is not Outcome.VOIDED:
        raise typer.BadParameter(f"--profit is required for outcome {result.value!r}")

    async def _run() -> None:
        from prop_tracker.signals.store import SignalStore

        updated = await SignalStore().settle(signal_id, result, profit, actual)
        if updated:
            console.print(f"[green]Settled {escape(signal_id)}: {result.value}[/green]")
        else:
            console.print(f"[yellow]{escape(signal_id)} not found or already settled[/yellow]")

    asyncio.run(_run())


if __name__ == "__main__":
    app()
