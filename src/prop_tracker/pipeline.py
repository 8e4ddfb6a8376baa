"""Top-level orchestrator.

Wires together: signal store -> live scores proxy -> reconciliation ->
bet sizing -> transition detection. Also runs the bankroll replay over
settled trades.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Mapping, Sequence

from prop_tracker.betting.simulator import BankrollSeries, simulate_bankroll
from prop_tracker.betting.sizing import KellyFraction, SizingResult, size_bets
from prop_tracker.live.models import LiveScoresPayload
from prop_tracker.live.proxy import LiveScoresProxy
from prop_tracker.signals.models import Signal
from prop_tracker.signals.reconciler import (
    DaySummary,
    ReconciliationResult,
    reconcile_signals,
    summarize_day,
)
from prop_tracker.signals.store import SignalStore
from prop_tracker.signals.transitions import TransitionDetector, TransitionEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LiveBoard:
    """Everything the live view renders for one poll."""

    signal_date: date | None
    payload: LiveScoresPayload
    connected: bool
    reconciliation: ReconciliationResult
    sizing: SizingResult
    summary: DaySummary
    events: list[TransitionEvent] = field(default_factory=list)


@dataclass(frozen=True)
class Slate:
    signal_date: date | None
    signals: list[Signal]
    team_lookup: dict[str, str]


async def load_slate(store: SignalStore) -> Slate:
    """Latest day's signals plus the historical player -> team map for backfill."""
    signal_date, signals = await store.get_latest_signals()
    team_lookup = await store.get_team_lookup(signal_date) if signal_date else {}
    logger.debug("Loaded %d signal(s) for %s", len(signals), signal_date)
    return Slate(signal_date=signal_date, signals=signals, team_lookup=team_lookup)


def build_board(
    signals: Sequence[Signal],
    payload: LiveScoresPayload,
    *,
    connected: bool,
    bankroll: float | None,
    kelly_fraction: KellyFraction,
    signal_date: date | None = None,
    team_lookup: Mapping[str, str] | None = None,
    detector: TransitionDetector | None = None,
) -> LiveBoard:
    """Reconcile, size and diff one snapshot of live data.

    The detector only advances when ``connected`` is true; a failed fetch
    leaves its memory untouched.
    """
    reconciliation = reconcile_signals(signals, payload.games, team_lookup)
    enriched = reconciliation.all_signals
    sizing = size_bets(enriched, bankroll, kelly_fraction, as_of=signal_date)

    events: list[TransitionEvent] = []
    if detector is not None and connected:
        events = detector.observe(enriched)

    return LiveBoard(
        signal_date=signal_date,
        payload=payload,
        connected=connected,
        reconciliation=reconciliation,
        sizing=sizing,
        summary=summarize_day(enriched),
        events=events,
    )


async def run_live_pass(
    store: SignalStore,
    proxy: LiveScoresProxy,
    *,
    bankroll: float | None,
    kelly_fraction: KellyFraction,
    detector: TransitionDetector | None = None,
    slate: Slate | None = None,
) -> LiveBoard:
    """One poll: fetch live scores and build the board for the latest slate."""
    slate = slate or await load_slate(store)
    response = await proxy.get()
    if not response.ok:
        logger.warning("Live scores unavailable (HTTP %d)", response.status_code)
    return build_board(
        slate.signals,
        response.payload,
        connected=response.ok,
        bankroll=bankroll,
        kelly_fraction=kelly_fraction,
        signal_date=slate.signal_date,
        team_lookup=slate.team_lookup,
        detector=detector,
    )


async def run_bankroll_simulation(
    store: SignalStore,
    kelly_fraction: KellyFraction,
    starting_bankroll: float,
) -> BankrollSeries:
    """Replay every settled trade in the store."""
    trades = await store.get_settled_trades()
    return simulate_bankroll(trades, kelly_fraction, starting_bankroll)
