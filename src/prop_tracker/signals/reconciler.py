"""Join persisted signals to live game state.

Matching is by normalized player name only. The live feed and the model spell
names differently (accents, punctuation, suffixes), so both sides go through
``normalize_player_name``. If two players in the feed share a key, the last
one seen wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Mapping, Sequence

from prop_tracker.live.models import GameStatus, LiveGame, LivePlayer, SignalStatus
from prop_tracker.live.names import normalize_player_name
from prop_tracker.live.status import derive_signal_status
from prop_tracker.signals.models import EnrichedSignal, GameWithSignals, Outcome, Signal

logger = logging.getLogger(__name__)

_STATUS_ORDER = {GameStatus.LIVE: 0, GameStatus.SCHEDULED: 1, GameStatus.FINAL: 2}


@dataclass(frozen=True)
class ReconciliationResult:
    games_with_signals: tuple[GameWithSignals, ...] = ()
    unmatched_signals: tuple[EnrichedSignal, ...] = ()

    @property
    def all_signals(self) -> list[EnrichedSignal]:
        """Every enriched signal: matched games in display order, then unmatched."""
        out = [s for g in self.games_with_signals for s in g.signals]
        out.extend(self.unmatched_signals)
        return out


@dataclass(frozen=True)
class DaySummary:
    """Live status counts for a day's signals plus P&L from confirmed outcomes."""

    counts: dict[SignalStatus, int] = field(default_factory=dict)
    confirmed_pnl: float = 0.0
    has_confirmed_results: bool = False


def build_player_index(games: Sequence[LiveGame]) -> dict[str, tuple[LiveGame, LivePlayer]]:
    index: dict[str, tuple[LiveGame, LivePlayer]] = {}
    for game in games:
        for player in game.players:
            index[normalize_player_name(player.player_name)] = (game, player)
    return index


def enrich_matched(signal: Signal, game: LiveGame, player: LivePlayer) -> EnrichedSignal:
    return EnrichedSignal(
        signal=signal if signal.team else replace(signal, team=player.team_tricode),
        signal_status=derive_signal_status(
            game.status, signal.side, signal.line, player.three_pointers_made,
        ),
        live_three_pointers_made=player.three_pointers_made,
        is_on_court=player.is_on_court,
        minutes_played=player.minutes,
    )


def enrich_unmatched(
    signal: Signal, team_lookup: Mapping[str, str] | None = None,
) -> EnrichedSignal:
    if not signal.team and team_lookup:
        team = team_lookup.get(normalize_player_name(signal.player_name))
        if team:
            signal = replace(signal, team=team)
    return EnrichedSignal(signal=signal, signal_status=SignalStatus.SCHEDULED)


def reconcile_signals(
    signals: Sequence[Signal],
    games: Sequence[LiveGame],
    team_lookup: Mapping[str, str] | None = None,
) -> ReconciliationResult:
    """Match signals to live players and group them by game.

    Args:
        signals: Signals for one date/batch
        games: Current live games
        team_lookup: Optional normalized-name -> tricode map used to backfill
            the team of signals that have no live match

    Returns:
        Games with their signals (live first, then scheduled, then final) and
        the signals that matched no player.
    """
    if not signals:
        return ReconciliationResult()

    index = build_player_index(games)
    buckets: dict[str, tuple[LiveGame, list[EnrichedSignal]]] = {}
    unmatched: list[EnrichedSignal] = []

    for signal in signals:
        match = index.get(normalize_player_name(signal.player_name))
        if match is None:
            unmatched.append(enrich_unmatched(signal, team_lookup))
            continue
        game, player = match
        bucket = buckets.setdefault(game.game_id, (game, []))
        bucket[1].append(enrich_matched(signal, game, player))

    grouped = sorted(
        (GameWithSignals(game=game, signals=tuple(items)) for game, items in buckets.values()),
        key=lambda g: _STATUS_ORDER[g.game.status],
    )

    if unmatched:
        logger.debug(
            "%d of %d signal(s) matched no live player", len(unmatched), len(signals),
        )
    return ReconciliationResult(
        games_with_signals=tuple(grouped),
        unmatched_signals=tuple(unmatched),
    )


def summarize_day(signals: Sequence[EnrichedSignal]) -> DaySummary:
    """Count live statuses and sum profit over settled, non-voided signals."""
    counts = {status: 0 for status in SignalStatus}
    confirmed_pnl = 0.0
    has_confirmed = False
    for enriched in signals:
        counts[enriched.signal_status] += 1
        outcome = enriched.signal.outcome
        if outcome is not None and outcome is not Outcome.VOIDED:
            has_confirmed = True
            confirmed_pnl += enriched.signal.profit or 0.0
    return DaySummary(counts=counts, confirmed_pnl=confirmed_pnl, has_confirmed_results=has_confirmed)
