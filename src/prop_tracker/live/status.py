"""Signal status state machine: scheduled -> tracking -> hit | miss | push."""

from __future__ import annotations

from prop_tracker.live.models import GameStatus, SignalStatus
from prop_tracker.signals.models import Side


def derive_signal_status(
    game_status: GameStatus,
    side: Side,
    line: float,
    live_value: float,
) -> SignalStatus:
    """Derive a signal's live status from its game and the player's current stat.

    A final game resolves against the line even if the feed never reported it
    live.
    """
    if game_status is GameStatus.SCHEDULED:
        return SignalStatus.SCHEDULED
    if game_status is GameStatus.LIVE:
        return SignalStatus.TRACKING

    if live_value == line:
        return SignalStatus.PUSH
    if side is Side.OVER:
        return SignalStatus.HIT if live_value > line else SignalStatus.MISS
    return SignalStatus.HIT if live_value < line else SignalStatus.MISS
