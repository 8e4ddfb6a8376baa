"""Signal data models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from prop_tracker.live.models import LiveGame, SignalStatus


class Side(Enum):
    OVER = "over"
    UNDER = "under"


class Outcome(Enum):
    """Settlement result assigned by the upstream reconciliation job."""

    WIN = "win"
    LOSS = "loss"
    PUSH = "push"
    VOIDED = "voided"


@dataclass(frozen=True)
class Signal:
    """A persisted three-pointers-made prop signal (one paper trade).

    Attributes:
        signal_id: Unique row identifier from the upstream model
        signal_date: Calendar day the signal is for
        player_name: Player name as written by the model
        player_id: Player identifier from the model's data source
        line: Bookmaker threshold (e.g. 2.5 threes)
        side: OVER or UNDER
        odds: American odds, never 0
        edge_pct: Model edge over implied probability, percentage points
        kelly_stake: Full Kelly fraction of bankroll, before any adjustment
        bookmaker: Book offering the line
        team: Team tricode, may be missing
        outcome: None while pending, else the settlement result
        profit: Realized return as a fraction of a reference stake
        prediction: Model's projected 3PM
        model_prob: Model probability of the chosen side
        implied_prob: Bookmaker-implied probability
        strategy: Strategy label from the model
        actual: Settled 3PM, None while pending
        created_at: Insertion timestamp
    """

    signal_id: str
    signal_date: date
    player_name: str
    player_id: str
    line: float
    side: Side
    odds: int
    edge_pct: float
    kelly_stake: float
    bookmaker: str = ""
    team: str | None = None
    outcome: Outcome | None = None
    profit: float | None = None
    prediction: float | None = None
    model_prob: float | None = None
    implied_prob: float | None = None
    strategy: str = ""
    actual: float | None = None
    created_at: datetime | None = None

    @property
    def is_pending(self) -> bool:
        return self.outcome is None


@dataclass(frozen=True)
class EnrichedSignal:
    """A signal joined against live game state. Never persisted."""

    signal: Signal
    signal_status: SignalStatus
    live_three_pointers_made: int | None = None
    is_on_court: bool | None = None
    minutes_played: str | None = None

    @property
    def signal_id(self) -> str:
        return self.signal.signal_id


@dataclass(frozen=True)
class GameWithSignals:
    game: LiveGame
    signals: tuple[EnrichedSignal, ...]
