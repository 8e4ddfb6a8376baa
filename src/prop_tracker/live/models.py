"""Live game data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class GameStatus(Enum):
    """Game state as reported by the scoreboard feed."""

    SCHEDULED = "scheduled"
    LIVE = "live"
    FINAL = "final"


class SignalStatus(Enum):
    """Live status of a signal, derived from its game and the player's stat."""

    SCHEDULED = "scheduled"
    TRACKING = "tracking"
    HIT = "hit"
    MISS = "miss"
    PUSH = "push"

    @property
    def is_resolved(self) -> bool:
        return self in (SignalStatus.HIT, SignalStatus.MISS, SignalStatus.PUSH)


@dataclass(frozen=True)
class TeamScore:
    tricode: str
    score: int = 0


@dataclass(frozen=True)
class LivePlayer:
    """A player's line in a game's boxscore.

    Attributes:
        player_id: NBA person ID
        player_name: "First Last" as printed by the feed
        team_tricode: three-letter team code
        three_pointers_made: cumulative 3PM, never decreases within a game
        is_on_court: whether the player is currently on the floor
        minutes: played time as "M:SS"
    """

    player_id: int
    player_name: str
    team_tricode: str
    three_pointers_made: int = 0
    is_on_court: bool = False
    minutes: str = "0:00"


@dataclass(frozen=True)
class LiveGame:
    """One game from the scoreboard, rebuilt from scratch on every poll."""

    game_id: str
    home_team: TeamScore
    away_team: TeamScore
    period: int
    clock: str
    status: GameStatus
    start_time_utc: str
    players: tuple[LivePlayer, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class LiveScoresPayload:
    """What the score proxy serves: all games of the day and when they were fetched."""

    games: tuple[LiveGame, ...]
    timestamp: str

    @property
    def all_final(self) -> bool:
        return bool(self.games) and all(g.status is GameStatus.FINAL for g in self.games)

    @property
    def has_live_games(self) -> bool:
        return any(g.status is GameStatus.LIVE for g in self.games)
