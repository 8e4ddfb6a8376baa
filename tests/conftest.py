"""Shared test fixtures."""

from __future__ import annotations

from datetime import date

import pytest

from prop_tracker.live.models import GameStatus, LiveGame, LivePlayer, TeamScore
from prop_tracker.signals.models import Outcome, Side, Signal

# After the edge-weighting cutover
SLATE_DATE = date(2026, 3, 14)


def make_signal(
    signal_id: str = "sig-1",
    player_name: str = "Stephen Curry",
    line: float = 4.5,
    side: Side = Side.OVER,
    odds: int = -110,
    edge_pct: float = 10.0,
    kelly_stake: float = 0.04,
    signal_date: date = SLATE_DATE,
    team: str | None = None,
    outcome: Outcome | None = None,
    profit: float | None = None,
) -> Signal:
    return Signal(
        signal_id=signal_id,
        signal_date=signal_date,
        player_name=player_name,
        player_id=f"pid-{signal_id}",
        line=line,
        side=side,
        odds=odds,
        edge_pct=edge_pct,
        kelly_stake=kelly_stake,
        bookmaker="fanduel",
        team=team,
        outcome=outcome,
        profit=profit,
    )


def make_game(
    game_id: str,
    status: GameStatus,
    players: list[LivePlayer],
    home: str = "GSW",
    away: str = "LAL",
) -> LiveGame:
    return LiveGame(
        game_id=game_id,
        home_team=TeamScore(home, 0 if status is GameStatus.SCHEDULED else 98),
        away_team=TeamScore(away, 0 if status is GameStatus.SCHEDULED else 95),
        period=0 if status is GameStatus.SCHEDULED else 4,
        clock="" if status is GameStatus.SCHEDULED else "3:12",
        status=status,
        start_time_utc="2026-03-15T02:00:00Z",
        players=tuple(players),
    )


@pytest.fixture
def curry():
    return LivePlayer(
        player_id=201939, player_name="Stephen Curry", team_tricode="GSW",
        three_pointers_made=5, is_on_court=True, minutes="31:04",
    )


@pytest.fixture
def lebron():
    return LivePlayer(
        player_id=2544, player_name="LeBron James", team_tricode="LAL",
        three_pointers_made=1, is_on_court=False, minutes="28:40",
    )


@pytest.fixture
def bertans():
    return LivePlayer(
        player_id=202722, player_name="Dāvis Bertāns", team_tricode="CHA",
        three_pointers_made=0, is_on_court=False, minutes="0:00",
    )


@pytest.fixture
def live_game(curry, lebron):
    return make_game("0022500901", GameStatus.LIVE, [curry, lebron])


@pytest.fixture
def final_game():
    return make_game(
        "0022500900", GameStatus.FINAL,
        [LivePlayer(1628369, "Jayson Tatum", "BOS", 3, False, "36:10")],
        home="BOS", away="NYK",
    )


@pytest.fixture
def scheduled_game(bertans):
    return make_game("0022500902", GameStatus.SCHEDULED, [bertans], home="CHA", away="MIA")


# --- Mock NBA CDN payloads ---


@pytest.fixture
def scoreboard_response():
    """Today's scoreboard: one scheduled, one live, one final game."""
    return {
        "scoreboard": {
            "gameDate": "2026-03-14",
            "games": [
                {
                    "gameId": "0022500902",
                    "gameStatus": 1,
                    "period": 0,
                    "gameClock": "",
                    "gameTimeUTC": "2026-03-15T02:00:00Z",
                    "homeTeam": {"teamTricode": "CHA", "score": 0},
                    "awayTeam": {"teamTricode": "MIA", "score": 0},
                },
                {
                    "gameId": "0022500901",
                    "gameStatus": 2,
                    "period": 3,
                    "gameClock": "PT05M42.70S",
                    "gameTimeUTC": "2026-03-15T00:30:00Z",
                    "homeTeam": {"teamTricode": "GSW", "score": 77},
                    "awayTeam": {"teamTricode": "LAL", "score": 70},
                },
                {
                    "gameId": "0022500900",
                    "gameStatus": 3,
                    "period": 4,
                    "gameClock": "PT00M00.00S",
                    "gameTimeUTC": "2026-03-14T23:00:00Z",
                    "homeTeam": {"teamTricode": "BOS", "score": 112},
                    "awayTeam": {"teamTricode": "NYK", "score": 104},
                },
            ],
        }
    }


@pytest.fixture
def boxscore_response():
    """Boxscore for the live GSW/LAL game."""
    return {
        "game": {
            "gameId": "0022500901",
            "homeTeam": {
                "teamTricode": "GSW",
                "players": [
                    {
                        "personId": 201939,
                        "firstName": "Stephen",
                        "familyName": "Curry",
                        "oncourt": "1",
                        "statistics": {"threePointersMade": 4, "minutes": "PT24M09.00S"},
                    },
                    {
                        "personId": 1630228,
                        "firstName": "Jonathan",
                        "familyName": "Kuminga",
                        "oncourt": "0",
                    },
                ],
            },
            "awayTeam": {
                "teamTricode": "LAL",
                "players": [
                    {
                        "personId": 2544,
                        "firstName": "LeBron",
                        "familyName": "James",
                        "oncourt": "1",
                        "statistics": {"threePointersMade": 2, "minutes": "PT26M30.50S"},
                    },
                ],
            },
        }
    }
