"""NBA live data CDN client: today's scoreboard plus per-game boxscores."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

import httpx

from prop_tracker.common.http import HttpClient
from prop_tracker.common.types import format_iso_duration
from prop_tracker.config import get_settings
from prop_tracker.live.models import GameStatus, LiveGame, LivePlayer, LiveScoresPayload, TeamScore

logger = logging.getLogger(__name__)

_STATUS_CODES = {1: GameStatus.SCHEDULED, 2: GameStatus.LIVE, 3: GameStatus.FINAL}


def map_game_status(code: object) -> GameStatus:
    """1 -> scheduled, 2 -> live, anything else -> final."""
    try:
        return _STATUS_CODES.get(int(code), GameStatus.FINAL)  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        return GameStatus.FINAL


def _as_int(value: object, default: int = 0) -> int:
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        return default


def _as_dict(value: object) -> dict:
    return value if isinstance(value, dict) else {}


def _as_list(value: object) -> list:
    return value if isinstance(value, list) else []


def _as_str(value: object) -> str:
    return value if isinstance(value, str) else ""


def extract_players(team_data: dict | None) -> list[LivePlayer]:
    """Player lines from one side of a boxscore. Missing fields default to zero/empty."""
    team_data = _as_dict(team_data)
    tricode = _as_str(team_data.get("teamTricode"))
    players: list[LivePlayer] = []
    for p in _as_list(team_data.get("players")):
        if not isinstance(p, dict):
            continue
        stats = _as_dict(p.get("statistics"))
        name = f"{_as_str(p.get('firstName'))} {_as_str(p.get('familyName'))}".strip()
        players.append(
            LivePlayer(
                player_id=_as_int(p.get("personId")),
                player_name=name,
                team_tricode=tricode,
                three_pointers_made=_as_int(stats.get("threePointersMade")),
                is_on_court=str(p.get("oncourt", "")) == "1",
                minutes=format_iso_duration(_as_str(stats.get("minutes")), empty="0:00"),
            )
        )
    return players


def raw_to_live_game(raw: dict, players: list[LivePlayer] | None = None) -> LiveGame:
    """Convert a scoreboard game dict to a LiveGame."""
    home = _as_dict(raw.get("homeTeam"))
    away = _as_dict(raw.get("awayTeam"))
    return LiveGame(
        game_id=str(raw.get("gameId", "")),
        home_team=TeamScore(tricode=_as_str(home.get("teamTricode")), score=_as_int(home.get("score"))),
        away_team=TeamScore(tricode=_as_str(away.get("teamTricode")), score=_as_int(away.get("score"))),
        period=_as_int(raw.get("period")),
        clock=format_iso_duration(_as_str(raw.get("gameClock"))),
        status=map_game_status(raw.get("gameStatus")),
        start_time_utc=_as_str(raw.get("gameTimeUTC")),
        players=tuple(players or ()),
    )


async def fetch_boxscore_players(client: HttpClient, game_id: str) -> list[LivePlayer]:
    """Players of both teams for one game; empty if the boxscore is unavailable."""
    settings = get_settings()
    url = settings.boxscore_url_template.format(game_id=game_id)
    try:
        data = await client.get_json(url)
    except httpx.HTTPStatusError as exc:
        logger.debug("Boxscore HTTP %d for game %s", exc.response.status_code, game_id)
        return []
    except (httpx.HTTPError, ValueError) as exc:
        logger.debug("Boxscore unavailable for game %s: %s", game_id, exc)
        return []

    game = _as_dict(_as_dict(data).get("game"))
    return extract_players(game.get("homeTeam")) + extract_players(game.get("awayTeam"))


async def fetch_live_scores() -> LiveScoresPayload:
    """Fetch today's games with player stats for every game that has tipped off.

    Raises:
        httpx.HTTPError: If the scoreboard itself cannot be fetched.
    """
    settings = get_settings()
    async with HttpClient() as client:
        data = await client.get_json(settings.scoreboard_url)
        scoreboard = _as_dict(_as_dict(data).get("scoreboard"))
        raw_games = [g for g in _as_list(scoreboard.get("games")) if isinstance(g, dict)]

        async def _build(raw: dict) -> LiveGame:
            players: list[LivePlayer] = []
            if map_game_status(raw.get("gameStatus")) is not GameStatus.SCHEDULED:
                players = await fetch_boxscore_players(client, str(raw.get("gameId", "")))
            return raw_to_live_game(raw, players)

        games = await asyncio.gather(*(_build(raw) for raw in raw_games))

    logger.debug("Fetched %d game(s) from scoreboard", len(games))
    return LiveScoresPayload(
        games=tuple(games),
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
