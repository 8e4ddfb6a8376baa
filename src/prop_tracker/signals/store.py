"""Paper trade store (SQLite via aiosqlite).

Rows are written by the upstream model and settled by a separate
reconciliation job; the dashboard side only reads them. Writes are kept here
for seeding, imports and tests.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path

import aiosqlite

from prop_tracker.common.types import parse_date, parse_iso
from prop_tracker.config import get_settings
from prop_tracker.live.names import normalize_player_name
from prop_tracker.signals.models import Outcome, Side, Signal

_CREATE_TRADES = """
CREATE TABLE IF NOT EXISTS paper_trades (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    signal_id TEXT NOT NULL UNIQUE,
    signal_date TEXT NOT NULL,
    player_name TEXT NOT NULL,
    player_id TEXT,
    prediction REAL,
    line REAL NOT NULL,
    side TEXT NOT NULL,
    odds INTEGER NOT NULL,
    edge_pct REAL NOT NULL,
    model_prob REAL,
    implied_prob REAL,
    kelly_stake REAL NOT NULL,
    bookmaker TEXT,
    strategy TEXT,
    team TEXT,
    actual REAL,
    outcome TEXT,  -- NULL until settled: win, loss, push, voided
    profit REAL,
    created_at TEXT
);
"""

_CREATE_TRADES_INDEX = """
CREATE INDEX IF NOT EXISTS idx_paper_trades_date ON paper_trades(signal_date);
"""

_CREATE_PLAYER_TEAMS = """
CREATE TABLE IF NOT EXISTS player_teams (
    signal_date TEXT NOT NULL,
    player_name TEXT NOT NULL,
    team TEXT NOT NULL,
    PRIMARY KEY (signal_date, player_name)
);
"""

_UPSERT_PLAYER_TEAM = """
INSERT INTO player_teams (signal_date, player_name, team)
VALUES (?, ?, ?)
ON CONFLICT (signal_date, player_name) DO UPDATE SET team = excluded.team
"""

_COLUMNS = (
    "signal_id, signal_date, player_name, player_id, prediction, line, side, odds, "
    "edge_pct, model_prob, implied_prob, kelly_stake, bookmaker, strategy, team, "
    "actual, outcome, profit, created_at"
)


def _row_to_signal(row: aiosqlite.Row) -> Signal:
    return Signal(
        signal_id=row["signal_id"],
        signal_date=parse_date(row["signal_date"]),
        player_name=row["player_name"],
        player_id=row["player_id"] or "",
        line=row["line"],
        side=Side(row["side"]),
        odds=row["odds"],
        edge_pct=row["edge_pct"],
        kelly_stake=row["kelly_stake"],
        bookmaker=row["bookmaker"] or "",
        team=row["team"] or None,
        outcome=Outcome(row["outcome"]) if row["outcome"] else None,
        profit=row["profit"],
        prediction=row["prediction"],
        model_prob=row["model_prob"],
        implied_prob=row["implied_prob"],
        strategy=row["strategy"] or "",
        actual=row["actual"],
        created_at=parse_iso(row["created_at"]),
    )


def _signal_params(signal: Signal) -> tuple:
    return (
        signal.signal_id,
        signal.signal_date.isoformat(),
        signal.player_name,
        signal.player_id,
        signal.prediction,
        signal.line,
        signal.side.value,
        signal.odds,
        signal.edge_pct,
        signal.model_prob,
        signal.implied_prob,
        signal.kelly_stake,
        signal.bookmaker,
        signal.strategy,
        signal.team,
        signal.actual,
        signal.outcome.value if signal.outcome else None,
        signal.profit,
        signal.created_at.isoformat() if signal.created_at else None,
    )


class SignalStore:
    """Read/write access to the paper_trades and player_teams tables."""

    def __init__(self, db_path: Path | None = None) -> None:
        self._db_path = db_path or get_settings().db_path

    async def _ensure_db(self) -> None:
        """Create database and tables if they don't exist."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        async with aiosqlite.connect(str(self._db_path)) as db:
            await db.execute(_CREATE_TRADES)
            await db.execute(_CREATE_TRADES_INDEX)
            await db.execute(_CREATE_PLAYER_TEAMS)
            await db.commit()

    async def _fetch_signals(self, where: str = "", params: tuple = (), order: str = "") -> list[Signal]:
        await self._ensure_db()
        query = f"SELECT {_COLUMNS} FROM paper_trades {where} {order}"
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(query, params)
            rows = await cursor.fetchall()
        return [_row_to_signal(row) for row in rows]

    async def log_signal(self, signal: Signal) -> int:
        """Insert a signal. Returns the row ID."""
        await self._ensure_db()
        placeholders = ", ".join("?" * len(_COLUMNS.split(",")))
        async with aiosqlite.connect(str(self._db_path)) as db:
            cursor = await db.execute(
                f"INSERT INTO paper_trades ({_COLUMNS}) VALUES ({placeholders})",
                _signal_params(signal),
            )
            await db.commit()
            return cursor.lastrowid

    async def log_signals(self, signals: list[Signal]) -> list[int]:
        """Insert multiple signals. Returns list of row IDs."""
        ids = []
        for signal in signals:
            ids.append(await self.log_signal(signal))
        return ids

    async def import_signals(self, signals: list[Signal]) -> int:
        """Insert signals whose signal_id is not stored yet and record their teams.

        Returns:
            Number of new rows
        """
        await self._ensure_db()
        placeholders = ", ".join("?" * len(_COLUMNS.split(",")))
        inserted = 0
        async with aiosqlite.connect(str(self._db_path)) as db:
            for signal in signals:
                cursor = await db.execute(
                    f"INSERT OR IGNORE INTO paper_trades ({_COLUMNS}) VALUES ({placeholders})",
                    _signal_params(signal),
                )
                inserted += cursor.rowcount
                if signal.team:
                    await db.execute(_UPSERT_PLAYER_TEAM, (
                        signal.signal_date.isoformat(), signal.player_name, signal.team,
                    ))
            await db.commit()
        return inserted

    async def settle(
        self,
        signal_id: str,
        outcome: Outcome,
        profit: float | None,
        actual: float | None = None,
    ) -> int:
        """Record the outcome of a pending signal.

        Settled rows are immutable: a signal that already has an outcome is
        left untouched.

        Returns:
            Number of rows updated (0 or 1)
        """
        if profit is None and outcome is not Outcome.VOIDED:
            raise ValueError(f"profit is required for outcome {outcome.value!r}")
        await self._ensure_db()
        async with aiosqlite.connect(str(self._db_path)) as db:
            cursor = await db.execute(
                """UPDATE paper_trades
                   SET outcome = ?, profit = ?, actual = ?
                   WHERE signal_id = ? AND outcome IS NULL""",
                (outcome.value, profit, actual, signal_id),
            )
            await db.commit()
            return cursor.rowcount

    async def get_signals_for_date(self, signal_date: date) -> list[Signal]:
        """All signals for one day, highest edge first."""
        return await self._fetch_signals(
            "WHERE signal_date = ?", (signal_date.isoformat(),), "ORDER BY edge_pct DESC, id",
        )

    async def get_latest_signal_date(self) -> date | None:
        await self._ensure_db()
        async with aiosqlite.connect(str(self._db_path)) as db:
            cursor = await db.execute("SELECT MAX(signal_date) FROM paper_trades")
            row = await cursor.fetchone()
        return parse_date(row[0]) if row and row[0] else None

    async def get_latest_signals(self) -> tuple[date | None, list[Signal]]:
        """Signals of the most recent signal_date (the slate the live view tracks)."""
        latest = await self.get_latest_signal_date()
        if latest is None:
            return None, []
        return latest, await self.get_signals_for_date(latest)

    async def get_pending_signals(self) -> list[Signal]:
        return await self._fetch_signals(
            "WHERE outcome IS NULL", order="ORDER BY signal_date, id",
        )

    async def get_settled_trades(self) -> list[Signal]:
        """Settled trades in replay order: by date, then insertion."""
        return await self._fetch_signals(
            "WHERE outcome IS NOT NULL", order="ORDER BY signal_date, id",
        )

    async def get_recent_results(self, limit: int = 10) -> list[Signal]:
        return await self._fetch_signals(
            "WHERE outcome IS NOT NULL", order=f"ORDER BY signal_date DESC, id DESC LIMIT {int(limit)}",
        )

    async def get_all_signals(self) -> list[Signal]:
        return await self._fetch_signals(order="ORDER BY signal_date, id")

    async def upsert_player_team(self, signal_date: date, player_name: str, team: str) -> None:
        await self._ensure_db()
        async with aiosqlite.connect(str(self._db_path)) as db:
            await db.execute(
                _UPSERT_PLAYER_TEAM, (signal_date.isoformat(), player_name, team),
            )
            await db.commit()

    async def get_team_lookup(self, on_or_before: date | None = None) -> dict[str, str]:
        """Normalized player name -> team, most recent date winning."""
        await self._ensure_db()
        query = "SELECT player_name, team FROM player_teams"
        params: tuple = ()
        if on_or_before is not None:
            query += " WHERE signal_date <= ?"
            params = (on_or_before.isoformat(),)
        query += " ORDER BY signal_date"
        async with aiosqlite.connect(str(self._db_path)) as db:
            cursor = await db.execute(query, params)
            rows = await cursor.fetchall()
        return {normalize_player_name(name): team for name, team in rows}
