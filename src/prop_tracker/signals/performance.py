"""Performance aggregates over persisted paper trades."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable

from prop_tracker.betting.policy import is_active_trade
from prop_tracker.signals.models import Outcome, Signal


@dataclass(frozen=True)
class PerformanceStats:
    total_pnl: float
    wins: int
    losses: int
    pushes: int
    total_bets: int
    pending_bets: int

    @property
    def win_rate(self) -> float | None:
        """Wins over decided bets (pushes and voids excluded)."""
        decided = self.wins + self.losses
        return self.wins / decided if decided else None


@dataclass(frozen=True)
class DailyPnL:
    date: date
    bets: int
    wins: int
    losses: int
    profit: float
    cumulative_profit: float


def _counted(signals: Iterable[Signal]) -> list[Signal]:
    return [s for s in signals if is_active_trade(s.signal_date, s.edge_pct)]


def performance_stats(signals: Iterable[Signal]) -> PerformanceStats:
    """Summarize counted trades. Voided trades are settled but carry no result."""
    counted = _counted(signals)
    settled = [s for s in counted if not s.is_pending and s.outcome is not Outcome.VOIDED]
    return PerformanceStats(
        total_pnl=sum(s.profit or 0.0 for s in settled),
        wins=sum(1 for s in settled if s.outcome is Outcome.WIN),
        losses=sum(1 for s in settled if s.outcome is Outcome.LOSS),
        pushes=sum(1 for s in settled if s.outcome is Outcome.PUSH),
        total_bets=len(settled),
        pending_bets=sum(1 for s in counted if s.is_pending),
    )


def daily_pnl(signals: Iterable[Signal]) -> list[DailyPnL]:
    """Per-day results with a running profit total, oldest day first."""
    by_day: dict[date, list[Signal]] = {}
    for s in _counted(signals):
        if s.is_pending or s.outcome is Outcome.VOIDED:
            continue
        by_day.setdefault(s.signal_date, []).append(s)

    rows: list[DailyPnL] = []
    cumulative = 0.0
    for day in sorted(by_day):
        trades = by_day[day]
        profit = sum(t.profit or 0.0 for t in trades)
        cumulative += profit
        rows.append(
            DailyPnL(
                date=day,
                bets=len(trades),
                wins=sum(1 for t in trades if t.outcome is Outcome.WIN),
                losses=sum(1 for t in trades if t.outcome is Outcome.LOSS),
                profit=profit,
                cumulative_profit=cumulative,
            )
        )
    return rows
