"""Bankroll replay of settled paper trades.

Trades are grouped by signal_date and replayed one day at a time. Each day is
sized against the bankroll as it stood at the start of that day, using the
same per-bet cap, edge multiplier and daily risk cap as live sizing. Stakes
within a day do not compound against each other; only the day-end bankroll
carries forward.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Sequence

from prop_tracker.betting.odds import american_to_decimal
from prop_tracker.betting.policy import is_active_trade, policy_for_date
from prop_tracker.betting.sizing import KellyFraction, daily_risk_cap, raw_stake_pct, scale_to_cap
from prop_tracker.signals.models import Outcome, Signal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BankrollPoint:
    date: date
    bankroll: float


@dataclass(frozen=True)
class BankrollSeries:
    starting_bankroll: float
    points: tuple[BankrollPoint, ...]

    @property
    def final_bankroll(self) -> float:
        return self.points[-1].bankroll if self.points else self.starting_bankroll

    @property
    def profit(self) -> float:
        return self.final_bankroll - self.starting_bankroll

    @property
    def return_pct(self) -> float:
        if self.starting_bankroll <= 0:
            return 0.0
        return self.profit / self.starting_bankroll * 100.0


def eligible_trades(trades: Iterable[Signal]) -> list[Signal]:
    """Settled, non-voided trades that count under their date's policy."""
    eligible: list[Signal] = []
    for trade in trades:
        if trade.outcome is None or trade.outcome is Outcome.VOIDED:
            continue
        if trade.odds == 0:
            logger.warning("Skipping trade %s with zero American odds", trade.signal_id)
            continue
        if not is_active_trade(trade.signal_date, trade.edge_pct):
            continue
        eligible.append(trade)
    return eligible


def group_by_day(trades: Iterable[Signal]) -> list[tuple[date, list[Signal]]]:
    """Group trades by signal_date, days ascending, encounter order kept within a day."""
    days: dict[date, list[Signal]] = {}
    for trade in trades:
        days.setdefault(trade.signal_date, []).append(trade)
    return sorted(days.items(), key=lambda item: item[0])


def settle_day(
    bankroll: float,
    day: date,
    trades: Sequence[Signal],
    kelly_fraction: KellyFraction,
) -> float:
    """Apply one day of settled trades to the start-of-day bankroll."""
    policy = policy_for_date(day)
    stakes = [bankroll * raw_stake_pct(t, kelly_fraction, policy) for t in trades]
    stakes = scale_to_cap(stakes, daily_risk_cap(bankroll, kelly_fraction, policy))

    end_of_day = bankroll
    for trade, stake in zip(trades, stakes):
        if stake <= 0:
            continue
        if trade.outcome is Outcome.WIN:
            end_of_day += stake * (american_to_decimal(trade.odds) - 1.0)
        elif trade.outcome is Outcome.LOSS:
            end_of_day -= stake
    return end_of_day


def simulate_bankroll(
    trades: Iterable[Signal],
    kelly_fraction: KellyFraction,
    starting_bankroll: float,
) -> BankrollSeries:
    """Replay settled trades into an end-of-day bankroll series.

    Args:
        trades: Trades ordered by date then insertion; pending and voided
            trades are ignored
        kelly_fraction: Fractional Kelly setting
        starting_bankroll: Bankroll before the first day

    Returns:
        BankrollSeries with one point per day that had at least one eligible trade
    """
    bankroll = starting_bankroll
    points: list[BankrollPoint] = []

    for day, day_trades in group_by_day(eligible_trades(trades)):
        bankroll = settle_day(bankroll, day, day_trades, kelly_fraction)
        points.append(BankrollPoint(date=day, bankroll=bankroll))

    logger.debug(
        "Simulated %d day(s): %.2f -> %.2f (%s)",
        len(points), starting_bankroll, bankroll, kelly_fraction.label,
    )
    return BankrollSeries(starting_bankroll=starting_bankroll, points=tuple(points))
