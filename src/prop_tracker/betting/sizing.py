"""Bet sizing: capped fractional Kelly, edge-weighted, scaled to a daily risk cap.

The allocation is linear. Each signal gets

    min(kelly_stake, max_bet_pct) * kelly_fraction * edge_multiplier

of the bankroll. If the pending total exceeds
``bankroll * max_risk_pct * kelly_fraction`` every pending stake shrinks by
the same factor, so raw-stake ratios are preserved. Settled signals are sized
for display but never consume the risk budget.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Sequence, Union

from prop_tracker.betting.edge import EdgeQuality, classify_edge
from prop_tracker.betting.policy import CURRENT_POLICY, StakingPolicy, policy_for_date
from prop_tracker.signals.models import EnrichedSignal, Signal

Sizable = Union[Signal, EnrichedSignal]


class KellyFraction(Enum):
    FULL = 1.0
    HALF = 0.5
    QUARTER = 0.25

    @property
    def label(self) -> str:
        return {1.0: "Full Kelly", 0.5: "Half Kelly", 0.25: "Quarter Kelly"}[self.value]


@dataclass(frozen=True)
class SizedSignal:
    """A signal (plain or live-enriched) with its dollar stake.

    ``dollar_bet`` is None when no stake is assigned.
    """

    item: Sizable
    dollar_bet: float | None
    edge_quality: EdgeQuality
    is_sweet_spot: bool

    @property
    def signal(self) -> Signal:
        return _base_signal(self.item)


@dataclass(frozen=True)
class SizingResult:
    signals: tuple[SizedSignal, ...]
    total_risk: float
    active_bets: int


def _base_signal(item: Sizable) -> Signal:
    return item.signal if isinstance(item, EnrichedSignal) else item


def raw_stake_pct(
    signal: Signal,
    kelly_fraction: KellyFraction,
    policy: StakingPolicy | None = None,
) -> float:
    """Fraction of bankroll to stake before the daily cap. 0 when excluded."""
    policy = policy or policy_for_date(signal.signal_date)
    multiplier = policy.multiplier(signal.edge_pct)
    if multiplier <= 0:
        return 0.0
    return min(signal.kelly_stake, policy.max_bet_pct) * kelly_fraction.value * multiplier


def daily_risk_cap(
    bankroll: float,
    kelly_fraction: KellyFraction,
    policy: StakingPolicy = CURRENT_POLICY,
) -> float:
    return bankroll * policy.max_risk_pct * kelly_fraction.value


def scale_to_cap(stakes: Sequence[float], cap: float) -> list[float]:
    """Shrink positive stakes uniformly so they sum to at most ``cap``."""
    total = sum(s for s in stakes if s > 0)
    if total <= cap or total <= 0:
        return list(stakes)
    factor = cap / total
    return [s * factor if s > 0 else s for s in stakes]


def size_bets(
    signals: Sequence[Sizable],
    bankroll: float | None,
    kelly_fraction: KellyFraction,
    *,
    as_of: date | None = None,
) -> SizingResult:
    """Assign a dollar stake to every signal.

    Args:
        signals: Signals or enriched signals, pending and settled mixed
        bankroll: Current bankroll; None or <= 0 disables sizing
        kelly_fraction: Fractional Kelly setting
        as_of: Day whose policy sets the daily cap (defaults to the current policy)

    Returns:
        SizingResult with per-signal stakes in input order, the total pending
        risk and the number of pending signals with a positive stake.
    """
    base = [_base_signal(item) for item in signals]
    tiers = [classify_edge(s.edge_pct) for s in base]
    active = [policy_for_date(s.signal_date).is_active(s.edge_pct) for s in base]

    if not bankroll or bankroll <= 0:
        sized = tuple(
            SizedSignal(item, None, tier.quality, is_active)
            for item, tier, is_active in zip(signals, tiers, active)
        )
        return SizingResult(signals=sized, total_risk=0.0, active_bets=0)

    raw = [bankroll * raw_stake_pct(s, kelly_fraction) for s in base]

    pending_idx = [i for i, s in enumerate(base) if s.is_pending]
    policy = policy_for_date(as_of) if as_of is not None else CURRENT_POLICY
    cap = daily_risk_cap(bankroll, kelly_fraction, policy)
    scaled = scale_to_cap([raw[i] for i in pending_idx], cap)

    stakes = list(raw)
    for i, stake in zip(pending_idx, scaled):
        stakes[i] = stake

    sized = tuple(
        SizedSignal(
            item=item,
            dollar_bet=stake if raw_amount > 0 else None,
            edge_quality=tier.quality,
            is_sweet_spot=is_active,
        )
        for item, stake, raw_amount, tier, is_active in zip(signals, stakes, raw, tiers, active)
    )

    pending_bets = [sized[i].dollar_bet for i in pending_idx if sized[i].dollar_bet]
    return SizingResult(
        signals=sized,
        total_risk=float(sum(pending_bets)),
        active_bets=len(pending_bets),
    )
