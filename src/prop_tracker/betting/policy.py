"""Versioned staking policies.

Which trades count as active bets has changed over time. Before the edge
classifier existed every signal was staked; from ``SWEET_SPOT_CUTOVER`` on,
the stake is weighted by the edge tier. Backtests pick the policy by trade
date so historical bankroll curves reproduce exactly.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from prop_tracker.betting.edge import classify_edge

# Per-bet ceiling as a fraction of bankroll, applied to kelly_stake
MAX_BET_PCT = 0.05

# Daily ceiling on total pending risk, before the Kelly fraction scales it
MAX_RISK_PCT = 0.15

# First signal_date sized by the edge classifier
SWEET_SPOT_CUTOVER = date(2026, 2, 1)


@dataclass(frozen=True)
class StakingPolicy:
    """How a trade dated in [effective_from, next policy) is staked."""

    name: str
    effective_from: date
    edge_weighted: bool
    max_bet_pct: float = MAX_BET_PCT
    max_risk_pct: float = MAX_RISK_PCT

    def multiplier(self, edge_pct: float) -> float:
        if not self.edge_weighted:
            return 1.0
        return classify_edge(edge_pct).multiplier

    def is_active(self, edge_pct: float) -> bool:
        return self.multiplier(edge_pct) > 0


ALL_ACTIVE = StakingPolicy(name="all-active", effective_from=date.min, edge_weighted=False)
EDGE_WEIGHTED = StakingPolicy(
    name="edge-weighted", effective_from=SWEET_SPOT_CUTOVER, edge_weighted=True,
)

# Ordered by effective_from
POLICIES: tuple[StakingPolicy, ...] = (ALL_ACTIVE, EDGE_WEIGHTED)

CURRENT_POLICY = POLICIES[-1]


def policy_for_date(day: date) -> StakingPolicy:
    """Return the policy in force on ``day``."""
    selected = POLICIES[0]
    for policy in POLICIES:
        if policy.effective_from <= day:
            selected = policy
    return selected


def is_active_trade(signal_date: date, edge_pct: float) -> bool:
    """Whether a trade counts toward stats and the bankroll simulation."""
    return policy_for_date(signal_date).is_active(edge_pct)
