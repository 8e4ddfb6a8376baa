"""Edge banding: maps a model edge to a stake multiplier and quality tier."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class EdgeQuality(Enum):
    NO_BET = "no-bet"
    LOW = "low"
    SWEET_SPOT = "sweet-spot"
    HIGH = "high"
    CAUTION = "caution"


@dataclass(frozen=True)
class EdgeTier:
    multiplier: float
    quality: EdgeQuality


NO_BET = EdgeTier(0.0, EdgeQuality.NO_BET)
LOW = EdgeTier(0.25, EdgeQuality.LOW)
SWEET_SPOT = EdgeTier(1.0, EdgeQuality.SWEET_SPOT)
HIGH = EdgeTier(0.5, EdgeQuality.HIGH)
CAUTION = EdgeTier(0.25, EdgeQuality.CAUTION)

# Band edges in percentage points
MIN_EDGE = 3.0
SWEET_SPOT_LOW = 5.0
SWEET_SPOT_HIGH = 15.0
HIGH_EDGE_MAX = 25.0


def classify_edge(edge_pct: float) -> EdgeTier:
    """Band an edge (percentage points) into a stake tier.

    Bands: [<3) no-bet, [3, 5) low, [5, 15] sweet-spot, (15, 25] high,
    (>25) caution.
    """
    if edge_pct < MIN_EDGE:
        return NO_BET
    if edge_pct < SWEET_SPOT_LOW:
        return LOW
    if edge_pct <= SWEET_SPOT_HIGH:
        return SWEET_SPOT
    if edge_pct <= HIGH_EDGE_MAX:
        return HIGH
    return CAUTION


def is_sweet_spot(edge_pct: float) -> bool:
    """True for any edge that gets a non-zero stake (low and caution included)."""
    return classify_edge(edge_pct).multiplier > 0
