"""American/decimal odds conversion. Pure functions, no I/O."""

from __future__ import annotations


def american_to_decimal(odds: int) -> float:
    """Convert American odds to decimal odds.

    -150 -> 1.667, +120 -> 2.2. Zero is not a valid American price.

    Raises:
        ValueError: If ``odds`` is 0.
    """
    if odds == 0:
        raise ValueError("American odds cannot be 0")
    if odds < 0:
        return 1.0 + 100.0 / abs(odds)
    return 1.0 + odds / 100.0


def implied_probability(odds: int) -> float:
    """Bookmaker-implied win probability (vig included) for American odds."""
    return 1.0 / american_to_decimal(odds)
