"""Read paper trades from CSV exports of the upstream model."""

from __future__ import annotations

import csv
import logging
import math
from datetime import datetime
from pathlib import Path

from prop_tracker.betting.odds import implied_probability
from prop_tracker.common.types import parse_date, parse_iso
from prop_tracker.signals.models import Outcome, Side, Signal

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = (
    "signal_id",
    "signal_date",
    "player_name",
    "line",
    "side",
    "odds",
    "edge_pct",
    "kelly_stake",
)


def _float(value: str) -> float:
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"not a finite number: {value.strip()!r}")
    return number


def _opt_float(value: str | None) -> float | None:
    if value is None or not value.strip():
        return None
    return _float(value)


def _opt_str(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value.strip()


def _parse_odds(value: str) -> int:
    """American odds: a non-zero whole number, "+125" and "-110.0" accepted."""
    number = _float(value)
    if not number.is_integer():
        raise ValueError(f"odds must be a whole number, got {value.strip()!r}")
    if number == 0:
        raise ValueError("odds cannot be 0")
    return int(number)


def row_to_signal(row: dict[str, str], created_at: datetime | None = None) -> Signal:
    """Convert one CSV row to a Signal.

    Optional columns may be blank or absent. A missing implied probability is
    derived from the odds.

    Raises:
        ValueError: If a required column is missing or a value does not parse.
    """
    missing = [c for c in REQUIRED_COLUMNS if not (row.get(c) or "").strip()]
    if missing:
        raise ValueError(f"missing required column(s): {', '.join(missing)}")

    odds = _parse_odds(row["odds"])

    outcome_raw = _opt_str(row.get("outcome"))
    outcome = Outcome(outcome_raw.lower()) if outcome_raw else None
    profit = _opt_float(row.get("profit"))
    if outcome is None and profit is not None:
        raise ValueError("profit given for a signal with no outcome")
    if outcome is not None and outcome is not Outcome.VOIDED and profit is None:
        raise ValueError(f"profit is required for outcome {outcome.value!r}")

    implied = _opt_float(row.get("implied_prob"))
    return Signal(
        signal_id=row["signal_id"].strip(),
        signal_date=parse_date(row["signal_date"].strip()),
        player_name=row["player_name"].strip(),
        player_id=(row.get("player_id") or "").strip(),
        line=_float(row["line"]),
        side=Side(row["side"].strip().lower()),
        odds=odds,
        edge_pct=_float(row["edge_pct"]),
        kelly_stake=_float(row["kelly_stake"]),
        bookmaker=(row.get("bookmaker") or "").strip(),
        team=_opt_str(row.get("team")),
        outcome=outcome,
        profit=profit,
        prediction=_opt_float(row.get("prediction")),
        model_prob=_opt_float(row.get("model_prob")),
        implied_prob=implied if implied is not None else implied_probability(odds),
        strategy=(row.get("strategy") or "").strip(),
        actual=_opt_float(row.get("actual")),
        created_at=parse_iso(row.get("created_at")) or created_at,
    )


def read_signals_csv(path: Path, created_at: datetime | None = None) -> tuple[list[Signal], list[str]]:
    """Parse every row of a CSV file.

    Returns:
        (signals, errors) where each error names the line number and problem.
        Bad rows are skipped, not fatal.
    """
    signals: list[Signal] = []
    errors: list[str] = []
    with path.open(newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        for line_no, row in enumerate(reader, start=2):
            try:
                signals.append(row_to_signal(row, created_at))
            except ValueError as exc:
                errors.append(f"line {line_no}: {exc}")

    if errors:
        logger.warning("Skipped %d malformed row(s) in %s", len(errors), path)
    logger.debug("Read %d signal(s) from %s", len(signals), path)
    return signals, errors
