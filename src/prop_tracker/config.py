"""Application configuration via pydantic-settings."""

from __future__ import annotations

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ALLOWED_KELLY_FRACTIONS = (1.0, 0.5, 0.25)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PROP_TRACKER_",
    )

    # SQLite database path for paper trades
    db_path: Path = Path.home() / ".prop-tracker" / "paper_trades.db"

    # NBA live data CDN
    scoreboard_url: str = (
        "https://cdn.nba.com/static/json/liveData/scoreboard/todaysScoreboard_00.json"
    )
    boxscore_url_template: str = (
        "https://cdn.nba.com/static/json/liveData/boxscore/boxscore_{game_id}.json"
    )

    # HTTP request timeout seconds
    http_timeout: float = 15.0

    # Score proxy cache
    cache_ttl_seconds: float = 10.0
    cache_capacity: int = 8

    # Live polling interval
    poll_interval_seconds: float = 10.0

    # Kelly fraction applied on top of the model's kelly_stake (1, 0.5 or 0.25)
    kelly_fraction: float = 0.25

    # Starting bankroll for the bankroll simulation
    starting_bankroll: float = 1000.0

    # Current bankroll for live bet sizing; unset disables sizing
    bankroll: float | None = None

    @field_validator("kelly_fraction")
    @classmethod
    def _kelly_fraction_allowed(cls, v: float) -> float:
        if v not in _ALLOWED_KELLY_FRACTIONS:
            raise ValueError(
                f"kelly_fraction must be one of {_ALLOWED_KELLY_FRACTIONS}, got {v}"
            )
        return v

    @field_validator("starting_bankroll")
    @classmethod
    def _starting_bankroll_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"starting_bankroll must be > 0, got {v}")
        return v

    @field_validator("cache_ttl_seconds", "poll_interval_seconds", "http_timeout")
    @classmethod
    def _positive_duration(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"durations must be > 0, got {v}")
        return v

    @field_validator("cache_capacity")
    @classmethod
    def _capacity_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"cache_capacity must be >= 1, got {v}")
        return v


def get_settings() -> Settings:
    """Get settings instance."""
    return Settings()
