"""Centralized settings for the social arbitrage runner.

Uses pydantic-settings to load from environment variables (prefixed
SOCIAL_ARB_) with defaults matching the engine's built-in constants.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Runner settings loaded from environment variables."""

    # --- X API ---
    x_bearer_token: str = ""
    x_request_timeout: float = 30.0

    # --- Discord ---
    discord_webhook_url: str = ""
    discord_timeout: float = 15.0

    # --- Storage ---
    watchlist_path: str = "data/watchlist.json"
    state_path: str = "data/engine_state.json"

    # --- Batch cycle ---
    lookback_hours: int = 24
    fetch_delay_seconds: float = 0.5
    keyword_limit: int = 8

    # --- Emission policy ---
    min_confidence: float = 80.0
    min_momentum: float = 1.0
    min_hours_between_signals: float = 8.0
    cooldown_hours: float = 48.0

    # --- Research ---
    research_since: str = "7d"
    research_min_likes: int = 10
    research_pages: int = 2
    research_limit: int = 20
    research_delay_seconds: float = 2.0
    watchlist_since: str = "24h"
    watchlist_delay_seconds: float = 3.0

    model_config = {
        "env_prefix": "SOCIAL_ARB_",
        "env_file": ".env",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton."""
    return Settings()
