"""Application configuration."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Application
    app_name: str = "MotoSense"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite:///./data/motosense.db"

    # Sync endpoints
    sync_api_token: str = "change-me"
    rate_limiter_backend: str = "memory"  # memory / database
    sync_fetcher: str = "fixture"  # fixture / http

    # Outbound fetch
    user_agent: str = "MotoSense/1.0 (Data Sync Bot; +https://motosense.app/bot)"
    fetch_timeout: float = 30.0  # seconds per attempt
    fetch_max_retries: int = 3
    fetch_retry_delay: float = 1.0  # seconds, doubled per attempt

    # Predictions and rounds
    prediction_lock_minutes: int = 60
    auto_progress_hours: int = 48
    streak_window_days: int = 14

    # Scoring
    exact_match_points: int = 10
    top5_points: int = 3
    perfect_bonus_points: int = 50
    holeshot_bonus_points: int = 15
    fastest_lap_bonus_points: int = 10
    # (minimum streak, multiplier); JSON in the environment
    streak_bonus_tiers: list[tuple[int, float]] = [
        (3, 1.1), (7, 1.25), (14, 1.5), (30, 2.0), (60, 2.5), (100, 3.0),
    ]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
