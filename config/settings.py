"""Pydantic Settings — typed configuration with .env auto-loading."""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment / .env file."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ── Service ──────────────────────────────────────────────
    service_port: int = 5000
    cors_origins: list[str] = ["*"]
    debug: bool = False
    log_level: str = "INFO"

    # ── Rounding ─────────────────────────────────────────────
    summary_precision: int = 0  # Top-level summary percentages (integer)
    subject_precision: int = 2  # Per-subject percentages
    attendance_precision: int = 1  # Class attendance overview rates

    # ── Feeds ────────────────────────────────────────────────
    recent_activity_limit: int = 10
    upcoming_window_days: int = 7
    upcoming_limit: int = 10

    # ── Windows & thresholds ─────────────────────────────────
    attendance_period_days: int = 30
    active_window_days: int = 30  # Activity newer than this marks a student active
    passing_score: float = 70
    top_performer_limit: int = 5


@lru_cache
def get_settings() -> Settings:
    """Singleton accessor for application settings."""
    return Settings()
