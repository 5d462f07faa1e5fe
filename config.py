"""
Configuration settings for the Tether scheduling engine.

Uses Pydantic Settings for environment variable management with .env file support.
Every variable is prefixed with TETHER_ (e.g. TETHER_DEFAULT_SESSION_SIZE=30).
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TETHER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # SM-2 Interval Calculator
    # ========================================
    initial_ease_factor: float = Field(
        default=2.5,
        description="Ease factor assigned to items with no review history",
    )
    minimum_ease_factor: float = Field(
        default=1.3,
        description="Floor for the ease factor after any review",
    )
    ease_quality_offset: int = Field(
        default=3,
        description=(
            "Offset in the ease update term (offset - quality). 3 matches the "
            "0-3 rating scale; 5 reproduces the classic 0-5 SM-2 coefficients"
        ),
    )
    first_interval_days: int = Field(
        default=1,
        description="Interval after the first successful review",
    )
    second_interval_days: int = Field(
        default=6,
        description="Interval after the second consecutive successful review",
    )

    # ========================================
    # Review Grader
    # ========================================
    strict_ratings: bool = Field(
        default=False,
        description="Raise InvalidRating on unknown tokens instead of defaulting to 'good'",
    )

    # ========================================
    # Session Manager
    # ========================================
    default_session_size: int = Field(
        default=20,
        ge=0,
        description="Maximum items in a study session when no size is given",
    )

    # ========================================
    # Scheduler / Recommender
    # ========================================
    max_plan_cards: int = Field(
        default=20,
        ge=0,
        description="Hard cap on cards selected for a session plan",
    )
    mixed_due_ratio: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Share of a mixed plan reserved for due items",
    )
    catch_up_due_threshold: int = Field(
        default=15,
        description="Due count above which a plan becomes catch_up",
    )
    mixed_due_threshold: int = Field(
        default=5,
        description="Due count above which a plan mixes in new cards",
    )
    high_priority_due_threshold: int = Field(
        default=10,
        description="Due count above which a plan or reminder is high priority",
    )
    intensive_due_threshold: int = Field(
        default=20,
        description="Due count above which an intensive session is suggested",
    )
    burnout_streak_threshold: int = Field(
        default=7,
        description="Study streak above which a break is suggested",
    )
    unknown_days_since_study: int = Field(
        default=7,
        description="Days since last study assumed when the pattern has no record",
    )

    # ========================================
    # CLI / Storage
    # ========================================
    deck_path: Path = Field(
        default=Path("data/deck.json"),
        description="Default JSON deck file used by the CLI",
    )
    log_level: Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Loguru sink level for the CLI",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
