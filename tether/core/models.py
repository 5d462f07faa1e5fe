"""
Core Data Models.

Wire-level records consumed and produced by the scheduling engine. All models
are frozen; updates go through ``model_copy(update=...)`` in the module that
owns the transition, naming every field it touches.

Python attributes are snake_case; the JSON wire shape is camelCase
(``easeFactor``, ``nextReview``, ``accuracyPercent``...). Both spellings are
accepted on input.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import datetime
from enum import Enum, IntEnum
from typing import Any, Literal

from loguru import logger
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)
from pydantic.alias_generators import to_camel

from tether.core.errors import MalformedItemState
from tether.core.timeutil import ensure_aware, parse_hhmm


# =============================================================================
# VOCABULARY
# =============================================================================


class Rating(str, Enum):
    """Qualitative self-rating given after recalling an item."""

    AGAIN = "again"
    HARD = "hard"
    GOOD = "good"
    EASY = "easy"


class Quality(IntEnum):
    """Numeric grade derived from a Rating."""

    AGAIN = 0
    HARD = 1
    GOOD = 2  # lowest passing grade
    EASY = 3


class MaturityTier(str, Enum):
    """Maturity classification derived from repetitions and interval."""

    NEW = "New"
    LEARNING = "Learning"
    YOUNG = "Young"
    MATURE = "Mature"
    MASTERED = "Mastered"


class SessionStatus(str, Enum):
    CREATED = "created"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"  # terminal


class SessionType(str, Enum):
    REVIEW = "review"
    NEW_CARDS = "new_cards"
    MIXED = "mixed"
    CATCH_UP = "catch_up"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RecommendationType(str, Enum):
    SCHEDULE = "schedule"
    REMINDER = "reminder"
    BREAK = "break"
    INTENSIVE = "intensive"


class WireModel(BaseModel):
    """Base for camelCase, immutable wire records."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_wire(self) -> dict[str, Any]:
        """JSON-ready dict using the camelCase wire names."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


# =============================================================================
# ITEM
# =============================================================================


class Item(WireModel):
    """
    A learnable item plus its scheduling state.

    Content fields (front, back, difficulty, ...) are opaque to the engine and
    kept as pydantic extras so they survive every update untouched.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    ease_factor: float | None = None
    interval: int | None = None
    repetitions: int | None = None
    next_review: datetime
    last_reviewed: datetime | None = None
    last_quality: int | None = None
    streak: int | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator(
        "ease_factor", "interval", "repetitions", "last_quality", "streak", mode="before"
    )
    @classmethod
    def _heal_numeric(cls, value: Any, info: ValidationInfo) -> Any:
        """Drop unusable numeric state instead of rejecting the record."""
        if value is None:
            return None
        try:
            number = float(value)
        except (TypeError, ValueError):
            logger.warning(f"Dropping non-numeric {info.field_name}={value!r}")
            return None
        if math.isnan(number) or math.isinf(number) or number < 0:
            logger.warning(f"Dropping invalid {info.field_name}={value!r}")
            return None
        if info.field_name == "ease_factor":
            return number
        if info.field_name == "last_quality" and number > Quality.EASY:
            logger.warning(f"Dropping out-of-range last_quality={value!r}")
            return None
        return int(number)

    @field_validator("next_review", "last_reviewed")
    @classmethod
    def _aware(cls, value: datetime | None) -> datetime | None:
        return ensure_aware(value) if value is not None else None

    @property
    def content(self) -> dict[str, Any]:
        """Opaque content fields carried alongside the scheduling state."""
        return dict(self.model_extra or {})

    @property
    def has_history(self) -> bool:
        return bool(self.repetitions)


def new_item(item_id: str, now: datetime, ease_factor: float = 2.5, **content: Any) -> Item:
    """Create an item with no review history, due immediately."""
    return Item(
        id=item_id,
        ease_factor=ease_factor,
        interval=1,
        repetitions=0,
        streak=0,
        next_review=ensure_aware(now),
        **content,
    )


def parse_item(record: Mapping[str, Any]) -> Item:
    """
    Build an Item from a wire record.

    Numeric defects are healed by the model validators; a record without a
    usable id or nextReview cannot be scheduled at all.

    Raises:
        MalformedItemState: If the record is missing its id or nextReview.
    """
    try:
        return Item.model_validate(dict(record))
    except ValidationError as e:
        item_id = record.get("id", "<unknown>") if isinstance(record, Mapping) else "<unknown>"
        raise MalformedItemState(f"Item {item_id} cannot be scheduled: {e}") from e


# =============================================================================
# SESSION
# =============================================================================


class Session(WireModel):
    """One bounded block of graded reviews."""

    id: str
    items: list[Item] = Field(default_factory=list)
    due_items: list[Item] = Field(default_factory=list)
    completed_items: list[Item] = Field(default_factory=list)
    start_time: datetime
    end_time: datetime | None = None
    total_cards: int = 0
    correct_answers: int = 0
    accuracy_percent: float = 0.0
    status: SessionStatus = SessionStatus.CREATED

    @property
    def is_completed(self) -> bool:
        return self.status == SessionStatus.COMPLETED

    @property
    def item_ids(self) -> list[str]:
        return [item.id for item in self.items]

    def find_item(self, item_id: str) -> Item | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None


# =============================================================================
# STUDY PATTERN
# =============================================================================


class StudyPattern(WireModel):
    """
    Advisory per-user study habits.

    Never feeds the interval algorithm; only the planner reads it.
    """

    user_id: str = "default"
    preferred_study_times: list[str] = Field(default_factory=lambda: ["09:00", "18:00"])
    preferred_study_days: list[int] = Field(default_factory=lambda: [1, 2, 3, 4, 5])
    average_session_duration: float = Field(default=15, gt=0)  # minutes
    average_cards_per_session: float = Field(default=10, gt=0)
    study_streak: int = Field(default=0, ge=0)
    last_study_date: datetime | None = None
    study_frequency: Literal["daily", "weekly", "custom"] = "daily"
    optimal_study_time: Literal["morning", "afternoon", "evening", "night"] = "evening"

    @field_validator("preferred_study_times")
    @classmethod
    def _valid_times(cls, value: list[str]) -> list[str]:
        for entry in value:
            parse_hhmm(entry)
        return value

    @field_validator("last_study_date")
    @classmethod
    def _aware(cls, value: datetime | None) -> datetime | None:
        return ensure_aware(value) if value is not None else None


# =============================================================================
# PLANS & RECOMMENDATIONS
# =============================================================================


class PlanGoals(WireModel):
    target_cards: int
    target_accuracy: float
    target_time: int  # minutes


class SessionPlan(WireModel):
    """A forward-looking study session proposal."""

    id: str
    user_id: str
    deck_id: str = "default"
    scheduled_for: datetime
    estimated_duration: int  # minutes
    card_ids: list[str] = Field(default_factory=list)
    priority: Priority
    session_type: SessionType
    difficulty: Literal["easy", "medium", "hard"] = "medium"
    goals: PlanGoals


class Recommendation(WireModel):
    type: RecommendationType
    title: str
    message: str
    priority: Priority
    suggested_time: datetime | None = None
    estimated_duration_minutes: int | None = None
    reason_tag: str


# =============================================================================
# REMINDERS
# =============================================================================


class ReminderState(WireModel):
    """Per-user daily reminder and streak bookkeeping."""

    user_id: str = "default"
    last_reminder_date: datetime | None = None
    reminder_count: int = 0
    streak_count: int = 0
    longest_streak: int = 0
    total_study_days: int = 0
    last_study_date: datetime | None = None
    reminder_time: str = "09:00"
    reminder_days: list[int] = Field(default_factory=lambda: [1, 2, 3, 4, 5])
    is_enabled: bool = True

    @field_validator("reminder_time")
    @classmethod
    def _valid_time(cls, value: str) -> str:
        parse_hhmm(value)
        return value
