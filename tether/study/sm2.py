"""
SM-2 Interval Calculator.

Implements the SuperMemo-2 review transition on a four-point rating scale:
1. Ease factor update with a 1.3 floor
2. Repetition reset on failure (quality below "good")
3. Fixed 1 and 6 day learning steps, then interval x ease
4. Next review scheduled from the explicit review time

Based on:
- Wozniak (SM-2, 1990)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime

from loguru import logger

from config import Settings, get_settings
from tether.core.models import Item, Quality
from tether.core.timeutil import add_days, ensure_aware, round_half_up


@dataclass(frozen=True)
class ReviewResult:
    """Result of reviewing an item."""

    item: Item
    next_review: datetime
    interval: int  # Days until next review
    ease_factor: float
    repetitions: int
    is_new: bool  # Item had no repetitions before this review
    is_graduated: bool  # Three or more consecutive successes


@dataclass(frozen=True)
class _SchedulingState:
    ease_factor: float
    interval: int
    repetitions: int
    streak: int


class SM2Scheduler:
    """
    SM-2 Spaced Repetition Scheduler.

    Pure: every call takes the item and the review time and returns a new
    Item. Nothing is cached between calls.
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.initial_ease = self.settings.initial_ease_factor
        self.min_ease = self.settings.minimum_ease_factor
        self.quality_offset = self.settings.ease_quality_offset

    def next_ease_factor(self, ease_factor: float, quality: int) -> float:
        """
        Update the ease factor for a review of the given quality.

        EF' = EF + (0.1 - (k - q) * (0.08 + (k - q) * 0.02)), floored at 1.3,
        where k is the configured quality offset (3 by default).
        """
        k = self.quality_offset
        new_ease = ease_factor + (0.1 - (k - quality) * (0.08 + (k - quality) * 0.02))
        return max(new_ease, self.min_ease)

    def advance(self, item: Item, quality: int, now: datetime) -> ReviewResult:
        """
        Process a review and return the updated item.

        Args:
            item: Item being reviewed
            quality: 0 (again) to 3 (easy)
            now: Review time

        Returns:
            ReviewResult wrapping the new Item and its schedule
        """
        now = ensure_aware(now)
        quality = self._clamp_quality(item.id, quality)
        state = self._read_state(item)
        is_new = state.repetitions == 0

        ease = self.next_ease_factor(state.ease_factor, quality)

        if quality < Quality.GOOD:
            repetitions = 0
            interval = self.settings.first_interval_days
            streak = 0
        else:
            repetitions = state.repetitions + 1
            if repetitions == 1:
                interval = self.settings.first_interval_days
            elif repetitions == 2:
                interval = self.settings.second_interval_days
            else:
                interval = max(1, round_half_up(state.interval * ease))
            streak = state.streak + 1

        next_review = add_days(now, interval)
        updated = item.model_copy(
            update={
                "ease_factor": ease,
                "interval": interval,
                "repetitions": repetitions,
                "next_review": next_review,
                "last_reviewed": now,
                "last_quality": quality,
                "streak": streak,
            }
        )

        logger.debug(
            f"Item {item.id}: q={quality} reps {state.repetitions}->{repetitions} "
            f"interval {state.interval}->{interval}d ease {state.ease_factor:.2f}->{ease:.2f}"
        )

        return ReviewResult(
            item=updated,
            next_review=next_review,
            interval=interval,
            ease_factor=ease,
            repetitions=repetitions,
            is_new=is_new,
            is_graduated=repetitions >= 3,
        )

    def reset_item(self, item: Item, now: datetime) -> Item:
        """Discard all review history so the item is studied as new."""
        return item.model_copy(
            update={
                "ease_factor": self.initial_ease,
                "interval": self.settings.first_interval_days,
                "repetitions": 0,
                "streak": 0,
                "next_review": ensure_aware(now),
                "last_reviewed": None,
                "last_quality": None,
            }
        )

    def _read_state(self, item: Item) -> _SchedulingState:
        """Current scheduling fields, with missing or broken values defaulted."""
        repetitions = item.repetitions or 0
        streak = item.streak or 0

        if repetitions == 0:
            # No history: start from the initial state regardless of stored values
            return _SchedulingState(
                ease_factor=self.initial_ease,
                interval=self.settings.first_interval_days,
                repetitions=0,
                streak=streak,
            )

        ease = item.ease_factor
        if ease is None or not math.isfinite(ease):
            logger.warning(f"Item {item.id} has no ease factor, using {self.initial_ease}")
            ease = self.initial_ease
        elif ease < self.min_ease:
            logger.warning(f"Item {item.id} ease {ease} below floor, raising to {self.min_ease}")
            ease = self.min_ease

        interval = item.interval
        if not interval or interval < 1:
            logger.warning(f"Item {item.id} has invalid interval {interval!r}, using 1")
            interval = 1

        return _SchedulingState(
            ease_factor=ease,
            interval=interval,
            repetitions=repetitions,
            streak=streak,
        )

    @staticmethod
    def _clamp_quality(item_id: str, quality: int) -> int:
        clamped = min(max(int(quality), Quality.AGAIN), Quality.EASY)
        if clamped != quality:
            logger.warning(f"Item {item_id}: quality {quality} outside 0-3, using {clamped}")
        return int(clamped)


# =============================================================================
# MODULE-LEVEL HELPERS
# =============================================================================


def advance(item: Item, quality: int, now: datetime) -> ReviewResult:
    """Review an item with the default scheduler settings."""
    return SM2Scheduler().advance(item, quality, now)


def reset_item(item: Item, now: datetime) -> Item:
    """Reset an item with the default scheduler settings."""
    return SM2Scheduler().reset_item(item, now)
