"""
Due-Set Selector.

Classifies items into due / new / review sets and maturity tiers.

Ordering rule for due items: ascending by next review time; items sharing
the same timestamp keep their input order (stable sort).
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from tether.core.models import Item, MaturityTier
from tether.core.timeutil import ensure_aware

YOUNG_MAX_INTERVAL = 7  # Days; below this a graduated item is Young
MATURE_MAX_INTERVAL = 30  # Days; at or above this an item is Mastered


def get_due(items: Iterable[Item], now: datetime) -> list[Item]:
    """Items whose review time has arrived, earliest first."""
    now = ensure_aware(now)
    due = [item for item in items if item.next_review <= now]
    return sorted(due, key=lambda item: item.next_review)


def get_new(items: Iterable[Item]) -> list[Item]:
    """Items with no review history."""
    return [item for item in items if not item.repetitions]


def get_review(items: Iterable[Item]) -> list[Item]:
    """Items reviewed successfully at least once since their last reset."""
    return [item for item in items if item.repetitions and item.repetitions > 0]


def classify(item: Item) -> MaturityTier:
    """
    Maturity tier of an item.

    New (never reviewed) -> Learning (1-2 reps) -> Young (interval < 7)
    -> Mature (interval < 30) -> Mastered.
    """
    repetitions = item.repetitions or 0
    if repetitions == 0:
        return MaturityTier.NEW
    if repetitions < 3:
        return MaturityTier.LEARNING

    interval = item.interval or 1
    if interval < YOUNG_MAX_INTERVAL:
        return MaturityTier.YOUNG
    if interval < MATURE_MAX_INTERVAL:
        return MaturityTier.MATURE
    return MaturityTier.MASTERED
