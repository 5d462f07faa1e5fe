"""
Study Statistics.

Read-only reporting over an item collection and finished sessions:
- Deck-wide totals and averages
- Per-item schedule view
- Maturity tier breakdown
- Session summary
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict, dataclass
from datetime import datetime

from tether.core.models import Item, MaturityTier, Quality, Session
from tether.core.timeutil import days_until, ensure_aware
from tether.study.selector import classify, get_due, get_new, get_review

DEFAULT_EASE = 2.5


@dataclass
class StudyStats:
    """Aggregate state of a deck."""

    total_cards: int
    due_cards: int
    new_cards: int
    review_cards: int
    average_ease_factor: float
    average_interval: float
    longest_streak: int
    total_reviews: int
    accuracy_rate: float  # 0-100

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ItemSchedule:
    """Where a single item stands."""

    item_id: str
    interval: int
    next_review: datetime
    days_until_review: int  # negative when overdue
    tier: MaturityTier


@dataclass
class SessionSummary:
    session_id: str
    total_cards: int
    cards_completed: int
    correct_answers: int
    accuracy_percent: float
    duration_minutes: float | None  # None until finished


def get_study_stats(items: Iterable[Item], now: datetime) -> StudyStats:
    """
    Calculate deck statistics.

    Accuracy rate is the mean last quality of reviewed items on the 0-3
    scale, expressed as a percentage. Older deployments divided by 5, a
    leftover of the 0-5 SM-2 scale that capped accuracy at 60%; all easy
    answers now read as 100%.
    """
    items = list(items)
    total = len(items)
    if total == 0:
        return StudyStats(0, 0, 0, 0, 0.0, 0.0, 0, 0, 0.0)

    average_ease = sum(item.ease_factor or DEFAULT_EASE for item in items) / total
    average_interval = sum(item.interval or 0 for item in items) / total

    graded = [item.last_quality for item in items if item.last_quality is not None]
    accuracy = (sum(graded) / len(graded)) / Quality.EASY * 100 if graded else 0.0

    return StudyStats(
        total_cards=total,
        due_cards=len(get_due(items, now)),
        new_cards=len(get_new(items)),
        review_cards=len(get_review(items)),
        average_ease_factor=round(average_ease, 2),
        average_interval=round(average_interval, 2),
        longest_streak=max((item.streak or 0 for item in items), default=0),
        total_reviews=sum(item.repetitions or 0 for item in items),
        accuracy_rate=round(accuracy, 2),
    )


def get_item_schedule(item: Item, now: datetime) -> ItemSchedule:
    return ItemSchedule(
        item_id=item.id,
        interval=item.interval or 1,
        next_review=item.next_review,
        days_until_review=days_until(item.next_review, ensure_aware(now)),
        tier=classify(item),
    )


def tier_breakdown(items: Iterable[Item]) -> dict[MaturityTier, int]:
    """Count items per maturity tier; every tier is present."""
    counts = {tier: 0 for tier in MaturityTier}
    for item in items:
        counts[classify(item)] += 1
    return counts


def summarize_session(session: Session) -> SessionSummary:
    duration = None
    if session.end_time is not None:
        duration = (session.end_time - session.start_time).total_seconds() / 60

    return SessionSummary(
        session_id=session.id,
        total_cards=session.total_cards,
        cards_completed=len(session.completed_items),
        correct_answers=session.correct_answers,
        accuracy_percent=session.accuracy_percent,
        duration_minutes=duration,
    )
