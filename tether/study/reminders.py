"""
Daily Reminder & Streak Helpers.

Pure decisions behind daily study reminders:
- Calendar-day streak bookkeeping when a study day is recorded
- Whether a reminder is due at a given minute
- Which motivation message fits the user's current state
- Streak milestone celebrations

Delivery (browser, push, email) belongs to the caller.
"""
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from tether.core.models import ReminderState
from tether.core.timeutil import SECONDS_PER_DAY, ensure_aware, parse_hhmm, sunday_weekday

STREAK_MILESTONES = (7, 14, 30, 60, 100)


@dataclass(frozen=True)
class MotivationMessage:
    """A reminder text picked by the first matching rule."""
    kind: str  # 'encouragement', 'achievement', 'reminder', 'celebration'
    title: str
    message: str
    emoji: str


def next_streak(streak: int, last_study: datetime | None, now: datetime) -> int:
    """
    Streak after studying at ``now``.

    Same calendar day keeps the streak, the following day extends it,
    any longer gap restarts at 1.
    """
    if last_study is None:
        return 1
    gap = (ensure_aware(now).date() - ensure_aware(last_study).date()).days
    if gap <= 0:
        return max(streak, 1)
    if gap == 1:
        return streak + 1
    return 1


def record_study_day(state: ReminderState, now: datetime) -> ReminderState:
    """Register a study session; a second session on the same day is a no-op."""
    now = ensure_aware(now)
    if state.last_study_date is not None and state.last_study_date.date() == now.date():
        return state

    streak = next_streak(state.streak_count, state.last_study_date, now)
    return state.model_copy(
        update={
            "streak_count": streak,
            "longest_streak": max(state.longest_streak, streak),
            "total_study_days": state.total_study_days + 1,
            "last_study_date": now,
        }
    )


def is_reminder_due(state: ReminderState, now: datetime) -> bool:
    """True during the reminder minute on a reminder day, once per day."""
    now = ensure_aware(now)
    if not state.is_enabled:
        return False
    if sunday_weekday(now) not in state.reminder_days:
        return False
    if (now.hour, now.minute) != parse_hhmm(state.reminder_time):
        return False
    if state.last_reminder_date is not None and state.last_reminder_date.date() == now.date():
        return False
    return True


def mark_reminder_sent(state: ReminderState, now: datetime) -> ReminderState:
    return state.model_copy(
        update={
            "last_reminder_date": ensure_aware(now),
            "reminder_count": state.reminder_count + 1,
        }
    )


def _studied_over_a_day_ago(state: ReminderState, now: datetime) -> bool:
    if state.last_study_date is None:
        return True
    elapsed = (ensure_aware(now) - state.last_study_date).total_seconds()
    return elapsed >= SECONDS_PER_DAY


# Ordered rules; the first match wins. The encouragement bands cover every
# positive streak, so later rules only fire for a streak of 0.
_MOTIVATION_RULES: list[tuple[MotivationMessage, Callable[[ReminderState, datetime], bool]]] = [
    # Encouragement
    (
        MotivationMessage("encouragement", "Keep Going!",
                          "Every study session brings you closer to your goals. You've got this!", "💪"),
        lambda s, now: 1 <= s.streak_count < 7,
    ),
    (
        MotivationMessage("encouragement", "Consistency is Key",
                          "You're building a great study habit. Keep up the momentum!", "🔥"),
        lambda s, now: 7 <= s.streak_count < 30,
    ),
    (
        MotivationMessage("encouragement", "You're on Fire!",
                          "Your dedication is inspiring. Keep pushing forward!", "🚀"),
        lambda s, now: s.streak_count >= 30,
    ),
    # Achievements
    (
        MotivationMessage("achievement", "First Week Complete!",
                          "Congratulations on completing your first week of consistent studying!", "🎉"),
        lambda s, now: s.streak_count == 7,
    ),
    (
        MotivationMessage("achievement", "Monthly Milestone!",
                          "Amazing! You've studied for 30 days straight. That's dedication!", "🏆"),
        lambda s, now: s.streak_count == 30,
    ),
    (
        MotivationMessage("achievement", "New Streak Record!",
                          "You've set a new personal record! Keep the momentum going!", "⭐"),
        lambda s, now: s.streak_count > s.longest_streak,
    ),
    # Reminders
    (
        MotivationMessage("reminder", "Don't Break the Chain!",
                          "You're on a great streak. Don't let it slip away!", "⛓️"),
        lambda s, now: s.streak_count > 0 and _studied_over_a_day_ago(s, now),
    ),
    (
        MotivationMessage("reminder", "Time to Study!",
                          "Your daily study session is waiting for you.", "📚"),
        lambda s, now: s.streak_count == 0 or _studied_over_a_day_ago(s, now),
    ),
    # Celebration
    (
        MotivationMessage("celebration", "Welcome Back!",
                          "Great to see you back! Let's get back into the study groove.", "👋"),
        lambda s, now: s.streak_count == 0 and s.total_study_days > 0,
    ),
]


def motivation_message(state: ReminderState, now: datetime) -> MotivationMessage:
    """Pick the message for a reminder; the first rule is the fallback."""
    for message, condition in _MOTIVATION_RULES:
        if condition(state, now):
            return message
    return _MOTIVATION_RULES[0][0]


def streak_celebration(state: ReminderState) -> MotivationMessage | None:
    """Celebration for streak milestones (7, 14, 30, 60, 100 days)."""
    if state.streak_count not in STREAK_MILESTONES:
        return None
    return MotivationMessage(
        "celebration",
        f"{state.streak_count}-Day Streak!",
        f"Congratulations! You've studied for {state.streak_count} days straight!",
        "🏅",
    )
