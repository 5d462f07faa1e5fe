"""
Unit tests for daily reminders, streak bookkeeping and motivation messages.
"""

from datetime import timedelta

import pytest

from tether.core.models import ReminderState
from tether.study.reminders import (
    _MOTIVATION_RULES,
    is_reminder_due,
    mark_reminder_sent,
    motivation_message,
    next_streak,
    record_study_day,
    streak_celebration,
)


class TestNextStreak:
    def test_first_study(self, now):
        assert next_streak(0, None, now) == 1

    def test_calendar_days_not_hours(self, now):
        # 23:30 yesterday to 00:10 today is a new calendar day
        late = now.replace(hour=23, minute=30) - timedelta(days=1)
        early = now.replace(hour=0, minute=10)
        assert next_streak(4, late, early) == 5


class TestRecordStudyDay:
    def test_first_day(self, now):
        state = record_study_day(ReminderState(), now)

        assert state.streak_count == 1
        assert state.longest_streak == 1
        assert state.total_study_days == 1
        assert state.last_study_date == now

    def test_consecutive_days(self, now):
        state = record_study_day(ReminderState(), now)
        state = record_study_day(state, now + timedelta(days=1))

        assert state.streak_count == 2
        assert state.total_study_days == 2

    def test_same_day_is_noop(self, now):
        state = record_study_day(ReminderState(), now)
        assert record_study_day(state, now + timedelta(hours=3)) is state

    def test_gap_restarts_but_keeps_longest(self, now):
        state = ReminderState(streak_count=6, longest_streak=6, total_study_days=6,
                              last_study_date=now - timedelta(days=3))

        updated = record_study_day(state, now)

        assert updated.streak_count == 1
        assert updated.longest_streak == 6
        assert updated.total_study_days == 7


class TestReminderDue:
    def test_due_at_reminder_minute(self, now):
        assert is_reminder_due(ReminderState(), now.replace(hour=9, minute=0))

    def test_not_due_at_other_times(self, now):
        assert not is_reminder_due(ReminderState(), now)

    def test_not_due_on_other_days(self, now):
        saturday = now.replace(hour=9, minute=0) + timedelta(days=3)
        assert not is_reminder_due(ReminderState(), saturday)

    def test_once_per_day(self, now):
        at_nine = now.replace(hour=9, minute=0, second=5)
        state = mark_reminder_sent(ReminderState(), at_nine)

        assert state.reminder_count == 1
        assert not is_reminder_due(state, at_nine + timedelta(seconds=30))
        assert is_reminder_due(state, at_nine + timedelta(days=1))

    def test_disabled(self, now):
        assert not is_reminder_due(ReminderState(is_enabled=False), now.replace(hour=9, minute=0))


class TestMotivationMessage:
    @pytest.mark.parametrize(
        "streak,total,hours_ago,title",
        [
            (3, 3, 2, "Keep Going!"),
            (3, 3, 30, "Keep Going!"),
            (7, 7, 2, "Consistency is Key"),
            (12, 12, 2, "Consistency is Key"),
            (30, 30, 30, "You're on Fire!"),
            (45, 45, 2, "You're on Fire!"),
            (0, 5, 72, "Time to Study!"),
            (0, 0, None, "Time to Study!"),
        ],
    )
    def test_rule_selection(self, now, streak, total, hours_ago, title):
        state = ReminderState(
            streak_count=streak,
            total_study_days=total,
            last_study_date=None if hours_ago is None else now - timedelta(hours=hours_ago),
        )
        assert motivation_message(state, now).title == title

    def test_rule_table_order(self):
        titles = [message.title for message, _ in _MOTIVATION_RULES]

        assert titles == [
            "Keep Going!",
            "Consistency is Key",
            "You're on Fire!",
            "First Week Complete!",
            "Monthly Milestone!",
            "New Streak Record!",
            "Don't Break the Chain!",
            "Time to Study!",
            "Welcome Back!",
        ]

    def test_streak_record_rule(self, now):
        record = dict((message.title, condition) for message, condition in _MOTIVATION_RULES)["New Streak Record!"]

        assert record(ReminderState(streak_count=5, longest_streak=4), now)
        assert not record(ReminderState(streak_count=5, longest_streak=5), now)


class TestStreakCelebration:
    def test_milestone(self):
        message = streak_celebration(ReminderState(streak_count=14))
        assert message.title == "14-Day Streak!"
        assert message.kind == "celebration"

    def test_no_milestone(self):
        assert streak_celebration(ReminderState(streak_count=15)) is None
