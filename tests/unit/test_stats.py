"""
Unit tests for deck statistics and session summaries.
"""

from datetime import timedelta

import pytest

from tether.core.models import MaturityTier
from tether.study.session_manager import SessionManager
from tether.study.stats import get_item_schedule, get_study_stats, summarize_session, tier_breakdown


@pytest.fixture
def small_deck(make_item):
    return [
        make_item("fresh"),
        make_item("solid", repetitions=3, interval=15, ease_factor=2.2, last_quality=3, due_in=5),
        make_item("shaky", repetitions=1, interval=1, ease_factor=2.6, last_quality=2, streak=5, due_in=-1),
    ]


class TestStudyStats:
    def test_totals(self, small_deck, now):
        stats = get_study_stats(small_deck, now)

        assert stats.total_cards == 3
        assert stats.due_cards == 2
        assert stats.new_cards == 1
        assert stats.review_cards == 2
        assert stats.longest_streak == 5
        assert stats.total_reviews == 4

    def test_averages_rounded(self, small_deck, now):
        stats = get_study_stats(small_deck, now)

        assert stats.average_ease_factor == pytest.approx(2.43)
        assert stats.average_interval == pytest.approx(5.67)

    def test_accuracy_on_three_point_scale(self, small_deck, now):
        # Mean last quality 2.5 of 3
        assert get_study_stats(small_deck, now).accuracy_rate == pytest.approx(83.33)

    def test_all_easy_is_full_accuracy(self, make_item, now):
        items = [make_item(str(n), repetitions=1, last_quality=3) for n in range(4)]
        assert get_study_stats(items, now).accuracy_rate == pytest.approx(100.0)

    def test_empty_deck(self, now):
        stats = get_study_stats([], now)

        assert stats.total_cards == 0
        assert stats.accuracy_rate == 0.0
        assert stats.to_dict()["average_ease_factor"] == 0.0


class TestItemSchedule:
    def test_future_item(self, make_item, now):
        schedule = get_item_schedule(make_item("x", repetitions=4, interval=20, due_in=5), now)

        assert schedule.days_until_review == 5
        assert schedule.interval == 20
        assert schedule.tier == MaturityTier.MATURE

    def test_overdue_item_is_negative(self, make_item, now):
        assert get_item_schedule(make_item("x", due_in=-1.5), now).days_until_review == -1

    def test_partial_day_rounds_up(self, make_item, now):
        assert get_item_schedule(make_item("x", due_in=0.25), now).days_until_review == 1


class TestTierBreakdown:
    def test_every_tier_present(self, small_deck):
        counts = tier_breakdown(small_deck)

        assert set(counts) == set(MaturityTier)
        assert counts[MaturityTier.NEW] == 1
        assert counts[MaturityTier.LEARNING] == 1
        assert counts[MaturityTier.MATURE] == 1
        assert counts[MaturityTier.MASTERED] == 0


class TestSessionSummary:
    def test_summary(self, small_deck, now):
        manager = SessionManager()
        session = manager.create_session(small_deck, now, max_size=5)
        for item_id in session.item_ids:
            session = manager.grade_item(session, item_id, 2, now)

        open_summary = summarize_session(session)
        finished = summarize_session(manager.finish_session(session, now + timedelta(minutes=9)))

        assert open_summary.duration_minutes is None
        assert finished.duration_minutes == pytest.approx(9)
        assert finished.cards_completed == 2
        assert finished.correct_answers == 2
        assert finished.accuracy_percent == pytest.approx(100)
