"""
Study Planner - Session Plans and Recommendations.

Derives forward-looking scheduling decisions from the current item snapshot
and the user's advisory study pattern:
1. Optimal next study time from preferred times and weekdays
2. Session plan (type, priority, card subset, duration, goals)
3. Rule-based recommendations (due cards, streak, burnout, catch-up)
4. Study pattern refresh after a completed session

Nothing here writes item state and nothing is cached: every call is
recomputed from its arguments.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta

from loguru import logger

from config import Settings, get_settings
from tether.core.models import (
    Item,
    PlanGoals,
    Priority,
    Recommendation,
    RecommendationType,
    SessionPlan,
    SessionType,
    StudyPattern,
)
from tether.core.timeutil import ensure_aware, epoch_ms, parse_hhmm, sunday_weekday, whole_days_between
from tether.study.reminders import next_streak
from tether.study.selector import get_due, get_new

# Fallback clock time per optimal_study_time when no preferred time is set
OPTIMAL_TIME_DEFAULTS = {
    "morning": "09:00",
    "afternoon": "14:00",
    "evening": "18:00",
    "night": "21:00",
}

DIFFICULTY_WEIGHTS = {"easy": 1, "medium": 2, "hard": 3}


class StudyPlanner:
    """
    Builds session plans and study recommendations.

    Thresholds come from Settings so deployments can tune them without
    touching the rules.
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

    # =========================================================================
    # TIMING
    # =========================================================================

    def compute_optimal_time(self, pattern: StudyPattern, now: datetime) -> datetime:
        """
        Next study slot strictly after ``now``.

        Uses the first preferred time on now's date (in now's timezone),
        moves to the next day if that has passed, then rolls forward until
        the weekday is one of the preferred days (Sunday = 0).
        """
        now = ensure_aware(now)
        clock = (
            pattern.preferred_study_times[0]
            if pattern.preferred_study_times
            else OPTIMAL_TIME_DEFAULTS[pattern.optimal_study_time]
        )
        hours, minutes = parse_hhmm(clock)

        allowed = {day for day in pattern.preferred_study_days if 0 <= day <= 6}
        if not allowed:
            allowed = set(range(7))

        candidate = now.replace(hour=hours, minute=minutes, second=0, microsecond=0)
        if candidate <= now:
            candidate += timedelta(days=1)

        for _ in range(7):
            if sunday_weekday(candidate) in allowed:
                break
            candidate += timedelta(days=1)

        return candidate

    def days_since_last_study(self, pattern: StudyPattern, now: datetime) -> int | None:
        if pattern.last_study_date is None:
            return None
        return whole_days_between(pattern.last_study_date, now)

    # =========================================================================
    # SESSION PLAN
    # =========================================================================

    def determine_session_type(self, due_count: int, new_count: int) -> SessionType:
        """Pick the kind of session the current backlog calls for."""
        if due_count > self.settings.catch_up_due_threshold:
            return SessionType.CATCH_UP
        if due_count > self.settings.mixed_due_threshold and new_count > 0:
            return SessionType.MIXED
        if due_count > 0:
            return SessionType.REVIEW
        return SessionType.NEW_CARDS

    def calculate_priority(self, due_count: int, pattern: StudyPattern, now: datetime) -> Priority:
        days = self.days_since_last_study(pattern, now)
        if days is None:
            days = self.settings.unknown_days_since_study

        if due_count > self.settings.high_priority_due_threshold or days > 3:
            return Priority.HIGH
        if due_count > self.settings.mixed_due_threshold or days > 1:
            return Priority.MEDIUM
        return Priority.LOW

    def session_cap(self, pattern: StudyPattern) -> int:
        return max(0, min(int(pattern.average_cards_per_session), self.settings.max_plan_cards))

    def select_cards(
        self,
        due: Sequence[Item],
        new: Sequence[Item],
        pattern: StudyPattern,
        session_type: SessionType,
    ) -> list[str]:
        """
        Choose card ids for a plan.

        Never exceeds the session cap and never repeats an id, even when a
        new item is also due.
        """
        cap = self.session_cap(pattern)

        if session_type in (SessionType.REVIEW, SessionType.CATCH_UP):
            return [item.id for item in due[:cap]]
        if session_type == SessionType.NEW_CARDS:
            return [item.id for item in new[:cap]]

        due_take = min(math.ceil(cap * self.settings.mixed_due_ratio), len(due))
        selected = [item.id for item in due[:due_take]]
        seen = set(selected)
        for item in new:
            if len(selected) >= cap:
                break
            if item.id not in seen:
                selected.append(item.id)
                seen.add(item.id)
        return selected

    def estimate_duration(self, card_count: int, pattern: StudyPattern) -> int:
        """Minutes for ``card_count`` cards at the user's average pace."""
        minutes_per_card = pattern.average_session_duration / pattern.average_cards_per_session
        return math.ceil(card_count * minutes_per_card)

    def calculate_target_accuracy(self, pattern: StudyPattern) -> float:
        streak_bonus = 0.5 * pattern.study_streak
        frequency_bonus = 5 if pattern.study_frequency == "daily" else 0
        return min(70 + streak_bonus + frequency_bonus, 95)

    def assess_difficulty(self, cards: Iterable[Item]) -> str:
        """
        Average the cards' ``difficulty`` content field.

        Cards without one count as medium; an empty selection is medium.
        """
        weights = [
            DIFFICULTY_WEIGHTS.get(str(card.content.get("difficulty", "medium")).lower(), 2)
            for card in cards
        ]
        if not weights:
            return "medium"

        average = sum(weights) / len(weights)
        if average <= 1.3:
            return "easy"
        if average <= 2.3:
            return "medium"
        return "hard"

    def build_session_plan(
        self,
        items: Iterable[Item],
        pattern: StudyPattern,
        now: datetime,
        deck_id: str = "default",
    ) -> SessionPlan:
        """
        Build a study session plan from the current snapshot.

        Args:
            items: The full item collection
            pattern: The user's study pattern
            now: Planning time
            deck_id: Deck the plan belongs to

        Returns:
            SessionPlan scheduled for the next optimal slot
        """
        now = ensure_aware(now)
        items = list(items)
        due = get_due(items, now)
        new = get_new(items)

        session_type = self.determine_session_type(len(due), len(new))
        priority = self.calculate_priority(len(due), pattern, now)
        card_ids = self.select_cards(due, new, pattern, session_type)
        duration = self.estimate_duration(len(card_ids), pattern)

        by_id = {item.id: item for item in items}
        difficulty = self.assess_difficulty(by_id[card_id] for card_id in card_ids)

        plan = SessionPlan(
            id=f"plan_{pattern.user_id}_{epoch_ms(now)}",
            user_id=pattern.user_id,
            deck_id=deck_id,
            scheduled_for=self.compute_optimal_time(pattern, now),
            estimated_duration=duration,
            card_ids=card_ids,
            priority=priority,
            session_type=session_type,
            difficulty=difficulty,
            goals=PlanGoals(
                target_cards=len(card_ids),
                target_accuracy=self.calculate_target_accuracy(pattern),
                target_time=duration,
            ),
        )

        logger.debug(
            f"Plan {plan.id}: {session_type.value}/{priority.value}, "
            f"{len(card_ids)} cards, {duration} min"
        )
        return plan

    # =========================================================================
    # RECOMMENDATIONS
    # =========================================================================

    def generate_recommendations(
        self,
        items: Iterable[Item],
        pattern: StudyPattern,
        now: datetime,
    ) -> list[Recommendation]:
        """
        Evaluate every recommendation rule against the snapshot.

        Each rule contributes at most one recommendation, in a fixed order:
        due cards, streak maintenance, break, intensive catch-up.
        """
        now = ensure_aware(now)
        due_count = len(get_due(items, now))
        streak = pattern.study_streak
        recommendations: list[Recommendation] = []

        if due_count > 0:
            recommendations.append(
                Recommendation(
                    type=RecommendationType.SCHEDULE,
                    title=f"{due_count} Cards Due for Review",
                    message=(
                        f"You have {due_count} flashcards ready for review. "
                        "Schedule a study session to maintain your progress."
                    ),
                    priority=(
                        Priority.HIGH
                        if due_count > self.settings.high_priority_due_threshold
                        else Priority.MEDIUM
                    ),
                    suggested_time=self.compute_optimal_time(pattern, now),
                    estimated_duration_minutes=self.estimate_duration(due_count, pattern),
                    reason_tag="due_cards",
                )
            )

        if streak > 0 and (self.days_since_last_study(pattern, now) or 0) >= 1:
            recommendations.append(
                Recommendation(
                    type=RecommendationType.REMINDER,
                    title="Maintain Your Study Streak",
                    message=f"You're on a {streak}-day streak! Don't break it by studying today.",
                    priority=Priority.HIGH,
                    reason_tag="streak_maintenance",
                )
            )

        if streak > self.settings.burnout_streak_threshold:
            recommendations.append(
                Recommendation(
                    type=RecommendationType.BREAK,
                    title="Consider a Study Break",
                    message=(
                        f"You've been studying for {self.settings.burnout_streak_threshold}+ days "
                        "straight. Consider taking a short break to avoid burnout."
                    ),
                    priority=Priority.LOW,
                    reason_tag="burnout_prevention",
                )
            )

        if due_count > self.settings.intensive_due_threshold:
            recommendations.append(
                Recommendation(
                    type=RecommendationType.INTENSIVE,
                    title="Intensive Study Session Recommended",
                    message=(
                        "You have many cards due. Consider scheduling a longer "
                        "study session to catch up."
                    ),
                    priority=Priority.HIGH,
                    suggested_time=self.compute_optimal_time(pattern, now),
                    estimated_duration_minutes=self.estimate_duration(due_count, pattern),
                    reason_tag="catch_up_needed",
                )
            )

        return recommendations

    # =========================================================================
    # PATTERN & PLAN UPKEEP
    # =========================================================================

    def update_pattern_after_session(
        self,
        pattern: StudyPattern,
        cards_studied: int,
        duration_minutes: float,
        now: datetime,
    ) -> StudyPattern:
        """
        Fold a finished session into the study pattern.

        The streak counts calendar days: studying again on the same day keeps
        it, studying on the following day extends it, any longer gap restarts
        it at 1. Averages are running means of the old value and this session.
        """
        now = ensure_aware(now)
        streak = next_streak(pattern.study_streak, pattern.last_study_date, now)

        return pattern.model_copy(
            update={
                "last_study_date": now,
                "study_streak": streak,
                "average_session_duration": (pattern.average_session_duration + duration_minutes) / 2,
                "average_cards_per_session": (pattern.average_cards_per_session + cards_studied) / 2,
            }
        )

    def upcoming_plans(
        self,
        plans: Iterable[SessionPlan],
        user_id: str,
        now: datetime,
    ) -> list[SessionPlan]:
        """A user's plans scheduled after ``now``, soonest first."""
        now = ensure_aware(now)
        upcoming = [plan for plan in plans if plan.user_id == user_id and plan.scheduled_for > now]
        return sorted(upcoming, key=lambda plan: plan.scheduled_for)

    def reschedule_plan(self, plan: SessionPlan, new_time: datetime) -> SessionPlan:
        return plan.model_copy(update={"scheduled_for": ensure_aware(new_time)})


# =============================================================================
# MODULE-LEVEL HELPERS
# =============================================================================


def compute_optimal_time(pattern: StudyPattern, now: datetime) -> datetime:
    return StudyPlanner().compute_optimal_time(pattern, now)


def build_session_plan(
    items: Iterable[Item],
    pattern: StudyPattern,
    now: datetime,
    deck_id: str = "default",
) -> SessionPlan:
    return StudyPlanner().build_session_plan(items, pattern, now, deck_id=deck_id)


def generate_recommendations(
    items: Iterable[Item],
    pattern: StudyPattern,
    now: datetime,
) -> list[Recommendation]:
    return StudyPlanner().generate_recommendations(items, pattern, now)
