"""
Study Module - The spaced-repetition scheduling engine.

Provides:
- Review grading (rating token -> quality)
- SM-2 interval calculation
- Due / new / review selection and maturity tiers
- Bounded study sessions with accuracy tracking
- Session plans and study recommendations
- Deck statistics and streak/reminder helpers

Every entry point takes ``now`` explicitly and returns new records.
"""

from tether.study.grader import is_passing, quality_from_rating
from tether.study.planner import (
    StudyPlanner,
    build_session_plan,
    compute_optimal_time,
    generate_recommendations,
)
from tether.study.reminders import (
    MotivationMessage,
    is_reminder_due,
    mark_reminder_sent,
    motivation_message,
    record_study_day,
    streak_celebration,
)
from tether.study.selector import classify, get_due, get_new, get_review
from tether.study.session_manager import (
    SessionManager,
    create_session,
    finish_session,
    grade_item,
)
from tether.study.sm2 import ReviewResult, SM2Scheduler, advance, reset_item
from tether.study.stats import (
    ItemSchedule,
    SessionSummary,
    StudyStats,
    get_item_schedule,
    get_study_stats,
    summarize_session,
    tier_breakdown,
)

__all__ = [
    # Grader
    "quality_from_rating",
    "is_passing",
    # Interval calculator
    "SM2Scheduler",
    "ReviewResult",
    "advance",
    "reset_item",
    # Selector
    "get_due",
    "get_new",
    "get_review",
    "classify",
    # Sessions
    "SessionManager",
    "create_session",
    "grade_item",
    "finish_session",
    # Planner
    "StudyPlanner",
    "compute_optimal_time",
    "build_session_plan",
    "generate_recommendations",
    # Stats
    "StudyStats",
    "ItemSchedule",
    "SessionSummary",
    "get_study_stats",
    "get_item_schedule",
    "tier_breakdown",
    "summarize_session",
    # Reminders
    "MotivationMessage",
    "record_study_day",
    "is_reminder_due",
    "mark_reminder_sent",
    "motivation_message",
    "streak_celebration",
]
