"""
Core Module - Shared domain models and errors.

Components:
- models: Wire records (Item, Session, StudyPattern, SessionPlan, Recommendation)
- errors: Error taxonomy rooted at TetherError
- timeutil: Calendar helpers for explicit-clock arithmetic

Design Principle:
The study modules import from tether.core rather than defining
their own records.
"""

from tether.core.errors import (
    DeckStoreError,
    InvalidRating,
    ItemNotInSession,
    MalformedItemState,
    SessionAlreadyCompleted,
    TetherError,
)
from tether.core.models import (
    Item,
    MaturityTier,
    PlanGoals,
    Priority,
    Quality,
    Rating,
    Recommendation,
    RecommendationType,
    ReminderState,
    Session,
    SessionPlan,
    SessionStatus,
    SessionType,
    StudyPattern,
    new_item,
    parse_item,
)

__all__ = [
    # Errors
    "TetherError",
    "InvalidRating",
    "ItemNotInSession",
    "SessionAlreadyCompleted",
    "MalformedItemState",
    "DeckStoreError",
    # Models
    "Item",
    "MaturityTier",
    "PlanGoals",
    "Priority",
    "Quality",
    "Rating",
    "Recommendation",
    "RecommendationType",
    "ReminderState",
    "Session",
    "SessionPlan",
    "SessionStatus",
    "SessionType",
    "StudyPattern",
    "new_item",
    "parse_item",
]
