"""
Study Session Manager.

Builds bounded study sessions and tracks grading within them.

Session Flow:
1. create_session: due items first (earliest first), then new items,
   up to the size budget
2. grade_item: run the SM-2 transition, record the result, update accuracy
3. finish_session: stamp the end time; the session is terminal afterwards

State machine: created -> in_progress -> completed
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from loguru import logger

from config import Settings, get_settings
from tether.core.errors import ItemNotInSession, SessionAlreadyCompleted
from tether.core.models import Item, Rating, Session, SessionStatus
from tether.core.timeutil import ensure_aware, epoch_ms
from tether.study.grader import is_passing, quality_from_rating
from tether.study.selector import get_due, get_new
from tether.study.sm2 import SM2Scheduler


class SessionManager:
    """
    Creates, grades and finishes study sessions.

    Every method returns a new Session; the input session is never modified.
    """

    def __init__(self, settings: Settings | None = None, scheduler: SM2Scheduler | None = None):
        self.settings = settings or get_settings()
        self.scheduler = scheduler or SM2Scheduler(self.settings)

    def create_session(
        self,
        items: Iterable[Item],
        now: datetime,
        max_size: int | None = None,
        session_id: str | None = None,
    ) -> Session:
        """
        Plan a new study session.

        Args:
            items: The full item collection
            now: Session start time
            max_size: Maximum items in the session (default from settings)
            session_id: Optional explicit id (default session_<epoch ms>)

        Returns:
            Session in the created state
        """
        now = ensure_aware(now)
        items = list(items)
        limit = self.settings.default_session_size if max_size is None else max(0, max_size)

        due = get_due(items, now)
        new = get_new(items)

        included = due[:limit]
        included_ids = {item.id for item in included}
        for item in new:
            if len(included) >= limit:
                break
            # New items are usually due as well; never include one twice
            if item.id in included_ids:
                continue
            included.append(item)
            included_ids.add(item.id)

        session = Session(
            id=session_id or f"session_{epoch_ms(now)}",
            items=included,
            due_items=due,
            completed_items=[],
            start_time=now,
            end_time=None,
            total_cards=len(included),
            correct_answers=0,
            accuracy_percent=0.0,
            status=SessionStatus.CREATED,
        )

        logger.info(
            f"Created {session.id}: {session.total_cards} cards "
            f"({len(due)} due, {len(new)} new available, limit {limit})"
        )
        return session

    def grade_item(
        self,
        session: Session,
        item_id: str,
        quality: int | Rating | str,
        now: datetime,
    ) -> Session:
        """
        Record a graded review inside the session.

        Args:
            session: Current session
            item_id: Id of an item in session.items
            quality: 0-3 quality or a rating token ("again", "hard", ...)
            now: Review time

        Raises:
            SessionAlreadyCompleted: If the session was finished
            ItemNotInSession: If the item is not part of the session
        """
        if session.is_completed:
            raise SessionAlreadyCompleted(session.id)

        current = session.find_item(item_id)
        if current is None:
            raise ItemNotInSession(item_id, session.id)

        if isinstance(quality, (Rating, str)):
            quality = quality_from_rating(quality)

        result = self.scheduler.advance(current, quality, now)
        updated = result.item

        completed = [*session.completed_items, updated]
        correct = session.correct_answers + (1 if is_passing(updated.last_quality) else 0)

        return session.model_copy(
            update={
                "items": [updated if item.id == item_id else item for item in session.items],
                "completed_items": completed,
                "correct_answers": correct,
                "accuracy_percent": correct / len(completed) * 100,
                "status": SessionStatus.IN_PROGRESS,
            }
        )

    def finish_session(self, session: Session, now: datetime) -> Session:
        """Close the session. Finishing a completed session changes nothing."""
        if session.is_completed:
            logger.debug(f"{session.id} already completed")
            return session

        finished = session.model_copy(
            update={
                "end_time": ensure_aware(now),
                "status": SessionStatus.COMPLETED,
            }
        )
        logger.info(
            f"Finished {session.id}: {len(session.completed_items)}/{session.total_cards} "
            f"graded, {session.accuracy_percent:.0f}% accuracy"
        )
        return finished


# =============================================================================
# MODULE-LEVEL HELPERS
# =============================================================================


def create_session(
    items: Iterable[Item],
    now: datetime,
    max_size: int | None = None,
    session_id: str | None = None,
) -> Session:
    return SessionManager().create_session(items, now, max_size=max_size, session_id=session_id)


def grade_item(session: Session, item_id: str, quality: int | Rating | str, now: datetime) -> Session:
    return SessionManager().grade_item(session, item_id, quality, now)


def finish_session(session: Session, now: datetime) -> Session:
    return SessionManager().finish_session(session, now)
