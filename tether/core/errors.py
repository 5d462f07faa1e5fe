"""
Error taxonomy for the scheduling engine.

Only session state-machine violations are hard errors during normal use.
Numeric item defects are healed where they are read, and an unknown rating
token falls back to "good" unless strict ratings are enabled.
"""

from __future__ import annotations


class TetherError(Exception):
    """Base class for every error raised by Tether."""

    code = "TETHER_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRating(TetherError, ValueError):
    """Raised for an unrecognized rating token when strict ratings are on."""

    code = "INVALID_RATING"

    def __init__(self, token: object):
        super().__init__(
            f"Unrecognized rating {token!r}; expected one of again, hard, good, easy"
        )
        self.token = token


class ItemNotInSession(TetherError, LookupError):
    """Raised when grading an item that is not part of the session."""

    code = "ITEM_NOT_IN_SESSION"

    def __init__(self, item_id: str, session_id: str):
        super().__init__(f"Item {item_id} is not part of session {session_id}")
        self.item_id = item_id
        self.session_id = session_id


class SessionAlreadyCompleted(TetherError, RuntimeError):
    """Raised when grading against a finished session."""

    code = "SESSION_ALREADY_COMPLETED"

    def __init__(self, session_id: str):
        super().__init__(f"Session {session_id} is already completed")
        self.session_id = session_id


class MalformedItemState(TetherError, ValueError):
    """Raised when an item record cannot be turned into an Item at all."""

    code = "MALFORMED_ITEM_STATE"


class DeckStoreError(TetherError):
    """Raised when a deck file cannot be read or written."""

    code = "DECK_STORE_ERROR"
