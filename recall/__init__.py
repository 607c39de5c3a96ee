"""
recall
-------

Recall is a small spaced-repetition library that schedules flashcard reviews with an SM-2 derived algorithm.
"""

from recall.scheduler import Scheduler
from recall.session import Session, SessionResult
from recall.state import State
from recall.card import Card
from recall.rating import Rating
from recall.review_log import ReviewLog
from recall.errors import InvalidArgumentError, InvalidStateError

__all__ = [
    "Scheduler",
    "Session",
    "SessionResult",
    "Card",
    "Rating",
    "ReviewLog",
    "State",
    "InvalidArgumentError",
    "InvalidStateError",
]
