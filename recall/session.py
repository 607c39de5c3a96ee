"""
recall.session
---------

This module defines the Session and SessionResult classes.

Classes:
    Session: A linear study session that presents each card once.
    SessionResult: The reviewed cards and score of a finished Session.
"""

from __future__ import annotations
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
import logging
from typing import TYPE_CHECKING
from recall.card import Card
from recall.errors import InvalidStateError
from recall.rating import Rating
from recall.review_log import ReviewLog

if TYPE_CHECKING:
    from recall.scheduler import Scheduler

logger = logging.getLogger(__name__)

SCORING_RATINGS = (Rating.Good, Rating.Easy)
XP_PER_POINT = 5


@dataclass(frozen=True)
class SessionResult:
    """
    The outcome of a finished Session.

    Attributes:
        cards: The reviewed cards, in the order they were presented.
        score: The number of cards rated good or easy.
        review_logs: One review log per reviewed card.
    """

    cards: tuple[Card, ...]
    score: int
    review_logs: tuple[ReviewLog, ...]

    @property
    def xp(self) -> int:
        """Experience points earned for the session."""
        return self.score * XP_PER_POINT


class Session:
    """
    A study session over an ordered sequence of cards.

    Each card is presented once and rated once. Cards are scheduled independently of each
    other, so rating one card never changes how the next is scheduled.
    """

    def __init__(self, scheduler: Scheduler, cards: Sequence[Card]) -> None:
        self.scheduler = scheduler
        self._cards = tuple(cards)
        self._reviewed: list[Card] = []
        self._review_logs: list[ReviewLog] = []
        self.score = 0

    @property
    def current_card(self) -> Card | None:
        """The card awaiting a rating, or None once the session is finished."""
        if self.is_finished:
            return None
        return self._cards[len(self._reviewed)]

    @property
    def remaining(self) -> int:
        return len(self._cards) - len(self._reviewed)

    @property
    def is_finished(self) -> bool:
        return self.remaining == 0

    def rate(
        self,
        rating: Rating | int | str,
        review_datetime: datetime | None = None,
        review_duration: int | None = None,
    ) -> Card:
        """
        Rates the current card and moves on to the next one.

        Args:
            rating: The rating for the current card.
            review_datetime: The date and time of the review. Defaults to now, in UTC.
            review_duration: The number of milliseconds it took to review the card or None if unspecified.

        Returns:
            Card: The reviewed card.

        Raises:
            InvalidStateError: If every card in the session has already been rated.
        """

        card = self.current_card
        if card is None:
            raise InvalidStateError("Session is finished, no card left to rate")

        rating = Rating.parse(rating)
        reviewed_card, review_log = self.scheduler.review_card(
            card=card,
            rating=rating,
            review_datetime=review_datetime,
            review_duration=review_duration,
        )

        self._reviewed.append(reviewed_card)
        self._review_logs.append(review_log)
        if rating in SCORING_RATINGS:
            self.score += 1

        if self.is_finished:
            logger.debug(
                "session finished: %d cards reviewed, score %d",
                len(self._reviewed),
                self.score,
            )

        return reviewed_card

    def result(self) -> SessionResult:
        """
        Returns the reviewed cards and score of the session.

        Raises:
            InvalidStateError: If some cards have not been rated yet.
        """

        if not self.is_finished:
            raise InvalidStateError(
                f"Session is not finished, {self.remaining} card(s) left to rate"
            )

        return SessionResult(
            cards=tuple(self._reviewed),
            score=self.score,
            review_logs=tuple(self._review_logs),
        )


__all__ = ["Session", "SessionResult"]
