"""
recall.scheduler
---------

This module defines the Scheduler class as well as the various constants used in its calculations.

Classes:
    Scheduler: The SM-2 derived spaced-repetition scheduler.
"""

from __future__ import annotations
from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import datetime, timezone, timedelta
import json
import logging
import math
from typing import TypedDict
from typing_extensions import Self
from recall.card import Card, DEFAULT_EASE_FACTOR
from recall.errors import InvalidArgumentError, InvalidStateError
from recall.rating import Rating
from recall.review_log import ReviewLog
from recall.session import Session, SessionResult

logger = logging.getLogger(__name__)

MIN_EASE_FACTOR = 1.3

AGAIN_EASE_PENALTY = 0.2
HARD_EASE_PENALTY = 0.15
EASY_EASE_BONUS = 0.15

HARD_INTERVAL_MULTIPLIER = 1.2
EASY_INTERVAL_BONUS = 1.3

# intervals given to a card whose interval is 0
FIRST_INTERVALS = {
    Rating.Hard: 1.0,
    Rating.Good: 1.0,
    Rating.Easy: 4.0,
}

MASTERY_THRESHOLD = 21.0
MIN_DUE_DAYS = 1


class SchedulerDict(TypedDict):
    """
    JSON-serializable dictionary representation of a Scheduler object.
    """

    mastery_threshold: float
    fractional_due_dates: bool


@dataclass(init=False)
class Scheduler:
    """
    The review scheduler.

    Enables the reviewing and future scheduling of cards according to an SM-2 derived algorithm.
    The scheduler only holds configuration; every method returns new Card objects instead of
    mutating the ones passed in.

    Attributes:
        mastery_threshold: The interval in days a card must exceed to be considered mastered.
        fractional_due_dates: Whether due dates keep the fractional part of the interval.
            When False, the interval is rounded up to whole days.
    """

    mastery_threshold: float
    fractional_due_dates: bool

    def __init__(
        self,
        mastery_threshold: float = MASTERY_THRESHOLD,
        fractional_due_dates: bool = False,
    ) -> None:
        if not math.isfinite(mastery_threshold) or mastery_threshold <= 0:
            raise ValueError(
                f"mastery_threshold must be a positive number of days, got {mastery_threshold}"
            )

        self.mastery_threshold = float(mastery_threshold)
        self.fractional_due_dates = fractional_due_dates

    def review_card(
        self,
        card: Card,
        rating: Rating | int | str,
        review_datetime: datetime | None = None,
        review_duration: int | None = None,
    ) -> tuple[Card, ReviewLog]:
        """
        Reviews a card with a given rating at a given time for a specified duration.

        Args:
            card: The card being reviewed.
            rating: The chosen rating for the card being reviewed.
            review_datetime: The date and time of the review. Defaults to now, in UTC.
            review_duration: The number of milliseconds it took to review the card or None if unspecified.

        Returns:
            tuple[Card,ReviewLog]: A tuple containing the updated, reviewed card and its corresponding review log.

        Raises:
            InvalidArgumentError: If the rating is not one of again, hard, good or easy.
            InvalidStateError: If the card's interval, ease factor or review count is corrupt.
            ValueError: If the `review_datetime` argument is not timezone-aware and set to UTC.
        """

        rating = Rating.parse(rating)
        self._validate_card(card=card)

        if review_datetime is not None and (
            (review_datetime.tzinfo is None) or (review_datetime.tzinfo != timezone.utc)
        ):
            raise ValueError("datetime must be timezone-aware and set to UTC")

        if review_datetime is None:
            review_datetime = datetime.now(timezone.utc)

        interval, ease_factor = self._next_interval_and_ease(card=card, rating=rating)

        reviewed_card = replace(
            card,
            interval=interval,
            ease_factor=ease_factor,
            review_count=card.review_count + 1,
            due=review_datetime + self._due_delta(interval=interval),
            mastered=interval > self.mastery_threshold,
        )

        logger.debug(
            "card %s rated %s, rescheduled for %s (interval: %sd, ease: %.2f)",
            reviewed_card.card_id,
            rating.name,
            reviewed_card.due.isoformat(),
            interval,
            ease_factor,
        )

        review_log = ReviewLog(
            card_id=reviewed_card.card_id,
            rating=rating,
            review_datetime=review_datetime,
            interval=interval,
            ease_factor=ease_factor,
            review_duration=review_duration,
        )

        return reviewed_card, review_log

    def preview_interval(self, card: Card, rating: Rating | int | str) -> float:
        """
        Calculates the interval a card would be given for a rating, without reviewing it.

        Args:
            card: The card to preview.
            rating: The rating to preview.

        Returns:
            float: The interval in days that review_card would assign for the same card and rating.
        """

        rating = Rating.parse(rating)
        self._validate_card(card=card)

        interval, _ = self._next_interval_and_ease(card=card, rating=rating)

        return interval

    def preview_intervals(self, card: Card) -> dict[Rating, float]:
        """
        Returns the previewed interval of a card for each of the four ratings.
        """

        return {rating: self.preview_interval(card, rating) for rating in Rating}

    def interval_label(self, card: Card, rating: Rating | int | str) -> str:
        """
        Returns a short label for the interval a rating would give, such as "3d".

        Intervals under one day are shown as "1d" since no card is due sooner than the next day.
        """

        days = self.preview_interval(card, rating)

        if days < MIN_DUE_DAYS:
            return f"{MIN_DUE_DAYS}d"

        return f"{_round_half_up(days)}d"

    def run_session(
        self,
        cards: Sequence[Card],
        ratings: Sequence[Rating | int | str],
        review_datetime: datetime | None = None,
    ) -> SessionResult:
        """
        Reviews each card once, in order, with the rating at the same position.

        Args:
            cards: The cards of the session.
            ratings: One rating per card.
            review_datetime: The date and time of the reviews. Defaults to now, in UTC, read once for the whole session.

        Returns:
            SessionResult: The reviewed cards, their review logs and the session's score.

        Raises:
            InvalidArgumentError: If the number of ratings does not match the number of cards.
        """

        if len(cards) != len(ratings):
            raise InvalidArgumentError(
                f"Expected {len(cards)} ratings, got {len(ratings)}."
            )

        # reject bad ratings before any card is reviewed
        parsed_ratings = [Rating.parse(rating) for rating in ratings]

        # every card of the session is reviewed at the same moment
        if review_datetime is None:
            review_datetime = datetime.now(timezone.utc)

        session = Session(scheduler=self, cards=cards)

        for rating in parsed_ratings:
            session.rate(rating, review_datetime=review_datetime)

        return session.result()

    def reschedule_card(self, card: Card, review_logs: list[ReviewLog]) -> Card:
        """
        Reschedules/updates the given card with the current scheduler provided that card's review logs.

        The card's scheduling state is rebuilt from scratch by replaying its review logs in
        chronological order, e.g. after changing the scheduler's mastery threshold.

        Args:
            card: The card to be rescheduled/updated.
            review_logs: A list of that card's review logs. They are replayed sorted by review_datetime;
                logs sharing the same review_datetime keep the order they are given in.

        Returns:
            Card: A new card that has been rescheduled/updated with this current scheduler.

        Raises:
            ValueError: If any of the review logs are for a card other than the one specified, this will raise an error.
        """

        for review_log in review_logs:
            if review_log.card_id != card.card_id:
                raise ValueError(
                    f"ReviewLog card_id {review_log.card_id} does not match Card card_id {card.card_id}"
                )

        review_logs = sorted(review_logs, key=lambda log: log.review_datetime)

        rescheduled_card = Card(
            card_id=card.card_id,
            question=card.question,
            answer=card.answer,
            due=card.due,
        )

        for review_log in review_logs:
            rescheduled_card, _ = self.review_card(
                card=rescheduled_card,
                rating=review_log.rating,
                review_datetime=review_log.review_datetime,
            )

        return rescheduled_card

    def to_dict(
        self,
    ) -> SchedulerDict:
        """
        Returns a dictionary representation of the Scheduler object.

        Returns:
            SchedulerDict: A dictionary representation of the Scheduler object.
        """

        return {
            "mastery_threshold": self.mastery_threshold,
            "fractional_due_dates": self.fractional_due_dates,
        }

    @classmethod
    def from_dict(cls, source_dict: SchedulerDict) -> Self:
        """
        Creates a Scheduler object from an existing dictionary.

        Args:
            source_dict: A dictionary representing an existing Scheduler object.

        Returns:
            Self: A Scheduler object created from the provided dictionary.
        """

        return cls(
            mastery_threshold=source_dict["mastery_threshold"],
            fractional_due_dates=source_dict["fractional_due_dates"],
        )

    def to_json(self, indent: int | str | None = None) -> str:
        """
        Returns a JSON-serialized string of the Scheduler object.

        Args:
            indent: Equivalent argument to the indent in json.dumps()

        Returns:
            str: A JSON-serialized string of the Scheduler object.
        """

        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, source_json: str) -> Self:
        """
        Creates a Scheduler object from a JSON-serialized string.

        Args:
            source_json: A JSON-serialized string of an existing Scheduler object.

        Returns:
            Self: A Scheduler object created from the JSON string.
        """

        source_dict: SchedulerDict = json.loads(source_json)
        return cls.from_dict(source_dict=source_dict)

    def _validate_card(self, *, card: Card) -> None:
        error_messages = []

        if not math.isfinite(card.interval) or card.interval < 0:
            error_messages.append(
                f"interval = {card.interval} must be a non-negative number of days"
            )

        if not math.isfinite(card.ease_factor) or card.ease_factor < MIN_EASE_FACTOR:
            error_messages.append(
                f"ease_factor = {card.ease_factor} must be at least {MIN_EASE_FACTOR}"
            )

        if card.review_count < 0:
            error_messages.append(
                f"review_count = {card.review_count} must not be negative"
            )

        if len(error_messages) > 0:
            raise InvalidStateError(
                f"Card {card.card_id} has invalid scheduling state:\n"
                + "\n".join(error_messages)
            )

    def _next_interval_and_ease(
        self, *, card: Card, rating: Rating
    ) -> tuple[float, float]:
        interval = card.interval
        ease_factor = card.ease_factor

        match rating:
            case Rating.Again:
                interval = 0.0
                ease_factor = max(MIN_EASE_FACTOR, ease_factor - AGAIN_EASE_PENALTY)

            case Rating.Hard:
                if interval == 0:
                    interval = FIRST_INTERVALS[Rating.Hard]
                else:
                    interval = interval * HARD_INTERVAL_MULTIPLIER
                ease_factor = max(MIN_EASE_FACTOR, ease_factor - HARD_EASE_PENALTY)

            case Rating.Good:
                if interval == 0:
                    interval = FIRST_INTERVALS[Rating.Good]
                else:
                    interval = interval * ease_factor

            case Rating.Easy:
                if interval == 0:
                    interval = FIRST_INTERVALS[Rating.Easy]
                else:
                    interval = interval * ease_factor * EASY_INTERVAL_BONUS
                ease_factor = ease_factor + EASY_EASE_BONUS

        interval = _round_half_up(interval, ndigits=1)

        return interval, ease_factor

    def _due_delta(self, *, interval: float) -> timedelta:
        if self.fractional_due_dates:
            return timedelta(days=max(interval, MIN_DUE_DAYS))

        # due dates fall on whole days after the review
        return timedelta(days=max(math.ceil(interval), MIN_DUE_DAYS))


def _round_half_up(value: float, ndigits: int = 0) -> float:
    factor = 10**ndigits
    rounded = math.floor(value * factor + 0.5) / factor
    return rounded if ndigits > 0 else int(rounded)


__all__ = ["Scheduler", "DEFAULT_EASE_FACTOR", "MIN_EASE_FACTOR"]
