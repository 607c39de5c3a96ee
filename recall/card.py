"""
recall.card
---------

This module defines the Card class.

Classes:
    Card: Represents a flashcard scheduled by the review scheduler.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
import json
from typing import TypedDict
from uuid import uuid4
from typing_extensions import NotRequired, Self
from recall.state import State

DEFAULT_INTERVAL = 0.0
DEFAULT_EASE_FACTOR = 2.5


class CardDict(TypedDict):
    """
    JSON-serializable dictionary representation of a Card object.

    Only the card_id is required when loading; cards that were authored but never studied
    carry no scheduling fields.
    """

    card_id: str
    question: NotRequired[str]
    answer: NotRequired[str]
    interval: NotRequired[float]
    ease_factor: NotRequired[float]
    review_count: NotRequired[int]
    due: NotRequired[str]
    mastered: NotRequired[bool]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _new_card_id() -> str:
    return uuid4().hex


def _parse_due(due: str) -> datetime:
    # fromisoformat only accepts a trailing "Z" from Python 3.11 on
    if due.endswith(("Z", "z")):
        due = due[:-1] + "+00:00"

    due_datetime = datetime.fromisoformat(due)

    # timestamps stored without an offset are taken to be UTC
    if due_datetime.tzinfo is None:
        return due_datetime.replace(tzinfo=timezone.utc)

    return due_datetime.astimezone(timezone.utc)


@dataclass(frozen=True)
class Card:
    """
    Represents a flashcard.

    Card objects are immutable: the Scheduler returns a new Card for every review.

    Attributes:
        card_id: The id of the card. Defaults to a random hex string.
        question: The prompt shown on the front of the card.
        answer: The response shown on the back of the card.
        interval: The number of days until the next review, 0 if the card is new or was just failed.
        ease_factor: Multiplier controlling how quickly the interval grows. Never below 1.3.
        review_count: The number of times the card has been rated.
        due: The date and time when the card is due next.
        mastered: Whether the card's interval has passed the scheduler's mastery threshold.
    """

    card_id: str = field(default_factory=_new_card_id)
    question: str = ""
    answer: str = ""
    interval: float = DEFAULT_INTERVAL
    ease_factor: float = DEFAULT_EASE_FACTOR
    review_count: int = 0
    due: datetime = field(default_factory=_utc_now)
    mastered: bool = False

    @property
    def state(self) -> State:
        """
        The card's current learning state, derived from its review count and mastery flag.
        """

        if self.review_count == 0:
            return State.New
        if self.mastered:
            return State.Mastered
        return State.Learning

    def is_due(self, current_datetime: datetime | None = None) -> bool:
        """
        Whether the card is eligible for review at the given date and time.

        Args:
            current_datetime: The current date and time. Defaults to now, in UTC.

        Returns:
            True if the card's due date has passed.
        """

        if current_datetime is None:
            current_datetime = _utc_now()

        return self.due <= current_datetime

    def to_dict(self) -> CardDict:
        """
        Returns a JSON-serializable dictionary representation of the Card object.

        This method is specifically useful for storing Card objects in a database.

        Returns:
            A dictionary representation of the Card object.
        """

        return {
            "card_id": self.card_id,
            "question": self.question,
            "answer": self.answer,
            "interval": float(self.interval),
            "ease_factor": float(self.ease_factor),
            "review_count": self.review_count,
            "due": self.due.isoformat(),
            "mastered": self.mastered,
        }

    @classmethod
    def from_dict(cls, source_dict: CardDict) -> Self:
        """
        Creates a Card object from an existing dictionary.

        Missing scheduling fields are filled in with the defaults of a new card. The due date is
        converted to UTC; a due date without a UTC offset is read as UTC.

        Args:
            source_dict: A dictionary representing an existing Card object.

        Returns:
            A Card object created from the provided dictionary.
        """

        interval = source_dict.get("interval")
        ease_factor = source_dict.get("ease_factor")
        review_count = source_dict.get("review_count")
        due = source_dict.get("due")

        return cls(
            card_id=str(source_dict["card_id"]),
            question=source_dict.get("question", ""),
            answer=source_dict.get("answer", ""),
            interval=float(interval) if interval is not None else DEFAULT_INTERVAL,
            ease_factor=(
                float(ease_factor) if ease_factor is not None else DEFAULT_EASE_FACTOR
            ),
            review_count=int(review_count) if review_count is not None else 0,
            due=_parse_due(due) if due else _utc_now(),
            mastered=bool(source_dict.get("mastered", False)),
        )

    def to_json(self, indent: int | str | None = None) -> str:
        """
        Returns a JSON-serialized string of the Card object.

        Args:
            indent: Equivalent argument to the indent in json.dumps()

        Returns:
            str: A JSON-serialized string of the Card object.
        """

        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, source_json: str) -> Self:
        """
        Creates a Card object from a JSON-serialized string.

        Args:
            source_json: A JSON-serialized string of an existing Card object.

        Returns:
            Self: A Card object created from the JSON string.
        """

        source_dict: CardDict = json.loads(source_json)
        return cls.from_dict(source_dict=source_dict)


__all__ = ["Card"]
