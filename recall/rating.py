"""
recall.rating
---------

This module defines the Rating enum.

Classes:
    Rating: Enum representing the four possible ratings when reviewing a card.
"""

from __future__ import annotations
from enum import Enum, IntEnum
from typing_extensions import Self
from recall.errors import InvalidArgumentError


class Rating(IntEnum):
    """
    Enum representing the four possible ratings when reviewing a card, from worst to best.
    """

    Again = 1
    Hard = 2
    Good = 3
    Easy = 4

    @classmethod
    def parse(cls, value: Rating | int | str) -> Self:
        """
        Converts a Rating, its integer value or its case-insensitive name into a Rating.

        Args:
            value: The rating to convert, e.g. Rating.Good, 3 or "good".

        Returns:
            The matching Rating.

        Raises:
            InvalidArgumentError: If the value does not name one of the four ratings.
        """

        if isinstance(value, cls):
            return value

        if isinstance(value, str):
            for rating in cls:
                if rating.name.lower() == value.strip().lower():
                    return rating

        # bools and members of other int enums are int subclasses but never ratings
        elif isinstance(value, int) and not isinstance(value, (bool, Enum)):
            try:
                return cls(value)
            except ValueError:
                pass

        raise InvalidArgumentError(
            f"{value!r} is not a valid rating, expected one of: "
            + ", ".join(rating.name.lower() for rating in cls)
        )


__all__ = ["Rating"]
