from enum import IntEnum


class State(IntEnum):
    """
    Enum representing the learning state of a Card object.
    """

    New = 0
    Learning = 1
    Mastered = 2


__all__ = ["State"]
