"""
recall.errors
---------

This module defines the exceptions raised by the review scheduler.

Both exceptions subclass ValueError, so callers already catching ValueError keep working.
"""


class InvalidArgumentError(ValueError):
    """
    Raised when an operation is called with an argument outside its accepted domain,
    such as a rating that is not one of again, hard, good or easy.
    """


class InvalidStateError(ValueError):
    """
    Raised when a card carries corrupt scheduling state or a Session is used out of order.
    """


__all__ = ["InvalidArgumentError", "InvalidStateError"]
