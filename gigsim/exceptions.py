"""Exceptions raised by the Gig Platform Policy Lab.

Hierarchy::

    GigSimError (ValueError)
    ├── InvalidParameterError
    └── InsufficientDataError

Everything inherits from ValueError so callers that already catch
ValueError keep working.
"""


class GigSimError(ValueError):
    """Base exception for all gigsim errors."""


class InvalidParameterError(GigSimError):
    """A parameter is non-finite or outside its documented range.

    Attributes:
        name: public name of the offending parameter (e.g. ``"lambda"``).
        value: the rejected value.
    """

    def __init__(self, name: str, value: float, reason: str):
        self.name = name
        self.value = value
        super().__init__(f"invalid parameter {name}={value!r}: {reason}")


class InsufficientDataError(GigSimError):
    """Not enough observations to compute the requested statistic."""
