"""
Error Types
===========

InvalidArgumentError is raised immediately for malformed input.
PartialDataWarning is emitted through the warnings module when a function
skips or coerces part of its input and carries on.
"""


class InvalidArgumentError(ValueError):
    """Malformed threshold, empty matrix, out-of-range count, etc."""


class PartialDataWarning(UserWarning):
    """Some of the requested data was dropped or coerced."""
