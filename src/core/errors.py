"""
Exceptions raised while reading service reports.
"""


class FormatError(ValueError):
    """A section or sheet required by the chosen format variant is missing."""


class FieldNotFound(LookupError):
    """No rule pattern or cell produced a value for a field."""


class MalformedTime(ValueError):
    """A located value is not a time of day."""


class MalformedDate(ValueError):
    """A located value is not a calendar date."""
