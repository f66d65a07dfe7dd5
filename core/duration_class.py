"""
Duration classes - the closed set of period cadences.

    short  -> calendar week (Monday..Sunday)
    medium -> calendar month
    long   -> calendar quarter

String input is parsed here, at the boundary. Everything past this point
works with DurationClass members only.
"""

from enum import Enum
from typing import Union
import logging

logger = logging.getLogger(__name__)


class InvalidDurationClass(ValueError):
    """Raised for any duration class outside the closed set."""

    def __init__(self, value):
        self.value = value
        valid = ", ".join(d.value for d in DurationClass)
        super().__init__(f"Unknown duration class: {value!r}. Must be one of: {valid}")


class DurationClass(str, Enum):
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"

    @classmethod
    def parse(cls, value: Union[str, "DurationClass"]) -> "DurationClass":
        """
        Parse a duration class from external input.

        Accepts members and their string values (case-insensitive).
        Never falls back to a default.

        Raises:
            InvalidDurationClass: value is not one of short/medium/long
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        logger.warning(f"Rejected duration class {value!r}")
        raise InvalidDurationClass(value)


# Cadence description shown next to each class
DURATION_CADENCE = {
    DurationClass.SHORT: "weekly",
    DurationClass.MEDIUM: "monthly",
    DurationClass.LONG: "quarterly",
}


__all__ = [
    "DurationClass",
    "InvalidDurationClass",
    "DURATION_CADENCE",
]
