"""
Break categories shared by the timer, the statistics ledger and the API.
"""

from __future__ import annotations

from enum import Enum
from typing import FrozenSet, Union


class BreakCategory(str, Enum):
    MICRO = "micro"
    REST = "rest"
    DAILY = "daily"      # daily-limit prompts; never accepted from callers


# Categories a user-facing command may name.
USER_CATEGORIES: FrozenSet[BreakCategory] = frozenset(
    {BreakCategory.MICRO, BreakCategory.REST}
)


class UnknownBreakCategory(ValueError):
    """Raised when a command names a break category outside the accepted set."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Unknown break category: {value!r}")


def parse_break_category(
    value: Union[str, BreakCategory],
    allowed: FrozenSet[BreakCategory] = USER_CATEGORIES,
) -> BreakCategory:
    try:
        category = BreakCategory(value)
    except ValueError:
        raise UnknownBreakCategory(value) from None
    if category not in allowed:
        raise UnknownBreakCategory(value)
    return category
