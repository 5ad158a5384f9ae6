"""Pure recurrence rules for ``@every-*`` markers - no I/O."""

import calendar
import re
from dataclasses import dataclass
from datetime import date
from enum import Enum

from .dates import parse_weekday

RECURRING_PATTERN = re.compile(r"@every-([a-z0-9]+)\b", re.IGNORECASE)


class Frequency(Enum):
    DAILY = "daily"
    WEEKDAY = "weekday"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


@dataclass(frozen=True)
class RecurringPattern:
    """
    A recurrence rule.

    ``value`` is the weekday number (Monday=0) for WEEKLY and the day of
    the month (1-31) for MONTHLY; unused otherwise.
    """

    frequency: Frequency
    value: int = 0

    @classmethod
    def daily(cls) -> "RecurringPattern":
        return cls(Frequency.DAILY)

    @classmethod
    def weekday(cls) -> "RecurringPattern":
        return cls(Frequency.WEEKDAY)

    @classmethod
    def weekly(cls, weekday: int) -> "RecurringPattern":
        return cls(Frequency.WEEKLY, weekday)

    @classmethod
    def monthly(cls, day: int) -> "RecurringPattern":
        return cls(Frequency.MONTHLY, day)

    def matches(self, target: date) -> bool:
        """
        Check whether the rule fires on a date.

        A monthly day past the end of a short month fires on that
        month's last day, so ``@every-31`` lands on Feb 28 (or 29).
        """
        match self.frequency:
            case Frequency.DAILY:
                return True
            case Frequency.WEEKDAY:
                return target.weekday() < 5
            case Frequency.WEEKLY:
                return target.weekday() == self.value
            case Frequency.MONTHLY:
                last_day = calendar.monthrange(target.year, target.month)[1]
                return target.day == min(self.value, last_day)
        return False


def parse_recurring_pattern(rule: str) -> RecurringPattern | None:
    """Parse the part after ``@every-``: day, weekday, a weekday name, or 1-31."""
    lowered = rule.lower()
    if lowered == "day":
        return RecurringPattern.daily()
    if lowered == "weekday":
        return RecurringPattern.weekday()

    weekday = parse_weekday(lowered)
    if weekday is not None:
        return RecurringPattern.weekly(weekday)

    if lowered.isascii() and lowered.isdigit():
        day = int(lowered)
        if 1 <= day <= 31:
            return RecurringPattern.monthly(day)
    return None


def extract_recurring_pattern(content: str) -> RecurringPattern | None:
    """Rule of the first valid ``@every-*`` marker in an entry's content."""
    for match in RECURRING_PATTERN.finditer(content):
        pattern = parse_recurring_pattern(match.group(1))
        if pattern:
            return pattern
    return None


def strip_recurring_marker(content: str) -> str:
    """Content with every ``@every-*`` marker (and the space before it) removed."""
    return re.sub(r"\s*@every-[a-z0-9]+\b", "", content, flags=re.IGNORECASE).strip()
