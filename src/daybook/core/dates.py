"""Pure date resolution for entry markers and filter bounds - no I/O.

Two policies exist for a year-less ``MM/DD``:

- ``parse_later_date`` always resolves to today or later (an entry that
  says ``@01/01`` on Jan 5 means next January).
- ``parse_date_prefer_past`` resolves to today or earlier, for overdue
  checks (``@12/30`` seen on Jan 1 is two days late, not a year early).

Keep them separate; callers pick the policy by calling the right one.
"""

import re
from datetime import date, timedelta

# @MM/DD, @MM/DD/YY, @MM/DD/YYYY, @YYYY/MM/DD
LATER_DATE_PATTERN = re.compile(
    r"@([0-9]{4}/[0-9]{1,2}/[0-9]{1,2}|[0-9]{1,2}/[0-9]{1,2}(?:/[0-9]{2,4})?)"
)

# @tomorrow, @yesterday, @next-mon, @last-friday, @3d, @-3d
NATURAL_DATE_PATTERN = re.compile(
    r"@(tomorrow|yesterday"
    r"|(?:next|last)-(?:mon(?:day)?|tue(?:sday)?|wed(?:nesday)?|thu(?:rsday)?"
    r"|fri(?:day)?|sat(?:urday)?|sun(?:day)?)"
    r"|-?[1-9][0-9]*d)\b",
    re.IGNORECASE,
)

WEEKDAYS = {
    "monday": 0,
    "mon": 0,
    "tuesday": 1,
    "tue": 1,
    "wednesday": 2,
    "wed": 2,
    "thursday": 3,
    "thu": 3,
    "friday": 4,
    "fri": 4,
    "saturday": 5,
    "sat": 5,
    "sunday": 6,
    "sun": 6,
}


def _to_int(s: str) -> int | None:
    if not s or not (s.isascii() and s.isdigit()):
        return None
    return int(s)


def _make_date(year: int, month: int, day: int) -> date | None:
    try:
        return date(year, month, day)
    except (ValueError, OverflowError):
        return None


def _shift(today: date, days: int) -> date | None:
    try:
        return today + timedelta(days=days)
    except OverflowError:
        return None


def _split_month_day(date_str: str) -> tuple[int, int] | None:
    parts = date_str.split("/")
    if len(parts) != 2:
        return None
    month, day = _to_int(parts[0]), _to_int(parts[1])
    if month is None or day is None:
        return None
    return month, day


def _parse_with_year(date_str: str) -> date | None:
    """YYYY/MM/DD, MM/DD/YYYY or MM/DD/YY (two-digit years are 20xx)."""
    parts = date_str.split("/")
    if len(parts) != 3:
        return None

    if len(parts[0]) == 4 and _to_int(parts[0]) is not None:
        year, month, day = (_to_int(p) for p in parts)
        if month is not None and day is not None:
            parsed = _make_date(year, month, day)
            if parsed:
                return parsed

    month, day, year = (_to_int(p) for p in parts)
    if month is None or day is None or year is None:
        return None
    if year < 100:
        year += 2000
    return _make_date(year, month, day)


def parse_later_date(date_str: str, today: date) -> date | None:
    """
    Parse a marker date (without the ``@``).

    Tries YYYY/MM/DD, then MM/DD/YYYY or MM/DD/YY, then MM/DD. A bare
    MM/DD that has already passed this year rolls over to next year.
    """
    if date_str.count("/") == 2:
        return _parse_with_year(date_str)

    month_day = _split_month_day(date_str)
    if month_day is None:
        return None
    month, day = month_day
    parsed = _make_date(today.year, month, day)
    if parsed is None:
        return None
    if parsed < today:
        return _make_date(today.year + 1, month, day)
    return parsed


def parse_date_prefer_past(date_str: str, today: date) -> date | None:
    """
    Like parse_later_date, but a bare MM/DD resolves to its most recent
    occurrence: a date still ahead this year means last year's.
    """
    if date_str.count("/") == 2:
        return parse_later_date(date_str, today)

    month_day = _split_month_day(date_str)
    if month_day is None:
        return None
    month, day = month_day
    parsed = _make_date(today.year, month, day)
    if parsed is None:
        return None
    if parsed <= today:
        return parsed
    return _make_date(today.year - 1, month, day)


def parse_weekday(name: str) -> int | None:
    """Weekday number (Monday=0) for a full or three-letter name."""
    return WEEKDAYS.get(name.lower())


def next_weekday_from(today: date, weekday: int) -> date | None:
    """Next occurrence of a weekday strictly after today."""
    return _shift(today, (weekday - today.weekday()) % 7 or 7)


def prev_weekday_from(today: date, weekday: int) -> date | None:
    """Most recent occurrence of a weekday strictly before today."""
    return _shift(today, -((today.weekday() - weekday) % 7 or 7))


def parse_natural_date(value: str, today: date) -> date | None:
    """
    Parse natural date phrases, falling back to parse_later_date.

    Accepts ``tomorrow``, ``yesterday``, ``Nd`` / ``-Nd`` (N > 0),
    ``next-<weekday>`` and ``last-<weekday>``, case-insensitively.
    """
    lowered = value.lower()

    if lowered == "tomorrow":
        return _shift(today, 1)
    if lowered == "yesterday":
        return _shift(today, -1)

    if lowered.endswith("d"):
        days_str = lowered[:-1]
        if days_str.startswith("-"):
            days = _to_int(days_str[1:])
            if days:
                return _shift(today, -days)
        else:
            days = _to_int(days_str)
            if days:
                return _shift(today, days)

    if lowered.startswith("next-"):
        weekday = parse_weekday(lowered[len("next-"):])
        if weekday is not None:
            return next_weekday_from(today, weekday)

    if lowered.startswith("last-"):
        weekday = parse_weekday(lowered[len("last-"):])
        if weekday is not None:
            return prev_weekday_from(today, weekday)

    return parse_later_date(value, today)


def format_marker(target: date) -> str:
    """Canonical stored form of a date marker: ``@MM/DD``."""
    return f"@{target:%m/%d}"


def normalize_natural_dates(content: str, today: date) -> str:
    """Rewrite natural date markers (``@tomorrow``, ``@3d``...) as ``@MM/DD``."""

    def replace(match: re.Match) -> str:
        resolved = parse_natural_date(match.group(1), today)
        return format_marker(resolved) if resolved else match.group(0)

    return NATURAL_DATE_PATTERN.sub(replace, content)


def extract_target_date(content: str, today: date) -> date | None:
    """Date of the first ``@date`` marker in an entry, always-future policy."""
    match = LATER_DATE_PATTERN.search(content)
    if not match:
        return None
    return parse_later_date(match.group(1), today)


def extract_target_date_prefer_past(content: str, today: date) -> date | None:
    """Date of the first ``@date`` marker in an entry, prefer-past policy."""
    match = LATER_DATE_PATTERN.search(content)
    if not match:
        return None
    return parse_date_prefer_past(match.group(1), today)


def defer_date(content: str, today: date) -> str | None:
    """
    Push the first date marker one day later.

    Markers with an explicit year are rewritten as ``@YYYY/MM/DD``; bare
    markers stay ``@MM/DD``. Returns None when there is nothing to defer.
    """
    match = LATER_DATE_PATTERN.search(content)
    if not match:
        return None
    date_str = match.group(1)
    current = parse_later_date(date_str, today)
    if current is None:
        return None
    deferred = _shift(current, 1)
    if deferred is None:
        return None

    if date_str.count("/") == 2:
        replacement = f"@{deferred:%Y/%m/%d}"
    else:
        replacement = format_marker(deferred)
    return content[: match.start()] + replacement + content[match.end():]


def remove_date(content: str) -> str | None:
    """Strip the first date marker (and the space before it). None if absent."""
    match = LATER_DATE_PATTERN.search(content)
    if not match:
        return None
    start = match.start()
    if start > 0 and content[start - 1] == " ":
        start -= 1
    return content[:start] + content[match.end():]
