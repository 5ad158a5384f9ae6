"""Pure filter query language - parsing and matching, no I/O.

A query is split on whitespace and every token is classified on its own:

    !tasks !notes !events     entry type (tasks take /done, /completed, /all)
    #tag  not:#tag            required / excluded tag
    not:!type                 excluded type
    not:text                  excluded text
    @before:DATE @after:DATE  day bounds (natural dates allowed, inclusive)
    @overdue                  only entries whose @date has passed
    @recurring                only entries with an @every-* rule
    anything else             required text

Bad tokens are collected in ``invalid_tokens`` and a filter with any of
them matches nothing.
"""

import re
from dataclasses import dataclass, field
from datetime import date

from .dates import extract_target_date_prefer_past, parse_natural_date
from .days import iter_day_lines
from .entries import Entry, EntryType
from .recurring import extract_recurring_pattern
from .tags import extract_tags

TYPE_KEYWORDS = {
    "tasks": EntryType.TASK,
    "task": EntryType.TASK,
    "t": EntryType.TASK,
    "notes": EntryType.NOTE,
    "note": EntryType.NOTE,
    "n": EntryType.NOTE,
    "events": EntryType.EVENT,
    "event": EntryType.EVENT,
    "e": EntryType.EVENT,
}

SAVED_FILTER_PATTERN = re.compile(r"\$(\w+)\b")


@dataclass
class Filter:
    """A parsed filter query."""

    entry_type: EntryType | None = None
    completed: bool | None = None
    tags: list[str] = field(default_factory=list)
    exclude_tags: list[str] = field(default_factory=list)
    search_terms: list[str] = field(default_factory=list)
    exclude_terms: list[str] = field(default_factory=list)
    exclude_types: list[EntryType] = field(default_factory=list)
    before_date: date | None = None
    after_date: date | None = None
    overdue: bool = False
    recurring: bool = False
    invalid_tokens: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.invalid_tokens


@dataclass
class FilterEntry:
    """A filter result, addressable back to its source line."""

    source_date: date
    line_index: int
    content: str
    entry_type: EntryType
    completed: bool

    def to_entry(self) -> Entry:
        return Entry(self.entry_type, self.content, self.completed)


def parse_type_keyword(keyword: str) -> EntryType | None:
    return TYPE_KEYWORDS.get(keyword)


def expand_saved_filters(query: str, filters: dict[str, str]) -> tuple[str, list[str]]:
    """
    Replace ``$name`` with its saved expansion.

    Returns the expanded query and the ``$name`` tokens that had no saved
    filter; those are left in the query as typed.
    """
    unknown: list[str] = []

    def replace(match: re.Match) -> str:
        expansion = filters.get(match.group(1))
        if expansion is None:
            unknown.append(match.group(0))
            return match.group(0)
        return expansion

    return SAVED_FILTER_PATTERN.sub(replace, query), unknown


def _parse_date_bound(filter_: Filter, token: str, value: str, current: date | None, label: str, today: date) -> date | None:
    if current is not None:
        filter_.invalid_tokens.append(f"Multiple @{label} dates")
        return current
    parsed = parse_natural_date(value, today)
    if parsed is None:
        filter_.invalid_tokens.append(token)
    return parsed


def _parse_type_token(filter_: Filter, token: str) -> None:
    base, _, modifier = token[1:].partition("/")
    new_type = parse_type_keyword(base)
    if new_type is None:
        filter_.invalid_tokens.append(token)
        return
    if filter_.entry_type is not None and filter_.entry_type is not new_type:
        filter_.invalid_tokens.append("Multiple entry types")
        return

    filter_.entry_type = new_type
    if new_type is EntryType.TASK:
        match modifier:
            case "done" | "completed":
                filter_.completed = True
            case "all":
                filter_.completed = None
            case _:
                filter_.completed = False


def _parse_negated(filter_: Filter, token: str, negated: str) -> None:
    if negated.startswith("#"):
        filter_.exclude_tags.append(negated[1:])
    elif negated.startswith("!"):
        excluded = parse_type_keyword(negated[1:])
        if excluded is None:
            filter_.invalid_tokens.append(token)
        else:
            filter_.exclude_types.append(excluded)
    elif negated:
        filter_.exclude_terms.append(negated)


def parse_filter_query(query: str, today: date | None = None) -> Filter:
    """Parse a filter query. Natural dates in bounds resolve against today."""
    today = today or date.today()
    filter_ = Filter()

    for token in query.split():
        if token.startswith("@before:"):
            filter_.before_date = _parse_date_bound(
                filter_, token, token[len("@before:"):], filter_.before_date, "before", today
            )
        elif token.startswith("@after:"):
            filter_.after_date = _parse_date_bound(
                filter_, token, token[len("@after:"):], filter_.after_date, "after", today
            )
        elif token == "@overdue":
            filter_.overdue = True
        elif token == "@recurring":
            filter_.recurring = True
        elif token.startswith("@") and ":" in token:
            filter_.invalid_tokens.append(token)
        elif token.startswith("not:"):
            _parse_negated(filter_, token, token[len("not:"):])
        elif token.startswith("!"):
            _parse_type_token(filter_, token)
        elif token.startswith("#"):
            filter_.tags.append(token[1:])
        else:
            filter_.search_terms.append(token)

    return filter_


def entry_matches_filter(entry: Entry, filter_: Filter) -> bool:
    """
    Check an entry against the per-entry parts of a filter.

    Day bounds, @overdue and @recurring are applied by the caller.
    """
    if filter_.entry_type is not None and entry.entry_type is not filter_.entry_type:
        return False
    if entry.entry_type in filter_.exclude_types:
        return False
    if filter_.completed is not None and entry.is_task and entry.completed != filter_.completed:
        return False

    entry_tags = {t.lower() for t in extract_tags(entry.content)}
    if any(tag.lower() not in entry_tags for tag in filter_.tags):
        return False
    if any(tag.lower() in entry_tags for tag in filter_.exclude_tags):
        return False

    content = entry.content.lower()
    if any(term.lower() not in content for term in filter_.search_terms):
        return False
    if any(term.lower() in content for term in filter_.exclude_terms):
        return False

    return True


def _in_bounds(source_date: date, filter_: Filter) -> bool:
    if filter_.before_date is not None and source_date > filter_.before_date:
        return False
    if filter_.after_date is not None and source_date < filter_.after_date:
        return False
    return True


def _is_overdue(entry: Entry, today: date) -> bool:
    target = extract_target_date_prefer_past(entry.content, today)
    return target is not None and target < today


def collect_filtered_entries(journal: str, filter_: Filter, today: date | None = None) -> list[FilterEntry]:
    """
    Every entry in the journal that passes the filter, ordered by day.

    An invalid filter returns nothing without looking at the journal.
    """
    if not filter_.is_valid:
        return []

    today = today or date.today()
    entries = []
    for day_line in iter_day_lines(journal):
        if not isinstance(day_line.line, Entry) or not _in_bounds(day_line.source_date, filter_):
            continue
        entry = day_line.line
        if filter_.overdue and not _is_overdue(entry, today):
            continue
        if filter_.recurring and extract_recurring_pattern(entry.content) is None:
            continue
        if entry_matches_filter(entry, filter_):
            entries.append(
                FilterEntry(
                    source_date=day_line.source_date,
                    line_index=day_line.line_index,
                    content=entry.content,
                    entry_type=entry.entry_type,
                    completed=entry.is_task and entry.completed,
                )
            )

    entries.sort(key=lambda e: e.source_date)
    return entries
