"""Functional core - pure journal logic with no I/O."""

from .entries import Entry, EntryType, Line, RawLine, parse_line, parse_lines, serialize_line, serialize_lines
from .days import day_header, extract_day_content, iter_day_lines, parse_day_header, update_day_content
from .dates import (
    defer_date,
    extract_target_date,
    extract_target_date_prefer_past,
    normalize_natural_dates,
    parse_date_prefer_past,
    parse_later_date,
    parse_natural_date,
    remove_date,
)
from .recurring import RecurringPattern, extract_recurring_pattern, strip_recurring_marker
from .projection import (
    ProjectedEntry,
    ProjectedKind,
    collect_later_entries,
    collect_projected_entries,
    collect_recurring_entries,
)
from .tags import expand_favorite_tags, extract_tags, remove_all_trailing_tags, remove_last_trailing_tag
from .filters import (
    Filter,
    FilterEntry,
    collect_filtered_entries,
    entry_matches_filter,
    expand_saved_filters,
    parse_filter_query,
)

__all__ = [
    # Entries
    "Entry",
    "EntryType",
    "Line",
    "RawLine",
    "parse_line",
    "parse_lines",
    "serialize_line",
    "serialize_lines",
    # Days
    "day_header",
    "parse_day_header",
    "extract_day_content",
    "update_day_content",
    "iter_day_lines",
    # Dates
    "parse_later_date",
    "parse_date_prefer_past",
    "parse_natural_date",
    "normalize_natural_dates",
    "extract_target_date",
    "extract_target_date_prefer_past",
    "defer_date",
    "remove_date",
    # Recurring
    "RecurringPattern",
    "extract_recurring_pattern",
    "strip_recurring_marker",
    # Projection
    "ProjectedEntry",
    "ProjectedKind",
    "collect_later_entries",
    "collect_recurring_entries",
    "collect_projected_entries",
    # Tags
    "extract_tags",
    "expand_favorite_tags",
    "remove_last_trailing_tag",
    "remove_all_trailing_tags",
    # Filters
    "Filter",
    "FilterEntry",
    "parse_filter_query",
    "entry_matches_filter",
    "collect_filtered_entries",
    "expand_saved_filters",
]
