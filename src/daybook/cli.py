"""Daybook CLI - markdown bullet journal."""

import functools
import json
import logging
import sys
from datetime import date

import click

from .adapters.file_journal import create_project_journal
from .config import Config, load_merged_config
from .content_ops import EntryLocation
from .core.dates import parse_natural_date
from .core.entries import Entry, EntryType, RawLine, serialize_line
from .core.filters import FilterEntry
from .core.projection import ProjectedEntry
from .entry_ops import cycle_at, delete_at, edit_at, toggle_at
from .errors import DaybookError
from .session import DaySession
from .workflows import (
    add_entry,
    defer_entry,
    fetch_calendars,
    filter_location,
    get_store,
    open_session,
    prepare_content,
    resolve_location,
    run_filter,
    undate_entry,
    untag_entry,
)

ENTRY_TYPES = {"task": EntryType.TASK, "note": EntryType.NOTE, "event": EntryType.EVENT}


def handle_errors(f):
    """Report journal and file errors as 'Error: ...' and exit 1."""

    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except (DaybookError, OSError) as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)

    return wrapper


def _parse_date_option(value: str | None, today: date) -> date:
    """YYYY-MM-DD or a natural date (tomorrow, next-mon, -3d, ...)."""
    if not value:
        return today
    try:
        return date.fromisoformat(value)
    except ValueError:
        pass
    parsed = parse_natural_date(value, today)
    if parsed is None:
        raise DaybookError(f"Invalid date: {value}")
    return parsed


def _open(ctx: click.Context, target_date: str | None) -> tuple[Config, DaySession]:
    config = load_merged_config()
    store = get_store(config, project=ctx.obj["project"])
    return config, open_session(store, _parse_date_option(target_date, date.today()))


def _locate(session: DaySession, config: Config, ref: str, query: str | None) -> EntryLocation:
    """Resolve REF against the day, or against filter results when a query is given."""
    if query is None:
        return resolve_location(session, ref)
    _, problems = run_filter(session, query, config)
    if problems:
        raise DaybookError("; ".join(problems))
    return filter_location(session, ref)


def _entry_json(entry: Entry | ProjectedEntry | FilterEntry) -> dict:
    return {
        "type": entry.entry_type.value,
        "content": entry.content,
        "completed": entry.completed,
    }


def _render_line(entry: Entry | ProjectedEntry | FilterEntry) -> str:
    line = entry if isinstance(entry, Entry) else entry.to_entry()
    return serialize_line(line)


@click.group()
@click.version_option()
@click.option("--project", is_flag=True, help="Use the project journal")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx, project: bool, debug: bool):
    """Daybook - markdown bullet journal."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )
    ctx.ensure_object(dict)
    ctx.obj["project"] = project


# ============== Viewing ==============


@main.command()
@click.option("--date", "-d", "target_date", default=None,
              help="Date to view (YYYY-MM-DD or natural), defaults to today")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
@handle_errors
def day(ctx, target_date: str | None, as_json: bool):
    """Show a day's entries plus entries projected onto it."""
    config, session = _open(ctx, target_date)

    numbered = []
    number = 0
    for line in session.lines:
        if isinstance(line, Entry):
            number += 1
            numbered.append((number, line))
        else:
            numbered.append((None, line))

    if as_json:
        click.echo(
            json.dumps(
                {
                    "date": session.current_date.isoformat(),
                    "entries": [
                        {"number": n, **_entry_json(line)}
                        for n, line in numbered
                        if isinstance(line, Entry)
                    ],
                    "projected": [
                        {
                            "number": f"p{i}",
                            **_entry_json(p),
                            "kind": p.kind.value,
                            "source_date": p.source_date.isoformat(),
                        }
                        for i, p in enumerate(session.projected_entries, 1)
                    ],
                },
                indent=2,
            )
        )
        return

    click.echo(session.current_date.strftime(config.header_date_format))
    if not session.lines and not session.projected_entries:
        click.echo("No entries.")
        return

    for n, line in numbered:
        if isinstance(line, RawLine):
            click.echo(f"      {line.text}")
        elif not (config.hide_completed and line.is_task and line.completed):
            click.echo(f"  {n:>3}. {serialize_line(line)}")

    if session.projected_entries:
        click.echo()
        for i, projected in enumerate(session.projected_entries, 1):
            if config.hide_completed and projected.completed:
                continue
            click.echo(f"  {'p' + str(i):>3}. {_render_line(projected)} {projected.source_label()}")


@main.command("filter")
@click.argument("query", nargs=-1)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
@handle_errors
def filter_cmd(ctx, query: tuple[str, ...], as_json: bool):
    """Search the journal. Defaults to the configured default filter."""
    config, session = _open(ctx, None)
    entries, problems = run_filter(session, " ".join(query), config)

    if problems:
        for problem in problems:
            click.echo(f"Error: {problem}", err=True)
        sys.exit(1)

    if config.hide_completed:
        shown = [(i, e) for i, e in enumerate(entries, 1) if not e.completed]
    else:
        shown = list(enumerate(entries, 1))

    if as_json:
        click.echo(
            json.dumps(
                [
                    {"number": i, **_entry_json(e), "source_date": e.source_date.isoformat()}
                    for i, e in shown
                ],
                indent=2,
            )
        )
        return

    if not shown:
        click.echo("No matching entries.")
        return

    current_date = None
    for i, entry in shown:
        if entry.source_date != current_date:
            if current_date is not None:
                click.echo()
            click.echo(entry.source_date.strftime(config.header_date_format))
            current_date = entry.source_date
        click.echo(f"  {i:>3}. {_render_line(entry)}")


# ============== Writing ==============


@main.command()
@click.argument("text", nargs=-1, required=True)
@click.option("--type", "-t", "entry_type", type=click.Choice(list(ENTRY_TYPES)), default="task",
              help="Entry type")
@click.option("--date", "-d", "target_date", default=None,
              help="Day to add to (YYYY-MM-DD or natural), defaults to today")
@click.pass_context
@handle_errors
def add(ctx, text: tuple[str, ...], entry_type: str, target_date: str | None):
    """Add an entry to a day."""
    config = load_merged_config()
    store = get_store(config, project=ctx.obj["project"])
    today = date.today()
    target = _parse_date_option(target_date, today)
    entry = add_entry(store, target, " ".join(text), ENTRY_TYPES[entry_type], config, today)
    click.echo(f"Added to {target.isoformat()}: {serialize_line(entry)}")


def entry_command(name: str, help_text: str):
    """Register a command that acts on one entry addressed by REF."""

    def decorator(f):
        @main.command(name, help=help_text)
        @click.argument("ref")
        @click.option("--date", "-d", "target_date", default=None,
                      help="Day the entry is on, defaults to today")
        @click.option("--filter", "-f", "query", default=None,
                      help="Address REF within this filter's results instead")
        @click.pass_context
        @handle_errors
        def command(ctx, ref: str, target_date: str | None, query: str | None, **kwargs):
            config, session = _open(ctx, target_date)
            location = _locate(session, config, ref, query)
            f(session, location, **kwargs)

        return command

    return decorator


@entry_command("toggle", "Toggle a task done/open. REF is an entry number, or pN for projected.")
def toggle(session: DaySession, location: EntryLocation):
    toggle_at(session, location)
    click.echo("Toggled.")


@entry_command("cycle", "Cycle an entry through task, note and event.")
def cycle(session: DaySession, location: EntryLocation):
    new_type = cycle_at(session, location)
    if new_type is None:
        raise DaybookError("Nothing to cycle")
    click.echo(f"Type is now {new_type.value}.")


@entry_command("delete", "Delete an entry.")
def delete(session: DaySession, location: EntryLocation):
    if not delete_at(session, location):
        raise DaybookError("Nothing to delete")
    click.echo("Deleted.")


@entry_command("defer", "Move an entry's @date one day later.")
def defer(session: DaySession, location: EntryLocation):
    if not defer_entry(session, location):
        raise DaybookError("Entry has no @date")
    click.echo("Deferred.")


@entry_command("undate", "Remove an entry's @date.")
def undate(session: DaySession, location: EntryLocation):
    if not undate_entry(session, location):
        raise DaybookError("Entry has no @date")
    click.echo("Date removed.")


@click.option("--all", "all_tags", is_flag=True, help="Remove every trailing tag")
@entry_command("untag", "Remove the trailing tag from an entry.")
def untag(session: DaySession, location: EntryLocation, all_tags: bool = False):
    if not untag_entry(session, location, all_tags):
        raise DaybookError("Entry has no trailing tag")
    click.echo("Untagged.")


@main.command()
@click.argument("ref")
@click.argument("text", nargs=-1, required=True)
@click.option("--date", "-d", "target_date", default=None,
              help="Day the entry is on, defaults to today")
@click.option("--filter", "-f", "query", default=None,
              help="Address REF within this filter's results instead")
@click.pass_context
@handle_errors
def edit(ctx, ref: str, text: tuple[str, ...], target_date: str | None, query: str | None):
    """Replace an entry's text."""
    config, session = _open(ctx, target_date)
    location = _locate(session, config, ref, query)
    if not edit_at(session, location, prepare_content(" ".join(text), config, date.today())):
        raise DaybookError("Nothing to edit")
    click.echo("Updated.")


# ============== Project journal ==============


@main.group()
def project():
    """Manage the project journal."""
    pass


@project.command("init")
@handle_errors
def project_init():
    """Create a project journal at the git root."""
    path = create_project_journal()
    click.echo(f"Project journal: {path}")


# ============== Calendars ==============


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@handle_errors
def calendar(as_json: bool):
    """Fetch configured ICS calendars."""
    config = load_merged_config()
    if not config.calendars:
        click.echo("No calendars configured.")
        return

    results = fetch_calendars(config)
    if as_json:
        click.echo(json.dumps(results, indent=2))
        return

    for label in config.calendars:
        if label in results:
            events = results[label].count("BEGIN:VEVENT")
            click.echo(f"{label}: {events} events")
        else:
            click.echo(f"{label}: unavailable")
