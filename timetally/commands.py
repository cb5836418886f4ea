from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

import click

from .aggregator import TimeSpan, log_for_day, log_for_span, summary
from .categories import add_category, list_categories
from .models import Store
from .reporter import (
    build_category_list_content,
    build_log_content,
    build_status_content,
    build_summary_content,
    format_duration,
)
from .storage import SaveFile
from .tracker import SessionTracker, format_timestamp, local_now, parse_timestamp


class TimestampType(click.ParamType):
    """A strict yyyy-mm-ddThh:mm:ss local timestamp."""

    name = "yyyy-mm-ddThh:mm:ss"

    def convert(self, value, param, ctx):
        if isinstance(value, datetime):
            return value
        try:
            return parse_timestamp(value)
        except ValueError:
            self.fail(f"{value!r} is not a timestamp of the form yyyy-mm-ddThh:mm:ss.", param, ctx)


TIMESTAMP = TimestampType()
DAY = click.DateTime(formats=["%Y-%m-%d"])
SPAN_CHOICE = click.Choice([span.value for span in TimeSpan], case_sensitive=False)


@dataclass(slots=True)
class AppState:
    """Per-invocation state: the loaded store and where it goes back to."""

    save_file: SaveFile
    store: Store
    dirty: bool = False

    @property
    def tracker(self) -> SessionTracker:
        return SessionTracker(self.store)


def register_commands(group: click.Group) -> None:
    """Register all subcommands on the CLI group. Called once at import."""

    @group.command("add-category")
    @click.argument("name")
    @click.pass_obj
    def add_category_command(state: AppState, name: str) -> None:
        """Add a new category to track time against."""
        add_category(state.store, name)
        state.dirty = True
        click.echo(f"Added category {name}.")

    @group.command("categories")
    @click.pass_obj
    def categories_command(state: AppState) -> None:
        """List all categories."""
        click.echo(build_category_list_content(list_categories(state.store)))

    @group.command("start")
    @click.argument("category")
    @click.option(
        "--start-time",
        "-s",
        type=TIMESTAMP,
        default=None,
        help="When tracking started (yyyy-mm-ddThh:mm:ss). Defaults to now.",
    )
    @click.pass_obj
    def start_command(state: AppState, category: str, start_time) -> None:
        """Start tracking time for CATEGORY."""
        session = state.tracker.start(category, start_time)
        state.dirty = True
        click.echo(f"Started tracking {session.category} at {format_timestamp(session.start)}.")

    @group.command("stop")
    @click.argument("description", required=False)
    @click.option(
        "--stop-time",
        "-t",
        type=TIMESTAMP,
        default=None,
        help="When tracking stopped (yyyy-mm-ddThh:mm:ss). Defaults to now.",
    )
    @click.pass_obj
    def stop_command(state: AppState, description: str | None, stop_time) -> None:
        """Stop tracking, optionally describing the time spent."""
        session = state.tracker.stop(description, stop_time)
        state.dirty = True
        click.echo(f"Stopped tracking {session.category} after {format_duration(session.duration())}.")

    @group.command("cancel")
    @click.pass_obj
    def cancel_command(state: AppState) -> None:
        """Discard the running session without recording it."""
        session = state.tracker.cancel()
        state.dirty = True
        click.echo(f"Cancelled tracking of {session.category}.")

    @group.command("add")
    @click.argument("category")
    @click.argument("start_time", metavar="START", type=TIMESTAMP)
    @click.argument("stop_time", metavar="STOP", type=TIMESTAMP)
    @click.argument("description", required=False)
    @click.pass_obj
    def add_command(state: AppState, category: str, start_time, stop_time, description: str | None) -> None:
        """Record time already spent on CATEGORY between START and STOP."""
        session = state.tracker.add_session(category, start_time, stop_time, description)
        state.dirty = True
        click.echo(f"Added {format_duration(session.duration())} to {session.category}.")

    @group.command("status")
    @click.pass_obj
    def status_command(state: AppState) -> None:
        """Show what is being tracked right now."""
        click.echo(build_status_content(state.tracker.status(), local_now()))

    @group.command("summary")
    @click.argument("span", type=SPAN_CHOICE, default=TimeSpan.ALL.value)
    @click.option("--category", "-c", default=None, help="Only show this category.")
    @click.pass_obj
    def summary_command(state: AppState, span: str, category: str | None) -> None:
        """Show total time per category."""
        totals = summary(state.store, TimeSpan(span.lower()), category)
        click.echo(build_summary_content(totals))

    @group.command("log")
    @click.argument("span", type=SPAN_CHOICE, default=TimeSpan.TODAY.value)
    @click.option("--day", type=DAY, default=None, help="Show a single day (yyyy-mm-dd) instead of SPAN.")
    @click.option("--category", "-c", default=None, help="Only show this category.")
    @click.pass_obj
    def log_command(state: AppState, span: str, day, category: str | None) -> None:
        """List recorded sessions, most recent first."""
        if day is not None:
            sessions = log_for_day(state.store, day.date(), category)
            heading = day.date().isoformat()
        else:
            selected = TimeSpan(span.lower())
            sessions = log_for_span(state.store, selected, category)
            heading = selected.value
        click.echo(build_log_content(sessions, heading))
