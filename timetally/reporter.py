from __future__ import annotations

from datetime import datetime, timedelta

from .models import Session

CLOCK_FORMAT = "%H:%M"
DATE_FORMAT = "%Y-%m-%d"


def format_seconds(total_seconds: int) -> str:
    """Render a duration as HH:MM:SS for consistent report output."""
    safe_seconds = max(0, int(total_seconds))
    hours, remainder = divmod(safe_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02}:{minutes:02}:{seconds:02}"


def format_duration(value: timedelta) -> str:
    return format_seconds(int(value.total_seconds()))


def build_status_content(session: Session | None, now: datetime) -> str:
    if session is None:
        return "Not tracking anything."

    started = session.start.strftime(f"{DATE_FORMAT} {CLOCK_FORMAT}")
    # A future start time shows as 00:00:00 until it has passed.
    elapsed = format_duration(now - session.start)
    return f"Tracking {session.category} since {started} ({elapsed})"


def build_summary_content(totals: dict[str, timedelta]) -> str:
    if not totals:
        return "No categories yet."
    return "\n".join(f"{name}: {format_duration(total)}" for name, total in totals.items())


def build_log_content(sessions: list[Session], heading: str) -> str:
    if not sessions:
        return f"No tracked time for {heading}."

    # Show dates only when the listing is not confined to a single day.
    days = {session.start.date() for session in sessions} | {session.end.date() for session in sessions}
    multi_day = len(days) > 1
    time_format = f"{DATE_FORMAT} {CLOCK_FORMAT}" if multi_day else CLOCK_FORMAT

    lines = [f"Log for {heading}:"]
    for session in sessions:
        lines.append(
            f"{session.start.strftime(time_format)} - {session.end.strftime(time_format)}"
            f"  {session.category}  ({format_duration(session.duration())})"
        )
        if session.description:
            lines.append(f"    {session.description}")
    return "\n".join(lines)


def build_category_list_content(names: list[str]) -> str:
    if not names:
        return "No categories yet. Add one with `timetally add-category NAME`."
    return "\n".join(names)
