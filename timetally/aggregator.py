from __future__ import annotations

from datetime import date, datetime, timedelta
from enum import Enum

from .errors import UnknownCategory
from .models import Session, Store
from .tracker import local_now


class TimeSpan(str, Enum):
    ALL = "all"
    YEAR = "year"
    MONTH = "month"
    WEEK = "week"
    YESTERDAY = "yesterday"
    TODAY = "today"


def in_time_span(start: datetime, span: TimeSpan, today: date) -> bool:
    """Return whether a session starting at ``start`` belongs to ``span``."""
    age = today - start.date()

    if span is TimeSpan.ALL:
        return True
    if span is TimeSpan.YEAR:
        return age <= timedelta(days=365)
    if span is TimeSpan.MONTH:
        return age <= timedelta(weeks=4)
    if span is TimeSpan.WEEK:
        return age <= timedelta(weeks=1)
    if span is TimeSpan.YESTERDAY:
        return age == timedelta(days=1)
    return age == timedelta(0)


def _check_category(store: Store, category: str | None) -> None:
    if category is not None and category not in store.categories:
        raise UnknownCategory(category)


def summary(
    store: Store,
    span: TimeSpan = TimeSpan.ALL,
    category: str | None = None,
    today: date | None = None,
) -> dict[str, timedelta]:
    """Total closed time per category.

    Every registered category is present, in the order it was added, with a zero
    total when it has no closed sessions in the span. The active session is
    never counted.
    """
    _check_category(store, category)
    current_day = today or local_now().date()

    names = [category] if category is not None else store.categories
    totals = {name: timedelta(0) for name in names}

    for session in store.sessions:
        if session.category not in totals:
            continue
        if not in_time_span(session.start, span, current_day):
            continue
        totals[session.category] += session.duration()

    return totals


def _newest_first(sessions: list[Session]) -> list[Session]:
    # sorted() is stable with reverse=True, so equal starts keep insertion order.
    return sorted(sessions, key=lambda item: item.start, reverse=True)


def log_for_day(store: Store, day: date, category: str | None = None) -> list[Session]:
    """Closed sessions that started on ``day``, most recent first."""
    _check_category(store, category)

    matching = [
        session
        for session in store.sessions
        if session.start.date() == day and (category is None or session.category == category)
    ]
    return _newest_first(matching)


def log_for_span(
    store: Store,
    span: TimeSpan = TimeSpan.ALL,
    category: str | None = None,
    today: date | None = None,
) -> list[Session]:
    _check_category(store, category)
    current_day = today or local_now().date()

    matching = [
        session
        for session in store.sessions
        if in_time_span(session.start, span, current_day)
        and (category is None or session.category == category)
    ]
    return _newest_first(matching)
