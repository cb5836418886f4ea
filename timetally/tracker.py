from __future__ import annotations

import logging
from datetime import datetime

from .categories import category_exists
from .errors import AlreadyTracking, InvalidInterval, NotTracking, UnknownCategory
from .models import Session, Store

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"


def local_now() -> datetime:
    # Everything is stored at second resolution.
    return datetime.now().replace(microsecond=0)


def parse_timestamp(value: str) -> datetime:
    """Parse a ``yyyy-mm-ddThh:mm:ss`` local timestamp."""
    parsed = datetime.strptime(value, TIMESTAMP_FORMAT)
    # strptime also accepts unpadded fields such as "2024-3-4T9:0:0".
    if format_timestamp(parsed) != value:
        raise ValueError(f"Timestamp must look like yyyy-mm-ddThh:mm:ss: {value!r}")
    return parsed


def format_timestamp(value: datetime) -> str:
    return value.replace(tzinfo=None).isoformat(timespec="seconds")


def _normalize_description(description: str | None) -> str | None:
    if description is None or not description.strip():
        return None
    return description


class SessionTracker:
    """Starts and stops sessions on a store, keeping at most one of them open."""

    def __init__(self, store: Store, logger: logging.Logger | None = None) -> None:
        self.store = store
        self.logger = logger or logging.getLogger(__name__)

    def start(self, category: str, start_time: datetime | None = None) -> Session:
        if not category_exists(self.store, category):
            raise UnknownCategory(category)

        active = self.store.active
        if active is not None:
            raise AlreadyTracking(active.category)

        started = (start_time or local_now()).replace(microsecond=0)
        session = Session(category=category, start=started)
        self.store.active = session
        self.logger.info("Session started: category=%s start=%s", category, format_timestamp(started))
        return session

    def stop(self, description: str | None = None, end_time: datetime | None = None) -> Session:
        active = self.store.active
        if active is None:
            raise NotTracking()

        ended = (end_time or local_now()).replace(microsecond=0)
        if ended < active.start:
            raise InvalidInterval(
                f"Stop time {format_timestamp(ended)} is before the start time {format_timestamp(active.start)}."
            )

        closed = Session(
            category=active.category,
            start=active.start,
            end=ended,
            description=_normalize_description(description),
        )
        self.store.sessions.append(closed)
        self.store.active = None
        self.logger.info(
            "Session stopped: category=%s tracked=%ss",
            closed.category,
            int(closed.duration().total_seconds()),
        )
        return closed

    def status(self) -> Session | None:
        return self.store.active

    def cancel(self) -> Session:
        active = self.store.active
        if active is None:
            raise NotTracking()

        self.store.active = None
        self.logger.info("Session cancelled: category=%s", active.category)
        return active

    def add_session(
        self,
        category: str,
        start_time: datetime,
        end_time: datetime,
        description: str | None = None,
    ) -> Session:
        """Record an already finished span of time."""
        if not category_exists(self.store, category):
            raise UnknownCategory(category)

        started = start_time.replace(microsecond=0)
        ended = end_time.replace(microsecond=0)
        if ended < started:
            raise InvalidInterval(
                f"Stop time {format_timestamp(ended)} is before the start time {format_timestamp(started)}."
            )

        session = Session(
            category=category,
            start=started,
            end=ended,
            description=_normalize_description(description),
        )
        self.store.sessions.append(session)
        self.logger.info("Session added: category=%s start=%s", category, format_timestamp(started))
        return session
