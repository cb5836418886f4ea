from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta


@dataclass(frozen=True, slots=True)
class Session:
    category: str
    start: datetime
    end: datetime | None = None
    description: str | None = None

    @property
    def is_active(self) -> bool:
        return self.end is None

    def duration(self) -> timedelta:
        if self.end is None:
            raise ValueError("An active session has no fixed duration")
        return self.end - self.start


@dataclass(slots=True)
class Store:
    """Everything persisted in one save file."""

    categories: list[str] = field(default_factory=list)
    # Closed sessions only, in the order they were recorded.
    sessions: list[Session] = field(default_factory=list)
    active: Session | None = None
