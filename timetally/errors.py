from __future__ import annotations


class TimeTallyError(Exception):
    """Base class for errors whose message is meant for the user."""

    exit_code = 1


class DuplicateCategory(TimeTallyError):
    exit_code = 3

    def __init__(self, name: str) -> None:
        super().__init__(f"Category {name} already exists.")
        self.name = name


class UnknownCategory(TimeTallyError):
    exit_code = 4

    def __init__(self, name: str) -> None:
        super().__init__(f"Category {name} doesn't exist.")
        self.name = name


class AlreadyTracking(TimeTallyError):
    exit_code = 5

    def __init__(self, category: str) -> None:
        super().__init__(f"Already tracking time for {category}. Stop or cancel it first.")
        self.category = category


class NotTracking(TimeTallyError):
    exit_code = 6

    def __init__(self) -> None:
        super().__init__("Not tracking anything right now.")


class CorruptData(TimeTallyError):
    exit_code = 7


class InvalidInterval(TimeTallyError):
    exit_code = 8


class InvalidCategory(TimeTallyError):
    exit_code = 9


class SaveFileError(TimeTallyError):
    exit_code = 10
