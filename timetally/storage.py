from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from .errors import CorruptData, SaveFileError
from .models import Session, Store
from .tracker import format_timestamp, parse_timestamp

FORMAT_VERSION = 1
_MISSING = object()

logger = logging.getLogger(__name__)


def dumps(store: Store) -> bytes:
    """Serialize a store. Equal stores always produce identical bytes."""
    payload = {
        "version": FORMAT_VERSION,
        "categories": list(store.categories),
        "sessions": [_session_to_dict(session) for session in store.sessions],
        "active": _active_to_dict(store.active),
    }
    text = json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False)
    return (text + "\n").encode("utf-8")


def loads(data: bytes) -> Store:
    """Rebuild a store from ``dumps`` output, raising ``CorruptData`` on anything else."""
    try:
        payload = json.loads(data.decode("utf-8"))
    except UnicodeDecodeError as exc:
        raise CorruptData(f"Save data is not valid UTF-8: {exc}") from exc
    except (ValueError, RecursionError) as exc:
        raise CorruptData(f"Save data is not valid JSON: {exc}") from exc

    if not isinstance(payload, dict):
        raise CorruptData("Save data must be a JSON object.")

    version = _field(payload, "version", int)
    if version != FORMAT_VERSION:
        raise CorruptData(f"Unsupported save format version: {version}")

    categories = _field(payload, "categories", list)
    for name in categories:
        if not isinstance(name, str) or not name.strip():
            raise CorruptData(f"Invalid category name: {name!r}")
    if len(set(categories)) != len(categories):
        raise CorruptData("Duplicate category names in save data.")

    sessions = [
        _session_from_dict(item, categories)
        for item in _field(payload, "sessions", list)
    ]

    active_raw = payload.get("active", _MISSING)
    if active_raw is _MISSING:
        raise CorruptData("Missing field: active")
    active = None if active_raw is None else _active_from_dict(active_raw, categories)

    return Store(categories=list(categories), sessions=sessions, active=active)


def _field(container: dict[str, Any], key: str, expected: type) -> Any:
    if key not in container:
        raise CorruptData(f"Missing field: {key}")
    value = container[key]
    # bool is an int subclass; never accept it where a number is expected.
    if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
        raise CorruptData(f"Field {key} must be of type {expected.__name__}")
    return value


def _timestamp(container: dict[str, Any], key: str) -> datetime:
    raw = _field(container, key, str)
    try:
        return parse_timestamp(raw)
    except ValueError as exc:
        raise CorruptData(f"Invalid timestamp in {key}: {raw!r}") from exc


def _known_category(container: dict[str, Any], categories: list[str]) -> str:
    category = _field(container, "category", str)
    if category not in categories:
        raise CorruptData(f"Session refers to unknown category: {category}")
    return category


def _session_to_dict(session: Session) -> dict[str, Any]:
    if session.end is None:
        raise ValueError("Only closed sessions belong to the session history")
    return {
        "category": session.category,
        "start": format_timestamp(session.start),
        "end": format_timestamp(session.end),
        "description": session.description,
    }


def _session_from_dict(item: Any, categories: list[str]) -> Session:
    if not isinstance(item, dict):
        raise CorruptData("Each session must be a JSON object.")

    category = _known_category(item, categories)
    start = _timestamp(item, "start")
    end = _timestamp(item, "end")
    if end < start:
        raise CorruptData(f"Session in {category} ends before it starts.")

    if "description" not in item:
        raise CorruptData("Missing field: description")
    description = item["description"]
    if description is not None and not isinstance(description, str):
        raise CorruptData("Field description must be a string or null")

    return Session(category=category, start=start, end=end, description=description)


def _active_to_dict(session: Session | None) -> dict[str, Any] | None:
    if session is None:
        return None
    return {
        "category": session.category,
        "start": format_timestamp(session.start),
    }


def _active_from_dict(item: Any, categories: list[str]) -> Session:
    if not isinstance(item, dict):
        raise CorruptData("Field active must be a JSON object or null.")
    return Session(category=_known_category(item, categories), start=_timestamp(item, "start"))


class SaveFile:
    """Reads and writes a store at a fixed path on disk."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> Store:
        if not self.path.exists():
            # First run: the file is created on the next save.
            logger.info("Save file %s doesn't exist yet; starting empty", self.path)
            return Store()

        logger.debug("Loading save file %s", self.path)
        try:
            data = self.path.read_bytes()
        except OSError as exc:
            raise SaveFileError(f"Could not read save file '{self.path}': {exc.strerror or exc}") from exc
        return loads(data)

    def save(self, store: Store) -> None:
        data = dumps(store)
        temp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_bytes(data)
            temp_path.replace(self.path)
        except OSError as exc:
            raise SaveFileError(f"Could not write save file '{self.path}': {exc.strerror or exc}") from exc
        logger.debug("Saved %d sessions to %s", len(store.sessions), self.path)
