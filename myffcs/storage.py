"""
Local persistent storage for timetable entries.

This module manages the file:

    data/timetable.json

It is the offline schedule source: the CLI saves resolved slots here when no
hosted database is configured, and the reminder loop reads today's classes
from it. The file layout is:

    {"entries": [{"id": "...", "day": "Monday", "start_time": "08:00", ...}]}

Every stored row carries its own "source" ("manual" or "ffcs"), so updates and
deletes never have to guess where an entry belongs.
"""

from __future__ import annotations

import json
import logging
import uuid
from pathlib import Path
from typing import Iterable, List

from myffcs.model import ScheduleEntry


logger = logging.getLogger(__name__)


def default_data_dir() -> Path:
    """
    Return the default data directory inside the package.

    Using a function instead of a constant makes testing easier,
    because tests can pass their own directory.
    """
    return Path(__file__).resolve().parent / "data"


class LocalScheduleStore:
    """
    JSON-file backed schedule source.

    A missing or corrupted file reads as an empty timetable.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else default_data_dir() / "timetable.json"

    # -- reading ------------------------------------------------------------

    def _load_rows(self) -> List[dict]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.error("Could not read %s: %s", self.path, exc)
            return []
        rows = data.get("entries", []) if isinstance(data, dict) else []
        return [r for r in rows if isinstance(r, dict)] if isinstance(rows, list) else []

    def all_entries(self) -> List[ScheduleEntry]:
        return [ScheduleEntry.from_dict(row) for row in self._load_rows()]

    def list_entries(self, user_id: str, day: str) -> List[ScheduleEntry]:
        """
        Entries for one weekday. The local file belongs to a single user,
        so user_id is accepted for interface parity and otherwise ignored.
        """
        return [e for e in self.all_entries() if e.day == day]

    # -- writing ------------------------------------------------------------

    def _save(self, entries: Iterable[ScheduleEntry]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"entries": [e.to_dict() for e in entries]}
        self.path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")

    def add_entries(self, user_id: str, entries: Iterable[ScheduleEntry]) -> List[ScheduleEntry]:
        """
        Append entries, assigning a fresh id to each. Returns the saved entries.
        """
        current = self.all_entries()
        saved: List[ScheduleEntry] = []
        for entry in entries:
            entry.id = entry.id or uuid.uuid4().hex
            saved.append(entry)
        self._save(current + saved)
        logger.info("Saved %d entries to %s", len(saved), self.path)
        return saved

    def update_entry(self, entry: ScheduleEntry) -> bool:
        """
        Replace the stored entry with the same id and source.
        Returns False if no such entry exists.
        """
        current = self.all_entries()
        for i, stored in enumerate(current):
            if stored.id == entry.id and stored.source == entry.source:
                current[i] = entry
                self._save(current)
                return True
        return False

    def delete_entry(self, entry: ScheduleEntry) -> bool:
        current = self.all_entries()
        kept = [e for e in current if not (e.id == entry.id and e.source == entry.source)]
        if len(kept) == len(current):
            return False
        self._save(kept)
        return True
