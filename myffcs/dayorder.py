"""
Day-order overrides.

Some academic calendars run a different weekday's timetable on a given date
(e.g. a Saturday that follows Monday's classes). Overrides are stored as:

    data/day_orders.json  ->  {"2026-03-14": "Monday", ...}

timetable_day() answers "which weekday's classes happen on this date".
"""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Dict, Mapping, Optional

from myffcs.model import normalize_weekday, weekday_of
from myffcs.storage import default_data_dir


logger = logging.getLogger(__name__)

WEEKEND = ("Saturday", "Sunday")


class DayOrderStore:
    """
    JSON-file mapping of ISO date -> weekday whose timetable runs that day.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else default_data_dir() / "day_orders.json"

    def all(self) -> Dict[str, str]:
        """
        All overrides. Missing or unreadable files count as no overrides.

        Weekday values are normalized ("mon" -> "Monday"); entries that do
        not name a weekday are logged and left out.
        """
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.error("Error reading day orders from %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            return {}

        mappings: Dict[str, str] = {}
        for key, value in data.items():
            try:
                mappings[str(key)] = normalize_weekday(value if isinstance(value, str) else "")
            except ValueError:
                logger.warning("Ignoring day order %s -> %r in %s: not a weekday", key, value, self.path)
        return mappings

    def get(self, date_iso: str) -> Optional[str]:
        return self.all().get(date_iso)

    def set(self, date_iso: str, day: str) -> str:
        """
        Store an override. Both arguments are validated; returns the weekday saved.
        """
        date.fromisoformat(date_iso)
        weekday = normalize_weekday(day)
        mappings = self.all()
        mappings[date_iso] = weekday
        self._write(mappings)
        return weekday

    def clear(self, date_iso: str) -> bool:
        mappings = self.all()
        if date_iso not in mappings:
            return False
        del mappings[date_iso]
        self._write(mappings)
        return True

    def _write(self, mappings: Mapping[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(dict(sorted(mappings.items())), indent=2), encoding="utf-8")


def timetable_day(
    on_date: date,
    overrides: Optional[Mapping[str, str]] = None,
    weekend_fallback: Optional[str] = "Monday",
) -> str:
    """
    Weekday whose timetable applies on on_date.

    A valid override for the date wins. Otherwise the real weekday is used, with
    Saturday and Sunday mapped to weekend_fallback (None keeps the weekend).
    """
    override = (overrides or {}).get(on_date.isoformat())
    if override:
        try:
            return normalize_weekday(override)
        except ValueError:
            logger.warning("Ignoring day order for %s: %r is not a weekday", on_date.isoformat(), override)

    today = weekday_of(on_date)
    if weekend_fallback and today in WEEKEND:
        return weekend_fallback
    return today
