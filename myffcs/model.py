"""
Central data model definitions used across the project.

This module defines the canonical structure of the objects that travel between
the slot resolver, the schedule stores and the reminder code, so that:
- all modules share the same field names
- rows read from the hosted tables and rows written by the resolver look alike
- the code stays readable and beginner-friendly
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional


WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

SESSION_TYPES = ("theory", "lab")

# Where an entry came from: added by hand, or produced by the slot resolver
SOURCE_MANUAL = "manual"
SOURCE_FFCS = "ffcs"


def normalize_weekday(name: str) -> str:
    """
    Return the canonical weekday name ('monday', 'MON' -> 'Monday').

    Raises ValueError for anything that is not a weekday.
    """
    raw = (name or "").strip().lower()
    for day in WEEKDAYS:
        if raw and (raw == day.lower() or raw == day[:3].lower()):
            return day
    raise ValueError(f"Invalid weekday: {name!r}")


def weekday_of(d: date) -> str:
    return WEEKDAYS[d.weekday()]


@dataclass(frozen=True)
class SlotTimeBlock:
    """
    One weekly meeting of a slot: weekday plus start and end time ("HH:MM").
    """

    day: str
    start_time: str
    end_time: str


@dataclass
class CourseInput:
    """
    Represents one registered course as typed in by the student.

    slot_expression is the raw slot text, e.g. "A1+TA1" or "L23+L24".
    """

    subject_name: str
    subject_code: str
    session_type: str
    slot_expression: str
    room_number: str = ""
    credit: float = 0

    @classmethod
    def from_dict(cls, row: Dict[str, Any]) -> "CourseInput":
        """
        Build a CourseInput from a JSON row.

        Accepts the column names used by the hosted tables ('type', 'slot')
        as well as the attribute names of this class.
        """
        session_type = row.get("session_type", row.get("type")) or "theory"
        slot = row.get("slot_expression", row.get("slot"))
        credit = row.get("credit") or 0
        return cls(
            subject_name=str(row.get("subject_name") or ""),
            subject_code=str(row.get("subject_code") or ""),
            session_type=str(session_type).strip().lower(),
            slot_expression="" if slot is None else str(slot),
            room_number=str(row.get("room_number") or ""),
            credit=credit,
        )


@dataclass
class ScheduleEntry:
    """
    Represents one concrete weekly class meeting.

    Produced by the slot resolver (source="ffcs") or entered by hand
    (source="manual"). id is assigned by whichever store saves the entry.
    """

    subject_name: str
    subject_code: str
    session_type: str
    slot_code: str
    slot_label: str
    room_number: str
    credit: float
    day: str
    start_time: str
    end_time: str
    id: Optional[str] = None
    source: str = SOURCE_FFCS

    @property
    def identity(self) -> str:
        """
        Stable identity used for reminder de-duplication.
        """
        if self.id:
            return str(self.id)
        return f"{self.source}:{self.subject_code}:{self.slot_code}:{self.day}:{self.start_time}"

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize using the row column names of the hosted tables.
        """
        data = asdict(self)
        data["type"] = data.pop("session_type")
        return data

    @classmethod
    def from_dict(cls, row: Dict[str, Any], source: Optional[str] = None) -> "ScheduleEntry":
        entry_id = row.get("id")
        return cls(
            subject_name=str(row.get("subject_name") or ""),
            subject_code=str(row.get("subject_code") or ""),
            session_type=str(row.get("type", row.get("session_type")) or "theory"),
            slot_code=str(row.get("slot_code") or ""),
            slot_label=str(row.get("slot_label") or ""),
            room_number=str(row.get("room_number") or ""),
            credit=row.get("credit") or 0,
            day=str(row.get("day") or ""),
            start_time=_hhmm(row.get("start_time")),
            end_time=_hhmm(row.get("end_time")),
            id=None if entry_id is None else str(entry_id),
            source=source or str(row.get("source") or SOURCE_MANUAL),
        )


def _hhmm(value: Any) -> str:
    # time columns come back as "HH:MM:SS"
    text = str(value or "").strip()
    if len(text) == 8 and text.count(":") == 2:
        return text[:5]
    return text


@dataclass
class ResolveResult:
    """
    Output of the slot resolver: resolved entries plus collected error messages.
    """

    entries: List[ScheduleEntry] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass
class UserSubscription:
    """
    A user id together with the browser PushSubscription JSON stored for it.
    """

    user_id: str
    subscription: Dict[str, Any]
