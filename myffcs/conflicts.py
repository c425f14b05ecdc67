"""
Clash detection.

Given resolved weekly entries, detect overlaps on the same weekday.
Overlap rule:
    start < other_end AND end > other_start
"""

from __future__ import annotations

from typing import List, Tuple

from myffcs.model import ScheduleEntry


def time_to_minutes(hhmm: str) -> int:
    """
    Convert 'HH:MM' to minutes since midnight.
    Raises ValueError for invalid formats.
    """
    parts = (hhmm or "").strip().split(":")
    if len(parts) != 2:
        raise ValueError(f"Invalid time format: {hhmm!r}")
    h = int(parts[0])
    m = int(parts[1])
    if not (0 <= h <= 23 and 0 <= m <= 59):
        raise ValueError(f"Invalid time value: {hhmm!r}")
    return h * 60 + m


def _overlaps(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    return a_start < b_end and a_end > b_start


def find_clashes(entries: List[ScheduleEntry]) -> List[Tuple[ScheduleEntry, ScheduleEntry]]:
    """
    Find overlapping entry pairs (A,B), each pair appears once (i<j).
    Overlap only if same weekday AND time intervals overlap.
    """
    clashes: List[Tuple[ScheduleEntry, ScheduleEntry]] = []

    parsed: List[Tuple[str, int, int, ScheduleEntry]] = []
    for entry in entries:
        try:
            start = time_to_minutes(entry.start_time)
            end = time_to_minutes(entry.end_time)
        except ValueError:
            continue
        if not entry.day or end <= start:
            continue
        parsed.append((entry.day, start, end, entry))

    # O(n^2) is fine for one student's week
    for i in range(len(parsed)):
        d1, s1, e1, a = parsed[i]
        for j in range(i + 1, len(parsed)):
            d2, s2, e2, b = parsed[j]
            if d1 != d2:
                continue
            if _overlaps(s1, e1, s2, e2):
                clashes.append((a, b))

    return clashes
