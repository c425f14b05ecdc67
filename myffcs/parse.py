"""
Slot resolving (course input -> concrete weekly entries).

- Reads course rows (subject, code, type, slot expression, room, credit)
- Splits each slot expression like "A1+TA1" into single slot codes
- Looks every code up in the slot table
- Emits ONE ScheduleEntry per (course x matched weekly meeting)

Important rules (DO NOT CHANGE):
- Unknown codes are reported as error strings, never raised
- Remaining codes and courses are still resolved (partial results)
- Duplicate codes produce duplicate entries (no de-duplication)
- No sorting: order is input order, then code order, then meeting order
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, List

from myffcs.model import SOURCE_FFCS, CourseInput, ResolveResult, ScheduleEntry
from myffcs.slots import lookup


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def split_slot_expression(expression: str) -> List[str]:
    """
    Split "a1 + TA1" into ["A1", "TA1"].

    An empty expression yields one empty token, so it is reported as invalid.
    """
    return [token.strip() for token in (expression or "").upper().split("+")]


def invalid_slot_message(code: str, subject_name: str) -> str:
    return f'Invalid slot "{code}" for subject "{subject_name}"'


# ---------------------------------------------------------------------------
# Resolver (CORE LOGIC)
# ---------------------------------------------------------------------------


def parse_course_entries(inputs: Iterable[CourseInput]) -> ResolveResult:
    """
    Resolve course inputs into schedule entries.

    Returns a ResolveResult with all entries that could be resolved and one
    error message per unknown slot code. Callers decide whether to save a
    result that still carries errors.
    """
    result = ResolveResult()

    for course in inputs:
        for code in split_slot_expression(course.slot_expression):
            blocks = lookup(code)

            # Unknown code: report and keep going
            if blocks is None:
                result.errors.append(invalid_slot_message(code, course.subject_name))
                continue

            # One entry per weekly meeting of this slot
            for block in blocks:
                result.entries.append(
                    ScheduleEntry(
                        subject_name=course.subject_name,
                        subject_code=course.subject_code,
                        session_type=course.session_type,
                        slot_code=code,
                        slot_label=course.slot_expression,
                        room_number=course.room_number,
                        credit=course.credit,
                        day=block.day,
                        start_time=block.start_time,
                        end_time=block.end_time,
                        source=SOURCE_FFCS,
                    )
                )

    logger.debug("Resolved %d entries with %d errors", len(result.entries), len(result.errors))
    return result


# ---------------------------------------------------------------------------
# Input files
# ---------------------------------------------------------------------------


def course_inputs_from_rows(rows: Any) -> List[CourseInput]:
    """
    Convert a decoded JSON document (list of row dicts) into CourseInputs.

    Non-dict rows are skipped. A document that is not a list raises ValueError.
    """
    if not isinstance(rows, list):
        raise ValueError("Course file must contain a JSON list of course rows")
    return [CourseInput.from_dict(row) for row in rows if isinstance(row, dict)]


def load_course_inputs(path: str | Path) -> List[CourseInput]:
    """
    Read course rows from a JSON file, e.g.:

        [{"subject_name": "DS", "subject_code": "CSE101", "type": "theory",
          "slot": "B1", "room_number": "R1", "credit": 3}]
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return course_inputs_from_rows(data)
