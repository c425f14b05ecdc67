"""
FFCS slot table.

Maps every slot code of the university timetable grid to the weekly
meetings it stands for. The table is static data copied from the official
grid, NOT derived by formula: lab periods have uneven breaks (e.g. 08:51-09:40)
and some tutorial slots meet twice a week.

Rules:
- keys are upper-case slot codes
- every value is a non-empty tuple of SlotTimeBlock, in meeting order
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from myffcs.model import SlotTimeBlock


# ---------------------------------------------------------------------------
# Slot table
# ---------------------------------------------------------------------------

SLOT_TABLE: Dict[str, Tuple[SlotTimeBlock, ...]] = {
    # Theory slots, morning (1) and evening (2) pairs
    "A1": (SlotTimeBlock("Monday", "08:00", "08:50"), SlotTimeBlock("Wednesday", "09:00", "09:50")),
    "A2": (SlotTimeBlock("Monday", "14:00", "14:50"), SlotTimeBlock("Wednesday", "15:00", "15:50")),
    "B1": (SlotTimeBlock("Tuesday", "09:00", "09:50"), SlotTimeBlock("Thursday", "10:00", "10:50")),
    "B2": (SlotTimeBlock("Tuesday", "14:00", "14:50"), SlotTimeBlock("Thursday", "15:00", "15:50")),
    "C1": (SlotTimeBlock("Wednesday", "08:00", "08:50"), SlotTimeBlock("Friday", "09:00", "09:50")),
    "C2": (SlotTimeBlock("Wednesday", "14:00", "14:50"), SlotTimeBlock("Friday", "15:00", "15:50")),
    "D1": (SlotTimeBlock("Thursday", "08:00", "08:50"), SlotTimeBlock("Monday", "10:00", "10:50")),
    "D2": (SlotTimeBlock("Thursday", "14:00", "14:50"), SlotTimeBlock("Monday", "16:00", "16:50")),
    "E1": (SlotTimeBlock("Friday", "08:00", "08:50"), SlotTimeBlock("Tuesday", "10:00", "10:50")),
    "E2": (SlotTimeBlock("Friday", "14:00", "14:50"), SlotTimeBlock("Tuesday", "16:00", "16:50")),
    "F1": (SlotTimeBlock("Monday", "09:00", "09:50"), SlotTimeBlock("Wednesday", "10:00", "10:50")),
    "F2": (SlotTimeBlock("Monday", "15:00", "15:50"), SlotTimeBlock("Wednesday", "16:00", "16:50")),
    "G1": (SlotTimeBlock("Tuesday", "09:00", "09:50"), SlotTimeBlock("Thursday", "10:00", "10:50")),
    "G2": (SlotTimeBlock("Tuesday", "15:00", "15:50"), SlotTimeBlock("Thursday", "16:00", "16:50")),
    # Tutorial / extra theory slots
    "TA1": (SlotTimeBlock("Friday", "10:00", "10:50"),),
    "TA2": (SlotTimeBlock("Friday", "16:00", "16:50"),),
    "TB1": (SlotTimeBlock("Monday", "11:00", "11:50"),),
    "TB2": (SlotTimeBlock("Monday", "17:00", "17:50"),),
    "TC1": (SlotTimeBlock("Tuesday", "11:00", "11:50"),),
    "TC2": (SlotTimeBlock("Tuesday", "17:00", "17:50"),),
    "TD1": (SlotTimeBlock("Friday", "12:00", "12:50"),),
    "TD2": (SlotTimeBlock("Wednesday", "17:00", "17:50"),),
    "TE1": (SlotTimeBlock("Thursday", "11:00", "11:50"),),
    "TE2": (SlotTimeBlock("Thursday", "17:00", "17:50"), SlotTimeBlock("Friday", "17:00", "17:50")),
    "TF1": (SlotTimeBlock("Friday", "11:00", "11:50"),),
    # Friday 17:00 is also the second TE2 meeting
    "TF2": (SlotTimeBlock("Friday", "17:00", "17:50"),),
    "TG1": (SlotTimeBlock("Monday", "12:00", "12:50"),),
    "TG2": (SlotTimeBlock("Monday", "18:00", "18:50"),),
    "TAA1": (SlotTimeBlock("Tuesday", "12:00", "12:50"),),
    "TAA2": (SlotTimeBlock("Tuesday", "18:00", "18:50"),),
    "V1": (SlotTimeBlock("Wednesday", "11:00", "11:50"),),
    "V2": (SlotTimeBlock("Wednesday", "12:00", "12:50"),),
    "TBB2": (SlotTimeBlock("Wednesday", "18:00", "18:50"),),
    "TCC1": (SlotTimeBlock("Thursday", "12:00", "12:50"),),
    "TCC2": (SlotTimeBlock("Thursday", "18:00", "18:50"),),
    "TDD2": (SlotTimeBlock("Friday", "18:00", "18:50"),),
    # Morning labs
    "L1": (SlotTimeBlock("Monday", "08:00", "08:50"),),
    "L2": (SlotTimeBlock("Monday", "08:51", "09:40"),),
    "L3": (SlotTimeBlock("Monday", "09:51", "10:40"),),
    "L4": (SlotTimeBlock("Monday", "10:41", "11:30"),),
    "L5": (SlotTimeBlock("Monday", "11:40", "12:30"),),
    "L6": (SlotTimeBlock("Monday", "12:31", "13:20"),),
    "L7": (SlotTimeBlock("Tuesday", "08:00", "08:50"),),
    "L8": (SlotTimeBlock("Tuesday", "08:51", "09:40"),),
    "L9": (SlotTimeBlock("Tuesday", "09:51", "10:40"),),
    "L10": (SlotTimeBlock("Tuesday", "10:41", "11:30"),),
    "L11": (SlotTimeBlock("Tuesday", "11:40", "12:30"),),
    "L12": (SlotTimeBlock("Tuesday", "12:31", "13:20"),),
    "L13": (SlotTimeBlock("Wednesday", "08:00", "08:50"),),
    "L14": (SlotTimeBlock("Wednesday", "08:51", "09:40"),),
    "L15": (SlotTimeBlock("Wednesday", "09:51", "10:40"),),
    "L16": (SlotTimeBlock("Wednesday", "10:41", "11:30"),),
    "L17": (SlotTimeBlock("Wednesday", "11:40", "12:30"),),
    "L18": (SlotTimeBlock("Wednesday", "12:31", "13:20"),),
    "L19": (SlotTimeBlock("Thursday", "08:00", "08:50"),),
    "L20": (SlotTimeBlock("Thursday", "08:51", "09:40"),),
    "L21": (SlotTimeBlock("Thursday", "09:51", "10:40"),),
    "L22": (SlotTimeBlock("Thursday", "10:41", "11:30"),),
    "L23": (SlotTimeBlock("Thursday", "11:40", "12:30"),),
    "L24": (SlotTimeBlock("Thursday", "12:31", "13:20"),),
    "L25": (SlotTimeBlock("Friday", "08:00", "08:50"),),
    "L26": (SlotTimeBlock("Friday", "08:51", "09:40"),),
    "L27": (SlotTimeBlock("Friday", "09:51", "10:40"),),
    "L28": (SlotTimeBlock("Friday", "10:41", "11:30"),),
    "L29": (SlotTimeBlock("Friday", "11:40", "12:30"),),
    "L30": (SlotTimeBlock("Friday", "12:31", "13:20"),),
    # Afternoon labs
    "L31": (SlotTimeBlock("Monday", "14:00", "14:50"),),
    "L32": (SlotTimeBlock("Monday", "14:51", "15:40"),),
    "L33": (SlotTimeBlock("Monday", "15:51", "16:40"),),
    "L34": (SlotTimeBlock("Monday", "16:41", "17:30"),),
    "L35": (SlotTimeBlock("Monday", "17:40", "18:30"),),
    "L36": (SlotTimeBlock("Monday", "18:31", "19:20"),),
    "L37": (SlotTimeBlock("Tuesday", "14:00", "14:50"),),
    "L38": (SlotTimeBlock("Tuesday", "14:51", "15:40"),),
    "L39": (SlotTimeBlock("Tuesday", "15:51", "16:40"),),
    "L40": (SlotTimeBlock("Tuesday", "16:41", "17:30"),),
    "L41": (SlotTimeBlock("Tuesday", "17:40", "18:30"),),
    "L42": (SlotTimeBlock("Tuesday", "18:31", "19:20"),),
    "L43": (SlotTimeBlock("Wednesday", "14:00", "14:50"),),
    "L44": (SlotTimeBlock("Wednesday", "14:51", "15:40"),),
    "L45": (SlotTimeBlock("Wednesday", "15:51", "16:40"),),
    "L46": (SlotTimeBlock("Wednesday", "16:41", "17:30"),),
    "L47": (SlotTimeBlock("Wednesday", "17:40", "18:30"),),
    "L48": (SlotTimeBlock("Wednesday", "18:31", "19:20"),),
    "L49": (SlotTimeBlock("Thursday", "14:00", "14:50"),),
    "L50": (SlotTimeBlock("Thursday", "14:51", "15:40"),),
    "L51": (SlotTimeBlock("Thursday", "15:51", "16:40"),),
    "L52": (SlotTimeBlock("Thursday", "16:41", "17:30"),),
    "L53": (SlotTimeBlock("Thursday", "17:40", "18:30"),),
    "L54": (SlotTimeBlock("Thursday", "18:31", "19:20"),),
    "L55": (SlotTimeBlock("Friday", "14:00", "14:50"),),
    "L56": (SlotTimeBlock("Friday", "14:51", "15:40"),),
    "L57": (SlotTimeBlock("Friday", "15:51", "16:40"),),
    "L58": (SlotTimeBlock("Friday", "16:41", "17:30"),),
    "L59": (SlotTimeBlock("Friday", "17:40", "18:30"),),
    "L60": (SlotTimeBlock("Friday", "18:31", "19:20"),),
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def normalize_code(code: str) -> str:
    return (code or "").strip().upper()


def lookup(code: str) -> Optional[Tuple[SlotTimeBlock, ...]]:
    """
    Return the meetings of a slot code, or None if the code is unknown.

    Lookup is case-insensitive and ignores surrounding whitespace.
    None (instead of an empty tuple) lets callers tell "unknown code" apart.
    """
    return SLOT_TABLE.get(normalize_code(code))


def all_codes() -> List[str]:
    """
    All known slot codes in table order.
    """
    return list(SLOT_TABLE)
