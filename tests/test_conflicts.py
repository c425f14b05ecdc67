"""
Unit tests for clash detection.

Definition used here:
- A clash exists if two entries overlap in time on the same weekday.
- Touching endpoints (end == start) is NOT a clash.
"""

import unittest

from myffcs.conflicts import find_clashes, time_to_minutes
from myffcs.model import CourseInput, ScheduleEntry
from myffcs.parse import parse_course_entries


def entry(day: str, start: str, end: str, code: str = "X") -> ScheduleEntry:
    return ScheduleEntry(
        subject_name=code,
        subject_code=code,
        session_type="theory",
        slot_code=code,
        slot_label=code,
        room_number="",
        credit=0,
        day=day,
        start_time=start,
        end_time=end,
    )


class TestTimeToMinutes(unittest.TestCase):
    def test_valid(self) -> None:
        self.assertEqual(time_to_minutes("08:51"), 531)

    def test_invalid(self) -> None:
        for bad in ("", "8", "25:00", "10:60", "ab:cd", "10:00:00"):
            with self.assertRaises(ValueError, msg=bad):
                time_to_minutes(bad)


class TestClashes(unittest.TestCase):
    def test_overlap_same_day(self) -> None:
        clashes = find_clashes([entry("Monday", "10:00", "11:00", "A"), entry("Monday", "10:30", "12:00", "B")])
        self.assertEqual(len(clashes), 1)

    def test_no_overlap_touching_end(self) -> None:
        clashes = find_clashes([entry("Monday", "10:00", "11:00"), entry("Monday", "11:00", "12:00")])
        self.assertEqual(len(clashes), 0)

    def test_different_day_no_clash(self) -> None:
        clashes = find_clashes([entry("Monday", "10:00", "11:00"), entry("Tuesday", "10:30", "12:00")])
        self.assertEqual(len(clashes), 0)

    def test_malformed_times_are_ignored(self) -> None:
        clashes = find_clashes([entry("Monday", "bad", "11:00"), entry("Monday", "10:30", "12:00")])
        self.assertEqual(clashes, [])

    def test_resolved_slots_that_share_a_period(self) -> None:
        # A1 and L1 both start Monday 08:00
        result = parse_course_entries(
            [
                CourseInput("Maths", "MAT1", "theory", "A1"),
                CourseInput("Lab", "CSE1", "lab", "L1"),
            ]
        )
        clashes = find_clashes(result.entries)
        self.assertEqual([(a.slot_code, b.slot_code) for a, b in clashes], [("A1", "L1")])


if __name__ == "__main__":
    unittest.main()
