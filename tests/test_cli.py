"""
Tests for CLI entry points.

Every test runs against a temporary data directory and an empty .env file,
with the environment cleared, so the hosted database is never used and the
real timetable.json is never touched.
"""

import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from myffcs.cli import main


COURSES = [
    {"subject_name": "Data Structures", "subject_code": "CSE2001", "type": "theory", "slot": "A1+TA1", "room_number": "SJT-301", "credit": 4},
    {"subject_name": "DS Lab", "subject_code": "CSE2001P", "type": "lab", "slot": "L1+L2", "room_number": "SJT-516", "credit": 1},
]


class TestCLI(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmp.name)
        self.env_file = self.dir / ".env"
        self.env_file.write_text("", encoding="utf-8")
        self.env = mock.patch.dict(os.environ, {}, clear=True)
        self.env.start()

    def tearDown(self) -> None:
        self.env.stop()
        self.tmp.cleanup()

    def run_cli(self, *args: str) -> int:
        argv = ["--env-file", str(self.env_file), "--data-dir", str(self.dir), "--log-level", "WARNING", *args]
        with self.assertRaises(SystemExit) as ctx:
            main(argv)
        return ctx.exception.code

    def write_courses(self, rows) -> str:
        path = self.dir / "courses.json"
        path.write_text(json.dumps(rows), encoding="utf-8")
        return str(path)

    def test_slots(self) -> None:
        self.assertEqual(self.run_cli("slots"), 0)
        self.assertEqual(self.run_cli("slots", "l23"), 0)
        self.assertEqual(self.run_cli("slots", "Z9"), 1)

    def test_parse_and_save(self) -> None:
        courses = self.write_courses(COURSES)
        self.assertEqual(self.run_cli("parse", courses), 0)
        self.assertFalse((self.dir / "timetable.json").exists())

        self.assertEqual(self.run_cli("parse", courses, "--save"), 0)
        saved = json.loads((self.dir / "timetable.json").read_text(encoding="utf-8"))
        # A1 (2) + TA1 (1) + L1 (1) + L2 (1)
        self.assertEqual(len(saved["entries"]), 5)

        # 2026-03-09 is a Monday
        self.assertEqual(self.run_cli("today", "--date", "2026-03-09"), 0)
        self.assertEqual(self.run_cli("clashes"), 0)

    def test_parse_with_unknown_slot_refuses_to_save(self) -> None:
        rows = COURSES + [{"subject_name": "Ghost", "subject_code": "X1", "type": "theory", "slot": "Z9"}]
        courses = self.write_courses(rows)

        self.assertEqual(self.run_cli("parse", courses), 1)
        self.assertEqual(self.run_cli("parse", courses, "--save"), 1)
        self.assertFalse((self.dir / "timetable.json").exists())

    def test_parse_missing_file(self) -> None:
        self.assertEqual(self.run_cli("parse", str(self.dir / "nope.json")), 1)

    def test_day_order_commands(self) -> None:
        self.assertEqual(self.run_cli("day-order", "set", "2026-03-14", "mon"), 0)
        orders = json.loads((self.dir / "day_orders.json").read_text(encoding="utf-8"))
        self.assertEqual(orders, {"2026-03-14": "Monday"})

        self.assertEqual(self.run_cli("day-order", "list"), 0)
        self.assertEqual(self.run_cli("day-order", "set", "2026-03-15", "Funday"), 1)
        self.assertEqual(self.run_cli("day-order", "set", "14-03-2026", "Monday"), 1)

        self.assertEqual(self.run_cli("day-order", "clear", "2026-03-14"), 0)
        orders = json.loads((self.dir / "day_orders.json").read_text(encoding="utf-8"))
        self.assertEqual(orders, {})

    def test_today_with_bad_date(self) -> None:
        self.assertEqual(self.run_cli("today", "--date", "someday"), 1)

    def test_push_worker_needs_database(self) -> None:
        self.assertEqual(self.run_cli("push-worker", "--once"), 1)

    def test_bad_preset_in_environment(self) -> None:
        os.environ["MYFFCS_REMINDER_PRESET"] = "hourly"
        self.assertEqual(self.run_cli("slots"), 1)


if __name__ == "__main__":
    unittest.main()
