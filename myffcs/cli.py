"""
CLI (Command Line Interface).

Terminal commands for students and for the server, e.g.:

    myffcs slots [CODE]
    myffcs parse courses.json [--save]
    myffcs today [--date 2026-03-14]
    myffcs clashes
    myffcs day-order set 2026-03-14 Monday
    myffcs remind
    myffcs push-worker [--once]

Where the classes live:
- SUPABASE_URL + SUPABASE_SERVICE_ROLE_KEY set -> hosted tables
- otherwise -> the local JSON timetable in the data directory
"""

from __future__ import annotations

import argparse
import time
from datetime import date, datetime
from pathlib import Path
from typing import List

import requests
from rich import box
from rich.console import Console
from rich.table import Table

from myffcs.config import Settings, load_settings
from myffcs.conflicts import find_clashes, time_to_minutes
from myffcs.dayorder import DayOrderStore, timetable_day
from myffcs.logging_config import setup_logging
from myffcs.model import WEEKDAYS, ScheduleEntry
from myffcs.parse import load_course_inputs, parse_course_entries
from myffcs.push import PushWorker, WebPushSender, run_worker
from myffcs.reminders import ConsoleNotifier, ReminderSession, policy_from_preset
from myffcs.remote import SupabaseStore
from myffcs.slots import SLOT_TABLE, lookup
from myffcs.storage import LocalScheduleStore


console = Console()


def _schedule_store(settings: Settings):
    """
    Return the schedule source the commands should use.
    """
    if settings.has_remote:
        return SupabaseStore(settings.supabase_url, settings.supabase_key)
    return LocalScheduleStore(settings.data_dir / "timetable.json")


def _day_orders(settings: Settings) -> DayOrderStore:
    return DayOrderStore(settings.data_dir / "day_orders.json")


def _entries_table(entries: List[ScheduleEntry], title: str) -> Table:
    table = Table(title=title, box=box.SIMPLE)
    for col in ("Day", "Time", "Code", "Subject", "Type", "Slot", "Room"):
        table.add_column(col)
    for e in entries:
        table.add_row(
            e.day,
            f"{e.start_time}-{e.end_time}",
            e.subject_code,
            e.subject_name,
            e.session_type,
            e.slot_code,
            e.room_number,
        )
    return table


def _start_key(entry: ScheduleEntry) -> int:
    try:
        return time_to_minutes(entry.start_time)
    except ValueError:
        return 24 * 60


def _week_entries(store, user_id: str) -> List[ScheduleEntry]:
    out: List[ScheduleEntry] = []
    for day in WEEKDAYS:
        out.extend(sorted(store.list_entries(user_id, day), key=_start_key))
    return out


def _print_clashes(clashes) -> None:
    for a, b in clashes:
        console.print(
            f"- {a.day} {a.start_time}-{a.end_time} {a.subject_code} ({a.slot_code})"
            f"  <->  {b.start_time}-{b.end_time} {b.subject_code} ({b.slot_code})"
        )


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _cmd_slots(args: argparse.Namespace) -> int:
    """
    Show one slot code, or the whole slot table.
    """
    if args.code:
        blocks = lookup(args.code)
        if blocks is None:
            print(f"Unknown slot code: {args.code.strip().upper()}")
            return 1
        codes = [args.code.strip().upper()]
    else:
        codes = list(SLOT_TABLE)

    table = Table(title="FFCS slots", box=box.SIMPLE)
    table.add_column("Slot")
    table.add_column("Meetings")
    for code in codes:
        meetings = ", ".join(f"{b.day[:3]} {b.start_time}-{b.end_time}" for b in SLOT_TABLE[code])
        table.add_row(code, meetings)
    console.print(table)
    return 0


def _cmd_parse(args: argparse.Namespace, settings: Settings) -> int:
    """
    Resolve a course file into weekly entries, optionally saving them.
    """
    inputs = load_course_inputs(args.courses)
    result = parse_course_entries(inputs)

    console.print(_entries_table(result.entries, f"Resolved {len(result.entries)} classes"))

    clashes = find_clashes(result.entries)
    if clashes:
        console.print(f"Warning: {len(clashes)} clashing pair(s):")
        _print_clashes(clashes)

    if result.errors:
        console.print(f"Errors: {len(result.errors)}")
        for msg in result.errors:
            console.print(f"- {msg}")

    if not args.save:
        return 0 if result.ok else 1

    if not result.ok:
        print("Fix the errors above before saving.")
        return 1

    saved = _schedule_store(settings).add_entries(settings.user_id, result.entries)
    print(f"Saved {len(saved)} classes.")
    return 0


def _cmd_today(args: argparse.Namespace, settings: Settings) -> int:
    """
    List the classes that run on a date (default: today), in start order.
    """
    on_date = date.fromisoformat(args.date) if args.date else date.today()
    day = timetable_day(on_date, _day_orders(settings).all(), settings.weekend_fallback)

    entries = sorted(_schedule_store(settings).list_entries(settings.user_id, day), key=_start_key)
    if not entries:
        print(f"No classes on {on_date.isoformat()} ({day} timetable).")
        return 0

    console.print(_entries_table(entries, f"{on_date.isoformat()} ({day} timetable)"))
    return 0


def _cmd_clashes(args: argparse.Namespace, settings: Settings) -> int:
    entries = _week_entries(_schedule_store(settings), settings.user_id)
    clashes = find_clashes(entries)
    if not clashes:
        print("No clashes found.")
        return 0

    print(f"Clashes found: {len(clashes)}")
    _print_clashes(clashes)
    return 0


def _cmd_day_order(args: argparse.Namespace, settings: Settings) -> int:
    store = _day_orders(settings)

    if args.action == "set":
        weekday = store.set(args.date, args.day)
        print(f"{args.date} follows the {weekday} timetable.")
        return 0

    if args.action == "clear":
        if store.clear(args.date):
            print(f"Removed day order for {args.date}.")
        else:
            print(f"No day order set for {args.date}.")
        return 0

    mappings = store.all()
    if not mappings:
        print("No day orders set.")
        return 0
    for d, weekday in mappings.items():
        print(f"{d} -> {weekday}")
    return 0


def _cmd_remind(args: argparse.Namespace, settings: Settings) -> int:
    """
    Run the local reminder loop until Ctrl+C.
    """
    policy = policy_from_preset(args.preset) if args.preset else settings.reminder_policy
    session = ReminderSession(
        source=_schedule_store(settings),
        notifier=ConsoleNotifier(console),
        user_id=settings.user_id,
        policy=policy,
        day_orders=_day_orders(settings),
        weekend_fallback=settings.weekend_fallback,
    )

    print(f"Watching classes ({policy.lookahead_minutes:g} min ahead). Press Ctrl+C to stop.")
    session.start()
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        pass
    finally:
        session.close()
    return 0


def _cmd_push_worker(args: argparse.Namespace, settings: Settings) -> int:
    """
    Send Web Push reminders to every subscribed user, once or every minute.
    """
    if not settings.has_remote:
        raise ValueError("The push worker needs SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY")

    worker = PushWorker(
        store=SupabaseStore(settings.supabase_url, settings.supabase_key),
        sender=WebPushSender(settings.vapid_private_key, settings.vapid_subject),
    )

    if args.once:
        report = worker.tick(datetime.now())
        print(f"Sent {report.sent}, failed {report.failed}, cleared {len(report.cleared)} subscriptions.")
        return 0

    run_worker(worker)
    return 0


# ---------------------------------------------------------------------------
# Parser / entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="myffcs", description="FFCS timetable and class reminders")
    parser.add_argument("--env-file", type=Path, default=None, help="Read settings from this .env file")
    parser.add_argument("--data-dir", type=Path, default=None, help="Directory for local JSON data")
    parser.add_argument("--log-level", type=str, default=None, help="DEBUG, INFO, WARNING, ...")
    sub = parser.add_subparsers(dest="command", required=True)

    p_slots = sub.add_parser("slots", help="Show the slot table or one slot")
    p_slots.add_argument("code", nargs="?", default=None, help="Slot code (e.g. A1, L23)")

    p_parse = sub.add_parser("parse", help="Resolve a JSON course file into classes")
    p_parse.add_argument("courses", type=Path, help="JSON list of course rows")
    p_parse.add_argument("--save", action="store_true", help="Save the classes if there are no errors")

    p_today = sub.add_parser("today", help="Show the classes of a date")
    p_today.add_argument("--date", type=str, default=None, help="ISO date (default: today)")

    sub.add_parser("clashes", help="Show overlapping classes in the saved timetable")

    p_order = sub.add_parser("day-order", help="Run another weekday's timetable on a date")
    order_sub = p_order.add_subparsers(dest="action", required=True)
    p_set = order_sub.add_parser("set", help="Set the weekday for a date")
    p_set.add_argument("date", type=str, help="ISO date, e.g. 2026-03-14")
    p_set.add_argument("day", type=str, help="Weekday name, e.g. Monday")
    p_clear = order_sub.add_parser("clear", help="Remove the override of a date")
    p_clear.add_argument("date", type=str, help="ISO date")
    order_sub.add_parser("list", help="List all overrides")

    p_remind = sub.add_parser("remind", help="Show class reminders in this terminal")
    p_remind.add_argument("--preset", type=str, default=None, help="5min or 10min")

    p_push = sub.add_parser("push-worker", help="Send push reminders to all subscribed users")
    p_push.add_argument("--once", action="store_true", help="Run a single tick and exit")

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.env_file)
    except ValueError as exc:
        print(f"Configuration error: {exc}")
        raise SystemExit(1)

    if args.data_dir is not None:
        settings.data_dir = args.data_dir
    if args.log_level:
        settings.log_level = args.log_level.upper()
    setup_logging(settings.log_level)

    try:
        if args.command == "slots":
            raise SystemExit(_cmd_slots(args))
        if args.command == "parse":
            raise SystemExit(_cmd_parse(args, settings))
        if args.command == "today":
            raise SystemExit(_cmd_today(args, settings))
        if args.command == "clashes":
            raise SystemExit(_cmd_clashes(args, settings))
        if args.command == "day-order":
            raise SystemExit(_cmd_day_order(args, settings))
        if args.command == "remind":
            raise SystemExit(_cmd_remind(args, settings))
        if args.command == "push-worker":
            raise SystemExit(_cmd_push_worker(args, settings))
    except requests.RequestException as exc:
        print(f"Could not reach the database: {exc}")
        raise SystemExit(1)
    except (ValueError, OSError) as exc:
        print(f"Error: {exc}")
        raise SystemExit(1)

    raise SystemExit(2)
