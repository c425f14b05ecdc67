"""
Class reminders.

Decides which of today's classes are due for a reminder and drives the
client-side polling loop.

Due rule (minutes d from now until the class starts, on now's date):
    tolerance == 0:  0 < d <= lookahead
    tolerance  > 0:  lookahead - tolerance < d < lookahead + tolerance

Each class fires at most once per calendar day: fired classes are remembered
as (date, entry identity) keys in a set owned by the caller.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, time
from typing import Callable, Iterable, List, NamedTuple, Optional, Set, Tuple

import requests
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from rich.console import Console
from rich.panel import Panel

from myffcs.conflicts import time_to_minutes
from myffcs.dayorder import DayOrderStore, timetable_day
from myffcs.model import ScheduleEntry


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Policy
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ReminderPolicy:
    """
    How far ahead a reminder fires, plus an optional band for polling slack.
    """

    lookahead_minutes: float
    tolerance_minutes: float = 0

    def __post_init__(self) -> None:
        if self.lookahead_minutes <= 0:
            raise ValueError("lookahead_minutes must be positive")
        if self.tolerance_minutes < 0:
            raise ValueError("tolerance_minutes must not be negative")

    def is_due(self, minutes_until: float) -> bool:
        if minutes_until <= 0:
            return False
        if self.tolerance_minutes:
            lower = self.lookahead_minutes - self.tolerance_minutes
            upper = self.lookahead_minutes + self.tolerance_minutes
            return lower < minutes_until < upper
        return minutes_until <= self.lookahead_minutes


# Notification provider and push worker: "starts in 5 minutes", checked each minute
FIVE_MINUTE_WINDOW = ReminderPolicy(lookahead_minutes=5, tolerance_minutes=0.5)
# Early reminder hook: anything starting within the next 10 minutes
TEN_MINUTE_WINDOW = ReminderPolicy(lookahead_minutes=10)

PRESETS = {"5min": FIVE_MINUTE_WINDOW, "10min": TEN_MINUTE_WINDOW}
DEFAULT_POLICY = FIVE_MINUTE_WINDOW


def policy_from_preset(name: str) -> ReminderPolicy:
    try:
        return PRESETS[name.strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown reminder preset {name!r} (choose from {', '.join(PRESETS)})") from None


# ---------------------------------------------------------------------------
# Evaluation (CORE LOGIC)
# ---------------------------------------------------------------------------


class DedupeKey(NamedTuple):
    date: str
    entry_id: str

    @property
    def tag(self) -> str:
        return f"{self.date}-{self.entry_id}"


@dataclass
class ReminderOutcome:
    to_notify: List[ScheduleEntry] = field(default_factory=list)
    notified: Set[DedupeKey] = field(default_factory=set)


def dedupe_key(now: datetime, entry: ScheduleEntry) -> DedupeKey:
    return DedupeKey(now.date().isoformat(), entry.identity)


def minutes_until(now: datetime, start_time: str) -> float:
    """
    Minutes from now until start_time ("HH:MM") on now's date.
    Raises ValueError if start_time is malformed.
    """
    hours, minutes = divmod(time_to_minutes(start_time), 60)
    start = datetime.combine(now.date(), time(hours, minutes), tzinfo=now.tzinfo)
    return (start - now).total_seconds() / 60


def evaluate(
    now: datetime,
    todays_entries: Iterable[ScheduleEntry],
    already_notified: Set[DedupeKey],
    policy: ReminderPolicy = DEFAULT_POLICY,
) -> ReminderOutcome:
    """
    Pick the entries that are due for a reminder right now.

    already_notified is not modified; the returned outcome carries a new set
    with the keys of the entries selected by this call added. Calling again
    with the same arguments gives the same result.
    """
    notified = set(already_notified)
    to_notify: List[ScheduleEntry] = []

    for entry in todays_entries:
        try:
            diff = minutes_until(now, entry.start_time)
        except ValueError:
            logger.debug("Skipping %s: bad start time %r", entry.identity, entry.start_time)
            continue

        if not policy.is_due(diff):
            continue

        key = dedupe_key(now, entry)
        if key in notified:
            continue

        notified.add(key)
        to_notify.append(entry)

    return ReminderOutcome(to_notify=to_notify, notified=notified)


def build_notification(entry: ScheduleEntry, minutes_left: float) -> Tuple[str, str]:
    """
    Title and body text of a class reminder.
    """
    room = entry.room_number or "Unknown Room"
    n = max(1, round(minutes_left))
    title = f"Upcoming Class: {entry.subject_name}"
    body = f"Your {entry.session_type} class starts in {n} minutes at {room}"
    return title, body


# ---------------------------------------------------------------------------
# Local notifications
# ---------------------------------------------------------------------------


class ConsoleNotifier:
    """
    Shows reminders in the terminal. Never raises.
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def notify(self, title: str, body: str, tag: str = "") -> bool:
        self.console.print(Panel(body, title=title, subtitle=tag or None))
        return True


# ---------------------------------------------------------------------------
# Client polling loop
# ---------------------------------------------------------------------------


class ReminderSession:
    """
    Polls a schedule source on a fixed interval and fires local reminders.

    The session owns its notified-key set. Ticks never overlap: a tick that
    starts while the previous one is still fetching is skipped.
    """

    def __init__(
        self,
        source,
        notifier,
        user_id: str = "local",
        policy: ReminderPolicy = DEFAULT_POLICY,
        day_orders: Optional[DayOrderStore] = None,
        weekend_fallback: Optional[str] = "Monday",
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.source = source
        self.notifier = notifier
        self.user_id = user_id
        self.policy = policy
        self.day_orders = day_orders
        self.weekend_fallback = weekend_fallback
        self.clock = clock
        self.notified: Set[DedupeKey] = set()
        self._lock = threading.Lock()
        self._closed = False
        self._scheduler: Optional[BackgroundScheduler] = None

    @property
    def closed(self) -> bool:
        return self._closed

    def tick(self, now: Optional[datetime] = None) -> List[ScheduleEntry]:
        """
        Run one check. Returns the entries a reminder was sent for.

        A notifier error only affects its own entry: the remaining reminders
        still go out, and the failed one is tried again on the next tick.
        """
        if self._closed:
            return []
        if not self._lock.acquire(blocking=False):
            logger.debug("Previous reminder check still running, skipping this tick")
            return []

        try:
            now = now or self.clock()
            overrides = self.day_orders.all() if self.day_orders is not None else {}
            day = timetable_day(now.date(), overrides, self.weekend_fallback)

            try:
                entries = self.source.list_entries(self.user_id, day)
            except (requests.RequestException, OSError) as exc:
                # next tick fetches again
                logger.warning("Could not fetch classes for %s: %s", day, exc)
                return []

            # session ended while fetching
            if self._closed:
                return []

            today = now.date().isoformat()
            self.notified = {k for k in self.notified if k.date == today}

            outcome = evaluate(now, entries, self.notified, self.policy)

            # a key is only recorded once its notification went out
            dispatched: List[ScheduleEntry] = []
            for entry in outcome.to_notify:
                key = dedupe_key(now, entry)
                title, body = build_notification(entry, minutes_until(now, entry.start_time))
                try:
                    shown = self.notifier.notify(title, body, key.tag)
                except Exception:
                    logger.exception("Notification for %s failed, retrying next tick", entry.identity)
                    continue
                if not shown:
                    logger.warning("Notification for %s was not shown", entry.identity)
                self.notified.add(key)
                dispatched.append(entry)

            return dispatched
        finally:
            self._lock.release()

    def start(self, interval_seconds: int = 60) -> None:
        """
        Check immediately, then every interval_seconds in a background thread.
        """
        self._scheduler = BackgroundScheduler(job_defaults={"max_instances": 1, "coalesce": True})
        self._scheduler.add_job(
            self.tick,
            trigger=IntervalTrigger(seconds=interval_seconds),
            id="class_reminders",
            next_run_time=datetime.now(),
        )
        self._scheduler.start()
        logger.info("Class reminders started (every %ss)", interval_seconds)

    def close(self) -> None:
        self._closed = True
        if self._scheduler is not None:
            self._scheduler.shutdown(wait=False)
            self._scheduler = None
        logger.info("Class reminders stopped")
