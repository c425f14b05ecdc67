"""
Push delivery worker.

Runs once per minute, independent of any open client:

    for every user with a stored push subscription:
        load the user's classes for the current weekday
        send a Web Push reminder for every class that is due

Failure handling:
- 410/404 from the push service: the subscription is gone, it is cleared
  so later ticks skip the user
- any other delivery or fetch error is logged and only affects that user,
  including a malformed stored subscription
- nothing is retried; the next tick evaluates again from scratch

There is no de-duplication across ticks. Two ticks that both see a class
inside the window will both send a reminder.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

import requests
from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger
from pywebpush import WebPushException, webpush

from myffcs.model import ScheduleEntry, UserSubscription, weekday_of
from myffcs.reminders import FIVE_MINUTE_WINDOW, ReminderPolicy, build_notification, evaluate, minutes_until


logger = logging.getLogger(__name__)

GONE_STATUS_CODES = (404, 410)


class DeliveryError(Exception):
    """
    A push message could not be delivered.

    status_code is the push service's HTTP status, or None when the request
    never got an answer (network error, malformed subscription).
    """

    def __init__(self, status_code: Optional[int], message: str) -> None:
        super().__init__(message)
        self.status_code = status_code

    @property
    def gone(self) -> bool:
        return self.status_code in GONE_STATUS_CODES


def build_payload(entry: ScheduleEntry, minutes_left: float, url: str = "/") -> str:
    """
    JSON text {"title", "body", "url"} sent through the push service.
    """
    title, body = build_notification(entry, minutes_left)
    return json.dumps({"title": title, "body": body, "url": url})


class WebPushSender:
    """
    Sends Web Push messages signed with the server's VAPID key.
    """

    def __init__(self, vapid_private_key: str, vapid_subject: str, timeout: float = 10) -> None:
        if not vapid_private_key:
            raise ValueError("VAPID_PRIVATE_KEY is required to send push messages")
        self.vapid_private_key = vapid_private_key
        self.vapid_subject = vapid_subject
        self.timeout = timeout

    def send(self, subscription: Dict[str, Any], payload: str) -> None:
        if not isinstance(subscription, dict) or not subscription.get("endpoint"):
            raise DeliveryError(None, "Malformed push subscription")
        try:
            webpush(
                subscription_info=subscription,
                data=payload,
                vapid_private_key=self.vapid_private_key,
                # webpush adds "aud"/"exp" to the claims dict, so pass a fresh one
                vapid_claims={"sub": self.vapid_subject},
                timeout=self.timeout,
            )
        except WebPushException as exc:
            status = exc.response.status_code if exc.response is not None else None
            raise DeliveryError(status, str(exc)) from exc
        except (requests.RequestException, ValueError, TypeError) as exc:
            raise DeliveryError(None, str(exc)) from exc


@dataclass
class TickReport:
    sent: int = 0
    failed: int = 0
    cleared: List[str] = field(default_factory=list)


class PushWorker:
    """
    One tick = one pass over all subscribed users.
    """

    def __init__(
        self,
        store,
        sender,
        policy: ReminderPolicy = FIVE_MINUTE_WINDOW,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.store = store
        self.sender = sender
        self.policy = policy
        self.clock = clock

    def tick(self, now: Optional[datetime] = None) -> TickReport:
        now = now or self.clock()
        report = TickReport()
        logger.info("Checking for upcoming classes...")

        try:
            users = self.store.get_users_with_subscription()
        except requests.RequestException as exc:
            logger.error("Could not load push subscriptions: %s", exc)
            return report

        day = weekday_of(now.date())
        for user in users:
            try:
                self._process_user(user, day, now, report)
            except Exception:
                # errors stay with the user that caused them
                logger.exception("Unexpected error while processing user %s", user.user_id)
                report.failed += 1

        logger.info("Tick done: sent=%d failed=%d cleared=%d", report.sent, report.failed, len(report.cleared))
        return report

    def _process_user(self, user: UserSubscription, day: str, now: datetime, report: TickReport) -> None:
        try:
            entries = self.store.list_entries(user.user_id, day)
        except requests.RequestException as exc:
            logger.error("Could not load classes of user %s: %s", user.user_id, exc)
            report.failed += 1
            return

        outcome = evaluate(now, entries, set(), self.policy)
        for entry in outcome.to_notify:
            logger.info("Sending notification to user %s for class %s", user.user_id, entry.subject_name)
            payload = build_payload(entry, minutes_until(now, entry.start_time))
            try:
                self.sender.send(user.subscription, payload)
            except DeliveryError as exc:
                logger.error("Error sending notification to user %s: %s", user.user_id, exc)
                report.failed += 1
                if exc.gone:
                    self._clear(user, report)
                    return
            else:
                report.sent += 1

    def _clear(self, user: UserSubscription, report: TickReport) -> None:
        logger.info("Subscription of user %s expired, removing it", user.user_id)
        try:
            self.store.clear_subscription(user.user_id)
        except requests.RequestException as exc:
            logger.error("Could not clear subscription of user %s: %s", user.user_id, exc)
            return
        report.cleared.append(user.user_id)


def run_worker(worker: PushWorker) -> None:
    """
    Run worker.tick at the start of every minute until interrupted.
    """
    scheduler = BlockingScheduler(job_defaults={"max_instances": 1, "coalesce": True})
    scheduler.add_job(worker.tick, CronTrigger.from_crontab("* * * * *"), id="push_reminders")
    logger.info("Notification service started")
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Notification service stopped")
