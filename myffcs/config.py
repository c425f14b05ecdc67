"""
Settings loaded from the environment (and an optional .env file).

Variables:
    SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY   hosted database (optional for local use)
    VAPID_PUBLIC_KEY, VAPID_PRIVATE_KEY       Web Push keys (push worker only)
    VAPID_SUBJECT                             contact URI sent to push services
    MYFFCS_DATA_DIR                           local JSON files (timetable, day orders)
    MYFFCS_LOG_LEVEL                          DEBUG, INFO, WARNING, ...
    MYFFCS_REMINDER_PRESET                    "5min" or "10min"
    MYFFCS_WEEKEND_FALLBACK                   weekday used on Sat/Sun, empty = none
    MYFFCS_USER_ID                            user whose classes the reminder loop reads
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from myffcs.model import normalize_weekday
from myffcs.reminders import ReminderPolicy, policy_from_preset
from myffcs.storage import default_data_dir


@dataclass
class Settings:
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    vapid_public_key: Optional[str] = None
    vapid_private_key: Optional[str] = None
    vapid_subject: str = "mailto:example@test.com"
    data_dir: Path = default_data_dir()
    log_level: str = "INFO"
    reminder_preset: str = "5min"
    weekend_fallback: Optional[str] = "Monday"
    user_id: str = "local"

    @property
    def has_remote(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

    @property
    def reminder_policy(self) -> ReminderPolicy:
        return policy_from_preset(self.reminder_preset)


def load_settings(env_file: str | Path | None = None) -> Settings:
    """
    Read settings from the environment after loading env_file (or ./.env).

    Raises ValueError for an unknown reminder preset or weekday name.
    """
    load_dotenv(dotenv_path=env_file)

    fallback = os.getenv("MYFFCS_WEEKEND_FALLBACK", "Monday").strip()
    data_dir = os.getenv("MYFFCS_DATA_DIR")

    settings = Settings(
        supabase_url=os.getenv("SUPABASE_URL") or None,
        supabase_key=os.getenv("SUPABASE_SERVICE_ROLE_KEY") or None,
        vapid_public_key=os.getenv("VAPID_PUBLIC_KEY") or None,
        vapid_private_key=os.getenv("VAPID_PRIVATE_KEY") or None,
        vapid_subject=os.getenv("VAPID_SUBJECT") or "mailto:example@test.com",
        data_dir=Path(data_dir) if data_dir else default_data_dir(),
        log_level=os.getenv("MYFFCS_LOG_LEVEL", "INFO").upper(),
        reminder_preset=os.getenv("MYFFCS_REMINDER_PRESET", "5min"),
        weekend_fallback=normalize_weekday(fallback) if fallback else None,
        user_id=os.getenv("MYFFCS_USER_ID") or "local",
    )

    # fail early on a bad preset
    policy_from_preset(settings.reminder_preset)
    return settings
