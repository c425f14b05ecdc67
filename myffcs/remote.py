"""
Hosted database adapter (Supabase / PostgREST over HTTP).

Tables used:
- timetable_entries        classes added by hand        (source="manual")
- smart_timetable_entries  classes produced from slots  (source="ffcs")
- profiles                 one row per user, holds the push "subscription" JSON

The push worker needs the service role key, because it reads every
user's rows.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

import requests

from myffcs.model import SOURCE_FFCS, SOURCE_MANUAL, ScheduleEntry, UserSubscription


logger = logging.getLogger(__name__)

TABLE_BY_SOURCE = {
    SOURCE_MANUAL: "timetable_entries",
    SOURCE_FFCS: "smart_timetable_entries",
}
PROFILES_TABLE = "profiles"

# Columns written on insert/update (id and user_id are handled separately)
ENTRY_COLUMNS = (
    "day",
    "start_time",
    "end_time",
    "subject_name",
    "subject_code",
    "type",
    "room_number",
    "slot_code",
    "slot_label",
    "credit",
)


class SupabaseStore:
    """
    Schedule source and subscription store backed by the hosted tables.

    HTTP errors are not swallowed: every call ends in raise_for_status(),
    callers decide how to isolate failures.
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        session: Optional[requests.Session] = None,
        timeout: float = 30,
    ) -> None:
        if not url or not api_key:
            raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY are required")
        self.base_url = url.rstrip("/") + "/rest/v1"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            }
        )

    # -- low level ----------------------------------------------------------

    def _request(
        self,
        method: str,
        table: str,
        params: Optional[Dict[str, str]] = None,
        json_body: Any = None,
        prefer: Optional[str] = None,
    ) -> Any:
        headers = {"Prefer": prefer} if prefer else None
        resp = self.session.request(
            method,
            f"{self.base_url}/{table}",
            params=params,
            json=json_body,
            headers=headers,
            timeout=self.timeout,
        )
        resp.raise_for_status()
        if not resp.content:
            return None
        return resp.json()

    # -- schedule source ----------------------------------------------------

    def list_entries(self, user_id: str, day: str) -> List[ScheduleEntry]:
        """
        One user's classes for one weekday, from both entry tables.
        """
        entries: List[ScheduleEntry] = []
        params = {"select": "*", "user_id": f"eq.{user_id}", "day": f"eq.{day}"}
        for source, table in TABLE_BY_SOURCE.items():
            rows = self._request("GET", table, params=params) or []
            entries.extend(ScheduleEntry.from_dict(row, source=source) for row in rows)
        return entries

    def add_entries(self, user_id: str, entries: Iterable[ScheduleEntry]) -> List[ScheduleEntry]:
        """
        Insert entries, grouped by their source table. Returns the stored rows.
        """
        saved: List[ScheduleEntry] = []
        by_source: Dict[str, List[ScheduleEntry]] = {}
        for entry in entries:
            by_source.setdefault(entry.source, []).append(entry)

        for source, group in by_source.items():
            rows = [dict(_entry_row(e), user_id=user_id) for e in group]
            stored = self._request("POST", _table_for(source), json_body=rows, prefer="return=representation") or []
            saved.extend(ScheduleEntry.from_dict(row, source=source) for row in stored)

        logger.info("Inserted %d entries for user %s", len(saved), user_id)
        return saved

    def update_entry(self, entry: ScheduleEntry) -> bool:
        if not entry.id:
            raise ValueError("Cannot update an entry without id")
        rows = self._request(
            "PATCH",
            _table_for(entry.source),
            params={"id": f"eq.{entry.id}"},
            json_body=_entry_row(entry),
            prefer="return=representation",
        )
        return bool(rows)

    def delete_entry(self, entry: ScheduleEntry) -> bool:
        if not entry.id:
            raise ValueError("Cannot delete an entry without id")
        rows = self._request(
            "DELETE",
            _table_for(entry.source),
            params={"id": f"eq.{entry.id}"},
            prefer="return=representation",
        )
        return bool(rows)

    # -- subscriptions ------------------------------------------------------

    def get_users_with_subscription(self) -> List[UserSubscription]:
        rows = self._request(
            "GET",
            PROFILES_TABLE,
            params={"select": "id,subscription", "subscription": "not.is.null"},
        ) or []
        return [
            UserSubscription(user_id=str(row["id"]), subscription=row["subscription"])
            for row in rows
            if row.get("id") is not None and row.get("subscription")
        ]

    def clear_subscription(self, user_id: str) -> None:
        self._request("PATCH", PROFILES_TABLE, params={"id": f"eq.{user_id}"}, json_body={"subscription": None})
        logger.info("Cleared push subscription of user %s", user_id)


def _table_for(source: str) -> str:
    try:
        return TABLE_BY_SOURCE[source]
    except KeyError:
        raise ValueError(f"Unknown entry source: {source!r}") from None


def _entry_row(entry: ScheduleEntry) -> Dict[str, Any]:
    data = entry.to_dict()
    return {col: data[col] for col in ENTRY_COLUMNS}
