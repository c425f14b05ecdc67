"""
Tests for the hosted database adapter, with the HTTP session mocked out.
"""

import unittest
from unittest import mock

import requests

from myffcs.model import ScheduleEntry
from myffcs.remote import SupabaseStore


def response(rows=None, status: int = 200) -> mock.Mock:
    resp = mock.Mock()
    resp.content = b"[]" if rows is None else b"x"
    resp.json.return_value = rows
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status} error")
    return resp


def make_store(*responses) -> SupabaseStore:
    session = mock.Mock()
    session.headers = {}
    session.request.side_effect = list(responses)
    return SupabaseStore("https://db.example.co/", "service-key", session=session)


ROW = {
    "id": "r1",
    "user_id": "u1",
    "day": "Monday",
    "start_time": "08:00",
    "end_time": "08:50",
    "subject_name": "Data Structures",
    "subject_code": "CSE2001",
    "type": "theory",
    "room_number": "SJT-301",
    "slot_code": "A1",
    "slot_label": "A1+TA1",
    "credit": 4,
}


class TestSupabaseStore(unittest.TestCase):
    def test_requires_credentials(self) -> None:
        with self.assertRaises(ValueError):
            SupabaseStore("", "key")
        with self.assertRaises(ValueError):
            SupabaseStore("https://db.example.co", "")

    def test_auth_headers(self) -> None:
        store = make_store()
        self.assertEqual(store.session.headers["apikey"], "service-key")
        self.assertEqual(store.session.headers["Authorization"], "Bearer service-key")
        self.assertEqual(store.base_url, "https://db.example.co/rest/v1")

    def test_list_entries_merges_both_tables(self) -> None:
        store = make_store(response([dict(ROW, id="m1")]), response([ROW]))
        entries = store.list_entries("u1", "Monday")

        self.assertEqual([(e.id, e.source) for e in entries], [("m1", "manual"), ("r1", "ffcs")])
        self.assertEqual(entries[1].session_type, "theory")

        urls = [c.args[1] for c in store.session.request.call_args_list]
        self.assertEqual(
            urls,
            [
                "https://db.example.co/rest/v1/timetable_entries",
                "https://db.example.co/rest/v1/smart_timetable_entries",
            ],
        )
        params = store.session.request.call_args.kwargs["params"]
        self.assertEqual(params["user_id"], "eq.u1")
        self.assertEqual(params["day"], "eq.Monday")

    def test_time_columns_with_seconds(self) -> None:
        store = make_store(response([]), response([dict(ROW, start_time="08:00:00", end_time="08:50:00")]))
        (entry,) = store.list_entries("u1", "Monday")
        self.assertEqual((entry.start_time, entry.end_time), ("08:00", "08:50"))

    def test_http_errors_propagate(self) -> None:
        store = make_store(response(status=500))
        with self.assertRaises(requests.HTTPError):
            store.list_entries("u1", "Monday")

    def test_add_entries_posts_to_source_table(self) -> None:
        store = make_store(response([ROW]))
        entry = ScheduleEntry.from_dict(dict(ROW, id=None), source="ffcs")
        saved = store.add_entries("u1", [entry])

        self.assertEqual([e.id for e in saved], ["r1"])
        call = store.session.request.call_args
        self.assertEqual(call.args[0], "POST")
        self.assertTrue(call.args[1].endswith("/smart_timetable_entries"))
        self.assertEqual(call.kwargs["headers"], {"Prefer": "return=representation"})
        body = call.kwargs["json"]
        self.assertEqual(body[0]["user_id"], "u1")
        self.assertEqual(body[0]["type"], "theory")
        self.assertNotIn("id", body[0])

    def test_update_and_delete_target_entry_table(self) -> None:
        store = make_store(response([ROW]), response([]))
        manual = ScheduleEntry.from_dict(ROW, source="manual")

        self.assertTrue(store.update_entry(manual))
        self.assertFalse(store.delete_entry(manual))

        update, delete = store.session.request.call_args_list
        self.assertEqual(update.args[0], "PATCH")
        self.assertTrue(update.args[1].endswith("/timetable_entries"))
        self.assertEqual(update.kwargs["params"], {"id": "eq.r1"})
        self.assertEqual(delete.args[0], "DELETE")

    def test_update_without_id(self) -> None:
        store = make_store()
        with self.assertRaises(ValueError):
            store.update_entry(ScheduleEntry.from_dict(dict(ROW, id=None)))

    def test_users_with_subscription(self) -> None:
        store = make_store(
            response(
                [
                    {"id": "u1", "subscription": {"endpoint": "https://push.example/1"}},
                    {"id": "u2", "subscription": None},
                ]
            )
        )
        users = store.get_users_with_subscription()

        self.assertEqual([u.user_id for u in users], ["u1"])
        params = store.session.request.call_args.kwargs["params"]
        self.assertEqual(params["subscription"], "not.is.null")

    def test_clear_subscription(self) -> None:
        store = make_store(response())
        store.clear_subscription("u1")

        call = store.session.request.call_args
        self.assertEqual(call.args[0], "PATCH")
        self.assertTrue(call.args[1].endswith("/profiles"))
        self.assertEqual(call.kwargs["params"], {"id": "eq.u1"})
        self.assertEqual(call.kwargs["json"], {"subscription": None})


if __name__ == "__main__":
    unittest.main()
