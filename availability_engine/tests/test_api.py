"""HTTP tests for the availability and admin routers (in-memory stores on app.state)."""
import datetime as _dt
import unittest
import uuid
from unittest.mock import AsyncMock, patch

from fastapi.testclient import TestClient

from availability_engine.api import main
from availability_engine.clients.booking.providers import NoOpBookingStore
from availability_engine.config import ScheduleConfig
from availability_engine.core.exceptions import BookingStoreError
from availability_engine.scheduling import SlotCatalog
from availability_engine.stores import InMemoryBlockStore

TODAY = _dt.date(2026, 10, 19)
ACTOR_HEADERS = {"X-Actor-Id": "staff-7", "X-Actor-Name": "Dana"}


class _FixedSchedule(ScheduleConfig):
    def today(self, now=None):
        return TODAY


def _client(booking=None):
    schedule = _FixedSchedule()
    store = InMemoryBlockStore(SlotCatalog.from_config(schedule), today=schedule.today)
    main.install_engine(main.app, store, booking or NoOpBookingStore(), schedule)
    return TestClient(main.app), store


class TestAvailabilityEndpoints(unittest.TestCase):
    def test_weekend_day(self) -> None:
        client, _ = _client()
        resp = client.get("/api/v1/availability", params={"startDate": "2026-11-07", "endDate": "2026-11-07"})
        self.assertEqual(resp.status_code, 200)
        day = resp.json()["days"][0]
        self.assertEqual(day["date"], "2026-11-07")
        self.assertFalse(day["is_fully_blocked"])
        self.assertEqual(len(day["available_slots"]), 19)

    def test_range_returns_one_entry_per_day(self) -> None:
        client, _ = _client()
        resp = client.get("/api/v1/availability", params={"startDate": "2026-11-02", "endDate": "2026-11-08"})
        self.assertEqual([d["date"] for d in resp.json()["days"]][-1], "2026-11-08")
        self.assertEqual(len(resp.json()["days"]), 7)

    def test_inverted_range_is_422(self) -> None:
        client, _ = _client()
        resp = client.get("/api/v1/availability", params={"startDate": "2026-11-08", "endDate": "2026-11-02"})
        self.assertEqual(resp.status_code, 422)
        self.assertEqual(resp.json()["error"]["code"], "INVALID_RANGE")

    def test_booking_store_down_is_502(self) -> None:
        booking = AsyncMock()
        booking.occupied_slots_in = AsyncMock(side_effect=BookingStoreError("unreachable"))
        client, _ = _client(booking)
        resp = client.get("/api/v1/availability", params={"startDate": "2026-11-02", "endDate": "2026-11-02"})
        self.assertEqual(resp.status_code, 502)
        self.assertEqual(resp.json()["error"]["code"], "BOOKING_STORE_ERROR")

    def test_check_slot(self) -> None:
        client, _ = _client()
        resp = client.get("/api/v1/availability/check", params={"date": "2026-11-02", "slot": "7:00 PM"})
        self.assertEqual(resp.json(), {"date": "2026-11-02", "slot": "7:00 PM", "available": True})

        resp = client.get("/api/v1/availability/check", params={"date": "2026-11-02", "slot": "11:00 AM"})
        self.assertEqual(resp.status_code, 422)
        self.assertIn("valid_labels", resp.json()["error"]["details"])

    def test_slots_for_date(self) -> None:
        client, _ = _client()
        resp = client.get("/api/v1/slots", params={"date": "2026-11-02"})
        body = resp.json()
        self.assertEqual(body["schedule"], "weekday")
        self.assertEqual(body["slots"][0], "6:30 PM")


class TestAdminEndpoints(unittest.TestCase):
    def test_block_then_read(self) -> None:
        client, _ = _client()
        resp = client.post(
            "/api/v1/admin/actions",
            json={"action": "blockTimeSlot", "data": {"date": "2026-11-07", "slots": ["2:00 PM", "2:30 PM"]}},
            headers=ACTOR_HEADERS,
        )
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["ok"])

        resp = client.get("/api/v1/availability", params={"startDate": "2026-11-07", "endDate": "2026-11-07"})
        day = resp.json()["days"][0]
        self.assertEqual(len(day["available_slots"]), 17)
        self.assertEqual(day["blocked_slots"], ["2:00 PM", "2:30 PM"])

        resp = client.get(
            "/api/v1/availability/blocked-times", params={"startDate": "2026-11-07", "endDate": "2026-11-07"}
        )
        self.assertEqual(resp.json(), {"blocked_times": {"2026-11-07": ["2:00 PM", "2:30 PM"]}})

        resp = client.get("/api/v1/admin/slot-blocks")
        self.assertEqual([b["created_by"] for b in resp.json()], ["staff-7", "staff-7"])

    def test_partial_batch_reports_per_label(self) -> None:
        client, _ = _client()
        resp = client.post(
            "/api/v1/admin/actions",
            json={"action": "blockTimeSlot", "data": {"date": "2026-11-02", "slots": ["7:00 PM", "2:00 PM"]}},
            headers=ACTOR_HEADERS,
        )
        body = resp.json()
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(body["ok"])
        self.assertEqual([(r["slot"], r["ok"]) for r in body["slot_results"]], [("7:00 PM", True), ("2:00 PM", False)])

    def test_full_day_block_and_list(self) -> None:
        client, _ = _client()
        client.post(
            "/api/v1/admin/actions",
            json={"action": "blockFullDay", "data": {"date": "2026-11-02", "reason": "Holiday"}},
            headers=ACTOR_HEADERS,
        )
        resp = client.get("/api/v1/availability/blocked-days", params={"startDate": "2026-11-01", "endDate": "2026-11-30"})
        self.assertEqual(resp.json(), {"blocked_days": ["2026-11-02"]})
        listed = client.get("/api/v1/admin/full-day-blocks").json()
        self.assertEqual(listed[0]["reason"], "Holiday")

    def test_recurring_block_lifecycle(self) -> None:
        client, _ = _client()
        resp = client.post(
            "/api/v1/admin/actions",
            json={
                "action": "setRecurringBlock",
                "data": {"dayOfWeek": 1, "startSlot": "6:30 PM", "endSlot": "8:00 PM", "untilDate": "2027-02-01"},
            },
            headers=ACTOR_HEADERS,
        )
        block_id = resp.json()["recurring_block_id"]
        listed = client.get("/api/v1/admin/recurring-blocks").json()
        self.assertEqual([b["id"] for b in listed], [block_id])
        self.assertEqual(client.get(f"/api/v1/admin/recurring-blocks/{block_id}").json()["effective_from"], "2026-10-19")

        resp = client.delete(f"/api/v1/admin/recurring-blocks/{block_id}", headers=ACTOR_HEADERS)
        self.assertTrue(resp.json()["changed"])
        self.assertEqual(client.get(f"/api/v1/admin/recurring-blocks/{block_id}").status_code, 404)

    def test_unknown_recurring_block_is_404(self) -> None:
        client, _ = _client()
        resp = client.get(f"/api/v1/admin/recurring-blocks/{uuid.uuid4()}")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["error"]["code"], "NOT_FOUND")

    def test_missing_actor_is_401(self) -> None:
        client, _ = _client()
        resp = client.post("/api/v1/admin/actions", json={"action": "unblockFullDay", "data": {"date": "2026-11-02"}})
        self.assertEqual(resp.status_code, 401)

    def test_malformed_payload_is_400(self) -> None:
        client, _ = _client()
        resp = client.post(
            "/api/v1/admin/actions", json={"action": "blockFullDay", "data": {}}, headers=ACTOR_HEADERS
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"]["code"], "VALIDATION_ERROR")

    def test_past_date_is_422(self) -> None:
        client, _ = _client()
        resp = client.post(
            "/api/v1/admin/actions",
            json={"action": "blockFullDay", "data": {"date": "2026-10-01"}},
            headers=ACTOR_HEADERS,
        )
        self.assertEqual(resp.status_code, 422)
        self.assertEqual(resp.json()["error"]["code"], "INVALID_DATE")

    def test_gateway_key_required_when_configured(self) -> None:
        client, _ = _client()
        with patch.object(main, "_ENGINE_API_KEY", "gw-secret"):
            denied = client.get("/api/v1/admin/recurring-blocks")
            allowed = client.get("/api/v1/admin/recurring-blocks", headers={"X-Api-Key": "gw-secret"})
            public = client.get("/api/v1/slots", params={"date": "2026-11-02"})
        self.assertEqual(denied.status_code, 401)
        self.assertEqual(allowed.status_code, 200)
        self.assertEqual(public.status_code, 200)


class TestHealth(unittest.TestCase):
    def test_health(self) -> None:
        client, _ = _client()
        self.assertEqual(client.get("/health").json(), {"status": "ok", "block_store": "memory"})


if __name__ == "__main__":
    unittest.main()
