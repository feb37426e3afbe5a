"""Tests for the /appointments endpoints"""

import unittest
import uuid

from tests.base import ApiTestCase

from app.models_appointment import Appointment


def bulk_payload(**overrides):
    payload = {
        "title": "Monthly home visit",
        "homeXref": 1042,
        "assignedToName": "Jordan Case Manager",
        "recurringPattern": "first_monday",
        "startYear": 2026,
        "time": "16:00",
        "durationMinutes": 60,
        "createdByName": "Scheduler",
    }
    payload.update(overrides)
    return payload


class TestBulkRecurring(ApiTestCase):
    """Tests for POST /appointments/bulk-recurring"""

    def test_creates_one_appointment_per_month(self):
        response = self.client.post("/appointments/bulk-recurring", json=bulk_payload())

        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["created"], 12)
        self.assertEqual(body["total"], 12)
        self.assertEqual(len(body["appointmentIds"]), 12)
        self.assertEqual(body["recurringPattern"], "first_monday")

        rows = self.db.query(Appointment).order_by(Appointment.start_datetime).all()
        self.assertEqual(len(rows), 12)
        self.assertEqual(rows[0].start_datetime.isoformat(), "2026-01-05T16:00:00")
        self.assertEqual(rows[0].end_datetime.isoformat(), "2026-01-05T17:00:00")
        self.assertTrue(all(r.is_recurring for r in rows))
        self.assertTrue(all(r.recurring_pattern == "first_monday" for r in rows))
        self.assertTrue(all(r.home_xref == 1042 for r in rows))

    def test_spans_multiple_years(self):
        response = self.client.post(
            "/appointments/bulk-recurring", json=bulk_payload(endYear=2027)
        )
        self.assertEqual(response.json()["created"], 24)

    def test_time_is_normalized(self):
        response = self.client.post(
            "/appointments/bulk-recurring",
            json=bulk_payload(recurringPattern="LAST_FRIDAY", time="9:30"),
        )
        self.assertEqual(response.status_code, 201)
        first = self.db.query(Appointment).order_by(Appointment.start_datetime).first()
        self.assertEqual(first.start_datetime.isoformat(), "2026-01-30T09:30:00")
        self.assertEqual(first.recurring_pattern, "last_friday")

    def test_invalid_pattern_is_rejected(self):
        response = self.client.post(
            "/appointments/bulk-recurring", json=bulk_payload(recurringPattern="every_day")
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.db.query(Appointment).count(), 0)

    def test_weekend_pattern_is_rejected(self):
        response = self.client.post(
            "/appointments/bulk-recurring", json=bulk_payload(recurringPattern="first_saturday")
        )
        self.assertEqual(response.status_code, 400)

    def test_inverted_year_range_generates_nothing(self):
        response = self.client.post(
            "/appointments/bulk-recurring", json=bulk_payload(startYear=2027, endYear=2026)
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "No dates generated for the given pattern")

    def test_overlong_duration_fails_validation(self):
        response = self.client.post(
            "/appointments/bulk-recurring", json=bulk_payload(durationMinutes=10**10)
        )
        self.assertEqual(response.status_code, 422)
        self.assertEqual(self.db.query(Appointment).count(), 0)

    def test_zero_duration_creates_zero_length_appointments(self):
        # Single appointments require end > start; recurring series may be zero-length
        response = self.client.post(
            "/appointments/bulk-recurring", json=bulk_payload(durationMinutes=0)
        )
        self.assertEqual(response.status_code, 201)
        rows = self.db.query(Appointment).all()
        self.assertEqual(len(rows), 12)
        self.assertTrue(all(r.start_datetime == r.end_datetime for r in rows))

    def test_bad_time_fails_validation(self):
        response = self.client.post(
            "/appointments/bulk-recurring", json=bulk_payload(time="4pm")
        )
        self.assertEqual(response.status_code, 422)

    def test_missing_title_fails_validation(self):
        payload = bulk_payload()
        del payload["title"]
        response = self.client.post("/appointments/bulk-recurring", json=payload)
        self.assertEqual(response.status_code, 422)


class TestAppointmentCrud(ApiTestCase):
    """Tests for single appointment endpoints"""

    def create(self, **overrides):
        payload = {
            "title": "Quarterly licensing visit",
            "startDatetime": "2026-03-10T10:00:00",
            "endDatetime": "2026-03-10T11:30:00",
            "assignedToUserId": "user_1",
        }
        payload.update(overrides)
        return self.client.post("/appointments", json=payload)

    def test_create_and_get(self):
        response = self.create()
        self.assertEqual(response.status_code, 201)
        created = response.json()
        self.assertEqual(created["status"], "scheduled")
        self.assertFalse(created["is_recurring"])

        fetched = self.client.get(f"/appointments/{created['appointment_id']}")
        self.assertEqual(fetched.status_code, 200)
        self.assertEqual(fetched.json()["title"], "Quarterly licensing visit")
        self.assertEqual(str(uuid.UUID(created["appointment_id"])), created["appointment_id"])

    def test_offset_timestamps_keep_wall_clock(self):
        created = self.create(
            startDatetime="2026-03-10T10:00:00-05:00", endDatetime="2026-03-10T11:00:00-05:00"
        ).json()
        self.assertEqual(created["start_datetime"], "2026-03-10T10:00:00")

    def test_end_before_start_fails_validation(self):
        response = self.create(endDatetime="2026-03-10T09:00:00")
        self.assertEqual(response.status_code, 422)

    def test_list_filters_by_window_and_assignee(self):
        self.create()
        self.create(startDatetime="2026-05-01T10:00:00", endDatetime="2026-05-01T11:00:00")
        self.create(assignedToUserId="user_2")

        in_march = self.client.get(
            "/appointments",
            params={"startDate": "2026-03-01T00:00:00", "endDate": "2026-03-31T23:59:59"},
        ).json()
        self.assertEqual(len(in_march), 2)

        for_user_2 = self.client.get("/appointments", params={"assignedToUserId": "user_2"}).json()
        self.assertEqual(len(for_user_2), 1)

    def test_update(self):
        appointment_id = self.create().json()["appointment_id"]
        response = self.client.patch(
            f"/appointments/{appointment_id}",
            json={"status": "completed", "endDatetime": "2026-03-10T12:00:00"},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "completed")
        self.assertEqual(response.json()["end_datetime"], "2026-03-10T12:00:00")

    def test_update_rejects_inverted_range(self):
        appointment_id = self.create().json()["appointment_id"]
        response = self.client.patch(
            f"/appointments/{appointment_id}", json={"startDatetime": "2026-03-10T12:00:00"}
        )
        self.assertEqual(response.status_code, 400)

    def test_update_null_clears_optional_fields(self):
        appointment_id = self.create(locationNotes="Gate code 4411").json()["appointment_id"]
        response = self.client.patch(
            f"/appointments/{appointment_id}",
            json={"assignedToUserId": None, "locationNotes": None},
        )
        self.assertEqual(response.status_code, 200)
        self.assertIsNone(response.json()["assigned_to_user_id"])
        self.assertIsNone(response.json()["location_notes"])
        self.assertEqual(response.json()["title"], "Quarterly licensing visit")

    def test_update_cannot_clear_required_fields(self):
        appointment_id = self.create().json()["appointment_id"]
        response = self.client.patch(
            f"/appointments/{appointment_id}", json={"startDatetime": None}
        )
        self.assertEqual(response.status_code, 400)

    def test_delete_hides_appointment(self):
        appointment_id = self.create().json()["appointment_id"]
        self.assertEqual(self.client.delete(f"/appointments/{appointment_id}").status_code, 200)
        self.assertEqual(self.client.get(f"/appointments/{appointment_id}").status_code, 404)
        self.assertEqual(self.client.get("/appointments").json(), [])

    def test_unknown_appointment(self):
        self.assertEqual(self.client.get("/appointments/does-not-exist").status_code, 404)


if __name__ == "__main__":
    unittest.main()
