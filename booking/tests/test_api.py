from datetime import timedelta

from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework.test import APIClient

from booking.models import Booking, Service

from .utils import BOOKING_DEFAULTS, add_booking, hm, make_service, make_staff, set_week


@override_settings(SALON_BOOKING=BOOKING_DEFAULTS)
class BookingApiTests(TestCase):
    """
    The API runs against the real clock, so these tests book two days
    ahead where the lead time can never interfere.
    """

    def setUp(self):
        self.client = APIClient()
        self.staff = make_staff()
        self.service = make_service(duration=30, price="250.00", upfront_fee="50.00")
        set_week(self.staff)
        self.day = timezone.localdate() + timedelta(days=2)

    def payload(self, **overrides):
        data = {
            "client_name": "Naledi Mokoena",
            "client_email": "naledi@example.com",
            "client_phone": "0821112222",
            "service_id": self.service.pk,
            "staff_id": self.staff.pk,
            "booking_date": self.day.isoformat(),
            "booking_time": "10:00",
        }
        data.update(overrides)
        return data

    def test_availability_returns_hhmm_slots(self):
        res = self.client.get(
            "/api/bookings/availability/",
            {"staff_id": self.staff.pk, "date": self.day.isoformat(), "duration": 30},
        )

        self.assertEqual(res.status_code, 200)
        body = res.json()
        self.assertEqual(body["duration"], 30)
        self.assertEqual(body["slots"][0], "09:00")
        self.assertEqual(body["slots"][-1], "16:30")
        self.assertNotIn("12:00", body["slots"])
        self.assertEqual(len(body["slots"]), 14)

    def test_availability_by_service(self):
        long_service = make_service(name="Full Body Wax", duration=120, price="800.00", upfront_fee="160.00")
        res = self.client.get(
            "/api/bookings/availability/",
            {"staff_id": self.staff.pk, "date": self.day.isoformat(), "service_id": long_service.pk},
        )

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["duration"], 120)
        self.assertEqual(res.json()["slots"], ["09:00", "09:30", "10:00", "13:00", "13:30", "14:00", "14:30", "15:00"])

    def test_availability_needs_duration_or_service(self):
        res = self.client.get(
            "/api/bookings/availability/", {"staff_id": self.staff.pk, "date": self.day.isoformat()}
        )

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()["kind"], "validation_error")

    def test_availability_unknown_staff_is_404(self):
        res = self.client.get(
            "/api/bookings/availability/", {"staff_id": 999999, "date": self.day.isoformat(), "duration": 30}
        )

        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.json()["kind"], "not_found")

    def test_create_then_duplicate(self):
        res = self.client.post("/api/bookings/", self.payload(), format="json")

        self.assertEqual(res.status_code, 201)
        body = res.json()
        self.assertEqual(body["status"], "pending")
        self.assertEqual(body["payment_status"], "unpaid")
        self.assertEqual(body["upfront_fee"], "50.00")
        self.assertTrue(Booking.objects.filter(pk=body["booking_id"]).exists())

        res = self.client.post(
            "/api/bookings/", self.payload(client_email="someone@example.com"), format="json"
        )
        self.assertEqual(res.status_code, 409)
        self.assertEqual(res.json()["kind"], "slot_unavailable")
        self.assertEqual(Booking.objects.count(), 1)

    def test_create_with_inactive_service(self):
        Service.objects.filter(pk=self.service.pk).update(active=False)

        res = self.client.post("/api/bookings/", self.payload(), format="json")

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()["kind"], "invalid_service")

    def test_create_with_unknown_staff(self):
        res = self.client.post("/api/bookings/", self.payload(staff_id=999999), format="json")

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()["kind"], "invalid_staff")

    def test_create_with_malformed_time(self):
        res = self.client.post("/api/bookings/", self.payload(booking_time="25:00"), format="json")

        self.assertEqual(res.status_code, 400)
        body = res.json()
        self.assertEqual(body["kind"], "validation_error")
        self.assertIn("booking_time", body["detail"])

    def test_non_numeric_booking_id_is_not_found(self):
        res = self.client.get("/api/bookings/abc/")
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.json()["kind"], "not_found")

        res = self.client.post("/api/bookings/abc/status/", {"status": "confirmed"}, format="json")
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.json()["kind"], "not_found")

    def test_time_with_bad_seconds_is_rejected(self):
        for value in ("10:00:99", "10:00:xx"):
            res = self.client.post("/api/bookings/", self.payload(booking_time=value), format="json")
            self.assertEqual(res.status_code, 400)
            self.assertIn("booking_time", res.json()["detail"])
        self.assertEqual(Booking.objects.count(), 0)

    def test_status_change_and_terminal_state(self):
        booking_id = self.client.post("/api/bookings/", self.payload(), format="json").json()["booking_id"]

        res = self.client.post(f"/api/bookings/{booking_id}/status/", {"status": "cancelled"}, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["status"], "cancelled")
        self.assertEqual(res.json()["booking_time"], "10:00")

        res = self.client.post(f"/api/bookings/{booking_id}/status/", {"status": "completed"}, format="json")
        self.assertEqual(res.status_code, 409)
        self.assertEqual(res.json()["kind"], "invalid_transition")

    def test_status_change_unknown_booking(self):
        res = self.client.post("/api/bookings/999999/status/", {"status": "confirmed"}, format="json")

        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.json()["kind"], "not_found")

    def test_payment_confirmed_hook(self):
        booking_id = self.client.post("/api/bookings/", self.payload(), format="json").json()["booking_id"]

        res = self.client.post(
            f"/api/bookings/{booking_id}/payment-confirmed/", {"payment_reference": "PF-778"}, format="json"
        )

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["status"], "confirmed")
        self.assertEqual(res.json()["payment_status"], "paid")
        self.assertEqual(res.json()["payment_reference"], "PF-778")

    def test_next_available(self):
        res = self.client.get(
            "/api/bookings/next-available/", {"staff_id": self.staff.pk, "service_id": self.service.pk}
        )

        self.assertEqual(res.status_code, 200)
        self.assertIsNotNone(res.json()["date"])
        self.assertRegex(res.json()["time"], r"^\d{2}:\d{2}$")

    def test_list_filters_and_orders(self):
        other = make_staff(name="Lerato", email="lerato@example.com")
        later = self.day + timedelta(days=1)
        b3 = add_booking(self.staff, self.service, hm(9), day=later)
        b2 = add_booking(self.staff, self.service, hm(14), day=self.day)
        b1 = add_booking(self.staff, self.service, hm(9, 30), day=self.day)
        add_booking(other, self.service, hm(9), day=self.day)
        add_booking(self.staff, self.service, hm(11), day=self.day, status=Booking.STATUS_CANCELLED)

        res = self.client.get(
            "/api/bookings/",
            {
                "staff_id": self.staff.pk,
                "date_from": self.day.isoformat(),
                "date_to": later.isoformat(),
                "status": "confirmed",
            },
        )

        self.assertEqual(res.status_code, 200)
        self.assertEqual([row["id"] for row in res.json()], [b1.pk, b2.pk, b3.pk])
        self.assertEqual(res.json()[0]["booking_time"], "09:30")
        self.assertEqual(res.json()[0]["staff_name"], "Thandi")

    def test_list_rejects_inverted_range(self):
        res = self.client.get(
            "/api/bookings/",
            {"date_from": (self.day + timedelta(days=1)).isoformat(), "date_to": self.day.isoformat()},
        )

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()["kind"], "validation_error")

    def test_bookings_cannot_be_deleted(self):
        booking = add_booking(self.staff, self.service, hm(9), day=self.day)

        res = self.client.delete(f"/api/bookings/{booking.pk}/")

        self.assertEqual(res.status_code, 405)
        self.assertTrue(Booking.objects.filter(pk=booking.pk).exists())


class CatalogApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.service = make_service()
        make_service(name="Hidden", active=False)

    def test_public_sees_active_services_only(self):
        res = self.client.get("/api/services/")

        self.assertEqual(res.status_code, 200)
        self.assertEqual([row["name"] for row in res.json()], ["Gel Nails"])

    def test_anonymous_cannot_create_service(self):
        res = self.client.post(
            "/api/services/",
            {"name": "Nail Art", "duration_minutes": 45, "price": "150.00", "upfront_fee": "30.00"},
            format="json",
        )

        self.assertEqual(res.status_code, 403)
        self.assertEqual(Service.objects.count(), 2)

    def test_staff_user_manages_services(self):
        admin = get_user_model().objects.create_user("owner", password="pw", is_staff=True)
        self.client.force_authenticate(admin)

        res = self.client.post(
            "/api/services/",
            {"name": "Nail Art", "duration_minutes": 45, "price": "150.00", "upfront_fee": "30.00"},
            format="json",
        )
        self.assertEqual(res.status_code, 201)

        res = self.client.patch(f"/api/services/{self.service.pk}/", {"upfront_fee": "300.00"}, format="json")
        self.assertEqual(res.status_code, 400)
        self.assertIn("upfront_fee", res.json()["detail"])

        res = self.client.get("/api/services/")
        self.assertEqual(len(res.json()), 3)

    def test_deleting_booked_service_or_staff_is_a_conflict(self):
        admin = get_user_model().objects.create_user("owner", password="pw", is_staff=True)
        self.client.force_authenticate(admin)
        staff = make_staff()
        booking = add_booking(staff, self.service, hm(10))

        res = self.client.delete(f"/api/services/{self.service.pk}/")
        self.assertEqual(res.status_code, 409)
        self.assertEqual(res.json()["kind"], "in_use")

        res = self.client.delete(f"/api/staff/{staff.pk}/")
        self.assertEqual(res.status_code, 409)
        self.assertEqual(res.json()["kind"], "in_use")
        self.assertTrue(Booking.objects.filter(pk=booking.pk).exists())

    def test_unbooked_service_can_be_deleted(self):
        admin = get_user_model().objects.create_user("owner", password="pw", is_staff=True)
        self.client.force_authenticate(admin)

        res = self.client.delete(f"/api/services/{self.service.pk}/")

        self.assertEqual(res.status_code, 204)
        self.assertFalse(Service.objects.filter(pk=self.service.pk).exists())
