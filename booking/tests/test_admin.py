from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse

from booking.models import Booking

from .utils import add_booking, hm, make_service, make_staff


class BookingAdminTests(TestCase):
    def setUp(self):
        user = get_user_model().objects.create_superuser("owner", "owner@example.com", "pw")
        self.client.force_login(user)
        self.staff = make_staff()
        self.service = make_service()
        self.cancelled = add_booking(self.staff, self.service, hm(10), status=Booking.STATUS_CANCELLED)
        self.active = add_booking(self.staff, self.service, hm(10), status=Booking.STATUS_CONFIRMED)
        self.changelist = reverse("admin:booking_booking_changelist")

    def test_change_form_cannot_reopen_cancelled_booking(self):
        url = reverse("admin:booking_booking_change", args=[self.cancelled.pk])

        res = self.client.post(url, {
            "client_name": "Renamed Client",
            "client_email": "renamed@example.com",
            "client_phone": "",
            "notes": "",
            "status": Booking.STATUS_PENDING,
            "booking_time": hm(11),
            "_save": "Save",
        })

        self.assertEqual(res.status_code, 302)
        self.cancelled.refresh_from_db()
        self.assertEqual(self.cancelled.client_name, "Renamed Client")
        self.assertEqual(self.cancelled.status, Booking.STATUS_CANCELLED)
        self.assertEqual(self.cancelled.booking_time, hm(10))
        self.assertEqual(Booking.objects.filter(booking_time=hm(10)).active().count(), 1)

    def test_bookings_cannot_be_added_or_deleted_in_admin(self):
        self.assertEqual(self.client.get(reverse("admin:booking_booking_add")).status_code, 403)
        res = self.client.get(reverse("admin:booking_booking_delete", args=[self.active.pk]))
        self.assertEqual(res.status_code, 403)

    def test_status_actions_follow_lifecycle(self):
        res = self.client.post(self.changelist, {
            "action": "complete_selected",
            "_selected_action": [self.active.pk, self.cancelled.pk],
        })

        self.assertEqual(res.status_code, 302)
        self.active.refresh_from_db()
        self.cancelled.refresh_from_db()
        self.assertEqual(self.active.status, Booking.STATUS_COMPLETED)
        self.assertEqual(self.cancelled.status, Booking.STATUS_CANCELLED)

    def test_cancel_action(self):
        self.client.post(self.changelist, {"action": "cancel_selected", "_selected_action": [self.active.pk]})

        self.active.refresh_from_db()
        self.assertEqual(self.active.status, Booking.STATUS_CANCELLED)
