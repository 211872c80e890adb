import threading

from django.db import connection
from django.test import TransactionTestCase, override_settings

from booking.exceptions import BookingError
from booking.models import Booking
from booking.services.booking_manager import BookingManager, BookingRequest

from .utils import BOOKING_DEFAULTS, DAY, at, hm, make_service, make_staff, set_week

WORKERS = 4


@override_settings(SALON_BOOKING=BOOKING_DEFAULTS)
class ConcurrentAdmissionTests(TransactionTestCase):
    """
    Several threads, each with its own database connection, submit
    overlapping bookings for the same staff member and day at once.
    """

    def setUp(self):
        self.staff = make_staff()
        self.service = make_service(duration=30)
        set_week(self.staff)

    def run_race(self, starts):
        barrier = threading.Barrier(len(starts))
        results = [None] * len(starts)

        def admit(index, start):
            try:
                barrier.wait(timeout=10)
                BookingManager().create_booking(
                    BookingRequest(
                        client_name=f"Client {index}",
                        client_email=f"client{index}@example.com",
                        service_id=self.service.pk,
                        staff_id=self.staff.pk,
                        booking_date=DAY,
                        booking_time=start,
                    ),
                    now=at(8),
                )
                results[index] = "ok"
            except BookingError as exc:
                results[index] = exc.kind
            finally:
                connection.close()

        threads = [threading.Thread(target=admit, args=(i, start)) for i, start in enumerate(starts)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=30)
        return results

    def test_same_slot_admits_exactly_one(self):
        results = self.run_race([hm(10)] * WORKERS)

        self.assertEqual(results.count("ok"), 1, results)
        self.assertEqual(results.count("slot_unavailable"), WORKERS - 1, results)
        self.assertEqual(Booking.objects.active().count(), 1)

    def test_distinct_slots_all_admitted(self):
        results = self.run_race([hm(9), hm(10), hm(11), hm(14)])

        self.assertEqual(results, ["ok"] * 4)
        self.assertEqual(Booking.objects.filter(staff=self.staff, booking_date=DAY).active().count(), 4)
