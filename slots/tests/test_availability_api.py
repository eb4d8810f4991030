"""API tests for the hourly availability grid."""

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from Spaces.tests.helpers import future_day, make_booking, make_space, make_user


class SpaceAvailabilityAPITests(APITestCase):
    def setUp(self):
        self.space = make_space(name="Meeting Room A", price="40.00")
        self.day = future_day()
        self.user = make_user()

    def _get(self, **params):
        params.setdefault("date", self.day.isoformat())
        return self.client.get(
            reverse("space-availability", kwargs={"space_id": self.space.id}),
            params,
        )

    def _available(self, response):
        return {slot["hour"]: slot["is_available"] for slot in response.data["data"]["slots"]}

    def test_empty_day_is_fully_available(self):
        response = self._get()

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        data = response.data["data"]
        self.assertEqual(data["space"], {"id": self.space.id, "name": self.space.name})
        self.assertEqual(data["price_per_hour"], "40.00")
        self.assertTrue(all(self._available(response).values()))
        self.assertEqual(data["start_options"], list(range(8, 21)))
        self.assertNotIn("end_options", data)

    def test_active_bookings_block_their_hours(self):
        make_booking(self.user, self.space, self.day, 10, 12, status="confirmed")
        make_booking(self.user, self.space, self.day, 15, 16)

        available = self._available(self._get())

        self.assertFalse(available[10])
        self.assertFalse(available[11])
        self.assertFalse(available[15])
        self.assertTrue(available[12])
        self.assertTrue(available[14])

    def test_finished_bookings_do_not_block(self):
        make_booking(self.user, self.space, self.day, 10, 12, status="cancelled")
        make_booking(self.user, self.space, self.day, 13, 14, status="completed")

        self.assertTrue(all(self._available(self._get()).values()))

    def test_bookings_of_other_spaces_do_not_block(self):
        other = make_space(name="Other Room")
        make_booking(self.user, other, self.day, 10, 12)

        self.assertTrue(self._available(self._get())[10])

    def test_end_options_stop_at_next_booking(self):
        make_booking(self.user, self.space, self.day, 13, 15)

        response = self._get(start=10)

        options = response.data["data"]["end_options"]
        self.assertEqual([opt["hour"] for opt in options], [11, 12, 13])
        self.assertEqual(options[-1]["time_label"], "13:00")
        self.assertEqual(options[-1]["total_price"], "120.00")

    def test_start_outside_opening_hours_is_rejected(self):
        response = self._get(start=22)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_date_is_required(self):
        response = self.client.get(
            reverse("space-availability", kwargs={"space_id": self.space.id})
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_inactive_space_is_not_found(self):
        self.space.is_active = False
        self.space.save()

        response = self._get()

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
