"""Unit tests for booking analytics."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from app.models.booking import BookingStatus
from app.services.report_service import get_booking_summary


class TestBookingSummary:
    def test_empty_ledger_returns_zero_values(self, db):
        summary = get_booking_summary(db)

        assert summary["bookingStats"] == []
        assert summary["mostPopularCar"] == {"name": "No data", "bookings": 0}
        assert summary["leastPopularCar"] == {"name": "No data", "bookings": 0}

    def test_counts_by_status_sorted_desc(self, db, make_user, make_vehicle, make_booking):
        user, car = make_user(), make_vehicle(quantity=10)
        for _ in range(3):
            make_booking(user, car, status=BookingStatus.CANCELLED)
        make_booking(user, car, status=BookingStatus.ACTIVE)

        stats = get_booking_summary(db)["bookingStats"]

        assert stats == [
            {"status": "cancelled", "totalBookings": 3},
            {"status": "active", "totalBookings": 1},
        ]

    def test_most_and_least_popular(self, db, make_user, make_vehicle, make_booking):
        user = make_user()
        golf = make_vehicle(brand="Volkswagen", model="Golf", quantity=5)
        x5 = make_vehicle(brand="BMW", model="X5", quantity=5)
        for _ in range(3):
            make_booking(user, golf)
        make_booking(user, x5)

        summary = get_booking_summary(db)

        assert summary["mostPopularCar"] == {"name": "Volkswagen Golf", "bookings": 3}
        assert summary["leastPopularCar"] == {"name": "BMW X5", "bookings": 1}

    def test_single_vehicle_is_both(self, db, make_user, make_vehicle, make_booking):
        car = make_vehicle(brand="Toyota", model="Corolla")
        make_booking(make_user(), car)

        summary = get_booking_summary(db)

        assert summary["mostPopularCar"] == summary["leastPopularCar"] == {"name": "Toyota Corolla", "bookings": 1}
