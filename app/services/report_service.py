# app/services/report_service.py
"""Reporting: booking counts by status and vehicle demand. Read-only."""

from sqlalchemy import func
from sqlalchemy.orm import Session
from app.models.booking import Booking
from app.services.vehicle_service import lookup_vehicle

NO_DATA = "No data"


def _demand_entry(db: Session, row) -> dict:
    if row is None:
        return {"name": NO_DATA, "bookings": 0}
    vehicle = lookup_vehicle(db, row.vehicle_id)
    # Bookings can outlive a removed vehicle
    name = vehicle.display_name if vehicle else NO_DATA
    return {"name": name, "bookings": row.booking_count}


def get_booking_summary(db: Session) -> dict:
    count = func.count(Booking.id)
    stats = (
        db.query(Booking.status, count.label("total"))
        .group_by(Booking.status)
        .order_by(count.desc())
        .all()
    )
    demand = (
        db.query(Booking.vehicle_id, count.label("booking_count"))
        .group_by(Booking.vehicle_id)
        .order_by(count.desc(), Booking.vehicle_id)
        .all()
    )

    return {
        "bookingStats": [
            {"status": getattr(status, "value", status), "totalBookings": total}
            for status, total in stats
        ],
        "mostPopularCar": _demand_entry(db, demand[0] if demand else None),
        "leastPopularCar": _demand_entry(db, demand[-1] if demand else None),
    }
