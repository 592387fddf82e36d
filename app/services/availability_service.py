# app/services/availability_service.py
"""
Availability Engine.

Overlap uses inclusive bounds: an existing booking [s, e] collides with the
requested [start, end] when s <= end and e >= start.

Calendar views expand every booking that is neither cancelled nor completed into
its UTC days and compare the per-day count against the vehicle's total_quantity
(not the available_quantity counter).
"""

from collections import Counter
from datetime import datetime
from typing import Iterable

from sqlalchemy import func
from sqlalchemy.orm import Session
from app.models.booking import Booking
from app.services.booking_status import HOLDING_STATUSES, TERMINAL_STATUSES
from app.services.exceptions import NotFound
from app.services.vehicle_service import get_vehicle, lookup_vehicle
from app.utils.dates import day_key, iter_days
from app.utils.logger import get_logger

logger = get_logger(__name__)


def count_overlapping(db: Session, vehicle_id: int, start: datetime, end: datetime) -> int:
    """Pending/active bookings of the vehicle that intersect [start, end]."""
    return db.query(func.count(Booking.id)).filter(
        Booking.vehicle_id == vehicle_id,
        Booking.status.in_(HOLDING_STATUSES),
        Booking.start_time <= end,
        Booking.end_time >= start,
    ).scalar() or 0


def remaining_capacity(db: Session, vehicle, start: datetime, end: datetime) -> int:
    return vehicle.total_quantity - count_overlapping(db, vehicle.id, start, end)


def _calendar_bookings(db: Session, vehicle_id: int):
    return db.query(Booking).filter(
        Booking.vehicle_id == vehicle_id,
        Booking.status.notin_(TERMINAL_STATUSES),
    ).all()


def _fully_booked(day_counts: Counter, quantity: int) -> list[str]:
    return sorted(day for day, count in day_counts.items() if count >= quantity)


def _tally(bookings: Iterable[Booking]) -> Counter:
    counts = Counter()
    for booking in bookings:
        for day in iter_days(booking.start_time, booking.end_time):
            counts[day_key(day)] += 1
    return counts


def compute_unavailable_days(db: Session, vehicle_id: int) -> list[str]:
    """Days (YYYY-MM-DD) on which every unit of the vehicle is booked."""
    vehicle = get_vehicle(db, vehicle_id)
    counts = _tally(_calendar_bookings(db, vehicle_id))
    return _fully_booked(counts, vehicle.total_quantity)


def compute_editable_days(db: Session, booking_id: int, user_id: int) -> dict:
    """
    Calendar for a user editing their booking: the user's own bookings are left
    out of the tally and returned separately as userDays.
    """
    booking = db.query(Booking).filter(Booking.id == booking_id).first()
    if not booking:
        raise NotFound("Booking not found.")

    vehicle = lookup_vehicle(db, booking.vehicle_id)
    if not vehicle:
        raise NotFound("Vehicle not found.")

    bookings = _calendar_bookings(db, vehicle.id)
    own = [b for b in bookings if b.user_id == user_id]
    others = [b for b in bookings if b.user_id != user_id]

    user_days = sorted({day_key(day) for b in own for day in iter_days(b.start_time, b.end_time)})
    fully_booked = _fully_booked(_tally(others), vehicle.total_quantity)

    logger.debug(f"[Availability] booking={booking_id} vehicle={vehicle.id} "
                 f"fully_booked={len(fully_booked)} user_days={len(user_days)}")
    return {"fullyBookedDays": fully_booked, "userDays": user_days}
