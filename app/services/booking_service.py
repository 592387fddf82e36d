# app/services/booking_service.py
"""
Booking Ledger: creation, payment, cancellation, completion, edits and deletion.

Inventory side effects (vehicle_service.reserve_unit / release_unit):
  - create:   -1 only when the booking starts today (UTC)
  - cancel:   +1
  - complete: +1
  - pay, edits, deletes: none

Status changes go through apply_transition(), a conditional UPDATE on the
status the caller last saw, so a booking changed by another request or by the
sweeper in the meantime is never transitioned twice.
"""

import math
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy.orm import Session, joinedload
from app.config import settings
from app.models.booking import Booking, BookingStatus
from app.models.user import User
from app.services.availability_service import remaining_capacity
from app.services.booking_status import TERMINAL_STATUSES, can_transition, validate_transition
from app.services.exceptions import (
    BookingServiceError, CapacityExhausted, Forbidden, InvalidInput, InvalidState, NotFound,
)
from app.services.vehicle_service import get_vehicle, release_unit, reserve_unit
from app.utils.dates import MS_PER_DAY, check_range, end_of_day, parse_datetime, start_of_day, utcnow
from app.utils.logger import get_logger

logger = get_logger(__name__)

# Administrative override: request field name → Booking column
EDITABLE_FIELDS = {
    "startTime": "start_time",
    "endTime": "end_time",
    "status": "status",
    "totalPrice": "total_price",
}


# ── Lookups ──────────────────────────────────────────────────────────────────

def get_booking(db: Session, booking_id: int) -> Booking:
    booking = db.query(Booking).filter(Booking.id == booking_id).first()
    if not booking:
        raise NotFound("Booking not found.")
    return booking


def list_user_bookings(db: Session, user_id: int) -> list[Booking]:
    """The user's bookings, newest first. NotFound when there are none."""
    bookings = (
        db.query(Booking)
        .options(joinedload(Booking.vehicle))
        .filter(Booking.user_id == user_id)
        .order_by(Booking.created_at.desc(), Booking.id.desc())
        .all()
    )
    if not bookings:
        raise NotFound("No bookings found.")
    return bookings


def list_all_bookings(db: Session) -> list[Booking]:
    return (
        db.query(Booking)
        .options(joinedload(Booking.vehicle), joinedload(Booking.user))
        .order_by(Booking.created_at.desc(), Booking.id.desc())
        .all()
    )


# ── Pricing ──────────────────────────────────────────────────────────────────

def compute_price(price_per_day: float, start: datetime, end: datetime) -> float:
    """Daily price × number of booked days (start and end day inclusive)."""
    if settings.LEGACY_PRICE_DIVISOR:
        duration_ms = (end - start) / timedelta(milliseconds=1)
        return price_per_day * (duration_ms / (MS_PER_DAY + 1))
    days = (end.date() - start.date()).days + 1
    return round(price_per_day * days, 2)


# ── Transitions ──────────────────────────────────────────────────────────────

def apply_transition(db: Session, booking_id: int, expected: BookingStatus,
                     target: BookingStatus) -> bool:
    """
    Sets status to target only if it is still `expected`. Does not commit.
    Returns False when the row was changed (or deleted) since it was read.
    """
    updated = (
        db.query(Booking)
        .filter(Booking.id == booking_id, Booking.status == expected)
        .update({Booking.status: target}, synchronize_session=False)
    )
    return bool(updated)


def create_booking(db: Session, user_id: int, vehicle_id: int, start_date, end_date) -> Booking:
    start_time = start_of_day(parse_datetime(start_date, "startDate"))
    end_time = end_of_day(parse_datetime(end_date, "endDate"))
    if end_time < start_time:
        raise InvalidInput("End date must not be before start date.")
    check_range(start_time, end_time, settings.MAX_BOOKING_DAYS, settings.MAX_BOOKING_YEAR)

    try:
        # Locks the vehicle row until commit so concurrent requests for the
        # same car see each other's bookings in the capacity check.
        vehicle = get_vehicle(db, vehicle_id, for_update=True)

        capacity = remaining_capacity(db, vehicle, start_time, end_time)
        if capacity <= 0:
            logger.warning(f"[Booking] No capacity for vehicle={vehicle_id} "
                           f"{start_time.date()}..{end_time.date()}")
            raise CapacityExhausted("No cars available for the selected dates. Try other dates.")

        if start_time.date() == utcnow().date():
            reserve_unit(db, vehicle.id)

        booking = Booking(
            user_id=user_id,
            vehicle_id=vehicle.id,
            start_time=start_time,
            end_time=end_time,
            total_price=compute_price(vehicle.price_per_day, start_time, end_time),
            status=BookingStatus.PENDING,
            created_at=utcnow(),
        )
        db.add(booking)
        db.commit()
    except BookingServiceError:
        db.rollback()
        raise

    db.refresh(booking)
    logger.info(f"[Booking] Created {booking.id} user={user_id} vehicle={vehicle_id} "
                f"{start_time.date()}..{end_time.date()} price={booking.total_price}")
    return booking


def pay_booking(db: Session, booking_id: int) -> Booking:
    booking = get_booking(db, booking_id)
    if not can_transition(booking.status, BookingStatus.ACTIVE):
        raise InvalidState("Payment is not possible for this booking status.")

    if not apply_transition(db, booking.id, BookingStatus.PENDING, BookingStatus.ACTIVE):
        db.rollback()
        raise InvalidState("Booking status changed, payment not applied.")
    db.commit()
    db.refresh(booking)
    logger.info(f"[Booking] Paid {booking.id}")
    return booking


def cancel_booking(db: Session, booking_id: int, acting_user: User, forced: bool = False) -> Booking:
    """
    User cancel: owner only, pending bookings only.
    Forced (admin) cancel: also reaches completed bookings.
    Active and cancelled bookings can never be cancelled.
    """
    booking = get_booking(db, booking_id)
    if forced:
        if not acting_user.is_admin:
            raise Forbidden("Only administrators can force-cancel bookings.")
    elif booking.user_id != acting_user.id:
        raise Forbidden("You cannot cancel this booking.")

    previous = BookingStatus(booking.status)
    validate_transition(previous, BookingStatus.CANCELLED, forced=forced)

    if not apply_transition(db, booking.id, previous, BookingStatus.CANCELLED):
        db.rollback()
        raise InvalidState("Booking status changed, cancellation not applied.")
    release_unit(db, booking.vehicle_id)
    db.commit()
    db.refresh(booking)
    logger.info(f"[Booking] Cancelled {booking.id} (was {previous.value}) by user={acting_user.id}"
                f"{' [forced]' if forced else ''}")
    return booking


def complete_booking(db: Session, booking_id: int, vehicle_id: int) -> bool:
    """active → completed and release the unit. Returns False if no longer active."""
    if not apply_transition(db, booking_id, BookingStatus.ACTIVE, BookingStatus.COMPLETED):
        db.rollback()
        return False
    release_unit(db, vehicle_id)
    db.commit()
    return True


def expire_pending_booking(db: Session, booking_id: int, vehicle_id: int) -> bool:
    """pending → cancelled and release the unit. Returns False if no longer pending."""
    if not apply_transition(db, booking_id, BookingStatus.PENDING, BookingStatus.CANCELLED):
        db.rollback()
        return False
    release_unit(db, vehicle_id)
    db.commit()
    return True


# ── Edits ────────────────────────────────────────────────────────────────────

def update_booking_time(db: Session, booking_id: int, start_time, end_time) -> Booking:
    """Overwrites the interval as given. Availability is not re-checked."""
    booking = get_booking(db, booking_id)
    new_start = parse_datetime(start_time, "startTime")
    new_end = parse_datetime(end_time, "endTime")
    if new_start >= new_end:
        raise InvalidInput("End time must be later than start time.")
    check_range(new_start, new_end, settings.MAX_BOOKING_DAYS, settings.MAX_BOOKING_YEAR)

    booking.start_time = new_start
    booking.end_time = new_end
    db.commit()
    db.refresh(booking)
    logger.info(f"[Booking] Rescheduled {booking.id} to {new_start.isoformat()}..{new_end.isoformat()}")
    return booking


def _coerce_attribute(field: str, value: Any):
    if field in ("startTime", "endTime"):
        parsed = parse_datetime(value, field)
        check_range(parsed, parsed, settings.MAX_BOOKING_DAYS, settings.MAX_BOOKING_YEAR)
        return parsed
    if field == "status":
        try:
            return BookingStatus(value)
        except ValueError:
            raise InvalidInput(f"Unknown booking status: {value!r}")
    if isinstance(value, bool):
        raise InvalidInput(f"Invalid value for {field}: {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        raise InvalidInput(f"Invalid value for {field}: {value!r}")
    if not math.isfinite(number):
        raise InvalidInput(f"Invalid value for {field}: {value!r}")
    return number


def update_booking_attribute(db: Session, booking_id: int, field: str, value: Any) -> Booking:
    """
    Administrative override: writes one allow-listed field directly.
    Skips the transition table and inventory adjustments.
    """
    if field not in EDITABLE_FIELDS:
        logger.warning(f"[Admin] Rejected update of non-editable field {field!r} on booking {booking_id}")
        raise InvalidInput("Field cannot be updated.")

    booking = get_booking(db, booking_id)
    coerced = _coerce_attribute(field, value)
    setattr(booking, EDITABLE_FIELDS[field], coerced)
    db.commit()
    db.refresh(booking)
    logger.warning(f"[Admin] Booking {booking.id}: {field} overridden to {coerced!r}")
    return booking


# ── Deletion ─────────────────────────────────────────────────────────────────

def delete_booking(db: Session, booking_id: int, acting_user: User) -> None:
    booking = get_booking(db, booking_id)
    if booking.user_id != acting_user.id:
        raise Forbidden("You cannot delete this booking.")
    if booking.status not in TERMINAL_STATUSES:
        raise InvalidState("Only completed or cancelled bookings can be deleted.")
    db.delete(booking)
    db.commit()
    logger.info(f"[Booking] Deleted {booking_id} by user={acting_user.id}")


def bulk_delete_terminal(db: Session) -> int:
    """Deletes every completed or cancelled booking. Returns the number removed."""
    deleted = (
        db.query(Booking)
        .filter(Booking.status.in_(TERMINAL_STATUSES))
        .delete(synchronize_session=False)
    )
    db.commit()
    logger.info(f"[Booking] Bulk-deleted {deleted} completed/cancelled bookings")
    return deleted
