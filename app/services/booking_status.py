# app/services/booking_status.py
"""
Booking lifecycle transitions.

    pending ──pay──▶ active ──sweeper──▶ completed
       │                                   │
       └──cancel──▶ cancelled ◀──forced────┘

Forced transitions are only reachable through the admin cancel path.
booking_service.update_booking_attribute writes status directly and skips this table.
"""

from app.models.booking import BookingStatus
from app.services.exceptions import InvalidState

ALLOWED_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.ACTIVE, BookingStatus.CANCELLED},
    BookingStatus.ACTIVE: {BookingStatus.COMPLETED},
    BookingStatus.COMPLETED: set(),
    BookingStatus.CANCELLED: set(),
}

FORCED_TRANSITIONS = {
    BookingStatus.COMPLETED: {BookingStatus.CANCELLED},
}

# Bookings in these states count against capacity
HOLDING_STATUSES = (BookingStatus.PENDING, BookingStatus.ACTIVE)
# Bookings in these states may be deleted
TERMINAL_STATUSES = (BookingStatus.COMPLETED, BookingStatus.CANCELLED)

_REJECTION_MESSAGES = {
    (BookingStatus.ACTIVE, BookingStatus.CANCELLED): "Paid bookings cannot be cancelled.",
    (BookingStatus.CANCELLED, BookingStatus.CANCELLED): "Booking is already cancelled.",
}


def can_transition(current: BookingStatus, target: BookingStatus, forced: bool = False) -> bool:
    current, target = BookingStatus(current), BookingStatus(target)
    if target in ALLOWED_TRANSITIONS.get(current, set()):
        return True
    return forced and target in FORCED_TRANSITIONS.get(current, set())


def validate_transition(current: BookingStatus, target: BookingStatus, forced: bool = False) -> None:
    """Raises InvalidState if current -> target is not allowed."""
    if can_transition(current, target, forced):
        return
    current, target = BookingStatus(current), BookingStatus(target)
    message = _REJECTION_MESSAGES.get(
        (current, target),
        f"Cannot move booking from '{current.value}' to '{target.value}'.",
    )
    raise InvalidState(message)
