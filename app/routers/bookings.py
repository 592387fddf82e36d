# app/routers/bookings.py
"""
Booking endpoints — thin wrappers around booking_service / availability_service.
Service errors (NotFound, Forbidden, InvalidState, ...) are turned into HTTP
responses by the handler registered in main.py.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.user import User
from app.routers.deps import get_current_user, parse_id, require_admin
from app.schemas.booking import (
    BookingAdminOut, BookingAttributeUpdate, BookingCreate, BookingMessage, BookingOut,
    BookingTimeUpdate, BulkDeleteOut, EditableDaysOut, UnavailableDaysOut,
)
from app.schemas.report import BookingSummaryOut
from app.services import availability_service, booking_service, report_service

router = APIRouter()


def _message(text: str, booking) -> BookingMessage:
    return BookingMessage(message=text, booking=BookingOut.model_validate(booking))


@router.get("/bookings", response_model=list[BookingOut], summary="Caller's bookings, newest first")
def list_my_bookings(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    bookings = booking_service.list_user_bookings(db, user.id)
    return [BookingOut.model_validate(b) for b in bookings]


@router.get("/admin/bookings", response_model=list[BookingAdminOut], summary="All bookings (admin)")
def list_all_bookings(_: User = Depends(require_admin), db: Session = Depends(get_db)):
    return [BookingAdminOut.model_validate(b) for b in booking_service.list_all_bookings(db)]


@router.post("/bookings", response_model=BookingMessage, status_code=status.HTTP_201_CREATED,
             summary="Reserve a car for a date range")
def create_booking(body: BookingCreate, user: User = Depends(get_current_user),
                   db: Session = Depends(get_db)):
    booking = booking_service.create_booking(db, user.id, body.car_id, body.start_date, body.end_date)
    return _message("Booking created.", booking)


@router.get("/bookings/summary", response_model=BookingSummaryOut, summary="Booking analytics (admin)")
def booking_summary(_: User = Depends(require_admin), db: Session = Depends(get_db)):
    return report_service.get_booking_summary(db)


@router.delete("/bookings/terminal", response_model=BulkDeleteOut,
               summary="Delete all completed and cancelled bookings (admin)")
def delete_terminal_bookings(_: User = Depends(require_admin), db: Session = Depends(get_db)):
    deleted = booking_service.bulk_delete_terminal(db)
    return BulkDeleteOut(message="All completed and cancelled bookings deleted.", deletedCount=deleted)


@router.delete("/bookings/{booking_id}", summary="Delete a finished booking")
def delete_booking(booking_id: str, user: User = Depends(get_current_user),
                   db: Session = Depends(get_db)):
    booking_service.delete_booking(db, parse_id(booking_id), user)
    return {"message": "Booking deleted."}


@router.patch("/bookings/{booking_id}/cancel", response_model=BookingMessage, summary="Cancel own booking")
def cancel_booking(booking_id: str, user: User = Depends(get_current_user),
                   db: Session = Depends(get_db)):
    booking = booking_service.cancel_booking(db, parse_id(booking_id), user)
    return _message("Booking cancelled.", booking)


@router.patch("/admin/bookings/{booking_id}/cancel", response_model=BookingMessage,
              summary="Force-cancel a booking (admin)")
def force_cancel_booking(booking_id: str, admin: User = Depends(require_admin),
                         db: Session = Depends(get_db)):
    booking = booking_service.cancel_booking(db, parse_id(booking_id), admin, forced=True)
    return _message("Booking cancelled.", booking)


@router.patch("/bookings/{booking_id}/pay", response_model=BookingMessage, summary="Mark booking as paid")
def pay_booking(booking_id: str, _: User = Depends(get_current_user), db: Session = Depends(get_db)):
    booking = booking_service.pay_booking(db, parse_id(booking_id))
    return _message("Booking paid.", booking)


@router.patch("/bookings/{booking_id}/time", response_model=BookingMessage, summary="Change booking dates")
def update_booking_time(booking_id: str, body: BookingTimeUpdate,
                        _: User = Depends(get_current_user), db: Session = Depends(get_db)):
    booking = booking_service.update_booking_time(db, parse_id(booking_id), body.start_time, body.end_time)
    return _message("Booking time updated.", booking)


@router.patch("/bookings/{booking_id}", response_model=BookingMessage,
              summary="Override a single booking field (admin)")
def update_booking_attribute(booking_id: str, body: BookingAttributeUpdate,
                             _: User = Depends(require_admin), db: Session = Depends(get_db)):
    booking = booking_service.update_booking_attribute(db, parse_id(booking_id), body.field, body.value)
    return _message("Booking updated.", booking)


@router.get("/bookings/{booking_id}/editable-days", response_model=EditableDaysOut,
            summary="Calendar for editing a booking")
def editable_days(booking_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return availability_service.compute_editable_days(db, parse_id(booking_id), user.id)


@router.get("/cars/{car_id}/unavailable-days", response_model=UnavailableDaysOut,
            summary="Days on which the car is fully booked")
def unavailable_days(car_id: str, db: Session = Depends(get_db)):
    days = availability_service.compute_unavailable_days(db, parse_id(car_id, "car"))
    return UnavailableDaysOut(fullyBookedDays=days)
