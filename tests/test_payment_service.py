"""Unit tests for payment records."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from app.models.booking import BookingStatus
from app.services.exceptions import Forbidden, InvalidInput, NotFound
from app.services.payment_service import list_user_payments, record_payment


class TestRecordPayment:
    def test_amount_copied_from_booking(self, db, make_user, make_vehicle, make_booking):
        user = make_user()
        booking = make_booking(user, make_vehicle(), total_price=150.0)

        payment = record_payment(db, booking.id, user, "card")

        assert payment.amount == 150.0
        assert payment.status == "pending"
        assert payment.booking_id == booking.id

    def test_booking_status_unchanged(self, db, make_user, make_vehicle, make_booking):
        user = make_user()
        booking = make_booking(user, make_vehicle())
        record_payment(db, booking.id, user, "paypal")
        db.refresh(booking)
        assert booking.status == BookingStatus.PENDING

    def test_unknown_method(self, db, make_user, make_vehicle, make_booking):
        user = make_user()
        booking = make_booking(user, make_vehicle())
        with pytest.raises(InvalidInput):
            record_payment(db, booking.id, user, "cash")

    def test_not_owner(self, db, make_user, make_vehicle, make_booking):
        booking = make_booking(make_user(), make_vehicle())
        with pytest.raises(Forbidden):
            record_payment(db, booking.id, make_user(), "card")

    def test_unknown_booking(self, db, make_user):
        with pytest.raises(NotFound):
            record_payment(db, 77, make_user(), "card")

    def test_list_only_own_payments(self, db, make_user, make_vehicle, make_booking):
        me, other, car = make_user(), make_user(), make_vehicle(quantity=3)
        record_payment(db, make_booking(me, car).id, me, "card")
        record_payment(db, make_booking(other, car).id, other, "card")

        payments = list_user_payments(db, me.id)

        assert [p.user_id for p in payments] == [me.id]
