# app/services/payment_service.py
"""
Payment records. A payment row is bookkeeping only: moving the booking to
'active' is booking_service.pay_booking's job, gateways are out of scope.
"""

from sqlalchemy.orm import Session
from app.models.payment import Payment, PAYMENT_METHODS
from app.models.user import User
from app.services.booking_service import get_booking
from app.services.exceptions import Forbidden, InvalidInput
from app.utils.dates import utcnow
from app.utils.logger import get_logger

logger = get_logger(__name__)


def record_payment(db: Session, booking_id: int, user: User, method: str) -> Payment:
    if method not in PAYMENT_METHODS:
        raise InvalidInput(f"Unsupported payment method: {method!r}")

    booking = get_booking(db, booking_id)
    if booking.user_id != user.id:
        raise Forbidden("You cannot pay for this booking.")

    payment = Payment(
        booking_id=booking.id,
        user_id=user.id,
        amount=booking.total_price,
        method=method,
        status="pending",
        created_at=utcnow(),
    )
    db.add(payment)
    db.commit()
    db.refresh(payment)
    logger.info(f"[Payment] Recorded {payment.id} booking={booking.id} amount={payment.amount} via {method}")
    return payment


def list_user_payments(db: Session, user_id: int) -> list[Payment]:
    return (
        db.query(Payment)
        .filter(Payment.user_id == user_id)
        .order_by(Payment.created_at.desc(), Payment.id.desc())
        .all()
    )
