# app/models/payment.py
"""
Payment records. Stored independently of the booking; booking status is
driven by booking_service.pay_booking, not by these rows.
"""

from sqlalchemy import Column, Integer, String, DateTime, Float, ForeignKey, Index
from app.database import Base

PAYMENT_METHODS = {"card", "paypal"}
PAYMENT_STATUSES = {"pending", "completed", "failed"}


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    booking_id = Column(Integer, ForeignKey("bookings.id", ondelete="SET NULL"), index=True)  # nulled when the booking is deleted
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    amount = Column(Float, nullable=False)
    method = Column(String(20), nullable=False)              # card | paypal
    status = Column(String(20), nullable=False, default="pending")  # pending | completed | failed
    created_at = Column(DateTime, nullable=False)

    __table_args__ = (
        Index("ix_payments_user_status", "user_id", "status"),
    )

    def __repr__(self):
        return f"<Payment {self.id} booking={self.booking_id} amount={self.amount} status={self.status}>"
