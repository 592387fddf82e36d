# app/models/booking.py
"""
Booking ledger table.
start_time is the first booked day at 00:00:00.000 UTC, end_time the last booked
day at 23:59:59.999 UTC. Status transitions live in services/booking_status.py.
"""

import enum

from sqlalchemy import Column, Integer, DateTime, Float, Enum, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base


class BookingStatus(str, enum.Enum):
    PENDING = "pending"        # created, waiting for payment
    ACTIVE = "active"          # paid
    COMPLETED = "completed"    # end_time elapsed while active
    CANCELLED = "cancelled"


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False, index=True)
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=False, index=True)
    total_price = Column(Float, nullable=False, default=0)
    status = Column(
        Enum(BookingStatus, name="booking_status", native_enum=False,
             values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=BookingStatus.PENDING,
        index=True,
    )
    created_at = Column(DateTime, nullable=False, index=True)

    user = relationship("User")
    vehicle = relationship("Vehicle")

    def __repr__(self):
        return f"<Booking {self.id} vehicle={self.vehicle_id} user={self.user_id} status={self.status}>"
