# app/models/vehicle.py
"""
Rental fleet table (Inventory Store).
One row per car model; total_quantity units exist, available_quantity is a
hand-maintained counter adjusted by booking_service and sweeper_service.
"""

from sqlalchemy import Column, Integer, String, DateTime, Float, CheckConstraint
from app.database import Base


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    brand = Column(String(100), nullable=False)
    model = Column(String(100), nullable=False)
    price_per_day = Column(Float, nullable=False)
    total_quantity = Column(Integer, nullable=False, default=1)
    available_quantity = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime)

    __table_args__ = (
        CheckConstraint("total_quantity >= 0", name="check_vehicle_total_quantity"),
    )

    @property
    def display_name(self) -> str:
        return f"{self.brand} {self.model}"

    def __repr__(self):
        return f"<Vehicle {self.id} {self.display_name} available={self.available_quantity}/{self.total_quantity}>"
