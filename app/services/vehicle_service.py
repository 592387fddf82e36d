# app/services/vehicle_service.py
"""
Inventory Store: vehicle lookup and the available_quantity counter.
Used by booking_service, sweeper_service, availability_service and the cars router.

Counter changes are single UPDATE statements evaluated by the database, so two
sessions adjusting the same vehicle never overwrite each other's value.
None of these helpers commit; the caller owns the transaction.
"""

from typing import Optional

from sqlalchemy.orm import Session
from app.models.vehicle import Vehicle
from app.services.exceptions import InvalidInput, NotFound
from app.utils.dates import utcnow
from app.utils.logger import get_logger

logger = get_logger(__name__)


def lookup_vehicle(db: Session, vehicle_id: int, for_update: bool = False) -> Optional[Vehicle]:
    """Find a vehicle by id. Returns None if not found."""
    q = db.query(Vehicle).filter(Vehicle.id == vehicle_id)
    if for_update:
        # Row lock on PostgreSQL; SQLite serializes writers on its own
        q = q.with_for_update()
    return q.first()


def get_vehicle(db: Session, vehicle_id: int, for_update: bool = False) -> Vehicle:
    vehicle = lookup_vehicle(db, vehicle_id, for_update=for_update)
    if not vehicle:
        raise NotFound("Vehicle not found.")
    return vehicle


def list_vehicles(db: Session, brand: Optional[str] = None):
    q = db.query(Vehicle)
    if brand:
        q = q.filter(Vehicle.brand == brand)
    return q.order_by(Vehicle.id).all()


def create_vehicle(db: Session, brand: str, model: str, price_per_day: float, quantity: int) -> Vehicle:
    if quantity < 0:
        raise InvalidInput("Quantity cannot be negative.")
    if price_per_day < 0:
        raise InvalidInput("Daily price cannot be negative.")
    vehicle = Vehicle(
        brand=brand,
        model=model,
        price_per_day=price_per_day,
        total_quantity=quantity,
        available_quantity=quantity,
        created_at=utcnow(),
    )
    db.add(vehicle)
    db.commit()
    db.refresh(vehicle)
    logger.info(f"[Inventory] Added {vehicle.display_name} × {quantity}")
    return vehicle


def release_unit(db: Session, vehicle_id: int) -> bool:
    """
    available_quantity += 1. Not capped at total_quantity.
    Returns False when the vehicle no longer exists.
    """
    updated = (
        db.query(Vehicle)
        .filter(Vehicle.id == vehicle_id)
        .update({Vehicle.available_quantity: Vehicle.available_quantity + 1},
                synchronize_session=False)
    )
    if not updated:
        logger.warning(f"[Inventory] Vehicle {vehicle_id} missing — nothing to release")
    return bool(updated)


def reserve_unit(db: Session, vehicle_id: int) -> bool:
    """
    available_quantity -= 1, only while it is above zero.
    Returns False when no unit could be taken.
    """
    updated = (
        db.query(Vehicle)
        .filter(Vehicle.id == vehicle_id, Vehicle.available_quantity > 0)
        .update({Vehicle.available_quantity: Vehicle.available_quantity - 1},
                synchronize_session=False)
    )
    if not updated:
        logger.warning(f"[Inventory] Vehicle {vehicle_id} has no available units to reserve")
    return bool(updated)
