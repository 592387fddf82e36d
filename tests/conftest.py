"""Shared fixtures: an in-memory SQLite session and row factories."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Must be set before app.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_FILE", "")
os.environ.setdefault("SWEEPER_ENABLED", "false")

import pytest
from datetime import datetime
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401  registers every table on Base.metadata
from app.database import Base
from app.models.booking import Booking, BookingStatus
from app.models.user import User
from app.models.vehicle import Vehicle
from app.utils.dates import end_of_day, parse_datetime, start_of_day, utcnow


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(name=None, is_admin=False):
        counter["n"] += 1
        user = User(
            name=name or f"User {counter['n']}",
            email=f"user{counter['n']}@example.com",
            is_admin=is_admin,
            created_at=utcnow(),
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_vehicle(db):
    def _make(brand="Toyota", model="Corolla", price_per_day=40.0, quantity=1, available=None):
        vehicle = Vehicle(
            brand=brand,
            model=model,
            price_per_day=price_per_day,
            total_quantity=quantity,
            available_quantity=quantity if available is None else available,
            created_at=utcnow(),
        )
        db.add(vehicle)
        db.commit()
        db.refresh(vehicle)
        return vehicle

    return _make


@pytest.fixture
def make_booking(db):
    """Inserts a booking row directly, bypassing booking_service."""
    def _make(user, vehicle, start="2030-06-10", end="2030-06-12",
              status=BookingStatus.PENDING, created_at: datetime = None, total_price=0.0):
        booking = Booking(
            user_id=user.id,
            vehicle_id=vehicle.id,
            start_time=start_of_day(parse_datetime(start)),
            end_time=end_of_day(parse_datetime(end)),
            total_price=total_price,
            status=status,
            created_at=created_at or utcnow(),
        )
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    return _make
