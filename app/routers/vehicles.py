# app/routers/vehicles.py
"""Rental fleet — list, inspect and add cars."""

from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.user import User
from app.routers.deps import parse_id, require_admin
from app.schemas.vehicle import VehicleCreate, VehicleOut
from app.services import vehicle_service

router = APIRouter()


@router.get("/cars", response_model=list[VehicleOut], summary="List cars")
def list_cars(brand: Optional[str] = None, db: Session = Depends(get_db)):
    return vehicle_service.list_vehicles(db, brand)


@router.get("/cars/{car_id}", response_model=VehicleOut, summary="Car details with current availability")
def get_car(car_id: str, db: Session = Depends(get_db)):
    return vehicle_service.get_vehicle(db, parse_id(car_id, "car"))


@router.post("/cars", response_model=VehicleOut, status_code=status.HTTP_201_CREATED,
             summary="Add a car to the fleet (admin)")
def add_car(body: VehicleCreate, _: User = Depends(require_admin), db: Session = Depends(get_db)):
    return vehicle_service.create_vehicle(db, body.brand, body.model, body.price_per_day, body.quantity)
