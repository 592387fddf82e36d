from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class VehicleCreate(BaseModel):
    brand: str
    model: str
    price_per_day: float = Field(..., alias="pricePerDay")
    quantity: int = 1

    class Config:
        populate_by_name = True


class VehicleOut(BaseModel):
    id: int
    brand: str
    model: str
    price_per_day: float
    total_quantity: int
    available_quantity: int
    created_at: Optional[datetime]

    class Config:
        from_attributes = True
