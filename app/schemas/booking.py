from pydantic import BaseModel, Field
from datetime import datetime
from typing import Any, Optional

from app.models.booking import BookingStatus


class BookingCreate(BaseModel):
    car_id: int = Field(..., alias="carId", gt=0, le=2**31 - 1)
    start_date: str = Field(..., alias="startDate")   # YYYY-MM-DD or ISO datetime
    end_date: str = Field(..., alias="endDate")

    class Config:
        populate_by_name = True


class BookingTimeUpdate(BaseModel):
    start_time: str = Field(..., alias="startTime")
    end_time: str = Field(..., alias="endTime")

    class Config:
        populate_by_name = True


class BookingAttributeUpdate(BaseModel):
    field: str       # startTime | endTime | status | totalPrice
    value: Any = None


class VehicleSummary(BaseModel):
    id: int
    brand: str
    model: str

    class Config:
        from_attributes = True


class UserSummary(BaseModel):
    id: int
    name: str
    email: str

    class Config:
        from_attributes = True


class BookingOut(BaseModel):
    id: int
    user_id: int
    vehicle_id: int
    start_time: datetime
    end_time: datetime
    total_price: float
    status: BookingStatus
    created_at: datetime
    vehicle: Optional[VehicleSummary] = None

    class Config:
        from_attributes = True


class BookingAdminOut(BookingOut):
    user: Optional[UserSummary] = None


class BookingMessage(BaseModel):
    message: str
    booking: BookingOut


class UnavailableDaysOut(BaseModel):
    fullyBookedDays: list[str]


class EditableDaysOut(BaseModel):
    fullyBookedDays: list[str]
    userDays: list[str]


class BulkDeleteOut(BaseModel):
    message: str
    deletedCount: int
