from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class PaymentCreate(BaseModel):
    booking_id: int = Field(..., alias="bookingId", gt=0, le=2**31 - 1)
    method: str      # card | paypal

    class Config:
        populate_by_name = True


class PaymentOut(BaseModel):
    id: int
    booking_id: Optional[int]
    user_id: int
    amount: float
    method: str
    status: str
    created_at: datetime

    class Config:
        from_attributes = True
