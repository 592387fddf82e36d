from pydantic import BaseModel


class StatusCount(BaseModel):
    status: str
    totalBookings: int


class CarDemand(BaseModel):
    name: str
    bookings: int


class BookingSummaryOut(BaseModel):
    bookingStats: list[StatusCount]
    mostPopularCar: CarDemand
    leastPopularCar: CarDemand
