# app/routers/payments.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.user import User
from app.routers.deps import get_current_user
from app.schemas.payment import PaymentCreate, PaymentOut
from app.services import payment_service

router = APIRouter()


@router.post("/payments", response_model=PaymentOut, status_code=status.HTTP_201_CREATED,
             summary="Record a payment for a booking")
def create_payment(body: PaymentCreate, user: User = Depends(get_current_user),
                   db: Session = Depends(get_db)):
    return payment_service.record_payment(db, body.booking_id, user, body.method)


@router.get("/payments", response_model=list[PaymentOut], summary="Caller's payments")
def list_payments(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return payment_service.list_user_payments(db, user.id)
