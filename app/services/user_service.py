# app/services/user_service.py
"""User lookup helpers. Registration and login live outside this service."""

from typing import Optional

from sqlalchemy.orm import Session
from app.models.user import User
from app.services.exceptions import InvalidInput
from app.utils.dates import utcnow
from app.utils.logger import get_logger

logger = get_logger(__name__)


def lookup_user(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def create_user(db: Session, name: str, email: str, is_admin: bool = False) -> User:
    if db.query(User).filter(User.email == email).first():
        raise InvalidInput(f"Email {email} already registered")
    user = User(name=name, email=email, is_admin=is_admin, created_at=utcnow())
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"[Users] Added {email}{' (admin)' if is_admin else ''}")
    return user
