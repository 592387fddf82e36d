# app/routers/deps.py
"""
Shared router dependencies: caller identity and path id parsing.
The auth layer in front of this API sets X-User-Id after verifying the session.
"""

from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.user import User
from app.services.exceptions import Forbidden, InvalidInput, Unauthorized
from app.services.user_service import lookup_user


MAX_ID = 2**31 - 1   # INTEGER primary keys


def _to_id(raw: Optional[str]) -> Optional[int]:
    """ASCII decimal within the INTEGER column range, else None."""
    if not raw or not (raw.isascii() and raw.isdecimal()):
        return None
    value = int(raw)
    return value if 0 < value <= MAX_ID else None


def parse_id(raw: str, what: str = "booking") -> int:
    """Path ids arrive as strings so malformed ones map to a 400, not a 422."""
    value = _to_id(raw)
    if value is None:
        raise InvalidInput(f"Invalid {what} id.")
    return value


def get_current_user(
    x_user_id: Optional[str] = Header(default=None),
    db: Session = Depends(get_db),
) -> User:
    user_id = _to_id(x_user_id)
    if user_id is None:
        raise Unauthorized("Authentication required.")
    user = lookup_user(db, user_id)
    if not user:
        raise Unauthorized("Unknown user.")
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise Forbidden("Administrator access required.")
    return user
