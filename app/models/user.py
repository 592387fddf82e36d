# app/models/user.py
"""
Users known to the booking backend. Login and sessions are handled elsewhere;
this table only backs ownership checks and the admin booking view.
"""

from sqlalchemy import Column, Integer, String, DateTime, Boolean
from app.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    email = Column(String(200), unique=True, nullable=False, index=True)
    is_admin = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime)

    def __repr__(self):
        return f"<User {self.id} email={self.email} admin={self.is_admin}>"
