from datetime import datetime

from pydantic import BaseModel, EmailStr, Field
from sqlalchemy import Column, Integer, DateTime, String, JSON, func

from enums.permission import Permission
from models.base import Base


class User(Base):
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    # Always stored lowercase, see AuthService.signup
    email = Column(String, nullable=False, unique=True)
    # PBKDF2 hash string, never the plaintext password
    password = Column(String, nullable=False)
    permissions = Column(JSON, nullable=False, default=lambda: [Permission.USER.value])
    created_at = Column(DateTime, default=func.now())

    # Password reset (single-use, time-boxed)
    reset_token = Column(String, nullable=True, unique=True)
    reset_token_expiry = Column(DateTime, nullable=True)


class UserDTO(BaseModel):
    id: int | None = None
    name: str | None = None
    email: str | None = None
    password: str | None = None
    permissions: list[Permission] | None = None
    created_at: datetime | None = None
    reset_token: str | None = None
    reset_token_expiry: datetime | None = None


class SignupRequestDTO(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
