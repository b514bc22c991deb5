"""User request/response schemas - API contract and validation."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class UserBase(BaseModel):
    email: EmailStr
    full_name: str
    phone: str | None = None


class UserCreate(UserBase):
    # bcrypt accepts max 72 bytes
    password: str = Field(..., min_length=1, max_length=72)


class LoginRequest(BaseModel):
    email: str
    password: str


class UserPublic(UserBase):
    """Profile exposed on expanded products and registration. No password hash."""

    id: int
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
