"""Product request/response schemas - REST API contract."""

import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field

from donation_api.schemas.user import UserPublic


class ImageRef(BaseModel):
    """One uploaded file as handed over by the file intake."""

    filename: str


# Lifecycle fields are optional here so the service reports the first missing one itself.
class ProductCreate(BaseModel):
    name: str | None = None
    description: str | None = None
    state: str | None = None
    purchased_at: date | None = None
    images: list[ImageRef] = Field(default_factory=list)


class ProductUpdate(BaseModel):
    """Full replacement of the descriptive fields; every field must be sent."""

    name: str | None = None
    description: str | None = None
    state: str | None = None
    purchased_at: date | None = None
    images: list[str] | None = None


class ProductResponse(BaseModel):
    id: uuid.UUID
    name: str
    description: str
    state: str
    purchased_at: date
    images: list[str]
    available: bool
    donated_at: datetime | None = None
    created_at: datetime
    updated_at: datetime | None = None
    owner_id: int
    receiver_id: int | None = None
    # Expanded relations; None when not set or when the referenced user no longer exists
    owner: UserPublic | None = None
    receiver: UserPublic | None = None


class MessageResponse(BaseModel):
    message: str
