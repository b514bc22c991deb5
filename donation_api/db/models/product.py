"""
Product model - a donated item and its lifecycle fields.

``available`` flips to False exactly once (on conclusion), and ``donated_at``
is set in the same statement. ``owner_id`` is written at insert and never again.
"""

import uuid
from datetime import date, datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import JSON, CheckConstraint, Date, DateTime, ForeignKey, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from donation_api.db.base import Base

if TYPE_CHECKING:
    from donation_api.db.models.user import User


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Product(Base):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint(
            "(available AND donated_at IS NULL) OR (NOT available AND donated_at IS NOT NULL)",
            name="ck_products_donated_at_matches_available",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    state: Mapped[str] = mapped_column(String(64), nullable=False)
    purchased_at: Mapped[date] = mapped_column(Date, nullable=False)
    images: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    owner_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    receiver_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True, index=True)
    available: Mapped[bool] = mapped_column(default=True, nullable=False)
    donated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Python-side default keeps ordering stable when several rows land within one second;
    # the server default covers rows written outside the ORM
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Read-only expansions; writes always go through the *_id columns
    owner: Mapped["User"] = relationship("User", foreign_keys=[owner_id], lazy="raise", viewonly=True)
    receiver: Mapped["User"] = relationship("User", foreign_keys=[receiver_id], lazy="raise", viewonly=True)

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, name={self.name}, available={self.available})>"
