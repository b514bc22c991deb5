"""
SQLAlchemy declarative base and metadata.
Single place the ORM models and Alembic migrations share.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass
