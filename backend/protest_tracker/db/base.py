"""
Declarative base shared by all models.
"""

from sqlalchemy import Column, DateTime, func
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    """Adds a server-populated creation timestamp."""

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
