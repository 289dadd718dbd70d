"""
SQLAlchemy ORM Models: Property and User reference tables
Only the identifiers matter to the audit; the remaining columns are owned elsewhere.
"""

from sqlalchemy import String, Boolean, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column
from models.base import Base
from datetime import datetime
from typing import Optional


class Property(Base):
    __tablename__ = "properties"
    __table_args__ = {'extend_existing': True}

    property_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[Optional[str]] = mapped_column(String(100))
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime, server_default=func.now())

    def __repr__(self) -> str:
        return f"<Property(property_id={self.property_id}, name='{self.name}')>"


class User(Base):
    __tablename__ = "users"
    __table_args__ = {'extend_existing': True}

    user_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    email: Mapped[Optional[str]] = mapped_column(String(255))
    name: Mapped[Optional[str]] = mapped_column(String(255))
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime, server_default=func.now())

    def __repr__(self) -> str:
        return f"<User(user_id={self.user_id})>"
