"""
SQLAlchemy ORM Model: Booking
Represents a reservation linking a guest to a property for a date interval.
"""

from sqlalchemy import String, Integer, Numeric, DateTime, Index, func
from sqlalchemy.orm import Mapped, mapped_column
from models.base import Base
from datetime import datetime
from decimal import Decimal
from typing import Optional


class Booking(Base):
    """
    Booking rows as written by the booking service.

    Status columns are plain strings rather than ENUMs: legacy imports wrote
    values outside the current vocabulary and the audit has to be able to see them.
    """
    __tablename__ = "bookings"
    __table_args__ = (
        Index('idx_bookings_property_dates', 'property_id', 'date_from', 'date_to'),
        Index('idx_bookings_room', 'property_id', 'room_number'),
        {'extend_existing': True},
    )

    # Primary Key
    booking_id: Mapped[str] = mapped_column(String(36), primary_key=True)

    # References (no FK constraints: properties and users may be deleted independently)
    property_id: Mapped[Optional[str]] = mapped_column(String(36))
    user_id: Mapped[Optional[str]] = mapped_column(String(36))

    # Contact details
    contact_name: Mapped[Optional[str]] = mapped_column(String(255))
    contact_email: Mapped[Optional[str]] = mapped_column(String(255))

    # Stay interval [date_from, date_to)
    date_from: Mapped[Optional[datetime]] = mapped_column(DateTime)
    date_to: Mapped[Optional[datetime]] = mapped_column(DateTime)

    guests: Mapped[Optional[int]] = mapped_column(Integer)
    total_price: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2))

    status: Mapped[Optional[str]] = mapped_column(String(20), comment="pending, confirmed, cancelled, completed")
    payment_status: Mapped[Optional[str]] = mapped_column(String(20), comment="pending, paid, failed, refunded")

    room_number: Mapped[Optional[str]] = mapped_column(String(20), comment="Allocated room, if any")

    # Timestamps
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime,
        server_default=func.now(),
        onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<Booking(booking_id={self.booking_id}, property_id={self.property_id}, status={self.status})>"
