# Booking Audit - Models Package

# Import all ORM models to register them with SQLAlchemy's declarative base
# IMPORTANT: Use relative imports to avoid duplicate module loading issues
from .base import Base, SessionLocal, create_session
from .orm_booking import Booking
from .orm_property import Property, User
from .booking import BookingRecord, BookingStatus, PaymentStatus, REQUIRED_FIELDS

__all__ = [
    'Base',
    'SessionLocal',
    'create_session',
    'Booking',
    'Property',
    'User',
    'BookingRecord',
    'BookingStatus',
    'PaymentStatus',
    'REQUIRED_FIELDS',
]
