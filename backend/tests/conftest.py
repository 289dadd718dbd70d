"""
Booking Audit - pytest Configuration and Fixtures

Provides shared test fixtures for:
- A fixed reference time for date-relative rules
- Booking document factory (clean by default, override what a test needs)
- In-memory booking stores and rule contexts
- SQLite-backed ORM session for repository tests
"""

import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest

# Add src to path for imports
backend_src = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(backend_src.absolute()))

from database.audit.consistency_checker import BookingConsistencyChecker  # noqa: E402
from database.audit.rules import RuleContext  # noqa: E402
from database.repositories.booking_store import InMemoryBookingStore  # noqa: E402


# ============================================================================
# Reference Time
# ============================================================================

FIXED_NOW = datetime(2024, 6, 15, 12, 0, 0)


@pytest.fixture
def now():
    """Reference 'now' shared by every audit test (naive UTC)."""
    return FIXED_NOW


# ============================================================================
# Sample Data Fixtures
# ============================================================================

@pytest.fixture
def make_booking(now):
    """
    Factory for booking documents that pass every consistency rule.

    Usage:
        doc = make_booking("b1", status="pending")
        doc = make_booking("b2", allocated_room={"room_number": "101"})

    Pass ``drop=("status",)`` to remove a key entirely (absent, not null).
    """
    def _make(booking_id, drop=(), **overrides):
        check_in = now + timedelta(days=10, hours=2)
        document = {
            'booking_id': booking_id,
            'property_id': 'p1',
            'user_id': 'u1',
            'contact_details': {
                'name': 'Asha Rao',
                'email': f'{booking_id}@example.com',
            },
            'date_from': check_in,
            'date_to': check_in + timedelta(days=3),
            'guests': 2,
            'total_price': 300.0,
            'status': 'confirmed',
            'payment_status': 'paid',
            'created_at': now - timedelta(days=5),
            'updated_at': now - timedelta(days=5),
        }
        document.update(overrides)
        for key in drop:
            document.pop(key, None)
        return document

    return _make


@pytest.fixture
def make_store():
    """
    Factory for in-memory stores with properties p1/p2 and users u1/u2 registered.

    Usage:
        store = make_store([make_booking("b1")])
    """
    def _make(bookings=(), property_ids=('p1', 'p2'), user_ids=('u1', 'u2')):
        return InMemoryBookingStore(bookings=bookings, property_ids=property_ids, user_ids=user_ids)

    return _make


@pytest.fixture
def make_context(now):
    """Factory for a RuleContext over a store with default thresholds."""
    def _make(store, property_id=None, **threshold_overrides):
        thresholds = {**BookingConsistencyChecker.DEFAULT_THRESHOLDS, **threshold_overrides}
        return RuleContext(store=store, property_id=property_id, thresholds=thresholds, now=now)

    return _make


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
def sqlite_session():
    """
    ORM session over an in-memory SQLite database with the booking schema created.

    Only portable SQL is exercised here; MySQL specifics are not covered.
    """
    from sqlalchemy import create_engine
    from sqlalchemy.orm import Session

    from models import Base

    engine = create_engine('sqlite://')
    Base.metadata.create_all(engine)
    session = Session(engine)
    try:
        yield session
    finally:
        session.close()
        engine.dispose()
