"""
Booking Audit - Booking Record Model
Read-only view of a single reservation as seen by the consistency rules.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, Optional

SECONDS_PER_DAY = 24 * 60 * 60


class BookingStatus:
    """Valid values of the booking lifecycle status."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"

    ALL = frozenset({PENDING, CONFIRMED, CANCELLED, COMPLETED})


class PaymentStatus:
    """Valid values of the payment status."""
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"

    ALL = frozenset({PENDING, PAID, FAILED, REFUNDED})


# Fields every booking must carry. Absent and present-but-null are reported separately.
REQUIRED_FIELDS = ("property_id", "date_from", "date_to", "status")


def _naive_utc(value: Any) -> Any:
    """Aware datetimes become naive UTC; anything else is returned untouched."""
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


@dataclass(frozen=True)
class BookingRecord:
    """
    Booking entity as loaded from the store.

    Values are kept exactly as stored (no coercion) so that malformed data
    reaches the rules that are supposed to flag it. The nested
    ``contact_details`` and ``allocated_room`` sub-documents of the document
    store are flattened into optional fields.
    Timezone-aware datetimes are the one exception: they are converted to
    naive UTC, the form every audit run compares against.
    """
    booking_id: str
    property_id: Optional[str] = None
    user_id: Optional[str] = None
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    guests: Optional[int] = None
    total_price: Any = None
    status: Optional[str] = None
    payment_status: Optional[str] = None
    room_number: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    missing_fields: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "BookingRecord":
        """
        Build a record from a document-store style dict.

        Args:
            document: Booking document, e.g.
                {"booking_id": "b1", "property_id": "p1",
                 "contact_details": {"name": "...", "email": "..."},
                 "date_from": datetime(...), "date_to": datetime(...),
                 "allocated_room": {"room_number": "101"}, ...}

        Returns:
            BookingRecord with ``missing_fields`` listing the required keys
            that were absent from the document
        """
        contact = document.get("contact_details") or {}
        room = document.get("allocated_room") or {}
        missing = frozenset(name for name in REQUIRED_FIELDS if name not in document)

        return cls(
            booking_id=str(document["booking_id"]),
            property_id=document.get("property_id"),
            user_id=document.get("user_id"),
            contact_name=contact.get("name"),
            contact_email=contact.get("email"),
            date_from=_naive_utc(document.get("date_from")),
            date_to=_naive_utc(document.get("date_to")),
            guests=document.get("guests"),
            total_price=document.get("total_price"),
            status=document.get("status"),
            payment_status=document.get("payment_status"),
            room_number=room.get("room_number"),
            created_at=_naive_utc(document.get("created_at")),
            updated_at=_naive_utc(document.get("updated_at")),
            missing_fields=missing,
        )

    @classmethod
    def from_orm(cls, row) -> "BookingRecord":
        """
        Build a record from a ``models.Booking`` row.

        Relational rows cannot express an absent column, so NULLs surface as
        present-but-null values and ``missing_fields`` is always empty.
        """
        return cls(
            booking_id=str(row.booking_id),
            property_id=row.property_id,
            user_id=row.user_id,
            contact_name=row.contact_name,
            contact_email=row.contact_email,
            date_from=_naive_utc(row.date_from),
            date_to=_naive_utc(row.date_to),
            guests=row.guests,
            total_price=row.total_price,
            status=row.status,
            payment_status=row.payment_status,
            room_number=row.room_number,
            created_at=_naive_utc(row.created_at),
            updated_at=_naive_utc(row.updated_at),
        )

    @property
    def stay_days(self) -> Optional[float]:
        """Stay length in (fractional) days, or None when either date is unset."""
        if self.date_from is None or self.date_to is None:
            return None
        return (self.date_to - self.date_from).total_seconds() / SECONDS_PER_DAY

    @property
    def has_room_allocation(self) -> bool:
        return bool(self.room_number)

    def get(self, name: str) -> Any:
        """Attribute lookup by field name (used by grouping and predicates)."""
        return getattr(self, name)
