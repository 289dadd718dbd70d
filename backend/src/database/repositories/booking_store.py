"""
Booking Audit - Booking Store Interface
Query primitives the consistency rules run against, plus the in-memory
snapshot implementation every audit run uses.

Usage:
    from database.repositories.booking_store import InMemoryBookingStore

    store = InMemoryBookingStore(
        bookings=[{"booking_id": "b1", "property_id": "p1", ...}],
        property_ids={"p1"},
        user_ids={"u1"},
    )
    pending = store.find(lambda b: b.status == "pending")
"""

from abc import ABC, abstractmethod
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Set, Tuple, Union

from models.booking import BookingRecord

BookingPredicate = Callable[[BookingRecord], bool]

REFERENCE_COLLECTIONS = ("properties", "users")


class StoreConnectionError(Exception):
    """Raised when the booking store cannot be reached."""
    pass


@dataclass(frozen=True)
class BookingGroup:
    """One row of a grouped aggregate: the group key, its size and member ids (sorted)."""

    key: Tuple[Any, ...]
    count: int
    booking_ids: Tuple[str, ...]


class BookingStore(ABC):
    """
    Read-only access to bookings and the reference id sets they point at.

    Implementations must never write. ``snapshot()`` gives a fixed view so
    that all rules of a run see the same data.
    """

    @abstractmethod
    def ping(self) -> None:
        """Raise StoreConnectionError when the store is unreachable."""

    @abstractmethod
    def find(
        self,
        predicate: Optional[BookingPredicate] = None,
        property_id: Optional[str] = None,
    ) -> List[BookingRecord]:
        """Return bookings in scope that satisfy the predicate."""

    @abstractmethod
    def count(self, property_id: Optional[str] = None) -> int:
        """Count bookings in scope."""

    @abstractmethod
    def distinct_ids(self, collection: str) -> Set[str]:
        """Return every valid id of a reference collection ('properties' or 'users')."""

    def aggregate(
        self,
        group_by: Sequence[str],
        property_id: Optional[str] = None,
        min_count: int = 1,
    ) -> List[BookingGroup]:
        """
        Group bookings by the given fields.

        Args:
            group_by: BookingRecord field names forming the group key
            property_id: Optional scope
            min_count: Only return groups with at least this many members

        Returns:
            Groups ordered by their smallest booking id, member ids sorted
        """
        members: Dict[Tuple[Any, ...], List[str]] = defaultdict(list)
        for booking in self.find(property_id=property_id):
            key = tuple(booking.get(name) for name in group_by)
            members[key].append(booking.booking_id)

        groups = [
            BookingGroup(key=key, count=len(ids), booking_ids=tuple(sorted(ids)))
            for key, ids in members.items()
            if len(ids) >= min_count
        ]
        groups.sort(key=lambda group: group.booking_ids[0])
        return groups

    def snapshot(self, property_id: Optional[str] = None) -> "InMemoryBookingStore":
        """
        Load the scope once into memory.

        Returns:
            InMemoryBookingStore holding the scoped bookings and both reference id sets
        """
        return InMemoryBookingStore(
            bookings=self.find(property_id=property_id),
            property_ids=self.distinct_ids("properties"),
            user_ids=self.distinct_ids("users"),
            scope=property_id,
        )


class InMemoryBookingStore(BookingStore):
    """
    Booking store backed by Python lists.

    Accepts BookingRecord instances or document-style dicts (converted with
    BookingRecord.from_document, which preserves absent-vs-null).
    """

    def __init__(
        self,
        bookings: Iterable[Union[BookingRecord, Dict[str, Any]]] = (),
        property_ids: Iterable[str] = (),
        user_ids: Iterable[str] = (),
        scope: Optional[str] = None,
    ):
        self._bookings: Tuple[BookingRecord, ...] = tuple(
            item if isinstance(item, BookingRecord) else BookingRecord.from_document(item)
            for item in bookings
        )
        self._reference_ids: Dict[str, frozenset] = {
            "properties": frozenset(property_ids),
            "users": frozenset(user_ids),
        }
        self.scope = scope

    def ping(self) -> None:
        return None

    def find(
        self,
        predicate: Optional[BookingPredicate] = None,
        property_id: Optional[str] = None,
    ) -> List[BookingRecord]:
        return [
            booking for booking in self._bookings
            if (property_id is None or booking.property_id == property_id)
            and (predicate is None or predicate(booking))
        ]

    def count(self, property_id: Optional[str] = None) -> int:
        if property_id is None:
            return len(self._bookings)
        return sum(1 for booking in self._bookings if booking.property_id == property_id)

    def distinct_ids(self, collection: str) -> Set[str]:
        if collection not in self._reference_ids:
            raise ValueError(
                f"Unknown collection '{collection}'. Must be one of: {', '.join(REFERENCE_COLLECTIONS)}"
            )
        return set(self._reference_ids[collection])

    def snapshot(self, property_id: Optional[str] = None) -> "InMemoryBookingStore":
        if property_id is None or property_id == self.scope:
            return self
        return InMemoryBookingStore(
            bookings=self.find(property_id=property_id),
            property_ids=self._reference_ids["properties"],
            user_ids=self._reference_ids["users"],
            scope=property_id,
        )

    def __len__(self) -> int:
        return len(self._bookings)
