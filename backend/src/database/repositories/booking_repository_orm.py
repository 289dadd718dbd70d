"""
Booking Audit - Booking Repository (ORM Version)
SQLAlchemy implementation of the booking store over the bookings,
properties and users tables. Strictly read-only.
"""

from typing import List, Optional, Sequence, Set

from sqlalchemy import select, func, text
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from models.booking import BookingRecord
from models.orm_booking import Booking
from models.orm_property import Property, User
from database.repositories.booking_store import (
    BookingGroup,
    BookingPredicate,
    BookingStore,
    StoreConnectionError,
    REFERENCE_COLLECTIONS,
)
from utils.config import MAX_RETRY_ATTEMPTS, RETRY_BACKOFF_MULTIPLIER
from utils.logger import logger, log_database_error


class BookingRepository(BookingStore):
    """
    Repository for booking audit queries using SQLAlchemy ORM.

    Returns BookingRecord dataclasses rather than ORM rows so the rules
    never hold on to session state.
    """

    _REFERENCE_COLUMNS = {
        "properties": Property.property_id,
        "users": User.user_id,
    }

    def __init__(self, session: Session):
        """
        Initialize repository with SQLAlchemy session.

        Args:
            session: SQLAlchemy session object
        """
        self.session = session

    @retry(
        stop=stop_after_attempt(MAX_RETRY_ATTEMPTS),
        wait=wait_exponential(multiplier=RETRY_BACKOFF_MULTIPLIER, min=1, max=10),
        retry=retry_if_exception_type(OperationalError),
        reraise=True
    )
    def _probe(self) -> None:
        self.session.execute(text("SELECT 1")).scalar()

    def ping(self) -> None:
        """
        Verify the database answers, retrying transient operational errors.

        Raises:
            StoreConnectionError: If the database is still unreachable after retries
        """
        try:
            self._probe()
        except SQLAlchemyError as e:
            log_database_error(e, "Booking store connectivity probe failed")
            raise StoreConnectionError(f"Cannot reach booking store: {e}") from e

    def _scoped(self, stmt, property_id: Optional[str]):
        if property_id is not None:
            stmt = stmt.where(Booking.property_id == property_id)
        return stmt

    def find(
        self,
        predicate: Optional[BookingPredicate] = None,
        property_id: Optional[str] = None,
    ) -> List[BookingRecord]:
        stmt = self._scoped(select(Booking), property_id).order_by(Booking.booking_id)
        records = [BookingRecord.from_orm(row) for row in self.session.scalars(stmt)]
        if predicate is not None:
            records = [record for record in records if predicate(record)]
        return records

    def count(self, property_id: Optional[str] = None) -> int:
        stmt = self._scoped(select(func.count()).select_from(Booking), property_id)
        return int(self.session.execute(stmt).scalar() or 0)

    def distinct_ids(self, collection: str) -> Set[str]:
        if collection not in self._REFERENCE_COLUMNS:
            raise ValueError(
                f"Unknown collection '{collection}'. Must be one of: {', '.join(REFERENCE_COLLECTIONS)}"
            )
        column = self._REFERENCE_COLUMNS[collection]
        return {str(value) for value in self.session.scalars(select(column).distinct())}

    def aggregate(
        self,
        group_by: Sequence[str],
        property_id: Optional[str] = None,
        min_count: int = 1,
    ) -> List[BookingGroup]:
        """
        Group bookings in SQL (GROUP BY ... HAVING COUNT(*) >= min_count),
        then fetch the member ids of each surviving group.
        """
        columns = [getattr(Booking, name) for name in group_by]

        stmt = self._scoped(select(*columns, func.count().label('group_count')), property_id)
        stmt = stmt.group_by(*columns).having(func.count() >= min_count)

        groups = []
        for row in self.session.execute(stmt):
            key = tuple(row[:len(columns)])
            members = self._scoped(select(Booking.booking_id), property_id)
            for column, value in zip(columns, key):
                members = members.where(column.is_(None) if value is None else column == value)
            booking_ids = tuple(sorted(str(booking_id) for booking_id in self.session.scalars(members)))
            groups.append(BookingGroup(key=key, count=row.group_count, booking_ids=booking_ids))

        groups.sort(key=lambda group: group.booking_ids[0])
        logger.debug(f"Aggregated bookings by {', '.join(group_by)}: {len(groups)} groups")
        return groups
