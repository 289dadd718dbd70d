"""
Room allocation overlap check.

Non-cancelled bookings that carry a room are grouped by (property, room);
within each group every pair of overlapping stays is one critical conflict.
Bookings missing either date are left to the data integrity check.
"""

from collections import defaultdict
from typing import Dict, List, Tuple

from database.audit.issues import Issue, ROOM_ALLOCATION, ERROR, CRITICAL
from database.audit.rules.base import RuleContext, booking_issue, consistency_rule
from database.calculators.interval_overlap import find_overlapping_pairs
from models.booking import BookingRecord, BookingStatus


def _is_allocated(booking: BookingRecord) -> bool:
    return (
        booking.has_room_allocation
        and booking.status != BookingStatus.CANCELLED
        and booking.date_from is not None
        and booking.date_to is not None
    )


@consistency_rule(ROOM_ALLOCATION, "room allocation consistency")
def check_room_allocation_consistency(ctx: RuleContext) -> List[Issue]:
    rooms: Dict[Tuple[str, str], List[BookingRecord]] = defaultdict(list)
    for booking in ctx.bookings(_is_allocated):
        rooms[(booking.property_id, booking.room_number)].append(booking)

    issues = []
    for (_, room_number), bookings in rooms.items():
        if len(bookings) < 2:
            continue

        pairs = find_overlapping_pairs(
            bookings,
            start=lambda b: b.date_from,
            end=lambda b: b.date_to,
            tiebreak=lambda b: b.booking_id,
        )
        for first, second in pairs:
            issues.append(booking_issue(
                first,
                type=ERROR,
                severity=CRITICAL,
                category=ROOM_ALLOCATION,
                description="Overlapping room allocations detected",
                data={
                    "conflicting_booking_id": second.booking_id,
                    "room_number": room_number,
                    "dates": {
                        "booking1": {"from": first.date_from, "to": first.date_to},
                        "booking2": {"from": second.date_from, "to": second.date_to},
                    },
                },
                suggested_fix="Reallocate one of the bookings to a different room",
            ))

    return issues
