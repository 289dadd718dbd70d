"""
Status validity checks.

- status outside the lifecycle vocabulary (high)
- completed although check-in is still in the future (medium)
- still pending more than N days after check-out (medium)
"""

from datetime import timedelta
from typing import List

from database.audit.issues import Issue, STATUS_CONSISTENCY, ERROR, WARNING, HIGH, MEDIUM
from database.audit.rules.base import RuleContext, booking_issue, consistency_rule
from models.booking import BookingStatus


@consistency_rule(STATUS_CONSISTENCY, "status consistency")
def check_status_consistency(ctx: RuleContext) -> List[Issue]:
    issues = []

    for booking in ctx.bookings(lambda b: b.status not in BookingStatus.ALL):
        issues.append(booking_issue(
            booking,
            type=ERROR,
            severity=HIGH,
            category=STATUS_CONSISTENCY,
            description="Booking has invalid status",
            data={"status": booking.status},
            suggested_fix="Update to valid status value",
        ))

    future_completed = ctx.bookings(
        lambda b: b.status == BookingStatus.COMPLETED
        and b.date_from is not None
        and b.date_from > ctx.now
    )
    for booking in future_completed:
        issues.append(booking_issue(
            booking,
            type=WARNING,
            severity=MEDIUM,
            category=STATUS_CONSISTENCY,
            description="Booking marked as completed but check-in is in the future",
            data={"status": booking.status, "check_in_date": booking.date_from},
            suggested_fix="Review and correct booking status",
        ))

    stale_before = ctx.now - timedelta(days=ctx.thresholds["stale_pending_days"])
    stale_pending = ctx.bookings(
        lambda b: b.status == BookingStatus.PENDING
        and b.date_to is not None
        and b.date_to < stale_before
    )
    for booking in stale_pending:
        issues.append(booking_issue(
            booking,
            type=WARNING,
            severity=MEDIUM,
            category=STATUS_CONSISTENCY,
            description="Booking still pending but check-out date has passed",
            data={"status": booking.status, "check_out_date": booking.date_to},
            suggested_fix="Update booking status to completed or cancelled",
        ))

    return issues
