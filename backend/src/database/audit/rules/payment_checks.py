"""
Payment consistency checks.

- payment status outside the payment vocabulary (high)
- completed stay without a paid or refunded payment (high)
- cancelled booking still marked paid, refund possibly unprocessed (medium)
"""

from typing import List

from database.audit.issues import Issue, PAYMENT_CONSISTENCY, ERROR, WARNING, INFO, HIGH, MEDIUM
from database.audit.rules.base import RuleContext, booking_issue, consistency_rule
from models.booking import BookingStatus, PaymentStatus

SETTLED_PAYMENT_STATUSES = frozenset({PaymentStatus.PAID, PaymentStatus.REFUNDED})


@consistency_rule(PAYMENT_CONSISTENCY, "payment consistency")
def check_payment_consistency(ctx: RuleContext) -> List[Issue]:
    issues = []

    for booking in ctx.bookings(lambda b: b.payment_status not in PaymentStatus.ALL):
        issues.append(booking_issue(
            booking,
            type=ERROR,
            severity=HIGH,
            category=PAYMENT_CONSISTENCY,
            description="Booking has invalid payment status",
            data={"payment_status": booking.payment_status},
            suggested_fix="Update to valid payment status",
        ))

    completed_unpaid = ctx.bookings(
        lambda b: b.status == BookingStatus.COMPLETED
        and b.payment_status not in SETTLED_PAYMENT_STATUSES
    )
    for booking in completed_unpaid:
        issues.append(booking_issue(
            booking,
            type=WARNING,
            severity=HIGH,
            category=PAYMENT_CONSISTENCY,
            description="Completed booking without payment confirmation",
            data={"status": booking.status, "payment_status": booking.payment_status},
            suggested_fix="Verify payment status and update accordingly",
        ))

    cancelled_paid = ctx.bookings(
        lambda b: b.status == BookingStatus.CANCELLED
        and b.payment_status == PaymentStatus.PAID
    )
    for booking in cancelled_paid:
        issues.append(booking_issue(
            booking,
            type=INFO,
            severity=MEDIUM,
            category=PAYMENT_CONSISTENCY,
            description="Cancelled booking with paid status (may need refund processing)",
            data={"status": booking.status, "payment_status": booking.payment_status},
            suggested_fix="Process refund or update payment status",
        ))

    return issues
