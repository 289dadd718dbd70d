"""
Date validity checks.

- check-out not after check-in (critical)
- dates implausibly far in the past or future (medium)
- same calendar day check-in and check-out (low, informational)
"""

from typing import List

from database.audit.issues import Issue, DATE_CONSISTENCY, ERROR, WARNING, INFO, CRITICAL, MEDIUM, LOW
from database.audit.rules.base import RuleContext, booking_issue, consistency_rule, shift_years


def _has_dates(booking) -> bool:
    return booking.date_from is not None and booking.date_to is not None


@consistency_rule(DATE_CONSISTENCY, "date consistency")
def check_date_consistency(ctx: RuleContext) -> List[Issue]:
    issues = []
    dated = ctx.bookings(_has_dates)

    for booking in dated:
        if booking.date_to <= booking.date_from:
            issues.append(booking_issue(
                booking,
                type=ERROR,
                severity=CRITICAL,
                category=DATE_CONSISTENCY,
                description="Check-out date is not after check-in date",
                data={"check_in": booking.date_from, "check_out": booking.date_to},
                suggested_fix="Update check-out date to be after check-in date",
            ))

    earliest = shift_years(ctx.now, -int(ctx.thresholds["past_horizon_years"]))
    latest = shift_years(ctx.now, int(ctx.thresholds["future_horizon_years"]))

    def is_suspicious(booking) -> bool:
        return any(
            value is not None and (value < earliest or value > latest)
            for value in (booking.date_from, booking.date_to)
        )

    for booking in ctx.bookings(is_suspicious):
        issues.append(booking_issue(
            booking,
            type=WARNING,
            severity=MEDIUM,
            category=DATE_CONSISTENCY,
            description="Booking has suspicious dates (too far in past or future)",
            data={"check_in": booking.date_from, "check_out": booking.date_to},
            suggested_fix="Verify and correct booking dates",
        ))

    for booking in dated:
        if booking.date_from.date() == booking.date_to.date():
            issues.append(booking_issue(
                booking,
                type=INFO,
                severity=LOW,
                category=DATE_CONSISTENCY,
                description="Same-day booking detected",
                data={"check_in": booking.date_from, "check_out": booking.date_to},
            ))

    return issues
