"""
Business rule checks: minimum stay and advance-booking horizon.
"""

from typing import List

from database.audit.issues import Issue, BUSINESS_RULES, WARNING, INFO, MEDIUM, LOW
from database.audit.rules.base import RuleContext, booking_issue, consistency_rule, shift_years


@consistency_rule(BUSINESS_RULES, "business rule violations")
def check_business_rule_violations(ctx: RuleContext) -> List[Issue]:
    issues = []

    min_stay = ctx.thresholds["min_stay_days"]
    short_stays = ctx.bookings(lambda b: b.stay_days is not None and b.stay_days < min_stay)
    for booking in short_stays:
        issues.append(booking_issue(
            booking,
            type=WARNING,
            severity=MEDIUM,
            category=BUSINESS_RULES,
            description="Booking violates minimum stay requirement",
            data={"stay_duration": round(booking.stay_days, 4), "minimum_stay": min_stay},
            suggested_fix="Extend stay duration or apply business rule exception",
        ))

    horizon = shift_years(ctx.now, int(ctx.thresholds["advance_booking_years"]))
    for booking in ctx.bookings(lambda b: b.date_from is not None and b.date_from > horizon):
        issues.append(booking_issue(
            booking,
            type=INFO,
            severity=LOW,
            category=BUSINESS_RULES,
            description="Booking made too far in advance",
            data={"check_in_date": booking.date_from},
            suggested_fix="Verify booking policy compliance",
        ))

    return issues
