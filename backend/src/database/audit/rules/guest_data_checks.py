"""
Guest data checks: contact details present, email well-formed, plausible party size.
"""

import re
from typing import List

from database.audit.issues import Issue, GUEST_DATA, WARNING, MEDIUM, LOW
from database.audit.rules.base import RuleContext, booking_issue, consistency_rule

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


@consistency_rule(GUEST_DATA, "guest data consistency")
def check_guest_data_consistency(ctx: RuleContext) -> List[Issue]:
    issues = []

    for booking in ctx.bookings(lambda b: not b.contact_name or not b.contact_email):
        issues.append(booking_issue(
            booking,
            type=WARNING,
            severity=MEDIUM,
            category=GUEST_DATA,
            description="Booking missing essential contact details",
            data={"contact_details": {"name": booking.contact_name, "email": booking.contact_email}},
            suggested_fix="Add missing contact information",
        ))

    for booking in ctx.bookings(lambda b: bool(b.contact_email)):
        if not EMAIL_PATTERN.fullmatch(booking.contact_email):
            issues.append(booking_issue(
                booking,
                type=WARNING,
                severity=LOW,
                category=GUEST_DATA,
                description="Invalid email format",
                data={"email": booking.contact_email},
                suggested_fix="Correct email format",
            ))

    max_guests = ctx.thresholds["max_guests"]
    unrealistic = ctx.bookings(
        lambda b: b.guests is not None and (b.guests <= 0 or b.guests > max_guests)
    )
    for booking in unrealistic:
        issues.append(booking_issue(
            booking,
            type=WARNING,
            severity=MEDIUM,
            category=GUEST_DATA,
            description="Unrealistic guest count",
            data={"guests": booking.guests},
            suggested_fix="Verify and correct guest count",
        ))

    return issues
