"""
Orphaned reference checks against the property and user id sets.

Both id sets are fetched once per run.
"""

from typing import List

from database.audit.issues import Issue, ORPHANED_RECORDS, ERROR, WARNING, HIGH, MEDIUM
from database.audit.rules.base import RuleContext, booking_issue, consistency_rule


@consistency_rule(ORPHANED_RECORDS, "orphaned records")
def check_orphaned_records(ctx: RuleContext) -> List[Issue]:
    issues = []
    property_ids = ctx.store.distinct_ids("properties")
    user_ids = ctx.store.distinct_ids("users")

    for booking in ctx.bookings(lambda b: b.property_id not in property_ids):
        issues.append(booking_issue(
            booking,
            type=ERROR,
            severity=HIGH,
            category=ORPHANED_RECORDS,
            description="Booking references non-existent property",
            suggested_fix="Remove orphaned booking or create missing property",
        ))

    for booking in ctx.bookings(lambda b: bool(b.user_id) and b.user_id not in user_ids):
        issues.append(booking_issue(
            booking,
            type=WARNING,
            severity=MEDIUM,
            category=ORPHANED_RECORDS,
            description="Booking references non-existent user",
            data={"user_id": booking.user_id},
            suggested_fix="Update or remove invalid user reference",
        ))

    return issues
