"""
Required field integrity.

An absent required field and a required field stored as null are distinct
findings: one issue per absent field, one issue per booking for nulls.
Stores that cannot express absence (SQL) only ever produce the null case.
"""

from typing import List

from database.audit.issues import Issue, DATA_INTEGRITY, ERROR, CRITICAL
from database.audit.rules.base import RuleContext, booking_issue, consistency_rule
from models.booking import REQUIRED_FIELDS


def _null_fields(booking) -> List[str]:
    return [
        name for name in REQUIRED_FIELDS
        if name not in booking.missing_fields and booking.get(name) is None
    ]


@consistency_rule(DATA_INTEGRITY, "data integrity")
def check_data_integrity(ctx: RuleContext) -> List[Issue]:
    issues = []

    for field_name in REQUIRED_FIELDS:
        for booking in ctx.bookings(lambda b: field_name in b.missing_fields):
            issues.append(booking_issue(
                booking,
                type=ERROR,
                severity=CRITICAL,
                category=DATA_INTEGRITY,
                description=f"Missing required field: {field_name}",
                data={"missing_field": field_name},
                suggested_fix=f"Add missing {field_name} value",
            ))

    for booking in ctx.bookings(lambda b: bool(_null_fields(b))):
        issues.append(booking_issue(
            booking,
            type=ERROR,
            severity=CRITICAL,
            category=DATA_INTEGRITY,
            description="Critical field has null value",
            data={"null_fields": _null_fields(booking)},
            suggested_fix="Replace null values with valid data",
        ))

    return issues
