"""
Duplicate booking detection.

Clusters bookings on (property, contact email, check-in, check-out). The
smallest id in a cluster is kept as the original; each other member is
reported once.
"""

from typing import List

from database.audit.issues import Issue, DUPLICATE_BOOKINGS, WARNING, MEDIUM
from database.audit.rules.base import RuleContext, consistency_rule
from database.calculators.duplicate_clusters import DUPLICATE_KEY_FIELDS, cluster_duplicates


@consistency_rule(DUPLICATE_BOOKINGS, "duplicate bookings")
def check_duplicate_bookings(ctx: RuleContext) -> List[Issue]:
    groups = ctx.store.aggregate(DUPLICATE_KEY_FIELDS, property_id=ctx.property_id, min_count=2)

    issues = []
    for cluster in cluster_duplicates(groups):
        property_id = cluster.key[0]
        for booking_id in cluster.duplicate_ids:
            issues.append(Issue(
                type=WARNING,
                severity=MEDIUM,
                category=DUPLICATE_BOOKINGS,
                description="Potential duplicate booking detected",
                booking_id=booking_id,
                property_id=property_id,
                data={
                    "original_booking_id": cluster.canonical_id,
                    "duplicate_count": cluster.size,
                },
                suggested_fix="Review and remove duplicate booking if confirmed",
            ))

    return issues
