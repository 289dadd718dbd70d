"""
Remediation guidance for a set of consistency issues.

Each rule below adds at most one recommendation when its trigger holds.
Output depends only on which categories and severities are present and on
the total issue count, never on issue order.
"""

from typing import Iterable, List

from database.audit.issues import (
    Issue,
    CRITICAL,
    DATE_CONSISTENCY,
    PAYMENT_CONSISTENCY,
    ROOM_ALLOCATION,
    ORPHANED_RECORDS,
    DUPLICATE_BOOKINGS,
)
from utils.config import AUDIT_BULK_CLEANUP_THRESHOLD

ALL_CLEAR = "All consistency checks passed - maintain regular monitoring"
CONNECTIVITY_RECOMMENDATION = "Fix system connectivity issues before running consistency checks"

CATEGORY_RECOMMENDATIONS = [
    (DATE_CONSISTENCY, "Review and correct date inconsistencies to ensure accurate reporting"),
    (PAYMENT_CONSISTENCY, "Reconcile payment statuses with actual payment records"),
    (ROOM_ALLOCATION, "Resolve room allocation conflicts to prevent overbooking"),
    (ORPHANED_RECORDS, "Clean up orphaned records to maintain database integrity"),
    (DUPLICATE_BOOKINGS, "Implement duplicate detection to prevent future duplicates"),
]


def generate_recommendations(
    issues: Iterable[Issue],
    bulk_cleanup_threshold: int = AUDIT_BULK_CLEANUP_THRESHOLD,
) -> List[str]:
    """
    Args:
        issues: All issues of a run
        bulk_cleanup_threshold: Issue count above which a cleanup pass is suggested

    Returns:
        Recommendations in fixed rule order; a single all-clear message if none apply
    """
    issues = list(issues)
    categories = {issue.category for issue in issues}
    severities = {issue.severity for issue in issues}

    recommendations = []

    if CRITICAL in severities:
        recommendations.append("Address critical issues immediately - they may affect system functionality")

    for category, recommendation in CATEGORY_RECOMMENDATIONS:
        if category in categories:
            recommendations.append(recommendation)

    if len(issues) > bulk_cleanup_threshold:
        recommendations.append("Consider running data cleanup procedures due to high issue count")

    if not recommendations:
        recommendations.append(ALL_CLEAR)

    return recommendations
