"""
Booking consistency rules.

Importing this package registers every rule in CONSISTENCY_RULES, in the
order below (which is also the order issues appear in a report).
"""

from database.audit.rules.base import (
    CONSISTENCY_RULES,
    ConsistencyRule,
    RuleContext,
    consistency_rule,
)
from database.audit.rules import (  # noqa: F401  (registration side effects)
    date_checks,
    pricing_checks,
    status_checks,
    payment_checks,
    room_allocation_checks,
    guest_data_checks,
    orphaned_record_checks,
    duplicate_checks,
    business_rule_checks,
    data_integrity_checks,
)

__all__ = [
    "CONSISTENCY_RULES",
    "ConsistencyRule",
    "RuleContext",
    "consistency_rule",
]
