"""
Consistency Rule Registry
=========================

Every rule module registers its check with ``@consistency_rule``. A check is
a plain function ``(RuleContext) -> List[Issue]``; the registry wraps it so a
failing check yields one high-severity "Failed to check ..." issue instead of
an exception.

How to Add a Rule:
1. Create a module in database/audit/rules/
2. Decorate a ``check_*`` function with @consistency_rule(category, label)
3. Import the module from database/audit/rules/__init__.py (import order is run order)
"""

import calendar
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Callable, Dict, List, Optional

from database.audit.issues import Issue, ERROR, HIGH
from database.repositories.booking_store import BookingPredicate, BookingStore
from models.booking import BookingRecord
from utils.logger import log_rule_error


@dataclass(frozen=True)
class RuleContext:
    """Everything a rule may look at during one audit run."""

    store: BookingStore
    property_id: Optional[str]
    thresholds: Dict[str, float]
    now: datetime

    def bookings(self, predicate: Optional[BookingPredicate] = None) -> List[BookingRecord]:
        return self.store.find(predicate, property_id=self.property_id)


RuleCheck = Callable[[RuleContext], List[Issue]]


@dataclass(frozen=True)
class ConsistencyRule:
    category: str
    label: str
    check: RuleCheck

    def run(self, context: RuleContext) -> List[Issue]:
        """Run the check, converting any failure into a single high-severity issue."""
        try:
            return list(self.check(context))
        except Exception as e:
            log_rule_error(e, self.category, context.property_id)
            return [Issue(
                type=ERROR,
                severity=HIGH,
                category=self.category,
                description=f"Failed to check {self.label}: {e}",
                property_id=context.property_id,
            )]


# Ordered registry: category -> rule
CONSISTENCY_RULES: Dict[str, ConsistencyRule] = {}


def consistency_rule(category: str, label: str) -> Callable[[RuleCheck], RuleCheck]:
    """Register a check function under its category. The function itself is returned unchanged."""
    def decorator(check: RuleCheck) -> RuleCheck:
        CONSISTENCY_RULES[category] = ConsistencyRule(category=category, label=label, check=check)
        return check
    return decorator


def booking_issue(booking: BookingRecord, **fields) -> Issue:
    """Issue pre-filled with the booking's id and property."""
    return Issue(booking_id=booking.booking_id, property_id=booking.property_id, **fields)


def shift_years(reference: datetime, years: int) -> datetime:
    """
    Midnight of the same calendar date ``years`` away from reference.

    Feb 29 rolls over to Mar 1 in non-leap target years.
    """
    year = reference.year + years
    day = reference.day
    month = reference.month
    if month == 2 and day == 29 and not calendar.isleap(year):
        month, day = 3, 1
    return datetime.combine(date(year, month, day), time.min, tzinfo=reference.tzinfo)
