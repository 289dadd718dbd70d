"""
Booking Consistency Audit Framework
===================================

Read-only detection of invariant violations, suspicious values and
cross-record conflicts in booking data. Nothing here writes or repairs.

Components:
- issues.py: Issue / ReportSummary / ConsistencyReport value types
- rules/: the ten consistency rules (dates, pricing, status, payment,
  room allocation, guest data, orphaned records, duplicates, business rules,
  data integrity)
- recommendations.py: remediation guidance derived from the issue set
- consistency_checker.py: runs all rules and builds the report

Usage:
    from database.audit import BookingConsistencyChecker, run_consistency_check

    report = run_consistency_check()               # whole store, via the database
    report = BookingConsistencyChecker(store).run_full_check("p-123")

Severity: critical (act now), high, medium, low (informational).
"""

from .issues import Issue, ReportSummary, ConsistencyReport
from .rules import CONSISTENCY_RULES, RuleContext, consistency_rule
from .recommendations import generate_recommendations
from .consistency_checker import (
    BookingConsistencyChecker,
    connectivity_failure_report,
    run_consistency_check,
)

__all__ = [
    "Issue",
    "ReportSummary",
    "ConsistencyReport",
    "CONSISTENCY_RULES",
    "RuleContext",
    "consistency_rule",
    "generate_recommendations",
    "BookingConsistencyChecker",
    "connectivity_failure_report",
    "run_consistency_check",
]
