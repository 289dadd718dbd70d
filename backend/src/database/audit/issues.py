"""
Consistency Audit Results
=========================

Value types produced by an audit run:

- Issue: one detected violation (immutable)
- ReportSummary: counters for a run
- ConsistencyReport: summary + ordered issues + recommendations

Issue.type is the kind of finding (error / warning / info); Issue.severity
is how urgently it needs attention (critical / high / medium / low).
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

# Issue types
ERROR = "error"
WARNING = "warning"
INFO = "info"

# Severities
CRITICAL = "critical"
HIGH = "high"
MEDIUM = "medium"
LOW = "low"

SEVERITIES = (CRITICAL, HIGH, MEDIUM, LOW)

# Categories (one per rule module, plus run-level failures)
DATE_CONSISTENCY = "date_consistency"
PRICING_CONSISTENCY = "pricing_consistency"
STATUS_CONSISTENCY = "status_consistency"
PAYMENT_CONSISTENCY = "payment_consistency"
ROOM_ALLOCATION = "room_allocation"
GUEST_DATA = "guest_data"
ORPHANED_RECORDS = "orphaned_records"
DUPLICATE_BOOKINGS = "duplicate_bookings"
BUSINESS_RULES = "business_rules"
DATA_INTEGRITY = "data_integrity"
SYSTEM = "system"


def _to_json_value(value: Any) -> Any:
    """Convert datetimes, decimals and nested containers to JSON-safe values."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, dict):
        return {key: _to_json_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_to_json_value(item) for item in value]
    return value


@dataclass(frozen=True)
class Issue:
    """A single consistency finding."""

    type: str  # error, warning, info
    severity: str  # critical, high, medium, low
    category: str
    description: str
    booking_id: Optional[str] = None
    property_id: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    suggested_fix: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "type": self.type,
            "severity": self.severity,
            "category": self.category,
            "description": self.description,
        }
        if self.booking_id is not None:
            result["booking_id"] = self.booking_id
        if self.property_id is not None:
            result["property_id"] = self.property_id
        if self.data is not None:
            result["data"] = _to_json_value(self.data)
        if self.suggested_fix is not None:
            result["suggested_fix"] = self.suggested_fix
        return result


@dataclass(frozen=True)
class ReportSummary:
    """Counters for one audit run."""

    total_bookings: int
    issues_found: int
    critical_issues: int
    high_priority_issues: int
    timestamp: datetime
    property_id: Optional[str] = None
    issues_by_category: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_bookings": self.total_bookings,
            "issues_found": self.issues_found,
            "critical_issues": self.critical_issues,
            "high_priority_issues": self.high_priority_issues,
            "timestamp": self.timestamp.isoformat(),
            "property_id": self.property_id,
            "issues_by_category": dict(self.issues_by_category),
        }


@dataclass(frozen=True)
class ConsistencyReport:
    """
    Result of one audit run. Created fresh per run and never mutated.

    Usage:
        report = checker.run_full_check()
        if report.status == "FAIL":
            alert(report.to_dict())
    """

    summary: ReportSummary
    issues: Tuple[Issue, ...]
    recommendations: Tuple[str, ...]

    @property
    def status(self) -> str:
        """FAIL with critical issues, WARN with any other issue, PASS otherwise."""
        if self.summary.critical_issues:
            return "FAIL"
        if self.issues:
            return "WARN"
        return "PASS"

    def issues_for(self, category: str) -> List[Issue]:
        return [issue for issue in self.issues if issue.category == category]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "summary": self.summary.to_dict(),
            "issues": [issue.to_dict() for issue in self.issues],
            "recommendations": list(self.recommendations),
        }


def count_by_category(issues: List[Issue]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for issue in issues:
        counts[issue.category] = counts.get(issue.category, 0) + 1
    return counts


def build_report(
    issues: List[Issue],
    total_bookings: int,
    recommendations: List[str],
    timestamp: datetime,
    property_id: Optional[str] = None,
) -> ConsistencyReport:
    """Tally severities and freeze the run's results into a ConsistencyReport."""
    summary = ReportSummary(
        total_bookings=total_bookings,
        issues_found=len(issues),
        critical_issues=sum(1 for issue in issues if issue.severity == CRITICAL),
        high_priority_issues=sum(1 for issue in issues if issue.severity == HIGH),
        timestamp=timestamp,
        property_id=property_id,
        issues_by_category=count_by_category(issues),
    )
    return ConsistencyReport(
        summary=summary,
        issues=tuple(issues),
        recommendations=tuple(recommendations),
    )
