"""
Booking Consistency Checker
===========================

Runs every registered consistency rule against one fixed snapshot of the
booking store and folds the findings into a ConsistencyReport.

Failure handling:
- Store unreachable (ping or snapshot fails): the run stops before any rule
  executes and the report carries one critical "system" issue.
- A rule fails: the rule's own wrapper turns it into one high-severity
  "Failed to check ..." issue; anything escaping that wrapper becomes one
  critical "system" issue. Other rules are unaffected either way.
- Callers always get a report, never an exception.

Usage:
    from database.audit import BookingConsistencyChecker

    checker = BookingConsistencyChecker(store)
    report = checker.run_full_check(property_id="p-123")

    print(report.summary.issues_found, report.recommendations)
"""

import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from database.audit.issues import ConsistencyReport, Issue, build_report, ERROR, CRITICAL, SYSTEM
from database.audit.recommendations import CONNECTIVITY_RECOMMENDATION, generate_recommendations
from database.audit.rules import CONSISTENCY_RULES, ConsistencyRule, RuleContext
from database.repositories.booking_store import BookingStore
from utils.config import (
    AUDIT_PAST_HORIZON_YEARS,
    AUDIT_FUTURE_HORIZON_YEARS,
    AUDIT_PRICE_CEILING,
    AUDIT_OUTLIER_MULTIPLIER,
    AUDIT_STALE_PENDING_DAYS,
    AUDIT_MAX_GUESTS,
    AUDIT_MIN_STAY_DAYS,
    AUDIT_ADVANCE_BOOKING_YEARS,
    AUDIT_BULK_CLEANUP_THRESHOLD,
    AUDIT_MAX_WORKERS,
)
from utils.logger import logger, log_audit_start, log_audit_complete, log_rule_error


def utc_now() -> datetime:
    """Naive UTC timestamp, matching how booking dates are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class BookingConsistencyChecker:
    """
    Coordinates one audit run over all consistency rules.

    Thresholds are configurable but default to:
    - past/future horizon: 2 / 5 years
    - price ceiling: 100000
    - outlier multiplier: 5x average price per night
    - stale pending: 3 days after check-out
    - guest count upper bound: 50
    - minimum stay: 1 day
    - advance booking horizon: 2 years
    - bulk cleanup suggestion: more than 50 issues
    """

    DEFAULT_THRESHOLDS = {
        "past_horizon_years": AUDIT_PAST_HORIZON_YEARS,
        "future_horizon_years": AUDIT_FUTURE_HORIZON_YEARS,
        "price_ceiling": AUDIT_PRICE_CEILING,
        "outlier_multiplier": AUDIT_OUTLIER_MULTIPLIER,
        "stale_pending_days": AUDIT_STALE_PENDING_DAYS,
        "max_guests": AUDIT_MAX_GUESTS,
        "min_stay_days": AUDIT_MIN_STAY_DAYS,
        "advance_booking_years": AUDIT_ADVANCE_BOOKING_YEARS,
        "bulk_cleanup_threshold": AUDIT_BULK_CLEANUP_THRESHOLD,
    }

    def __init__(
        self,
        store: BookingStore,
        thresholds: Optional[Dict[str, float]] = None,
        max_workers: Optional[int] = None,
        rules: Optional[Iterable[ConsistencyRule]] = None,
    ):
        """
        Args:
            store: Booking store to audit (only read from)
            thresholds: Optional overrides merged over DEFAULT_THRESHOLDS
            max_workers: Cap on rules executing at once (default AUDIT_MAX_WORKERS)
            rules: Rules to run (default: every registered rule)
        """
        self.store = store
        self.thresholds = {**self.DEFAULT_THRESHOLDS, **(thresholds or {})}
        self.max_workers = max_workers or AUDIT_MAX_WORKERS
        self.rules: List[ConsistencyRule] = list(rules) if rules is not None else list(CONSISTENCY_RULES.values())

    def run_full_check(
        self,
        property_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ConsistencyReport:
        """
        Run every rule once and build the report.

        Args:
            property_id: Restrict the audit to one property (default: whole store)
            now: Reference time for date-relative rules (default: current UTC time)

        Returns:
            ConsistencyReport for this run
        """
        now = now or utc_now()
        started = time.monotonic()
        log_audit_start(property_id, len(self.rules))

        try:
            self.store.ping()
            snapshot = self.store.snapshot(property_id)
        except Exception as e:
            logger.error(f"Consistency check aborted, booking store unavailable: {e}")
            return connectivity_failure_report(e, property_id=property_id, now=now)

        context = RuleContext(
            store=snapshot,
            property_id=property_id,
            thresholds=self.thresholds,
            now=now,
        )
        issues = self._run_rules(context)

        try:
            total_bookings = snapshot.count(property_id)
        except Exception as e:
            logger.error(f"Failed to count bookings: {e}")
            total_bookings = 0
            issues.append(Issue(
                type=ERROR,
                severity=CRITICAL,
                category=SYSTEM,
                description=f"Failed to count bookings: {e}",
                property_id=property_id,
            ))

        recommendations = generate_recommendations(
            issues, bulk_cleanup_threshold=int(self.thresholds["bulk_cleanup_threshold"])
        )
        report = build_report(
            issues,
            total_bookings=total_bookings,
            recommendations=recommendations,
            timestamp=now,
            property_id=property_id,
        )

        log_audit_complete(
            property_id,
            duration_seconds=round(time.monotonic() - started, 3),
            total_bookings=total_bookings,
            issues_found=report.summary.issues_found,
            critical_issues=report.summary.critical_issues,
        )
        return report

    def _run_rules(self, context: RuleContext) -> List[Issue]:
        """
        Fan the rules out over a bounded thread pool.

        Each task returns its own list; lists are merged after the join in
        rule order, so the result does not depend on completion order.
        """
        if not self.rules:
            return []

        results: Dict[int, List[Issue]] = {}
        workers = max(1, min(self.max_workers, len(self.rules)))

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="consistency-rule") as executor:
            futures = {
                executor.submit(rule.run, context): position
                for position, rule in enumerate(self.rules)
            }
            for future in as_completed(futures):
                position = futures[future]
                rule = self.rules[position]
                try:
                    results[position] = future.result()
                except Exception as e:
                    log_rule_error(e, rule.category, context.property_id)
                    results[position] = [Issue(
                        type=ERROR,
                        severity=CRITICAL,
                        category=SYSTEM,
                        description=f"Consistency rule '{rule.category}' failed: {e}",
                        property_id=context.property_id,
                        data={"failed_category": rule.category},
                    )]
                logger.debug(f"Rule {rule.category} finished with {len(results[position])} issues")

        issues: List[Issue] = []
        for position in range(len(self.rules)):
            issues.extend(results[position])
        return issues


def connectivity_failure_report(
    error: Exception,
    property_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> ConsistencyReport:
    """Report for a run that could not reach the store: zero bookings, one critical issue."""
    issue = Issue(
        type=ERROR,
        severity=CRITICAL,
        category=SYSTEM,
        description=f"Failed to run consistency check: {error}",
        property_id=property_id,
    )
    return build_report(
        [issue],
        total_bookings=0,
        recommendations=[CONNECTIVITY_RECOMMENDATION],
        timestamp=now or utc_now(),
        property_id=property_id,
    )


def run_consistency_check(
    property_id: Optional[str] = None,
    store: Optional[BookingStore] = None,
    **checker_options,
) -> ConsistencyReport:
    """
    Run a full consistency check.

    Args:
        property_id: Optional property scope
        store: Store to audit; when omitted a database session is opened
        **checker_options: Passed to BookingConsistencyChecker

    Returns:
        ConsistencyReport (connectivity problems are reported, not raised)
    """
    if store is not None:
        return BookingConsistencyChecker(store, **checker_options).run_full_check(property_id)

    from database.connection import create_db_session
    from database.repositories.booking_repository_orm import BookingRepository

    try:
        session = create_db_session()
    except Exception as e:
        logger.error(f"Could not open database session for consistency check: {e}")
        return connectivity_failure_report(e, property_id=property_id)

    try:
        checker = BookingConsistencyChecker(BookingRepository(session), **checker_options)
        return checker.run_full_check(property_id)
    finally:
        session.close()
