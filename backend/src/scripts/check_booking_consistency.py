#!/usr/bin/env python3
"""
Booking Audit - Consistency Check Script
Scans bookings for invariant violations, suspicious values and conflicts.

Read-only: nothing is modified, findings are printed for review.

Usage:
    python -m scripts.check_booking_consistency
    python -m scripts.check_booking_consistency --property-id p-123
    python -m scripts.check_booking_consistency --json
    python -m scripts.check_booking_consistency --verbose

Options:
    --property-id ID     Audit a single property (default: every booking)
    --verbose            List every issue, not just the summary
    --json               Output the full report as JSON

Exit codes:
    0 = All checks passed
    1 = Critical issues found
    2 = Issues found (but none critical)
"""

import sys
import argparse
import json
from collections import Counter
from pathlib import Path
from typing import List, Optional

# Add src to path
backend_src = Path(__file__).parent.parent
sys.path.insert(0, str(backend_src.absolute()))

from utils.logger import logger
from database.audit import ConsistencyReport, run_consistency_check


def format_report(report: ConsistencyReport, verbose: bool = False) -> str:
    """
    Render a report as plain text.

    Args:
        report: Report to render
        verbose: Include one line per issue

    Returns:
        Multi-line string
    """
    summary = report.summary
    lines = [
        "=" * 60,
        "BOOKING CONSISTENCY REPORT",
        "=" * 60,
        f"Scope: {summary.property_id or 'all properties'}",
        f"Checked at: {summary.timestamp.isoformat()}",
        f"Bookings scanned: {summary.total_bookings}",
        f"Issues found: {summary.issues_found} "
        f"(critical={summary.critical_issues}, high={summary.high_priority_issues})",
    ]

    if summary.issues_by_category:
        lines.append("")
        lines.append("Issues by category:")
        for category, count in sorted(summary.issues_by_category.items()):
            lines.append(f"  {category:24} {count}")

    if verbose and report.issues:
        severity_counts = Counter(issue.severity for issue in report.issues)
        lines.append("")
        lines.append("Issues by severity: " + ", ".join(
            f"{severity}={count}" for severity, count in sorted(severity_counts.items())
        ))
        lines.append("")
        for issue in report.issues:
            target = f" booking={issue.booking_id}" if issue.booking_id else ""
            lines.append(f"  [{issue.severity.upper():8}] {issue.category}:{target} {issue.description}")
            if issue.suggested_fix:
                lines.append(f"             fix: {issue.suggested_fix}")

    lines.append("")
    lines.append("Recommendations:")
    for recommendation in report.recommendations:
        lines.append(f"  - {recommendation}")

    lines.append("")
    lines.append(f"STATUS: {report.status}")
    return "\n".join(lines)


def exit_code_for(report: ConsistencyReport) -> int:
    if report.summary.critical_issues > 0:
        return 1
    if report.issues:
        return 2
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Audit booking data for consistency and integrity problems"
    )
    parser.add_argument(
        '--property-id',
        type=str,
        help='Audit a single property'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='List every issue'
    )
    parser.add_argument(
        '--json',
        action='store_true',
        help='Output results as JSON'
    )

    args = parser.parse_args(argv)

    if not args.json:
        logger.info(f"Running booking consistency check (property={args.property_id or 'all'})...")

    report = run_consistency_check(property_id=args.property_id)

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print(format_report(report, verbose=args.verbose))

    return exit_code_for(report)


if __name__ == '__main__':
    sys.exit(main())
