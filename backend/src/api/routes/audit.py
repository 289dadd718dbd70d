"""
Booking Audit - Audit API Routes
================================

Endpoints for triggering a read-only booking consistency audit.

Endpoints:
    GET /audit/bookings/consistency        - Full report (optionally one property)
    GET /audit/bookings/consistency/rules  - Registered rule categories

The report is returned exactly as ConsistencyReport.to_dict() produces it.
A store outage is reported inside the report (status FAIL, one critical
system issue), not as an HTTP error.
"""

from flask import Blueprint, request, jsonify

from api.middleware.auth import api_key_auth
from database.audit import CONSISTENCY_RULES, run_consistency_check
from utils.logger import logger

audit_bp = Blueprint("audit", __name__)


@audit_bp.route("/audit/bookings/consistency", methods=["GET"])
@api_key_auth.require_api_key
def booking_consistency():
    """
    Run the booking consistency audit.

    Query Parameters:
        property_id (optional): Audit a single property

    Returns:
        {
            "status": "PASS" | "WARN" | "FAIL",
            "summary": {...},
            "issues": [...],
            "recommendations": [...]
        }

    Status Codes:
        200: Audit completed (regardless of findings)
        400: Invalid query parameters
    """
    property_id = request.args.get("property_id")
    if property_id is not None and not property_id.strip():
        return jsonify({
            "success": False,
            "error": "property_id must not be empty"
        }), 400

    report = run_consistency_check(property_id=property_id)

    logger.info(
        f"Booking consistency audit: property={property_id or 'all'}, "
        f"status={report.status}, issues={report.summary.issues_found}"
    )
    return jsonify(report.to_dict()), 200


@audit_bp.route("/audit/bookings/consistency/rules", methods=["GET"])
def consistency_rules():
    """List the rule categories a consistency audit runs, in run order."""
    return jsonify({
        "rules": [
            {"category": rule.category, "label": rule.label}
            for rule in CONSISTENCY_RULES.values()
        ]
    }), 200
