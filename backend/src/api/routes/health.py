"""
Booking Audit - Health Check Endpoint
Provides API health status and booking database connectivity.
"""

from flask import Blueprint, jsonify
from datetime import datetime, timezone
from sqlalchemy import text

from database.connection import get_db_connection
from utils.logger import logger

health_bp = Blueprint('health', __name__)


@health_bp.route('/health', methods=['GET'])
def health_check():
    """
    Health check endpoint.

    Response:
        200 OK: Database reachable
        503 Service Unavailable: Database connection failed
    """
    health_data = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "api_version": "1.0.0",
        "checks": {}
    }

    try:
        with get_db_connection() as conn:
            conn.execute(text("SELECT 1")).fetchone()
            total_bookings = conn.execute(text("SELECT COUNT(*) FROM bookings")).scalar()

        health_data["checks"]["database"] = {
            "status": "healthy",
            "message": "Database connection successful",
            "total_bookings": int(total_bookings or 0)
        }

    except Exception as e:
        logger.error(f"Health check failed: {e}", exc_info=True)

        health_data["status"] = "unhealthy"
        health_data["checks"]["database"] = {
            "status": "unhealthy",
            "message": f"Database connection failed: {str(e)}"
        }
        return jsonify(health_data), 503

    return jsonify(health_data), 200
