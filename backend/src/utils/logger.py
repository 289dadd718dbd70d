"""
Booking Audit - Structured Logging
Provides JSON-formatted logging for log aggregation queries.
"""

import logging
import sys
from typing import Optional

from pythonjsonlogger import jsonlogger

from .config import LOG_LEVEL, config


def setup_logger(name: str = __name__) -> logging.Logger:
    """
    Configure structured JSON logger.

    Args:
        name: Logger name (typically __name__ from calling module)

    Returns:
        Configured logger instance

    Example:
        >>> logger = setup_logger(__name__)
        >>> logger.info("Audit completed", extra={
        ...     "total_bookings": 1200,
        ...     "issues_found": 14,
        ... })
    """
    logger = logging.getLogger(name)

    # Prevent duplicate handlers (own handlers only; root handlers do not count)
    if logger.handlers:
        return logger

    level = getattr(logging, LOG_LEVEL.upper(), logging.INFO)
    logger.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    formatter = jsonlogger.JsonFormatter(
        '%(asctime)s %(name)s %(levelname)s %(message)s',
        datefmt='%Y-%m-%dT%H:%M:%S'
    )
    handler.setFormatter(formatter)

    logger.addHandler(handler)

    # Don't propagate to root logger
    logger.propagate = False

    return logger


# Global logger instance
logger = setup_logger('booking_audit')


def log_audit_start(property_id: Optional[str], rule_count: int):
    """Log the start of a consistency audit run."""
    logger.info("Consistency audit started", extra={
        "event_type": "audit_start",
        "property_id": property_id,
        "rule_count": rule_count,
        "environment": config.environment
    })


def log_audit_complete(
    property_id: Optional[str],
    duration_seconds: float,
    total_bookings: int,
    issues_found: int,
    critical_issues: int
):
    """Log successful audit completion."""
    logger.info("Consistency audit completed", extra={
        "event_type": "audit_complete",
        "property_id": property_id,
        "duration_seconds": duration_seconds,
        "total_bookings": total_bookings,
        "issues_found": issues_found,
        "critical_issues": critical_issues
    })


def log_rule_error(error: Exception, category: str, property_id: Optional[str] = None):
    """Log a rule module failure with context."""
    logger.error("Consistency rule failed", extra={
        "event_type": "rule_error",
        "category": category,
        "property_id": property_id,
        "error_type": type(error).__name__,
        "error_message": str(error)
    }, exc_info=True)


def log_api_request(method: str, path: str, status_code: int, duration_ms: float):
    """Log API request metrics."""
    logger.info("API request", extra={
        "event_type": "api_request",
        "method": method,
        "path": path,
        "status_code": status_code,
        "duration_ms": duration_ms
    })


def log_database_error(error: Exception, query_context: str = None):
    """Log database error with context."""
    logger.error("Database error", extra={
        "event_type": "database_error",
        "error_type": type(error).__name__,
        "error_message": str(error),
        "query_context": query_context
    }, exc_info=True)
