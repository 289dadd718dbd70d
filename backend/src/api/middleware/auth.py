"""
Booking Audit - API Key Authentication Middleware
Audit reports contain guest contact details, so every audit endpoint sits
behind an X-API-Key check.
"""

from functools import wraps
from typing import Iterable, Optional

from flask import request, jsonify

from utils.config import config
from utils.logger import logger


def _parse_keys(raw: Optional[str]) -> frozenset:
    return frozenset(key.strip() for key in (raw or '').split(',') if key.strip())


class APIKeyAuth:
    """
    API key authentication for audit endpoints.

    Keys come from the AUDIT_API_KEYS setting (comma-separated; SSM in
    production). With no keys configured, local environments run open while
    production refuses every request.
    """

    def __init__(self, keys: Optional[Iterable[str]] = None, open_when_unconfigured: Optional[bool] = None):
        self.valid_api_keys = frozenset(keys) if keys is not None else _parse_keys(config.get('AUDIT_API_KEYS', ''))
        if open_when_unconfigured is None:
            open_when_unconfigured = not config.is_production
        self.open_when_unconfigured = open_when_unconfigured

        if not self.valid_api_keys:
            if self.open_when_unconfigured:
                logger.warning("No audit API keys configured - authentication disabled")
            else:
                logger.warning("No audit API keys configured - audit endpoints will reject all requests")

    def _reject(self, message: str):
        logger.warning(message, extra={
            "path": request.path,
            "remote_addr": request.remote_addr
        })
        return jsonify({"error": "Unauthorized", "message": message}), 401

    def require_api_key(self, f):
        """
        Decorator to require a valid API key.

        Usage:
            @audit_bp.route('/audit/bookings/consistency')
            @api_key_auth.require_api_key
            def booking_consistency():
                ...
        """
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not self.valid_api_keys:
                if self.open_when_unconfigured:
                    return f(*args, **kwargs)
                return self._reject("Audit API keys are not configured")

            api_key = request.headers.get('X-API-Key')
            if not api_key:
                return self._reject("Missing X-API-Key header")
            if api_key not in self.valid_api_keys:
                return self._reject("Invalid API key")

            return f(*args, **kwargs)

        return decorated_function


# Global instance
api_key_auth = APIKeyAuth()
