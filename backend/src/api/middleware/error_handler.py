"""
Booking Audit - Error Handler Middleware
JSON error bodies for every API failure.
"""

from flask import jsonify, Flask
from werkzeug.exceptions import HTTPException

from utils.logger import logger


def _error_response(status_code: int, error: str, message: str):
    return jsonify({"error": error, "message": message}), status_code


def register_error_handlers(app: Flask):
    """
    Register error handlers for Flask app.

    Args:
        app: Flask application instance
    """

    @app.errorhandler(HTTPException)
    def handle_http_exception(error: HTTPException):
        """Map any werkzeug HTTP error (400, 401, 404, 405, ...) to a JSON body."""
        if error.code and error.code >= 500:
            logger.error(f"HTTP {error.code}: {error}")
        else:
            logger.info(f"HTTP {error.code}: {error.name}")
        return _error_response(error.code or 500, error.name, error.description or error.name)

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        """Handle all unhandled exceptions."""
        logger.error(f"Unexpected error: {error}", exc_info=True)
        return _error_response(
            500,
            "Internal Server Error",
            "An unexpected error occurred. Please try again later."
        )
