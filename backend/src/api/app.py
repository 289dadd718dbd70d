"""
Booking Audit - Flask API Application
App factory: CORS for the read-only API, health and audit blueprints,
JSON error handlers, and one structured log line per request.
"""

import time

from flask import Flask, g, jsonify, request
from flask_cors import CORS

from utils.config import FLASK_ENV, FLASK_DEBUG, SECRET_KEY
from utils.logger import logger, log_api_request
from api.routes.health import health_bp
from api.routes.audit import audit_bp
from api.middleware.error_handler import register_error_handlers

API_VERSION = "1.0.0"


def create_app() -> Flask:
    """
    Create and configure Flask application.

    Returns:
        Configured Flask app instance
    """
    app = Flask(__name__)

    app.config.update(
        ENV=FLASK_ENV,
        DEBUG=FLASK_DEBUG,
        SECRET_KEY=SECRET_KEY,
        JSON_SORT_KEYS=False,  # reports keep summary/issues/recommendations order
    )

    # The API only serves GETs; X-API-Key must be allowed through preflight
    CORS(app, resources={
        r"/api/*": {
            "origins": "*",
            "methods": ["GET", "OPTIONS"],
            "allow_headers": ["Content-Type", "X-API-Key"]
        }
    })

    app.register_blueprint(health_bp, url_prefix='/api')
    app.register_blueprint(audit_bp, url_prefix='/api')
    register_error_handlers(app)

    @app.before_request
    def start_timer():
        g.request_started = time.monotonic()

    @app.after_request
    def log_request(response):
        started = g.get('request_started')
        if started is not None:
            duration_ms = round((time.monotonic() - started) * 1000, 1)
            log_api_request(request.method, request.path, response.status_code, duration_ms)
        return response

    @app.route('/')
    def index():
        """Root endpoint with API information."""
        return jsonify({
            "name": "Booking Consistency Audit API",
            "version": API_VERSION,
            "status": "running",
            "endpoints": {
                "health": "/api/health",
                "consistency": "/api/audit/bookings/consistency",
                "rules": "/api/audit/bookings/consistency/rules"
            }
        })

    logger.info(f"Flask app created (env={FLASK_ENV}, debug={FLASK_DEBUG})")
    return app


if __name__ == '__main__':
    # Development server
    create_app().run(host='0.0.0.0', port=5000, debug=FLASK_DEBUG)
