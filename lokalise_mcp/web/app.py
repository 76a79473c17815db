"""Flask application configuration and blueprint registration."""

from __future__ import annotations

from datetime import datetime, timezone

from flask import Flask, jsonify

from lokalise_mcp.config import AppConfig
from lokalise_mcp.logger import get_logger

from .routes.keys import CONFIG_KEY, keys_bp

logger = get_logger(__name__)

ENDPOINTS = [
    "POST /add-key - Add a single translation key",
    "POST /add-keys - Add multiple translation keys",
    "GET /health - Health check",
]


def build_app(config: AppConfig) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)

    # Ensure JSON responses keep Unicode data.
    app.json.ensure_ascii = False
    app.config[CONFIG_KEY] = config

    register_blueprints(app)
    register_default_routes(app)

    return app


def register_blueprints(app: Flask) -> None:
    """Register Flask blueprints."""
    app.register_blueprint(keys_bp)


def register_default_routes(app: Flask) -> None:
    """Register default health route and JSON error handlers."""

    @app.get("/health")
    def health_check():
        logger.debug("Health check requested")
        return jsonify({
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "endpoints": ENDPOINTS,
        })

    @app.errorhandler(404)
    def page_not_found(e):
        return jsonify({"error": "Not found", "endpoints": ENDPOINTS}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"error": "Method not allowed", "endpoints": ENDPOINTS}), 405

    @app.errorhandler(500)
    def internal_error(e):
        logger.exception(f"Internal server error: {e}")
        return jsonify({"error": "Unknown error occurred"}), 500
