"""Health check endpoint."""

from flask import Blueprint, current_app

from .helpers import get_quote_service


health_bp = Blueprint("health", __name__)


@health_bp.route("/health", methods=["GET"])
def health():
    """Health check endpoint with service status."""
    service = get_quote_service()
    return {
        "status": "ok",
        "environment": current_app.config.get("ENVIRONMENT", "unknown"),
        "checks": {
            "rate_tables": current_app.config.get("RATE_TABLES_PATH") or "built-in",
            "devices": len(service.catalog.list()),
            "saved_quotes": len(service.store),
        },
    }
