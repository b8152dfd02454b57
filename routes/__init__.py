"""
Flask route blueprints for the print quote engine.

This module contains the JSON API organized by functionality:
- quotes: Pricing, saved quotes, comparison and customer summaries
- devices: Device catalog and account managers
- health: Health check

Each blueprint is registered with the Flask app in create_app().
"""

from .quotes import quotes_bp
from .devices import devices_bp
from .health import health_bp

__all__ = [
    "quotes_bp",
    "devices_bp",
    "health_bp",
]


def register_blueprints(app):
    """
    Register all blueprints with the Flask app.

    Args:
        app: Flask application instance
    """
    app.register_blueprint(quotes_bp)
    app.register_blueprint(devices_bp)
    app.register_blueprint(health_bp)
