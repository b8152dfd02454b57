"""
Print Quote Engine - Flask Application Entry Point.

This is a slim app factory that:
1. Loads the rate tables (fail-fast on a bad override file)
2. Creates the quote engine and its collaborator services
3. Registers route blueprints
4. Sets up JSON error handlers

ARCHITECTURE:
    Main Thread
    ├── Rate table loading
    └── Flask request handling

    Request Threads
    └── Share one QuoteService; the engine is pure and the catalog,
        store and manager list are lock-guarded
"""

from __future__ import annotations

import logging
import os

from flask import Flask
from werkzeug.exceptions import HTTPException

from logging_config import setup_logging, get_logger
from core.exceptions import DeviceNotFoundError, QuoteEngineError, QuoteNotFoundError
from modules.engine import QuoteEngine
from modules.rate_tables import load_rate_tables
from services import AccountManagerRegistry, DeviceCatalog, QuoteService, QuoteStore
from routes import register_blueprints


# Module logger (configured after setup_logging)
logger = get_logger(__name__)


def create_app(config_object: str = "config.Config") -> Flask:
    """
    Application factory - creates and configures Flask app.

    FAIL-FAST: If the rate table override file is missing or invalid, the
    app will not start. Quoting with the wrong rates is worse than not
    quoting at all.

    Args:
        config_object: Import path of the configuration class

    Returns:
        Configured Flask application

    Raises:
        ConfigurationError: If the rate tables cannot be loaded
    """
    app = Flask(__name__)
    app.config.from_object(config_object)

    # Configure logging
    log_level = logging.DEBUG if app.config.get("DEBUG") else logging.INFO
    enable_file_logging = app.config.get("ENVIRONMENT") == "production"

    root_logger = setup_logging(
        log_level=log_level,
        enable_file_logging=enable_file_logging and not app.config.get("TESTING")
    )

    # Set Flask's logger to use our configured logger
    app.logger.handlers = root_logger.handlers
    app.logger.setLevel(log_level)

    logger.info(f"Starting print quote engine in {app.config.get('ENVIRONMENT')} mode")

    # =========================================================================
    # CORE INITIALIZATION (FAIL-FAST)
    # =========================================================================

    try:
        rates = load_rate_tables(app.config.get("RATE_TABLES_PATH"))
    except QuoteEngineError as e:
        logger.error(f"FATAL: Cannot start application - {e}")
        raise

    app.config["RATE_TABLES"] = rates

    # =========================================================================
    # SERVICES INITIALIZATION
    # =========================================================================

    quote_service = QuoteService(
        engine=QuoteEngine(rates),
        catalog=DeviceCatalog(rates),
        store=QuoteStore(),
        managers=AccountManagerRegistry(),
        order_defaults={
            "printer_count": app.config.get("DEFAULT_PRINTER_COUNT", 3),
            "shipping_markup_pct": app.config.get("DEFAULT_SHIPPING_MARKUP_PCT", 20.0),
            "sales_tax_rate_pct": app.config.get("DEFAULT_SALES_TAX_PCT", 0.0),
        },
    )
    app.config["QUOTE_SERVICE"] = quote_service
    logger.info("Quote service initialized")

    # =========================================================================
    # REGISTER BLUEPRINTS
    # =========================================================================

    register_blueprints(app)

    # =========================================================================
    # ERROR HANDLERS
    # =========================================================================

    @app.errorhandler(QuoteEngineError)
    def handle_quote_error(e: QuoteEngineError):
        if isinstance(e, (DeviceNotFoundError, QuoteNotFoundError)):
            return e.to_dict(), 404
        logger.warning(f"Rejected request: {e}")
        return e.to_dict(), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return {
            "error": e.name.replace(" ", ""),
            "message": e.description,
            "details": {},
        }, e.code

    @app.errorhandler(500)
    def handle_server_error(e):
        logger.error(f"500 error: {e}", exc_info=True)
        return {
            "error": "InternalServerError",
            "message": "An unexpected error occurred. Please try again.",
            "details": {},
        }, 500

    logger.info("Application initialized successfully")
    return app


if __name__ == "__main__":
    app = create_app()
    debug_mode = os.environ.get("FLASK_DEBUG", "1") == "1"
    app.run(debug=debug_mode)
