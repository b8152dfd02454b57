"""
Configuration for the print quote engine.

Business rates (price tiers, fees, costs) live in the rate tables, not here.
This module only decides WHERE the rate tables come from and what the
order-level defaults are for a fresh quote.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file early so environment variables are available for Config class
# This must happen before the Config class is defined
load_dotenv(override=True)

# Base directory (where this file lives)
BASE_DIR = Path(__file__).resolve().parent


class Config:
    """Default configuration for the Flask application."""

    # Flask settings
    SECRET_KEY = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
    JSON_SORT_KEYS = False
    ENVIRONMENT = os.environ.get("FLASK_ENV", "development")

    # Debug mode
    DEBUG = os.environ.get("FLASK_DEBUG", "1") == "1"

    # ==========================================================================
    # Rate Tables
    # ==========================================================================
    # QUOTE_RATE_TABLES_PATH: optional JSON file overriding the built-in rate
    #   tables. Keys that are not present keep their built-in values.
    #   Example: {"setup_fee": 175, "labor_per_hour": 25}
    # ==========================================================================
    RATE_TABLES_PATH = os.environ.get("QUOTE_RATE_TABLES_PATH", "")

    # ==========================================================================
    # Order Defaults (used for new quotes and legacy records missing a value)
    # ==========================================================================
    DEFAULT_PRINTER_COUNT = int(os.environ.get("QUOTE_DEFAULT_PRINTER_COUNT", "3"))
    DEFAULT_SHIPPING_MARKUP_PCT = float(
        os.environ.get("QUOTE_DEFAULT_SHIPPING_MARKUP_PCT", "20")
    )
    DEFAULT_SALES_TAX_PCT = float(os.environ.get("QUOTE_DEFAULT_SALES_TAX_PCT", "0"))


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    TESTING = False


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    TESTING = False


class TestingConfig(Config):
    """Testing configuration."""
    DEBUG = False
    TESTING = True
    RATE_TABLES_PATH = ""
