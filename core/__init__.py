"""
Core module for the print quote engine.

Contains fundamental infrastructure components:
- exceptions: Custom exception hierarchy
"""

from .exceptions import (
    QuoteEngineError,
    ConfigurationError,
    InvalidQuantityError,
    InvalidDeviceError,
    MissingFallbackTierError,
    EmptyOrderError,
    InvalidOrderSettingError,
    ProductionScheduleError,
    DeviceNotFoundError,
    QuoteNotFoundError,
)

__all__ = [
    "QuoteEngineError",
    "ConfigurationError",
    "InvalidQuantityError",
    "InvalidDeviceError",
    "MissingFallbackTierError",
    "EmptyOrderError",
    "InvalidOrderSettingError",
    "ProductionScheduleError",
    "DeviceNotFoundError",
    "QuoteNotFoundError",
]
