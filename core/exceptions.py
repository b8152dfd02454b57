"""
Custom exceptions for the print quote engine.

Exception Hierarchy:
    QuoteEngineError (base)
    ├── ConfigurationError            - input cannot be quoted (fail fast)
    │   ├── InvalidQuantityError      - negative or oversized quantity
    │   ├── InvalidDeviceError        - device capacity/cost out of range
    │   ├── MissingFallbackTierError  - tier table has no min_qty = 0 tier
    │   ├── EmptyOrderError           - order has no line items
    │   ├── InvalidOrderSettingError  - order-level setting out of range
    │   └── ProductionScheduleError   - schedule cannot fit a single batch per day
    ├── DeviceNotFoundError           - catalog lookup failed
    └── QuoteNotFoundError            - saved quote lookup failed

Usage:
    Configuration errors mean the engine refuses to quote. A plausible but
    wrong quote is worse than no quote, so nothing is silently defaulted.
    Callers (routes, services) translate ``error_kind`` into user messages.
"""

from typing import Optional, Dict, Any


class QuoteEngineError(Exception):
    """
    Base exception for all quote engine errors.

    All custom exceptions inherit from this class, allowing callers to catch
    all application-specific errors with a single except clause if needed.
    """

    error_kind = "QuoteEngineError"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional context for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly error body."""
        return {
            "error": self.error_kind,
            "message": self.message,
            "details": self.details,
        }


# =============================================================================
# CONFIGURATION ERRORS - The engine refuses to produce a quote
# =============================================================================

class ConfigurationError(QuoteEngineError):
    """
    The order or rate configuration cannot be quoted.

    Raised before any arithmetic happens. The caller must fix the input.
    """

    error_kind = "ConfigurationError"


class InvalidQuantityError(ConfigurationError):
    """A line item quantity is negative, not an integer, or above the maximum."""

    error_kind = "InvalidQuantity"

    def __init__(self, quantity: Any, reason: str = "must be a non-negative integer"):
        message = f"Invalid quantity {quantity!r}: {reason}"
        details = {
            "quantity": quantity,
            "resolution": "Enter a whole number of units for each line item",
        }
        super().__init__(message, details)
        self.quantity = quantity


class InvalidDeviceError(ConfigurationError):
    """
    A device record cannot be used for production estimates.

    Typical causes:
    - capacity of zero (no units fit in a batch)
    - negative unit cost
    - blank name
    """

    error_kind = "InvalidDevice"

    def __init__(self, device_name: str, reason: str):
        message = f"Invalid device '{device_name}': {reason}"
        details = {
            "device": device_name,
            "resolution": "Fix the device record in the device catalog",
        }
        super().__init__(message, details)
        self.device_name = device_name


class MissingFallbackTierError(ConfigurationError):
    """A pricing tier table has no min_qty = 0 tier, so some quantities match nothing."""

    error_kind = "MissingFallbackTier"

    def __init__(self, table_name: str):
        message = f"Pricing tier table '{table_name}' has no min_qty = 0 fallback tier"
        details = {
            "table": table_name,
            "resolution": "Add a tier with min_qty 0 to the table",
        }
        super().__init__(message, details)
        self.table_name = table_name


class EmptyOrderError(ConfigurationError):
    """An order was submitted with no line items."""

    error_kind = "EmptyOrder"

    def __init__(self, message: str = "Order has no line items"):
        details = {"resolution": "Add at least one line item to the order"}
        super().__init__(message, details)


class InvalidOrderSettingError(ConfigurationError):
    """An order-level setting (printers, designs, rates, enum values) is out of range."""

    error_kind = "InvalidOrderSetting"

    def __init__(self, setting: str, value: Any, reason: str):
        message = f"Invalid value {value!r} for '{setting}': {reason}"
        details = {
            "setting": setting,
            "value": value,
            "resolution": "Correct the order settings and try again",
        }
        super().__init__(message, details)
        self.setting = setting
        self.value = value


class ProductionScheduleError(ConfigurationError):
    """
    The production schedule cannot fit one batch into a workday.

    This happens only when minutes per batch exceed the workday length,
    which means the rate tables are misconfigured.
    """

    error_kind = "ProductionSchedule"

    def __init__(self, avg_minutes_per_batch: float, workday_minutes: float):
        message = (
            f"Average batch time {avg_minutes_per_batch:.1f} min exceeds "
            f"workday of {workday_minutes:.0f} min"
        )
        details = {
            "avg_minutes_per_batch": avg_minutes_per_batch,
            "workday_minutes": workday_minutes,
            "resolution": "Check batch timings and workday hours in the rate tables",
        }
        super().__init__(message, details)


# =============================================================================
# LOOKUP ERRORS - Collaborators could not resolve a reference
# =============================================================================

class DeviceNotFoundError(QuoteEngineError):
    """The device catalog has no device at the given index or name."""

    error_kind = "DeviceNotFound"

    def __init__(self, reference: Any):
        message = f"Device not found: {reference!r}"
        details = {
            "reference": reference,
            "resolution": "Pick a device from the catalog",
        }
        super().__init__(message, details)
        self.reference = reference


class QuoteNotFoundError(QuoteEngineError):
    """No saved quote exists with the given id."""

    error_kind = "QuoteNotFound"

    def __init__(self, quote_id: str):
        message = f"Quote not found: {quote_id}"
        details = {"quote_id": quote_id}
        super().__init__(message, details)
        self.quote_id = quote_id
