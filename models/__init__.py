"""
Data models for the print quote engine.

This module contains immutable dataclasses for:
- Device: Catalog entry with capacity, unit cost and selling-price tiers
- Order / LineItem: Structured order description handed to the engine
- QuoteResult / CostFloorResult / ProfitResult: Computed engine output
- SavedQuote: Snapshot of an order and its totals at save time

All dataclasses are frozen, so engine input and output can be shared
between request threads without copying.
"""

from .device import Device, PricingTier
from .order import (
    Order,
    LineItem,
    ServiceType,
    Sides,
    GlossFinish,
    Packaging,
    Turnaround,
    ShippingType,
)
from .quote import (
    MarginStatus,
    ProductionEstimate,
    ProductionSchedule,
    ProductionMetrics,
    LineItemPricing,
    DesignCosts,
    QuoteResult,
    PreProductionCosts,
    ProductionCosts,
    PostProductionCosts,
    CostFloorResult,
    ProfitResult,
    PricedOrder,
)
from .saved_quote import SavedQuote, QuoteStatus

__all__ = [
    # Device models
    "Device",
    "PricingTier",
    # Order models
    "Order",
    "LineItem",
    "ServiceType",
    "Sides",
    "GlossFinish",
    "Packaging",
    "Turnaround",
    "ShippingType",
    # Result models
    "MarginStatus",
    "ProductionEstimate",
    "ProductionSchedule",
    "ProductionMetrics",
    "LineItemPricing",
    "DesignCosts",
    "QuoteResult",
    "PreProductionCosts",
    "ProductionCosts",
    "PostProductionCosts",
    "CostFloorResult",
    "ProfitResult",
    "PricedOrder",
    # Saved quotes
    "SavedQuote",
    "QuoteStatus",
]
