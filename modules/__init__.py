"""
Pricing engine for the print quote engine.

Components, leaf first:
- rate_tables: RateTables (immutable business rates) and loaders
- production: ProductionEstimator (batches, machine time, printer days)
- line_item_pricing: LineItemPricer (per-item charges and raw costs)
- order_aggregator: OrderAggregator (order-level charges, final quote)
- cost_floor: CostFloorCalculator (true cost to fulfil)
- profit: ProfitAnalyzer (profit, margin, per-unit metrics)
- engine: QuoteEngine / price_order (the single entry point)
- legacy: upgrades for stored legacy quote and device records
"""

from .rate_tables import (
    DEFAULT_RATE_TABLES,
    RateTables,
    generate_device_pricing_tiers,
    load_rate_tables,
)
from .production import ProductionEstimator
from .line_item_pricing import LineItemPricer, lookup_tier
from .order_aggregator import OrderAggregator
from .cost_floor import CostFloorCalculator
from .profit import ProfitAnalyzer
from .engine import QuoteEngine, price_order
from .legacy import migrate_device, normalize_legacy_order

__all__ = [
    "DEFAULT_RATE_TABLES",
    "RateTables",
    "generate_device_pricing_tiers",
    "load_rate_tables",
    "ProductionEstimator",
    "LineItemPricer",
    "lookup_tier",
    "OrderAggregator",
    "CostFloorCalculator",
    "ProfitAnalyzer",
    "QuoteEngine",
    "price_order",
    "migrate_device",
    "normalize_legacy_order",
]
