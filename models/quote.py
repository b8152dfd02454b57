"""
Computed quote data models.

These records are the engine's output: every fee and cost component that
went into a total is kept, so the invoice renderer, CSV export and quote
comparison can show transparent breakdowns without recomputing anything.

Thread Safety:
    - All records are frozen dataclasses built once per pricing call
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Tuple

from .order import ServiceType, Turnaround


def _serialize(pairs) -> Dict[str, Any]:
    """dict_factory for asdict() that flattens enums to their values."""
    return {
        key: value.value if isinstance(value, Enum) else value
        for key, value in pairs
    }


class ResultRecord:
    """Mixin giving frozen result dataclasses a JSON-friendly ``to_dict``."""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self, dict_factory=_serialize)


class MarginStatus(Enum):
    """Profit margin classification used for color coding."""

    GOOD = "good"
    WARNING = "warning"
    DANGER = "danger"


# =============================================================================
# PRODUCTION
# =============================================================================

@dataclass(frozen=True)
class ProductionEstimate(ResultRecord):
    """Machine time for one line item."""

    batches_needed: int = 0
    minutes_per_batch: int = 0
    total_minutes: int = 0
    hours: float = 0.0


@dataclass(frozen=True)
class ProductionSchedule(ResultRecord):
    """How many workdays the printers need for the order's batches."""

    days: int
    batches_per_printer_per_day: int
    batches_per_day_total: int


@dataclass(frozen=True)
class ProductionMetrics(ResultRecord):
    """Order-wide production figures."""

    total_batches: int
    total_print_minutes: int
    total_production_hours: float
    avg_minutes_per_batch: float
    requested_printers: int
    active_printers: int
    """Printers actually used after anti-overallocation."""

    production_days: int
    batches_per_printer_per_day: int
    batches_per_day_total: int
    effective_production_hours: float
    """Wall-clock labor hours: total hours spread across active printers."""


# =============================================================================
# LINE ITEMS
# =============================================================================

@dataclass(frozen=True)
class LineItemPricing(ResultRecord):
    """Customer charges and cost-floor contributions of one line item."""

    item_id: str
    device_name: str
    service_type: ServiceType
    quantity: int
    includes_printing: bool
    includes_devices: bool
    production: ProductionEstimate

    # Customer-facing charges
    base_printing_charge: float
    gloss_charge: float
    double_sided_charge: float
    packaging_charge: float
    printing_subtotal: float
    device_selling_price: float
    device_revenue: float
    line_item_charge: float

    # Cost floor contributions
    sides_printed: int
    gloss_sides: int
    cmyk_ink_cost: float
    gloss_ink_cost: float
    total_ink_cost: float
    repackaging_cost: float
    device_cost_floor: float
    device_profit: float


# =============================================================================
# QUOTE
# =============================================================================

@dataclass(frozen=True)
class DesignCosts(ResultRecord):
    included_designs: int = 0
    extra_designs: int = 0
    waived_designs: int = 0
    chargeable_designs: int = 0
    extra_design_cost: float = 0.0


@dataclass(frozen=True)
class QuoteResult(ResultRecord):
    """The customer-facing quote, with every component that built it."""

    base_price: float
    """Print price per unit, shared by every printing line item."""

    pricing_tier_label: str
    line_items: Tuple[LineItemPricing, ...]

    # Sums over line items
    base_printing_total: float
    gloss_total: float
    double_sided_total: float
    packaging_total: float
    printing_subtotal: float
    device_revenue_total: float
    line_items_subtotal: float

    # Order-level charges
    setup_fee: float
    design_costs: DesignCosts
    subtotal_before_turnaround: float
    turnaround: Turnaround
    turnaround_rate: float
    turnaround_fee: float
    sample_fee: float
    subtotal: float
    sales_tax_rate_pct: float
    sales_tax: float
    shipping_cost: float
    total_quote: float

    total_quantity: int
    print_quantity: int
    is_below_minimum: bool
    """Printing below the minimum order quantity (flagged, still quoted)."""


# =============================================================================
# COST FLOOR
# =============================================================================

@dataclass(frozen=True)
class PreProductionCosts(ResultRecord):
    file_setup_cost: float = 0.0
    file_setup_per_design: float = 0.0
    machine_setup_cost: float = 0.0
    machine_setup_per_day: float = 0.0
    sample_printing_cost: float = 0.0
    total: float = 0.0


@dataclass(frozen=True)
class ProductionCosts(ResultRecord):
    cmyk_ink_cost: float = 0.0
    gloss_ink_cost: float = 0.0
    ink_cost: float = 0.0
    labor_cost: float = 0.0
    labor_per_hour: float = 0.0
    effective_hours: float = 0.0
    total: float = 0.0


@dataclass(frozen=True)
class PostProductionCosts(ResultRecord):
    repackaging_cost: float = 0.0
    shipping_staging_cost: float = 0.0
    shipping_staging_minutes: float = 0.0
    shipping_staging_hourly_rate: float = 0.0
    total: float = 0.0


@dataclass(frozen=True)
class CostFloorResult(ResultRecord):
    """True cost to fulfil the order, independent of what is charged."""

    pre_production: PreProductionCosts
    production: ProductionCosts
    post_production: PostProductionCosts
    device_cost_floor: float
    total: float


# =============================================================================
# PROFIT
# =============================================================================

@dataclass(frozen=True)
class ProfitResult(ResultRecord):
    gross_profit: float
    profit_margin: float
    """Percent of the total quote."""

    cost_per_unit: float
    price_per_unit: float
    profit_per_unit: float
    margin_status: MarginStatus


@dataclass(frozen=True)
class PricedOrder(ResultRecord):
    """Everything ``price_order`` computes for one order."""

    quote: QuoteResult
    cost_floor: CostFloorResult
    profit: ProfitResult
    production: ProductionMetrics
