"""
Per-line-item pricing.

Each line item gets its customer-facing charges (printing, add-ons, device
revenue) and its raw cost contributions (ink, repackaging, devices). The
print price per unit is looked up once per order, on the total print
quantity, and shared by every printing line item.
"""

from __future__ import annotations

from typing import Iterable, Optional

from core.exceptions import InvalidQuantityError, MissingFallbackTierError
from logging_config import get_logger
from models.device import PricingTier
from models.order import GlossFinish, LineItem, Packaging
from models.quote import LineItemPricing, ProductionEstimate
from .production import ProductionEstimator
from .rate_tables import DEFAULT_RATE_TABLES, RateTables


logger = get_logger(__name__)


def lookup_tier(quantity: int, tiers: Iterable[PricingTier], table_name: str = "pricing") -> float:
    """
    Return the price of the tier that applies to ``quantity``.

    The applicable tier is the one with the highest ``min_qty`` not above
    the quantity. Tables are sorted here so callers may pass them in any order.

    Raises:
        InvalidQuantityError: If quantity is negative
        MissingFallbackTierError: If no tier matches (no min_qty 0 tier)
    """
    if quantity < 0:
        raise InvalidQuantityError(quantity, "cannot be negative")

    for tier in sorted(tiers, key=lambda t: t.min_qty, reverse=True):
        if quantity >= tier.min_qty:
            return tier.price

    raise MissingFallbackTierError(table_name)


class LineItemPricer:
    """Prices line items against one set of rate tables."""

    def __init__(
        self,
        rates: RateTables = DEFAULT_RATE_TABLES,
        estimator: Optional[ProductionEstimator] = None,
    ) -> None:
        self.rates = rates
        self.estimator = estimator or ProductionEstimator(rates)

    def base_price(self, print_quantity: int) -> float:
        """Print price per unit for the order's total print quantity."""
        price = lookup_tier(print_quantity, self.rates.print_tiers, "print")
        logger.debug(f"Print tier for {print_quantity} units: ${price:.2f}/unit")
        return price

    def pricing_tier_label(self, print_quantity: int) -> str:
        """
        Human-readable range of the print tier in force.

        Examples: "1,000-2,999 units", "10,000+ units",
        "Below minimum (100 units)".
        """
        if print_quantity <= 0:
            return "No printing"
        if print_quantity < self.rates.minimum_order_quantity:
            return f"Below minimum ({self.rates.minimum_order_quantity:,} units)"

        tiers = self.rates.print_tiers  # highest min_qty first
        for index, tier in enumerate(tiers):
            if print_quantity >= tier.min_qty:
                if index == 0:
                    return f"{tier.min_qty:,}+ units"
                upper = tiers[index - 1].min_qty - 1
                return f"{tier.min_qty:,}-{upper:,} units"
        return f"{print_quantity:,} units"

    # -------------------------------------------------------------------------
    # Customer charges
    # -------------------------------------------------------------------------

    def gloss_charge(self, gloss_finish: GlossFinish, quantity: int) -> float:
        return self.rates.gloss_price[gloss_finish] * quantity

    def double_sided_charge(self, is_double_sided: bool, quantity: int) -> float:
        return self.rates.double_sided_price * quantity if is_double_sided else 0.0

    def packaging_charge(self, packaging: Packaging, quantity: int) -> float:
        return self.rates.packaging_price[packaging] * quantity

    # -------------------------------------------------------------------------
    # Cost floor contributions
    # -------------------------------------------------------------------------

    def cmyk_ink_cost(self, sides_printed: int, quantity: int) -> float:
        return self.rates.cmyk_ink_per_side * sides_printed * quantity

    def gloss_ink_cost(self, gloss_sides: int, quantity: int) -> float:
        return self.rates.gloss_ink_per_side * gloss_sides * quantity

    def repackaging_cost(self, packaging: Packaging, quantity: int) -> float:
        if packaging is Packaging.LOOSE:
            return 0.0
        return self.rates.repackaging_per_unit * quantity

    # -------------------------------------------------------------------------
    # Line item
    # -------------------------------------------------------------------------

    def price(self, item: LineItem, base_price: float) -> LineItemPricing:
        """
        Price one line item.

        Args:
            item: The line item
            base_price: Print price per unit for the whole order

        Returns:
            LineItemPricing with charges, costs and the production estimate
        """
        quantity = item.quantity

        if item.includes_printing:
            production = self.estimator.estimate_line_item(
                quantity=quantity,
                device_capacity=item.device.capacity,
                has_gloss=item.has_gloss,
                is_double_sided=item.is_double_sided,
            )
            base_printing = base_price * quantity
            gloss = self.gloss_charge(item.gloss_finish, quantity)
            double_sided = self.double_sided_charge(item.is_double_sided, quantity)
            packaging = self.packaging_charge(item.packaging, quantity)
            cmyk_ink = self.cmyk_ink_cost(item.sides_printed, quantity)
            gloss_ink = self.gloss_ink_cost(item.gloss_sides, quantity)
            repackaging = self.repackaging_cost(item.packaging, quantity)
        else:
            production = ProductionEstimate()
            base_printing = gloss = double_sided = packaging = 0.0
            cmyk_ink = gloss_ink = repackaging = 0.0

        if item.includes_devices:
            device_price = lookup_tier(
                quantity, item.device.pricing_tiers, f"device '{item.device.name}'"
            )
            device_revenue = device_price * quantity
            device_cost = item.device.unit_cost * quantity
        else:
            device_price = device_revenue = device_cost = 0.0

        printing_subtotal = base_printing + gloss + double_sided + packaging

        return LineItemPricing(
            item_id=item.item_id,
            device_name=item.device.name,
            service_type=item.service_type,
            quantity=quantity,
            includes_printing=item.includes_printing,
            includes_devices=item.includes_devices,
            production=production,
            base_printing_charge=base_printing,
            gloss_charge=gloss,
            double_sided_charge=double_sided,
            packaging_charge=packaging,
            printing_subtotal=printing_subtotal,
            device_selling_price=device_price,
            device_revenue=device_revenue,
            line_item_charge=printing_subtotal + device_revenue,
            sides_printed=item.sides_printed if item.includes_printing else 0,
            gloss_sides=item.gloss_sides,
            cmyk_ink_cost=cmyk_ink,
            gloss_ink_cost=gloss_ink,
            total_ink_cost=cmyk_ink + gloss_ink,
            repackaging_cost=repackaging,
            device_cost_floor=device_cost,
            device_profit=device_revenue - device_cost,
        )
