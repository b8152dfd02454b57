"""
Order aggregation: line items plus order-level charges.

Charges are applied in a fixed sequence, and later charges compound on
earlier subtotals:

    1. printing subtotal and device revenue summed over line items
    2. setup fee (small print runs)
    3. extra design cost
    4. subtotal before turnaround
    5. turnaround fee on that whole subtotal (device revenue included)
    6. sample run fee
    7. subtotal
    8. sales tax
    9. shipping
   10. total quote

Setup, design and sample charges are driven by the order's print quantity,
so an order with no printing pays none of them regardless of device volume.
"""

from __future__ import annotations

import math
from typing import Sequence

from logging_config import get_logger
from models.order import Order, ShippingType, Turnaround
from models.quote import DesignCosts, LineItemPricing, QuoteResult
from .rate_tables import DEFAULT_RATE_TABLES, RateTables


logger = get_logger(__name__)


class OrderAggregator:
    """Sums priced line items and applies order-wide charges."""

    def __init__(self, rates: RateTables = DEFAULT_RATE_TABLES) -> None:
        self.rates = rates

    def setup_fee(self, print_quantity: int) -> float:
        if 0 < print_quantity < self.rates.setup_fee_threshold:
            return self.rates.setup_fee
        return 0.0

    def design_costs(self, print_quantity: int, num_designs: int, design_waivers: int) -> DesignCosts:
        """
        Extra design charges.

        One design is included per full 1000 printed units; designs beyond
        that are charged unless waived.
        """
        if print_quantity <= 0:
            return DesignCosts()

        included = math.floor(print_quantity / 1000) * self.rates.designs_per_thousand
        extra = max(0, num_designs - included)
        waived = min(design_waivers, extra)
        chargeable = extra - waived

        return DesignCosts(
            included_designs=included,
            extra_designs=extra,
            waived_designs=waived,
            chargeable_designs=chargeable,
            extra_design_cost=chargeable * self.rates.extra_design_fee,
        )

    def turnaround_fee(self, subtotal_before_turnaround: float, turnaround: Turnaround) -> float:
        return subtotal_before_turnaround * self.rates.turnaround_multipliers[turnaround]

    def sample_fee(self, print_quantity: int, sample_run: bool, waive_sample_fee: bool) -> float:
        if (
            sample_run
            and not waive_sample_fee
            and 0 < print_quantity < self.rates.sample_run_free_threshold
        ):
            return self.rates.sample_run_fee
        return 0.0

    @staticmethod
    def sales_tax(subtotal: float, sales_tax_rate_pct: float) -> float:
        return subtotal * sales_tax_rate_pct / 100

    @staticmethod
    def shipping_cost(shipping_type: ShippingType, base_quote: float, markup_pct: float) -> float:
        if shipping_type is ShippingType.PICKUP:
            return 0.0
        return base_quote * (1 + markup_pct / 100)

    def aggregate(
        self,
        order: Order,
        pricings: Sequence[LineItemPricing],
        base_price: float,
        pricing_tier_label: str = "",
    ) -> QuoteResult:
        """
        Build the customer quote for an order.

        Args:
            order: The order being priced
            pricings: Priced line items, in order
            base_price: Print price per unit used for the line items
            pricing_tier_label: Label of the print tier in force

        Returns:
            QuoteResult with every charge component
        """
        print_quantity = order.print_quantity

        base_printing_total = sum(p.base_printing_charge for p in pricings)
        gloss_total = sum(p.gloss_charge for p in pricings)
        double_sided_total = sum(p.double_sided_charge for p in pricings)
        packaging_total = sum(p.packaging_charge for p in pricings)
        printing_subtotal = sum(p.printing_subtotal for p in pricings)
        device_revenue_total = sum(p.device_revenue for p in pricings)

        setup_fee = self.setup_fee(print_quantity)
        designs = self.design_costs(print_quantity, order.num_designs, order.design_waivers)

        subtotal_before_turnaround = (
            printing_subtotal + device_revenue_total + setup_fee + designs.extra_design_cost
        )
        turnaround_rate = self.rates.turnaround_multipliers[order.turnaround]
        turnaround_fee = self.turnaround_fee(subtotal_before_turnaround, order.turnaround)
        sample_fee = self.sample_fee(print_quantity, order.sample_run, order.waive_sample_fee)

        subtotal = subtotal_before_turnaround + turnaround_fee + sample_fee
        sales_tax = self.sales_tax(subtotal, order.sales_tax_rate_pct)
        shipping = self.shipping_cost(
            order.shipping_type, order.shipping_base_quote, order.shipping_markup_pct
        )
        total_quote = subtotal + sales_tax + shipping

        logger.debug(
            f"Quote: subtotal ${subtotal:.2f}, tax ${sales_tax:.2f}, "
            f"shipping ${shipping:.2f}, total ${total_quote:.2f}"
        )

        return QuoteResult(
            base_price=base_price,
            pricing_tier_label=pricing_tier_label,
            line_items=tuple(pricings),
            base_printing_total=base_printing_total,
            gloss_total=gloss_total,
            double_sided_total=double_sided_total,
            packaging_total=packaging_total,
            printing_subtotal=printing_subtotal,
            device_revenue_total=device_revenue_total,
            line_items_subtotal=printing_subtotal + device_revenue_total,
            setup_fee=setup_fee,
            design_costs=designs,
            subtotal_before_turnaround=subtotal_before_turnaround,
            turnaround=order.turnaround,
            turnaround_rate=turnaround_rate,
            turnaround_fee=turnaround_fee,
            sample_fee=sample_fee,
            subtotal=subtotal,
            sales_tax_rate_pct=order.sales_tax_rate_pct,
            sales_tax=sales_tax,
            shipping_cost=shipping,
            total_quote=total_quote,
            total_quantity=order.total_quantity,
            print_quantity=print_quantity,
            is_below_minimum=0 < print_quantity < self.rates.minimum_order_quantity,
        )
