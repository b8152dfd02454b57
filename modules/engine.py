"""
Quote engine entry point.

Wires the components together in their dependency order:

    order -> ProductionEstimator -> LineItemPricer
          -> {OrderAggregator, CostFloorCalculator} -> ProfitAnalyzer

Every call is a pure computation over the order and the injected rate
tables. There is no cached state, so one engine instance can be shared by
any number of threads.

Usage:
    from modules.engine import price_order

    priced = price_order(order)
    print(priced.quote.total_quote, priced.profit.profit_margin)
"""

from __future__ import annotations

from logging_config import get_logger
from models.order import Order
from models.quote import PricedOrder
from .cost_floor import CostFloorCalculator
from .line_item_pricing import LineItemPricer
from .order_aggregator import OrderAggregator
from .production import ProductionEstimator
from .profit import ProfitAnalyzer
from .rate_tables import DEFAULT_RATE_TABLES, RateTables


logger = get_logger(__name__)


class QuoteEngine:
    """Prices orders against one immutable set of rate tables."""

    def __init__(self, rates: RateTables = DEFAULT_RATE_TABLES) -> None:
        self.rates = rates
        self.estimator = ProductionEstimator(rates)
        self.pricer = LineItemPricer(rates, self.estimator)
        self.aggregator = OrderAggregator(rates)
        self.cost_floor = CostFloorCalculator(rates)
        self.profit = ProfitAnalyzer(rates)

    def price_order(self, order: Order) -> PricedOrder:
        """
        Compute quote, cost floor, profit and production metrics for an order.

        Args:
            order: Validated order

        Returns:
            PricedOrder snapshot

        Raises:
            ConfigurationError: If the order cannot be quoted (bad tiers,
                impossible schedule)
        """
        print_quantity = order.print_quantity
        base_price = self.pricer.base_price(print_quantity)

        pricings = [self.pricer.price(item, base_price) for item in order.line_items]

        production = self.estimator.build_metrics(
            (p.production for p in pricings if p.includes_printing),
            order.printer_count,
        )

        quote = self.aggregator.aggregate(
            order,
            pricings,
            base_price,
            self.pricer.pricing_tier_label(print_quantity),
        )
        cost_floor = self.cost_floor.calculate(order, pricings, production, quote.sample_fee)
        profit = self.profit.analyze(quote.total_quote, cost_floor.total, order.total_quantity)

        logger.debug(
            f"Priced order: {len(order.line_items)} line item(s), "
            f"{order.total_quantity} units, total ${quote.total_quote:.2f}, "
            f"margin {profit.profit_margin:.1f}% ({profit.margin_status.value})"
        )

        return PricedOrder(
            quote=quote,
            cost_floor=cost_floor,
            profit=profit,
            production=production,
        )


def price_order(order: Order, rates: RateTables = DEFAULT_RATE_TABLES) -> PricedOrder:
    """Price ``order`` with ``rates`` (built-in rates by default)."""
    return QuoteEngine(rates).price_order(order)
