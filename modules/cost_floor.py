"""Cost floor: what an order truly costs to fulfil, whatever is charged."""

from __future__ import annotations

from typing import Sequence

from logging_config import get_logger
from models.order import Order
from models.quote import (
    CostFloorResult,
    LineItemPricing,
    PostProductionCosts,
    PreProductionCosts,
    ProductionCosts,
    ProductionMetrics,
)
from .rate_tables import DEFAULT_RATE_TABLES, RateTables


logger = get_logger(__name__)


class CostFloorCalculator:
    """
    Sums raw costs into pre-production, production and post-production
    groups, plus the cost of supplied devices.

    Orders without printing carry only the device cost; the three
    production groups are all zero.
    """

    def __init__(self, rates: RateTables = DEFAULT_RATE_TABLES) -> None:
        self.rates = rates

    def pre_production(
        self, num_designs: int, production_days: int, sample_fee_charged: bool
    ) -> PreProductionCosts:
        # Sample work is always done; it only costs us when it is not billed
        sample_cost = 0.0 if sample_fee_charged else self.rates.sample_printing_cost
        file_setup = num_designs * self.rates.file_setup_per_design
        machine_setup = production_days * self.rates.machine_setup_per_day
        return PreProductionCosts(
            file_setup_cost=file_setup,
            file_setup_per_design=self.rates.file_setup_per_design,
            machine_setup_cost=machine_setup,
            machine_setup_per_day=self.rates.machine_setup_per_day,
            sample_printing_cost=sample_cost,
            total=file_setup + machine_setup + sample_cost,
        )

    def production(
        self, pricings: Sequence[LineItemPricing], effective_hours: float
    ) -> ProductionCosts:
        cmyk = sum(p.cmyk_ink_cost for p in pricings)
        gloss = sum(p.gloss_ink_cost for p in pricings)
        labor = effective_hours * self.rates.labor_per_hour
        return ProductionCosts(
            cmyk_ink_cost=cmyk,
            gloss_ink_cost=gloss,
            ink_cost=cmyk + gloss,
            labor_cost=labor,
            labor_per_hour=self.rates.labor_per_hour,
            effective_hours=effective_hours,
            total=cmyk + gloss + labor,
        )

    def post_production(self, pricings: Sequence[LineItemPricing]) -> PostProductionCosts:
        repackaging = sum(p.repackaging_cost for p in pricings)
        staging = (
            self.rates.shipping_staging_minutes / 60 * self.rates.shipping_staging_hourly_rate
        )
        return PostProductionCosts(
            repackaging_cost=repackaging,
            shipping_staging_cost=staging,
            shipping_staging_minutes=self.rates.shipping_staging_minutes,
            shipping_staging_hourly_rate=self.rates.shipping_staging_hourly_rate,
            total=repackaging + staging,
        )

    def calculate(
        self,
        order: Order,
        pricings: Sequence[LineItemPricing],
        production: ProductionMetrics,
        sample_fee: float,
    ) -> CostFloorResult:
        """
        Compute the order's cost floor.

        Args:
            order: The order being priced
            pricings: Priced line items
            production: Order-wide production metrics
            sample_fee: Sample fee actually charged on the quote

        Returns:
            CostFloorResult with each cost group broken out
        """
        device_cost = sum(p.device_cost_floor for p in pricings)

        if order.has_printing:
            pre = self.pre_production(
                order.num_designs, production.production_days, sample_fee > 0
            )
            prod = self.production(pricings, production.effective_production_hours)
            post = self.post_production(pricings)
        else:
            pre, prod, post = PreProductionCosts(), ProductionCosts(), PostProductionCosts()

        total = pre.total + prod.total + post.total + device_cost
        logger.debug(
            f"Cost floor: pre ${pre.total:.2f}, production ${prod.total:.2f}, "
            f"post ${post.total:.2f}, devices ${device_cost:.2f}"
        )

        return CostFloorResult(
            pre_production=pre,
            production=prod,
            post_production=post,
            device_cost_floor=device_cost,
            total=total,
        )
