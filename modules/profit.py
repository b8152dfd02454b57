"""Profit metrics derived from the quote total and the cost floor."""

from __future__ import annotations

from models.quote import MarginStatus, ProfitResult
from .rate_tables import DEFAULT_RATE_TABLES, RateTables


class ProfitAnalyzer:
    def __init__(self, rates: RateTables = DEFAULT_RATE_TABLES) -> None:
        self.rates = rates

    def margin_status(self, profit_margin: float) -> MarginStatus:
        if profit_margin >= self.rates.margin_good_pct:
            return MarginStatus.GOOD
        if profit_margin >= self.rates.margin_warning_pct:
            return MarginStatus.WARNING
        return MarginStatus.DANGER

    def analyze(self, total_quote: float, cost_floor_total: float, total_quantity: int) -> ProfitResult:
        """
        Gross profit, margin and per-unit figures.

        A zero quote or zero quantity yields zero metrics rather than an
        error; orders pass through zero quantities while being edited.
        """
        gross_profit = total_quote - cost_floor_total
        margin = 100 * gross_profit / total_quote if total_quote > 0 else 0.0

        if total_quantity > 0:
            cost_per_unit = cost_floor_total / total_quantity
            price_per_unit = total_quote / total_quantity
            profit_per_unit = gross_profit / total_quantity
        else:
            cost_per_unit = price_per_unit = profit_per_unit = 0.0

        return ProfitResult(
            gross_profit=gross_profit,
            profit_margin=margin,
            cost_per_unit=cost_per_unit,
            price_per_unit=price_per_unit,
            profit_per_unit=profit_per_unit,
            margin_status=self.margin_status(margin),
        )
