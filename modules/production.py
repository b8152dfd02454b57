"""Production time and printer scheduling estimates."""

from __future__ import annotations

import math
from typing import Iterable

from core.exceptions import InvalidDeviceError, InvalidOrderSettingError, ProductionScheduleError
from logging_config import get_logger
from models.quote import ProductionEstimate, ProductionMetrics, ProductionSchedule
from .rate_tables import DEFAULT_RATE_TABLES, RateTables


logger = get_logger(__name__)


class ProductionEstimator:
    """
    Estimates batches, machine time and workdays for printing.

    A batch is one load of devices in a printer (the device's capacity).
    Gloss adds drying and handling time per batch; double-sided printing
    runs every batch twice.
    """

    def __init__(self, rates: RateTables = DEFAULT_RATE_TABLES) -> None:
        self.rates = rates

    def estimate_line_item(
        self,
        quantity: int,
        device_capacity: int,
        has_gloss: bool,
        is_double_sided: bool,
    ) -> ProductionEstimate:
        """
        Estimate machine time for one line item.

        Args:
            quantity: Units to print
            device_capacity: Units per batch for the device
            has_gloss: Whether a gloss finish is applied
            is_double_sided: Whether both sides are printed

        Returns:
            ProductionEstimate with batches, minutes and hours

        Raises:
            InvalidDeviceError: If device_capacity is not positive
        """
        if device_capacity <= 0:
            raise InvalidDeviceError(f"capacity={device_capacity}", "capacity must be greater than zero")

        batches_needed = math.ceil(quantity / device_capacity)
        minutes_per_batch = (
            self.rates.minutes_per_batch_with_gloss if has_gloss else self.rates.minutes_per_batch
        )
        sides_multiplier = 2 if is_double_sided else 1
        total_minutes = batches_needed * minutes_per_batch * sides_multiplier

        return ProductionEstimate(
            batches_needed=batches_needed,
            minutes_per_batch=minutes_per_batch,
            total_minutes=total_minutes,
            hours=total_minutes / 60,
        )

    def optimize_printer_count(self, total_production_hours: float, requested_printers: int) -> int:
        """
        Decide how many of the requested printers to actually use.

        Short jobs gain nothing from parallel setup: under 2 hours runs on
        one printer, under 12 hours on at most two, anything larger on all
        requested printers.
        """
        if requested_printers < 1:
            raise InvalidOrderSettingError("printer_count", requested_printers, "must be at least 1")

        if total_production_hours < self.rates.single_printer_max_hours:
            return 1
        if total_production_hours < self.rates.limited_printer_max_hours:
            return min(self.rates.limited_printer_count, requested_printers)
        return requested_printers

    def estimate_production_days(
        self,
        total_batches: int,
        avg_minutes_per_batch: float,
        active_printers: int,
    ) -> ProductionSchedule:
        """
        Estimate workdays needed to run all batches.

        Raises:
            ProductionScheduleError: If not even one batch fits in a workday
        """
        if active_printers < 1:
            raise InvalidOrderSettingError("active_printers", active_printers, "must be at least 1")

        workday_minutes = self.rates.workday_minutes
        batches_per_printer_per_day = math.floor(workday_minutes / avg_minutes_per_batch)
        batches_per_day_total = batches_per_printer_per_day * active_printers
        if batches_per_day_total == 0:
            raise ProductionScheduleError(avg_minutes_per_batch, workday_minutes)

        return ProductionSchedule(
            days=math.ceil(total_batches / batches_per_day_total),
            batches_per_printer_per_day=batches_per_printer_per_day,
            batches_per_day_total=batches_per_day_total,
        )

    @staticmethod
    def effective_production_hours(total_production_hours: float, active_printers: int) -> float:
        """Wall-clock labor hours once the work is spread over active printers."""
        return total_production_hours / active_printers

    def average_minutes_per_batch(self, estimates: Iterable[ProductionEstimate]) -> float:
        """Batch-weighted mean of minutes per batch (default timing when there are no batches)."""
        estimates = list(estimates)
        total_batches = sum(e.batches_needed for e in estimates)
        if total_batches == 0:
            return float(self.rates.minutes_per_batch)
        weighted = sum(e.minutes_per_batch * e.batches_needed for e in estimates)
        return weighted / total_batches

    def build_metrics(
        self, estimates: Iterable[ProductionEstimate], requested_printers: int
    ) -> ProductionMetrics:
        """
        Combine per-item estimates into the order-wide schedule.

        Args:
            estimates: Production estimates of the printing line items
            requested_printers: Printers the order may use (1-20)

        Returns:
            ProductionMetrics for the whole order
        """
        estimates = list(estimates)
        total_batches = sum(e.batches_needed for e in estimates)
        total_minutes = sum(e.total_minutes for e in estimates)
        total_hours = sum(e.hours for e in estimates)
        avg_minutes = self.average_minutes_per_batch(estimates)

        active = self.optimize_printer_count(total_hours, requested_printers)
        schedule = self.estimate_production_days(total_batches, avg_minutes, active)

        logger.debug(
            f"Production: {total_batches} batches, {total_hours:.2f}h, "
            f"{active}/{requested_printers} printers, {schedule.days} day(s)"
        )

        return ProductionMetrics(
            total_batches=total_batches,
            total_print_minutes=total_minutes,
            total_production_hours=total_hours,
            avg_minutes_per_batch=avg_minutes,
            requested_printers=requested_printers,
            active_printers=active,
            production_days=schedule.days,
            batches_per_printer_per_day=schedule.batches_per_printer_per_day,
            batches_per_day_total=schedule.batches_per_day_total,
            effective_production_hours=self.effective_production_hours(total_hours, active),
        )
