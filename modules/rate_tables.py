"""
Rate tables: every price, fee, cost and timing constant the engine uses.

The tables are business configuration. They are held in one immutable
``RateTables`` value that is passed into the engine, so a quote can be
re-evaluated against the rates in effect when it was saved, and a rate
change never means editing calculation code.

Overrides come from a JSON file (``QUOTE_RATE_TABLES_PATH``); keys that are
absent keep the built-in values:

    {
        "setup_fee": 175,
        "print_tiers": [{"min_qty": 1000, "price": 0.68}, {"min_qty": 0, "price": 0.80}],
        "turnaround_multipliers": {"rush": 0.15}
    }
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple, Type, Union

from core.exceptions import ConfigurationError, MissingFallbackTierError
from logging_config import get_logger
from models.device import PricingTier, normalize_tiers
from models.order import GlossFinish, Packaging, Turnaround


logger = get_logger(__name__)


def _frozen(mapping: Dict[Any, float]) -> Mapping[Any, float]:
    return MappingProxyType(dict(mapping))


# Printing price per unit by total print quantity across the order
DEFAULT_PRINT_TIERS: Tuple[PricingTier, ...] = (
    PricingTier(10000, 0.60),  # 10,000-24,999
    PricingTier(5000, 0.60),   # 5,000-9,999
    PricingTier(3000, 0.65),   # 3,000-4,999
    PricingTier(1000, 0.70),   # 1,000-2,999
    PricingTier(500, 0.75),    # 500-999, setup fee applies
    PricingTier(100, 0.80),    # 100-499, setup fee applies
    PricingTier(0, 0.80),      # below minimum
)

# Markup over unit cost used to generate selling tiers for new devices
DEFAULT_DEVICE_MARKUP_TIERS: Tuple[Tuple[int, float], ...] = (
    (10000, 22.0),
    (5000, 25.0),
    (3000, 30.0),
    (1000, 35.0),
    (100, 40.0),
    (0, 40.0),
)

# Selling tiers for the stock catalog devices
DEFAULT_DEVICE_PRICING_TIERS: Dict[str, Tuple[PricingTier, ...]] = {
    "1mg Disposable": (
        PricingTier(10000, 2.50),
        PricingTier(5000, 2.75),
        PricingTier(3000, 3.00),
        PricingTier(1000, 3.25),
        PricingTier(100, 3.75),
        PricingTier(0, 3.75),
    ),
    "2mg Disposable": (
        PricingTier(10000, 2.70),
        PricingTier(5000, 2.95),
        PricingTier(3000, 3.20),
        PricingTier(1000, 3.45),
        PricingTier(100, 3.95),
        PricingTier(0, 3.95),
    ),
    "MK Lighter": (
        PricingTier(10000, 0.80),
        PricingTier(5000, 0.85),
        PricingTier(3000, 0.95),
        PricingTier(1000, 1.00),
        PricingTier(100, 1.20),
        PricingTier(0, 1.20),
    ),
}


@dataclass(frozen=True)
class RateTables:
    """Immutable bundle of business rates, injected into every engine component."""

    # -------------------------------------------------------------------------
    # Customer pricing
    # -------------------------------------------------------------------------
    print_tiers: Tuple[PricingTier, ...] = DEFAULT_PRINT_TIERS

    gloss_price: Mapping[GlossFinish, float] = field(default_factory=lambda: _frozen({
        GlossFinish.NONE: 0.0,
        GlossFinish.SINGLE_SIDE: 0.07,
        GlossFinish.BOTH_SIDES: 0.12,
    }))
    double_sided_price: float = 0.35
    packaging_price: Mapping[Packaging, float] = field(default_factory=lambda: _frozen({
        Packaging.LOOSE: 0.0,
        Packaging.PARTNER_PACK: 0.11,
        Packaging.CLIENT_PACK: 0.16,
    }))

    setup_fee: float = 150.0
    setup_fee_threshold: int = 1000
    """Setup fee applies below this print quantity."""

    extra_design_fee: float = 35.0
    designs_per_thousand: int = 1
    """Designs included per 1000 printed units."""

    sample_run_fee: float = 65.0
    sample_run_free_threshold: int = 5000
    """Sample run is free at or above this print quantity."""

    turnaround_multipliers: Mapping[Turnaround, float] = field(default_factory=lambda: _frozen({
        Turnaround.NORMAL: 0.0,
        Turnaround.RUSH: 0.12,
        Turnaround.WEEKEND: 0.20,
    }))

    minimum_order_quantity: int = 100
    device_markup_tiers: Tuple[Tuple[int, float], ...] = DEFAULT_DEVICE_MARKUP_TIERS

    # -------------------------------------------------------------------------
    # Cost floor
    # -------------------------------------------------------------------------
    file_setup_per_design: float = 10.0
    machine_setup_per_day: float = 23.0
    sample_printing_cost: float = 23.0
    """Cost of sample work that is not billed to the customer."""

    cmyk_ink_per_side: float = 0.03
    gloss_ink_per_side: float = 0.01
    labor_per_hour: float = 23.0
    repackaging_per_unit: float = 0.06
    shipping_staging_minutes: float = 40.0
    shipping_staging_hourly_rate: float = 20.0

    # -------------------------------------------------------------------------
    # Production
    # -------------------------------------------------------------------------
    minutes_per_batch: int = 35
    minutes_per_batch_with_gloss: int = 45
    hours_per_workday: float = 6.0

    single_printer_max_hours: float = 2.0
    """Jobs shorter than this run on one printer."""

    limited_printer_max_hours: float = 12.0
    """Jobs shorter than this run on at most ``limited_printer_count`` printers."""

    limited_printer_count: int = 2

    # -------------------------------------------------------------------------
    # Profit classification
    # -------------------------------------------------------------------------
    margin_good_pct: float = 30.0
    margin_warning_pct: float = 15.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "print_tiers", normalize_tiers(self.print_tiers, "print"))

        if not any(min_qty == 0 for min_qty, _ in self.device_markup_tiers):
            raise MissingFallbackTierError("device markup")
        object.__setattr__(
            self,
            "device_markup_tiers",
            tuple(sorted(
                ((int(q), float(m)) for q, m in self.device_markup_tiers),
                key=lambda tier: tier[0],
                reverse=True,
            )),
        )

        for name, enum_cls in (
            ("gloss_price", GlossFinish),
            ("packaging_price", Packaging),
            ("turnaround_multipliers", Turnaround),
        ):
            table = getattr(self, name)
            missing = [member.value for member in enum_cls if member not in table]
            if missing:
                raise ConfigurationError(
                    f"Rate table '{name}' is missing entries for {missing}",
                    {"table": name, "resolution": "Add a rate for every option"},
                )
            object.__setattr__(self, name, _frozen(table))

        if self.minutes_per_batch <= 0 or self.minutes_per_batch_with_gloss <= 0:
            raise ConfigurationError(
                "Minutes per batch must be positive",
                {"resolution": "Check production timings in the rate tables"},
            )
        if self.hours_per_workday <= 0:
            raise ConfigurationError(
                "Workday must be longer than zero hours",
                {"resolution": "Check hours_per_workday in the rate tables"},
            )

    @property
    def workday_minutes(self) -> float:
        return self.hours_per_workday * 60

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Convert to plain JSON data (stored with each saved quote)."""
        data: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "print_tiers":
                value = [tier.to_dict() for tier in value]
            elif f.name == "device_markup_tiers":
                value = [{"min_qty": q, "markup_pct": m} for q, m in value]
            elif isinstance(value, Mapping):
                value = {key.value: rate for key, rate in value.items()}
            data[f.name] = value
        return data

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], base: Optional["RateTables"] = None
    ) -> "RateTables":
        """
        Build rate tables from JSON data.

        Args:
            data: Full or partial rate table mapping (see module docstring)
            base: Tables supplying values for absent keys (default: built-in)

        Raises:
            ConfigurationError: On unknown keys or invalid tables
        """
        base = base or cls()
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown rate table keys: {unknown}",
                {"keys": unknown, "resolution": "Remove or rename the keys"},
            )

        enum_tables: Dict[str, Type[Enum]] = {
            "gloss_price": GlossFinish,
            "packaging_price": Packaging,
            "turnaround_multipliers": Turnaround,
        }

        changes: Dict[str, Any] = {}
        for key, value in data.items():
            if key == "print_tiers":
                changes[key] = tuple(value)
            elif key == "device_markup_tiers":
                changes[key] = tuple(
                    (tier["min_qty"], tier["markup_pct"]) for tier in value
                )
            elif key in enum_tables:
                merged = dict(getattr(base, key))
                for option, rate in value.items():
                    try:
                        merged[enum_tables[key](option)] = float(rate)
                    except ValueError:
                        raise ConfigurationError(
                            f"Unknown option '{option}' in rate table '{key}'",
                            {"table": key, "option": option},
                        ) from None
                changes[key] = merged
            else:
                changes[key] = value

        return replace(base, **changes)


DEFAULT_RATE_TABLES = RateTables()


def load_rate_tables(path: Union[str, Path, None] = None) -> RateTables:
    """
    Load rate tables, applying overrides from a JSON file when given.

    Args:
        path: JSON override file; empty/None means built-in rates

    Returns:
        RateTables instance

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid
    """
    if not path:
        logger.debug("Using built-in rate tables")
        return DEFAULT_RATE_TABLES

    path = Path(path)
    if not path.exists():
        raise ConfigurationError(
            f"Rate tables file not found: {path}",
            {"path": str(path), "resolution": "Fix QUOTE_RATE_TABLES_PATH in .env"},
        )

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Rate tables file is not valid JSON: {path}",
            {"path": str(path), "error": str(e)},
        ) from e

    rates = RateTables.from_dict(data)
    logger.info(f"Loaded rate table overrides from {path}: {sorted(data)}")
    return rates


def generate_device_pricing_tiers(
    unit_cost: float, rates: RateTables = DEFAULT_RATE_TABLES
) -> Tuple[PricingTier, ...]:
    """
    Derive selling tiers for a device from its unit cost and the markup table.

    Args:
        unit_cost: Our cost per device
        rates: Rate tables supplying the markup tiers

    Returns:
        Tiers with prices rounded to cents, highest min_qty first
    """
    return tuple(
        PricingTier(min_qty, round(unit_cost * (1 + markup / 100), 2))
        for min_qty, markup in rates.device_markup_tiers
    )
