"""
Device catalog data models.

A device is something we print on and, optionally, supply: its batch
capacity drives production time, its unit cost feeds the cost floor and
its pricing tiers set the selling price when we supply it.

Thread Safety:
    - PricingTier and Device are frozen dataclasses (immutable)
    - Tier tuples are normalized once, at construction
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Tuple, Union

from core.exceptions import InvalidDeviceError, MissingFallbackTierError


@dataclass(frozen=True)
class PricingTier:
    """
    A quantity breakpoint with its per-unit price.

    The tier applies to every quantity at or above ``min_qty`` until the
    next higher breakpoint.
    """

    min_qty: int
    """Smallest quantity this price applies to."""

    price: float
    """Price per unit."""

    def to_dict(self) -> Dict[str, Any]:
        return {"min_qty": self.min_qty, "price": self.price}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PricingTier":
        """
        Create from dictionary. Accepts ``minQty`` from stored records.

        Raises:
            InvalidDeviceError: If the breakpoint or price is missing or not numeric
        """
        if not isinstance(data, dict):
            raise InvalidDeviceError("pricing tier", f"{data!r} is not an object")
        min_qty = data.get("min_qty", data.get("minQty"))
        price = data.get("price")
        if isinstance(min_qty, bool) or isinstance(price, bool):
            raise InvalidDeviceError("pricing tier", f"{data!r} has non-numeric values")
        try:
            return cls(min_qty=int(min_qty), price=float(price))
        except (TypeError, ValueError):
            raise InvalidDeviceError(
                "pricing tier", f"{data!r} needs a numeric min_qty and price"
            ) from None


TierLike = Union[PricingTier, Dict[str, Any]]


def normalize_tiers(tiers: Iterable[TierLike], table_name: str) -> Tuple[PricingTier, ...]:
    """
    Validate a tier table and sort it by ``min_qty`` descending.

    Args:
        tiers: PricingTier instances or dicts with min_qty/price
        table_name: Name used in error messages

    Returns:
        Tuple of tiers, highest breakpoint first

    Raises:
        MissingFallbackTierError: If no tier has min_qty == 0
        InvalidDeviceError: If a tier has a negative breakpoint or price
    """
    parsed = [t if isinstance(t, PricingTier) else PricingTier.from_dict(t) for t in tiers or ()]

    for tier in parsed:
        if tier.min_qty < 0 or tier.price < 0:
            raise InvalidDeviceError(
                table_name, f"tier {tier.to_dict()} has a negative value"
            )

    if not any(tier.min_qty == 0 for tier in parsed):
        raise MissingFallbackTierError(table_name)

    return tuple(sorted(parsed, key=lambda t: t.min_qty, reverse=True))


@dataclass(frozen=True)
class Device:
    """
    A device catalog entry.

    Construction validates the record; an invalid device never reaches the
    pricing engine.
    """

    name: str
    """Display name (e.g., '1mg Disposable')."""

    capacity: int
    """Units produced per production batch."""

    unit_cost: float
    """True cost to acquire one unit."""

    pricing_tiers: Tuple[PricingTier, ...] = field(default_factory=tuple)
    """Selling-price tiers, highest min_qty first, always with a min_qty 0 fallback."""

    def __post_init__(self) -> None:
        if self.name is not None and not isinstance(self.name, str):
            raise InvalidDeviceError(repr(self.name), "name must be text")
        name = (self.name or "").strip()
        if not name:
            raise InvalidDeviceError(repr(self.name), "name is required")
        if isinstance(self.capacity, bool) or not isinstance(self.capacity, int):
            raise InvalidDeviceError(name, f"capacity {self.capacity!r} is not an integer")
        if self.capacity <= 0:
            raise InvalidDeviceError(name, "capacity must be greater than zero")
        if isinstance(self.unit_cost, bool) or not isinstance(self.unit_cost, (int, float)):
            raise InvalidDeviceError(name, f"unit cost {self.unit_cost!r} is not a number")
        if self.unit_cost < 0:
            raise InvalidDeviceError(name, "unit cost cannot be negative")

        object.__setattr__(self, "name", name)
        object.__setattr__(self, "unit_cost", float(self.unit_cost))
        object.__setattr__(
            self, "pricing_tiers", normalize_tiers(self.pricing_tiers, f"device '{name}'")
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON responses and saved snapshots."""
        return {
            "name": self.name,
            "capacity": self.capacity,
            "unit_cost": self.unit_cost,
            "pricing_tiers": [tier.to_dict() for tier in self.pricing_tiers],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Device":
        """
        Create from dictionary.

        Accepts both snake_case and the camelCase keys of stored records.
        Records without pricing tiers must go through
        ``modules.legacy.migrate_device`` first.

        Raises:
            InvalidDeviceError: If the record is not an object or a field has the wrong type
        """
        if not isinstance(data, dict):
            raise InvalidDeviceError(repr(data), "device record must be an object")
        unit_cost = data.get("unit_cost", data.get("unitCost", 0.0))
        if isinstance(unit_cost, str):
            try:
                unit_cost = float(unit_cost)
            except ValueError:
                raise InvalidDeviceError(
                    str(data.get("name", "")), f"unit cost {unit_cost!r} is not a number"
                ) from None
        tiers = data.get("pricing_tiers", data.get("pricingTiers")) or ()
        if not isinstance(tiers, (list, tuple)):
            raise InvalidDeviceError(str(data.get("name", "")), "pricing tiers must be a list")
        return cls(
            name=data.get("name", ""),
            capacity=data.get("capacity", 0),
            unit_cost=unit_cost,
            pricing_tiers=tuple(tiers),
        )
