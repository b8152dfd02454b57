"""
Order data models.

An order is a non-empty sequence of line items plus order-level settings
(designs, turnaround, sample run, shipping, tax, printers). It is the only
input the pricing engine needs.

Thread Safety:
    - LineItem and Order are frozen dataclasses
    - Editing is done by building a new instance (``LineItem.updated``,
      ``Order.updated``), so a priced order can never change underneath
      a caller
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple, Type, TypeVar

from core.exceptions import (
    DeviceNotFoundError,
    EmptyOrderError,
    InvalidOrderSettingError,
    InvalidQuantityError,
)
from .device import Device


# Input limits (the editor clamps to the same values)
MAX_LINE_ITEM_QUANTITY = 500_000
MIN_PRINTER_COUNT = 1
MAX_PRINTER_COUNT = 20


class ServiceType(Enum):
    """What a line item includes: printing, device supply, or both."""

    PRINT_ONLY = "print-only"
    """Client supplies the devices, we print."""

    PRINT_AND_DEVICES = "print-and-devices"
    """We supply the devices and print them."""

    DEVICES_ONLY = "devices-only"
    """We supply devices, no printing."""


class Sides(Enum):
    SINGLE = "single"
    DOUBLE = "double"


class GlossFinish(Enum):
    NONE = "none"
    SINGLE_SIDE = "single-side"
    BOTH_SIDES = "both-sides"


class Packaging(Enum):
    LOOSE = "loose"
    PARTNER_PACK = "partner-pack"
    CLIENT_PACK = "client"


class Turnaround(Enum):
    NORMAL = "normal"
    RUSH = "rush"
    WEEKEND = "weekend"


class ShippingType(Enum):
    CARRIER = "carrier"
    PICKUP = "pickup"


E = TypeVar("E", bound=Enum)


def coerce_enum(enum_cls: Type[E], value: Any, setting: str) -> E:
    """Convert a raw value to ``enum_cls``, raising InvalidOrderSettingError."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = [member.value for member in enum_cls]
        raise InvalidOrderSettingError(setting, value, f"must be one of {allowed}") from None


@dataclass(frozen=True)
class LineItem:
    """
    One device/printing configuration with its own quantity.

    Normalization on construction:
        - BothSides gloss needs two printed sides; on a single-sided item
          it is downgraded to SingleSide.
        - DevicesOnly items carry no printing options; sides, gloss and
          packaging reset to Single/None/Loose.
    """

    device: Device
    """Resolved device catalog entry."""

    quantity: int
    """Units ordered for this line."""

    service_type: ServiceType = ServiceType.PRINT_ONLY
    sides: Sides = Sides.SINGLE
    gloss_finish: GlossFinish = GlossFinish.NONE
    packaging: Packaging = Packaging.LOOSE

    item_id: str = ""
    """Caller-assigned identifier (editor row id)."""

    def __post_init__(self) -> None:
        quantity = self.quantity
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise InvalidQuantityError(quantity, "must be a whole number")
        if quantity < 0:
            raise InvalidQuantityError(quantity, "cannot be negative")
        if quantity > MAX_LINE_ITEM_QUANTITY:
            raise InvalidQuantityError(quantity, f"exceeds maximum of {MAX_LINE_ITEM_QUANTITY}")

        service_type = coerce_enum(ServiceType, self.service_type, "service_type")
        sides = coerce_enum(Sides, self.sides, "sides")
        gloss = coerce_enum(GlossFinish, self.gloss_finish, "gloss_finish")
        packaging = coerce_enum(Packaging, self.packaging, "packaging")

        if service_type is ServiceType.DEVICES_ONLY:
            sides, gloss, packaging = Sides.SINGLE, GlossFinish.NONE, Packaging.LOOSE
        elif sides is Sides.SINGLE and gloss is GlossFinish.BOTH_SIDES:
            gloss = GlossFinish.SINGLE_SIDE

        object.__setattr__(self, "service_type", service_type)
        object.__setattr__(self, "sides", sides)
        object.__setattr__(self, "gloss_finish", gloss)
        object.__setattr__(self, "packaging", packaging)

    @property
    def includes_printing(self) -> bool:
        return self.service_type is not ServiceType.DEVICES_ONLY

    @property
    def includes_devices(self) -> bool:
        return self.service_type is not ServiceType.PRINT_ONLY

    @property
    def is_double_sided(self) -> bool:
        return self.includes_printing and self.sides is Sides.DOUBLE

    @property
    def has_gloss(self) -> bool:
        return self.includes_printing and self.gloss_finish is not GlossFinish.NONE

    @property
    def sides_printed(self) -> int:
        return 2 if self.is_double_sided else 1

    @property
    def gloss_sides(self) -> int:
        if not self.includes_printing:
            return 0
        return {GlossFinish.NONE: 0, GlossFinish.SINGLE_SIDE: 1, GlossFinish.BOTH_SIDES: 2}[
            self.gloss_finish
        ]

    def updated(self, **changes: Any) -> "LineItem":
        """Return a copy with ``changes`` applied and normalization re-run."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "item_id": self.item_id,
            "device": self.device.to_dict(),
            "quantity": self.quantity,
            "service_type": self.service_type.value,
            "sides": self.sides.value,
            "gloss_finish": self.gloss_finish.value,
            "packaging": self.packaging.value,
        }

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], devices: Optional[Sequence[Device]] = None
    ) -> "LineItem":
        """
        Create from dictionary.

        The device is taken from an embedded ``device`` record, or looked up
        in ``devices`` by ``device_index`` or ``device_name``.

        Raises:
            InvalidOrderSettingError: If ``data`` is not a mapping
        """
        if not isinstance(data, dict):
            raise InvalidOrderSettingError("line_items", data, "each line item must be an object")
        return cls(
            device=resolve_device(data, devices),
            quantity=data.get("quantity", 0),
            service_type=data.get("service_type", ServiceType.PRINT_ONLY.value),
            sides=data.get("sides", Sides.SINGLE.value),
            gloss_finish=data.get("gloss_finish", GlossFinish.NONE.value),
            packaging=data.get("packaging", Packaging.LOOSE.value),
            item_id=str(data.get("item_id", "")),
        )


def resolve_device(data: Dict[str, Any], devices: Optional[Sequence[Device]]) -> Device:
    """Find the device a line item record refers to."""
    if isinstance(data.get("device"), Device):
        return data["device"]
    if isinstance(data.get("device"), dict):
        return Device.from_dict(data["device"])

    devices = devices or ()
    if data.get("device_name"):
        for device in devices:
            if device.name == data["device_name"]:
                return device
        raise DeviceNotFoundError(data["device_name"])

    index = data.get("device_index", 0)
    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(devices):
        raise DeviceNotFoundError(index)
    return devices[index]


@dataclass(frozen=True)
class Order:
    """
    The aggregate root handed to the pricing engine.

    Derived quantities (total, print quantity, has_printing, has_devices)
    are properties, recomputed from the line items on every access.
    """

    line_items: Tuple[LineItem, ...]

    num_designs: int = 1
    """Distinct artwork files across the order."""

    design_waivers: int = 0
    """Extra designs whose fee is waived."""

    turnaround: Turnaround = Turnaround.NORMAL
    sample_run: bool = True
    waive_sample_fee: bool = False

    shipping_type: ShippingType = ShippingType.CARRIER
    shipping_base_quote: float = 0.0
    """Carrier quote before markup."""

    shipping_markup_pct: float = 20.0
    sales_tax_rate_pct: float = 0.0

    printer_count: int = 3
    """Printers the business is willing to devote to this order."""

    def __post_init__(self) -> None:
        items = tuple(self.line_items or ())
        if not items:
            raise EmptyOrderError()
        object.__setattr__(self, "line_items", items)

        for setting, minimum in (("num_designs", 1), ("design_waivers", 0)):
            value = getattr(self, setting)
            if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
                raise InvalidOrderSettingError(setting, value, f"must be an integer >= {minimum}")

        printers = self.printer_count
        if (
            isinstance(printers, bool)
            or not isinstance(printers, int)
            or not MIN_PRINTER_COUNT <= printers <= MAX_PRINTER_COUNT
        ):
            raise InvalidOrderSettingError(
                "printer_count", printers,
                f"must be between {MIN_PRINTER_COUNT} and {MAX_PRINTER_COUNT}"
            )

        for setting in ("shipping_base_quote", "shipping_markup_pct", "sales_tax_rate_pct"):
            value = getattr(self, setting)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
                raise InvalidOrderSettingError(setting, value, "must be a non-negative number")
            object.__setattr__(self, setting, float(value))

        object.__setattr__(
            self, "turnaround", coerce_enum(Turnaround, self.turnaround, "turnaround")
        )
        object.__setattr__(
            self, "shipping_type", coerce_enum(ShippingType, self.shipping_type, "shipping_type")
        )
        for setting in ("sample_run", "waive_sample_fee"):
            if not isinstance(getattr(self, setting), bool):
                raise InvalidOrderSettingError(setting, getattr(self, setting), "must be true or false")

    # -------------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------------

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.line_items)

    @property
    def print_quantity(self) -> int:
        """Units that require printing; drives the print tier and order fees."""
        return sum(item.quantity for item in self.line_items if item.includes_printing)

    @property
    def has_printing(self) -> bool:
        return any(item.includes_printing for item in self.line_items)

    @property
    def has_devices(self) -> bool:
        return any(item.includes_devices for item in self.line_items)

    def updated(self, **changes: Any) -> "Order":
        """Return a copy with ``changes`` applied and validation re-run."""
        return replace(self, **changes)

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON responses and saved snapshots."""
        return {
            "line_items": [item.to_dict() for item in self.line_items],
            "num_designs": self.num_designs,
            "design_waivers": self.design_waivers,
            "turnaround": self.turnaround.value,
            "sample_run": self.sample_run,
            "waive_sample_fee": self.waive_sample_fee,
            "shipping_type": self.shipping_type.value,
            "shipping_base_quote": self.shipping_base_quote,
            "shipping_markup_pct": self.shipping_markup_pct,
            "sales_tax_rate_pct": self.sales_tax_rate_pct,
            "printer_count": self.printer_count,
        }

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        devices: Optional[Sequence[Device]] = None,
        defaults: Optional[Dict[str, Any]] = None,
    ) -> "Order":
        """
        Create Order from dictionary (e.g., a JSON request body).

        Args:
            data: Order description with snake_case keys
            devices: Catalog devices for resolving line item references
            defaults: Values for settings missing from ``data``

        Returns:
            Validated Order instance
        """
        settings = dict(defaults or {})
        settings.update(
            {key: value for key, value in data.items() if key != "line_items"}
        )
        known = {
            "num_designs", "design_waivers", "turnaround", "sample_run",
            "waive_sample_fee", "shipping_type", "shipping_base_quote",
            "shipping_markup_pct", "sales_tax_rate_pct", "printer_count",
        }
        raw_items = data.get("line_items") or ()
        if not isinstance(raw_items, (list, tuple)):
            raise InvalidOrderSettingError("line_items", raw_items, "must be a list of line items")
        return cls(
            line_items=tuple(LineItem.from_dict(item, devices) for item in raw_items),
            **{key: value for key, value in settings.items() if key in known},
        )
