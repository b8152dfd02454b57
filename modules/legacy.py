"""
Upgrade stored legacy records to current models.

Older saved quotes use camelCase keys and come in two shapes:

    - Multi-item: ``lineItems`` list, items possibly without ``serviceType``
      (only a ``supplyingDevices`` flag)
    - Single-device: no ``lineItems``; ``selectedDevice``, ``quantity``,
      ``supplyingDevices``, ``sides``, ``glossFinish`` and ``packaging`` at
      the top level

Older device records may lack pricing tiers. All of these are upgraded
here, once, at the boundary; the engine only ever sees validated models.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from core.exceptions import InvalidOrderSettingError
from logging_config import get_logger
from models.device import Device
from models.order import LineItem, Order, Packaging, ServiceType, ShippingType
from .rate_tables import (
    DEFAULT_DEVICE_PRICING_TIERS,
    DEFAULT_RATE_TABLES,
    RateTables,
    generate_device_pricing_tiers,
)


logger = get_logger(__name__)


# Renamed option values
LEGACY_PACKAGING = {"sticker-mania": Packaging.PARTNER_PACK.value}
LEGACY_SHIPPING = {"shopify": ShippingType.CARRIER.value}

LEGACY_DEFAULT_QUANTITY = 1000

# Keys only stored camelCase records carry
LEGACY_MARKERS = ("lineItems", "selectedDevice", "quantity")

# Order settings used when a record does not carry them
LEGACY_ORDER_DEFAULTS: Dict[str, Any] = {
    "num_designs": 1,
    "design_waivers": 0,
    "turnaround": "normal",
    "sample_run": True,
    "waive_sample_fee": False,
    "shipping_type": ShippingType.CARRIER.value,
    "shipping_base_quote": 0.0,
    "shipping_markup_pct": 20.0,
    "sales_tax_rate_pct": 0.0,
    "printer_count": 3,
}


def is_legacy_record(raw: Dict[str, Any]) -> bool:
    """
    True for camelCase stored records.

    A body without ``line_items`` is legacy only if it carries one of the
    camelCase markers; anything else is parsed as a current order so a
    missing or misspelled key fails as an empty order.
    """
    if "line_items" in raw:
        return False
    return any(key in raw for key in LEGACY_MARKERS)


def _value(raw: Dict[str, Any], key: str, default: Any) -> Any:
    value = raw.get(key)
    return default if value is None else value


def _legacy_service_type(item: Dict[str, Any]) -> str:
    if item.get("serviceType"):
        return item["serviceType"]
    if item.get("supplyingDevices"):
        return ServiceType.PRINT_AND_DEVICES.value
    return ServiceType.PRINT_ONLY.value


def _legacy_line_item(
    item: Dict[str, Any], devices: Sequence[Device], position: int
) -> LineItem:
    if not isinstance(item, dict):
        raise InvalidOrderSettingError("lineItems", item, "each line item must be an object")
    packaging = _value(item, "packaging", Packaging.LOOSE.value)
    return LineItem.from_dict(
        {
            "item_id": _value(item, "id", f"item-{position}"),
            "device_index": _value(item, "deviceIndex", 0),
            "quantity": _value(item, "quantity", LEGACY_DEFAULT_QUANTITY),
            "service_type": _legacy_service_type(item),
            "sides": _value(item, "sides", "single"),
            "gloss_finish": _value(item, "glossFinish", "none"),
            "packaging": LEGACY_PACKAGING.get(packaging, packaging),
        },
        devices,
    )


def normalize_legacy_order(
    raw: Dict[str, Any],
    devices: Sequence[Device],
    defaults: Optional[Dict[str, Any]] = None,
) -> Order:
    """
    Convert a stored camelCase quote record into an Order.

    Args:
        raw: Stored record (either legacy shape)
        devices: Device catalog, for ``deviceIndex`` / ``selectedDevice``
        defaults: Overrides for ``LEGACY_ORDER_DEFAULTS`` (e.g. configured
            shipping markup)

    Returns:
        Validated Order

    Raises:
        ConfigurationError: If the upgraded record is still invalid
        DeviceNotFoundError: If a device index is not in the catalog
    """
    settings = dict(LEGACY_ORDER_DEFAULTS)
    settings.update(defaults or {})

    raw_items = raw.get("lineItems")
    if isinstance(raw_items, list):
        items = raw_items
    else:
        logger.debug("Upgrading single-device quote record")
        items = [{
            "id": "item-1",
            "deviceIndex": raw.get("selectedDevice"),
            "quantity": raw.get("quantity"),
            "supplyingDevices": raw.get("supplyingDevices", False),
            "sides": raw.get("sides"),
            "glossFinish": raw.get("glossFinish"),
            "packaging": raw.get("packaging"),
        }]

    shipping_type = _value(raw, "shippingType", settings["shipping_type"])

    return Order(
        line_items=tuple(
            _legacy_line_item(item, devices, position)
            for position, item in enumerate(items, start=1)
        ),
        num_designs=_value(raw, "numDesigns", settings["num_designs"]),
        design_waivers=_value(raw, "designWaivers", settings["design_waivers"]),
        turnaround=_value(raw, "turnaround", settings["turnaround"]),
        sample_run=raw.get("sampleRun") is not False,
        waive_sample_fee=_value(raw, "waiveSampleFee", settings["waive_sample_fee"]),
        shipping_type=LEGACY_SHIPPING.get(shipping_type, shipping_type),
        shipping_base_quote=_value(raw, "shopifyQuote", settings["shipping_base_quote"]),
        shipping_markup_pct=_value(raw, "shippingMarkup", settings["shipping_markup_pct"]),
        sales_tax_rate_pct=_value(raw, "salesTaxRate", settings["sales_tax_rate_pct"]),
        printer_count=_value(raw, "numPrinters", settings["printer_count"]),
    )


def migrate_device(raw: Dict[str, Any], rates: RateTables = DEFAULT_RATE_TABLES) -> Device:
    """
    Build a Device from a stored record, adding pricing tiers if missing.

    Stock devices get their named default tiers; any other device gets
    tiers generated from its unit cost and the markup table.
    """
    tiers = raw.get("pricing_tiers", raw.get("pricingTiers"))
    if tiers:
        return Device.from_dict(raw)

    name = (raw.get("name") or "").strip()
    unit_cost = float(raw.get("unit_cost", raw.get("unitCost", 0.0)))
    if name in DEFAULT_DEVICE_PRICING_TIERS:
        tiers = DEFAULT_DEVICE_PRICING_TIERS[name]
    else:
        tiers = generate_device_pricing_tiers(unit_cost, rates)

    logger.debug(f"Migrated device '{name}' with {len(tiers)} pricing tiers")
    return Device.from_dict({**raw, "unit_cost": unit_cost, "pricing_tiers": tiers})
