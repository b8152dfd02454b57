"""
Device catalog and account manager routes.

Handles:
- /api/devices - List and add devices
- /api/devices/<index> - Update or delete a device
- /api/account-managers - List and add managers
- /api/account-managers/<name> - Delete a manager
"""

from flask import Blueprint

from core.exceptions import InvalidDeviceError
from logging_config import get_logger
from .helpers import get_quote_service, json_body, sanitize_text


# Module logger
logger = get_logger(__name__)

devices_bp = Blueprint("devices", __name__, url_prefix="/api")


def _number(data, key, cast, name):
    """Read an optional numeric field, raising InvalidDeviceError if malformed."""
    value = data.get(key)
    if value is None:
        return None
    try:
        return cast(value)
    except (TypeError, ValueError):
        logger.warning(f"Rejected device field {key}={value!r}")
        raise InvalidDeviceError(name or "new device", f"{key} must be a number") from None


def _device_fields(data):
    name = sanitize_text(data.get("name", "")) or None
    return {
        "name": name,
        "capacity": _number(data, "capacity", int, name),
        "unit_cost": _number(data, "unit_cost", float, name),
        "pricing_tiers": data.get("pricing_tiers") or None,
    }


def _catalog_response(catalog):
    return {
        "devices": [
            {"index": index, **device.to_dict()}
            for index, device in enumerate(catalog.list())
        ]
    }


@devices_bp.route("/devices", methods=["GET"])
def list_devices():
    return _catalog_response(get_quote_service().catalog)


@devices_bp.route("/devices", methods=["POST"])
def add_device():
    """
    Add a device.

    Body: ``name``, ``capacity``, ``unit_cost`` and optional
    ``pricing_tiers`` (generated from the unit cost when omitted).
    """
    fields = _device_fields(json_body())
    device = get_quote_service().catalog.add(
        name=fields["name"] or "",
        capacity=fields["capacity"] if fields["capacity"] is not None else 0,
        unit_cost=fields["unit_cost"] if fields["unit_cost"] is not None else 0.0,
        pricing_tiers=fields["pricing_tiers"],
    )
    return device.to_dict(), 201


@devices_bp.route("/devices/<int:index>", methods=["PUT"])
def update_device(index: int):
    """Update a device; omitted fields keep their current values."""
    device = get_quote_service().catalog.update(index, **_device_fields(json_body()))
    return device.to_dict()


@devices_bp.route("/devices/<int:index>", methods=["DELETE"])
def delete_device(index: int):
    catalog = get_quote_service().catalog
    catalog.delete(index)
    return _catalog_response(catalog)


@devices_bp.route("/account-managers", methods=["GET"])
def list_managers():
    return {"account_managers": get_quote_service().managers.list()}


@devices_bp.route("/account-managers", methods=["POST"])
def add_manager():
    managers = get_quote_service().managers
    managers.add(sanitize_text(json_body().get("name", "")))
    return {"account_managers": managers.list()}, 201


@devices_bp.route("/account-managers/<name>", methods=["DELETE"])
def delete_manager(name: str):
    managers = get_quote_service().managers
    if not managers.delete(name):
        return {"error": "NotFound", "message": f"Account manager '{name}' not found", "details": {}}, 404
    return {"account_managers": managers.list()}
