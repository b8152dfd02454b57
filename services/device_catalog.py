"""
Device catalog service.

In-memory catalog of the devices we print on and supply. Devices are
addressed by list index (as the quote editor does) or by name.

Thread Safety:
    - Devices are immutable; edits replace the entry under a lock
    - Readers get a tuple snapshot, never the live list
"""

from __future__ import annotations

import threading
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from core.exceptions import DeviceNotFoundError, InvalidDeviceError
from logging_config import get_logger
from models.device import Device, PricingTier
from modules.legacy import migrate_device
from modules.rate_tables import DEFAULT_RATE_TABLES, RateTables, generate_device_pricing_tiers


logger = get_logger(__name__)


STOCK_DEVICES: Tuple[Dict[str, Any], ...] = (
    {"name": "1mg Disposable", "capacity": 88, "unit_cost": 2.05},
    {"name": "2mg Disposable", "capacity": 77, "unit_cost": 2.50},
    {"name": "MK Lighter", "capacity": 80, "unit_cost": 1.75},
)


class DeviceCatalog:
    """
    Thread-safe device catalog.

    Usage:
        catalog = DeviceCatalog(rates)
        device = catalog.get(0)
        catalog.add("3mg Disposable", capacity=70, unit_cost=2.80)
    """

    def __init__(
        self,
        rates: RateTables = DEFAULT_RATE_TABLES,
        records: Optional[Iterable[Dict[str, Any]]] = None,
    ):
        """
        Initialize the catalog.

        Args:
            rates: Rate tables used to generate tiers for new devices
            records: Stored device records (default: stock devices). Records
                without pricing tiers are migrated.
        """
        self._rates = rates
        self._lock = threading.Lock()
        self._devices: List[Device] = [
            migrate_device(record, rates) for record in (records or STOCK_DEVICES)
        ]
        if not self._devices:
            raise InvalidDeviceError("catalog", "at least one device is required")
        logger.info(f"Device catalog loaded with {len(self._devices)} devices")

    def list(self) -> Tuple[Device, ...]:
        with self._lock:
            return tuple(self._devices)

    def get(self, index: int) -> Device:
        """
        Get a device by catalog index.

        Raises:
            DeviceNotFoundError: If the index is out of range
        """
        with self._lock:
            if not 0 <= index < len(self._devices):
                raise DeviceNotFoundError(index)
            return self._devices[index]

    def find(self, name: str) -> Device:
        """Get a device by name (case-insensitive)."""
        wanted = name.strip().lower()
        with self._lock:
            for device in self._devices:
                if device.name.lower() == wanted:
                    return device
        raise DeviceNotFoundError(name)

    def add(
        self,
        name: str,
        capacity: int,
        unit_cost: float,
        pricing_tiers: Optional[Sequence[PricingTier]] = None,
    ) -> Device:
        """
        Add a device; tiers are generated from the unit cost when not given.

        Raises:
            InvalidDeviceError: If the record is invalid or the name is taken
        """
        tiers = pricing_tiers or generate_device_pricing_tiers(unit_cost, self._rates)
        device = Device(name=name, capacity=capacity, unit_cost=unit_cost, pricing_tiers=tuple(tiers))

        with self._lock:
            if any(d.name.lower() == device.name.lower() for d in self._devices):
                raise InvalidDeviceError(device.name, "a device with this name already exists")
            self._devices.append(device)

        logger.info(f"Added device '{device.name}' (capacity {capacity}, cost ${device.unit_cost:.2f})")
        return device

    def update(
        self,
        index: int,
        name: Optional[str] = None,
        capacity: Optional[int] = None,
        unit_cost: Optional[float] = None,
        pricing_tiers: Optional[Sequence[PricingTier]] = None,
    ) -> Device:
        """Replace fields of a device. Existing tiers are kept unless supplied."""
        with self._lock:
            if not 0 <= index < len(self._devices):
                raise DeviceNotFoundError(index)
            current = self._devices[index]
            device = Device(
                name=current.name if name is None else name,
                capacity=current.capacity if capacity is None else capacity,
                unit_cost=current.unit_cost if unit_cost is None else unit_cost,
                pricing_tiers=current.pricing_tiers if pricing_tiers is None else tuple(pricing_tiers),
            )
            self._devices[index] = device

        logger.info(f"Updated device {index} ('{device.name}')")
        return device

    def set_pricing_tiers(self, index: int, pricing_tiers: Sequence[PricingTier]) -> Device:
        return self.update(index, pricing_tiers=pricing_tiers)

    def delete(self, index: int) -> Device:
        """
        Remove a device.

        Raises:
            DeviceNotFoundError: If the index is out of range
            InvalidDeviceError: If it is the last device in the catalog
        """
        with self._lock:
            if not 0 <= index < len(self._devices):
                raise DeviceNotFoundError(index)
            if len(self._devices) == 1:
                raise InvalidDeviceError(self._devices[0].name, "cannot delete the last device")
            device = self._devices.pop(index)

        logger.info(f"Deleted device {index} ('{device.name}')")
        return device

    def to_list(self) -> List[Dict[str, Any]]:
        return [device.to_dict() for device in self.list()]
