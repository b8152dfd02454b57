"""
Services layer for the print quote engine.

This module contains the collaborators around the pure engine:
- DeviceCatalog: Devices by index or name
- AccountManagerRegistry: Names quotes can be assigned to
- QuoteStore: Saved quote snapshots
- QuoteService: Pricing, saving, duplicating and comparing quotes

Thread Model:
    Flask request threads share one instance of each service; every
    mutable service guards its state with a threading.Lock.
"""

from .account_managers import AccountManagerRegistry
from .device_catalog import DeviceCatalog
from .quote_store import QuoteStore
from .quote_service import QuoteService

__all__ = [
    "AccountManagerRegistry",
    "DeviceCatalog",
    "QuoteStore",
    "QuoteService",
]
