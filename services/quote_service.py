"""
Quote service: the engine plus its collaborators.

Ties the pricing engine to the device catalog, the saved quote store and
the account manager list. Routes talk to this service only.

Flow:
    1. Request body -> ``build_order`` (current or legacy record shape)
    2. ``price`` runs the engine
    3. ``save_quote`` snapshots order, rate tables and totals into the store
    4. ``compare`` reprices the current order against a saved snapshot
"""

from __future__ import annotations

import time
import uuid
from typing import Any, Dict, Optional, Tuple

from core.exceptions import InvalidOrderSettingError
from logging_config import get_logger
from models.order import Order
from models.quote import PricedOrder
from models.saved_quote import QuoteStatus, SavedQuote
from modules.engine import QuoteEngine
from modules.legacy import LEGACY_ORDER_DEFAULTS, is_legacy_record, normalize_legacy_order
from .account_managers import AccountManagerRegistry
from .device_catalog import DeviceCatalog
from .quote_store import QuoteStore


logger = get_logger(__name__)


COPY_SUFFIX = " (Copy)"


def generate_quote_id() -> str:
    """Quote ids look like ``quote-1733212345678-1a2b3c``."""
    return f"quote-{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}"


class QuoteService:
    """
    Prices, saves and compares quotes.

    Usage:
        service = QuoteService(QuoteEngine(rates), DeviceCatalog(rates), QuoteStore())
        order = service.build_order(request_json)
        priced = service.price(order)
        saved = service.save_quote(order, client_name="Acme")
    """

    def __init__(
        self,
        engine: QuoteEngine,
        catalog: DeviceCatalog,
        store: QuoteStore,
        managers: Optional[AccountManagerRegistry] = None,
        order_defaults: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize the service.

        Args:
            engine: Quote engine (carries the rate tables in force)
            catalog: Device catalog for resolving line item devices
            store: Saved quote store
            managers: Account manager list (default names if omitted)
            order_defaults: Order settings applied when a request omits them
        """
        self.engine = engine
        self.catalog = catalog
        self.store = store
        self.managers = managers or AccountManagerRegistry()
        self._order_defaults = dict(LEGACY_ORDER_DEFAULTS)
        self._order_defaults.update(order_defaults or {})

    def new_order_defaults(self) -> Dict[str, Any]:
        """Order settings for a fresh quote."""
        return dict(self._order_defaults)

    # =========================================================================
    # PRICING
    # =========================================================================

    def build_order(self, data: Dict[str, Any]) -> Order:
        """
        Build an Order from a request body or a stored record.

        Both the current snake_case shape (``line_items``) and the legacy
        camelCase shapes are accepted.

        Raises:
            ConfigurationError: If the order is invalid
            DeviceNotFoundError: If a line item names an unknown device
        """
        devices = self.catalog.list()
        if is_legacy_record(data):
            return normalize_legacy_order(data, devices, self._order_defaults)
        return Order.from_dict(data, devices, self._order_defaults)

    def price(self, order: Order) -> PricedOrder:
        return self.engine.price_order(order)

    def price_payload(self, data: Dict[str, Any]) -> Tuple[Order, PricedOrder]:
        order = self.build_order(data)
        return order, self.price(order)

    # =========================================================================
    # SAVED QUOTES
    # =========================================================================

    def save_quote(
        self,
        order: Order,
        client_name: str,
        account_manager: str = "",
        quote_id: Optional[str] = None,
    ) -> SavedQuote:
        """
        Price an order and store the snapshot.

        Args:
            order: Order to save
            client_name: Required client name
            account_manager: Manager name (first listed manager if blank)
            quote_id: Existing quote to update; a new id is generated if None

        Returns:
            Stored SavedQuote

        Raises:
            InvalidOrderSettingError: If the client name is blank
        """
        client_name = (client_name or "").strip()
        if not client_name:
            logger.warning("Rejected quote save without a client name")
            raise InvalidOrderSettingError("client_name", client_name, "enter a client name first")

        priced = self.price(order)
        saved = SavedQuote.from_priced(
            quote_id=quote_id or generate_quote_id(),
            client_name=client_name,
            account_manager=(account_manager or "").strip() or self.managers.default,
            order=order,
            priced=priced,
            rate_tables=self.engine.rates.to_dict(),
        )
        return self.store.save(saved)

    def load_order(self, quote_id: str) -> Order:
        """Rebuild the Order of a saved quote (legacy records are upgraded)."""
        saved = self.store.get(quote_id)
        return self.build_order(saved.order)

    def duplicate_quote(self, quote_id: str) -> SavedQuote:
        """
        Save a copy of a quote under a new id, repriced with current rates.

        The copy's client name gets a " (Copy)" suffix and starts as pending.
        """
        original = self.store.get(quote_id)
        order = self.load_order(quote_id)
        copy = self.save_quote(
            order,
            client_name=original.client_name + COPY_SUFFIX,
            account_manager=original.account_manager,
        )
        logger.info(f"Duplicated quote {quote_id} as {copy.quote_id}")
        return copy

    def set_status(self, quote_id: str, status: Any) -> SavedQuote:
        try:
            status = QuoteStatus(status)
        except ValueError:
            allowed = [s.value for s in QuoteStatus]
            raise InvalidOrderSettingError("status", status, f"must be one of {allowed}") from None
        return self.store.set_status(quote_id, status)

    def compare(self, quote_id: str, order: Order) -> Dict[str, Any]:
        """
        Compare the current order with a saved quote.

        The saved side uses the totals stored at save time, never repriced.

        Returns:
            Dictionary with ``current``, ``saved`` and ``difference`` entries
        """
        saved = self.store.get(quote_id)
        priced = self.price(order)

        current = {
            "total_quantity": order.total_quantity,
            "line_item_count": len(order.line_items),
            "devices": [item.device.name for item in order.line_items],
            "total_quote": priced.quote.total_quote,
            "cost_floor": priced.cost_floor.total,
            "profit": priced.profit.gross_profit,
            "profit_margin": priced.profit.profit_margin,
            "production_days": priced.production.production_days,
            "active_printers": priced.production.active_printers,
        }
        return {
            "current": current,
            "saved": saved.to_dict(),
            "difference": {
                "total_quote": current["total_quote"] - saved.total_quote,
                "profit_margin": current["profit_margin"] - saved.profit_margin,
                "profit": current["profit"] - saved.profit,
                "total_quantity": current["total_quantity"] - saved.total_quantity,
            },
        }
