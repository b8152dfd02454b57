"""
Saved quote data model.

A saved quote is a snapshot taken at save time: the order as it was
entered, the rate tables in force, and the computed totals. Later changes
to rates or devices never alter the numbers shown in history or comparison.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from .order import Order
from .quote import PricedOrder


class QuoteStatus(Enum):
    """
    Sales outcome of a saved quote.

    Lifecycle:
        PENDING -> (WON | LOST), and back again if the outcome is corrected
    """

    PENDING = "pending"
    WON = "won"
    LOST = "lost"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class SavedQuote:
    """Immutable snapshot of a priced order."""

    quote_id: str
    client_name: str
    account_manager: str

    order: Dict[str, Any]
    """``Order.to_dict()`` at save time (devices embedded)."""

    rate_tables: Dict[str, Any]
    """``RateTables.to_dict()`` at save time."""

    # Totals
    total_quantity: int
    print_quantity: int
    line_item_count: int
    total_quote: float
    cost_floor: float
    profit: float
    profit_margin: float
    production_days: int
    has_printing: bool
    has_devices: bool

    status: QuoteStatus = QuoteStatus.PENDING
    created_at: str = field(default_factory=_now_iso)
    updated_at: str = ""

    @classmethod
    def from_priced(
        cls,
        quote_id: str,
        client_name: str,
        account_manager: str,
        order: Order,
        priced: PricedOrder,
        rate_tables: Dict[str, Any],
    ) -> "SavedQuote":
        """Snapshot an order and its pricing result."""
        return cls(
            quote_id=quote_id,
            client_name=client_name,
            account_manager=account_manager,
            order=order.to_dict(),
            rate_tables=rate_tables,
            total_quantity=order.total_quantity,
            print_quantity=order.print_quantity,
            line_item_count=len(order.line_items),
            total_quote=priced.quote.total_quote,
            cost_floor=priced.cost_floor.total,
            profit=priced.profit.gross_profit,
            profit_margin=priced.profit.profit_margin,
            production_days=priced.production.production_days,
            has_printing=order.has_printing,
            has_devices=order.has_devices,
        )

    def with_status(self, status: QuoteStatus) -> "SavedQuote":
        return replace(self, status=status, updated_at=_now_iso())

    def touched(self, created_at: Optional[str] = None) -> "SavedQuote":
        """Copy marked as updated now, keeping the original creation time."""
        return replace(self, created_at=created_at or self.created_at, updated_at=_now_iso())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for storage and JSON responses."""
        return {
            "quote_id": self.quote_id,
            "client_name": self.client_name,
            "account_manager": self.account_manager,
            "order": self.order,
            "rate_tables": self.rate_tables,
            "total_quantity": self.total_quantity,
            "print_quantity": self.print_quantity,
            "line_item_count": self.line_item_count,
            "total_quote": self.total_quote,
            "cost_floor": self.cost_floor,
            "profit": self.profit,
            "profit_margin": self.profit_margin,
            "production_days": self.production_days,
            "has_printing": self.has_printing,
            "has_devices": self.has_devices,
            "status": self.status.value,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SavedQuote":
        """Create from dictionary (e.g., from storage)."""
        status_str = data.get("status") or "pending"
        try:
            status = QuoteStatus(status_str)
        except ValueError:
            status = QuoteStatus.PENDING

        return cls(
            quote_id=data.get("quote_id", ""),
            client_name=data.get("client_name", ""),
            account_manager=data.get("account_manager", ""),
            order=dict(data.get("order", {})),
            rate_tables=dict(data.get("rate_tables", {})),
            total_quantity=data.get("total_quantity", 0),
            print_quantity=data.get("print_quantity", 0),
            line_item_count=data.get("line_item_count", 0),
            total_quote=data.get("total_quote", 0.0),
            cost_floor=data.get("cost_floor", 0.0),
            profit=data.get("profit", 0.0),
            profit_margin=data.get("profit_margin", 0.0),
            production_days=data.get("production_days", 0),
            has_printing=data.get("has_printing", True),
            has_devices=data.get("has_devices", False),
            status=status,
            created_at=data.get("created_at") or _now_iso(),
            updated_at=data.get("updated_at", ""),
        )
