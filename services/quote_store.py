"""
Saved quote store.

Key-value store of SavedQuote snapshots, keyed by quote id. Quotes are
kept in memory; ``load``/``dump`` move them to and from plain records for
whatever persistence the caller uses.

Thread Safety:
    - Uses threading.Lock for all operations
    - SavedQuote is immutable; updates replace the stored snapshot
"""

from __future__ import annotations

import threading
from collections import Counter
from typing import Any, Dict, Iterable, List, Optional

from core.exceptions import QuoteNotFoundError
from logging_config import get_logger, get_quote_logger
from models.saved_quote import QuoteStatus, SavedQuote


logger = get_logger(__name__)


class QuoteStore:
    """
    Thread-safe in-memory quote storage.

    Usage:
        store = QuoteStore()
        store.save(saved_quote)
        store.set_status(saved_quote.quote_id, QuoteStatus.WON)
        for quote in store.list():
            ...
    """

    def __init__(self, records: Optional[Iterable[Dict[str, Any]]] = None):
        self._quotes: Dict[str, SavedQuote] = {}
        self._lock = threading.Lock()
        if records:
            self.load(records)

    def __len__(self) -> int:
        with self._lock:
            return len(self._quotes)

    def load(self, records: Iterable[Dict[str, Any]]) -> int:
        """Add stored records. Returns the number loaded."""
        quotes = [SavedQuote.from_dict(record) for record in records]
        with self._lock:
            for quote in quotes:
                self._quotes[quote.quote_id] = quote
        logger.info(f"Loaded {len(quotes)} saved quotes")
        return len(quotes)

    def dump(self) -> List[Dict[str, Any]]:
        return [quote.to_dict() for quote in self.list()]

    def save(self, quote: SavedQuote) -> SavedQuote:
        """
        Insert a quote, or replace the one with the same id.

        A replaced quote keeps its creation time and status.

        Returns:
            The stored snapshot
        """
        quote_logger = get_quote_logger(quote.quote_id)
        with self._lock:
            existing = self._quotes.get(quote.quote_id)
            if existing:
                quote = quote.touched(created_at=existing.created_at).with_status(existing.status)
            self._quotes[quote.quote_id] = quote

        if existing:
            quote_logger.info(f"Updated quote for '{quote.client_name}'")
        else:
            quote_logger.info(f"Saved quote for '{quote.client_name}'")
        return quote

    def get(self, quote_id: str) -> SavedQuote:
        """
        Get a quote by id.

        Raises:
            QuoteNotFoundError: If no quote has this id
        """
        with self._lock:
            quote = self._quotes.get(quote_id)
        if quote is None:
            raise QuoteNotFoundError(quote_id)
        return quote

    def delete(self, quote_id: str) -> SavedQuote:
        with self._lock:
            quote = self._quotes.pop(quote_id, None)
        if quote is None:
            raise QuoteNotFoundError(quote_id)
        get_quote_logger(quote_id).info("Deleted quote")
        return quote

    def list(self) -> List[SavedQuote]:
        """All quotes, newest first."""
        with self._lock:
            quotes = list(self._quotes.values())
        return sorted(quotes, key=lambda q: q.created_at, reverse=True)

    def set_status(self, quote_id: str, status: QuoteStatus) -> SavedQuote:
        with self._lock:
            quote = self._quotes.get(quote_id)
            if quote is None:
                raise QuoteNotFoundError(quote_id)
            quote = quote.with_status(status)
            self._quotes[quote_id] = quote

        get_quote_logger(quote_id).info(f"Status changed to {status.value}")
        return quote

    def search(self, text: str = "", status: Optional[QuoteStatus] = None) -> List[SavedQuote]:
        """
        Filter quotes by client or manager substring and status.

        Args:
            text: Case-insensitive substring of client name or account manager
            status: Only quotes with this status (None for all)

        Returns:
            Matching quotes, newest first
        """
        needle = text.strip().lower()
        return [
            quote for quote in self.list()
            if (status is None or quote.status is status)
            and (
                not needle
                or needle in quote.client_name.lower()
                or needle in quote.account_manager.lower()
            )
        ]

    def customer_summaries(self) -> List[Dict[str, Any]]:
        """
        Quotes grouped by client, highest total value first.

        Each summary has the client name, quote count, total and won value,
        won/lost/pending counts, and the client's quotes (newest first).
        """
        customers: Dict[str, Dict[str, Any]] = {}
        for quote in self.list():
            key = quote.client_name.strip().lower()
            summary = customers.setdefault(key, {
                "client_name": quote.client_name,
                "quote_count": 0,
                "total_value": 0.0,
                "won_value": 0.0,
                "won": 0,
                "lost": 0,
                "pending": 0,
                "last_quote_at": quote.created_at,
                "quotes": [],
            })
            summary["quote_count"] += 1
            summary["total_value"] += quote.total_quote
            summary[quote.status.value] += 1
            if quote.status is QuoteStatus.WON:
                summary["won_value"] += quote.total_quote
            summary["quotes"].append(quote.to_dict())

        return sorted(customers.values(), key=lambda c: c["total_value"], reverse=True)

    def status_counts(self) -> Dict[str, int]:
        counts = Counter(quote.status.value for quote in self.list())
        return {status.value: counts.get(status.value, 0) for status in QuoteStatus}
