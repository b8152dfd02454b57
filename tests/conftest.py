"""Shared fixtures for the print quote engine tests."""

import pytest

from models.device import Device, PricingTier
from models.order import LineItem, Order, ShippingType
from models.saved_quote import QuoteStatus, SavedQuote
from modules.engine import QuoteEngine
from modules.rate_tables import DEFAULT_RATE_TABLES
from services.device_catalog import DeviceCatalog


# Fixtures

@pytest.fixture
def rates():
    """Built-in rate tables."""
    return DEFAULT_RATE_TABLES


@pytest.fixture
def engine(rates):
    return QuoteEngine(rates)


@pytest.fixture
def catalog(rates):
    """Catalog seeded with the stock devices."""
    return DeviceCatalog(rates)


@pytest.fixture
def disposable(catalog):
    """1mg Disposable: capacity 88, unit cost 2.05, 1000+ tier at 3.25."""
    return catalog.get(0)


@pytest.fixture
def custom_device():
    """Device with unit cost 1.85 selling at 3.25 from 1000 units."""
    return Device(
        name="Custom Vape",
        capacity=100,
        unit_cost=1.85,
        pricing_tiers=(PricingTier(1000, 3.25), PricingTier(0, 4.00)),
    )


@pytest.fixture
def make_item(disposable):
    """Factory for line items on the 1mg Disposable by default."""
    def _make_item(quantity=1000, device=None, **options):
        return LineItem(device=device or disposable, quantity=quantity, **options)
    return _make_item


@pytest.fixture
def make_order(make_item):
    """
    Factory for orders.

    Defaults: one print-only, single-sided, loose line item of 1000 units,
    one design, sample run billed, normal turnaround, pickup, no tax.
    """
    def _make_order(quantity=1000, items=None, item_options=None, **settings):
        if items is None:
            items = (make_item(quantity, **(item_options or {})),)
        settings.setdefault("shipping_type", ShippingType.PICKUP)
        return Order(line_items=tuple(items), **settings)
    return _make_order


@pytest.fixture
def make_saved():
    """Factory for saved quote snapshots with explicit totals and timestamps."""
    def _make_saved(
        quote_id="quote-1",
        client_name="Acme Vapes",
        account_manager="Ryan",
        total_quote=1000.0,
        status=QuoteStatus.PENDING,
        created_at="2025-01-01T00:00:00+00:00",
    ):
        return SavedQuote(
            quote_id=quote_id,
            client_name=client_name,
            account_manager=account_manager,
            order={},
            rate_tables={},
            total_quantity=1000,
            print_quantity=1000,
            line_item_count=1,
            total_quote=total_quote,
            cost_floor=total_quote / 2,
            profit=total_quote / 2,
            profit_margin=50.0,
            production_days=1,
            has_printing=True,
            has_devices=False,
            status=status,
            created_at=created_at,
        )
    return _make_saved


@pytest.fixture
def app():
    """Flask app with testing configuration."""
    from app import create_app
    return create_app("config.TestingConfig")


@pytest.fixture
def client(app):
    return app.test_client()
