"""Tests for the quote service."""

from unittest.mock import patch

import pytest

from core.exceptions import EmptyOrderError, InvalidOrderSettingError, QuoteNotFoundError
from models.saved_quote import QuoteStatus
from modules.engine import QuoteEngine
from modules.rate_tables import RateTables
from services.quote_service import QuoteService, generate_quote_id
from services.quote_store import QuoteStore


@pytest.fixture
def service(engine, catalog):
    return QuoteService(engine, catalog, QuoteStore(), order_defaults={"printer_count": 4})


class TestBuildOrder:
    def test_current_shape_with_defaults(self, service):
        order = service.build_order({"line_items": [{"device_index": 0, "quantity": 1000}]})

        assert order.printer_count == 4
        assert order.line_items[0].device.name == "1mg Disposable"

    def test_legacy_shape(self, service):
        order = service.build_order({"selectedDevice": 1, "quantity": 700, "shippingType": "shopify"})

        assert order.line_items[0].device.name == "2mg Disposable"
        assert order.line_items[0].quantity == 700
        assert order.printer_count == 4

    def test_body_without_line_items_is_empty(self, service):
        with pytest.raises(EmptyOrderError):
            service.build_order({"shipping_type": "pickup"})


class TestSaveQuote:
    def test_save(self, service, make_order):
        saved = service.save_quote(make_order(1000), client_name="  Acme ", account_manager="Kyle")

        assert saved.quote_id.startswith("quote-")
        assert saved.client_name == "Acme"
        assert saved.account_manager == "Kyle"
        assert saved.total_quote == pytest.approx(765.0)
        assert saved.rate_tables["setup_fee"] == 150.0
        assert saved.order["line_items"][0]["device"]["name"] == "1mg Disposable"
        assert service.store.get(saved.quote_id) == saved

    def test_client_name_required(self, service, make_order):
        with pytest.raises(InvalidOrderSettingError):
            service.save_quote(make_order(), client_name="   ")

    def test_default_account_manager(self, service, make_order):
        assert service.save_quote(make_order(), "Acme").account_manager == "Ryan"

    def test_update_existing_id(self, service, make_order):
        saved = service.save_quote(make_order(1000), "Acme")
        updated = service.save_quote(make_order(500), "Acme", quote_id=saved.quote_id)

        assert updated.quote_id == saved.quote_id
        assert updated.total_quote == pytest.approx(625.0)
        assert len(service.store) == 1

    def test_generated_ids_are_unique(self):
        with patch("services.quote_service.time.time", return_value=1733212345.678):
            assert generate_quote_id() != generate_quote_id()


class TestSavedQuoteSnapshot:
    def test_rate_change_does_not_alter_saved_totals(self, catalog, make_order):
        store = QuoteStore()
        saved = QuoteService(QuoteEngine(), catalog, store).save_quote(make_order(500), "Acme")

        repriced = QuoteService(QuoteEngine(RateTables(setup_fee=300.0)), catalog, store)
        comparison = repriced.compare(saved.quote_id, make_order(500))

        assert store.get(saved.quote_id).total_quote == pytest.approx(625.0)
        assert comparison["difference"]["total_quote"] == pytest.approx(150.0)

    def test_load_order_round_trips(self, service, make_order):
        order = make_order(1200, num_designs=2)
        saved = service.save_quote(order, "Acme")

        assert service.load_order(saved.quote_id) == order

    def test_duplicate(self, service, make_order):
        saved = service.save_quote(make_order(1000), "Acme", "Kyle")
        service.set_status(saved.quote_id, "won")
        copy = service.duplicate_quote(saved.quote_id)

        assert copy.quote_id != saved.quote_id
        assert copy.client_name == "Acme (Copy)"
        assert copy.account_manager == "Kyle"
        assert copy.status is QuoteStatus.PENDING
        assert copy.total_quote == pytest.approx(saved.total_quote)

    def test_compare(self, service, make_order):
        saved = service.save_quote(make_order(1000), "Acme")
        result = service.compare(saved.quote_id, make_order(2000))

        assert result["saved"]["quote_id"] == saved.quote_id
        assert result["current"]["total_quantity"] == 2000
        assert result["difference"]["total_quantity"] == 1000
        assert result["difference"]["total_quote"] == pytest.approx(
            result["current"]["total_quote"] - 765.0
        )

    def test_compare_missing_quote(self, service, make_order):
        with pytest.raises(QuoteNotFoundError):
            service.compare("quote-404", make_order())

    def test_invalid_status(self, service, make_order):
        saved = service.save_quote(make_order(), "Acme")
        with pytest.raises(InvalidOrderSettingError):
            service.set_status(saved.quote_id, "maybe")
