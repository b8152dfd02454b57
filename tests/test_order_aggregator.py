"""Unit tests for order-level charges."""

import pytest

from models.order import ServiceType, ShippingType, Turnaround
from modules.engine import price_order
from modules.order_aggregator import OrderAggregator


@pytest.fixture
def aggregator(rates):
    return OrderAggregator(rates)


class TestSetupFee:
    @pytest.mark.parametrize("print_quantity,fee", [
        (0, 0.0),
        (1, 150.0),
        (999, 150.0),
        (1000, 0.0),
    ])
    def test_threshold(self, aggregator, print_quantity, fee):
        assert aggregator.setup_fee(print_quantity) == fee


class TestDesignCosts:
    """One design included per full 1000 printed units."""

    @pytest.mark.parametrize("print_quantity,included", [
        (999, 0),
        (1000, 1),
        (1999, 1),
        (2000, 2),
    ])
    def test_inclusion_boundary(self, aggregator, print_quantity, included):
        costs = aggregator.design_costs(print_quantity, num_designs=2, design_waivers=0)

        assert costs.included_designs == included
        assert costs.extra_designs == 2 - included
        assert costs.extra_design_cost == pytest.approx((2 - included) * 35.0)

    def test_waivers(self, aggregator):
        costs = aggregator.design_costs(1000, num_designs=3, design_waivers=1)

        assert costs.extra_designs == 2
        assert costs.waived_designs == 1
        assert costs.chargeable_designs == 1
        assert costs.extra_design_cost == pytest.approx(35.0)

    def test_waivers_capped_at_extra_designs(self, aggregator):
        costs = aggregator.design_costs(1000, num_designs=3, design_waivers=5)

        assert costs.waived_designs == 2
        assert costs.chargeable_designs == 0
        assert costs.extra_design_cost == 0

    def test_no_printing_means_no_design_cost(self, aggregator):
        costs = aggregator.design_costs(0, num_designs=4, design_waivers=0)
        assert costs.extra_design_cost == 0
        assert costs.extra_designs == 0


class TestSampleFee:
    @pytest.mark.parametrize("print_quantity,sample_run,waived,fee", [
        (1000, True, False, 65.0),
        (4999, True, False, 65.0),
        (5000, True, False, 0.0),
        (1000, False, False, 0.0),
        (1000, True, True, 0.0),
        (0, True, False, 0.0),
    ])
    def test_rules(self, aggregator, print_quantity, sample_run, waived, fee):
        assert aggregator.sample_fee(print_quantity, sample_run, waived) == fee


class TestShippingAndTax:
    def test_pickup_is_free(self, aggregator):
        assert aggregator.shipping_cost(ShippingType.PICKUP, 100.0, 20.0) == 0

    def test_carrier_markup(self, aggregator):
        assert aggregator.shipping_cost(ShippingType.CARRIER, 100.0, 20.0) == pytest.approx(120.0)

    def test_sales_tax(self, aggregator):
        assert aggregator.sales_tax(765.0, 10.0) == pytest.approx(76.5)


class TestAggregate:
    """Full quotes through the engine."""

    def test_scenario_1000_units(self, make_order):
        quote = price_order(make_order(1000)).quote

        assert quote.base_price == 0.70
        assert quote.pricing_tier_label == "1,000-2,999 units"
        assert quote.setup_fee == 0
        assert quote.design_costs.extra_design_cost == 0
        assert quote.sample_fee == 65.0
        assert quote.subtotal == pytest.approx(765.0)
        assert quote.total_quote == pytest.approx(765.0)
        assert quote.is_below_minimum is False

    def test_scenario_500_units(self, make_order):
        quote = price_order(make_order(500)).quote

        assert quote.base_price == 0.75
        assert quote.base_printing_total == pytest.approx(375.0)
        assert quote.setup_fee == 150.0
        assert quote.design_costs.included_designs == 0
        assert quote.design_costs.extra_design_cost == pytest.approx(35.0)
        assert quote.sample_fee == 65.0
        assert quote.subtotal == pytest.approx(625.0)

    def test_below_minimum_is_flagged_not_rejected(self, make_order):
        quote = price_order(make_order(50)).quote

        assert quote.is_below_minimum is True
        assert quote.pricing_tier_label == "Below minimum (100 units)"
        assert quote.total_quote > 0

    def test_rush_turnaround(self, make_order):
        quote = price_order(make_order(1000, turnaround=Turnaround.RUSH)).quote

        assert quote.turnaround_rate == 0.12
        assert quote.turnaround_fee == pytest.approx(84.0)
        assert quote.subtotal == pytest.approx(700.0 + 84.0 + 65.0)

    def test_turnaround_applies_to_device_revenue(self, make_order, custom_device, make_item):
        item = make_item(2000, device=custom_device, service_type=ServiceType.DEVICES_ONLY)
        quote = price_order(make_order(items=[item], turnaround=Turnaround.RUSH)).quote

        assert quote.turnaround_fee == pytest.approx(6500.0 * 0.12)

    def test_tax_and_shipping(self, make_order):
        order = make_order(
            1000,
            sales_tax_rate_pct=10.0,
            shipping_type=ShippingType.CARRIER,
            shipping_base_quote=100.0,
            shipping_markup_pct=20.0,
        )
        quote = price_order(order).quote

        assert quote.sales_tax == pytest.approx(76.5)
        assert quote.shipping_cost == pytest.approx(120.0)
        assert quote.total_quote == pytest.approx(765.0 + 76.5 + 120.0)

    def test_devices_only_order_has_no_print_fees(self, make_order, make_item, custom_device):
        item = make_item(2000, device=custom_device, service_type=ServiceType.DEVICES_ONLY)
        quote = price_order(make_order(items=[item], num_designs=3)).quote

        assert quote.print_quantity == 0
        assert quote.setup_fee == 0
        assert quote.design_costs.extra_design_cost == 0
        assert quote.sample_fee == 0
        assert quote.pricing_tier_label == "No printing"
        assert quote.total_quote == pytest.approx(6500.0)

    def test_order_charges_applied_once(self, make_order, make_item):
        """Two 600-unit items share the 1200-unit tier and one set of order fees."""
        order = make_order(items=[make_item(600, item_id="a"), make_item(600, item_id="b")])
        quote = price_order(order).quote

        assert quote.base_price == 0.70
        assert [p.line_item_charge for p in quote.line_items] == [
            pytest.approx(420.0), pytest.approx(420.0)
        ]
        assert quote.line_items_subtotal == pytest.approx(840.0)
        assert quote.setup_fee == 0
        assert quote.design_costs.included_designs == 1
        assert quote.sample_fee == 65.0
        assert quote.total_quote == pytest.approx(840.0 + 65.0)

    def test_totals_are_sum_of_components(self, make_order, make_item):
        order = make_order(items=[
            make_item(300, sides="double", gloss_finish="single-side", packaging="client"),
            make_item(400, service_type="print-and-devices", packaging="partner-pack"),
        ], num_designs=2, turnaround=Turnaround.WEEKEND, sales_tax_rate_pct=8.0)
        quote = price_order(order).quote

        assert quote.line_items_subtotal == pytest.approx(
            sum(p.line_item_charge for p in quote.line_items)
        )
        assert quote.subtotal_before_turnaround == pytest.approx(
            quote.line_items_subtotal + quote.setup_fee + quote.design_costs.extra_design_cost
        )
        assert quote.subtotal == pytest.approx(
            quote.subtotal_before_turnaround + quote.turnaround_fee + quote.sample_fee
        )
        assert quote.total_quote == pytest.approx(
            quote.subtotal + quote.sales_tax + quote.shipping_cost
        )
