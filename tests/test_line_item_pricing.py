"""Unit tests for tier lookup and per-line-item pricing."""

import pytest

from core.exceptions import InvalidQuantityError, MissingFallbackTierError
from models.device import PricingTier
from models.order import GlossFinish, Packaging, ServiceType, Sides
from models.quote import ProductionEstimate
from modules.line_item_pricing import LineItemPricer, lookup_tier
from modules.rate_tables import DEFAULT_DEVICE_PRICING_TIERS, DEFAULT_PRINT_TIERS


@pytest.fixture
def pricer(rates):
    return LineItemPricer(rates)


class TestLookupTier:
    """Highest min_qty not above the quantity wins."""

    TIERS = (PricingTier(0, 1.00), PricingTier(1000, 0.80), PricingTier(500, 0.90))

    @pytest.mark.parametrize("quantity,expected", [
        (0, 1.00),
        (499, 1.00),
        (500, 0.90),
        (999, 0.90),
        (1000, 0.80),
        (250000, 0.80),
    ])
    def test_unsorted_table(self, quantity, expected):
        assert lookup_tier(quantity, self.TIERS) == expected

    def test_missing_fallback_raises(self):
        with pytest.raises(MissingFallbackTierError) as exc_info:
            lookup_tier(50, (PricingTier(100, 1.0),), "test")
        assert exc_info.value.error_kind == "MissingFallbackTier"

    def test_negative_quantity_raises(self):
        with pytest.raises(InvalidQuantityError):
            lookup_tier(-1, self.TIERS)

    @pytest.mark.parametrize("tiers", [DEFAULT_PRINT_TIERS, *DEFAULT_DEVICE_PRICING_TIERS.values()])
    def test_price_never_increases_with_quantity(self, tiers):
        quantities = sorted({0, 1, 99, 100, 499, 500, 999, 1000, 2999, 3000, 4999, 5000,
                             9999, 10000, 24999, 25000, 100000})
        prices = [lookup_tier(q, tiers) for q in quantities]
        assert all(later <= earlier for earlier, later in zip(prices, prices[1:]))


class TestTierLabel:
    @pytest.mark.parametrize("quantity,label", [
        (0, "No printing"),
        (50, "Below minimum (100 units)"),
        (100, "100-499 units"),
        (500, "500-999 units"),
        (1000, "1,000-2,999 units"),
        (4999, "3,000-4,999 units"),
        (12000, "10,000+ units"),
    ])
    def test_labels(self, pricer, quantity, label):
        assert pricer.pricing_tier_label(quantity) == label

    def test_base_price(self, pricer):
        assert pricer.base_price(1000) == 0.70
        assert pricer.base_price(500) == 0.75
        assert pricer.base_price(0) == 0.80


class TestPriceLineItem:
    """Customer charges and cost contributions."""

    def test_plain_print_only(self, pricer, make_item):
        pricing = pricer.price(make_item(1000), base_price=0.70)

        assert pricing.base_printing_charge == pytest.approx(700.0)
        assert pricing.gloss_charge == 0
        assert pricing.double_sided_charge == 0
        assert pricing.packaging_charge == 0
        assert pricing.device_revenue == 0
        assert pricing.line_item_charge == pytest.approx(700.0)
        assert pricing.cmyk_ink_cost == pytest.approx(30.0)
        assert pricing.repackaging_cost == 0
        assert pricing.device_cost_floor == 0
        assert pricing.production.batches_needed == 12

    def test_double_sided_both_sides_gloss(self, pricer, make_item):
        item = make_item(1000, sides=Sides.DOUBLE, gloss_finish=GlossFinish.BOTH_SIDES)
        pricing = pricer.price(item, base_price=0.70)

        assert pricing.sides_printed == 2
        assert pricing.gloss_sides == 2
        assert pricing.gloss_charge == pytest.approx(120.0)
        assert pricing.double_sided_charge == pytest.approx(350.0)
        assert pricing.cmyk_ink_cost == pytest.approx(60.0)
        assert pricing.gloss_ink_cost == pytest.approx(20.0)
        assert pricing.total_ink_cost == pytest.approx(80.0)
        assert pricing.printing_subtotal == pytest.approx(700.0 + 120.0 + 350.0)
        assert pricing.production.minutes_per_batch == 45
        assert pricing.production.total_minutes == 12 * 45 * 2

    def test_single_side_gloss_ink(self, pricer, make_item):
        pricing = pricer.price(make_item(1000, gloss_finish=GlossFinish.SINGLE_SIDE), 0.70)

        assert pricing.gloss_charge == pytest.approx(70.0)
        assert pricing.gloss_ink_cost == pytest.approx(10.0)

    @pytest.mark.parametrize("packaging,charge", [
        (Packaging.PARTNER_PACK, 110.0),
        (Packaging.CLIENT_PACK, 160.0),
    ])
    def test_packaging(self, pricer, make_item, packaging, charge):
        pricing = pricer.price(make_item(1000, packaging=packaging), 0.70)

        assert pricing.packaging_charge == pytest.approx(charge)
        assert pricing.repackaging_cost == pytest.approx(60.0)

    def test_print_and_devices(self, pricer, make_item):
        item = make_item(1000, service_type=ServiceType.PRINT_AND_DEVICES)
        pricing = pricer.price(item, 0.70)

        assert pricing.device_selling_price == 3.25
        assert pricing.device_revenue == pytest.approx(3250.0)
        assert pricing.device_cost_floor == pytest.approx(2050.0)
        assert pricing.device_profit == pytest.approx(1200.0)
        assert pricing.line_item_charge == pytest.approx(700.0 + 3250.0)

    def test_devices_only_has_no_printing(self, pricer, make_item, custom_device):
        item = make_item(
            2000,
            device=custom_device,
            service_type=ServiceType.DEVICES_ONLY,
            sides=Sides.DOUBLE,
            packaging=Packaging.CLIENT_PACK,
        )
        pricing = pricer.price(item, 0.70)

        assert pricing.printing_subtotal == 0
        assert pricing.total_ink_cost == 0
        assert pricing.repackaging_cost == 0
        assert pricing.sides_printed == 0
        assert pricing.production == ProductionEstimate()
        assert pricing.device_revenue == pytest.approx(6500.0)
        assert pricing.device_cost_floor == pytest.approx(3700.0)
        assert pricing.device_profit == pytest.approx(2800.0)

    def test_device_tier_uses_line_quantity(self, pricer, make_item):
        pricing = pricer.price(make_item(5000, service_type="print-and-devices"), 0.60)
        assert pricing.device_selling_price == 2.75
