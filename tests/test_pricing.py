"""Tests for order total calculation."""

from decimal import Decimal

from storefront.services.pricing import shipping_cost_for, summarize, tax_for


class TestSummarize:
    def test_free_shipping_over_threshold(self):
        summary = summarize([(Decimal("3000"), 2), (Decimal("5000"), 1)])
        assert summary.subtotal == Decimal("11000")
        assert summary.shipping_cost == Decimal("0")
        assert summary.tax_amount == Decimal("1100")
        assert summary.total_amount == Decimal("12100")

    def test_flat_fee_under_threshold(self):
        summary = summarize([(Decimal("1000"), 1)])
        assert summary.subtotal == Decimal("1000")
        assert summary.shipping_cost == Decimal("500")
        assert summary.tax_amount == Decimal("100")
        assert summary.total_amount == Decimal("1600")

    def test_total_is_sum_of_parts(self):
        summary = summarize([(Decimal("1234"), 3), (Decimal("99.50"), 2)])
        assert summary.total_amount == summary.subtotal + summary.shipping_cost + summary.tax_amount


class TestShipping:
    def test_threshold_is_inclusive(self):
        assert shipping_cost_for(Decimal("10000")) == Decimal("0")

    def test_just_below_threshold(self):
        assert shipping_cost_for(Decimal("9999")) == Decimal("500")


class TestTax:
    def test_rounds_down(self):
        assert tax_for(Decimal("1005")) == Decimal("100")
        assert tax_for(Decimal("1009")) == Decimal("100")

    def test_fractional_prices(self):
        assert tax_for(Decimal("199.99")) == Decimal("19")

    def test_zero(self):
        assert tax_for(Decimal("0")) == Decimal("0")
