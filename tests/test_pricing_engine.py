"""Tests for the pure pricing engine"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from pricing import (
    CouponExhausted,
    CouponExpired,
    CouponInactive,
    CouponNotFound,
    CouponRules,
    EbookItem,
    InsufficientStock,
    InvalidQuantity,
    MinimumOrderNotMet,
    PhysicalItem,
    ProductNotFound,
    ProductPrices,
    compute_discount,
    compute_grand_total,
    compute_line_total,
    compute_subtotal,
    quote,
    resolve_unit_price,
    to_money,
    validate_coupon,
)

NOW = datetime(2026, 6, 15, 12, 0, tzinfo=timezone.utc)


def coupon(**overrides) -> CouponRules:
    fields = dict(
        code="SAVE10",
        discount_percent=Decimal("10"),
        max_discount=Decimal("50"),
        min_order_value=Decimal("500"),
        usage_limit=10,
        used_count=0,
        start_date=NOW - timedelta(days=1),
        end_date=NOW + timedelta(days=1),
        is_active=True,
    )
    fields.update(overrides)
    return CouponRules(**fields)


NOVEL = ProductPrices(
    product_id="novel",
    title="Novel",
    price=Decimal("350"),
    ebook_price=Decimal("299"),
    ebook_discounted=Decimal("199"),
    stock=10,
)

HARDCOVER = ProductPrices(product_id="hardcover", title="Hardcover", price=Decimal("500"), stock=2)


class TestUnitPrice:
    def test_ebook_prefers_discounted_ebook_price(self):
        assert resolve_unit_price(EbookItem("novel", 1), NOVEL) == Decimal("199.00")

    def test_ebook_falls_back_to_ebook_price_then_base_price(self):
        no_sale = ProductPrices(product_id="p", price=Decimal("350"), ebook_price=Decimal("299"))
        no_ebook = ProductPrices(product_id="p", price=Decimal("350"))

        assert resolve_unit_price(EbookItem("p", 1), no_sale) == Decimal("299.00")
        assert resolve_unit_price(EbookItem("p", 1), no_ebook) == Decimal("350.00")

    def test_physical_uses_discounted_price_when_present(self):
        on_sale = ProductPrices(product_id="p", price=Decimal("499"), discounted_price=Decimal("399"))

        assert resolve_unit_price(PhysicalItem("p", 1), on_sale) == Decimal("399.00")
        assert resolve_unit_price(PhysicalItem("novel", 1), NOVEL) == Decimal("350.00")

    def test_zero_sale_price_is_honoured(self):
        free = ProductPrices(product_id="p", price=Decimal("120"), ebook_price=Decimal("0"))

        assert resolve_unit_price(EbookItem("p", 1), free) == Decimal("0.00")


class TestLineTotals:
    def test_ebook_line_total(self):
        assert compute_line_total(EbookItem("novel", 2), NOVEL) == Decimal("398.00")

    def test_zero_quantity_is_rejected(self):
        with pytest.raises(InvalidQuantity) as exc:
            compute_line_total(PhysicalItem("novel", 0), NOVEL)
        assert exc.value.kind == "InvalidQuantity"

    def test_stock_is_not_checked_at_display_time(self):
        assert compute_line_total(PhysicalItem("hardcover", 3), HARDCOVER) == Decimal("1500.00")

    def test_stock_is_checked_at_checkout_time(self):
        with pytest.raises(InsufficientStock) as exc:
            compute_line_total(PhysicalItem("hardcover", 3), HARDCOVER, enforce_stock=True)
        assert exc.value.available == 2
        assert exc.value.requested == 3

    def test_ebooks_ignore_stock(self):
        out_of_print = ProductPrices(product_id="p", price=Decimal("450"), ebook_price=Decimal("149"), stock=0)

        total = compute_line_total(EbookItem("p", 5), out_of_print, enforce_stock=True)
        assert total == Decimal("745.00")

    def test_no_binary_float_drift(self):
        cheap = ProductPrices(product_id="p", price=to_money(0.1))

        assert compute_line_total(PhysicalItem("p", 3), cheap) == Decimal("0.30")


class TestSubtotal:
    def test_empty_cart_is_zero(self):
        assert compute_subtotal([], {}) == Decimal("0")

    def test_sums_lines(self):
        products = {"novel": NOVEL, "hardcover": HARDCOVER}
        items = [EbookItem("novel", 2), PhysicalItem("novel", 1), PhysicalItem("hardcover", 1)]

        assert compute_subtotal(items, products) == Decimal("1248.00")

    def test_unknown_product(self):
        with pytest.raises(ProductNotFound):
            compute_subtotal([PhysicalItem("missing", 1)], {"novel": NOVEL})


class TestValidateCoupon:
    def test_valid_coupon_is_returned_unchanged(self):
        rules = coupon()
        assert validate_coupon(rules, Decimal("1000"), NOW) is rules

    def test_code_matches_case_insensitively(self):
        assert validate_coupon(coupon(), Decimal("1000"), NOW, code=" save10 ").code == "SAVE10"

    def test_missing_coupon(self):
        with pytest.raises(CouponNotFound):
            validate_coupon(None, Decimal("1000"), NOW, code="NOPE")

    def test_code_mismatch(self):
        with pytest.raises(CouponNotFound):
            validate_coupon(coupon(), Decimal("1000"), NOW, code="SAVE20")

    def test_inactive(self):
        with pytest.raises(CouponInactive):
            validate_coupon(coupon(is_active=False), Decimal("1000"), NOW)

    def test_outside_window(self):
        with pytest.raises(CouponExpired):
            validate_coupon(coupon(), Decimal("1000"), NOW + timedelta(days=2))
        with pytest.raises(CouponExpired):
            validate_coupon(coupon(), Decimal("1000"), NOW - timedelta(days=2))

    def test_window_bounds_are_inclusive(self):
        rules = coupon(start_date=NOW, end_date=NOW)
        assert validate_coupon(rules, Decimal("1000"), NOW) is rules

    def test_naive_dates_are_treated_as_utc(self):
        rules = coupon(
            start_date=datetime(2026, 6, 14, 0, 0),
            end_date=datetime(2026, 6, 16, 0, 0),
        )
        assert validate_coupon(rules, Decimal("1000"), NOW) is rules

    def test_usage_limit_reached(self):
        with pytest.raises(CouponExhausted):
            validate_coupon(coupon(usage_limit=3, used_count=3), Decimal("1000"), NOW)

    def test_minimum_order(self):
        with pytest.raises(MinimumOrderNotMet) as exc:
            validate_coupon(coupon(), Decimal("400"), NOW)
        assert exc.value.min_order_value == Decimal("500.00")

    def test_inactive_is_reported_before_expiry(self):
        rules = coupon(is_active=False, end_date=NOW - timedelta(days=1))
        with pytest.raises(CouponInactive):
            validate_coupon(rules, Decimal("1000"), NOW)

    def test_validation_has_no_side_effects(self):
        rules = coupon(usage_limit=1, used_count=0)

        first = validate_coupon(rules, Decimal("1000"), NOW)
        second = validate_coupon(rules, Decimal("1000"), NOW)

        assert first == second
        assert rules.used_count == 0


class TestDiscountAndTotal:
    def test_discount_is_capped(self):
        assert compute_discount(coupon(), Decimal("1000")) == Decimal("50.00")

    def test_discount_below_cap(self):
        rules = coupon(discount_percent=Decimal("80"), max_discount=Decimal("1000"))
        assert compute_discount(rules, Decimal("1000")) == Decimal("800.00")

    def test_no_coupon_no_discount(self):
        assert compute_discount(None, Decimal("1000")) == Decimal("0")

    def test_discount_never_exceeds_subtotal(self):
        rules = coupon(discount_percent=Decimal("100"), max_discount=Decimal("99999"))
        assert compute_discount(rules, Decimal("123.45")) == Decimal("123.45")

    def test_discount_rounds_half_up(self):
        rules = coupon(discount_percent=Decimal("12.5"), max_discount=Decimal("500"))
        # 999.99 * 12.5% = 124.99875
        assert compute_discount(rules, Decimal("999.99")) == Decimal("125.00")

    def test_grand_total(self):
        assert compute_grand_total(Decimal("1000"), Decimal("50")) == Decimal("950.00")

    def test_grand_total_is_floored_at_zero(self):
        assert compute_grand_total(Decimal("100"), Decimal("150")) == Decimal("0")

    def test_grand_total_adds_shipping(self):
        assert compute_grand_total(Decimal("100"), Decimal("10"), shipping=Decimal("40")) == Decimal("130.00")


class TestQuote:
    products = {"hardcover": ProductPrices(product_id="hardcover", title="Hardcover", price=Decimal("500"), stock=5)}

    def test_capped_coupon(self):
        breakdown = quote([PhysicalItem("hardcover", 2)], self.products, coupon=coupon(), now=NOW)

        assert breakdown.subtotal == Decimal("1000.00")
        assert breakdown.discount == Decimal("50.00")
        assert breakdown.total == Decimal("950.00")
        assert breakdown.applied_coupon_code == "SAVE10"
        assert breakdown.coupon_error is None

    def test_uncapped_coupon(self):
        rules = coupon(discount_percent=Decimal("80"), max_discount=Decimal("1000"))
        breakdown = quote([PhysicalItem("hardcover", 2)], self.products, coupon=rules, now=NOW)

        assert breakdown.discount == Decimal("800.00")
        assert breakdown.total == Decimal("200.00")

    def test_failed_coupon_falls_back_to_subtotal(self):
        hardcover = {"hardcover": ProductPrices(product_id="hardcover", price=Decimal("400"), stock=5)}
        breakdown = quote([PhysicalItem("hardcover", 1)], hardcover, coupon=coupon(), now=NOW)

        assert isinstance(breakdown.coupon_error, MinimumOrderNotMet)
        assert breakdown.discount == Decimal("0")
        assert breakdown.total == Decimal("400.00")
        assert breakdown.applied_coupon_code is None

    def test_unknown_code_is_reported(self):
        breakdown = quote([PhysicalItem("hardcover", 2)], self.products, coupon_code="GHOST", now=NOW)

        assert isinstance(breakdown.coupon_error, CouponNotFound)
        assert breakdown.total == Decimal("1000.00")

    def test_line_snapshots(self):
        breakdown = quote([PhysicalItem("hardcover", 2)], self.products, now=NOW)

        (line,) = breakdown.lines
        assert line.unit_price == Decimal("500.00")
        assert line.line_total == Decimal("1000.00")
        assert not line.is_ebook

    def test_stock_enforced_only_on_request(self):
        items = [PhysicalItem("hardcover", 6)]

        assert quote(items, self.products, now=NOW).total == Decimal("3000.00")
        with pytest.raises(InsufficientStock):
            quote(items, self.products, now=NOW, enforce_stock=True)

    def test_empty_quote(self):
        breakdown = quote([], {}, now=NOW)

        assert breakdown.subtotal == Decimal("0")
        assert breakdown.total == Decimal("0")
        assert breakdown.lines == []
