from decimal import Decimal

import pytest

from storefront.domain.errors import InvalidArgument
from storefront.services.pricing import line_total, sum_totals


class TestLineTotal:
    def test_without_discount(self):
        assert line_total(Decimal("10.00"), Decimal("0"), 2) == Decimal("20.00")

    def test_with_discount(self):
        assert line_total(Decimal("5.00"), Decimal("0.10"), 1) == Decimal("4.50")

    def test_none_discount_means_no_discount(self):
        assert line_total(Decimal("3.33"), None, 3) == Decimal("9.99")

    def test_rounds_to_cents_half_up(self):
        # 0.99 * 0.85 = 0.8415
        assert line_total(Decimal("0.99"), Decimal("0.15"), 1) == Decimal("0.84")
        # 0.25 * 0.5 * 1 = 0.125
        assert line_total(Decimal("0.25"), Decimal("0.5"), 1) == Decimal("0.13")

    def test_accepts_strings_and_floats(self):
        assert line_total("19.99", 0.25, 4) == Decimal("59.97")

    @pytest.mark.parametrize("discount", ["-0.01", "1", "1.5"])
    def test_discount_out_of_range_is_rejected(self, discount):
        with pytest.raises(InvalidArgument):
            line_total(Decimal("10.00"), Decimal(discount), 1)

    @pytest.mark.parametrize("quantity", [0, -1, 1.5, True])
    def test_quantity_must_be_positive_integer(self, quantity):
        with pytest.raises(InvalidArgument):
            line_total(Decimal("10.00"), Decimal("0"), quantity)

    def test_negative_price_is_rejected(self):
        with pytest.raises(InvalidArgument):
            line_total(Decimal("-1.00"), Decimal("0"), 1)


class TestSumTotals:
    def test_empty_is_zero(self):
        assert sum_totals([]) == Decimal("0.00")

    def test_sums_line_totals(self):
        assert sum_totals([Decimal("20.00"), Decimal("4.50")]) == Decimal("24.50")
