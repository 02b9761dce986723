"""
Tests for Indian currency formatting and amounts in words.
"""

import pytest
from decimal import Decimal

from utils.formatting import amount_to_words, format_indian_currency, rupees_in_words


class TestIndianCurrency:

    @pytest.mark.parametrize("amount, expected", [
        (Decimal("4130000"), "₹ 41,30,000.00"),
        (Decimal("3630000.5"), "₹ 36,30,000.50"),
        (Decimal("999"), "₹ 999.00"),
        (Decimal("1000"), "₹ 1,000.00"),
        (Decimal("123456789.12"), "₹ 12,34,56,789.12"),
        (None, "₹ 0.00"),
    ])
    def test_grouping(self, amount, expected):
        assert format_indian_currency(amount) == expected

    def test_negative(self):
        assert format_indian_currency(Decimal("-150000")) == "-₹ 1,50,000.00"

    def test_custom_symbol(self):
        assert format_indian_currency(500000, symbol="Rs. ") == "Rs. 5,00,000.00"


class TestAmountInWords:

    @pytest.mark.parametrize("amount, expected", [
        (0, "Zero"),
        (15, "Fifteen"),
        (105, "One Hundred Five"),
        (1000, "One Thousand"),
        (500000, "Five Lakh"),
        (4130000, "Forty One Lakh Thirty Thousand"),
        (12500000, "One Crore Twenty Five Lakh"),
    ])
    def test_whole_amounts(self, amount, expected):
        assert amount_to_words(amount) == expected

    def test_paise(self):
        assert amount_to_words(Decimal("1250.75")) == "One Thousand Two Hundred Fifty and Seventy Five Paise"

    def test_rupees_only(self):
        assert rupees_in_words(Decimal("500000")) == "Five Lakh Rupees Only"
