"""Tests for the converter form's derived values."""

from decimal import Decimal

import pytest

from converter import (ConverterForm, FormError, build_transfer_request, can_submit, format_preview,
                       preview_conversion, unit_rate)

RATES = {"USD": 1, "LKR": 300, "AUD": 1.5}


def test_preview_usd_to_lkr():
    assert preview_conversion("2.00", "USD", "LKR", RATES) == Decimal("600.00")


def test_preview_pivots_through_usd():
    assert preview_conversion("3", "AUD", "LKR", RATES) == Decimal("600")


@pytest.mark.parametrize("amount, from_currency, to_currency, rates", [
    ("", "USD", "LKR", RATES),
    ("abc", "USD", "LKR", RATES),
    ("2", "", "LKR", RATES),
    ("2", "USD", "LKR", {}),
    ("2", "USD", "INR", RATES),
    ("2", "INR", "USD", RATES),
])
def test_preview_unavailable(amount, from_currency, to_currency, rates):
    assert preview_conversion(amount, from_currency, to_currency, rates) is None


def test_format_preview():
    preview = format_preview(ConverterForm(from_currency="USD", to_currency="LKR", amount="2.00"), RATES)

    assert preview == {
        "source": "2.00 USD =",
        "converted": "600.00 LKR",
        "unit_rate": "1 USD = 300.0000 LKR",
    }


def test_unit_rate():
    assert unit_rate("AUD", "LKR", RATES) == Decimal("200")


def test_swapped_keeps_amount():
    form = ConverterForm(from_currency="USD", to_currency="INR", amount="5")

    assert form.swapped() == ConverterForm(from_currency="INR", to_currency="USD", amount="5")


def test_build_transfer_request_maps_currencies_to_countries():
    request = build_transfer_request(ConverterForm(from_currency="AUD", to_currency="LKR", amount="12.50"))

    assert request == {"from_country": "Australia", "to_country": "Sri Lanka", "amount": 12.5}


@pytest.mark.parametrize("form, message", [
    (ConverterForm(amount=""), "Please fill all fields with valid values"),
    (ConverterForm(amount="0"), "Please fill all fields with valid values"),
    (ConverterForm(amount="-3"), "Please fill all fields with valid values"),
    (ConverterForm(from_currency="EUR", amount="1"), "One or both selected currencies are not supported for transfers"),
])
def test_build_transfer_request_rejects(form, message):
    with pytest.raises(FormError, match=message):
        build_transfer_request(form)


@pytest.mark.parametrize("amount", ["1E+999999", "-1E+999999", "1E+400"])
def test_preview_of_huge_amount_is_unavailable(amount):
    assert preview_conversion(amount, "USD", "LKR", RATES) is None
    assert preview_conversion(amount, "AUD", "LKR", RATES) is None
    assert format_preview(ConverterForm(amount=amount), RATES) is None


def test_huge_amount_cannot_be_submitted():
    form = ConverterForm(from_currency="USD", to_currency="LKR", amount="1E+999999")

    assert can_submit(form) is False
    with pytest.raises(FormError, match="Please fill all fields with valid values"):
        build_transfer_request(form)


@pytest.mark.parametrize("amount, expected", [("2.00", True), ("", False), ("0", False), ("-1", False), ("x", False)])
def test_can_submit(amount, expected):
    assert can_submit(ConverterForm(amount=amount)) is expected
