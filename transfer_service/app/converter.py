"""State and derived values behind the currency converter form.

The preview shown on the form converts through USD using the rates from
``/api/rates``. The stored transfer uses the provider's direct pair rate, so
the two figures are not guaranteed to agree.
"""
import math
from decimal import Decimal, DecimalException, InvalidOperation
from typing import Dict, Optional

from pydantic import BaseModel

from currencies import PIVOT_CURRENCY, SUPPORTED_CURRENCIES, country_for_currency

SUCCESS_DISPLAY_SECONDS = 3

DEFAULT_FROM_CURRENCY = "USD"
DEFAULT_TO_CURRENCY = "LKR"
DEFAULT_AMOUNT = "1.00"


class FormError(Exception):
    pass


class ConverterForm(BaseModel):
    from_currency: str = DEFAULT_FROM_CURRENCY
    to_currency: str = DEFAULT_TO_CURRENCY
    amount: str = DEFAULT_AMOUNT

    def swapped(self) -> "ConverterForm":
        return ConverterForm(from_currency=self.to_currency, to_currency=self.from_currency, amount=self.amount)


def parse_amount_text(amount_text) -> Optional[Decimal]:
    if not amount_text:
        return None
    try:
        amount = Decimal(str(amount_text).strip())
    except InvalidOperation:
        return None
    if not amount.is_finite() or not math.isfinite(float(amount)):
        return None
    return amount


def _rate(rates: Dict[str, float], currency: str) -> Optional[Decimal]:
    value = rates.get(currency)
    if value is None or isinstance(value, bool):
        return None
    return Decimal(str(value))


def preview_conversion(amount_text, from_currency, to_currency, rates) -> Optional[Decimal]:
    """Display-only conversion pivoting through USD; None when it can't be shown."""
    if not from_currency or not to_currency or not rates:
        return None
    amount = parse_amount_text(amount_text)
    if amount is None:
        return None
    to_rate = _rate(rates, to_currency)
    if to_rate is None:
        return None

    from_rate = _rate(rates, from_currency)
    if from_currency != PIVOT_CURRENCY and not from_rate:
        return None

    try:
        amount_in_usd = amount if from_currency == PIVOT_CURRENCY else amount / from_rate
        return amount_in_usd * to_rate
    except DecimalException:
        # Overflow on huge amounts
        return None


def unit_rate(from_currency, to_currency, rates) -> Optional[Decimal]:
    if not rates:
        return None
    from_rate = _rate(rates, from_currency)
    to_rate = _rate(rates, to_currency)
    if not from_rate or to_rate is None:
        return None
    try:
        return to_rate / from_rate
    except DecimalException:
        return None


def format_amount(value: Decimal, places: int = 2) -> str:
    return f"{value:.{places}f}"


def format_preview(form: ConverterForm, rates) -> Optional[dict]:
    converted = preview_conversion(form.amount, form.from_currency, form.to_currency, rates)
    if converted is None:
        return None
    rate = unit_rate(form.from_currency, form.to_currency, rates)
    return {
        "source": f"{format_amount(parse_amount_text(form.amount))} {form.from_currency} =",
        "converted": f"{format_amount(converted)} {form.to_currency}",
        "unit_rate": f"1 {form.from_currency} = {format_amount(rate, 4)} {form.to_currency}" if rate is not None else "",
    }


def build_transfer_request(form: ConverterForm) -> dict:
    amount = parse_amount_text(form.amount)
    if not form.from_currency or not form.to_currency or amount is None or amount <= 0:
        raise FormError("Please fill all fields with valid values")
    if form.from_currency not in SUPPORTED_CURRENCIES or form.to_currency not in SUPPORTED_CURRENCIES:
        raise FormError("One or both selected currencies are not supported for transfers")
    return {
        "from_country": country_for_currency(form.from_currency),
        "to_country": country_for_currency(form.to_currency),
        "amount": float(amount),
    }


def can_submit(form: ConverterForm) -> bool:
    amount = parse_amount_text(form.amount)
    return amount is not None and amount > 0
