from types import MappingProxyType
from typing import Optional

SUPPORTED_COUNTRIES = ("USA", "Sri Lanka", "Australia", "India")
SUPPORTED_CURRENCIES = ("USD", "LKR", "AUD", "INR")

PIVOT_CURRENCY = "USD"

COUNTRY_TO_CURRENCY = MappingProxyType(dict(zip(SUPPORTED_COUNTRIES, SUPPORTED_CURRENCIES)))
CURRENCY_TO_COUNTRY = MappingProxyType({currency: country for country, currency in COUNTRY_TO_CURRENCY.items()})

CURRENCY_NAMES = MappingProxyType({
    "USD": "US Dollar",
    "LKR": "Sri Lankan Rupee",
    "AUD": "Australian Dollar",
    "INR": "Indian Rupee",
})

CURRENCY_SYMBOLS = MappingProxyType({
    "USD": "$",
    "LKR": "Rs.",
    "AUD": "A$",
    "INR": "₹",
})


def currency_for_country(country) -> Optional[str]:
    if not isinstance(country, str):
        return None
    return COUNTRY_TO_CURRENCY.get(country)


def country_for_currency(currency) -> Optional[str]:
    if not isinstance(currency, str):
        return None
    return CURRENCY_TO_COUNTRY.get(currency)
