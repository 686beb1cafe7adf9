from datetime import datetime, timezone
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from currencies import COUNTRY_TO_CURRENCY

Country = Literal["USA", "Sri Lanka", "Australia", "India"]
Currency = Literal["USD", "LKR", "AUD", "INR"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TransferCreate(BaseModel):
    # Checked in create_transfer: missing or invalid values answer 400.
    fromCountry: Optional[Any] = None
    toCountry: Optional[Any] = None
    amount: Optional[Any] = None


class TransferRecord(BaseModel):
    model_config = ConfigDict(extra="forbid")

    fromCountry: Country
    toCountry: Country
    fromCurrency: Currency
    toCurrency: Currency
    amount: float = Field(..., ge=0, allow_inf_nan=False)
    convertedAmount: float = Field(..., ge=0, allow_inf_nan=False)
    exchangeRate: float = Field(..., allow_inf_nan=False)
    date: datetime = Field(default_factory=utcnow)

    @model_validator(mode="after")
    def check_country_currency(self):
        if COUNTRY_TO_CURRENCY[self.fromCountry] != self.fromCurrency:
            raise ValueError(f"fromCurrency {self.fromCurrency} does not match fromCountry {self.fromCountry}")
        if COUNTRY_TO_CURRENCY[self.toCountry] != self.toCurrency:
            raise ValueError(f"toCurrency {self.toCurrency} does not match toCountry {self.toCountry}")
        return self


class TransferShow(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., pattern="^[0-9a-f]{24}$")
    mongo_id: str = Field(..., alias="_id")
    fromCountry: Country
    toCountry: Country
    fromCurrency: Currency
    toCurrency: Currency
    amount: float
    convertedAmount: float
    exchangeRate: float
    date: datetime

    @classmethod
    def from_document(cls, document: dict) -> "TransferShow":
        fields = {key: value for key, value in document.items() if key != "_id"}
        return cls(id=document["_id"], mongo_id=document["_id"], **fields)


class RatesShow(BaseModel):
    rates: Dict[str, float]


class MessageShow(BaseModel):
    message: str
