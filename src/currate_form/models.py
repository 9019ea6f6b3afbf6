from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any

class Currency(str, Enum):
    USD = "USD"
    EUR = "EUR"
    RUB = "RUB"

    @property
    def symbol(self) -> str:
        return {"USD": "$", "EUR": "€", "RUB": "₽"}[self.value]

    @property
    def display_name(self) -> str:
        return {"USD": "US Dollar", "EUR": "Euro", "RUB": "Russian Ruble"}[self.value]

def parse_currency(s: str) -> Currency | None:
    # " usd " -> USD
    code = (s or "").strip().upper()
    try:
        return Currency(code)
    except ValueError:
        return None

@dataclass(frozen=True)
class RateResponse:
    success: bool
    rate: float = 0.0
    error: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RateResponse:
        return cls(
            success=bool(data.get("success")),
            rate=float(data.get("rate") or 0.0),
            error=str(data.get("error") or ""),
        )

@dataclass(frozen=True)
class ConvertRequest:
    amount: float
    currency: str
    date: str  # DD.MM.YYYY

    def to_dict(self) -> dict[str, Any]:
        return {"amount": self.amount, "currency": self.currency, "date": self.date}

@dataclass(frozen=True)
class ConvertResponse:
    success: bool
    result: str = ""
    error: str = ""
    source_amount: float = 0.0
    target_amount: float = 0.0
    rate: float = 0.0
    currency: str = ""
    currency_symbol: str = ""
    requested_date: str = ""
    actual_date: str = ""

    @classmethod
    def failure(cls, error: str) -> ConvertResponse:
        return cls(success=False, error=error)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ConvertResponse:
        return cls(
            success=bool(data.get("success")),
            result=str(data.get("result") or ""),
            error=str(data.get("error") or ""),
            source_amount=float(data.get("sourceAmount") or 0.0),
            target_amount=float(data.get("targetAmountRUB", data.get("targetAmount")) or 0.0),
            rate=float(data.get("rate") or 0.0),
            currency=str(data.get("currency") or ""),
            currency_symbol=str(data.get("currencySymbol") or ""),
            requested_date=str(data.get("requestedDate") or ""),
            actual_date=str(data.get("actualDate") or ""),
        )
