from __future__ import annotations
from dataclasses import dataclass
from datetime import date
from enum import Enum

class Reject(str, Enum):
    EMPTY_INPUT = "empty_input"
    MALFORMED_NUMBER = "malformed_number"
    NON_POSITIVE_AMOUNT = "non_positive_amount"
    MALFORMED_DATE_SHAPE = "malformed_date_shape"
    INVALID_CALENDAR_DATE = "invalid_calendar_date"
    FUTURE_DATE = "future_date"

MESSAGES = {
    Reject.EMPTY_INPUT: "Enter a value",
    Reject.MALFORMED_NUMBER: "Enter a valid amount (a positive number)",
    Reject.NON_POSITIVE_AMOUNT: "Amount must be a positive number",
    Reject.MALFORMED_DATE_SHAPE: "Invalid date format. Use DD.MM.YYYY",
    Reject.INVALID_CALENDAR_DATE: "Invalid date",
    Reject.FUTURE_DATE: "Date cannot be in the future",
}

def describe(reason: Reject) -> str:
    return MESSAGES[reason]

@dataclass(frozen=True)
class AmountResult:
    value: float | None
    reason: Reject | None = None

    @property
    def ok(self) -> bool:
        return self.reason is None

    @classmethod
    def accept(cls, value: float) -> AmountResult:
        return cls(value=value)

    @classmethod
    def reject(cls, reason: Reject) -> AmountResult:
        return cls(value=None, reason=reason)

@dataclass(frozen=True)
class DateResult:
    date: date | None
    reason: Reject | None = None

    @property
    def ok(self) -> bool:
        return self.reason is None

    @classmethod
    def accept(cls, d: date) -> DateResult:
        return cls(date=d)

    @classmethod
    def reject(cls, reason: Reject) -> DateResult:
        return cls(date=None, reason=reason)
