from .base import AmountResult, DateResult, Reject, describe
from .amount import parse_amount
from .date_input import (
    can_accept_date_digit,
    digit_index_at,
    format_date,
    format_date_digits,
    insert_date_digit,
    parse_strict_date,
)

__all__ = [
    "AmountResult",
    "DateResult",
    "Reject",
    "describe",
    "parse_amount",
    "can_accept_date_digit",
    "digit_index_at",
    "format_date",
    "format_date_digits",
    "insert_date_digit",
    "parse_strict_date",
]
