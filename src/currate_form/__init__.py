from .fields import (
    AmountResult,
    DateResult,
    Reject,
    can_accept_date_digit,
    format_date_digits,
    parse_amount,
    parse_strict_date,
)

__all__ = [
    "AmountResult",
    "DateResult",
    "Reject",
    "can_accept_date_digit",
    "format_date_digits",
    "parse_amount",
    "parse_strict_date",
]
