from __future__ import annotations
import re
from datetime import date

from .base import DateResult, Reject
from ..utils import is_future_date
from ..validate import digits_only

DATE_LEN = 10
MAX_DIGITS = 8
DIGITS = "0123456789"
MIN_YEAR = 100
DATE_SHAPE_RE = re.compile(r"([0-9]{2})\.([0-9]{2})\.([0-9]{4})")

def format_date(d: date) -> str:
    return f"{d.day:02d}.{d.month:02d}.{d.year:04d}"

def format_date_digits(text: str) -> str:
    """23042025 -> 23.04.2025; partial input is punctuated as far as it goes."""
    digits = digits_only(text or "")[:MAX_DIGITS]
    if len(digits) <= 2:
        return digits
    if len(digits) <= 4:
        return f"{digits[:2]}.{digits[2:]}"
    return f"{digits[:2]}.{digits[2:4]}.{digits[4:]}"

def digit_index_at(text: str, cursor: int) -> int:
    # number of digits left of the cursor in the display string
    return sum(1 for ch in text[:max(cursor, 0)] if ch in DIGITS)

def can_accept_date_digit(current_text: str, digit: str, digit_index: int) -> bool:
    # Only rules out impossible prefixes (day 4x, day 32+, month 13+, years
    # outside 19xx/20xx); day counts and leap years are left to parse_strict_date.
    if len(digit) != 1 or digit not in DIGITS:
        return False

    digits = digits_only(current_text or "")
    if len(digits) >= MAX_DIGITS:
        return False
    if not 0 <= digit_index < MAX_DIGITS:
        return False

    def at(i: int, default: str) -> str:
        return digits[i] if i < len(digits) else default

    if digit_index == 0:
        return digit in "0123"
    if digit_index == 1:
        return digit in "01" if at(0, "0") == "3" else True
    if digit_index == 2:
        return digit in "01"
    if digit_index == 3:
        return digit in "012" if at(2, "0") == "1" else True
    if digit_index == 4:
        return digit in "12"
    if digit_index == 5:
        century = at(4, "1")
        if century == "1":
            return digit == "9"
        if century == "2":
            return digit == "0"
        return True
    return True

def insert_date_digit(text: str, digit: str, cursor: int) -> tuple[str, int] | None:
    # (new_text, new_cursor), or None when the keystroke is swallowed
    if not can_accept_date_digit(text, digit, digit_index_at(text, cursor)):
        return None
    cursor = min(max(cursor, 0), len(text))
    raw = text[:cursor] + digit + text[cursor:]
    formatted = format_date_digits(raw)

    # place the cursor right after the inserted digit
    typed = digit_index_at(raw, cursor + 1)
    new_cursor = 0
    seen = 0
    for i, ch in enumerate(formatted):
        if ch in DIGITS:
            seen += 1
            if seen == typed:
                new_cursor = i + 1
                break
    return formatted, new_cursor

def parse_strict_date(text: str, today: date | None = None) -> DateResult:
    s = text or ""
    if len(s) != DATE_LEN:
        return DateResult.reject(Reject.MALFORMED_DATE_SHAPE)
    m = DATE_SHAPE_RE.fullmatch(s)
    if not m:
        return DateResult.reject(Reject.MALFORMED_DATE_SHAPE)

    day, month, year = (int(g) for g in m.groups())
    # two-digit years (0001-0099) are not accepted as calendar years
    if year < MIN_YEAR:
        return DateResult.reject(Reject.INVALID_CALENDAR_DATE)
    try:
        d = date(year, month, day)
    except ValueError:
        # 29.02.2021, 31.04.x, month 00/13, year 0000
        return DateResult.reject(Reject.INVALID_CALENDAR_DATE)

    if is_future_date(d, today):
        return DateResult.reject(Reject.FUTURE_DATE)
    return DateResult.accept(d)
