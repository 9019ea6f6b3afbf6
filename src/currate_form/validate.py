from __future__ import annotations
import re

NUMBER_RE = re.compile(r"-?[0-9]+(?:\.[0-9]+)?")
NON_DIGIT_RE = re.compile(r"[^0-9]")

def strip_whitespace(s: str) -> str:
    return re.sub(r"\s+", "", s.strip())

def digits_only(s: str) -> str:
    return NON_DIGIT_RE.sub("", s)

def _single_separator(s: str, sep: str) -> str:
    # One separator followed by exactly three characters is a thousands group
    # (1,500 -> 1500); otherwise it is the decimal point (1,5 -> 1.5).
    # Two or more are all thousands separators.
    if s.count(sep) == 1:
        head, tail = s.split(sep)
        if len(tail) == 3 and len(head) >= 1:
            return head + tail
        return head + "." + tail
    return s.replace(sep, "")

def normalize_separators(s: str) -> str:
    # no locale is known: with both separators the last one is the decimal point
    has_dot = "." in s
    has_comma = "," in s

    if has_dot and has_comma:
        if s.rfind(".") > s.rfind(","):
            return s.replace(",", "")
        return s.replace(".", "").replace(",", ".")
    if has_comma:
        return _single_separator(s, ",")
    if has_dot:
        return _single_separator(s, ".")
    return s

def is_plain_number(s: str) -> bool:
    return NUMBER_RE.fullmatch(s) is not None

def _group_thousands(int_part: str, sep: str = " ") -> str:
    sign = ""
    if int_part.startswith("-"):
        sign, int_part = "-", int_part[1:]
    groups = []
    while len(int_part) > 3:
        groups.insert(0, int_part[-3:])
        int_part = int_part[:-3]
    groups.insert(0, int_part)
    return sign + sep.join(groups)

def format_amount(value: float, decimals: int = 2) -> str:
    # 1000.5 -> "1 000.50"
    formatted = f"{value:.{decimals}f}"
    int_part, _, dec_part = formatted.partition(".")
    out = _group_thousands(int_part)
    if dec_part:
        out += "." + dec_part
    return out

def format_money(value: float) -> str:
    # 80722.0 -> "80 722,00"
    return format_amount(value, 2).replace(".", ",")

def format_rate(rate: float) -> str:
    return f"{rate:.4f}".replace(".", ",")

def format_result(amount: float, rate: float, symbol: str, target: float) -> str:
    # "80 722,00 RUB ($1 000,00 at 80,7220)"
    return f"{format_money(target)} RUB ({symbol}{format_money(amount)} at {format_rate(rate)})"
