from __future__ import annotations

import argparse
import logging

from .config import load_settings
from .fields import describe, format_date, format_date_digits, parse_amount, parse_strict_date
from .validate import format_amount

def _amount(text: str) -> int:
    res = parse_amount(text)
    if not res.ok:
        print(f"rejected: {res.reason.value} ({describe(res.reason)})")
        return 1
    print(format_amount(res.value))
    return 0

def _date(text: str) -> int:
    res = parse_strict_date(text)
    if not res.ok:
        print(f"rejected: {res.reason.value} ({describe(res.reason)})")
        return 1
    print(f"{format_date(res.date)} ({res.date.isoformat()})")
    return 0

def _format(text: str) -> int:
    print(format_date_digits(text))
    return 0

def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="currate-form", description="Normalize amount and date input for currency conversion")
    sub = p.add_subparsers(dest="command", required=True)
    sub.add_parser("amount", help="Parse a free-typed amount").add_argument("text")
    sub.add_parser("date", help="Validate a DD.MM.YYYY date").add_argument("text")
    sub.add_parser("format", help="Auto-punctuate typed date digits").add_argument("text")
    return p

def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    try:
        settings = load_settings()
    except ValueError as e:
        print(f"config error: {e}")
        return 2
    logging.basicConfig(level=settings.log_level_no, format="%(levelname)s %(name)s: %(message)s")

    if args.command == "amount":
        return _amount(args.text)
    if args.command == "date":
        return _date(args.text)
    return _format(args.text)

if __name__ == "__main__":
    raise SystemExit(main())
