from __future__ import annotations
from dataclasses import dataclass
import logging
import os

from .models import Currency, parse_currency

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

@dataclass(frozen=True)
class Settings:
    # Debounce for keystroke-driven rate lookups
    debounce_ms: int = 300
    default_currency: Currency = Currency.USD
    log_level: str = "WARNING"

    @property
    def debounce_s(self) -> float:
        return self.debounce_ms / 1000.0

    @property
    def log_level_no(self) -> int:
        return getattr(logging, self.log_level)

def load_settings() -> Settings:
    raw_debounce = os.getenv("CURRATE_DEBOUNCE_MS", "300").strip()
    try:
        debounce_ms = int(raw_debounce)
    except ValueError:
        raise ValueError(f"CURRATE_DEBOUNCE_MS must be an integer, got {raw_debounce!r}.") from None
    if debounce_ms < 0:
        raise ValueError("CURRATE_DEBOUNCE_MS must not be negative.")

    raw_currency = os.getenv("CURRATE_DEFAULT_CURRENCY", "USD")
    currency = parse_currency(raw_currency)
    if currency is None:
        raise ValueError(f"CURRATE_DEFAULT_CURRENCY must be one of USD, EUR, RUB, got {raw_currency!r}.")

    log_level = os.getenv("CURRATE_LOG_LEVEL", "WARNING").strip().upper()
    if log_level not in LOG_LEVELS:
        raise ValueError(f"CURRATE_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}.")

    return Settings(
        debounce_ms=debounce_ms,
        default_currency=currency,
        log_level=log_level,
    )
