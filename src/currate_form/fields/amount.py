from __future__ import annotations
import logging
import math

from .base import AmountResult, Reject
from ..validate import is_plain_number, normalize_separators, strip_whitespace

logger = logging.getLogger(__name__)

def parse_amount(text: str) -> AmountResult:
    """Parse "1 000", "1.234,56" or "1,5"; rejections are returned, not raised."""
    cleaned = strip_whitespace(text or "")
    if not cleaned:
        return AmountResult.reject(Reject.EMPTY_INPUT)

    normalized = normalize_separators(cleaned)
    if not is_plain_number(normalized):
        logger.debug("amount %r normalized to %r: not a number", text, normalized)
        return AmountResult.reject(Reject.MALFORMED_NUMBER)

    value = float(normalized)
    if not math.isfinite(value):
        return AmountResult.reject(Reject.MALFORMED_NUMBER)
    if value <= 0:
        return AmountResult.reject(Reject.NON_POSITIVE_AMOUNT)
    return AmountResult.accept(value)
