from __future__ import annotations
from typing import Protocol

from .models import ConvertRequest, ConvertResponse, RateResponse

class RateService(Protocol):
    # dates are DD.MM.YYYY text already accepted by parse_strict_date

    def get_rate(self, currency: str, date_text: str) -> RateResponse: ...

    def convert(self, request: ConvertRequest) -> ConvertResponse: ...
