from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from datetime import date
from typing import Any, Callable

from .config import Settings
from .fields import (
    Reject,
    describe,
    format_date,
    format_date_digits,
    insert_date_digit,
    parse_amount,
    parse_strict_date,
)
from .models import ConvertRequest, ConvertResponse, Currency, RateResponse, parse_currency
from .service import RateService
from .utils import add_months, first_day_of_month, is_future_date
from .validate import format_rate, format_result

logger = logging.getLogger(__name__)

PreviewCallback = Callable[[float | None], None]
StatusCallback = Callable[[str, str], None]  # (message, kind)

@dataclass(frozen=True)
class FormState:
    date_text: str
    selected_date: date | None
    view_month: date  # always the 1st of the month shown by the calendar
    amount_text: str = ""
    currency: Currency = Currency.USD
    date_cursor: int = 0

@dataclass(frozen=True)
class ConvertOutcome:
    ok: bool
    message: str
    response: ConvertResponse | None = None
    reason: Reject | None = None

class PreviewSlot:
    # begin() invalidates every earlier ticket; late responses are dropped

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._current = 0

    def begin(self) -> int:
        with self._lock:
            self._current += 1
            return self._current

    def invalidate(self) -> None:
        self.begin()

    def is_current(self, ticket: int) -> bool:
        with self._lock:
            return ticket == self._current

class Debouncer:
    """Trailing-edge debounce: only the last call within wait_s runs."""

    def __init__(self, wait_s: float, func: Callable[..., Any]):
        self.wait_s = wait_s
        self.func = func
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._pending: tuple[tuple[Any, ...], dict[str, Any]] | None = None
        self._generation = 0

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            self._pending = (args, kwargs)
            self._timer = threading.Timer(self.wait_s, self._fire, args=(self._generation,))
            self._timer.daemon = True
            self._timer.start()

    def _take(self, generation: int | None = None) -> tuple[tuple[Any, ...], dict[str, Any]] | None:
        with self._lock:
            if generation is not None and generation != self._generation:
                return None
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            pending, self._pending = self._pending, None
            return pending

    def _fire(self, generation: int) -> None:
        pending = self._take(generation)
        if pending is not None:
            args, kwargs = pending
            self.func(*args, **kwargs)

    def cancel(self) -> None:
        self._take()

    def flush(self) -> None:
        pending = self._take()
        if pending is not None:
            args, kwargs = pending
            self.func(*args, **kwargs)

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._pending is not None

class FormController:
    # state lives in FormState values passed in and returned

    def __init__(
        self,
        service: RateService,
        settings: Settings | None = None,
        on_preview: PreviewCallback | None = None,
        on_status: StatusCallback | None = None,
    ):
        self.service = service
        self.settings = settings or Settings()
        self.on_preview = on_preview
        self.on_status = on_status
        self.slot = PreviewSlot()
        self.debouncer = Debouncer(self.settings.debounce_s, self.refresh_preview)

    # ---------- observers ----------

    def _status(self, message: str, kind: str = "info") -> None:
        if self.on_status is not None:
            self.on_status(message, kind)

    def _preview(self, rate: float | None) -> None:
        if self.on_preview is not None:
            self.on_preview(rate)

    # ---------- state transitions ----------

    def initial_state(self, today: date | None = None) -> FormState:
        t = today or date.today()
        text = format_date(t)
        return FormState(
            date_text=text,
            selected_date=t,
            view_month=first_day_of_month(t),
            currency=self.settings.default_currency,
            date_cursor=len(text),
        )

    def type_date_char(self, state: FormState, char: str, cursor: int, today: date | None = None) -> FormState:
        out = insert_date_digit(state.date_text, char, cursor)
        if out is None:
            return state
        text, new_cursor = out
        return self._with_date_text(state, text, new_cursor, today)

    def edit_date_text(self, state: FormState, text: str, today: date | None = None) -> FormState:
        formatted = format_date_digits(text)
        return self._with_date_text(state, formatted, len(formatted), today)

    def _with_date_text(self, state: FormState, text: str, cursor: int, today: date | None = None) -> FormState:
        state = replace(state, date_text=text, date_cursor=cursor)
        parsed = parse_strict_date(text, today)
        if parsed.ok:
            state = replace(state, selected_date=parsed.date, view_month=first_day_of_month(parsed.date))
        return state

    def select_date(self, state: FormState, d: date, today: date | None = None) -> FormState:
        if is_future_date(d, today):
            return state
        text = format_date(d)
        return replace(
            state,
            date_text=text,
            date_cursor=len(text),
            selected_date=d,
            view_month=first_day_of_month(d),
        )

    def shift_view_month(self, state: FormState, months: int) -> FormState:
        return replace(state, view_month=first_day_of_month(add_months(state.view_month, months)))

    def set_currency(self, state: FormState, code: str) -> FormState:
        currency = parse_currency(code)
        if currency is None:
            self._status(f"Unsupported currency: {code}", "error")
            return state
        return replace(state, currency=currency)

    def set_amount_text(self, state: FormState, text: str) -> FormState:
        return replace(state, amount_text=text)

    def amount_error(self, state: FormState) -> Reject | None:
        if not state.amount_text.strip():
            return None
        return parse_amount(state.amount_text).reason

    # ---------- service calls ----------

    def schedule_preview(self, state: FormState, today: date | None = None) -> None:
        self.debouncer(state, today)

    def refresh_preview(self, state: FormState, today: date | None = None) -> RateResponse | None:
        # None when the date is unusable or a newer lookup superseded this one
        ticket = self.slot.begin()
        parsed = parse_strict_date(state.date_text, today)
        if not parsed.ok:
            self._preview(None)
            return None

        try:
            resp = self.service.get_rate(state.currency.value, state.date_text)
        except Exception as e:
            logger.warning("rate preview failed for %s %s: %s", state.currency.value, state.date_text, e)
            resp = RateResponse(success=False, error=str(e))

        if not self.slot.is_current(ticket):
            logger.debug("dropping stale rate preview for %s", state.date_text)
            return None

        if resp.success:
            logger.debug("rate %s %s: %s", state.currency.value, state.date_text, format_rate(resp.rate))
            self._preview(resp.rate)
        else:
            if resp.error:
                logger.warning("rate preview error: %s", resp.error)
            self._preview(None)
        return resp

    def convert(self, state: FormState, today: date | None = None) -> ConvertOutcome:
        amount = parse_amount(state.amount_text)
        if not amount.ok:
            msg = describe(Reject.MALFORMED_NUMBER) if amount.reason is Reject.EMPTY_INPUT else describe(amount.reason)
            self._status(msg, "error")
            return ConvertOutcome(ok=False, message=msg, reason=amount.reason)

        parsed = parse_strict_date(state.date_text, today)
        if not parsed.ok:
            msg = describe(parsed.reason)
            self._status(msg, "error")
            return ConvertOutcome(ok=False, message=msg, reason=parsed.reason)

        request = ConvertRequest(amount=amount.value, currency=state.currency.value, date=state.date_text)
        try:
            resp = self.service.convert(request)
        except Exception as e:
            logger.warning("convert failed for %s: %s", request, e)
            resp = ConvertResponse.failure(str(e) or "Conversion failed")

        if not resp.success:
            msg = resp.error or "Conversion failed"
            self._status(msg, "error")
            return ConvertOutcome(ok=False, message=msg, response=resp)

        message = resp.result or format_result(
            resp.source_amount or request.amount, resp.rate, state.currency.symbol, resp.target_amount
        )
        self._status("Conversion completed", "success")
        return ConvertOutcome(ok=True, message=message, response=resp)
