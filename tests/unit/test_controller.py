"""Tests for the form controller: state transitions, preview slot, conversion gate."""

import threading
from datetime import date

import pytest

from currate_form.config import Settings
from currate_form.controller import Debouncer, FormController, FormState, PreviewSlot
from currate_form.fields import Reject
from currate_form.models import ConvertRequest, ConvertResponse, Currency, RateResponse

TODAY = date(2024, 6, 15)


class FakeService:
    def __init__(self, rate: float = 80.5) -> None:
        self.rate = rate
        self.rate_calls: list[tuple[str, str]] = []
        self.convert_calls: list[ConvertRequest] = []
        self.fail_with: Exception | None = None
        self.during_get_rate = None
        self.result_text: str | None = None

    def get_rate(self, currency: str, date_text: str) -> RateResponse:
        self.rate_calls.append((currency, date_text))
        if self.fail_with is not None:
            raise self.fail_with
        if self.during_get_rate is not None:
            hook, self.during_get_rate = self.during_get_rate, None
            hook()
        return RateResponse(success=True, rate=self.rate)

    def convert(self, request: ConvertRequest) -> ConvertResponse:
        self.convert_calls.append(request)
        if self.fail_with is not None:
            raise self.fail_with
        target = request.amount * self.rate
        return ConvertResponse(
            success=True,
            result=f"{target:.2f}" if self.result_text is None else self.result_text,
            source_amount=request.amount,
            target_amount=target,
            rate=self.rate,
            currency=request.currency,
        )


@pytest.fixture
def service() -> FakeService:
    return FakeService()


@pytest.fixture
def events() -> dict[str, list]:
    return {"preview": [], "status": []}


@pytest.fixture
def controller(service: FakeService, events: dict[str, list]) -> FormController:
    return FormController(
        service,
        Settings(debounce_ms=10),
        on_preview=events["preview"].append,
        on_status=lambda msg, kind: events["status"].append((msg, kind)),
    )


@pytest.fixture
def state(controller: FormController) -> FormState:
    return controller.initial_state(TODAY)


class TestStateTransitions:
    def test_initial_state(self, state: FormState) -> None:
        assert state.date_text == "15.06.2024"
        assert state.selected_date == TODAY
        assert state.view_month == date(2024, 6, 1)
        assert state.currency is Currency.USD
        assert state.date_cursor == 10

    def test_default_currency_from_settings(self, service: FakeService) -> None:
        c = FormController(service, Settings(default_currency=Currency.EUR))
        assert c.initial_state(TODAY).currency is Currency.EUR

    def test_typing_updates_selection_when_complete(self, controller: FormController, state: FormState) -> None:
        s = controller.edit_date_text(state, "", today=TODAY)
        assert s.date_text == ""
        assert s.selected_date == TODAY  # previous selection kept until the text parses

        for ch in "01032024":
            s = controller.type_date_char(s, ch, s.date_cursor)
        assert s.date_text == "01.03.2024"
        assert s.selected_date == date(2024, 3, 1)
        assert s.view_month == date(2024, 3, 1)

    def test_typed_selection_uses_given_today(self, controller: FormController, state: FormState) -> None:
        s = controller.edit_date_text(state, "16.06.202", today=TODAY)
        s = controller.type_date_char(s, "4", s.date_cursor, today=TODAY)
        assert s.date_text == "16.06.2024"
        assert s.selected_date == TODAY  # a future day never becomes the selection

        s = controller.edit_date_text(s, "16.06.202", today=TODAY)
        s = controller.type_date_char(s, "4", s.date_cursor, today=date(2024, 6, 16))
        assert s.selected_date == date(2024, 6, 16)

    def test_two_digit_year_paste_not_selected(self, controller: FormController, state: FormState, service: FakeService) -> None:
        s = controller.edit_date_text(state, "01.01.0050", today=TODAY)
        assert s.date_text == "01.01.0050"
        assert s.selected_date == TODAY
        out = controller.convert(controller.set_amount_text(s, "10"), today=TODAY)
        assert out.reason is Reject.INVALID_CALENDAR_DATE
        assert service.convert_calls == []

    def test_invalid_keystroke_keeps_state(self, controller: FormController) -> None:
        s = controller.edit_date_text(controller.initial_state(TODAY), "3", today=TODAY)
        assert controller.type_date_char(s, "5", 1) is s
        assert controller.type_date_char(s, "x", 1) is s

    def test_paste_is_reformatted(self, controller: FormController, state: FormState) -> None:
        s = controller.edit_date_text(state, "1/2/2020 and more 99", today=TODAY)
        assert s.date_text == "12.20.2099"
        assert s.selected_date == TODAY

    def test_select_date(self, controller: FormController, state: FormState) -> None:
        s = controller.select_date(state, date(2023, 12, 31), today=TODAY)
        assert s.date_text == "31.12.2023"
        assert s.view_month == date(2023, 12, 1)

    def test_select_future_date_ignored(self, controller: FormController, state: FormState) -> None:
        assert controller.select_date(state, date(2024, 6, 16), today=TODAY) is state

    def test_shift_view_month(self, controller: FormController, state: FormState) -> None:
        s = controller.shift_view_month(state, -6)
        assert s.view_month == date(2023, 12, 1)
        assert s.selected_date == TODAY
        assert controller.shift_view_month(s, 1).view_month == date(2024, 1, 1)

    def test_set_currency(self, controller: FormController, state: FormState, events: dict[str, list]) -> None:
        assert controller.set_currency(state, "eur").currency is Currency.EUR
        assert controller.set_currency(state, "GBP") is state
        assert events["status"][-1][1] == "error"

    def test_amount_error(self, controller: FormController, state: FormState) -> None:
        assert controller.amount_error(state) is None
        assert controller.amount_error(controller.set_amount_text(state, "1,5")) is None
        assert controller.amount_error(controller.set_amount_text(state, "abc")) is Reject.MALFORMED_NUMBER
        assert controller.amount_error(controller.set_amount_text(state, "0")) is Reject.NON_POSITIVE_AMOUNT


class TestPreview:
    def test_delivers_rate(self, controller: FormController, state: FormState, service: FakeService, events: dict[str, list]) -> None:
        resp = controller.refresh_preview(state, today=TODAY)
        assert resp is not None and resp.success
        assert service.rate_calls == [("USD", "15.06.2024")]
        assert events["preview"] == [80.5]

    def test_invalid_date_skips_lookup(self, controller: FormController, state: FormState, service: FakeService, events: dict[str, list]) -> None:
        s = controller.edit_date_text(state, "30.02.2024", today=TODAY)
        assert controller.refresh_preview(s, today=TODAY) is None
        assert service.rate_calls == []
        assert events["preview"] == [None]

    def test_service_exception_is_logged_not_raised(
        self, controller: FormController, state: FormState, service: FakeService, events: dict[str, list], caplog: pytest.LogCaptureFixture
    ) -> None:
        service.fail_with = RuntimeError("backend down")
        resp = controller.refresh_preview(state, today=TODAY)
        assert resp is not None and not resp.success
        assert events["preview"] == [None]
        assert "backend down" in caplog.text

    def test_stale_response_dropped(self, controller: FormController, state: FormState, service: FakeService, events: dict[str, list]) -> None:
        newer = controller.select_date(state, date(2024, 1, 10), today=TODAY)
        # a second lookup starts while the first one is still in flight
        service.during_get_rate = lambda: controller.refresh_preview(newer, today=TODAY)
        assert controller.refresh_preview(state, today=TODAY) is None
        assert service.rate_calls == [("USD", "15.06.2024"), ("USD", "10.01.2024")]
        assert events["preview"] == [80.5]

    def test_schedule_preview_is_debounced(self, controller: FormController, state: FormState, service: FakeService) -> None:
        done = threading.Event()
        controller.on_preview = lambda rate: done.set()
        controller.schedule_preview(controller.edit_date_text(state, "01.01.2024", today=TODAY), TODAY)
        controller.schedule_preview(state, TODAY)
        assert done.wait(2.0)
        assert service.rate_calls == [("USD", "15.06.2024")]


class TestConvert:
    def test_success(self, controller: FormController, state: FormState, service: FakeService, events: dict[str, list]) -> None:
        s = controller.set_amount_text(state, "1 000,50")
        out = controller.convert(s, today=TODAY)
        assert out.ok
        assert out.response.target_amount == pytest.approx(1000.5 * 80.5)
        assert service.convert_calls == [ConvertRequest(amount=1000.5, currency="USD", date="15.06.2024")]
        assert events["status"][-1] == ("Conversion completed", "success")

    def test_message_built_when_backend_sends_no_text(self, controller: FormController, state: FormState, service: FakeService) -> None:
        service.result_text = ""
        service.rate = 80.722
        out = controller.convert(controller.set_amount_text(state, "1000"), today=TODAY)
        assert out.ok
        assert out.message == "80 722,00 RUB ($1 000,00 at 80,7220)"

    def test_backend_text_preferred(self, controller: FormController, state: FormState, service: FakeService) -> None:
        service.result_text = "custom"
        assert controller.convert(controller.set_amount_text(state, "1"), today=TODAY).message == "custom"

    def test_bad_amount_blocks_call(self, controller: FormController, state: FormState, service: FakeService) -> None:
        out = controller.convert(controller.set_amount_text(state, "-3"), today=TODAY)
        assert not out.ok
        assert out.reason is Reject.NON_POSITIVE_AMOUNT
        assert service.convert_calls == []

    def test_empty_amount(self, controller: FormController, state: FormState) -> None:
        out = controller.convert(state, today=TODAY)
        assert out.reason is Reject.EMPTY_INPUT

    def test_future_date_blocks_call(self, controller: FormController, state: FormState, service: FakeService) -> None:
        s = controller.set_amount_text(controller.edit_date_text(state, "16.06.2024", today=TODAY), "10")
        out = controller.convert(s, today=TODAY)
        assert out.reason is Reject.FUTURE_DATE
        assert service.convert_calls == []

    def test_service_failure_reported(self, controller: FormController, state: FormState, service: FakeService, events: dict[str, list]) -> None:
        service.fail_with = RuntimeError("timeout")
        out = controller.convert(controller.set_amount_text(state, "10"), today=TODAY)
        assert not out.ok
        assert out.message == "timeout"
        assert events["status"][-1] == ("timeout", "error")


class TestPreviewSlot:
    def test_only_latest_ticket_is_current(self) -> None:
        slot = PreviewSlot()
        first = slot.begin()
        second = slot.begin()
        assert not slot.is_current(first)
        assert slot.is_current(second)
        slot.invalidate()
        assert not slot.is_current(second)


class TestDebouncer:
    def test_last_call_wins(self) -> None:
        calls = []
        done = threading.Event()

        def func(x: int) -> None:
            calls.append(x)
            done.set()

        d = Debouncer(0.05, func)
        for i in range(5):
            d(i)
        assert done.wait(2.0)
        assert calls == [4]
        assert not d.pending

    def test_flush_runs_now(self) -> None:
        calls = []
        d = Debouncer(10.0, calls.append)
        d("a")
        d.flush()
        assert calls == ["a"]
        d.flush()
        assert calls == ["a"]

    def test_cancel(self) -> None:
        calls = []
        d = Debouncer(10.0, calls.append)
        d("a")
        d.cancel()
        assert not d.pending
        d.flush()
        assert calls == []
