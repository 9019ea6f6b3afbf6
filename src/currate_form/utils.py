from __future__ import annotations
import calendar
from dataclasses import dataclass
from datetime import date

from dateutil.relativedelta import relativedelta

def _today(today: date | None) -> date:
    return today if today is not None else date.today()

def is_weekend(d: date) -> bool:
    return d.weekday() >= 5

def is_future_date(d: date, today: date | None = None) -> bool:
    # compared by calendar day, never by instant
    return d > _today(today)

def first_day_of_month(d: date) -> date:
    return d.replace(day=1)

def last_day_of_month(d: date) -> date:
    return d.replace(day=calendar.monthrange(d.year, d.month)[1])

def add_months(d: date, months: int) -> date:
    # 31.01 + 1 month -> 28/29.02 (clamped, no roll-over into March)
    return d + relativedelta(months=months)

@dataclass(frozen=True)
class CalendarDay:
    day: date
    weekend: bool
    today: bool
    future: bool
    selected: bool

def month_days(view_month: date, selected: date | None = None, today: date | None = None) -> list[CalendarDay]:
    # leading blank cells of a Monday-first grid: first_day_of_month(view_month).weekday()
    t = _today(today)
    first = first_day_of_month(view_month)
    last = last_day_of_month(view_month)
    out: list[CalendarDay] = []
    for n in range(1, last.day + 1):
        d = first.replace(day=n)
        out.append(CalendarDay(
            day=d,
            weekend=is_weekend(d),
            today=d == t,
            future=d > t,
            selected=d == selected,
        ))
    return out
