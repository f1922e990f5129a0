"""
Calendar-style grouping of events.

Events are bucketed by the ISO date (YYYY-MM-DD) of their start instant.
Within one day they are ordered by start time; events starting at the same
instant keep their input order. Events without a valid start time have no
date and are left out.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, tzinfo
from typing import Iterable, Optional

from studyschedule.model import Event, EventType


WEEKDAY_SHORT = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


@dataclass
class CalendarDay:
    day: date
    is_today: bool
    events: list[Event] = field(default_factory=list)

    @property
    def key(self) -> str:
        return self.day.isoformat()

    @property
    def day_name(self) -> str:
        return WEEKDAY_SHORT[self.day.weekday()]


def _local(dt: datetime, tz: Optional[tzinfo]) -> datetime:
    if tz is None or dt.tzinfo is None:
        return dt
    return dt.astimezone(tz)


def date_key(event: Event, tz: Optional[tzinfo] = None) -> Optional[str]:
    if event.start_time is None:
        return None
    return _local(event.start_time, tz).date().isoformat()


def group_by_date(events: Iterable[Event], tz: Optional[tzinfo] = None) -> dict[str, list[Event]]:
    """
    Map date key -> events of that day, keys in ascending date order.
    """
    by_date: dict[str, list[tuple[datetime, int, Event]]] = defaultdict(list)
    for i, ev in enumerate(events):
        key = date_key(ev, tz)
        if key is None:
            continue
        assert ev.start_time is not None
        by_date[key].append((_local(ev.start_time, tz), i, ev))

    out: dict[str, list[Event]] = {}
    for key in sorted(by_date):
        # (start, input index) keeps same-instant events stable
        try:
            entries = sorted(by_date[key], key=lambda x: (x[0], x[1]))
        except TypeError:
            # mixed naive / aware starts on one day: keep input order
            entries = by_date[key]
        out[key] = [ev for _, _, ev in entries]
    return out


def week_start(day: date) -> date:
    """
    First day (Sunday) of the week containing `day`.
    """
    # date.weekday(): Monday=0 .. Sunday=6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def week_days(
    start: date,
    by_date: dict[str, list[Event]],
    today: date,
    types: Optional[Iterable[EventType]] = None,
) -> list[CalendarDay]:
    """
    Seven CalendarDay records beginning at `start`.

    When `types` is given (and non-empty) only events of those types are kept.
    """
    wanted = set(types) if types else None
    days: list[CalendarDay] = []
    for i in range(7):
        d = start + timedelta(days=i)
        cal_day = CalendarDay(day=d, is_today=(d == today))
        evs = by_date.get(cal_day.key, [])
        if wanted is not None:
            evs = [ev for ev in evs if ev.type in wanted]
        cal_day.events = list(evs)
        days.append(cal_day)
    return days


def shift_week(start: date, direction: int) -> date:
    """
    Move a week start forward (direction > 0) or backward (direction < 0).
    """
    step = 7 if direction > 0 else -7
    return start + timedelta(days=step)


def format_time(dt: Optional[datetime], tz: Optional[tzinfo] = None) -> str:
    if dt is None:
        return "--:--"
    return _local(dt, tz).strftime("%H:%M")


def format_duration(start: Optional[datetime], end: Optional[datetime]) -> str:
    if start is None or end is None:
        return "? min"
    try:
        minutes = round((end - start).total_seconds() / 60)
    except TypeError:
        return "? min"
    return f"{minutes} min"
