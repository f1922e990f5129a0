"""
Live / upcoming / past classification.

Rules (both bounds inclusive):
    live      start <= now <= end
    upcoming  now < start
    past      anything else

A missing (unparsable) timestamp or an instant that cannot be compared with
"now" (naive vs aware) never raises: the event is simply past.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from enum import Enum
from typing import Iterable, Optional

from studyschedule.model import Event


class EventStatus(str, Enum):
    LIVE = "live"
    UPCOMING = "upcoming"
    PAST = "past"


def _before(a: Optional[datetime], b: Optional[datetime]) -> bool:
    """a < b, False when either side is missing or incomparable."""
    if a is None or b is None:
        return False
    try:
        return a < b
    except TypeError:
        return False


def _not_after(a: Optional[datetime], b: Optional[datetime]) -> bool:
    """a <= b, False when either side is missing or incomparable."""
    if a is None or b is None:
        return False
    try:
        return a <= b
    except TypeError:
        return False


def is_live(event: Event, now: datetime) -> bool:
    return _not_after(event.start_time, now) and _not_after(now, event.end_time)


def is_upcoming(event: Event, now: datetime) -> bool:
    return _before(now, event.start_time)


def classify(event: Event, now: datetime) -> EventStatus:
    if is_live(event, now):
        return EventStatus.LIVE
    if is_upcoming(event, now):
        return EventStatus.UPCOMING
    return EventStatus.PAST


def with_status(event: Event, now: datetime) -> Event:
    live = is_live(event, now)
    upcoming = is_upcoming(event, now)
    if event.is_live == live and event.is_upcoming == upcoming:
        return event
    return replace(event, is_live=live, is_upcoming=upcoming)


def refresh_statuses(events: Iterable[Event], now: datetime) -> tuple[Event, ...]:
    """
    Recompute is_live / is_upcoming for every event against `now`.

    Returns a new tuple in the same order; the input is never modified.
    This is the periodic "tick" of the schedule view.
    """
    return tuple(with_status(ev, now) for ev in events)


def count_by_status(events: Iterable[Event], now: datetime) -> dict[EventStatus, int]:
    counts = {status: 0 for status in EventStatus}
    for ev in events:
        counts[classify(ev, now)] += 1
    return counts
