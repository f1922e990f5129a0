"""
Schedule controller.

Owns the event collection (an immutable tuple) and is the only place that
replaces it. Every change goes through the pure functions in
studyschedule.events / studyschedule.status and is saved right away.

The controller never reads the wall clock behind the caller's back: `clock`
is injected, and tick() accepts an explicit `now`.
"""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from typing import Callable, Iterable, Optional, Union

from studyschedule.calendar_view import group_by_date
from studyschedule.conflicts import find_conflicts
from studyschedule.events import find_event, remove_event, upsert_event
from studyschedule.filters import ScheduleFilter, apply_filters, instructor_options
from studyschedule.logging import get_logger
from studyschedule.model import Event, Selector
from studyschedule.sample import sample_events
from studyschedule.status import refresh_statuses, with_status
from studyschedule.storage import KeyValueStore, load_schedule, save_schedule


logger = get_logger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ScheduleController:
    def __init__(self, store: KeyValueStore, clock: Callable[[], datetime] = utc_now) -> None:
        self.store = store
        self.clock = clock
        self._events: tuple[Event, ...] = ()

    @property
    def events(self) -> tuple[Event, ...]:
        return self._events

    def load(self) -> tuple[Event, ...]:
        """
        Restore the stored schedule, or seed and save the sample schedule
        when nothing usable is stored.
        """
        now = self.clock()
        stored = load_schedule(self.store)
        if stored is None:
            logger.info("seeding_sample_schedule", path=str(self.store.path))
            self._events = sample_events(now)
            self._persist(now)
        else:
            self._events = refresh_statuses(stored, now)
        return self._events

    def _persist(self, now: datetime) -> None:
        save_schedule(self.store, self._events, now)

    def tick(self, now: Optional[datetime] = None) -> tuple[Event, ...]:
        """
        Recompute live / upcoming flags. Not persisted; the flags are derived.
        """
        now = now if now is not None else self.clock()
        self._events = refresh_statuses(self._events, now)
        return self._events

    # -- queries -----------------------------------------------------------

    def visible(self, flt: ScheduleFilter = ScheduleFilter()) -> list[Event]:
        return apply_filters(self._events, flt)

    def instructors(self) -> list[Union[Selector, str]]:
        return instructor_options(self._events)

    def calendar(self, flt: ScheduleFilter = ScheduleFilter(), tz: Optional[tzinfo] = None) -> dict[str, list[Event]]:
        return group_by_date(self.visible(flt), tz)

    def conflicts(self) -> list[tuple[Event, Event]]:
        return find_conflicts(self._events)

    def get(self, event_id: str) -> Optional[Event]:
        return find_event(self._events, event_id)

    # -- mutations ---------------------------------------------------------

    def save_event(self, event: Event) -> Event:
        """
        Add a new event or replace the one with the same id.
        """
        now = self.clock()
        event = with_status(event, now)
        existed = self.get(event.event_id) is not None
        self._events = upsert_event(self._events, event)
        self._persist(now)
        logger.info("event_saved", event_id=event.event_id, updated=existed)
        return event

    def delete_event(self, event_id: str) -> None:
        now = self.clock()
        self._events = remove_event(self._events, event_id)
        self._persist(now)
        logger.info("event_deleted", event_id=event_id)

    def replace_all(self, events: Iterable[Event]) -> tuple[Event, ...]:
        now = self.clock()
        self._events = refresh_statuses(events, now)
        self._persist(now)
        logger.info("schedule_replaced", events=len(self._events))
        return self._events

    def reset(self) -> tuple[Event, ...]:
        now = self.clock()
        self._events = sample_events(now)
        self._persist(now)
        logger.info("schedule_reset", events=len(self._events))
        return self._events
