"""
Pure operations on an event collection.

Every function returns a new tuple; the collection passed in is never
modified. The controller routes all edits through these functions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Sequence

from studyschedule.errors import EventNotFoundError, EventValidationError
from studyschedule.model import Event, EventType, Instructor, color_for
from studyschedule.status import with_status


def _clean(text: Optional[str]) -> str:
    return "" if text is None else str(text).strip()


def _optional(text: Optional[str]) -> Optional[str]:
    value = _clean(text)
    return value or None


def new_event_id(now: datetime) -> str:
    """
    Millisecond epoch timestamp as string, unique enough for hand-entered events.
    """
    return str(int(now.timestamp() * 1000))


def build_event(
    *,
    now: datetime,
    title: str,
    instructor_name: str,
    start_time: datetime,
    end_time: datetime,
    type: EventType = EventType.LECTURE,
    description: str = "",
    subject: str = "",
    instructor_email: str = "",
    location: Optional[str] = None,
    meet_link: Optional[str] = None,
    materials: Sequence[str] = (),
    event_id: Optional[str] = None,
) -> Event:
    """
    Build an event from form input.

    Title and instructor name are required. The colour follows the type and
    the status flags are computed against `now`.
    """
    if not _clean(title) or not _clean(instructor_name):
        raise EventValidationError("Please fill in all required fields")

    event = Event(
        event_id=_clean(event_id) or new_event_id(now),
        title=_clean(title),
        description=_clean(description),
        subject=_clean(subject),
        type=type,
        start_time=start_time,
        end_time=end_time,
        instructor=Instructor(name=_clean(instructor_name), email=_clean(instructor_email)),
        location=_optional(location),
        meet_link=_optional(meet_link),
        materials=tuple(m.strip() for m in materials if m and m.strip()),
        color=color_for(type),
    )
    return with_status(event, now)


def find_event(events: Iterable[Event], event_id: str) -> Optional[Event]:
    for ev in events:
        if ev.event_id == event_id:
            return ev
    return None


def upsert_event(events: Iterable[Event], event: Event) -> tuple[Event, ...]:
    """
    Replace the event with the same id (keeping its position) or append it.
    """
    out: list[Event] = []
    replaced = False
    for ev in events:
        if ev.event_id == event.event_id:
            out.append(event)
            replaced = True
        else:
            out.append(ev)
    if not replaced:
        out.append(event)
    return tuple(out)


def remove_event(events: Iterable[Event], event_id: str) -> tuple[Event, ...]:
    current = tuple(events)
    out = tuple(ev for ev in current if ev.event_id != event_id)
    if len(out) == len(current):
        raise EventNotFoundError(event_id)
    return out
