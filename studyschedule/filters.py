"""
Schedule filters.

Three selectors narrow the visible events and compose with AND:
- type        exact EventType, or ALL
- instructor  exact instructor name, or ALL
- query       case-insensitive substring of title, description, subject
              or instructor name (any one field); blank matches everything

Filtering never reorders events.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Union

from studyschedule.model import ALL, Event, InstructorSelector, Selector, TypeSelector


@dataclass(frozen=True)
class ScheduleFilter:
    type: TypeSelector = ALL
    instructor: InstructorSelector = ALL
    query: str = ""

    @property
    def is_empty(self) -> bool:
        return self.type is ALL and self.instructor is ALL and not self.query.strip()


def matches_type(event: Event, selected: TypeSelector) -> bool:
    if selected is ALL:
        return True
    return event.type == selected


def matches_instructor(event: Event, selected: InstructorSelector) -> bool:
    if selected is ALL:
        return True
    return event.instructor.name == selected


def matches_query(event: Event, query: str) -> bool:
    if not query.strip():
        return True
    q = query.lower()
    fields = (event.title, event.description, event.subject, event.instructor.name)
    return any(q in (field or "").lower() for field in fields)


def matches(event: Event, flt: ScheduleFilter) -> bool:
    return (
        matches_type(event, flt.type)
        and matches_instructor(event, flt.instructor)
        and matches_query(event, flt.query)
    )


def apply_filters(events: Iterable[Event], flt: ScheduleFilter) -> list[Event]:
    """
    Return the events that pass every selector of `flt`, in input order.
    """
    return [ev for ev in events if matches(ev, flt)]


def instructor_options(events: Iterable[Event]) -> list[Union[Selector, str]]:
    """
    Selectable instructor values: ALL first, then each distinct
    instructor name in first-seen order.
    """
    out: list[Union[Selector, str]] = [ALL]
    seen: set[str] = set()
    for ev in events:
        name = ev.instructor.name
        if name not in seen:
            seen.add(name)
            out.append(name)
    return out
