"""
Central data model definitions used across the project.

This module defines the canonical structure of Event objects so that:
- all modules share the same field names
- the storage, engine and UI layers agree on types
- "enum-like" strings (event type, the "all" filter choice) are closed types
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple, Union


class EventType(str, Enum):
    LECTURE = "lecture"
    LAB = "lab"
    SEMINAR = "seminar"
    EXAM = "exam"
    ASSIGNMENT = "assignment"


class Selector(str, Enum):
    """
    Sentinel for "no restriction" in a filter selector.

    Compared by identity, so an instructor who is literally called "all"
    is still filterable by name.
    """

    ALL = "all"


ALL = Selector.ALL

TypeSelector = Union[EventType, Selector]
InstructorSelector = Union[str, Selector]


TYPE_COLORS: dict[EventType, str] = {
    EventType.LECTURE: "#2563EB",
    EventType.LAB: "#059669",
    EventType.SEMINAR: "#EA580C",
    EventType.EXAM: "#EF4444",
    EventType.ASSIGNMENT: "#7C3AED",
}


def color_for(event_type: EventType) -> str:
    return TYPE_COLORS[event_type]


@dataclass(frozen=True)
class Instructor:
    name: str
    email: str = ""


@dataclass(frozen=True)
class Event:
    """
    Represents one scheduled class / session.

    start_time and end_time are timezone-aware. Either may be None when the
    stored value could not be parsed; such an event always counts as past.

    is_live / is_upcoming are derived from (start_time, end_time, now) and
    only change through status.refresh_statuses().
    """

    event_id: str
    title: str
    description: str
    subject: str
    type: EventType
    start_time: Optional[datetime]
    end_time: Optional[datetime]
    instructor: Instructor
    location: Optional[str] = None
    meet_link: Optional[str] = None
    materials: Tuple[str, ...] = ()
    is_live: bool = False
    is_upcoming: bool = False
    attendee_count: Optional[int] = None
    recording_available: bool = False
    recording_url: Optional[str] = None
    color: str = TYPE_COLORS[EventType.LECTURE]


def parse_event_type(value: str) -> EventType:
    """
    Convert a user / storage string into an EventType.
    Raises ValueError for unknown types.
    """
    return EventType(value.strip().lower())


def parse_type_selector(value: str) -> TypeSelector:
    text = value.strip().lower()
    if text == ALL.value:
        return ALL
    return parse_event_type(text)
