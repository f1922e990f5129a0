"""
Conflict detection.

Given a schedule, report events whose time windows overlap.
Overlap rule:
    start < other_end AND end > other_start

Conflicts are informational: overlapping events are still stored and shown.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from studyschedule.model import Event


def _overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    # Touching endpoints (a_end == b_start) are not an overlap
    return a_start < b_end and a_end > b_start


def find_conflicts(events: Iterable[Event]) -> list[tuple[Event, Event]]:
    """
    Find overlapping event pairs (A,B), each pair appears once (i<j).

    Events with a missing start/end, or with end <= start, are skipped.
    """
    conflicts: list[tuple[Event, Event]] = []

    parsed: list[tuple[datetime, datetime, Event]] = []
    for ev in events:
        start, end = ev.start_time, ev.end_time
        if start is None or end is None:
            continue
        try:
            if end <= start:
                continue
        except TypeError:
            continue
        parsed.append((start, end, ev))

    # O(n^2) is fine for a personal timetable
    for i in range(len(parsed)):
        s1, e1, ev1 = parsed[i]
        for j in range(i + 1, len(parsed)):
            s2, e2, ev2 = parsed[j]
            try:
                if _overlaps(s1, e1, s2, e2):
                    conflicts.append((ev1, ev2))
            except TypeError:
                continue

    return conflicts


def conflicting_ids(events: Iterable[Event]) -> set[str]:
    out: set[str] = set()
    for a, b in find_conflicts(events):
        out.add(a.event_id)
        out.add(b.event_id)
    return out
