"""
Sample schedule used on first start (nothing stored yet) and by `reset`.

All times are relative to `now`, so a fresh sample always shows one live
lab and three upcoming sessions.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from studyschedule.model import Event, EventType, Instructor, color_for
from studyschedule.status import refresh_statuses


def sample_events(now: datetime) -> tuple[Event, ...]:
    events = (
        Event(
            event_id="1",
            title="Advanced Calculus: Derivatives and Applications",
            description="Deep dive into derivative applications in real-world scenarios",
            subject="Mathematics",
            type=EventType.LECTURE,
            start_time=now + timedelta(minutes=30),
            end_time=now + timedelta(minutes=90),
            instructor=Instructor("Dr. Sarah Johnson", "sarah.johnson@school.edu"),
            location="Room 301, Math Building",
            meet_link="https://meet.google.com/abc-defg-hij",
            materials=("Calculus Textbook Ch. 3", "Problem Set 5"),
            attendee_count=24,
            color=color_for(EventType.LECTURE),
        ),
        Event(
            event_id="2",
            title="Organic Chemistry Lab",
            description="Synthesis of aspirin and analysis of reaction mechanisms",
            subject="Chemistry",
            type=EventType.LAB,
            start_time=now - timedelta(minutes=30),
            end_time=now + timedelta(minutes=30),
            instructor=Instructor("Prof. Michael Chen", "michael.chen@school.edu"),
            location="Chemistry Lab 2",
            materials=("Lab Manual Ch. 8", "Safety Guidelines"),
            attendee_count=18,
            color=color_for(EventType.LAB),
        ),
        Event(
            event_id="3",
            title="Physics Seminar: Quantum Mechanics",
            description="Guest lecture on quantum entanglement and applications",
            subject="Physics",
            type=EventType.SEMINAR,
            start_time=now + timedelta(hours=2),
            end_time=now + timedelta(hours=3),
            instructor=Instructor("Dr. Emily Rodriguez", "emily.rodriguez@school.edu"),
            location="Auditorium A",
            meet_link="https://meet.google.com/pqr-stuv-wxy",
            materials=("Quantum Physics Notes", "Research Papers"),
            attendee_count=0,
            color=color_for(EventType.SEMINAR),
        ),
        Event(
            event_id="4",
            title="Biology Midterm Exam",
            description="Comprehensive exam covering cellular biology and genetics",
            subject="Biology",
            type=EventType.EXAM,
            start_time=now + timedelta(hours=24),
            end_time=now + timedelta(hours=26),
            instructor=Instructor("Dr. Amanda Foster", "amanda.foster@school.edu"),
            location="Exam Hall B",
            materials=("Study Guide", "Practice Exam"),
            attendee_count=45,
            color=color_for(EventType.EXAM),
        ),
    )
    return refresh_statuses(events, now)
