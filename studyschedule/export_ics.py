"""
iCalendar (.ics) export.

We convert schedule events into a calendar file that can be imported into:
- Google Calendar
- Outlook
- Apple Calendar
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional


from studyschedule.model import Event


def _ics_escape(text: str) -> str:
    """
    Escape text for ICS fields (very small subset, sufficient for our use).
    """
    return (
        text.replace("\\", "\\\\").replace("\r\n", "\\n").replace("\n", "\\n").replace(";", "\\;").replace(",", "\\,")
    )


def _dt_utc(dt: datetime) -> str:
    """
    Convert an aware datetime to ICS UTC form 'YYYYMMDDTHHMMSSZ'.
    """
    return dt.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def _description(ev: Event) -> Optional[str]:
    parts: list[str] = []
    if ev.description:
        parts.append(ev.description)
    if ev.instructor.name:
        parts.append(f"Instructor: {ev.instructor.name}")
    if ev.materials:
        parts.append("Materials: " + "; ".join(ev.materials))
    if ev.meet_link:
        parts.append(f"Meeting: {ev.meet_link}")
    return "\n".join(parts) if parts else None


def export_events_to_ics(events: Iterable[Event], out_path: str | Path) -> int:
    """
    Export events to an .ics file. Returns number of exported events.

    Events without a usable start/end are skipped.
    """
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    lines: list[str] = []
    lines.append("BEGIN:VCALENDAR")
    lines.append("VERSION:2.0")
    lines.append("PRODID:-//StudySchedule//EN")
    lines.append("CALSCALE:GREGORIAN")

    dtstamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")

    count = 0
    for ev in events:
        if ev.start_time is None or ev.end_time is None:
            continue
        try:
            dtstart = _dt_utc(ev.start_time)
            dtend = _dt_utc(ev.end_time)
        except (ValueError, OverflowError):
            continue

        summary = f"{ev.title} ({ev.type.value})" if ev.title else "StudySchedule Event"

        lines.append("BEGIN:VEVENT")
        lines.append(f"UID:{_ics_escape(ev.event_id)}@studyschedule")
        lines.append(f"DTSTAMP:{dtstamp}")
        lines.append(f"DTSTART:{dtstart}")
        lines.append(f"DTEND:{dtend}")
        lines.append(f"SUMMARY:{_ics_escape(summary)}")
        if ev.subject:
            lines.append(f"CATEGORIES:{_ics_escape(ev.subject)}")
        if ev.location:
            lines.append(f"LOCATION:{_ics_escape(ev.location)}")
        desc = _description(ev)
        if desc:
            lines.append(f"DESCRIPTION:{_ics_escape(desc)}")
        if ev.meet_link:
            lines.append(f"URL:{ev.meet_link}")
        lines.append("END:VEVENT")
        count += 1

    lines.append("END:VCALENDAR")

    # ICS standard uses CRLF
    out.write_text("\r\n".join(lines) + "\r\n", encoding="utf-8")
    return count
