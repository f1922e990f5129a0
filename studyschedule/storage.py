"""
Persistent storage for the schedule.

The schedule lives in a small local key-value store (one JSON object per
file) under the key "scheduleData":

    {
      "scheduleData": {
        "classes": [ {event}, ... ],
        "lastUpdated": "2026-10-19T08:00:00+00:00",
        "version": "1.0.0"
      }
    }

Timestamps are stored as ISO 8601 strings, so every load has to re-parse
them into datetimes before any status comparison. A value that does not
parse is kept as None (the event then counts as past) and logged.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone, tzinfo
from pathlib import Path
from typing import Any, Iterable, Optional

from studyschedule.errors import MalformedTimestampError
from studyschedule.logging import get_logger
from studyschedule.model import Event, EventType, Instructor, color_for, parse_event_type


logger = get_logger(__name__)

SCHEDULE_KEY = "scheduleData"
SCHEMA_VERSION = "1.0.0"


def default_store_path() -> Path:
    """
    Default location of the key-value file inside the package.

    A function instead of a constant so tests and config can override it.
    """
    base_dir = Path(__file__).resolve().parent
    return base_dir / "data" / "schedule_store.json"


# ---------------------------------------------------------------------------
# Key-value store
# ---------------------------------------------------------------------------


class KeyValueStore:
    """
    Minimal local key-value storage backed by one JSON file.

    Values are arbitrary JSON. A missing file is an empty store; a corrupted
    file is logged and treated as empty (the next write replaces it).
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else default_store_path()

    def _read_all(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error("store_unreadable", path=str(self.path), error=str(e))
            return {}
        if not isinstance(data, dict):
            logger.error("store_unreadable", path=str(self.path), error="top-level value is not an object")
            return {}
        return data

    def _write_all(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")

    def get_item(self, key: str) -> Any:
        return self._read_all().get(key)

    def set_item(self, key: str, value: Any) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove_item(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)

    def keys(self) -> list[str]:
        return sorted(self._read_all())


# ---------------------------------------------------------------------------
# Timestamps
# ---------------------------------------------------------------------------


def parse_timestamp(
    value: Any,
    default_tz: tzinfo = timezone.utc,
    strict: bool = False,
) -> Optional[datetime]:
    """
    Parse an ISO 8601 string into an aware datetime.

    Naive values are interpreted in `default_tz`. Invalid input returns None,
    or raises MalformedTimestampError when strict=True.
    """
    if isinstance(value, datetime):
        dt = value
    else:
        text = value.strip() if isinstance(value, str) else ""
        if text.endswith("Z") or text.endswith("z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            if strict:
                raise MalformedTimestampError(value) from None
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=default_tz)
    return dt


def format_timestamp(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    return dt.isoformat()


# ---------------------------------------------------------------------------
# Event <-> JSON
# ---------------------------------------------------------------------------


def event_to_dict(ev: Event) -> dict[str, Any]:
    out: dict[str, Any] = {
        "id": ev.event_id,
        "title": ev.title,
        "description": ev.description,
        "startTime": format_timestamp(ev.start_time),
        "endTime": format_timestamp(ev.end_time),
        "instructor": {"name": ev.instructor.name, "email": ev.instructor.email},
        "subject": ev.subject,
        "type": ev.type.value,
        "isLive": ev.is_live,
        "isUpcoming": ev.is_upcoming,
        "recordingAvailable": ev.recording_available,
        "materials": list(ev.materials),
        "color": ev.color,
    }
    if ev.location is not None:
        out["location"] = ev.location
    if ev.meet_link is not None:
        out["meetLink"] = ev.meet_link
    if ev.attendee_count is not None:
        out["attendeeCount"] = ev.attendee_count
    if ev.recording_url is not None:
        out["recordingUrl"] = ev.recording_url
    return out


def _opt_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def event_from_dict(data: Any) -> Optional[Event]:
    """
    Decode one stored event. Returns None for records that cannot be used
    (not an object, or missing id / title).
    """
    if not isinstance(data, dict):
        logger.warning("event_skipped", reason="not an object")
        return None

    event_id = _opt_str(data.get("id"))
    title = _opt_str(data.get("title"))
    if not event_id or not title:
        logger.warning("event_skipped", reason="missing id or title", event_id=event_id)
        return None

    raw_type = str(data.get("type") or "")
    try:
        ev_type = parse_event_type(raw_type)
    except ValueError:
        logger.warning("unknown_event_type", event_id=event_id, type=raw_type)
        ev_type = EventType.LECTURE

    times: dict[str, Optional[datetime]] = {}
    for key in ("startTime", "endTime"):
        raw = data.get(key)
        dt = parse_timestamp(raw)
        if dt is None:
            logger.warning("malformed_timestamp", event_id=event_id, field=key, value=raw)
        times[key] = dt

    instructor_raw = data.get("instructor")
    if not isinstance(instructor_raw, dict):
        instructor_raw = {}

    materials_raw = data.get("materials")
    materials = tuple(str(m) for m in materials_raw) if isinstance(materials_raw, list) else ()

    attendee_count = data.get("attendeeCount")
    if not isinstance(attendee_count, int) or isinstance(attendee_count, bool):
        attendee_count = None

    return Event(
        event_id=event_id,
        title=title,
        description=str(data.get("description") or ""),
        subject=str(data.get("subject") or ""),
        type=ev_type,
        start_time=times["startTime"],
        end_time=times["endTime"],
        instructor=Instructor(
            name=str(instructor_raw.get("name") or ""),
            email=str(instructor_raw.get("email") or ""),
        ),
        location=_opt_str(data.get("location")),
        meet_link=_opt_str(data.get("meetLink")),
        materials=materials,
        is_live=bool(data.get("isLive", False)),
        is_upcoming=bool(data.get("isUpcoming", False)),
        attendee_count=attendee_count,
        recording_available=bool(data.get("recordingAvailable", False)),
        recording_url=_opt_str(data.get("recordingUrl")),
        color=_opt_str(data.get("color")) or color_for(ev_type),
    )


# ---------------------------------------------------------------------------
# Schedule document
# ---------------------------------------------------------------------------


def encode_schedule(events: Iterable[Event], now: datetime) -> dict[str, Any]:
    return {
        "classes": [event_to_dict(ev) for ev in events],
        "lastUpdated": now.isoformat(),
        "version": SCHEMA_VERSION,
    }


def decode_schedule(document: Any) -> Optional[tuple[Event, ...]]:
    """
    Decode a schedule document. Returns None when it is not a schedule
    document at all; individual bad records are skipped.
    """
    if not isinstance(document, dict):
        return None
    classes = document.get("classes")
    if not isinstance(classes, list):
        return None

    version = document.get("version")
    if version != SCHEMA_VERSION:
        logger.warning("schema_version_mismatch", expected=SCHEMA_VERSION, found=version)

    out: list[Event] = []
    for raw in classes:
        ev = event_from_dict(raw)
        if ev is not None:
            out.append(ev)
    return tuple(out)


def load_schedule(store: KeyValueStore) -> Optional[tuple[Event, ...]]:
    """
    Load the stored schedule. Returns None when nothing usable is stored.
    """
    document = store.get_item(SCHEDULE_KEY)
    if document is None:
        return None
    events = decode_schedule(document)
    if events is None:
        logger.error("schedule_unreadable", path=str(store.path))
        return None
    logger.info("schedule_loaded", path=str(store.path), events=len(events))
    return events


def save_schedule(store: KeyValueStore, events: Iterable[Event], now: datetime) -> None:
    document = encode_schedule(events, now)
    store.set_item(SCHEDULE_KEY, document)
    logger.info("schedule_saved", path=str(store.path), events=len(document["classes"]))
