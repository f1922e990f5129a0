"""
Schedule export / import as JSON.

The exported file is the same schedule document that is kept in local
storage ({"classes": [...], "lastUpdated": ..., "version": ...}), so an
export can be imported again on another device.

Import sources are local file paths or http(s) URLs.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable

import requests

from studyschedule.errors import ScheduleImportError
from studyschedule.logging import get_logger
from studyschedule.model import Event
from studyschedule.storage import decode_schedule, encode_schedule


logger = get_logger(__name__)

REQUEST_TIMEOUT = 30


def export_filename(now: datetime) -> str:
    return f"schedule-{now.date().isoformat()}.json"


def export_json(events: Iterable[Event], now: datetime) -> str:
    return json.dumps(encode_schedule(events, now), indent=2, ensure_ascii=False)


def write_export(events: Iterable[Event], out_path: str | Path, now: datetime) -> int:
    """
    Write the JSON export to `out_path`. Returns number of exported events.
    """
    events = list(events)
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(export_json(events, now), encoding="utf-8")
    logger.info("schedule_exported", path=str(out), events=len(events))
    return len(events)


def _is_url(source: str) -> bool:
    return source.startswith("http://") or source.startswith("https://")


def _read_source(source: str) -> Any:
    if _is_url(source):
        try:
            resp = requests.get(source, timeout=REQUEST_TIMEOUT)
            resp.raise_for_status()
            return resp.json()
        except requests.RequestException as e:
            raise ScheduleImportError(f"Could not fetch {source}: {e}") from e
        except ValueError as e:
            raise ScheduleImportError(f"Not valid JSON: {source}") from e

    path = Path(source)
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ScheduleImportError(f"File not found: {source}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ScheduleImportError(f"Could not read {source}: {e}") from e
    except json.JSONDecodeError as e:
        raise ScheduleImportError(f"Not valid JSON: {source}") from e


def import_json(source: str) -> tuple[Event, ...]:
    """
    Read a schedule document from a file path or URL and decode its events.
    """
    document = _read_source(source.strip())
    events = decode_schedule(document)
    if events is None:
        raise ScheduleImportError(f"Not a schedule document: {source}")
    logger.info("schedule_imported", source=source, events=len(events))
    return events
