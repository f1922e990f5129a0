"""
CLI (Command Line Interface).

This module provides quick terminal commands, e.g.:

    studyschedule list --type exam
    studyschedule list --instructor "Dr. Sarah Johnson" --search calc
    studyschedule list --calendar
    studyschedule instructors
    studyschedule add --title "Linear Algebra" --instructor "Dr. Kim" --start 2026-10-20T10:00 --end 2026-10-20T11:30
    studyschedule edit <event_id> --location "Room 12"
    studyschedule delete <event_id>
    studyschedule conflicts
    studyschedule export <file.json|file.ics>
    studyschedule import <file.json|url>
    studyschedule reset
    studyschedule interactive
    studyschedule watch

Global options --config, --data and --now (simulated clock) come before the
command. Output is plain text; the rich UI lives in studyschedule/interactive.py.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from datetime import datetime, tzinfo
from pathlib import Path
from typing import Callable, Optional

from studyschedule.calendar_view import format_duration, format_time
from studyschedule.config import AppConfig, load_config
from studyschedule.controller import ScheduleController, utc_now
from studyschedule.errors import EventNotFoundError, ScheduleError
from studyschedule.events import build_event
from studyschedule.export_ics import export_events_to_ics
from studyschedule.filters import ScheduleFilter
from studyschedule.logging import setup_logging
from studyschedule.model import ALL, Event, EventType, InstructorSelector, parse_event_type, parse_type_selector
from studyschedule.status import EventStatus, classify
from studyschedule.storage import KeyValueStore, parse_timestamp
from studyschedule.transfer import import_json, write_export


def _parse_time(value: str, tz: tzinfo) -> datetime:
    """
    Parse a user-entered ISO timestamp; naive values are in the configured timezone.
    """
    dt = parse_timestamp(value, default_tz=tz, strict=True)
    assert dt is not None
    return dt


def _status_tag(status: EventStatus) -> str:
    return {EventStatus.LIVE: "[LIVE]", EventStatus.UPCOMING: "[NEXT]", EventStatus.PAST: "[PAST]"}[status]


def _event_line(ev: Event, now: datetime, tz: tzinfo) -> str:
    when = "(invalid time)"
    if ev.start_time is not None:
        day = ev.start_time.astimezone(tz).date().isoformat()
        when = f"{day} {format_time(ev.start_time, tz)}-{format_time(ev.end_time, tz)}"
    bits = [_status_tag(classify(ev, now)), when, ev.event_id, ev.title, f"({ev.type.value})"]
    if ev.instructor.name:
        bits.append(ev.instructor.name)
    if ev.location:
        bits.append(f"@ {ev.location}")
    return " | ".join(bits)


def _filter_from_args(args: argparse.Namespace, ctl: ScheduleController) -> ScheduleFilter:
    name = (args.instructor or "").strip()
    names = {ev.instructor.name for ev in ctl.events}
    # "all" is the catch-all unless someone is actually called that
    instructor: InstructorSelector = ALL
    if name and (name in names or name.lower() != ALL.value):
        instructor = name
    return ScheduleFilter(
        type=parse_type_selector(args.type or "all"),
        instructor=instructor,
        query=args.search or "",
    )


def _cmd_list(args: argparse.Namespace, ctl: ScheduleController, now: datetime, tz: tzinfo) -> int:
    """
    Print events passing the filters, as a list or grouped by day.
    """
    try:
        flt = _filter_from_args(args, ctl)
    except ValueError:
        print(f"Unknown event type: {args.type}")
        return 1

    if args.calendar:
        by_date = ctl.calendar(flt, tz)
        if not by_date:
            print("No events.")
            return 0
        for day, evs in by_date.items():
            print(f"\n{day}")
            for ev in evs:
                duration = format_duration(ev.start_time, ev.end_time)
                print(f"  - {_event_line(ev, now, tz)} | {duration}")
        return 0

    events = ctl.visible(flt)
    if not events:
        print("No events.")
        return 0
    for ev in events:
        print(_event_line(ev, now, tz))
    return 0


def _cmd_instructors(args: argparse.Namespace, ctl: ScheduleController) -> int:
    for option in ctl.instructors():
        print("(all)" if option is ALL else option)
    return 0


def _cmd_add(args: argparse.Namespace, ctl: ScheduleController, now: datetime, tz: tzinfo) -> int:
    """
    Add a new event from command-line fields.
    """
    if not args.start or not args.end:
        print("Please provide --start and --end.")
        return 1

    event = build_event(
        now=now,
        title=args.title or "",
        instructor_name=args.instructor or "",
        instructor_email=args.email or "",
        start_time=_parse_time(args.start, tz),
        end_time=_parse_time(args.end, tz),
        type=parse_event_type(args.type or "lecture"),
        description=args.description or "",
        subject=args.subject or "",
        location=args.location,
        meet_link=args.meet_link,
        materials=args.material or [],
        event_id=args.id,
    )
    saved = ctl.save_event(event)
    print(f"Added: {saved.event_id} {saved.title}")
    return 0


def _cmd_edit(args: argparse.Namespace, ctl: ScheduleController, now: datetime, tz: tzinfo) -> int:
    """
    Replace an existing event with a copy carrying the given fields.
    """
    current = ctl.get(args.event_id)
    if current is None:
        raise EventNotFoundError(args.event_id)

    ev_type = parse_event_type(args.type) if args.type else current.type
    event = build_event(
        now=now,
        event_id=current.event_id,
        title=args.title if args.title is not None else current.title,
        instructor_name=args.instructor if args.instructor is not None else current.instructor.name,
        instructor_email=args.email if args.email is not None else current.instructor.email,
        start_time=_parse_time(args.start, tz) if args.start else current.start_time,
        end_time=_parse_time(args.end, tz) if args.end else current.end_time,
        type=ev_type,
        description=args.description if args.description is not None else current.description,
        subject=args.subject if args.subject is not None else current.subject,
        location=args.location if args.location is not None else current.location,
        meet_link=args.meet_link if args.meet_link is not None else current.meet_link,
        materials=args.material if args.material is not None else current.materials,
    )
    # fields the form does not edit survive the replacement
    event = replace(
        event,
        attendee_count=current.attendee_count,
        recording_available=current.recording_available,
        recording_url=current.recording_url,
    )
    ctl.save_event(event)
    print(f"Updated: {event.event_id} {event.title}")
    return 0


def _cmd_delete(args: argparse.Namespace, ctl: ScheduleController) -> int:
    ctl.delete_event(args.event_id)
    print(f"Deleted: {args.event_id} (events: {len(ctl.events)})")
    return 0


def _cmd_conflicts(args: argparse.Namespace, ctl: ScheduleController, tz: tzinfo) -> int:
    """
    Print all overlapping event pairs.
    """
    confs = ctl.conflicts()
    if not confs:
        print("No conflicts found.")
        return 0

    print(f"Conflicts found: {len(confs)}")
    for a, b in confs:
        a_when = f"{format_time(a.start_time, tz)}-{format_time(a.end_time, tz)}"
        b_when = f"{format_time(b.start_time, tz)}-{format_time(b.end_time, tz)}"
        day = a.start_time.astimezone(tz).date().isoformat() if a.start_time else ""
        print(f"- {day} {a_when} {a.event_id} {a.title}  <->  {b_when} {b.event_id} {b.title}")
    return 0


def _cmd_export(args: argparse.Namespace, ctl: ScheduleController, now: datetime) -> int:
    """
    Export the whole schedule as JSON (re-importable) or iCalendar.
    """
    out_path = (args.out or "").strip()
    if not out_path:
        print("Please provide an output path.")
        return 1

    fmt = args.format or ("ics" if Path(out_path).suffix.lower() == ".ics" else "json")
    if fmt == "ics":
        n = export_events_to_ics(ctl.events, out_path)
    else:
        n = write_export(ctl.events, out_path, now)
    print(f"Exported {n} events to: {out_path}")
    return 0


def _cmd_import(args: argparse.Namespace, ctl: ScheduleController) -> int:
    events = import_json(args.source)
    ctl.replace_all(events)
    print(f"Imported {len(events)} events from: {args.source}")
    return 0


def _cmd_reset(args: argparse.Namespace, ctl: ScheduleController) -> int:
    events = ctl.reset()
    print(f"Schedule reset to sample data ({len(events)} events).")
    return 0


def _add_event_fields(p: argparse.ArgumentParser) -> None:
    p.add_argument("--title", type=str, default=None, help="Event title (required for add)")
    p.add_argument("--instructor", type=str, default=None, help="Instructor name (required for add)")
    p.add_argument("--email", type=str, default=None, help="Instructor email")
    p.add_argument("--start", type=str, default=None, help="Start time, ISO 8601 (e.g. 2026-10-20T10:00)")
    p.add_argument("--end", type=str, default=None, help="End time, ISO 8601")
    p.add_argument("--type", type=str, default=None, choices=[t.value for t in EventType], help="Event type")
    p.add_argument("--description", type=str, default=None)
    p.add_argument("--subject", type=str, default=None)
    p.add_argument("--location", type=str, default=None)
    p.add_argument("--meet-link", dest="meet_link", type=str, default=None)
    p.add_argument("--material", action="append", default=None, help="Material reference (repeatable)")


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="studyschedule", description="StudySchedule CLI")
    parser.add_argument("--config", type=str, default=None, help="Path to config YAML")
    parser.add_argument("--data", type=str, default=None, help="Path to the schedule store (overrides config)")
    parser.add_argument("--now", type=str, default=None, help="Use this ISO time instead of the clock")
    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="List events")
    p_list.add_argument("--type", type=str, default="all", help="all | lecture | lab | seminar | exam | assignment")
    p_list.add_argument("--instructor", type=str, default=None, help="Exact instructor name")
    p_list.add_argument("--search", type=str, default="", help="Search title, description, subject, instructor")
    p_list.add_argument("--calendar", action="store_true", help="Group by day")

    sub.add_parser("instructors", help="List instructor filter options")

    p_add = sub.add_parser("add", help="Add an event")
    p_add.add_argument("--id", type=str, default=None, help="Event id (default: generated)")
    _add_event_fields(p_add)

    p_edit = sub.add_parser("edit", help="Edit an event")
    p_edit.add_argument("event_id", type=str, help="Event id")
    _add_event_fields(p_edit)

    p_delete = sub.add_parser("delete", help="Delete an event")
    p_delete.add_argument("event_id", type=str, help="Event id")

    sub.add_parser("conflicts", help="Show overlapping events")

    p_export = sub.add_parser("export", help="Export the schedule")
    p_export.add_argument("out", type=str, help="Output file path (e.g. schedule.json or out.ics)")
    p_export.add_argument("--format", type=str, choices=["json", "ics"], default=None)

    p_import = sub.add_parser("import", help="Import a schedule JSON file or URL (replaces the schedule)")
    p_import.add_argument("source", type=str, help="File path or http(s) URL")

    sub.add_parser("reset", help="Replace the schedule with sample data")

    sub.add_parser("interactive", help="Interactive menu mode")

    p_watch = sub.add_parser("watch", help="Live view, refreshed every interval")
    p_watch.add_argument("--iterations", type=int, default=None, help="Stop after N refreshes")

    return parser


def _build_controller(args: argparse.Namespace, cfg: AppConfig) -> tuple[ScheduleController, Callable[[], datetime]]:
    store = KeyValueStore(Path(args.data) if args.data else cfg.storage_path)
    if args.now:
        fixed = _parse_time(args.now, cfg.tz)
        clock: Callable[[], datetime] = lambda: fixed
    else:
        clock = utc_now
    return ScheduleController(store, clock=clock), clock


def _dispatch(args: argparse.Namespace, cfg: AppConfig) -> int:
    ctl, clock = _build_controller(args, cfg)
    ctl.load()
    now = clock()
    tz = cfg.tz

    if args.command == "list":
        return _cmd_list(args, ctl, now, tz)
    if args.command == "instructors":
        return _cmd_instructors(args, ctl)
    if args.command == "add":
        return _cmd_add(args, ctl, now, tz)
    if args.command == "edit":
        return _cmd_edit(args, ctl, now, tz)
    if args.command == "delete":
        return _cmd_delete(args, ctl)
    if args.command == "conflicts":
        return _cmd_conflicts(args, ctl, tz)
    if args.command == "export":
        return _cmd_export(args, ctl, now)
    if args.command == "import":
        return _cmd_import(args, ctl)
    if args.command == "reset":
        return _cmd_reset(args, ctl)

    if args.command in ("interactive", "watch"):
        from studyschedule.interactive import run_interactive, run_watch

        if args.command == "interactive":
            run_interactive(ctl, tz=tz, refresh_interval=cfg.refresh_interval_seconds)
        else:
            run_watch(ctl, tz=tz, interval=cfg.refresh_interval_seconds, iterations=args.iterations)
        return 0

    return 2


def main(argv: Optional[list[str]] = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        cfg = load_config(args.config)
        setup_logging(cfg.logging)
        raise SystemExit(_dispatch(args, cfg))
    except (ScheduleError, ValueError) as e:
        print(f"Error: {e}")
        raise SystemExit(1)
