from __future__ import annotations

import time
from datetime import date, datetime, tzinfo
from pathlib import Path
from typing import Callable, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from studyschedule.calendar_view import format_duration, format_time, shift_week, week_days, week_start
from studyschedule.conflicts import conflicting_ids
from studyschedule.controller import ScheduleController
from studyschedule.errors import ScheduleError
from studyschedule.events import build_event
from studyschedule.export_ics import export_events_to_ics
from studyschedule.filters import ScheduleFilter
from studyschedule.model import ALL, Event, EventType, parse_event_type, parse_type_selector
from studyschedule.status import EventStatus, classify, count_by_status
from studyschedule.storage import parse_timestamp
from studyschedule.transfer import export_filename, write_export


console = Console()

STATUS_STYLE = {
    EventStatus.LIVE: "[bold red]LIVE[/]",
    EventStatus.UPCOMING: "[green]upcoming[/]",
    EventStatus.PAST: "[dim]past[/]",
}


def _println(msg: str = "") -> None:
    console.print(msg)


def _prompt(msg: str) -> str:
    return console.input(escape(msg))


def _filter_label(flt: ScheduleFilter) -> str:
    if flt.is_empty:
        return "none"
    bits = []
    if flt.type is not ALL:
        bits.append(f"type={flt.type.value}")
    if flt.instructor is not ALL:
        bits.append(f"instructor={flt.instructor}")
    if flt.query.strip():
        bits.append(f"search={flt.query!r}")
    return ", ".join(bits)


def _events_table(events: list[Event], now: datetime, tz: tzinfo, title: str) -> Table:
    overlapping = conflicting_ids(events)

    table = Table(title=title, box=box.SIMPLE)
    table.add_column("Status")
    table.add_column("When")
    table.add_column("ID", style="cyan")
    table.add_column("Title")
    table.add_column("Type")
    table.add_column("Instructor", style="magenta")
    table.add_column("Location")

    for ev in events:
        when = "(invalid time)"
        if ev.start_time is not None:
            day = ev.start_time.astimezone(tz).strftime("%a %Y-%m-%d")
            when = f"{day} {format_time(ev.start_time, tz)}-{format_time(ev.end_time, tz)}"
        title_cell = escape(ev.title)
        if ev.event_id in overlapping:
            title_cell = f"{title_cell} [yellow](overlaps)[/]"
        table.add_row(
            STATUS_STYLE[classify(ev, now)],
            when,
            ev.event_id,
            title_cell,
            f"[{ev.color}]{ev.type.value}[/]",
            escape(ev.instructor.name),
            escape(ev.location or ""),
        )
    return table


def _print_header(ctl: ScheduleController, flt: ScheduleFilter, now: datetime) -> None:
    counts = count_by_status(ctl.events, now)
    _println("\n=== StudySchedule (interactive) ===")
    _println(
        f"Events: {len(ctl.events)} | live={counts[EventStatus.LIVE]} "
        f"| upcoming={counts[EventStatus.UPCOMING]} | past={counts[EventStatus.PAST]}"
    )
    _println(f"Filters: {_filter_label(flt)}")


def run_interactive(ctl: ScheduleController, tz: tzinfo, refresh_interval: int = 60) -> None:
    """
    Interactive menu loop. Statuses are refreshed whenever `refresh_interval`
    seconds have passed since the last refresh.
    """
    flt = ScheduleFilter()
    last_tick = time.monotonic()
    ctl.tick()

    while True:
        if time.monotonic() - last_tick >= refresh_interval:
            ctl.tick()
            last_tick = time.monotonic()
        now = ctl.clock()

        _print_header(ctl, flt, now)

        choice = _prompt(
            "\n[1] List events\n"
            "[2] Filter by type\n"
            "[3] Filter by instructor\n"
            "[4] Search\n"
            "[5] Clear filters\n"
            "[6] Week calendar\n"
            "[7] Add event\n"
            "[8] Delete event\n"
            "[9] Show conflicts\n"
            "[10] Export\n"
            "[0] Exit\n"
            "Select: "
        ).strip()

        if choice == "0":
            _println("Bye.")
            return

        try:
            if choice == "1":
                console.print(_events_table(ctl.visible(flt), now, tz, "Events"))
            elif choice == "2":
                flt = _flow_type_filter(flt)
            elif choice == "3":
                flt = _flow_instructor_filter(ctl, flt)
            elif choice == "4":
                flt = ScheduleFilter(flt.type, flt.instructor, _prompt("Search text [blank = clear]: "))
            elif choice == "5":
                flt = ScheduleFilter()
            elif choice == "6":
                _flow_week(ctl, flt, now, tz)
            elif choice == "7":
                _flow_add(ctl, now, tz)
            elif choice == "8":
                _flow_delete(ctl, flt, now, tz)
            elif choice == "9":
                _flow_conflicts(ctl, tz)
            elif choice == "10":
                _flow_export(ctl, now)
            else:
                _println("Invalid choice.")
        except ScheduleError as e:
            _println(f"[red]Error:[/] {e}")


def _flow_type_filter(flt: ScheduleFilter) -> ScheduleFilter:
    options = ["all"] + [t.value for t in EventType]
    for i, name in enumerate(options, start=1):
        _println(f"{i}) {name}")
    pick = _prompt("Choose type [blank = keep]: ").strip()
    if not pick:
        return flt
    if not pick.isdigit() or not (1 <= int(pick) <= len(options)):
        _println("Out of range.")
        return flt
    return ScheduleFilter(parse_type_selector(options[int(pick) - 1]), flt.instructor, flt.query)


def _flow_instructor_filter(ctl: ScheduleController, flt: ScheduleFilter) -> ScheduleFilter:
    options = ctl.instructors()
    for i, option in enumerate(options, start=1):
        label = "(all)" if option is ALL else option
        _println(f"{i}) {label}")
    pick = _prompt("Choose instructor [blank = keep]: ").strip()
    if not pick:
        return flt
    if not pick.isdigit() or not (1 <= int(pick) <= len(options)):
        _println("Out of range.")
        return flt
    return ScheduleFilter(flt.type, options[int(pick) - 1], flt.query)


def _flow_week(ctl: ScheduleController, flt: ScheduleFilter, now: datetime, tz: tzinfo) -> None:
    """
    Seven-day view starting on Sunday; [n]ext / [p]revious to move.
    """
    today: date = now.astimezone(tz).date()
    start = week_start(today)
    by_date = ctl.calendar(flt, tz)

    while True:
        days = week_days(start, by_date, today)
        table = Table(title=f"Week of {start.isoformat()}", box=box.SIMPLE)
        for d in days:
            header = f"{d.day_name} {d.day.day:02d}"
            table.add_column(f"[bold]{header}[/]" if d.is_today else header)
        max_len = max((len(d.events) for d in days), default=0)
        for r in range(max_len):
            row = []
            for d in days:
                if r < len(d.events):
                    ev = d.events[r]
                    live = " [red]●[/]" if classify(ev, now) is EventStatus.LIVE else ""
                    row.append(
                        f"{format_time(ev.start_time, tz)} {escape(ev.title)} "
                        f"({format_duration(ev.start_time, ev.end_time)}){live}"
                    )
                else:
                    row.append("")
            table.add_row(*row)
        console.print(table)
        if max_len == 0:
            _println("No events this week.")

        nav = _prompt("[n]ext / [p]revious week, blank = back: ").strip().lower()
        if nav == "n":
            start = shift_week(start, 1)
        elif nav == "p":
            start = shift_week(start, -1)
        else:
            return


def _flow_add(ctl: ScheduleController, now: datetime, tz: tzinfo) -> None:
    title = _prompt("Title: ")
    instructor = _prompt("Instructor name: ")
    email = _prompt("Instructor email [optional]: ")
    type_in = _prompt("Type (lecture/lab/seminar/exam/assignment) [lecture]: ").strip() or "lecture"
    subject = _prompt("Subject: ")
    description = _prompt("Description: ")
    start_in = _prompt("Start (YYYY-MM-DDTHH:MM): ")
    end_in = _prompt("End (YYYY-MM-DDTHH:MM): ")
    location = _prompt("Location [optional]: ")
    meet_link = _prompt("Meeting link [optional]: ")
    materials_in = _prompt("Materials, separated by ';' [optional]: ")

    try:
        ev_type = parse_event_type(type_in)
    except ValueError:
        _println(f"Unknown type: {type_in}")
        return

    event = build_event(
        now=now,
        title=title,
        instructor_name=instructor,
        instructor_email=email,
        start_time=parse_timestamp(start_in, default_tz=tz, strict=True),
        end_time=parse_timestamp(end_in, default_tz=tz, strict=True),
        type=ev_type,
        subject=subject,
        description=description,
        location=location,
        meet_link=meet_link,
        materials=materials_in.split(";"),
    )
    saved = ctl.save_event(event)
    _println(f"Added: {saved.event_id} {escape(saved.title)}")


def _flow_delete(ctl: ScheduleController, flt: ScheduleFilter, now: datetime, tz: tzinfo) -> None:
    events = ctl.visible(flt)
    if not events:
        _println("No events.")
        return
    console.print(_events_table(events, now, tz, "Delete event"))
    event_id = _prompt("Event ID to delete [blank = cancel]: ").strip()
    if not event_id:
        return
    confirm = _prompt(f"Delete {event_id}? [y/N]: ").strip().lower()
    if confirm != "y":
        return
    ctl.delete_event(event_id)
    _println(f"Deleted: {event_id}")


def _flow_conflicts(ctl: ScheduleController, tz: tzinfo) -> None:
    confs = ctl.conflicts()
    if not confs:
        _println("No conflicts found.")
        return
    _println(f"Conflicts found: {len(confs)}")
    for k, (a, b) in enumerate(confs, start=1):
        _println(
            f"{k}. [cyan]{a.event_id}[/] {a.title} {format_time(a.start_time, tz)}-{format_time(a.end_time, tz)}"
            f"  ↔  [cyan]{b.event_id}[/] {b.title} {format_time(b.start_time, tz)}-{format_time(b.end_time, tz)}"
        )


def _flow_export(ctl: ScheduleController, now: datetime) -> None:
    default_name = export_filename(now)
    out_in = _prompt(f"File name (.json or .ics), default is [{default_name}]: ").strip()
    out_path = Path(out_in) if out_in else Path(default_name)

    if out_path.suffix.lower() == ".ics":
        n = export_events_to_ics(ctl.events, out_path)
    else:
        if out_path.suffix.lower() != ".json":
            out_path = out_path.with_suffix(".json")
        n = write_export(ctl.events, out_path, now)
    _println(f"\nExported {n} events.")
    _println(f"Saved to: {out_path.resolve()}")


def run_watch(
    ctl: ScheduleController,
    tz: tzinfo,
    interval: int = 60,
    iterations: Optional[int] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """
    Re-render the schedule every `interval` seconds until interrupted
    (or until `iterations` refreshes have been shown).
    """
    shown = 0
    try:
        while iterations is None or shown < iterations:
            ctl.tick()
            now = ctl.clock()
            console.print(_events_table(list(ctl.events), now, tz, f"Schedule at {format_time(now, tz)}"))
            shown += 1
            if iterations is not None and shown >= iterations:
                break
            sleep(interval)
    except KeyboardInterrupt:
        _println("Stopped.")
