import unittest
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from studyschedule.calendar_view import (
    format_duration,
    format_time,
    group_by_date,
    shift_week,
    week_days,
    week_start,
)
from studyschedule.model import Event, EventType, Instructor


def _event(event_id: str, start: datetime, minutes: int = 60, ev_type: EventType = EventType.LECTURE) -> Event:
    return Event(
        event_id=event_id,
        title=f"Event {event_id}",
        description="",
        subject="",
        type=ev_type,
        start_time=start,
        end_time=start + timedelta(minutes=minutes),
        instructor=Instructor("Dr. Test"),
    )


def _utc(day: int, hour: int, minute: int = 0) -> datetime:
    return datetime(2026, 10, day, hour, minute, tzinfo=timezone.utc)


class TestGroupByDate(unittest.TestCase):
    def test_buckets_by_iso_date(self) -> None:
        events = [_event("a", _utc(20, 9)), _event("b", _utc(19, 14)), _event("c", _utc(20, 16))]
        by_date = group_by_date(events)
        self.assertEqual(list(by_date), ["2026-10-19", "2026-10-20"])
        self.assertEqual([ev.event_id for ev in by_date["2026-10-20"]], ["a", "c"])

    def test_sorted_by_start_within_day(self) -> None:
        events = [_event("late", _utc(19, 15)), _event("early", _utc(19, 8)), _event("mid", _utc(19, 11))]
        by_date = group_by_date(events)
        self.assertEqual([ev.event_id for ev in by_date["2026-10-19"]], ["early", "mid", "late"])

    def test_same_start_keeps_input_order(self) -> None:
        events = [_event("x", _utc(19, 10)), _event("y", _utc(19, 10)), _event("z", _utc(19, 10))]
        by_date = group_by_date(events)
        self.assertEqual([ev.event_id for ev in by_date["2026-10-19"]], ["x", "y", "z"])

    def test_missing_start_is_left_out(self) -> None:
        broken = Event(
            event_id="broken",
            title="Broken",
            description="",
            subject="",
            type=EventType.LAB,
            start_time=None,
            end_time=None,
            instructor=Instructor("Dr. Test"),
        )
        by_date = group_by_date([broken, _event("ok", _utc(19, 10))])
        self.assertEqual(list(by_date), ["2026-10-19"])
        self.assertEqual([ev.event_id for ev in by_date["2026-10-19"]], ["ok"])

    def test_timezone_moves_date(self) -> None:
        # 23:30 UTC on the 19th is the 20th in Zurich
        events = [_event("night", _utc(19, 23, 30))]
        self.assertEqual(list(group_by_date(events)), ["2026-10-19"])
        self.assertEqual(list(group_by_date(events, ZoneInfo("Europe/Zurich"))), ["2026-10-20"])


class TestWeek(unittest.TestCase):
    def test_week_starts_on_sunday(self) -> None:
        # 2026-10-19 is a Monday
        self.assertEqual(week_start(date(2026, 10, 19)), date(2026, 10, 18))
        self.assertEqual(week_start(date(2026, 10, 18)), date(2026, 10, 18))
        self.assertEqual(week_start(date(2026, 10, 24)), date(2026, 10, 18))

    def test_shift_week(self) -> None:
        start = date(2026, 10, 18)
        self.assertEqual(shift_week(start, 1), date(2026, 10, 25))
        self.assertEqual(shift_week(start, -1), date(2026, 10, 11))

    def test_week_days(self) -> None:
        events = [
            _event("lec", _utc(19, 9)),
            _event("exam", _utc(21, 13), ev_type=EventType.EXAM),
            _event("next-week", _utc(26, 9)),
        ]
        by_date = group_by_date(events)
        days = week_days(date(2026, 10, 18), by_date, today=date(2026, 10, 19))
        self.assertEqual(len(days), 7)
        self.assertEqual(days[0].day_name, "Sun")
        self.assertEqual([d.key for d in days][::6], ["2026-10-18", "2026-10-24"])
        self.assertTrue(days[1].is_today)
        self.assertEqual([ev.event_id for ev in days[1].events], ["lec"])
        self.assertEqual([ev.event_id for ev in days[3].events], ["exam"])
        self.assertEqual(sum(len(d.events) for d in days), 2)

    def test_week_days_type_restriction(self) -> None:
        events = [_event("lec", _utc(19, 9)), _event("exam", _utc(19, 13), ev_type=EventType.EXAM)]
        days = week_days(date(2026, 10, 18), group_by_date(events), date(2026, 10, 19), types=[EventType.EXAM])
        self.assertEqual([ev.event_id for ev in days[1].events], ["exam"])


class TestFormatting(unittest.TestCase):
    def test_format_time(self) -> None:
        self.assertEqual(format_time(_utc(19, 9, 5)), "09:05")
        self.assertEqual(format_time(None), "--:--")

    def test_format_duration(self) -> None:
        self.assertEqual(format_duration(_utc(19, 9), _utc(19, 10, 30)), "90 min")
        self.assertEqual(format_duration(None, _utc(19, 9)), "? min")


if __name__ == "__main__":
    unittest.main()
