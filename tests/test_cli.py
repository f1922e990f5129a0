"""
Tests for CLI entry points.

Every test points --data at a temporary store and pins --now, so the
sample schedule is deterministic and no user data is touched.
"""

import io
import json
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path

from studyschedule.cli import main

NOW = "2026-10-19T12:00:00+00:00"


class TestCLI(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)
        self.data = str(self.dir / "store.json")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def run_cli(self, *argv: str) -> tuple[int, str]:
        buf = io.StringIO()
        with redirect_stdout(buf):
            with self.assertRaises(SystemExit) as ctx:
                main(["--data", self.data, "--now", NOW, *argv])
        return ctx.exception.code, buf.getvalue()

    def test_list_seeds_sample(self) -> None:
        code, out = self.run_cli("list")
        self.assertEqual(code, 0)
        self.assertIn("Organic Chemistry Lab", out)
        self.assertIn("[LIVE]", out)
        self.assertIn("[NEXT]", out)
        self.assertTrue(Path(self.data).exists())

    def test_list_type_filter(self) -> None:
        code, out = self.run_cli("list", "--type", "exam")
        self.assertEqual(code, 0)
        self.assertIn("Biology Midterm Exam", out)
        self.assertNotIn("Organic Chemistry Lab", out)

    def test_list_unknown_type(self) -> None:
        code, out = self.run_cli("list", "--type", "party")
        self.assertEqual(code, 1)
        self.assertIn("Unknown event type", out)

    def test_list_search_and_instructor(self) -> None:
        code, out = self.run_cli("list", "--search", "chemistry")
        self.assertEqual(code, 0)
        self.assertEqual(len(out.strip().splitlines()), 1)

        code, out = self.run_cli("list", "--instructor", "Dr. Emily Rodriguez")
        self.assertEqual(code, 0)
        self.assertIn("Quantum", out)
        self.assertEqual(len(out.strip().splitlines()), 1)

    def test_list_calendar(self) -> None:
        code, out = self.run_cli("list", "--calendar")
        self.assertEqual(code, 0)
        self.assertIn("2026-10-19", out)
        self.assertIn("2026-10-20", out)
        self.assertIn("60 min", out)

    def test_instructors(self) -> None:
        code, out = self.run_cli("instructors")
        self.assertEqual(code, 0)
        lines = out.strip().splitlines()
        self.assertEqual(lines[0], "(all)")
        self.assertEqual(len(lines), 5)

    def test_instructor_called_all(self) -> None:
        self.run_cli(
            "add", "--id", "a1", "--title", "Office Hours", "--instructor", "All",
            "--start", "2026-10-20T10:00", "--end", "2026-10-20T11:00",
        )
        code, out = self.run_cli("list", "--instructor", "All")
        self.assertEqual(code, 0)
        self.assertEqual(len(out.strip().splitlines()), 1)
        self.assertIn("Office Hours", out)

        # no instructor is literally "all", so this is the catch-all
        code, out = self.run_cli("list", "--instructor", "all")
        self.assertEqual(len(out.strip().splitlines()), 5)

        code, out = self.run_cli("instructors")
        lines = out.strip().splitlines()
        self.assertEqual(lines[0], "(all)")
        self.assertEqual(lines.count("All"), 1)

    def test_add_requires_title(self) -> None:
        code, out = self.run_cli(
            "add", "--instructor", "Dr. Kim", "--start", "2026-10-20T10:00", "--end", "2026-10-20T11:00"
        )
        self.assertNotEqual(code, 0)
        self.assertIn("required", out)

    def test_add_rejects_bad_timestamp(self) -> None:
        code, out = self.run_cli(
            "add", "--title", "X", "--instructor", "Dr. Kim", "--start", "tomorrow", "--end", "2026-10-20T11:00"
        )
        self.assertEqual(code, 1)
        self.assertIn("Malformed timestamp", out)

    def test_add_edit_delete_roundtrip(self) -> None:
        code, out = self.run_cli(
            "add",
            "--id", "la1",
            "--title", "Linear Algebra",
            "--instructor", "Dr. Kim",
            "--start", "2026-10-20T10:00",
            "--end", "2026-10-20T11:30",
            "--type", "lecture",
            "--material", "Chapter 1",
        )
        self.assertEqual(code, 0)
        self.assertIn("Added: la1", out)

        code, out = self.run_cli("edit", "la1", "--location", "Room 12")
        self.assertEqual(code, 0)

        doc = json.loads(Path(self.data).read_text(encoding="utf-8"))["scheduleData"]
        rec = [c for c in doc["classes"] if c["id"] == "la1"][0]
        self.assertEqual(rec["location"], "Room 12")
        self.assertEqual(rec["materials"], ["Chapter 1"])
        self.assertEqual(rec["startTime"], "2026-10-20T10:00:00+00:00")

        code, out = self.run_cli("delete", "la1")
        self.assertEqual(code, 0)
        code, out = self.run_cli("delete", "la1")
        self.assertEqual(code, 1)
        self.assertIn("Event not found", out)

    def test_conflicts(self) -> None:
        code, out = self.run_cli("conflicts")
        self.assertEqual(code, 0)
        self.assertIn("No conflicts found.", out)

        self.run_cli(
            "add", "--id", "clash", "--title", "Clash", "--instructor", "Dr. Kim",
            "--start", "2026-10-19T12:00", "--end", "2026-10-19T12:45",
        )
        code, out = self.run_cli("conflicts")
        self.assertIn("Conflicts found: 2", out)

    def test_export_and_import(self) -> None:
        json_out = str(self.dir / "schedule.json")
        ics_out = str(self.dir / "schedule.ics")

        code, out = self.run_cli("export", json_out)
        self.assertEqual(code, 0)
        self.assertIn("Exported 4 events", out)
        code, out = self.run_cli("export", ics_out)
        self.assertEqual(code, 0)
        self.assertIn("BEGIN:VCALENDAR", Path(ics_out).read_text(encoding="utf-8"))

        self.run_cli("delete", "1")
        code, out = self.run_cli("import", json_out)
        self.assertEqual(code, 0)
        self.assertIn("Imported 4 events", out)

    def test_import_missing_file(self) -> None:
        code, out = self.run_cli("import", str(self.dir / "nope.json"))
        self.assertEqual(code, 1)

    def test_reset(self) -> None:
        self.run_cli("delete", "1")
        code, out = self.run_cli("reset")
        self.assertEqual(code, 0)
        self.assertIn("4 events", out)


if __name__ == "__main__":
    unittest.main()
