import json
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path
from unittest import mock

import requests

from studyschedule.errors import ScheduleImportError
from studyschedule.sample import sample_events
from studyschedule.transfer import export_filename, export_json, import_json, write_export

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class TestExport(unittest.TestCase):
    def test_export_filename(self) -> None:
        self.assertEqual(export_filename(NOW), "schedule-2026-10-19.json")

    def test_export_json_document(self) -> None:
        doc = json.loads(export_json(sample_events(NOW), NOW))
        self.assertEqual(doc["version"], "1.0.0")
        self.assertEqual(len(doc["classes"]), 4)
        self.assertEqual(doc["classes"][1]["type"], "lab")

    def test_export_then_import_file(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            out = Path(d) / "export" / "schedule.json"
            n = write_export(sample_events(NOW), out, NOW)
            self.assertEqual(n, 4)
            events = import_json(str(out))
            self.assertEqual([ev.event_id for ev in events], ["1", "2", "3", "4"])


class TestImport(unittest.TestCase):
    def test_missing_file(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            with self.assertRaises(ScheduleImportError):
                import_json(str(Path(d) / "nope.json"))

    def test_invalid_json(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "bad.json"
            p.write_text("{oops", encoding="utf-8")
            with self.assertRaises(ScheduleImportError):
                import_json(str(p))

    def test_not_a_schedule_document(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "other.json"
            p.write_text(json.dumps({"hello": "world"}), encoding="utf-8")
            with self.assertRaises(ScheduleImportError):
                import_json(str(p))

    def test_import_from_url(self) -> None:
        doc = json.loads(export_json(sample_events(NOW), NOW))
        resp = mock.Mock()
        resp.json.return_value = doc
        resp.raise_for_status.return_value = None
        with mock.patch("studyschedule.transfer.requests.get", return_value=resp) as get:
            events = import_json("https://example.com/schedule.json")
        get.assert_called_once_with("https://example.com/schedule.json", timeout=30)
        self.assertEqual(len(events), 4)

    def test_import_from_url_http_error(self) -> None:
        resp = mock.Mock()
        resp.raise_for_status.side_effect = requests.HTTPError("404 Client Error")
        with mock.patch("studyschedule.transfer.requests.get", return_value=resp):
            with self.assertRaises(ScheduleImportError):
                import_json("https://example.com/missing.json")


if __name__ == "__main__":
    unittest.main()
