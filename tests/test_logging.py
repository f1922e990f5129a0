import io
import json
import unittest
from unittest import mock

import structlog

from studyschedule.config import LoggingConfig
from studyschedule.logging import get_logger, setup_logging


class TestLogging(unittest.TestCase):
    def tearDown(self) -> None:
        structlog.reset_defaults()

    def test_json_lines_carry_logger_name(self) -> None:
        buf = io.StringIO()
        with mock.patch("sys.stderr", buf):
            setup_logging(LoggingConfig(level="info", json=True))
            log = get_logger("studyschedule.storage")
            log.debug("hidden")
            log.info("schedule_saved", count=4)

        lines = buf.getvalue().strip().splitlines()
        self.assertEqual(len(lines), 1)
        rec = json.loads(lines[0])
        self.assertEqual(rec["event"], "schedule_saved")
        self.assertEqual(rec["logger"], "studyschedule.storage")
        self.assertEqual(rec["level"], "info")
        self.assertEqual(rec["count"], 4)
        self.assertIn("timestamp", rec)

    def test_unknown_level_falls_back_to_warning(self) -> None:
        buf = io.StringIO()
        with mock.patch("sys.stderr", buf):
            setup_logging(LoggingConfig(level="chatty", json=True))
            log = get_logger("studyschedule.controller")
            log.info("hidden")
            log.warning("shown")

        events = [json.loads(line)["event"] for line in buf.getvalue().strip().splitlines()]
        self.assertEqual(events, ["shown"])


if __name__ == "__main__":
    unittest.main()
