"""Tests for structured JSON logging."""

import json
import logging
import sys
import unittest

from utils.logging import JSONFormatter, setup_structured_logging


def _record(msg="User logged in", level=logging.INFO, exc_info=None, **extra) -> logging.LogRecord:
    record = logging.LogRecord("services.auth_service", level, __file__, 10, msg, None, exc_info)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter(unittest.TestCase):

    def test_basic_fields(self):
        data = json.loads(JSONFormatter().format(_record()))

        self.assertEqual(data["level"], "INFO")
        self.assertEqual(data["logger"], "services.auth_service")
        self.assertEqual(data["message"], "User logged in")
        self.assertEqual(data["service"], "task-tracker-api")
        self.assertTrue(data["timestamp"].endswith("Z"))

    def test_extra_fields_included(self):
        data = json.loads(JSONFormatter().format(_record(userId="abc", taskId="def")))

        self.assertEqual(data["userId"], "abc")
        self.assertEqual(data["taskId"], "def")
        self.assertNotIn("lineno", data)
        self.assertNotIn("taskName", data)

    def test_non_json_values_are_stringified(self):
        data = json.loads(JSONFormatter().format(_record(fields={"completed"})))

        self.assertEqual(data["fields"], "{'completed'}")

    def test_exception_included(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = _record(level=logging.ERROR, exc_info=sys.exc_info())

        data = json.loads(JSONFormatter().format(record))

        self.assertIn("ValueError: boom", data["exception"])


class TestSetupStructuredLogging(unittest.TestCase):

    def setUp(self):
        self.root = logging.getLogger()
        self.saved = (self.root.handlers[:], self.root.level)

    def tearDown(self):
        self.root.handlers, level = self.saved
        self.root.setLevel(level)

    def test_installs_single_json_handler(self):
        setup_structured_logging("debug")

        self.assertEqual(len(self.root.handlers), 1)
        self.assertIsInstance(self.root.handlers[0].formatter, JSONFormatter)
        self.assertEqual(self.root.level, logging.DEBUG)
        self.assertEqual(logging.getLogger("pymongo").level, logging.WARNING)


if __name__ == '__main__':
    unittest.main()
