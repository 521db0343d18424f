"""
Tests for travel_insights/utils/logging.py.

What we test
------------
build_formatter():   plain lines carry a UTC timestamp; JSON lines carry
                     ts/level/logger/msg and ``extra=`` keys.
configure_logging(): file handler created under a missing directory; the
                     root logger is restored afterwards.
"""

from __future__ import annotations

import json
import logging

import pytest

from travel_insights.config import LoggingConfig
from travel_insights.utils.logging import build_formatter, configure_logging

# 2025-01-07T09:00:00Z
CREATED = 1736240400.0


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "travel_insights.reports.aggregator", logging.WARNING, __file__, 1,
        "category %s omitted", ("cost",), None,
    )
    record.created = CREATED
    record.__dict__.update(extra)
    return record


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestBuildFormatter:
    def test_plain_line_uses_utc(self):
        line = build_formatter(False).format(_record())
        assert line == (
            "2025-01-07T09:00:00Z [WARNING] travel_insights.reports.aggregator: "
            "category cost omitted"
        )

    def test_json_line(self):
        payload = json.loads(build_formatter(True).format(_record(report_id=7)))
        assert payload == {
            "ts": "2025-01-07T09:00:00Z",
            "level": "WARNING",
            "logger": "travel_insights.reports.aggregator",
            "msg": "category cost omitted",
            "report_id": 7,
        }


class TestConfigureLogging:
    def test_file_handler_writes(self, tmp_path, restore_root_logger):
        log_file = tmp_path / "logs" / "run.log"
        configure_logging(LoggingConfig(level="DEBUG", log_file=str(log_file), json_format=True))

        logging.getLogger("travel_insights.test").debug("hello")
        for handler in logging.getLogger().handlers:
            handler.flush()

        lines = log_file.read_text(encoding="utf-8").splitlines()
        assert json.loads(lines[-1])["msg"] == "hello"
        assert logging.getLogger().level == logging.DEBUG

    def test_no_file_handler_when_unset(self, restore_root_logger):
        configure_logging(LoggingConfig(log_file=""))
        assert [type(h) for h in logging.getLogger().handlers] == [logging.StreamHandler]
