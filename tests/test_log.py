"""Tests for trendbot/log.py — component loggers and run tagging."""

import logging
from unittest.mock import MagicMock

from trendbot.job import TrendingJob
from trendbot.log import NO_RUN, RunContextFilter, get_logger, run_context


def _record():
    return logging.LogRecord("trendbot.topics.news", logging.INFO, __file__, 1, "hi", None, None)


class TestGetLogger:
    def test_component_logger_is_child(self):
        assert get_logger().name == "trendbot"
        assert get_logger("topics.news").name == "trendbot.topics.news"
        assert get_logger("topics.news").parent is get_logger()

    def test_handlers_installed_once(self):
        count = len(get_logger().handlers)
        get_logger("job")
        get_logger()
        assert len(get_logger().handlers) == count
        assert all(any(isinstance(f, RunContextFilter) for f in h.filters) for h in get_logger().handlers)


class TestRunContext:
    def test_record_tagged_inside_run(self):
        record = _record()
        with run_context("run-3"):
            RunContextFilter().filter(record)
        assert record.run == "run-3"

    def test_tag_restored_after_run(self):
        with run_context("run-1"):
            pass
        record = _record()
        RunContextFilter().filter(record)
        assert record.run == NO_RUN

    def test_job_execution_is_tagged(self, settings, mock_generator, mock_notifier):
        seen = []

        def get_all_trends():
            record = _record()
            RunContextFilter().filter(record)
            seen.append(record.run)
            return []

        engine = MagicMock()
        engine.get_all_trends.side_effect = get_all_trends
        job = TrendingJob(engine, mock_generator, mock_notifier, settings)
        job.execute()
        job.execute()
        assert seen == ["run-1", "run-2"]
