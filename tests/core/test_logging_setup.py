"""
Tests for the cadence.core.logging module.

Tests verify:
- JSON output uses ECS field names
- Level filtering
- Scoped context binding
"""

import json

import pytest
import structlog
from structlog.testing import capture_logs

from cadence.core.logging import (
    LogContext,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    unbind_context,
)


class TestConfigureLogging:
    def test_json_output_is_ecs_compatible(self, capsys):
        configure_logging(level="INFO", json_format=True, service="cadence-test")
        get_logger("cadence.test").info("job_selected", job="draw_board", wait_ms=33)

        line = capsys.readouterr().err.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["event"] == "job_selected"
        assert record["job"] == "draw_board"
        assert record["wait_ms"] == 33
        assert record["log.level"] == "info"
        assert record["service.name"] == "cadence-test"
        assert "@timestamp" in record

    def test_debug_suppressed_at_info(self, capsys):
        configure_logging(level="INFO", json_format=True)
        get_logger("cadence.test").debug("too_chatty")
        assert "too_chatty" not in capsys.readouterr().err

    def test_console_output(self, capsys):
        configure_logging(level="DEBUG", json_format=False)
        get_logger("cadence.test").debug("visible_event")
        assert "visible_event" in capsys.readouterr().err

    def test_unknown_level_rejected(self):
        with pytest.raises(ValueError):
            configure_logging(level="LOUD")

    def test_get_logger_returns_structlog_logger(self):
        logger = get_logger("cadence.test")
        assert hasattr(logger, "info")
        assert hasattr(logger, "bind")


class TestContext:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_bind_and_unbind(self):
        bind_context(run_id="abc")
        assert structlog.contextvars.get_contextvars() == {"run_id": "abc"}
        unbind_context("run_id")
        assert structlog.contextvars.get_contextvars() == {}

    def test_log_context_is_scoped(self):
        with LogContext(job="update_worm"):
            assert structlog.contextvars.get_contextvars()["job"] == "update_worm"
        assert "job" not in structlog.contextvars.get_contextvars()

    def test_scheduler_binds_job_during_action(self):
        from cadence.core.scheduling import ManualTimeSource, Scheduler

        scheduler = Scheduler(ManualTimeSource())
        logger = get_logger("cadence.test")
        seen = []

        def draw_board():
            seen.append(structlog.contextvars.get_contextvars().get("job"))
            logger.info("frame_drawn")
            scheduler.stop()

        scheduler.add_job(draw_board, 33)
        scheduler.run()

        assert seen == ["draw_board"]
        assert "job" not in structlog.contextvars.get_contextvars()
