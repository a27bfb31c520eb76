"""
Tests for the logging configuration.
"""

import json
import logging
import os
import tempfile

import pytest

from commfilter.common.logging_config import (
    JSONFormatter,
    LoggingTimer,
    ROOT_LOGGER_NAME,
    ENV_LOG_LEVEL,
    ENV_LOG_FILE,
    ENV_LOG_DIR,
    ENV_LOG_CONSOLE,
    ENV_LOG_JSON,
    configure_external_library_logging,
    get_logger,
    log_performance_metric,
    setup_logging
)


class ListHandler(logging.Handler):
    """Collects formatted records."""

    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


@pytest.fixture(autouse=True)
def reset_logging(monkeypatch):
    for env_var in (ENV_LOG_LEVEL, ENV_LOG_FILE, ENV_LOG_DIR, ENV_LOG_CONSOLE, ENV_LOG_JSON):
        monkeypatch.delenv(env_var, raising=False)
    yield
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root_logger.handlers):
        handler.close()
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)
    root_logger.propagate = True


class TestSetupLogging:
    """Test setup_logging handler configuration."""

    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()

    def teardown_method(self):
        import shutil
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_console_only(self):
        logger = setup_logging(level="DEBUG", force_setup=True)

        assert logger.name == ROOT_LOGGER_NAME
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], logging.StreamHandler)
        assert logger.propagate is False

    def test_file_handler(self):
        log_file = os.path.join(self.temp_dir, "run.log")
        logger = setup_logging(level="INFO", log_file=log_file, console=False, force_setup=True)

        get_logger("commfilter.network.filtering").info("filtered")
        for handler in logger.handlers:
            handler.flush()

        assert len(logger.handlers) == 1
        with open(log_file, encoding="utf-8") as f:
            assert "filtered" in f.read()

    def test_log_dir_uses_default_file_name(self):
        logger = setup_logging(log_dir=self.temp_dir, console=False, force_setup=True)
        assert os.path.exists(os.path.join(self.temp_dir, "commfilter.log"))
        assert len(logger.handlers) == 1

    def test_environment_level(self, monkeypatch):
        monkeypatch.setenv(ENV_LOG_LEVEL, "WARNING")
        logger = setup_logging(force_setup=True)
        assert logger.level == logging.WARNING

    def test_environment_console_off(self, monkeypatch):
        monkeypatch.setenv(ENV_LOG_CONSOLE, "false")
        logger = setup_logging(force_setup=True)
        assert logger.handlers == []

    def test_invalid_level(self):
        with pytest.raises(ValueError, match="Invalid logging level"):
            setup_logging(level="LOUD", force_setup=True)

    def test_existing_setup_is_kept(self):
        first = setup_logging(level="DEBUG", force_setup=True)
        handlers = list(first.handlers)
        second = setup_logging(level="ERROR")
        assert second.handlers == handlers
        assert second.level == logging.DEBUG

    def test_json_format(self):
        logger = setup_logging(json_format=True, force_setup=True)
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)


class TestJSONFormatter:
    """Test structured log output."""

    def test_record_fields(self):
        record = logging.LogRecord(
            "commfilter.pipeline", logging.INFO, "pipeline.py", 10,
            "kept %d nodes", (3,), None
        )
        record.operation = "partition"

        payload = json.loads(JSONFormatter().format(record))
        assert payload["message"] == "kept 3 nodes"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "commfilter.pipeline"
        assert payload["operation"] == "partition"


class TestPerformanceLogging:
    """Test performance helpers."""

    def setup_method(self):
        self.handler = ListHandler()
        self.logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.performance")
        self.logger.addHandler(self.handler)
        self.logger.setLevel(logging.INFO)

    def teardown_method(self):
        self.logger.removeHandler(self.handler)
        self.logger.setLevel(logging.NOTSET)

    def test_log_performance_metric(self):
        log_performance_metric("partition_nodes", 0.5, {"nodes": 10})

        assert len(self.handler.records) == 1
        message = self.handler.records[0].getMessage()
        assert message == "Performance: partition_nodes completed in 0.500s (nodes=10)"
        assert self.handler.records[0].duration == 0.5

    def test_logging_timer(self):
        with LoggingTimer("detect") as timer:
            pass

        assert timer.duration is not None
        assert timer.duration >= 0
        assert "detect completed" in self.handler.records[0].getMessage()

    def test_logging_timer_does_not_swallow(self):
        with pytest.raises(KeyError):
            with LoggingTimer("detect"):
                raise KeyError("boom")
        assert len(self.handler.records) == 1


class TestExternalLibraryLogging:
    """Test third-party logger levels."""

    def test_default_levels(self):
        configure_external_library_logging()
        assert logging.getLogger("matplotlib").level == logging.WARNING

    def test_invalid_level_skipped(self):
        logging.getLogger("networkit").setLevel(logging.INFO)
        configure_external_library_logging({"networkit": "LOUD"})
        assert logging.getLogger("networkit").level == logging.INFO
