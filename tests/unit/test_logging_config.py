"""Unit tests for composablestate logging configuration."""

from __future__ import annotations

import json
import logging
import os
from logging.handlers import RotatingFileHandler
from unittest import mock

import pytest

import composablestate
from composablestate import ContractAdapter, DeltaUpdate, DomainError
from composablestate.components import Counter
from composablestate.logging_config import (
    LOGGER_NAME,
    JsonFormatter,
    _clear_handlers,
    _get_level,
    _get_logger,
)


def _flush():
    for handler in _get_logger().handlers:
        handler.flush()


class TestSilentByDefault:
    """Tests that the library is silent by default."""

    def test_import_produces_no_log_output(self, capfd):
        import importlib

        importlib.reload(composablestate)

        captured = capfd.readouterr()
        assert captured.out == ""
        assert captured.err == ""

    def test_logger_has_null_handler(self):
        logger = logging.getLogger(LOGGER_NAME)
        assert any(isinstance(h, logging.NullHandler) for h in logger.handlers)

    def test_rejections_are_silent_without_configuration(self, capfd):
        adapter = ContractAdapter(Counter)
        with pytest.raises(DomainError):
            adapter.update_state(b'{"max":0}', b'{"count":0}', [DeltaUpdate(b'{"add":1}')])
        assert capfd.readouterr().err == ""


class TestEnableConsoleLogging:
    """Tests for enable_console_logging."""

    def test_sets_level(self):
        composablestate.enable_console_logging(level="DEBUG")
        assert _get_logger().level == logging.DEBUG

    def test_outputs_to_stderr(self, capfd):
        composablestate.enable_console_logging(level="INFO")
        logging.getLogger(f"{LOGGER_NAME}.test").info("test message")
        assert "test message" in capfd.readouterr().err

    def test_custom_format(self, capfd):
        composablestate.enable_console_logging(level="INFO", format="[CUSTOM] %(message)s")
        logging.getLogger(f"{LOGGER_NAME}.test").info("hello")
        assert "[CUSTOM] hello" in capfd.readouterr().err

    def test_adapter_rejection_is_logged(self, capfd):
        composablestate.enable_console_logging(level="INFO")
        adapter = ContractAdapter(Counter)
        with pytest.raises(DomainError):
            adapter.update_state(b'{"max":0}', b'{"count":0}', [DeltaUpdate(b'{"add":1}')])
        assert "update #1 (delta) rejected" in capfd.readouterr().err


class TestEnableFileLogging:
    """Tests for enable_file_logging."""

    def test_creates_rotating_handler_with_limits(self, tmp_path):
        handler = composablestate.enable_file_logging(
            tmp_path / "test.log", max_bytes=1024, backup_count=3
        )
        assert isinstance(handler, RotatingFileHandler)
        assert handler.maxBytes == 1024
        assert handler.backupCount == 3
        assert handler in _get_logger().handlers

    def test_creates_parent_directories(self, tmp_path):
        log_file = tmp_path / "subdir" / "nested" / "test.log"
        composablestate.enable_file_logging(log_file)
        assert log_file.parent.exists()

    def test_writes_to_file(self, tmp_path):
        log_file = tmp_path / "test.log"
        composablestate.enable_file_logging(log_file, level="INFO")
        logging.getLogger(f"{LOGGER_NAME}.test").info("file test message")
        _flush()
        assert "file test message" in log_file.read_text()

    def test_json_format(self, tmp_path):
        log_file = tmp_path / "test.json"
        composablestate.enable_file_logging(log_file, level="INFO", json_format=True)
        logging.getLogger(f"{LOGGER_NAME}.test").info("json file test")
        _flush()
        assert json.loads(log_file.read_text().strip())["message"] == "json file test"


class TestEnableJsonLogging:
    """Tests for enable_json_logging."""

    def test_outputs_valid_json(self, capfd):
        composablestate.enable_json_logging(level="INFO")
        logging.getLogger(f"{LOGGER_NAME}.test").info("json test")

        data = json.loads(capfd.readouterr().err.strip())
        assert data["message"] == "json test"
        assert data["level"] == "INFO"
        assert "timestamp" in data
        assert data["logger"] == f"{LOGGER_NAME}.test"

    def test_rejection_carries_context(self, capfd):
        composablestate.enable_json_logging(level="INFO")
        adapter = ContractAdapter(Counter)
        updates = [DeltaUpdate(b'{"add":1}'), DeltaUpdate(b'{"add":5}')]
        with pytest.raises(DomainError):
            adapter.update_state(b'{"max":3}', b'{"count":0}', updates)

        data = json.loads(capfd.readouterr().err.strip())
        assert data["operation"] == "update_state"
        assert data["index"] == 2
        assert data["logger"] == "composablestate.adapter"

    def test_decode_failure_carries_field(self, capfd):
        composablestate.enable_json_logging(level="DEBUG")
        adapter = ContractAdapter(Counter)
        with pytest.raises(composablestate.DecodeError):
            adapter.summarize_state(b"{}", b"{")

        lines = [json.loads(line) for line in capfd.readouterr().err.strip().splitlines()]
        decode_lines = [line for line in lines if line.get("field") == "state"]
        assert len(decode_lines) == 1
        assert decode_lines[0]["level"] == "DEBUG"


class TestConfigureFromEnv:
    """Tests for configure_from_env."""

    def test_respects_cs_logging(self):
        with mock.patch.dict(os.environ, {"CS_LOGGING": "DEBUG"}):
            composablestate.configure_from_env()
        assert _get_logger().level == logging.DEBUG

    def test_respects_cs_log_file(self, tmp_path):
        env = {"CS_LOGGING": "INFO", "CS_LOG_FILE": str(tmp_path / "env.log")}
        with mock.patch.dict(os.environ, env):
            composablestate.configure_from_env()
        assert any(isinstance(h, RotatingFileHandler) for h in _get_logger().handlers)

    def test_log_file_alone_defaults_to_info(self, tmp_path):
        with mock.patch.dict(os.environ, {"CS_LOG_FILE": str(tmp_path / "env.log")}):
            os.environ.pop("CS_LOGGING", None)
            composablestate.configure_from_env()
        assert _get_logger().level == logging.INFO

    def test_respects_cs_log_json(self, capfd):
        with mock.patch.dict(os.environ, {"CS_LOGGING": "INFO", "CS_LOG_JSON": "1"}):
            os.environ.pop("CS_LOG_FILE", None)
            composablestate.configure_from_env()

        logging.getLogger(f"{LOGGER_NAME}.test").info("json env test")
        data = json.loads(capfd.readouterr().err.strip())
        assert data["message"] == "json env test"

    def test_does_nothing_when_no_env_vars(self):
        initial_count = len(_get_logger().handlers)
        with mock.patch.dict(os.environ, {}, clear=True):
            composablestate.configure_from_env()
        assert len(_get_logger().handlers) == initial_count


class TestLevels:
    """Tests for set_level, set_module_level and disable_logging."""

    def test_sets_level_by_string(self):
        composablestate.set_level("WARNING")
        assert _get_logger().level == logging.WARNING

    def test_sets_level_by_int(self):
        composablestate.set_level(logging.ERROR)
        assert _get_logger().level == logging.ERROR

    def test_module_level_filters_more_strictly(self, capfd):
        composablestate.enable_console_logging(level="DEBUG")
        composablestate.set_module_level("adapter", "CRITICAL")

        logging.getLogger(f"{LOGGER_NAME}.adapter").warning("quiet warning")
        logging.getLogger(f"{LOGGER_NAME}.resolution").debug("noisy debug")

        err = capfd.readouterr().err
        assert "quiet warning" not in err
        assert "noisy debug" in err
        logging.getLogger(f"{LOGGER_NAME}.adapter").setLevel(logging.NOTSET)

    def test_disable_logging_silences_output(self, capfd, tmp_path):
        composablestate.enable_console_logging(level="DEBUG")
        composablestate.enable_file_logging(tmp_path / "test.log")
        composablestate.disable_logging()

        logging.getLogger(f"{LOGGER_NAME}.test").critical("this should not appear")

        assert "this should not appear" not in capfd.readouterr().err
        non_null = [h for h in _get_logger().handlers if not isinstance(h, logging.NullHandler)]
        assert non_null == []


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def _record(self, **extra):
        record = logging.LogRecord(
            name="test.logger",
            level=logging.INFO,
            pathname="test.py",
            lineno=1,
            msg="test message",
            args=(),
            exc_info=None,
        )
        for name, value in extra.items():
            setattr(record, name, value)
        return record

    def test_format_basic_record(self):
        data = json.loads(JsonFormatter().format(self._record()))
        assert data["message"] == "test message"
        assert data["level"] == "INFO"
        assert data["logger"] == "test.logger"
        assert "operation" not in data

    def test_includes_context_fields(self):
        data = json.loads(JsonFormatter().format(self._record(field="delta", index=3, key="a")))
        assert data["field"] == "delta"
        assert data["index"] == 3
        assert data["key"] == "a"

    def test_includes_exception(self):
        try:
            raise RuntimeError("test error")
        except RuntimeError:
            import sys

            exc_info = sys.exc_info()
        record = self._record()
        record.exc_info = exc_info
        data = json.loads(JsonFormatter().format(record))
        assert "RuntimeError" in data["exception"]


class TestHelperFunctions:
    """Tests for internal helpers."""

    def test_get_level(self):
        assert _get_level("DEBUG") == logging.DEBUG
        assert _get_level("info") == logging.INFO
        assert _get_level(logging.ERROR) == logging.ERROR
        assert _get_level("INVALID") == logging.INFO

    def test_clear_handlers_keeps_null_handler(self):
        composablestate.enable_console_logging()
        _clear_handlers()
        handlers = _get_logger().handlers
        assert handlers
        assert all(isinstance(h, logging.NullHandler) for h in handlers)
