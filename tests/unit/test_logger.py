"""Unit tests for logging infrastructure."""

import importlib
import json
import logging
import sys

import pytest

from kitchen_assistant.utils.logger import (
    PACKAGE_LOGGER,
    JSONFormatter,
    RichTextFormatter,
    configure_logging,
    get_logger,
)


def _record(msg: str = "Test message", level: int = logging.INFO, name: str = "test_logger", exc_info=None):
    return logging.LogRecord(
        name=name,
        level=level,
        pathname="test.py",
        lineno=10,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )


@pytest.fixture
def fresh_logger_name(request):
    """Logger name unique to the test, with handlers cleared."""
    name = f"kitchen_test.{request.node.name}"
    logging.getLogger(name).handlers.clear()
    return name


class TestJSONFormatter:
    """Test JSONFormatter produces valid JSON output."""

    def test_json_formatter_outputs_valid_json(self):
        """Test that JSONFormatter produces valid JSON."""
        parsed = json.loads(JSONFormatter().format(_record()))

        assert parsed["level"] == "INFO"
        assert parsed["logger"] == "test_logger"
        assert parsed["message"] == "Test message"
        assert "timestamp" in parsed

    def test_json_formatter_includes_exception_traceback(self):
        """Test that JSONFormatter includes exception traceback when present."""
        try:
            raise ValueError("Test error")
        except ValueError:
            record = _record("Error occurred", logging.ERROR, exc_info=sys.exc_info())

        parsed = json.loads(JSONFormatter().format(record))

        assert "exception" in parsed
        assert "ValueError" in parsed["exception"]

    def test_json_formatter_includes_service(self):
        """Test that the collaborator name passed via extra= is kept."""
        record = _record()
        record.service = "spoonacular"

        parsed = json.loads(JSONFormatter().format(record))

        assert parsed["service"] == "spoonacular"

    def test_json_formatter_omits_service_when_absent(self):
        parsed = json.loads(JSONFormatter().format(_record()))
        assert "service" not in parsed


class TestRichTextFormatter:
    """Test RichTextFormatter produces colored text output."""

    @pytest.mark.parametrize(
        "level,icon",
        [
            (logging.DEBUG, "🔍"),
            (logging.INFO, "ℹ️"),
            (logging.WARNING, "⚠️"),
            (logging.ERROR, "❌"),
        ],
    )
    def test_rich_text_formatter_includes_icon(self, level, icon):
        """Test that RichTextFormatter includes an icon for each level."""
        assert icon in RichTextFormatter().format(_record(level=level))

    def test_rich_text_formatter_includes_level_logger_and_message(self):
        output = RichTextFormatter().format(_record("Custom message", name="my_logger"))

        assert "INFO" in output
        assert "my_logger" in output
        assert "Custom message" in output

    def test_rich_text_formatter_tags_service(self):
        record = _record("Recipe search failed")
        record.service = "spoonacular"

        assert "test_logger[spoonacular]: Recipe search failed" in RichTextFormatter().format(record)

    def test_rich_text_formatter_includes_exception_traceback(self):
        """Test that RichTextFormatter includes exception traceback."""
        try:
            raise RuntimeError("Test error")
        except RuntimeError:
            record = _record("Error occurred", logging.ERROR, exc_info=sys.exc_info())

        output = RichTextFormatter().format(record)

        assert "RuntimeError" in output
        assert "Test error" in output


class TestGetLogger:
    """Test get_logger function."""

    def test_get_logger_attaches_only_null_handler(self, fresh_logger_name):
        """Repeated calls return the same logger without stacking handlers."""
        logger1 = get_logger(fresh_logger_name)
        logger2 = get_logger(fresh_logger_name)

        assert logger1 is logger2
        assert len(logger2.handlers) == 1
        assert isinstance(logger2.handlers[0], logging.NullHandler)

    def test_get_logger_leaves_level_and_propagation_alone(self, fresh_logger_name):
        test_logger = get_logger(fresh_logger_name)

        assert test_logger.level == logging.NOTSET
        assert test_logger.propagate is True


@pytest.fixture
def restore_logging():
    """Snapshot the package, aiohttp and root loggers and restore them afterwards."""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    aiohttp_logger = logging.getLogger("aiohttp")
    root = logging.getLogger()
    saved = (
        list(package_logger.handlers),
        package_logger.level,
        package_logger.propagate,
        aiohttp_logger.level,
        list(root.handlers),
    )
    yield
    package_logger.handlers[:] = saved[0]
    package_logger.setLevel(saved[1])
    package_logger.propagate = saved[2]
    aiohttp_logger.setLevel(saved[3])
    root.handlers[:] = saved[4]


def _console_handlers(logger_instance):
    return [h for h in logger_instance.handlers if not isinstance(h, logging.NullHandler)]


class TestConfigureLogging:
    """Test console setup used by the command-line runner."""

    def test_text_output_by_default(self, monkeypatch, restore_logging):
        monkeypatch.delenv("LOG_TYPE", raising=False)
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        package_logger = configure_logging()

        handlers = _console_handlers(package_logger)
        assert len(handlers) == 1
        assert isinstance(handlers[0].formatter, RichTextFormatter)
        assert package_logger.level == logging.INFO
        assert package_logger.propagate is False

    def test_env_selects_json_and_level(self, monkeypatch, restore_logging):
        monkeypatch.setenv("LOG_TYPE", "json")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        package_logger = configure_logging()

        assert isinstance(_console_handlers(package_logger)[0].formatter, JSONFormatter)
        assert package_logger.level == logging.DEBUG

    def test_invalid_level_defaults_to_info(self, restore_logging):
        assert configure_logging(level="LOUD").level == logging.INFO

    def test_repeated_calls_replace_console_handler(self, restore_logging):
        configure_logging(log_type="text")
        package_logger = configure_logging(log_type="json")

        handlers = _console_handlers(package_logger)
        assert len(handlers) == 1
        assert isinstance(handlers[0].formatter, JSONFormatter)

    def test_quiets_aiohttp(self, restore_logging):
        logging.getLogger("aiohttp").setLevel(logging.DEBUG)

        configure_logging()

        assert logging.getLogger("aiohttp").level == logging.WARNING


class TestImportSideEffects:
    """Importing the package must not touch the host application's logging."""

    def test_import_leaves_host_logging_unchanged(self, monkeypatch, restore_logging):
        import kitchen_assistant.utils as utils_package
        import kitchen_assistant.utils.logger as logger_module

        logging.getLogger("aiohttp").setLevel(logging.DEBUG)
        root_handlers = list(logging.getLogger().handlers)

        monkeypatch.setattr(utils_package, "logger", logger_module, raising=False)
        monkeypatch.delitem(sys.modules, "kitchen_assistant.utils.logger")
        reimported = importlib.import_module("kitchen_assistant.utils.logger")

        assert reimported is not logger_module
        assert logging.getLogger("aiohttp").level == logging.DEBUG
        assert logging.getLogger().handlers == root_handlers
        assert _console_handlers(reimported.logger) == []
        assert reimported.logger.propagate is True

    def test_module_logger_is_package_logger(self):
        from kitchen_assistant.utils.logger import logger as imported_logger

        assert imported_logger.name == "kitchen_assistant"
        assert any(isinstance(h, logging.NullHandler) for h in imported_logger.handlers)
