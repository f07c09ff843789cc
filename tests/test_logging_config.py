"""Tests for centralized logging setup."""

from __future__ import annotations

import io
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from winsvc_installer.log_context import ContextFilter, ctx_role, set_log_context
from winsvc_installer.logging_config import LOG_FILE_NAME, setup_logging, shutdown_logging


@pytest.fixture(autouse=True)
def _restore_root_logger() -> Iterator[None]:
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    shutdown_logging()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestSetupLogging:
    """Test logging configuration."""

    def test_sets_root_level(self) -> None:
        setup_logging(level=logging.WARNING, log_dir=None)
        assert logging.getLogger().level == logging.WARNING

    def test_verbose_sets_debug(self) -> None:
        setup_logging(verbose=True, log_dir=None)
        assert logging.getLogger().level == logging.DEBUG

    def test_console_handler_added(self) -> None:
        setup_logging(log_dir=None)
        handler_types = [type(h).__name__ for h in logging.getLogger().handlers]
        assert handler_types == ["StreamHandler"]

    def test_file_handler_when_log_dir(self, tmp_path: Path) -> None:
        log_dir = tmp_path / "logs"
        setup_logging(log_dir=log_dir)
        assert log_dir.exists()
        handler_types = [type(h).__name__ for h in logging.getLogger().handlers]
        assert "QueueHandler" in handler_types

    def test_file_receives_info_even_when_console_is_quiet(self, tmp_path: Path) -> None:
        setup_logging(level=logging.WARNING, log_dir=tmp_path, stream=io.StringIO())
        assert logging.getLogger().level == logging.INFO
        logging.getLogger("winsvc_installer.test").info("into the file")
        shutdown_logging()
        assert "into the file" in (tmp_path / LOG_FILE_NAME).read_text(encoding="utf-8")

    def test_custom_stream(self) -> None:
        stream = io.StringIO()
        setup_logging(stream=stream)
        logging.getLogger("winsvc_installer.test").warning("hello relay")
        assert "hello relay" in stream.getvalue()
        assert "\x1b[" not in stream.getvalue()

    def test_repeated_calls_no_duplicate_handlers(self, tmp_path: Path) -> None:
        setup_logging(log_dir=tmp_path)
        setup_logging(log_dir=tmp_path)
        assert len(logging.getLogger().handlers) == 2

    def test_shutdown_is_idempotent(self, tmp_path: Path) -> None:
        setup_logging(log_dir=tmp_path)
        shutdown_logging()
        shutdown_logging()


class TestLogContext:
    def test_role_prefix(self) -> None:
        token = ctx_role.set(None)
        try:
            record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
            ContextFilter().filter(record)
            assert record.ctx == ""
            set_log_context(role="elevated")
            ContextFilter().filter(record)
            assert record.ctx == "[elevated] "
        finally:
            ctx_role.reset(token)

    def test_role_appears_in_output(self) -> None:
        stream = io.StringIO()
        token = ctx_role.set("elevated")
        try:
            setup_logging(stream=stream)
            logging.getLogger("winsvc_installer.test").warning("from child")
        finally:
            ctx_role.reset(token)
        assert "[elevated] from child" in stream.getvalue()
