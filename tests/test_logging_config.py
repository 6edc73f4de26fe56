"""
Tests for logging setup — level precedence and handlers.
"""

import logging
from pathlib import Path

import pytest

from jcli.core.observability.logging_config import (
    configure_cli_logging,
    resolve_level,
    setup_logging,
)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestResolveLevel:
    def test_default(self):
        assert resolve_level() == "WARNING"

    def test_env(self):
        assert resolve_level(env_level="INFO") == "INFO"

    def test_precedence(self):
        assert resolve_level(debug=True, verbose=True, quiet=True) == "DEBUG"
        assert resolve_level(verbose=True, quiet=True, env_level="ERROR") == "INFO"
        assert resolve_level(quiet=True, env_level="DEBUG") == "ERROR"


class TestSetupLogging:
    def test_console_level(self, restore_root_logger):
        setup_logging(level="INFO")
        assert restore_root_logger.level == logging.INFO
        assert len(restore_root_logger.handlers) == 1

    def test_unknown_level_falls_back(self, restore_root_logger):
        setup_logging(level="LOUD")
        assert restore_root_logger.level == logging.WARNING

    def test_file_handler(self, restore_root_logger, tmp_path: Path):
        log_file = tmp_path / "j.log"
        setup_logging(level="WARNING", log_file=str(log_file), log_file_level="DEBUG")
        assert restore_root_logger.level == logging.DEBUG
        logging.getLogger("jcli.test").debug("hello file")
        for handler in restore_root_logger.handlers:
            handler.flush()
        assert "hello file" in log_file.read_text()

    def test_file_parent_created(self, restore_root_logger, tmp_path: Path):
        log_file = tmp_path / "logs" / "nested" / "j.log"
        setup_logging(level="INFO", log_file=str(log_file))
        logging.getLogger("jcli.test").info("nested ok")
        for handler in restore_root_logger.handlers:
            handler.flush()
        assert "nested ok" in log_file.read_text()

    def test_unopenable_file_is_skipped(self, restore_root_logger, tmp_path: Path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")
        setup_logging(level="WARNING", log_file=str(blocker / "j.log"))
        assert len(restore_root_logger.handlers) == 1
        assert restore_root_logger.level == logging.WARNING


class TestConfigureCliLogging:
    def test_env_level_used_without_flags(self, restore_root_logger):
        configure_cli_logging(environ={"J_LOG_LEVEL": "info"})
        assert restore_root_logger.level == logging.INFO

    def test_flag_beats_env(self, restore_root_logger):
        configure_cli_logging(quiet=True, environ={"J_LOG_LEVEL": "DEBUG"})
        assert restore_root_logger.level == logging.ERROR

    def test_env_log_file(self, restore_root_logger, tmp_path: Path):
        log_file = tmp_path / "j.log"
        configure_cli_logging(environ={"J_LOG_FILE": str(log_file), "J_LOG_FILE_LEVEL": "DEBUG"})
        assert restore_root_logger.level == logging.DEBUG
        assert len(restore_root_logger.handlers) == 2

    def test_empty_env_file_ignored(self, restore_root_logger):
        configure_cli_logging(environ={"J_LOG_FILE": ""})
        assert len(restore_root_logger.handlers) == 1
