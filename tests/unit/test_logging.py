# Copyright (c) 2026 Huynh Huy. All rights reserved.

"""
Tests for Logging Setup
=======================
"""

import logging

import pytest


@pytest.fixture(autouse=True)
def restore_loggers():
    """Put the allerscan loggers back the way other tests expect them."""
    names = ("allerscan", "allerscan.diagnostics")
    saved = {n: (logging.getLogger(n).level, list(logging.getLogger(n).handlers)) for n in names}
    yield
    for name, (level, handlers) in saved.items():
        logger = logging.getLogger(name)
        for handler in logger.handlers:
            if handler not in handlers:
                handler.close()
        logger.setLevel(level)
        logger.handlers[:] = handlers


class TestSetupLogging:
    """Tests for setup_logging driven by LoggingConfig."""

    def test_defaults(self):
        from allerscan.utils import setup_logging

        logger = setup_logging()

        assert logger.name == "allerscan"
        assert logger.level == logging.INFO
        assert len(logger.handlers) == 1
        assert logging.getLogger("allerscan.diagnostics").level == logging.INFO

    def test_level_from_config(self):
        from allerscan.utils import setup_logging
        from allerscan.utils.config import LoggingConfig

        logger = setup_logging(LoggingConfig(level="debug", diagnostics_level="WARNING"))

        assert logger.level == logging.DEBUG
        assert logging.getLogger("allerscan.diagnostics").level == logging.WARNING

    def test_file_handler_appends(self, tmp_path):
        from allerscan.utils import get_logger, setup_logging
        from allerscan.utils.config import LoggingConfig

        log_file = tmp_path / "logs" / "allerscan.log"
        log_file.parent.mkdir()
        log_file.write_text("previous run\n")

        setup_logging(LoggingConfig(file=str(log_file), console=False))
        get_logger("allerscan.scanner").info("scan started")
        for handler in logging.getLogger("allerscan").handlers:
            handler.flush()

        text = log_file.read_text()
        assert text.startswith("previous run\n")
        assert "| INFO     | allerscan.scanner | scan started" in text

    def test_file_parent_is_created(self, tmp_path):
        from allerscan.utils import setup_logging
        from allerscan.utils.config import LoggingConfig

        log_file = tmp_path / "nested" / "dir" / "app.log"
        logger = setup_logging(LoggingConfig(file=str(log_file), console=False))

        assert log_file.parent.is_dir()
        assert [type(h) for h in logger.handlers] == [logging.FileHandler]

    def test_repeated_setup_does_not_stack_handlers(self):
        from allerscan.utils import setup_logging

        setup_logging()
        logger = setup_logging()

        assert len(logger.handlers) == 1

    def test_unknown_level_is_rejected(self):
        from allerscan.utils import setup_logging
        from allerscan.utils.config import LoggingConfig

        with pytest.raises(ValueError):
            setup_logging(LoggingConfig(level="LOUD"))

    def test_diagnostics_below_level_stay_out_of_logs(self, tmp_path):
        """Per-word DEBUG events still reach the channel, but not the log file."""
        from allerscan.utils import DiagnosticChannel, setup_logging
        from allerscan.utils.config import LoggingConfig

        log_file = tmp_path / "allerscan.log"
        setup_logging(LoggingConfig(level="DEBUG", file=str(log_file), console=False))

        channel = DiagnosticChannel()
        channel.debug("PEANUT")
        channel.info("MATCH peanut")
        for handler in logging.getLogger("allerscan").handlers:
            handler.flush()

        text = log_file.read_text()
        assert "MATCH peanut" in text
        assert "PEANUT\n" not in text
        assert [e.message for e in channel.recent()] == ["PEANUT", "MATCH peanut"]
