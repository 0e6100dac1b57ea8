"""Unit tests for logging configuration."""
from __future__ import annotations

import logging

import pytest

from lendcore.logging_setup import configure_logging


@pytest.fixture()
def root():
    """Root logger; handlers and level are put back after the test."""
    logger = logging.getLogger()
    saved_handlers, saved_level = logger.handlers[:], logger.level
    yield logger
    logger.handlers = saved_handlers
    logger.setLevel(saved_level)


class TestConfigureLogging:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [("WARNING", logging.WARNING), ("debug", logging.DEBUG), ("bogus", logging.INFO)],
    )
    def test_root_level(self, root: logging.Logger, name: str, expected: int) -> None:
        configure_logging(name)
        assert root.level == expected

    def test_repeated_calls_do_not_stack_handlers(self, root: logging.Logger) -> None:
        configure_logging()
        handlers = list(root.handlers)
        configure_logging("DEBUG")
        assert root.handlers == handlers

    def test_keeps_existing_handlers(self, root: logging.Logger) -> None:
        existing = logging.NullHandler()
        root.addHandler(existing)
        configure_logging()
        assert existing in root.handlers

    def test_pool_logs_pass_through(
        self, root: logging.Logger, caplog: pytest.LogCaptureFixture
    ) -> None:
        configure_logging("INFO")
        logging.getLogger("lendcore.services.pool").info("Deposit: alice supplied 1 DAI")
        logging.getLogger("lendcore.services.accrual").debug("Accrued DAI")
        assert "Deposit: alice supplied 1 DAI" in caplog.text
        assert "Accrued DAI" not in caplog.text

    def test_quiets_aiohttp(self, root: logging.Logger) -> None:
        configure_logging("DEBUG")
        assert logging.getLogger("aiohttp").level == logging.WARNING
