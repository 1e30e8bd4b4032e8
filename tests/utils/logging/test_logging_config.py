# ABOUTME: Tests for the dual-mode logging configuration
# ABOUTME: Verifies mode detection, log file creation and third-party suppression

import io
import logging

import pytest
from loguru import logger

from fuel_price_ingest.utils.logging import (
    LoggingMode,
    configure_logging,
    get_logger,
    get_logging_status,
    suppress_library_output,
)
from fuel_price_ingest.utils.logging.config import InterceptHandler, detect_logging_mode


@pytest.fixture(autouse=True)
def reset_loguru():
    yield
    logger.remove()
    logging.basicConfig(handlers=[], force=True)


class TestDetectLoggingMode:
    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("FUEL_PRICE_LOG_MODE", "production")

        assert detect_logging_mode() == LoggingMode.PRODUCTION

    def test_invalid_override_falls_back_to_tty_detection(self, monkeypatch):
        monkeypatch.setenv("FUEL_PRICE_LOG_MODE", "verbose")
        monkeypatch.setattr("sys.stdout", io.StringIO())

        assert detect_logging_mode() == LoggingMode.PRODUCTION


class TestConfigureLogging:
    def test_interactive_mode_writes_log_files(self, tmp_path):
        configure_logging(mode=LoggingMode.INTERACTIVE, log_level="INFO")

        get_logger("fuel_price_ingest.test").info("Pipeline complete", extracted_value=3.47)

        main_log = tmp_path / "logs" / "fuel-price.log"
        assert main_log.exists()
        assert "Pipeline complete" in main_log.read_text()
        assert "extracted_value=3.47" in main_log.read_text()
        assert (tmp_path / "logs" / "fuel-price.json").exists()

    def test_production_mode_creates_no_files(self, tmp_path):
        configure_logging(mode=LoggingMode.PRODUCTION, log_level="INFO")

        get_logger("fuel_price_ingest.test").info("Pipeline complete")

        assert not (tmp_path / "logs").exists()

    def test_stdlib_records_are_intercepted(self):
        configure_logging(mode=LoggingMode.PRODUCTION)

        assert any(isinstance(h, InterceptHandler) for h in logging.getLogger().handlers)

    def test_noisy_libraries_are_silenced(self):
        configure_logging(mode=LoggingMode.PRODUCTION)

        assert logging.getLogger("crawl4ai").level == logging.CRITICAL
        assert logging.getLogger("httpx").level == logging.WARNING


def test_logging_status_reports_production_mode(monkeypatch):
    monkeypatch.setenv("FUEL_PRICE_LOG_MODE", "production")

    status = get_logging_status()

    assert status["mode"] == "production"
    assert status["log_files"]["main"] is None
    assert "playwright" in status["third_party_suppressed"]


def test_suppress_library_output_restores_streams(capsys):
    with suppress_library_output():
        print("crawler banner")

    print("visible")

    assert capsys.readouterr().out == "visible\n"
