"""
Unit Tests - Configuration and Logging
"""
import json
import logging
from zoneinfo import ZoneInfo

import pytest
import structlog
from pydantic import ValidationError

from merchant_dashboard.config import Settings, get_settings
from merchant_dashboard.config.logging import configure_logging, get_logger
from merchant_dashboard.config.settings import AnalyticsSettings, TransactionSourceSettings


class TestSettings:
    """Tests for Settings"""

    def test_defaults(self, test_settings):
        assert test_settings.analytics.window_days == 7
        assert test_settings.analytics.snapshot_limit == 100
        assert test_settings.analytics.recent_limit == 5
        assert test_settings.transactions.backend == "demo"
        assert test_settings.security.user_id_header == "X-User-Id"
        assert not test_settings.is_production

    def test_section_env_prefix(self, monkeypatch):
        monkeypatch.setenv("ANALYTICS_WINDOW_DAYS", "14")
        monkeypatch.setenv("ANALYTICS_TIMEZONE", "Europe/Berlin")
        monkeypatch.setenv("TRANSACTIONS_BACKEND", "file")

        settings = Settings(app_env="testing")

        assert settings.analytics.window_days == 14
        assert settings.analytics.tzinfo == ZoneInfo("Europe/Berlin")
        assert settings.transactions.backend == "file"

    def test_rejects_unknown_timezone(self):
        with pytest.raises(ValidationError):
            AnalyticsSettings(timezone="Mars/Olympus_Mons")

    def test_rejects_unknown_environment(self):
        with pytest.raises(ValidationError):
            Settings(app_env="qa")

    def test_environment_is_normalized(self):
        assert Settings(app_env="PRODUCTION").is_production

    def test_rejects_unknown_backend(self):
        with pytest.raises(ValidationError):
            TransactionSourceSettings(backend="postgres")

    def test_window_bounds(self):
        with pytest.raises(ValidationError):
            AnalyticsSettings(window_days=0)


class TestLogging:
    """Tests for configure_logging"""

    @pytest.fixture
    def log_file(self, tmp_path, monkeypatch):
        path = tmp_path / "app.log"
        monkeypatch.setenv("LOG_FILE", str(path))
        monkeypatch.setenv("LOG_FORMAT", "json")
        get_settings.cache_clear()

        yield path

        root = logging.getLogger()
        for handler in root.handlers[:]:
            handler.close()
            root.removeHandler(handler)
        structlog.reset_defaults()
        get_settings.cache_clear()

    def test_json_lines_to_file(self, log_file):
        configure_logging("INFO")
        structlog.contextvars.bind_contextvars(request_id="req-1")
        try:
            get_logger("tests").info("Dashboard built", transactions=3)
        finally:
            structlog.contextvars.clear_contextvars()

        for handler in logging.getLogger().handlers:
            handler.flush()

        lines = [json.loads(line) for line in log_file.read_text().splitlines()]
        event = next(line for line in lines if line["event"] == "Dashboard built")
        assert event["transactions"] == 3
        assert event["request_id"] == "req-1"
        assert event["level"] == "info"

    def test_level_filters(self, log_file):
        configure_logging("WARNING")
        get_logger("tests").info("hidden")
        get_logger("tests").warning("shown")

        for handler in logging.getLogger().handlers:
            handler.flush()

        events = [json.loads(line)["event"] for line in log_file.read_text().splitlines()]
        assert "shown" in events
        assert "hidden" not in events
