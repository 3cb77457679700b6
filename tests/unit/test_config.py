"""Unit tests for settings and logging configuration."""

import sys

import structlog

import newsdash.config.logging as logging_config
from newsdash.config.logging import configure_logging
from newsdash.config.settings import Settings, settings


class TestSettings:
    """Tests for Settings."""

    def test_trailing_slash_stripped(self):
        assert Settings(api_url="http://localhost:3001/").api_url == "http://localhost:3001"

    def test_fetch_deadline_covers_all_attempts(self):
        """30s per attempt, two attempts and one backoff of at most 5s."""
        config = Settings(request_timeout_seconds=30, fetch_max_attempts=2, retry_backoff_max_seconds=5)
        assert config.fetch_deadline_seconds == 65

    def test_single_attempt_has_no_backoff(self):
        config = Settings(request_timeout_seconds=10, fetch_max_attempts=1)
        assert config.fetch_deadline_seconds == 10


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_reconfigure_closes_log_file(self, tmp_path, monkeypatch):
        monkeypatch.setattr(settings, "log_file", str(tmp_path / "newsdash.log"))
        configure_logging()
        first = logging_config._log_file
        configure_logging()
        assert first.closed
        assert not logging_config._log_file.closed

        configure_logging(output=sys.stderr)
        assert logging_config._log_file is None

    def test_events_written_to_log_file(self, tmp_path, monkeypatch):
        log_path = tmp_path / "newsdash.log"
        monkeypatch.setattr(settings, "log_file", str(log_path))
        configure_logging(json_format=True)
        structlog.get_logger().info("feed_fetched", feed="nature")
        configure_logging(output=sys.stderr)

        line = log_path.read_text().strip()
        assert '"event": "feed_fetched"' in line
        assert '"feed": "nature"' in line
