"""Tests for configuration loading."""

import json
import logging
import tempfile
from pathlib import Path
from unittest.mock import patch

from fitlog.config import (
    API_URL_ENV,
    DEFAULT_API_URL,
    Config,
    STORAGE_KEYS,
    SyncSettings,
    setup_logging,
)


class TestConfig:
    """Tests for Config."""

    def setup_method(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.config_file = Path(self.temp_dir) / "config.json"

    def test_defaults(self, monkeypatch):
        """Test defaults when no file exists."""
        monkeypatch.delenv(API_URL_ENV, raising=False)

        config = Config.load(self.config_file)

        assert config.api_url == DEFAULT_API_URL
        assert config.sync.push_attempts == 3
        assert config.sync.outbox_enabled is False
        assert config.sync.outbox_interval_seconds == 180
        assert config.sync.outbox_max_retries == 10

    def test_save_and_load(self, monkeypatch):
        """Test a saved config reads back."""
        monkeypatch.delenv(API_URL_ENV, raising=False)
        config = Config(
            api_url="https://api.example.com",
            sync=SyncSettings(timeout_seconds=10, outbox_enabled=True),
        )

        config.save(self.config_file)
        loaded = Config.load(self.config_file)

        assert loaded.api_url == "https://api.example.com"
        assert loaded.sync.timeout_seconds == 10
        assert loaded.sync.outbox_enabled is True

    def test_unknown_keys_ignored(self, monkeypatch):
        """Test forward compatibility with extra keys."""
        monkeypatch.delenv(API_URL_ENV, raising=False)
        self.config_file.write_text(
            json.dumps({"api_url": "https://x", "theme": "dark", "sync": {"push_attempts": 5, "old": 1}})
        )

        config = Config.load(self.config_file)

        assert config.api_url == "https://x"
        assert config.sync.push_attempts == 5

    def test_corrupt_file_uses_defaults(self, monkeypatch):
        """Test an unreadable file."""
        monkeypatch.delenv(API_URL_ENV, raising=False)
        self.config_file.write_text("{broken")

        assert Config.load(self.config_file).api_url == DEFAULT_API_URL

    def test_env_override(self, monkeypatch):
        """Test the API URL environment override."""
        monkeypatch.setenv(API_URL_ENV, "https://staging.fitlog.test")

        assert Config.load(self.config_file).api_url == "https://staging.fitlog.test"

    def test_storage_keys_namespaced(self):
        """Test every collection key shares the app prefix."""
        assert len(STORAGE_KEYS) == 9
        assert all(key.startswith("@fitlog_") for key in STORAGE_KEYS.values())


class TestSetupLogging:
    """Tests for setup_logging."""

    def setup_method(self):
        """Set up test fixtures."""
        self.log_dir = Path(tempfile.mkdtemp()) / "logs"

    def test_creates_log_dir_and_quiets_libraries(self):
        """Test the log directory is created and chatty libraries are capped."""
        with patch.object(Config, "get_log_dir", return_value=self.log_dir):
            setup_logging(debug=True)

        assert self.log_dir.is_dir()
        assert logging.getLogger("urllib3").level == logging.WARNING
        assert logging.getLogger("apscheduler").level == logging.WARNING
