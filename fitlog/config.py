"""Configuration management for the FitLog data layer."""

import json
import logging
import os
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Optional

from platformdirs import user_config_dir, user_data_dir, user_log_dir

__all__ = [
    "Config",
    "SyncSettings",
    "setup_logging",
    "DEFAULT_API_URL",
    "STORAGE_KEYS",
]

logger = logging.getLogger(__name__)

APP_NAME = "FitLog"
APP_AUTHOR = "FitLog"

# API endpoints
DEFAULT_API_URL = "http://127.0.0.1:5000"
API_URL_ENV = "FITLOG_API_URL"

# Sync settings
DEFAULT_TIMEOUT = 30  # seconds
DEFAULT_PUSH_ATTEMPTS = 3
DEFAULT_OUTBOX_INTERVAL = 3 * 60  # seconds
DEFAULT_OUTBOX_MAX_RETRIES = 10
MAX_OUTBOX_SIZE = 1000

# One JSON blob per collection, namespaced the same way on every device.
STORAGE_KEYS = {
    "user_profile": "@fitlog_user_profile",
    "macro_targets": "@fitlog_macro_targets",
    "exercises": "@fitlog_exercises",
    "routines": "@fitlog_routines",
    "workouts": "@fitlog_workouts",
    "body_weights": "@fitlog_body_weights",
    "saved_foods": "@fitlog_saved_foods",
    "food_log": "@fitlog_food_log",
    "run_history": "@fitlog_run_history",
}


@dataclass
class SyncSettings:
    """Remote sync configuration."""

    timeout_seconds: int = DEFAULT_TIMEOUT
    push_attempts: int = DEFAULT_PUSH_ATTEMPTS
    base_delay: float = 1.0  # seconds
    max_delay: float = 10.0  # seconds
    outbox_enabled: bool = False  # Replay failed pushes later (opt-in)
    outbox_interval_seconds: int = DEFAULT_OUTBOX_INTERVAL
    outbox_max_retries: int = DEFAULT_OUTBOX_MAX_RETRIES


@dataclass
class Config:
    """Main configuration object."""

    api_url: str = DEFAULT_API_URL
    sync: SyncSettings = field(default_factory=SyncSettings)
    debug_mode: bool = False

    @classmethod
    def get_config_dir(cls) -> Path:
        """Get the configuration directory path."""
        return Path(user_config_dir(APP_NAME, APP_AUTHOR))

    @classmethod
    def get_data_dir(cls) -> Path:
        """Get the data directory path (for the SQLite store)."""
        return Path(user_data_dir(APP_NAME, APP_AUTHOR))

    @classmethod
    def get_log_dir(cls) -> Path:
        """Get the log directory path."""
        return Path(user_log_dir(APP_NAME, APP_AUTHOR))

    @classmethod
    def get_config_file(cls) -> Path:
        """Get the config file path."""
        return cls.get_config_dir() / "config.json"

    @classmethod
    def load(cls, config_file: Optional[Path] = None) -> "Config":
        """Load config from file, or return defaults.

        ``FITLOG_API_URL`` overrides the stored API URL when set.
        """
        config_file = config_file or cls.get_config_file()
        config = cls()
        if config_file.exists():
            try:
                with open(config_file, "r") as f:
                    data = json.load(f)
                config = cls._from_dict(data)
            except Exception as e:
                logger.warning(f"Failed to load config: {e}, using defaults")

        env_url = os.getenv(API_URL_ENV)
        if env_url:
            config.api_url = env_url
        return config

    @classmethod
    def _from_dict(cls, data: dict) -> "Config":
        """Create Config from dictionary."""
        sync_data = data.pop("sync", {})
        sync_fields = SyncSettings.__dataclass_fields__
        return cls(
            sync=SyncSettings(**{k: v for k, v in sync_data.items() if k in sync_fields}),
            **{k: v for k, v in data.items() if k in cls.__dataclass_fields__},
        )

    def save(self, config_file: Optional[Path] = None) -> None:
        """Save config to file."""
        config_file = config_file or self.get_config_file()
        config_file.parent.mkdir(parents=True, exist_ok=True)

        data = asdict(self)
        with open(config_file, "w") as f:
            json.dump(data, f, indent=2)
        logger.info(f"Config saved to {config_file}")


def setup_logging(debug: bool = False) -> None:
    """Configure logging."""
    log_dir = Config.get_log_dir()
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "fitlog.log"

    level = logging.DEBUG if debug else logging.INFO
    format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler(),
        ],
    )

    # Reduce noise from libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)
    logging.getLogger("apscheduler").setLevel(logging.WARNING)
