"""
Configuration Management for Daily Alchemy.

Default settings with environment variable overrides via .env file support.

Usage:
    from daily_alchemy.config import config

    timer_limit = config.TIME_LIMIT_SECONDS
"""

import os
from pathlib import Path
from typing import Any, Dict, Union

from dotenv import load_dotenv


class Config:
    """
    Base configuration class with default settings for the game engine.

    All configuration values can be overridden via environment variables
    or .env file.
    """

    def __init__(self):
        """Initialize configuration, loading .env file if it exists."""
        # .env lives at the project root (above src/)
        env_path = Path(__file__).resolve().parents[2] / ".env"
        if env_path.exists():
            load_dotenv(env_path)

        self._load_config()

    def _load_config(self):
        """Load all configuration values with environment overrides."""
        # ================================
        # API SETTINGS
        # ================================
        self.API_BASE_URL = self._get_env("API_BASE_URL", "http://localhost:3000/api")
        self.API_TIMEOUT_SECONDS = self._get_number_env("API_TIMEOUT_SECONDS", 10.0)

        # ================================
        # DEVICE-LOCAL STORAGE
        # ================================
        self.STORAGE_FILE = self._get_env("STORAGE_FILE", "daily_alchemy.storage.json")
        self.STORAGE_QUOTA_BYTES = self._get_number_env("STORAGE_QUOTA_BYTES", 5 * 1024 * 1024)

        # ================================
        # GAME TIMING SETTINGS
        # ================================
        self.TIME_LIMIT_SECONDS = self._get_number_env("TIME_LIMIT_SECONDS", 600)
        self.TIMER_INTERVAL_SECONDS = self._get_number_env("TIMER_INTERVAL_SECONDS", 1.0)
        self.COMBINE_ANIMATION_SECONDS = self._get_number_env("COMBINE_ANIMATION_SECONDS", 0.6)
        self.COMBINATION_ERROR_DISMISS_SECONDS = self._get_number_env("COMBINATION_ERROR_DISMISS_SECONDS", 3.0)
        self.PROGRESS_SAVE_DEBOUNCE_SECONDS = self._get_number_env("PROGRESS_SAVE_DEBOUNCE_SECONDS", 5.0)
        self.SAVE_SUCCESS_INDICATOR_SECONDS = self._get_number_env("SAVE_SUCCESS_INDICATOR_SECONDS", 2.0)

        # ================================
        # GAME MECHANICS SETTINGS
        # ================================
        self.AUTOSAVE_DISCOVERY_INTERVAL = self._get_number_env("AUTOSAVE_DISCOVERY_INTERVAL", 5)
        self.MAX_FAVORITES = self._get_number_env("MAX_FAVORITES", 12)
        self.RECENT_ELEMENTS_CAPACITY = self._get_number_env("RECENT_ELEMENTS_CAPACITY", 3)
        self.CREATIVE_SLOT_COUNT = self._get_number_env("CREATIVE_SLOT_COUNT", 3)

        # ================================
        # CO-OP SETTINGS
        # ================================
        self.COOP_CONTINUE_TIMEOUT_SECONDS = self._get_number_env("COOP_CONTINUE_TIMEOUT_SECONDS", 30.0)

        # ================================
        # LOGGING AND DEBUG SETTINGS
        # ================================
        self.LOG_LEVEL = self._get_env("LOG_LEVEL", "INFO")
        self.ENABLE_TIMING_LOGS = self._get_bool_env("ENABLE_TIMING_LOGS", True)

    def _get_env(self, key: str, default: str) -> str:
        """Get string environment variable with default."""
        return os.getenv(key, default)

    def _get_number_env(self, key: str, default: Union[int, float]) -> Union[int, float]:
        """Numeric variable parsed with the default's type; bad values fall back to the default."""
        raw = os.getenv(key)
        if raw is None or not raw.strip():
            return default
        try:
            return type(default)(raw.strip())
        except ValueError:
            return default

    def _get_bool_env(self, key: str, default: bool) -> bool:
        raw = os.getenv(key)
        if raw is None:
            return default
        return raw.strip().lower() in ("true", "1", "yes", "on", "enabled")

    def to_dict(self) -> Dict[str, Any]:
        """Settings as a dict for the startup log line."""
        return {key: value for key, value in vars(self).items() if key.isupper()}


class DevelopmentConfig(Config):
    """Development environment configuration with debug settings."""

    def _load_config(self):
        """Load base config then apply development overrides."""
        super()._load_config()

        self.LOG_LEVEL = self._get_env("LOG_LEVEL", "DEBUG")
        self.API_BASE_URL = self._get_env("API_BASE_URL", "http://localhost:3000/api")


class ProductionConfig(Config):
    """Production environment configuration."""

    def _load_config(self):
        """Load base config then apply production overrides."""
        super()._load_config()

        self.LOG_LEVEL = self._get_env("LOG_LEVEL", "INFO")
        self.API_BASE_URL = self._get_env("API_BASE_URL", "https://www.tandemdaily.com/api")
        self.ENABLE_TIMING_LOGS = self._get_bool_env("ENABLE_TIMING_LOGS", False)


# ================================
# CONFIGURATION FACTORY
# ================================


def get_config() -> Config:
    """Get appropriate configuration based on environment.

    Returns:
        Configuration instance based on DAILY_ALCHEMY_ENV environment
        variable
    """
    env = os.getenv("DAILY_ALCHEMY_ENV", "default")

    if env == "development":
        return DevelopmentConfig()
    elif env == "production":
        return ProductionConfig()
    else:
        return Config()


# Global configuration instance
config = get_config()
