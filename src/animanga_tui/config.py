"""Configuration management using Pydantic models."""

import logging
import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from .constants import (
    CONFIG_PATH_ENV_VAR,
    DB_PATH_ENV_VAR,
    DEFAULT_CONFIG_PATH,
    DEFAULT_DB_PATH,
    DEFAULT_LOG_FILE,
    DEFAULT_NOTICE_TICKS,
    DEFAULT_TICK_INTERVAL_MS,
)

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class StoreConfig(BaseModel):
    """Record file location."""
    path: str = DEFAULT_DB_PATH


class UIConfig(BaseModel):
    """Terminal UI timing."""
    tick_interval_ms: int = Field(default=DEFAULT_TICK_INTERVAL_MS, gt=0)
    notice_ticks: int = Field(default=DEFAULT_NOTICE_TICKS, gt=0)


class LoggingConfig(BaseModel):
    """Log output settings."""
    level: str = "INFO"
    file: str = DEFAULT_LOG_FILE

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v):
        """Upper-case and check the level name."""
        level = str(v).upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(LOG_LEVELS)}")
        return level


class Config(BaseModel):
    """Root configuration model."""
    store: StoreConfig = Field(default_factory=StoreConfig)
    ui: UIConfig = Field(default_factory=UIConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("store", "ui", "logging", mode="before")
    @classmethod
    def ensure_section(cls, v):
        """Treat an empty YAML section as defaults."""
        return v if v is not None else {}


class Settings:
    """Application settings loaded from config.yaml."""

    def __init__(self, config_path: Optional[Path] = None):
        """Load and validate configuration."""
        self.config_path = config_path or self._get_config_path()
        self._load_config()

    def _get_config_path(self) -> Path:
        """Get config file path from the environment or the default location."""
        return Path(os.environ.get(CONFIG_PATH_ENV_VAR) or DEFAULT_CONFIG_PATH)

    def _load_config(self) -> None:
        """Load configuration from YAML using Pydantic."""
        raw_config = {}
        if self.config_path.exists():
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    raw_config = yaml.safe_load(f) or {}
            except Exception as e:
                logger.error(f"Failed to load config: {e}")
                raise
            logger.info(f"Loaded configuration from {self.config_path}")
        else:
            logger.debug(f"No config file at {self.config_path}, using defaults")

        config = Config(**raw_config)

        self.db_path = Path(os.environ.get(DB_PATH_ENV_VAR) or config.store.path)
        self.tick_interval_ms = config.ui.tick_interval_ms
        self.notice_ticks = config.ui.notice_ticks
        self.log_level = config.logging.level
        self.log_file = Path(config.logging.file)

    @property
    def tick_interval(self) -> float:
        """Tick interval in seconds."""
        return self.tick_interval_ms / 1000.0


# Singleton cache for settings
_SETTINGS_SINGLETON = None

def get_settings(config_path: Optional[Path] = None) -> Settings:
    """Get (cached) application settings singleton."""
    global _SETTINGS_SINGLETON
    if _SETTINGS_SINGLETON is None:
        _SETTINGS_SINGLETON = Settings(config_path)
    return _SETTINGS_SINGLETON

def reload_settings(config_path: Optional[Path] = None) -> Settings:
    """Force reload of application settings singleton."""
    global _SETTINGS_SINGLETON
    _SETTINGS_SINGLETON = Settings(config_path)
    return _SETTINGS_SINGLETON
