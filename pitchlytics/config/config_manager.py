"""
Configuration Manager for the pitch validation service
Location: pitchlytics/config/config_manager.py
"""

import os
import copy
import yaml
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from dotenv import load_dotenv

CONFIG_ENV_VAR = "PITCHLYTICS_CONFIG"

DEFAULTS: Dict[str, Dict[str, Any]] = {
    "cache": {"backend": "redis", "ttl_seconds": 3600, "key_prefix": "validation_score:"},
    "redis": {"url": "redis://localhost:6379/0"},
    "batch": {"max_items": 10},
    "logging": {"level": "INFO", "json": False, "file": None},
}


class ConfigManager:
    def __init__(self, config_path: str):
        """
        Initialize ConfigManager with the path to the configuration file.

        Args:
            config_path: Path to YAML configuration file
        """
        self.config_path = config_path
        self.config = {}
        self.logger = logging.getLogger(__name__)

        self._load_config()

    def _load_config(self) -> None:
        self.logger.info(f"Loading configuration from: {self.config_path}")

        if not os.path.exists(self.config_path):
            self.logger.error(f"Configuration file not found: {self.config_path}")
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        with open(self.config_path, 'r') as config_file:
            self.config = yaml.safe_load(config_file) or {}

        if self.config:
            self.logger.info(f"Configuration loaded with sections: {list(self.config.keys())}")
        else:
            self.logger.warning("Configuration file is empty")

    def get(self, section: str, key: str = None, default: Any = None) -> Any:
        """
        Get configuration value by section and key.

        Args:
            section: Configuration section
            key: Configuration key (optional)
            default: Default value if key is not found
        """
        if key is None:
            return self.config.get(section, default)
        return (self.config.get(section) or {}).get(key, default)

    def get_section(self, section: str) -> Dict[str, Any]:
        return self.config.get(section) or {}

    def get_all(self) -> Dict[str, Any]:
        return self.config


@dataclass
class Settings:
    cache_backend: str
    cache_ttl_seconds: int
    cache_key_prefix: str
    redis_url: str
    batch_max_items: int
    log_level: str
    log_json: bool
    log_file: Optional[str] = None


def _merged(config: Optional[ConfigManager]) -> Dict[str, Dict[str, Any]]:
    merged = copy.deepcopy(DEFAULTS)
    if config is not None:
        for section, values in merged.items():
            values.update(config.get_section(section))
    return merged


def load_settings(config_path: Optional[str] = None, env_file: Optional[str] = None) -> Settings:
    """
    Resolve settings: built-in defaults, then the YAML file, then env vars.

    Args:
        config_path: YAML file; falls back to $PITCHLYTICS_CONFIG when omitted.
        env_file: Optional .env path; python-dotenv searches upward when None.

    Raises:
        FileNotFoundError: If an explicitly named config file does not exist.
    """
    load_dotenv(env_file)
    path = config_path or os.getenv(CONFIG_ENV_VAR)
    values = _merged(ConfigManager(path) if path else None)

    return Settings(
        cache_backend=os.getenv("CACHE_BACKEND", values["cache"]["backend"]),
        cache_ttl_seconds=int(os.getenv("SCORE_CACHE_TTL", values["cache"]["ttl_seconds"])),
        cache_key_prefix=values["cache"]["key_prefix"],
        redis_url=os.getenv("REDIS_URL", values["redis"]["url"]),
        batch_max_items=int(values["batch"]["max_items"]),
        log_level=os.getenv("LOG_LEVEL", values["logging"]["level"]),
        log_json=bool(values["logging"]["json"]),
        log_file=values["logging"]["file"],
    )
