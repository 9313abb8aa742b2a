"""
User configuration management for PhotoSweep.

Supports configuration from multiple sources (in order of priority):
1. Runtime parameters such as CLI flags (highest priority)
2. Environment variables (PHOTOSWEEP_<SETTING_NAME>)
3. User config file (~/.photosweep/config.json)
4. Default values from config.py (lowest priority)

Configuration file location: ~/.photosweep/config.json

Example config.json:
{
    "batch_size": 100,
    "max_parallel_operations": 25,
    "similarity_threshold": 0.87,
    "duplicate_threshold": 0.98,
    "monochrome_threshold": 0.92,
    "max_media_assets": 100000
}
"""

import dataclasses
import json
import os
from pathlib import Path
from typing import Any, Optional
import logging

from .config import CONFIG_DIR, ScanSettings

logger = logging.getLogger(__name__)

ENV_PREFIX = 'PHOTOSWEEP_'

# Settings that must be at least 1
POSITIVE_SETTINGS = {
    'hash_size',
    'color_analysis_size',
    'similarity_window',
    'batch_size',
    'max_parallel_operations',
    'initial_page_size',
    'media_page_size',
    'max_media_assets',
}

# Settings that must lie in [0, 1]
FRACTION_SETTINGS = {
    'monochrome_threshold',
    'similarity_threshold',
    'duplicate_threshold',
}


def _coerce_setting(name: str, value: Any, kind: type) -> Any:
    """
    Convert a raw config value to the setting's type and check its range.

    Raises:
        TypeError, ValueError: If the value has the wrong type or is out of range
    """
    if isinstance(value, bool):
        raise TypeError(f"{name} must be a number")
    if kind is int and isinstance(value, float) and not value.is_integer():
        raise ValueError(f"{name} must be a whole number")

    coerced = kind(value)
    if name in POSITIVE_SETTINGS and coerced < 1:
        raise ValueError(f"{name} must be at least 1")
    if name in FRACTION_SETTINGS and not 0.0 <= coerced <= 1.0:
        raise ValueError(f"{name} must be between 0 and 1")
    if kind is float and coerced < 0:
        raise ValueError(f"{name} must not be negative")
    return coerced


class UserConfig:
    """
    Manages user configuration from file and environment variables.

    The config file is lazy-loaded and cached.
    """

    _instance: Optional['UserConfig'] = None
    _config_data: Optional[dict] = None

    def __new__(cls):
        """Singleton pattern to ensure one config instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def config_dir(self) -> Path:
        """Get the configuration directory path."""
        env_dir = os.getenv('PHOTOSWEEP_CONFIG_DIR')
        if env_dir:
            return Path(env_dir)
        return Path(CONFIG_DIR)

    @property
    def config_file_path(self) -> Path:
        """Get the configuration file path."""
        return self.config_dir / 'config.json'

    def _load_config_file(self) -> dict:
        """Load configuration from JSON file."""
        if not self.config_file_path.exists():
            return {}

        try:
            with open(self.config_file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
                logger.debug(f"Loaded configuration from {self.config_file_path}")
                return data
        except Exception as e:
            logger.warning(f"Failed to load config file {self.config_file_path}: {e}")
            return {}

    def _get_config_data(self) -> dict:
        """Get cached config data (lazy loading)."""
        if self._config_data is None:
            self._config_data = self._load_config_file()
        return self._config_data

    def reload(self):
        """Reload configuration from file."""
        self._config_data = None

    def get(self, key: str, default: Any = None, env_var: Optional[str] = None) -> Any:
        """
        Get a configuration value with priority:
        1. Environment variable (if env_var specified)
        2. Config file
        3. Default value

        Args:
            key: Configuration key
            default: Default value if not found
            env_var: Optional environment variable name to check

        Returns:
            Configuration value
        """
        if env_var:
            env_value = os.getenv(env_var)
            if env_value is not None:
                # Try to parse as JSON for numbers and booleans
                try:
                    return json.loads(env_value)
                except (json.JSONDecodeError, TypeError):
                    return env_value

        config_data = self._get_config_data()
        if key in config_data:
            return config_data[key]

        return default

    def get_setting(self, name: str) -> Any:
        """
        Get one ScanSettings value, coerced to the type of its default.

        Invalid values are logged and replaced by the default.
        """
        default = getattr(ScanSettings(), name)
        value = self.get(name, default=default, env_var=f"{ENV_PREFIX}{name.upper()}")
        try:
            coerced = _coerce_setting(name, value, type(default))
        except (TypeError, ValueError):
            logger.warning(f"Invalid value for {name}: {value!r}, using {default!r}")
            return default
        return coerced

    @property
    def batch_size(self) -> int:
        """Number of photos analyzed per batch."""
        return self.get_setting('batch_size')

    @property
    def max_parallel_operations(self) -> int:
        """Concurrent signature extractions per batch."""
        return self.get_setting('max_parallel_operations')

    @property
    def similarity_threshold(self) -> float:
        """Minimum fingerprint similarity for two photos to match (0-1)."""
        return self.get_setting('similarity_threshold')

    @property
    def monochrome_threshold(self) -> float:
        """Minimum color uniformity for a monochrome photo (0-1)."""
        return self.get_setting('monochrome_threshold')

    @property
    def max_media_assets(self) -> int:
        """Hard cap on photos enumerated per scan."""
        return self.get_setting('max_media_assets')

    def to_settings(self, **overrides: Any) -> ScanSettings:
        """
        Build ScanSettings from defaults, file and environment.

        Args:
            **overrides: Runtime values; None means "not given"

        Returns:
            ScanSettings instance
        """
        values = {
            f.name: self.get_setting(f.name)
            for f in dataclasses.fields(ScanSettings)
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return ScanSettings(**values)

    def create_example_config(self) -> bool:
        """Create an example configuration file."""
        self.config_dir.mkdir(parents=True, exist_ok=True)

        example_config = {"_comment": "PhotoSweep User Configuration"}
        example_config.update(dataclasses.asdict(ScanSettings()))

        try:
            with open(self.config_file_path, 'w', encoding='utf-8') as f:
                json.dump(example_config, f, indent=2)
            logger.info(f"Created example config file at {self.config_file_path}")
            return True
        except Exception as e:
            logger.error(f"Failed to create example config: {e}")
            return False


# Global instance
_user_config = UserConfig()


def get_user_config() -> UserConfig:
    """Get the global UserConfig instance."""
    return _user_config
