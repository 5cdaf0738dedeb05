"""Configuration management for pomocycle."""

import json
from pathlib import Path
from typing import Any, Literal, Optional

from platformdirs import user_config_dir
from pydantic import BaseModel, Field, ValidationError

from pomocycle_cli.models.cycle.config import (
    DEFAULT_COMPLETED_CYCLES,
    DEFAULT_CYCLES,
    DEFAULT_LONG_REST_TIME,
    DEFAULT_SHORT_REST_TIME,
    DEFAULT_WORK_TIME,
    SchedulerConfig,
)


class TimerConfig(BaseModel):
    """Timer defaults used when a flag is not given on the command line."""

    cycles: int = Field(default=DEFAULT_CYCLES, ge=0)
    completed_cycles: int = Field(default=DEFAULT_COMPLETED_CYCLES, ge=0)
    work_time: float = Field(default=DEFAULT_WORK_TIME, gt=0, allow_inf_nan=False)
    short_rest_time: float = Field(
        default=DEFAULT_SHORT_REST_TIME, gt=0, allow_inf_nan=False
    )
    long_rest_time: float = Field(
        default=DEFAULT_LONG_REST_TIME, gt=0, allow_inf_nan=False
    )
    unit: Literal["minutes", "seconds"] = Field(default="minutes")

    def to_scheduler_config(self) -> SchedulerConfig:
        """Build the immutable run configuration from these values."""
        return SchedulerConfig.from_units(
            total_cycles=self.cycles,
            work_time=self.work_time,
            short_rest_time=self.short_rest_time,
            long_rest_time=self.long_rest_time,
            starting_completed_cycles=self.completed_cycles,
            unit=self.unit,
        )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="DEBUG")
    file: bool = Field(default=True)


class Config(BaseModel):
    """Main configuration."""

    timer: TimerConfig = Field(default_factory=TimerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class ConfigManager:
    """Manages pomocycle configuration profiles."""

    def __init__(self, profile: str = "default"):
        self.profile = profile
        self.config_dir = Path(user_config_dir("pomocycle_cli"))
        self.config_file = self.config_dir / f"{profile}.json"

        # Ensure directories exist
        self.config_dir.mkdir(parents=True, exist_ok=True)

        self._config: Optional[Config] = None

    @property
    def config(self) -> Config:
        """Get the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def load_config(self) -> Config:
        """Load configuration from file."""
        if self.config_file.exists():
            try:
                with open(self.config_file, "r", encoding="utf-8") as f:
                    data = json.load(f)
                return Config(**data)
            except (OSError, json.JSONDecodeError, TypeError, ValidationError):
                # If config is corrupted, return default
                return Config()
        return Config()

    def save_config(self, config: Optional[Config] = None) -> None:
        """Save configuration to file."""
        if config is None:
            config = self.config

        with open(self.config_file, "w", encoding="utf-8") as f:
            json.dump(config.model_dump(), f, indent=2)

    def get(self, key: str) -> Any:
        """Get a configuration value by dot-separated key."""
        return self.get_from_config(self.config, key)

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value by dot-separated key.

        Raises:
            ValueError: If the key is unknown or the value fails validation.
        """
        if self.get(key) is None:
            raise ValueError(f"Unknown configuration key '{key}'")

        keys = key.split(".")
        config_dict = self.config.model_dump()

        # Navigate to the nested dictionary
        current = config_dict
        for k in keys[:-1]:
            current = current[k]

        current[keys[-1]] = value

        try:
            new_config = Config(**config_dict)
        except ValidationError as e:
            raise ValueError(f"Invalid value for '{key}': {value!r}") from e

        self._config = new_config
        self.save_config()

    def reset(self, key: Optional[str] = None) -> None:
        """Reset configuration to defaults."""
        if key is None:
            self._config = Config()
        else:
            # Reset specific key to default
            default_value = self.get_from_config(Config(), key)
            if default_value is None:
                raise ValueError(f"Unknown configuration key '{key}'")
            self.set(key, default_value)
        self.save_config()

    def get_from_config(self, config: Config, key: str) -> Any:
        """Get value from a config object using dot notation."""
        keys = key.split(".")
        value: Any = config
        for k in keys:
            if isinstance(value, BaseModel) and k in type(value).model_fields:
                value = getattr(value, k)
            else:
                return None
        return value

    def list_profiles(self) -> list[str]:
        """List all available profiles."""
        profiles = []
        for config_file in sorted(self.config_dir.glob("*.json")):
            if not config_file.name.startswith("."):
                profiles.append(config_file.stem)
        return profiles


# Global config manager instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager(profile: str = "default") -> ConfigManager:
    """Get or create the global config manager."""
    global _config_manager
    if _config_manager is None or _config_manager.profile != profile:
        _config_manager = ConfigManager(profile)
    return _config_manager
