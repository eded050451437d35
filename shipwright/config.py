"""
Configuration management for shipwright.

Loads and validates config.yaml from the shipwright home directory
($SHIPWRIGHT_HOME, default ~/.config/shipwright). An optional env_file entry
names a dotenv file that is loaded into the process environment.
"""

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

from shipwright.errors import ConfigError

CONFIG_FILENAME = "config.yaml"
DEFAULT_HOME = "~/.config/shipwright"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("structured", "pretty")


def get_shipwright_home() -> Path:
    """Return the shipwright home directory."""
    home = os.environ.get("SHIPWRIGHT_HOME")
    if home:
        return Path(home)
    return Path(DEFAULT_HOME).expanduser()


@dataclass
class ShipwrightConfig:
    """
    Runtime configuration.

    Attributes:
        log_dir: Directory for the shipwright log and per-deployment logs
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: "structured" (JSON) or "pretty" (human-readable)
        console: Also log to console
        instruction_timeout_seconds: Timeout for a single instruction (None: unbounded)
        program_timeout_seconds: Timeout for a whole program run (None: unbounded)
        default_strategy: Strategy used when a caller does not name one
        env_file: Optional dotenv file loaded by load_config()
    """
    log_dir: str = "~/.local/state/shipwright/logs"
    log_level: str = "INFO"
    log_format: str = "structured"
    console: bool = True
    instruction_timeout_seconds: Optional[float] = None
    program_timeout_seconds: Optional[float] = None
    default_strategy: str = "Magnetar"
    env_file: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ShipwrightConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {unknown}")
        config = cls(**data)
        config.validate()
        return config

    @property
    def log_path(self) -> Path:
        return Path(self.log_dir).expanduser()

    def get_log_file_path(self) -> Path:
        """Path of the main shipwright log file."""
        return self.log_path / "shipwright.log"

    def deployment_log_dir(self) -> Path:
        """Directory holding one log file per deployment."""
        return self.log_path / "deployments"

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ConfigError: If a value is invalid
        """
        if not self.log_dir:
            raise ConfigError("log_dir is required")

        if str(self.log_level).upper() not in LOG_LEVELS:
            raise ConfigError(
                f"Invalid log_level: {self.log_level}. Expected one of {list(LOG_LEVELS)}"
            )
        self.log_level = str(self.log_level).upper()

        if self.log_format not in LOG_FORMATS:
            raise ConfigError(
                f"Invalid log_format: {self.log_format}. Expected one of {list(LOG_FORMATS)}"
            )

        for name in ("instruction_timeout_seconds", "program_timeout_seconds"):
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                raise ConfigError(f"{name} must be a positive number, got: {value!r}")

        from shipwright.strategies import strategy_names
        if self.default_strategy not in strategy_names():
            raise ConfigError(
                f"Unknown default_strategy: {self.default_strategy}. "
                f"Available: {strategy_names()}"
            )


def load_config(config_path: Optional[Path] = None) -> ShipwrightConfig:
    """
    Load shipwright configuration from YAML file.

    Args:
        config_path: Path to config file. Defaults to $SHIPWRIGHT_HOME/config.yaml

    Returns:
        ShipwrightConfig instance

    Raises:
        FileNotFoundError: If the config file does not exist
        ConfigError: If the config is invalid
    """
    if config_path is None:
        config_path = get_shipwright_home() / CONFIG_FILENAME

    if not config_path.exists():
        raise FileNotFoundError(f"shipwright config.yaml not found: {config_path}")

    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax: {e}")

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration must be a mapping, got: {type(data).__name__}")

    config = ShipwrightConfig.from_dict(data)

    if config.env_file:
        env_path = Path(config.env_file).expanduser()
        if not env_path.exists():
            raise ConfigError(f"env_file does not exist: {env_path}")
        load_dotenv(env_path)

    return config
