"""Configuration for fhandle tooling."""

import logging
import os
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings

from fhandle.common.constants import (
    CONFIG_ENV_VAR,
    DEFAULT_DUMP_WIDTH,
    DEFAULT_LINE_LENGTH,
    DEFAULT_MAX_DUMP_SIZE,
    ENV_PREFIX,
)

logger = logging.getLogger("fhandle.config")


class HandleSettings(BaseSettings):
    """Settings loaded from environment or config file."""

    # Backend
    default_backend: Literal["standard", "stream"] = Field(
        "standard", description="Backend used when none is given: standard (buffered file) or stream (reader-seeker)"
    )

    # Logging
    log_level: str = Field("WARNING", description="Level for the fhandle logger. Env: FHANDLE_LOG_LEVEL")

    # CLI
    line_length: int = Field(DEFAULT_LINE_LENGTH, ge=2, description="Line buffer length for get_line")
    dump_width: int = Field(DEFAULT_DUMP_WIDTH, ge=1, description="Bytes per hex dump row")
    max_dump_size: int = Field(
        DEFAULT_MAX_DUMP_SIZE,
        ge=0,
        description="Default byte limit for dumps. " "Env: FHANDLE_MAX_DUMP_SIZE (supports suffixes: 64KB, 1MB, etc.)",
    )

    class Config:
        env_prefix = ENV_PREFIX


def parse_size(value: str) -> int:
    """Parse human-readable size string to bytes.

    Examples: '64KB', '1MB', '500kb', '4096'
    """
    value = value.strip().upper()
    multipliers = {
        "B": 1,
        "KB": 1024,
        "MB": 1024**2,
        "GB": 1024**3,
        "K": 1024,
        "M": 1024**2,
        "G": 1024**3,
    }
    for suffix, mult in sorted(multipliers.items(), key=lambda x: -len(x[0])):
        if value.endswith(suffix):
            num = value[: -len(suffix)].strip()
            return int(float(num) * mult)
    return int(value)


def _parse_yaml_to_settings_dict(config: dict) -> dict:
    """Convert a parsed YAML config dict into a flat settings dict."""
    d: dict = {}

    if "handle" in config:
        if "backend" in config["handle"]:
            d["default_backend"] = config["handle"]["backend"]
    if "logging" in config:
        if "level" in config["logging"]:
            d["log_level"] = config["logging"]["level"]
    if "cli" in config:
        cli = config["cli"]
        for key in ("line_length", "dump_width"):
            if key in cli:
                d[key] = cli[key]
        if "max_dump_size" in cli:
            v = cli["max_dump_size"]
            d["max_dump_size"] = parse_size(v) if isinstance(v, str) else v

    return d


def _apply_env_overrides(settings_dict: dict) -> None:
    """Apply environment variable overrides to a settings dict (in-place)."""
    env_max_dump = os.environ.get(f"{ENV_PREFIX}MAX_DUMP_SIZE", "")
    if env_max_dump:
        settings_dict["max_dump_size"] = parse_size(env_max_dump)


# Paths searched in order when no explicit config is given.
_CONFIG_SEARCH_PATHS = [
    Path("./fhandle.yaml"),
    Path("./config/fhandle.yaml"),
    Path.home() / ".fhandle" / "config.yaml",
]


def discover_config_path() -> Optional[Path]:
    """Find a config file using auto-discovery.

    Search order:
      1. ``$FHANDLE_CONFIG`` environment variable
      2. ``./fhandle.yaml``
      3. ``./config/fhandle.yaml``
      4. ``~/.fhandle/config.yaml``
    """
    env_path = os.environ.get(CONFIG_ENV_VAR, "")
    if env_path:
        p = Path(env_path)
        if p.exists():
            return p
        logger.warning("$%s=%s does not exist", CONFIG_ENV_VAR, env_path)

    for candidate in _CONFIG_SEARCH_PATHS:
        if candidate.exists():
            return candidate
    return None


def load_settings(config_path: Optional[Path] = None) -> HandleSettings:
    """Load settings from config file + environment variables.

    Args:
        config_path: Explicit path to config file.  When ``None``,
            auto-discovery is used (see :func:`discover_config_path`).
    """
    import yaml

    resolved_path = config_path
    if resolved_path is None:
        resolved_path = discover_config_path()

    settings_dict: dict = {}

    if resolved_path and resolved_path.exists():
        with open(resolved_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
        settings_dict = _parse_yaml_to_settings_dict(config)
        logger.info("Loaded config from %s", resolved_path.resolve())
    else:
        logger.info("No config file found, using defaults + environment variables")

    _apply_env_overrides(settings_dict)
    return HandleSettings(**settings_dict)


def configure_logging(settings: HandleSettings) -> None:
    """Set the ``fhandle`` logger level from *settings*."""
    numeric_level = getattr(logging, settings.log_level.upper(), logging.WARNING)
    logging.getLogger("fhandle").setLevel(numeric_level)
    # Also set root handler if none configured
    if not logging.getLogger().handlers:
        logging.basicConfig(level=numeric_level, format="%(asctime)s %(name)s %(levelname)s %(message)s")
