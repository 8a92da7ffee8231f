"""Configuration and logging setup for kickstart-core."""

from settings.config import (
    CONFIG_FILENAME,
    ConfigError,
    KickstartConfig,
    load_config,
    read_template,
    resolve_template_path,
)
from settings.logging import configure_logging, get_logger

__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "KickstartConfig",
    "configure_logging",
    "get_logger",
    "load_config",
    "read_template",
    "resolve_template_path",
]
