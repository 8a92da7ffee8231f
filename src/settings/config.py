from __future__ import annotations

from pathlib import Path

import tomllib
from pydantic import BaseModel, ConfigDict, Field

CONFIG_FILENAME = "kickstart.toml"


class KickstartConfig(BaseModel):
    """Configuration for spec scaffolding."""

    model_config = ConfigDict(extra="forbid")

    spec_dir: str = Field(
        default="spec",
        description="Directory generated spec files are written to",
    )
    rails_mode: bool = Field(
        default=False,
        description="Use controller/helper templates for Rails conventions",
    )
    full_template: str | None = Field(
        default=None,
        description="Path to a template used instead of the new-spec template",
    )
    delta_template: str | None = Field(
        default=None,
        description="Path to a template used instead of the appended-examples template",
    )
    include: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to include (empty = all Ruby files)",
    )
    exclude: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to exclude",
    )


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def resolve_template_path(root: Path, template: str | None) -> Path | None:
    """Resolve a config-provided template path against the project root."""
    if template is None:
        return None
    path = Path(template).expanduser()
    return path if path.is_absolute() else root / path


def read_template(path: Path | None) -> str | None:
    """Read template text, raising ConfigError if the file is unreadable."""
    if path is None:
        return None
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot read template {path}: {exc}"
        raise ConfigError(msg) from exc


def load_config(root: Path) -> KickstartConfig:
    """Load configuration from kickstart.toml if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return KickstartConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return KickstartConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
