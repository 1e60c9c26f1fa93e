"""Configuration management.

Loads from TOML config files + environment variables.
Uses pydantic-settings for validation and env var overriding.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

from ..names import BACKGROUNDS, TRANSPARENT_EFFECT, UI_EFFECTS


# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------

class ServerConfig(BaseModel):
    host: str = "127.0.0.1"
    port: int = 8080


class CatalogConfig(BaseModel):
    database_url: str = "sqlite+aiosqlite:///data/index.sqlite"
    echo: bool = False
    pool_size: int = 5


class ArchiveConfig(BaseModel):
    path: str | None = None  # Local archive file
    url: str | None = None  # HTTP(S) object supporting Range requests
    header_skip: int = 28  # Seven u32 header words before pixel data
    timeout_seconds: float = 10.0


class IconConfig(BaseModel):
    default_effect: int = TRANSPARENT_EFFECT
    request_timeout_seconds: float | None = 30.0
    backgrounds: dict[str, int] = Field(default_factory=lambda: dict(BACKGROUNDS))
    ui_effects: dict[str, int] = Field(default_factory=lambda: dict(UI_EFFECTS))

    @field_validator("backgrounds", "ui_effects")
    @classmethod
    def _lowercase_names(cls, table: dict[str, int]) -> dict[str, int]:
        return {name.lower(): value for name, value in table.items()}


class ObservabilityConfig(BaseModel):
    log_level: str = "INFO"
    log_format: str = "json"  # "json" or "console"


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """Top-level application settings.

    Loaded from TOML config files, overridden by environment variables.
    """

    server: ServerConfig = Field(default_factory=ServerConfig)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    archive: ArchiveConfig = Field(default_factory=ArchiveConfig)
    icons: IconConfig = Field(default_factory=IconConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    model_config = {"env_prefix": "DAT_ICONS_", "env_nested_delimiter": "__"}

    def validate_archive(self) -> None:
        """Exactly one archive source must be configured."""
        from .errors import ConfigError

        if bool(self.archive.path) == bool(self.archive.url):
            raise ConfigError(
                "Configure exactly one of archive.path or archive.url "
                "(DAT_ICONS_ARCHIVE__PATH / DAT_ICONS_ARCHIVE__URL)."
            )
        if self.archive.header_skip < 0:
            raise ConfigError("archive.header_skip must be non-negative.")


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Load settings from TOML file + env vars.

    Args:
        config_path: Path to TOML config file (optional).
        overrides: Dict of overrides to apply on top.
    """
    data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            import tomli

            with open(path, "rb") as f:
                data = tomli.load(f)

    if overrides:
        for key, value in overrides.items():
            if isinstance(value, dict) and isinstance(data.get(key), dict):
                data[key] = {**data[key], **value}
            else:
                data[key] = value

    return Settings(**data)
