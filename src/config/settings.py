# src/config/settings.py — v2
"""Typed configuration loaded from the environment and .env via pydantic-settings.

Runner signals use the names the CI runner exports (GITHUB_WORKSPACE,
ImageOS, ImageVersion); everything else maps FIELD_NAME to the field.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field, ValidationInfo, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from vcpkgcache.core.models import EnvironmentSignals
from vcpkgcache.logging.handlers import parse_size


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from the environment and .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # === Runner signals ===
    github_workspace: str = ""
    image_os: str = Field(
        default="", validation_alias=AliasChoices("image_os", "imageos")
    )
    image_version: str = Field(
        default="", validation_alias=AliasChoices("image_version", "imageversion")
    )

    # === vcpkg ===
    vcpkg_directory: str = "vcpkg"
    vcpkg_git_commit_id: str = ""
    vcpkg_json_glob: str = "**/vcpkg.json"
    vcpkg_json_ignores: str = "**/vcpkg/**"

    # === Cache ===
    cache_backend: Literal["local"] = "local"
    cache_root: Path = Path("~/.vcpkgcache/cache")

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator("cache_root", mode="before")
    @classmethod
    def validate_cache_root(cls, v: object, info: ValidationInfo) -> object:  # noqa: N805
        """CACHE_ROOT must not be blank; Path("") would silently mean the cwd."""
        if isinstance(v, str) and not v.strip() and info.data.get("cache_backend") == "local":
            raise ConfigurationError("CACHE_ROOT is required when CACHE_BACKEND=local")
        return v

    @field_validator("log_rotation")
    @classmethod
    def validate_log_rotation(cls, v: str) -> str:  # noqa: N805
        """LOG_ROTATION must be a size such as '10MB'."""
        parse_size(v)
        return v

    @field_validator("log_retention")
    @classmethod
    def validate_log_retention(cls, v: int) -> int:  # noqa: N805
        if v < 0:
            raise ValueError("log_retention must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if not self.vcpkg_directory.strip():
            errors.append("VCPKG_DIRECTORY must not be empty")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def user_commit_id(self) -> str | None:
        """Caller-supplied vcpkg commit id, None when unset."""
        return self.vcpkg_git_commit_id.strip() or None

    @property
    def vcpkg_json_ignores_list(self) -> list[str]:
        """Parse comma-separated manifest ignore patterns."""
        return [p.strip() for p in self.vcpkg_json_ignores.split(",") if p.strip()]

    def environment_signals(self) -> EnvironmentSignals:
        """Runner signals consumed by the cache key builder."""
        return EnvironmentSignals(
            image_os=self.image_os,
            image_version=self.image_version,
            platform=sys.platform,
            workspace_root=self.github_workspace,
        )


def load_settings(**overrides: object) -> Settings:
    """Load settings from the environment with optional overrides.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
