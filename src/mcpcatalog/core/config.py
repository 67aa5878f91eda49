"""Application configuration management.

Handles loading and validating configuration from multiple sources:
    - TOML/JSON config files
    - Environment variables (MCP_CATALOG_* prefix)
    - Default values

Key components:
    - AppConfig: Main configuration model
    - load_config(): Safe config loading with fallback
    - ConfigLoadResult: Metadata about config source
"""

from __future__ import annotations

import json
import os
import tomllib
from collections.abc import Mapping
from contextlib import nullcontext
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any
from unittest.mock import patch

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

if TYPE_CHECKING:
    from mcpcatalog.capabilities.definitions import (
        PromptDefinition,
        ResourceDefinition,
        ToolDefinition,
    )

CONFIG_ENV_VAR = "MCP_CATALOG_CONFIG"
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "mcp-catalog.toml"
EXTENSION_GROUP = "mcp_catalog.extensions"

_DEFAULT_INSTRUCTIONS = """\
This MCP server exposes a catalog of tools, prompts, and resources assembled
from bundled core contributors and installed extensions.

1. Use `list_capabilities` to explore what is available before acting.
2. Prefer read-only tools and resources before tools marked dangerous.
3. Use `reload_catalog` after installing a new extension package.
"""


class ConfigError(RuntimeError):
    """Raised when configuration cannot be loaded or validated."""


# -----------------------------------------------------------------------------
# Sub-configuration Models
# -----------------------------------------------------------------------------


class ServerConfig(BaseModel):
    """Protocol server identity and logging."""

    name: str = Field(default="mcp-catalog", description="Server name announced to MCP clients.")
    instructions: str = Field(
        default=_DEFAULT_INSTRUCTIONS, description="Instructions announced to MCP clients."
    )
    environment: str = Field(
        default="development",
        description="Deployment environment; 'production' enables safe defaults.",
    )
    log_level: str = Field(default="INFO", description="Log level for server output.")

    @field_validator("environment", mode="after")
    @classmethod
    def normalize_environment(cls, v: str) -> str:
        return v.strip().lower() or "production"


class CapabilityConfig(BaseModel):
    """Switches controlling which catalog entries are exposed."""

    enabled: bool = Field(default=True, description="Expose any capability at all.")
    enable_dangerous_tools: bool = Field(
        default=True, description="Expose tools flagged as dangerous."
    )
    disabled_tools: list[str] = Field(default_factory=list, description="Tool names to hide.")
    disabled_prompts: list[str] = Field(default_factory=list, description="Prompt names to hide.")
    disabled_resources: list[str] = Field(
        default_factory=list, description="Resource URIs or template names to hide."
    )
    load_entry_points: bool = Field(
        default=True, description="Discover extensions from installed distributions."
    )
    extension_group: str = Field(
        default=EXTENSION_GROUP, description="Entry-point group scanned for extensions."
    )


@dataclass
class ConfigLoadResult:
    path: Path
    file_loaded: bool
    env_overrides: set[str]
    error: str | None = None


class AppConfig(BaseSettings):
    """Application-wide configuration with nested sub-configs."""

    model_config = SettingsConfigDict(
        env_prefix="MCP_CATALOG_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    server: ServerConfig = Field(default_factory=ServerConfig)
    capabilities: CapabilityConfig = Field(default_factory=CapabilityConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
    ]:
        # Ensure environment variables override config file entries.
        return (env_settings, init_settings, dotenv_settings, file_secret_settings)

    # -------------------------------------------------------------------------
    # Availability switches
    # -------------------------------------------------------------------------

    def is_tool_enabled(self, definition: ToolDefinition) -> bool:
        """Check the enable/disable switches for a tool."""
        caps = self.capabilities
        if not caps.enabled:
            return False
        if definition.name in caps.disabled_tools:
            return False
        return not (definition.dangerous and not caps.enable_dangerous_tools)

    def is_prompt_enabled(self, definition: PromptDefinition) -> bool:
        caps = self.capabilities
        return caps.enabled and definition.name not in caps.disabled_prompts

    def is_resource_enabled(self, definition: ResourceDefinition) -> bool:
        caps = self.capabilities
        if not caps.enabled:
            return False
        return definition.uri not in caps.disabled_resources and (
            definition.name not in caps.disabled_resources
        )


def _resolve_config_path(config_path: Path | None, env_vars: Mapping[str, str]) -> Path:
    candidate = config_path or env_vars.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH
    return Path(candidate).expanduser()


def _read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}

    raw = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    parser = json.loads if suffix == ".json" else tomllib.loads

    try:
        data = parser(raw)
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Syntax error in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Config root in {path} must be a mapping.")

    return data


def _detect_env_overrides(env_vars: Mapping[str, str]) -> set[str]:
    """Detect which fields are overridden by environment variables.

    For nested models, detects vars like MCP_CATALOG_SERVER__NAME.
    """
    prefix = AppConfig.model_config.get("env_prefix", "")
    delimiter = AppConfig.model_config.get("env_nested_delimiter", "__")
    overrides: set[str] = set()

    nested_models: dict[str, type[BaseModel]] = {
        "server": ServerConfig,
        "capabilities": CapabilityConfig,
    }

    for group_name, model_cls in nested_models.items():
        for field in model_cls.model_fields:
            env_key = f"{prefix}{group_name}{delimiter}{field}".upper()
            if env_key in env_vars:
                overrides.add(f"{group_name}.{field}")

    return overrides


def _apply_production_defaults(config: AppConfig, env_overrides: set[str]) -> AppConfig:
    """Disable the catalog in production unless explicitly configured."""
    if config.server.environment != "production":
        return config

    update: dict[str, bool] = {}
    if "capabilities.enabled" not in env_overrides:
        update["enabled"] = False
    if "capabilities.enable_dangerous_tools" not in env_overrides:
        update["enable_dangerous_tools"] = False
    if not update:
        return config

    capabilities = config.capabilities.model_copy(update=update)
    return config.model_copy(update={"capabilities": capabilities})


def load_config(
    config_path: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> tuple[AppConfig, ConfigLoadResult]:
    """
    Load configuration with Safe Mode fallback.
    If the file is invalid, returns default config + error message.
    """
    env_vars: Mapping[str, str] = os.environ if env is None else {**os.environ, **env}
    resolved_path = _resolve_config_path(config_path, env_vars)
    env_overrides = _detect_env_overrides(env_vars)

    error: str | None = None
    file_loaded = False
    file_data: dict[str, Any] = {}

    try:
        file_data = _read_config_file(resolved_path)
        file_loaded = resolved_path.exists()
    except ConfigError as exc:
        error = str(exc)

    context_manager = (
        patch.dict(os.environ, env_vars, clear=False) if env is not None else nullcontext()
    )

    try:
        with context_manager:
            config = AppConfig(**file_data)
    except ValidationError as exc:
        error = str(exc)
        with context_manager:
            config = AppConfig()

    if not file_loaded:
        config = _apply_production_defaults(config, env_overrides)

    load_result = ConfigLoadResult(
        path=resolved_path,
        file_loaded=file_loaded,
        env_overrides=env_overrides,
        error=error,
    )

    return config, load_result


__all__ = [
    "AppConfig",
    "CONFIG_ENV_VAR",
    "CapabilityConfig",
    "ConfigError",
    "ConfigLoadResult",
    "EXTENSION_GROUP",
    "ServerConfig",
    "load_config",
]
