from __future__ import annotations

import json
from pathlib import Path

from catalog_fixtures import contributors as fx
from mcpcatalog.capabilities.definitions import (
    PromptDefinition,
    ResourceDefinition,
    ToolDefinition,
)
from mcpcatalog.core.config import AppConfig, load_config


def _tool(name: str = "echo", dangerous: bool = False) -> ToolDefinition:
    return ToolDefinition(name=name, owner=fx.EchoTools, method="echo", dangerous=dangerous)


class TestLoadConfig:
    """Safe-mode loading from files and environment."""

    def test_defaults_without_file(self, isolate_config: Path) -> None:
        config, meta = load_config()
        assert meta.path == isolate_config
        assert meta.file_loaded is False
        assert meta.error is None
        assert config.server.name == "mcp-catalog"
        assert config.capabilities.enabled is True

    def test_toml_file(self, isolate_config: Path) -> None:
        isolate_config.write_text(
            '[server]\nname = "team-catalog"\n\n'
            '[capabilities]\ndisabled_tools = ["get_environment_variable"]\n',
            encoding="utf-8",
        )
        config, meta = load_config()
        assert meta.file_loaded is True
        assert config.server.name == "team-catalog"
        assert config.capabilities.disabled_tools == ["get_environment_variable"]

    def test_json_file(self, tmp_path: Path) -> None:
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps({"capabilities": {"enable_dangerous_tools": False}}))
        config, meta = load_config(config_path=path)
        assert meta.file_loaded is True
        assert config.capabilities.enable_dangerous_tools is False

    def test_syntax_error_falls_back_to_defaults(self, isolate_config: Path) -> None:
        isolate_config.write_text("[server\nname = ", encoding="utf-8")
        config, meta = load_config()
        assert meta.error is not None
        assert "Syntax error" in meta.error
        assert config.server.name == "mcp-catalog"

    def test_validation_error_falls_back_to_defaults(self, isolate_config: Path) -> None:
        isolate_config.write_text('[capabilities]\nenabled = "sometimes"\n', encoding="utf-8")
        config, meta = load_config()
        assert meta.error is not None
        assert config.capabilities.enabled is True

    def test_env_overrides_file(self, isolate_config: Path) -> None:
        isolate_config.write_text('[server]\nname = "from-file"\n', encoding="utf-8")
        config, meta = load_config(env={"MCP_CATALOG_SERVER__NAME": "from-env"})
        assert config.server.name == "from-env"
        assert "server.name" in meta.env_overrides

    def test_production_without_file_disables_catalog(self) -> None:
        config, _ = load_config(env={"MCP_CATALOG_SERVER__ENVIRONMENT": "production"})
        assert config.capabilities.enabled is False
        assert config.capabilities.enable_dangerous_tools is False

    def test_production_respects_explicit_env_switch(self) -> None:
        config, _ = load_config(
            env={
                "MCP_CATALOG_SERVER__ENVIRONMENT": "Production",
                "MCP_CATALOG_CAPABILITIES__ENABLED": "true",
            }
        )
        assert config.server.environment == "production"
        assert config.capabilities.enabled is True
        assert config.capabilities.enable_dangerous_tools is False

    def test_production_with_file_keeps_file_values(self, isolate_config: Path) -> None:
        isolate_config.write_text('[server]\nenvironment = "production"\n', encoding="utf-8")
        config, _ = load_config()
        assert config.capabilities.enabled is True


class TestEnableSwitches:
    def test_everything_enabled_by_default(self) -> None:
        config = AppConfig()
        assert config.is_tool_enabled(_tool())
        assert config.is_tool_enabled(_tool(dangerous=True))

    def test_master_switch(self) -> None:
        config = AppConfig(capabilities={"enabled": False})
        assert not config.is_tool_enabled(_tool())
        prompt = PromptDefinition(name="greet", owner=fx.GreetingPrompts, method="greet")
        assert not config.is_prompt_enabled(prompt)

    def test_dangerous_tools_switch(self) -> None:
        config = AppConfig(capabilities={"enable_dangerous_tools": False})
        assert config.is_tool_enabled(_tool())
        assert not config.is_tool_enabled(_tool(dangerous=True))

    def test_disabled_lists(self) -> None:
        config = AppConfig(
            capabilities={
                "disabled_tools": ["echo"],
                "disabled_prompts": ["greet"],
                "disabled_resources": ["notes://index", "note"],
            }
        )
        assert not config.is_tool_enabled(_tool("echo"))
        assert config.is_tool_enabled(_tool("shout"))
        assert not config.is_prompt_enabled(
            PromptDefinition(name="greet", owner=fx.GreetingPrompts, method="greet")
        )
        static = ResourceDefinition(
            name="note_index", uri="notes://index", owner=fx.NoteResources, method="index"
        )
        template = ResourceDefinition(
            name="note",
            uri="notes://{slug}",
            owner=fx.NoteResources,
            method="note",
            is_template=True,
        )
        assert not config.is_resource_enabled(static)
        assert not config.is_resource_enabled(template)
