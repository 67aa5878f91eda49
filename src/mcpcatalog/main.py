from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from uuid import uuid4

import typer
from rich import box
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .capabilities.catalog import CapabilityCatalog
from .capabilities.definitions import (
    CapabilityDefinition,
    PromptDefinition,
    ResourceDefinition,
    ToolDefinition,
)
from .core.config import AppConfig, ConfigLoadResult, load_config
from .core.console import console, setup_logging
from .core.decorators import handle_exceptions
from .core.result import ConfigurationError
from .core.runtime import RuntimeContext, set_runtime_context

app = typer.Typer(help="mcp-catalog: capability registration and discovery for MCP servers.")
logger = logging.getLogger(__name__)


class KindOption(str, Enum):
    tools = "tools"
    prompts = "prompts"
    resources = "resources"


@dataclass
class AppState:
    config: AppConfig
    config_meta: ConfigLoadResult
    logger: logging.Logger
    catalog: CapabilityCatalog
    runtime_ctx: RuntimeContext = field(default=None)  # type: ignore[assignment]


@app.callback()
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Path to a config file (TOML or JSON)."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    # load_config is safe: syntax and validation errors come back in meta.error
    loaded_config, meta = load_config(config_path=config)
    logger = setup_logging(level=loaded_config.server.log_level, verbose=verbose)

    catalog = CapabilityCatalog.from_config(loaded_config)
    runtime = RuntimeContext(
        config=loaded_config, catalog=catalog, trace_id=f"cli-{uuid4().hex[:8]}"
    )
    set_runtime_context(runtime)

    ctx.obj = AppState(
        config=loaded_config,
        config_meta=meta,
        logger=logger,
        catalog=catalog,
        runtime_ctx=runtime,
    )

    if meta.error:
        # Display "Safe Mode" Warning
        console.print(
            Panel(
                f"[bold red]Configuration Error - Safe Mode Active[/bold red]\n\n"
                f"Failed to load {escape(str(meta.path))}:\n{escape(meta.error)}\n\n"
                f"[yellow]Using default settings.[/yellow]",
                border_style="red",
            )
        )
    else:
        logger.debug(
            "Loaded configuration from %s (env overrides: %s, trace: %s)",
            meta.path,
            sorted(meta.env_overrides),
            runtime.trace_id,
        )


def _definitions_for(catalog: CapabilityCatalog, kind: KindOption) -> list[CapabilityDefinition]:
    registry = {
        KindOption.tools: catalog.tools,
        KindOption.prompts: catalog.prompts,
        KindOption.resources: catalog.resources,
    }[kind]
    return list(registry.get_definitions().values())


def _is_enabled(config: AppConfig, definition: CapabilityDefinition) -> bool:
    if isinstance(definition, ToolDefinition):
        return config.is_tool_enabled(definition)
    if isinstance(definition, PromptDefinition):
        return config.is_prompt_enabled(definition)
    if isinstance(definition, ResourceDefinition):
        return config.is_resource_enabled(definition)
    return False


@app.command("serve")
@handle_exceptions
def serve(ctx: typer.Context) -> None:
    """Run the MCP server over stdio."""
    from .mcp.server import create_server

    state: AppState = ctx.obj
    create_server(state.config, state.catalog).run()


@app.command("list")
@handle_exceptions
def list_capabilities(
    ctx: typer.Context,
    kind: list[KindOption] | None = typer.Option(
        None, "--kind", "-k", help="Only list these kinds (repeatable)."
    ),
    source: str | None = typer.Option(None, "--source", "-s", help="Only list this source."),
) -> None:
    """List registered capabilities."""
    state: AppState = ctx.obj
    kinds = kind or list(KindOption)

    for selected in kinds:
        definitions = _definitions_for(state.catalog, selected)
        if source is not None:
            definitions = [d for d in definitions if d.source == source]

        table = Table(title=selected.value.capitalize(), box=box.SIMPLE_HEAVY, expand=True)
        table.add_column("Name", style="cyan", no_wrap=True)
        table.add_column("Source", style="magenta")
        table.add_column("Category", style="green")
        table.add_column("Enabled", style="white")
        table.add_column("Description", style="white")

        for definition in sorted(definitions, key=lambda d: d.key):
            flags = "yes" if _is_enabled(state.config, definition) else "no"
            if getattr(definition, "dangerous", False):
                flags += " (dangerous)"
            table.add_row(
                definition.key,
                definition.source,
                definition.category,
                flags,
                escape(definition.description) or "-",
            )

        console.print(table)


@app.command("summary")
@handle_exceptions
def show_summary(ctx: typer.Context) -> None:
    """Show counts per kind, source, and category."""
    state: AppState = ctx.obj

    table = Table(title="Catalog summary", box=box.SIMPLE, expand=True)
    table.add_column("Kind", style="cyan", no_wrap=True)
    table.add_column("Total", style="white")
    table.add_column("By source", style="magenta")
    table.add_column("By category", style="green")
    table.add_column("Errors", style="red")
    table.add_column("Extras", style="white")

    for kind, summary in state.catalog.get_summary().items():
        table.add_row(
            kind,
            str(summary.total),
            ", ".join(f"{k}={v}" for k, v in sorted(summary.by_source.items())),
            ", ".join(f"{k}={v}" for k, v in sorted(summary.by_category.items())),
            str(summary.errors),
            ", ".join(f"{k}={v}" for k, v in summary.extras.items()),
        )

    console.print(table)


@app.command("errors")
@handle_exceptions
def show_errors(
    ctx: typer.Context,
    strict: bool = typer.Option(False, "--strict", help="Exit with code 1 when errors exist."),
) -> None:
    """Show registration errors collected while building the catalog."""
    state: AppState = ctx.obj
    all_errors = state.catalog.get_all_errors()
    total = state.catalog.get_total_errors()

    if total == 0:
        console.print("[green]No registration errors.[/green]")
        return

    for kind, errors in all_errors.items():
        for error in errors:
            console.print(f"[yellow]{kind}[/yellow] {escape(error)}", highlight=False)

    if strict:
        raise ConfigurationError(f"{total} registration error(s)")


@app.command("config")
def show_config(ctx: typer.Context) -> None:
    """Show the active configuration and where it came from."""
    state: AppState = ctx.obj
    config = state.config
    meta = state.config_meta

    table = Table(title="Config", box=box.SIMPLE, expand=True)
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")

    for group, values in config.model_dump().items():
        for key, value in values.items():
            if key == "instructions":
                value = f"{len(str(value))} chars"
            table.add_row(f"{group}.{key}", str(value))

    console.print(table)

    meta_lines = [
        f"Path: {meta.path}",
        "File loaded: yes" if meta.file_loaded else "File loaded: no (using defaults + env)",
    ]

    if meta.env_overrides:
        meta_lines.append("Env overrides: " + ", ".join(sorted(meta.env_overrides)))

    console.print(Panel("\n".join(meta_lines), title="Config source", box=box.SIMPLE))


@app.command("version")
def show_version() -> None:
    """Print the mcp-catalog version."""
    console.print(__version__)


def cli() -> None:
    app()


if __name__ == "__main__":
    cli()
