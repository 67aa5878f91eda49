"""MCP server implementation using FastMCP.

Creates and configures the MCP server with:
    - Configuration loading
    - Runtime context establishment
    - Binding of every enabled catalog definition
    - Tool discovery from extension discovery paths
    - Argument completion backed by completion providers
"""

from __future__ import annotations

import contextvars
from typing import Any

from mcp.server.fastmcp import FastMCP
from mcp.types import (
    Completion,
    CompletionArgument,
    CompletionContext,
    PromptReference,
    ResourceTemplateReference,
    ToolAnnotations,
)

from mcpcatalog.capabilities.catalog import CapabilityCatalog
from mcpcatalog.capabilities.completions import CompletionProvider
from mcpcatalog.capabilities.conditions import is_class_available
from mcpcatalog.capabilities.definitions import (
    CapabilityDefinition,
    PromptDefinition,
    ResourceDefinition,
    ToolDefinition,
)
from mcpcatalog.capabilities.discovery import scan_discovery_path
from mcpcatalog.capabilities.extractor import ToolExtractor
from mcpcatalog.core.config import AppConfig, load_config
from mcpcatalog.core.console import setup_logging
from mcpcatalog.core.result import Err, Ok
from mcpcatalog.core.runtime import RuntimeContext, set_runtime_context
from mcpcatalog.mcp import bind_handler, logger

# MCP caps a completion response at 100 values
MAX_COMPLETION_VALUES = 100

# Token for the long-running runtime context
_runtime_token: contextvars.Token[RuntimeContext | None] | None = None


def _establish_runtime_context(config: AppConfig, catalog: CapabilityCatalog) -> None:
    """Establish a long-running runtime context for the MCP server.

    MCP servers run indefinitely, so the context is set at startup and
    never reset.
    """
    global _runtime_token
    from uuid import uuid4

    ctx = RuntimeContext(config=config, catalog=catalog, trace_id=f"mcp-{uuid4().hex[:8]}")
    _runtime_token = set_runtime_context(ctx)
    logger.info("Runtime context established: trace_id=%s", ctx.trace_id)


def _load_configuration() -> AppConfig:
    config, meta = load_config()
    if meta.error:
        logger.warning("Config error in %s, using defaults: %s", meta.path, meta.error)
    elif meta.file_loaded:
        logger.info("MCP Server loaded config from %s", meta.path)
    return config


# ---------------------------------------------------------------------------
# Binding
# ---------------------------------------------------------------------------


def _bind_tool(server: FastMCP, definition: ToolDefinition) -> bool:
    try:
        handler = bind_handler(definition)
        server.add_tool(
            handler,
            name=definition.name,
            description=definition.description or None,
            annotations=ToolAnnotations(destructiveHint=True) if definition.dangerous else None,
        )
    except Exception as exc:
        logger.error("Failed to register tool %s", definition.name, exc_info=exc)
        return False
    return True


def register_tools(server: FastMCP, catalog: CapabilityCatalog, config: AppConfig) -> set[str]:
    """Bind every enabled tool, then tools found on extension discovery paths.

    Returns the names of the tools that were bound.
    """
    bound: set[str] = set()
    registry = catalog.tools

    for definitions in (registry.get_core_definitions(), registry.get_external_definitions()):
        for definition in definitions.values():
            if not config.is_tool_enabled(definition):
                logger.debug("Tool %s is disabled by configuration", definition.name)
                continue
            if _bind_tool(server, definition):
                bound.add(definition.name)

    bound |= register_discovered_tools(server, catalog, config, bound)
    logger.info("Registered %d MCP tools from the catalog", len(bound))
    return bound


def register_discovered_tools(
    server: FastMCP, catalog: CapabilityCatalog, config: AppConfig, already_bound: set[str]
) -> set[str]:
    """Bind tools from non-core discovery paths that are not bound yet."""
    extractor = ToolExtractor()
    bound: set[str] = set()

    for source, discovery in catalog.tools.get_discovery_paths().items():
        if source == "core":
            continue
        for cls in scan_discovery_path(discovery, source):
            match extractor.validate(cls):
                case Err(err):
                    logger.warning("[%s] %s", source, err.message)
                    continue
                case Ok(valid):
                    pass
            if not is_class_available(valid):
                logger.debug("Skipping unavailable discovered tools %s", valid.__qualname__)
                continue
            try:
                definitions = extractor.extract(valid, source)
            except Exception as exc:
                logger.warning(
                    "[%s] Cannot extract tools from class '%s': %s", source, valid.__qualname__, exc
                )
                continue
            for definition in definitions:
                if definition.name in already_bound or definition.name in bound:
                    continue
                if not config.is_tool_enabled(definition):
                    continue
                if _bind_tool(server, definition):
                    bound.add(definition.name)

    return bound


def register_prompts(server: FastMCP, catalog: CapabilityCatalog, config: AppConfig) -> int:
    registered = 0
    for definition in catalog.prompts.get_definitions().values():
        if not config.is_prompt_enabled(definition):
            logger.debug("Prompt %s is disabled by configuration", definition.name)
            continue
        try:
            handler = bind_handler(definition)
            server.prompt(name=definition.name, description=definition.description or None)(
                handler
            )
            registered += 1
        except Exception as exc:
            logger.error("Failed to register prompt %s", definition.name, exc_info=exc)

    logger.info("Registered %d MCP prompts from the catalog", registered)
    return registered


def register_resources(server: FastMCP, catalog: CapabilityCatalog, config: AppConfig) -> int:
    registered = 0
    for definition in catalog.resources.get_definitions().values():
        if not config.is_resource_enabled(definition):
            logger.debug("Resource %s is disabled by configuration", definition.key)
            continue
        options: dict[str, Any] = {
            "name": definition.name,
            "description": definition.description or None,
        }
        if definition.mime_type:
            options["mime_type"] = definition.mime_type
        try:
            handler = bind_handler(definition)
            server.resource(definition.uri, **options)(handler)
            registered += 1
        except Exception as exc:
            logger.error("Failed to register resource %s", definition.key, exc_info=exc)

    logger.info("Registered %d MCP resources from the catalog", registered)
    return registered


# ---------------------------------------------------------------------------
# Completions
# ---------------------------------------------------------------------------


class CompletionResolver:
    """Answers completion requests from the catalog's completion providers.

    Provider instances are kept for the life of the resolver so their
    value caches survive between requests. register_completions() clears
    them whenever the catalog is reset.
    """

    def __init__(self, catalog: CapabilityCatalog) -> None:
        self._catalog = catalog
        self._providers: dict[type, CompletionProvider] = {}

    def find_prompt(self, name: str) -> PromptDefinition | None:
        return self._catalog.prompts.get_definition(name)

    def find_template(self, uri_template: str) -> ResourceDefinition | None:
        for definition in self._catalog.resources.get_template_definitions().values():
            if definition.uri == uri_template:
                return definition
        return None

    def complete(
        self, definition: CapabilityDefinition | None, argument: str, value: str
    ) -> list[str]:
        if definition is None:
            return []
        provider_cls = definition.completion_providers.get(argument)
        if provider_cls is None:
            return []

        try:
            provider = self._providers.get(provider_cls)
            if provider is None:
                provider = provider_cls()
                self._providers[provider_cls] = provider
            values = provider.get_completions(value)
        except Exception as exc:
            logger.warning(
                "Completion provider %s failed for %s.%s: %s",
                provider_cls.__name__,
                definition.name,
                argument,
                exc,
            )
            return []
        return values[:MAX_COMPLETION_VALUES]

    def clear(self) -> None:
        for provider in self._providers.values():
            provider.clear_cache()


def register_completions(server: FastMCP, catalog: CapabilityCatalog) -> CompletionResolver:
    resolver = CompletionResolver(catalog)
    catalog.on_reset(resolver.clear)

    @server.completion()
    async def handle_completion(
        ref: PromptReference | ResourceTemplateReference,
        argument: CompletionArgument,
        context: CompletionContext | None,
    ) -> Completion | None:
        if isinstance(ref, PromptReference):
            definition: CapabilityDefinition | None = resolver.find_prompt(ref.name)
        else:
            definition = resolver.find_template(str(ref.uri))

        values = resolver.complete(definition, argument.name, argument.value)
        return Completion(values=values, total=len(values), hasMore=False)

    return resolver


# ---------------------------------------------------------------------------
# Server factory
# ---------------------------------------------------------------------------


def _log_catalog(catalog: CapabilityCatalog) -> None:
    for kind, summary in catalog.get_summary().items():
        logger.info(
            "Catalog %s: %d total, by source %s, %d errors",
            kind,
            summary.total,
            summary.by_source,
            summary.errors,
        )
    for kind, errors in catalog.get_all_errors().items():
        for error in errors:
            logger.warning("Catalog %s error: %s", kind, error)


def create_server(
    config: AppConfig | None = None, catalog: CapabilityCatalog | None = None
) -> FastMCP:
    if config is None:
        config = _load_configuration()
    if catalog is None:
        catalog = CapabilityCatalog.from_config(config)

    _establish_runtime_context(config, catalog)

    server = FastMCP(config.server.name, instructions=config.server.instructions)
    if not config.capabilities.enabled:
        logger.warning("Capabilities are disabled; the server exposes nothing")

    register_tools(server, catalog, config)
    register_prompts(server, catalog, config)
    register_resources(server, catalog, config)
    register_completions(server, catalog)
    _log_catalog(catalog)
    return server


def main() -> None:
    config = _load_configuration()
    setup_logging(level=config.server.log_level)
    create_server(config).run()


if __name__ == "__main__":
    main()
