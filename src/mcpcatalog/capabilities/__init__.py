"""Capabilities package - declaration, registration, and discovery.

This package is the single source of truth for how tools, prompts, and
resources are declared (markers), validated and extracted (extractor),
collected (events), and memoized (registries, catalog).
"""

from __future__ import annotations

from mcpcatalog.capabilities.catalog import CapabilityCatalog
from mcpcatalog.capabilities.completions import CompletionProvider, StaticCompletionProvider
from mcpcatalog.capabilities.conditions import ConditionalProvider
from mcpcatalog.capabilities.definitions import (
    CapabilityDefinition,
    PromptDefinition,
    ResourceDefinition,
    ToolDefinition,
)
from mcpcatalog.capabilities.events import (
    DiscoveryPath,
    PromptRegistrationEvent,
    ResourceRegistrationEvent,
    ToolRegistrationEvent,
)
from mcpcatalog.capabilities.extensions import (
    CatalogExtension,
    FunctionExtension,
    load_entry_point_extensions,
)
from mcpcatalog.capabilities.kinds import (
    CORE_SOURCE,
    RESERVED_SOURCES,
    CapabilityKind,
    PromptCategory,
    ResourceCategory,
    ToolCategory,
)
from mcpcatalog.capabilities.markers import (
    complete_with,
    prompt,
    prompt_meta,
    resource,
    resource_meta,
    resource_template,
    tool,
    tool_meta,
)
from mcpcatalog.capabilities.registry import (
    PromptRegistry,
    RegistrySummary,
    ResourceRegistry,
    ToolRegistry,
)

__all__ = [
    "CORE_SOURCE",
    "CapabilityCatalog",
    "CapabilityDefinition",
    "CapabilityKind",
    "CatalogExtension",
    "CompletionProvider",
    "ConditionalProvider",
    "DiscoveryPath",
    "FunctionExtension",
    "PromptCategory",
    "PromptDefinition",
    "PromptRegistrationEvent",
    "PromptRegistry",
    "RESERVED_SOURCES",
    "RegistrySummary",
    "ResourceCategory",
    "ResourceDefinition",
    "ResourceRegistrationEvent",
    "ResourceRegistry",
    "StaticCompletionProvider",
    "ToolCategory",
    "ToolDefinition",
    "ToolRegistrationEvent",
    "ToolRegistry",
    "complete_with",
    "load_entry_point_extensions",
    "prompt",
    "prompt_meta",
    "resource",
    "resource_meta",
    "resource_template",
    "tool",
    "tool_meta",
]
