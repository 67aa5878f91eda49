"""Capability kinds, categories, and namespace constants."""

from __future__ import annotations

from enum import Enum

CORE_SOURCE = "core"
DEFAULT_SOURCE = "plugin"

# Sources that only the bundled core may register under.
RESERVED_SOURCES: frozenset[str] = frozenset({CORE_SOURCE, "mcp-catalog", "mcp"})

DEFAULT_CATEGORY = "general"


class CapabilityKind(str, Enum):
    """The three kinds of capability an MCP server exposes."""

    TOOL = "tool"
    PROMPT = "prompt"
    RESOURCE = "resource"

    @property
    def plural(self) -> str:
        return f"{self.value}s"


class ToolCategory(str, Enum):
    """Categories for bundled tools. Extensions may use any string."""

    CATALOG = "catalog"
    ENVIRONMENT = "environment"
    REPOSITORY = "repository"
    SYSTEM = "system"
    DEBUGGING = "debugging"
    PLUGIN = "plugin"
    GENERAL = "general"


class PromptCategory(str, Enum):
    """Categories for bundled prompts."""

    CATALOG = "catalog"
    ENVIRONMENT = "environment"
    WORKFLOW = "workflow"
    GENERAL = "general"


class ResourceCategory(str, Enum):
    """Categories for bundled resources."""

    CATALOG = "catalog"
    ENVIRONMENT = "environment"
    CONFIG = "config"
    GENERAL = "general"


def category_value(category: str | Enum | None) -> str:
    """Normalize a category enum member or free-form string."""
    if category is None:
        return DEFAULT_CATEGORY
    if isinstance(category, Enum):
        return str(category.value)
    return category or DEFAULT_CATEGORY


__all__ = [
    "CORE_SOURCE",
    "CapabilityKind",
    "DEFAULT_CATEGORY",
    "DEFAULT_SOURCE",
    "PromptCategory",
    "RESERVED_SOURCES",
    "ResourceCategory",
    "ToolCategory",
    "category_value",
]
