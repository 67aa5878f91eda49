"""Completion providers used by the bundled contributors."""

from __future__ import annotations

from collections.abc import Sequence

from mcpcatalog.capabilities.completions import CompletionProvider, StaticCompletionProvider
from mcpcatalog.capabilities.kinds import ToolCategory
from mcpcatalog.core.environment import installed_packages
from mcpcatalog.mcp import get_catalog


class KindProvider(StaticCompletionProvider):
    values = ("tools", "prompts", "resources")


class ToolCategoryProvider(StaticCompletionProvider):
    values = tuple(category.value for category in ToolCategory)


class ToolNameProvider(CompletionProvider):
    def fetch_values(self) -> Sequence[str]:
        return sorted(get_catalog().tools.get_definitions())


class PromptNameProvider(CompletionProvider):
    def fetch_values(self) -> Sequence[str]:
        return sorted(get_catalog().prompts.get_definitions())


class ResourceTemplateNameProvider(CompletionProvider):
    def fetch_values(self) -> Sequence[str]:
        return sorted(get_catalog().resources.get_template_definitions())


class CapabilityNameProvider(CompletionProvider):
    """Tool and prompt names plus resource keys."""

    def fetch_values(self) -> Sequence[str]:
        catalog = get_catalog()
        names = {
            *catalog.tools.get_definitions(),
            *catalog.prompts.get_definitions(),
            *catalog.resources.get_definitions(),
        }
        return sorted(names)


class InstalledPackageProvider(CompletionProvider):
    def fetch_values(self) -> Sequence[str]:
        return [name for name, _ in installed_packages()]


__all__ = [
    "CapabilityNameProvider",
    "InstalledPackageProvider",
    "KindProvider",
    "PromptNameProvider",
    "ResourceTemplateNameProvider",
    "ToolCategoryProvider",
    "ToolNameProvider",
]
