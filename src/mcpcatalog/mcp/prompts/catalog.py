from __future__ import annotations

from typing import Annotated

from mcpcatalog.capabilities.definitions import CapabilityDefinition
from mcpcatalog.capabilities.kinds import PromptCategory
from mcpcatalog.capabilities.markers import complete_with, prompt, prompt_meta
from mcpcatalog.core.config import EXTENSION_GROUP
from mcpcatalog.core.result import CapabilityExecutionError
from mcpcatalog.mcp import get_catalog
from mcpcatalog.mcp.completions import CapabilityNameProvider, KindProvider

_EXTENSION_HOOKS = {
    "tools": ("register_tools", "add_tool", "@tool"),
    "prompts": ("register_prompts", "add_prompt", "@prompt"),
    "resources": ("register_resources", "add_resource", "@resource"),
}


def _find_definition(name: str) -> CapabilityDefinition | None:
    catalog = get_catalog()
    for registry in (catalog.tools, catalog.prompts, catalog.resources):
        definition = registry.get_definition(name)
        if definition is not None:
            return definition
    return None


class CatalogPrompts:
    @prompt()
    @prompt_meta(PromptCategory.CATALOG)
    def explain_capability(self, name: Annotated[str, complete_with(CapabilityNameProvider)]) -> str:
        """Explain what a registered capability does and how to call it."""
        definition = _find_definition(name)
        if definition is None:
            raise CapabilityExecutionError(f"No capability named '{name}' is registered")

        lines = [
            f"Explain the MCP {definition.kind.value} '{definition.name}' to the user.",
            "",
            f"Description: {definition.description or '(none provided)'}",
            f"Registered by: {definition.source} ({definition.owner_name}.{definition.method})",
            f"Category: {definition.category}",
        ]
        if definition.condition:
            lines.append(f"Only available while '{definition.condition}' holds.")
        if getattr(definition, "dangerous", False):
            lines.append("It is flagged as dangerous; say what it can change before using it.")
        if definition.completion_providers:
            lines.append(
                "Arguments with suggestions: " + ", ".join(sorted(definition.completion_providers))
            )
        lines.extend(["", "Describe when to use it and give one example call."])
        return "\n".join(lines)

    @prompt()
    @prompt_meta(PromptCategory.WORKFLOW)
    def plan_extension(
        self,
        package: str,
        capability_kind: Annotated[str, complete_with(KindProvider)] = "tools",
    ) -> str:
        """Plan a third-party extension package that contributes capabilities."""
        hook, method, marker = _EXTENSION_HOOKS.get(capability_kind, _EXTENSION_HOOKS["tools"])
        return "\n".join(
            [
                f"Help me write a catalog extension in the package '{package}' that adds {capability_kind}.",
                "",
                f"1. Write a contributor class whose public methods carry the {marker} marker.",
                "   The class must be concrete and constructible without arguments.",
                f"2. Subclass CatalogExtension and implement {hook}(event), calling",
                f"   event.{method}(MyContributor, '{package}').",
                "   Do not use the reserved sources 'core', 'mcp-catalog', or 'mcp'.",
                f"3. Publish the extension under the '{EXTENSION_GROUP}' entry-point group.",
                "4. Verify with `mcp-catalog list --source " + package + "` and `mcp-catalog errors`.",
            ]
        )
