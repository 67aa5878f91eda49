from __future__ import annotations

from typing import Annotated, Any

from mcpcatalog import __version__
from mcpcatalog.capabilities.kinds import ToolCategory
from mcpcatalog.capabilities.markers import complete_with, tool, tool_meta
from mcpcatalog.core.result import CapabilityExecutionError
from mcpcatalog.mcp import get_catalog
from mcpcatalog.mcp.completions import KindProvider, ToolCategoryProvider


class CatalogTools:
    """Introspection of the capability catalog this server was built from."""

    @tool()
    @tool_meta(ToolCategory.CATALOG)
    def get_catalog_info(self) -> dict[str, Any]:
        """Return catalog counts per kind, source, and category, plus the error total."""
        catalog = get_catalog()
        return {
            "version": __version__,
            "summary": catalog.summary_dict(),
            "totalErrors": catalog.get_total_errors(),
        }

    @tool()
    @tool_meta(ToolCategory.CATALOG)
    def list_capabilities(
        self,
        kind: Annotated[str, complete_with(KindProvider)] = "tools",
        source: str | None = None,
        category: Annotated[str | None, complete_with(ToolCategoryProvider)] = None,
    ) -> list[dict[str, Any]]:
        """List registered capabilities of one kind, optionally filtered.

        Args:
            kind: One of "tools", "prompts", or "resources".
            source: Only include capabilities registered under this source.
            category: Only include capabilities in this category.
        """
        catalog = get_catalog()
        registries = {
            "tools": catalog.tools,
            "prompts": catalog.prompts,
            "resources": catalog.resources,
        }
        registry = registries.get(kind)
        if registry is None:
            raise CapabilityExecutionError(
                f"Unknown capability kind '{kind}'", context={"expected": ", ".join(registries)}
            )

        return [
            definition.to_dict()
            for definition in registry.get_definitions().values()
            if (source is None or definition.source == source)
            and (category is None or definition.category == category)
        ]

    @tool(description="Re-run discovery so newly installed extensions are registered.")
    @tool_meta(ToolCategory.CATALOG)
    def reload_catalog(self) -> dict[str, Any]:
        catalog = get_catalog()
        before = {kind: s.total for kind, s in catalog.get_summary().items()}
        catalog.reset()
        after = catalog.summary_dict()
        return {
            "before": before,
            "after": {kind: summary["total"] for kind, summary in after.items()},
            "errors": catalog.get_all_errors(),
            "note": "Handlers already bound to this server session are unchanged.",
        }
