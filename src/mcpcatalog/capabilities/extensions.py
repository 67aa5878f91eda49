"""Extension hooks for third-party capability contributors.

Extensions are explicit objects handed to the registries. During a pass
the registry calls the hook for its kind with the fresh registration
event. Third-party packages publish extensions through the
``mcp_catalog.extensions`` entry-point group:

    [project.entry-points."mcp_catalog.extensions"]
    reports = "reports_plugin.catalog:ReportsExtension"

The entry point object may be an extension class (instantiated without
arguments), a factory returning an extension, or a ready instance.
"""

from __future__ import annotations

import importlib.metadata
import inspect
import warnings
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from mcpcatalog.core.config import EXTENSION_GROUP
from mcpcatalog.core.console import get_logger

if TYPE_CHECKING:
    from mcpcatalog.capabilities.events import (
        PromptRegistrationEvent,
        ResourceRegistrationEvent,
        ToolRegistrationEvent,
    )

logger = get_logger(__name__)

# Hook method names, keyed by capability kind plural
HOOK_NAMES = {
    "tools": "register_tools",
    "prompts": "register_prompts",
    "resources": "register_resources",
}


class CatalogExtension:
    """Base class for extensions. Override the hooks you need."""

    name: str = "extension"

    def register_tools(self, event: ToolRegistrationEvent) -> None:
        return None

    def register_prompts(self, event: PromptRegistrationEvent) -> None:
        return None

    def register_resources(self, event: ResourceRegistrationEvent) -> None:
        return None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"


@dataclass
class FunctionExtension(CatalogExtension):
    """Adapt plain callables into an extension.

    Example:
        FunctionExtension(
            "reports",
            tools=lambda event: event.add_tool(ReportTools, "reports"),
        )
    """

    name: str = "extension"
    tools: Callable[[ToolRegistrationEvent], None] | None = None
    prompts: Callable[[PromptRegistrationEvent], None] | None = None
    resources: Callable[[ResourceRegistrationEvent], None] | None = None

    def register_tools(self, event: ToolRegistrationEvent) -> None:
        if self.tools is not None:
            self.tools(event)

    def register_prompts(self, event: PromptRegistrationEvent) -> None:
        if self.prompts is not None:
            self.prompts(event)

    def register_resources(self, event: ResourceRegistrationEvent) -> None:
        if self.resources is not None:
            self.resources(event)


def extension_name(extension: object) -> str:
    """Display name used to prefix errors raised from an extension hook."""
    name = getattr(extension, "name", None)
    if isinstance(name, str) and name:
        return name
    return type(extension).__name__


# ---------------------------------------------------------------------------
# Entry point discovery
# ---------------------------------------------------------------------------


def _coerce_extension(obj: Any, ep_name: str) -> object:
    if inspect.isclass(obj) or (callable(obj) and not _has_hooks(obj)):
        obj = obj()

    if not _has_hooks(obj):
        raise TypeError(f"entry point '{ep_name}' did not produce a catalog extension")

    # Unnamed extensions take the entry point name as their source
    if getattr(obj, "name", None) in (None, "", "extension"):
        try:
            obj.name = ep_name
        except AttributeError:
            pass
    return obj


def _has_hooks(obj: object) -> bool:
    return any(callable(getattr(obj, hook, None)) for hook in HOOK_NAMES.values())


def load_entry_point_extensions(group: str = EXTENSION_GROUP) -> list[object]:
    """Discover and load extensions published under an entry-point group.

    Entry points that fail to load are skipped with a RuntimeWarning.
    """
    extensions: list[object] = []
    for entry_point in importlib.metadata.entry_points(group=group):
        try:
            extension = _coerce_extension(entry_point.load(), entry_point.name)
        except Exception as exc:
            warnings.warn(
                f"Failed to load catalog extension '{entry_point.name}' "
                f"({entry_point.value}): {exc}",
                RuntimeWarning,
                stacklevel=2,
            )
            continue

        logger.debug("Loaded catalog extension %s from %s", entry_point.name, entry_point.value)
        extensions.append(extension)

    return extensions


__all__ = [
    "CatalogExtension",
    "FunctionExtension",
    "HOOK_NAMES",
    "extension_name",
    "load_entry_point_extensions",
]
