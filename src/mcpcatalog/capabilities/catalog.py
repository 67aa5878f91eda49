"""The capability catalog: one context object owning the three registries.

The catalog replaces process-wide registry singletons. Hosts build one,
hand it to create_server() or runtime_context(), and bundled contributors
read it back through get_runtime().catalog.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import Any

from mcpcatalog.capabilities.extensions import load_entry_point_extensions
from mcpcatalog.capabilities.registry import (
    PromptRegistry,
    RegistrySummary,
    ResourceRegistry,
    ToolRegistry,
)
from mcpcatalog.core.config import EXTENSION_GROUP, AppConfig
from mcpcatalog.core.console import get_logger

logger = get_logger(__name__)


class CapabilityCatalog:
    """Lazily builds and owns one registry per capability kind."""

    def __init__(
        self,
        extensions: Iterable[object] = (),
        *,
        core_tools: Sequence[type | str] | None = None,
        core_prompts: Sequence[type | str] | None = None,
        core_resources: Sequence[type | str] | None = None,
        load_entry_points: bool = False,
        extension_group: str = EXTENSION_GROUP,
    ) -> None:
        self._explicit_extensions = list(extensions)
        self._core_tools = core_tools
        self._core_prompts = core_prompts
        self._core_resources = core_resources
        self._load_entry_points = load_entry_points
        self._extension_group = extension_group

        self._extensions: list[object] | None = None
        self._tools: ToolRegistry | None = None
        self._prompts: PromptRegistry | None = None
        self._resources: ResourceRegistry | None = None
        self._reset_listeners: list[Callable[[], None]] = []

    @classmethod
    def from_config(cls, config: AppConfig, extensions: Iterable[object] = ()) -> CapabilityCatalog:
        caps = config.capabilities
        return cls(
            extensions,
            load_entry_points=caps.load_entry_points,
            extension_group=caps.extension_group,
        )

    # -------------------------------------------------------------------------
    # Registries
    # -------------------------------------------------------------------------

    @property
    def extensions(self) -> list[object]:
        if self._extensions is None:
            discovered = (
                load_entry_point_extensions(self._extension_group)
                if self._load_entry_points
                else []
            )
            self._extensions = [*self._explicit_extensions, *discovered]
        return list(self._extensions)

    def add_extension(self, extension: object) -> None:
        """Add an extension; registries already built pick it up after reset()."""
        self._explicit_extensions.append(extension)
        if self._extensions is not None:
            self._extensions.append(extension)
        for registry in (self._tools, self._prompts, self._resources):
            if registry is not None:
                registry.add_extension(extension)

    @property
    def tools(self) -> ToolRegistry:
        if self._tools is None:
            self._tools = ToolRegistry(self.extensions, self._core_tools)
        return self._tools

    @property
    def prompts(self) -> PromptRegistry:
        if self._prompts is None:
            self._prompts = PromptRegistry(self.extensions, self._core_prompts)
        return self._prompts

    @property
    def resources(self) -> ResourceRegistry:
        if self._resources is None:
            self._resources = ResourceRegistry(self.extensions, self._core_resources)
        return self._resources

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def reset(self) -> None:
        """Reset every registry and forget them, re-discovering extensions next time."""
        for registry in (self._tools, self._prompts, self._resources):
            if registry is not None:
                registry.reset()
        self._tools = None
        self._prompts = None
        self._resources = None
        self._extensions = None
        for listener in list(self._reset_listeners):
            listener()
        logger.info("Capability catalog reset")

    def on_reset(self, listener: Callable[[], None]) -> None:
        """Call listener after every reset(), e.g. to drop cached completion values."""
        self._reset_listeners.append(listener)

    def get_summary(self) -> dict[str, RegistrySummary]:
        return {
            "tools": self.tools.get_summary(),
            "prompts": self.prompts.get_summary(),
            "resources": self.resources.get_summary(),
        }

    def get_total_errors(self) -> int:
        return sum(len(errors) for errors in self.get_all_errors().values())

    def get_all_errors(self) -> dict[str, list[str]]:
        return {
            "tools": self.tools.get_errors(),
            "prompts": self.prompts.get_errors(),
            "resources": self.resources.get_errors(),
        }

    def summary_dict(self) -> dict[str, Any]:
        return {kind: summary.to_dict() for kind, summary in self.get_summary().items()}


__all__ = ["CapabilityCatalog"]
