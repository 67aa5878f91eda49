"""Lazy, memoized capability registries.

Each registry owns the result of one registration pass for its kind. The
pass runs on the first query:

    1. a fresh registration event is created
    2. the bundled core contributors are registered under "core"
    3. every extension's hook for the kind receives the event
    4. contributions, definitions, and errors are memoized

reset() drops the memoized state; the next query runs a new pass that
reflects the current core contributor list and extensions.

Usage:
    from mcpcatalog.capabilities.registry import ToolRegistry

    tools = ToolRegistry(extensions=[ReportsExtension()])
    definition = tools.get_definition("summarize_report")
    if definition is not None and definition.is_condition_met():
        ...
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, ClassVar, Generic, TypeVar

from mcpcatalog.capabilities.definitions import (
    CapabilityDefinition,
    PromptDefinition,
    ResourceDefinition,
    ToolDefinition,
)
from mcpcatalog.capabilities.events import (
    DiscoveryPath,
    PromptRegistrationEvent,
    RegistrationEvent,
    ResourceRegistrationEvent,
    ToolRegistrationEvent,
)
from mcpcatalog.capabilities.extensions import HOOK_NAMES, extension_name
from mcpcatalog.capabilities.kinds import CORE_SOURCE, CapabilityKind
from mcpcatalog.core.console import get_logger
from mcpcatalog.core.result import RegistrationError

logger = get_logger(__name__)

DefT = TypeVar("DefT", bound=CapabilityDefinition)
EventT = TypeVar("EventT", bound=RegistrationEvent[Any])

# Directory holding the bundled tool modules
CORE_TOOLS_DIR = Path(__file__).resolve().parents[1] / "mcp" / "tools"


@dataclass(frozen=True)
class RegistrySummary:
    """Counts describing one registry's memoized state."""

    kind: str
    total: int
    by_source: dict[str, int] = field(default_factory=dict)
    by_category: dict[str, int] = field(default_factory=dict)
    errors: int = 0
    extras: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "bySource": dict(self.by_source),
            "byCategory": dict(self.by_category),
            "errors": self.errors,
            **self.extras,
        }


class CapabilityRegistry(ABC, Generic[DefT, EventT]):
    """Shared lazy-pass machinery for the three registries."""

    kind: ClassVar[CapabilityKind]
    event_class: ClassVar[type[RegistrationEvent[Any]]]

    def __init__(
        self,
        extensions: Iterable[object] = (),
        core_contributors: Sequence[type | str] | None = None,
    ) -> None:
        self._extensions: list[object] = list(extensions)
        self._core_override: list[type | str] | None = (
            list(core_contributors) if core_contributors is not None else None
        )
        self._lock = threading.RLock()
        self._event: EventT | None = None
        self._building = False

    @classmethod
    @abstractmethod
    def default_core_contributors(cls) -> list[type | str]:
        """Bundled contributors registered under the core source."""

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    @property
    def core_contributors(self) -> list[type | str]:
        if self._core_override is not None:
            return list(self._core_override)
        return self.default_core_contributors()

    def set_core_contributors(self, contributors: Sequence[type | str] | None) -> None:
        """Replace the core contributor list (None restores the bundled one)."""
        self._core_override = list(contributors) if contributors is not None else None

    @property
    def extensions(self) -> list[object]:
        return list(self._extensions)

    def add_extension(self, extension: object) -> None:
        self._extensions.append(extension)

    def is_initialized(self) -> bool:
        return self._event is not None

    def reset(self) -> None:
        with self._lock:
            self._event = None
        logger.debug("%s registry reset", self.kind.value.capitalize())

    # -------------------------------------------------------------------------
    # Registration pass
    # -------------------------------------------------------------------------

    def _ensure_initialized(self) -> EventT:
        event = self._event
        if event is not None:
            return event

        with self._lock:
            if self._event is None:
                if self._building:
                    raise RegistrationError(
                        f"{self.kind.value.capitalize()} registry queried during its own registration pass"
                    )
                self._building = True
                try:
                    self._event = self._run_pass()
                finally:
                    self._building = False
            return self._event

    def _run_pass(self) -> EventT:
        event: EventT = self.event_class()  # type: ignore[assignment]
        self._seed_core(event)

        hook = HOOK_NAMES[self.kind.plural]
        for extension in self._extensions:
            callback = getattr(extension, hook, None)
            if not callable(callback):
                continue
            try:
                callback(event)
            except Exception as exc:
                event.record_error(
                    extension_name(extension), f"Extension hook {hook} failed: {exc}"
                )

        errors = event.get_errors()
        for error in errors:
            logger.warning("%s registration error: %s", self.kind.value.capitalize(), error)

        logger.info(
            "Registered %d %s from %d sources (%d errors)",
            len(event.get_definitions()),
            self.kind.plural,
            len(event.get_contributions()),
            len(errors),
        )
        return event

    def _seed_core(self, event: EventT) -> None:
        event.add_core_batch(self.core_contributors)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_definition(self, key: str) -> DefT | None:
        return self._ensure_initialized().get_definitions().get(key)

    def get_definitions(self) -> dict[str, DefT]:
        return self._ensure_initialized().get_definitions()

    def get_definitions_by_source(self) -> dict[str, list[DefT]]:
        return self._ensure_initialized().get_definitions_by_source()

    def get_definitions_by_category(self) -> dict[str, list[DefT]]:
        return self._ensure_initialized().get_definitions_by_category()

    def get_contributors(self) -> list[type]:
        return self._ensure_initialized().get_all_contributors()

    def get_contributors_by_source(self) -> dict[str, list[type]]:
        return self._ensure_initialized().get_contributions()

    def get_errors(self) -> list[str]:
        return self._ensure_initialized().get_errors()

    def get_core_definitions(self) -> dict[str, DefT]:
        return {key: d for key, d in self.get_definitions().items() if d.source == CORE_SOURCE}

    def get_external_definitions(self) -> dict[str, DefT]:
        return {key: d for key, d in self.get_definitions().items() if d.source != CORE_SOURCE}

    def get_summary(self) -> RegistrySummary:
        definitions = list(self.get_definitions().values())
        by_source: dict[str, int] = {}
        by_category: dict[str, int] = {}
        for definition in definitions:
            by_source[definition.source] = by_source.get(definition.source, 0) + 1
            by_category[definition.category] = by_category.get(definition.category, 0) + 1

        return RegistrySummary(
            kind=self.kind.plural,
            total=len(definitions),
            by_source=by_source,
            by_category=by_category,
            errors=len(self.get_errors()),
            extras=self._summary_extras(definitions),
        )

    def _summary_extras(self, definitions: list[DefT]) -> dict[str, int]:
        return {}


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


class ToolRegistry(CapabilityRegistry[ToolDefinition, ToolRegistrationEvent]):
    kind = CapabilityKind.TOOL
    event_class = ToolRegistrationEvent

    # Registered after the core list; each one gates itself on its companion package
    conditional_core_contributors: ClassVar[tuple[str, ...]] = (
        "mcpcatalog.mcp.tools.git:GitTools",
    )

    @classmethod
    def default_core_contributors(cls) -> list[type | str]:
        return [
            "mcpcatalog.mcp.tools.catalog:CatalogTools",
            "mcpcatalog.mcp.tools.environment:EnvironmentTools",
        ]

    def _seed_core(self, event: ToolRegistrationEvent) -> None:
        contributors = self.core_contributors
        if self._core_override is None:
            contributors.extend(self.conditional_core_contributors)
        event.add_core_tools(contributors)
        event.add_core_discovery_path(CORE_TOOLS_DIR, ["."])

    def get_dangerous_definitions(self) -> dict[str, ToolDefinition]:
        return {key: d for key, d in self.get_definitions().items() if d.dangerous}

    def get_discovery_paths(self) -> dict[str, DiscoveryPath]:
        return self._ensure_initialized().get_discovery_paths()

    def _summary_extras(self, definitions: list[ToolDefinition]) -> dict[str, int]:
        return {"dangerous": sum(1 for d in definitions if d.dangerous)}


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------


class PromptRegistry(CapabilityRegistry[PromptDefinition, PromptRegistrationEvent]):
    kind = CapabilityKind.PROMPT
    event_class = PromptRegistrationEvent

    @classmethod
    def default_core_contributors(cls) -> list[type | str]:
        return [
            "mcpcatalog.mcp.prompts.catalog:CatalogPrompts",
            "mcpcatalog.mcp.prompts.packages:PackagePrompts",
        ]

    def get_definitions_with_completions(self) -> dict[str, PromptDefinition]:
        return {key: d for key, d in self.get_definitions().items() if d.has_completions()}

    def _summary_extras(self, definitions: list[PromptDefinition]) -> dict[str, int]:
        return {"with_completions": sum(1 for d in definitions if d.has_completions())}


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------


class ResourceRegistry(CapabilityRegistry[ResourceDefinition, ResourceRegistrationEvent]):
    kind = CapabilityKind.RESOURCE
    event_class = ResourceRegistrationEvent

    @classmethod
    def default_core_contributors(cls) -> list[type | str]:
        return [
            "mcpcatalog.mcp.resources.catalog:CatalogResources",
            "mcpcatalog.mcp.resources.environment:EnvironmentResources",
        ]

    def get_static_definitions(self) -> dict[str, ResourceDefinition]:
        return self._ensure_initialized().get_static_definitions()

    def get_template_definitions(self) -> dict[str, ResourceDefinition]:
        return self._ensure_initialized().get_template_definitions()

    def get_definitions_with_completions(self) -> dict[str, ResourceDefinition]:
        return {key: d for key, d in self.get_definitions().items() if d.has_completions()}

    def _summary_extras(self, definitions: list[ResourceDefinition]) -> dict[str, int]:
        return {
            "static": sum(1 for d in definitions if not d.is_template),
            "templates": sum(1 for d in definitions if d.is_template),
            "with_completions": sum(1 for d in definitions if d.has_completions()),
        }


__all__ = [
    "CORE_TOOLS_DIR",
    "CapabilityRegistry",
    "PromptRegistry",
    "RegistrySummary",
    "ResourceRegistry",
    "ToolRegistry",
]
