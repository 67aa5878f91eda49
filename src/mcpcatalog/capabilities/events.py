"""Registration events: the collectors handed through a registration pass.

A registry creates one event per pass, seeds it with the bundled core
contributors, and then passes it to every extension. Extensions call the
caller entry point with their own source name:

    class ReportsExtension(CatalogExtension):
        name = "reports"

        def register_tools(self, event: ToolRegistrationEvent) -> None:
            event.add_tool(ReportTools, "reports")
            event.add_tool("reports_plugin.extra:ExtraTools", "reports")

Problems with one contributor never abort the pass. They become
"[source] message" strings in the event's error list and registration
continues with the next contributor.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, Generic, TypeVar

from mcpcatalog.capabilities.conditions import is_class_available
from mcpcatalog.capabilities.definitions import (
    CapabilityDefinition,
    PromptDefinition,
    ResourceDefinition,
    ToolDefinition,
)
from mcpcatalog.capabilities.extractor import (
    MetadataExtractor,
    PromptExtractor,
    ResourceExtractor,
    ToolExtractor,
)
from mcpcatalog.capabilities.kinds import (
    CORE_SOURCE,
    DEFAULT_SOURCE,
    RESERVED_SOURCES,
    CapabilityKind,
)
from mcpcatalog.capabilities.references import class_ref_name
from mcpcatalog.core.console import get_logger
from mcpcatalog.core.result import Err, Ok

logger = get_logger(__name__)

DefT = TypeVar("DefT", bound=CapabilityDefinition)


class RegistrationEvent(Generic[DefT]):
    """Accumulates contributors, definitions, and errors for one pass."""

    kind: ClassVar[CapabilityKind]
    extractor: ClassVar[MetadataExtractor]  # type: ignore[type-arg]

    def __init__(self) -> None:
        self._contributions: dict[str, list[type]] = {}
        self._definitions: dict[str, DefT] = {}
        self._errors: list[str] = []

    # -------------------------------------------------------------------------
    # Registration surface
    # -------------------------------------------------------------------------

    def add_from_caller(self, contributor: type | str, source: str = DEFAULT_SOURCE) -> None:
        """Register a contributor class under the caller's source name.

        Reserved sources are rejected with an error and nothing is registered.
        """
        if source in RESERVED_SOURCES:
            self._errors.append(
                f"[{source}] Source '{source}' is reserved for core {self.kind.plural}. "
                "Use your plugin handle."
            )
            return

        self._register(contributor, source)

    def add_core_batch(self, contributors: Iterable[type | str]) -> None:
        """Register bundled contributors under the core source (internal use)."""
        for contributor in contributors:
            self._register(contributor, CORE_SOURCE)

    def record_error(self, source: str, message: str) -> None:
        self._errors.append(f"[{source}] {message}")

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_contributions(self) -> dict[str, list[type]]:
        """Accepted contributor classes grouped by source."""
        return {source: list(classes) for source, classes in self._contributions.items()}

    def get_all_contributors(self) -> list[type]:
        return [cls for classes in self._contributions.values() for cls in classes]

    def get_definitions(self) -> dict[str, DefT]:
        return dict(self._definitions)

    def get_definitions_by_source(self) -> dict[str, list[DefT]]:
        by_source: dict[str, list[DefT]] = {}
        for definition in self._definitions.values():
            by_source.setdefault(definition.source, []).append(definition)
        return by_source

    def get_definitions_by_category(self) -> dict[str, list[DefT]]:
        by_category: dict[str, list[DefT]] = {}
        for definition in self._definitions.values():
            by_category.setdefault(definition.category, []).append(definition)
        return by_category

    def get_errors(self) -> list[str]:
        return list(self._errors)

    # -------------------------------------------------------------------------
    # Shared registration routine
    # -------------------------------------------------------------------------

    def _register(self, contributor: type | str, source: str) -> None:
        match self.extractor.validate(contributor):
            case Err(error):
                self._errors.append(f"[{source}] {error.message}")
                return
            case Ok(cls):
                pass

        if not is_class_available(cls):
            logger.debug("Skipping unavailable %s contributor %s", self.kind.value, cls.__qualname__)
            return

        try:
            definitions = self.extractor.extract(cls, source)
        except Exception as exc:
            self._errors.append(
                f"[{source}] Cannot extract {self.kind.plural} from class "
                f"'{class_ref_name(contributor)}': {exc}"
            )
            return

        self._contributions.setdefault(source, []).append(cls)

        for definition in definitions:
            previous = self._definitions.get(definition.key)
            if previous is not None:
                logger.debug(
                    "%s '%s' from %s replaces the one from %s",
                    self.kind.value.capitalize(),
                    definition.key,
                    definition.source,
                    previous.source,
                )
            self._definitions[definition.key] = definition


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DiscoveryPath:
    """A directory the transport layer scans for additional tool classes."""

    path: Path
    subdirectories: tuple[str, ...]

    def to_dict(self) -> dict[str, object]:
        return {"path": str(self.path), "subdirs": list(self.subdirectories)}


class ToolRegistrationEvent(RegistrationEvent[ToolDefinition]):
    kind = CapabilityKind.TOOL
    extractor = ToolExtractor()

    def __init__(self) -> None:
        super().__init__()
        self._discovery_paths: dict[str, DiscoveryPath] = {}

    def add_tool(self, contributor: type | str, source: str = DEFAULT_SOURCE) -> None:
        self.add_from_caller(contributor, source)

    def add_core_tools(self, contributors: Iterable[type | str]) -> None:
        self.add_core_batch(contributors)

    def add_discovery_path(
        self, path: str | Path, subdirectories: Iterable[str], source: str
    ) -> None:
        """Record a directory of tool modules for bulk discovery.

        Nothing is imported here; the server scans the directory later.
        """
        if source in RESERVED_SOURCES:
            self._errors.append(
                f"[{source}] Source '{source}' is reserved for core tools. Use your plugin handle."
            )
            return
        self._store_discovery_path(path, subdirectories, source)

    def add_core_discovery_path(self, path: str | Path, subdirectories: Iterable[str]) -> None:
        self._store_discovery_path(path, subdirectories, CORE_SOURCE)

    def get_discovery_paths(self) -> dict[str, DiscoveryPath]:
        return dict(self._discovery_paths)

    def _store_discovery_path(
        self, path: str | Path, subdirectories: Iterable[str], source: str
    ) -> None:
        directory = Path(path)
        if not directory.is_dir():
            self._errors.append(f"[{source}] Discovery path does not exist: {path}")
            return

        self._discovery_paths[source] = DiscoveryPath(
            path=directory, subdirectories=tuple(subdirectories)
        )


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------


class PromptRegistrationEvent(RegistrationEvent[PromptDefinition]):
    kind = CapabilityKind.PROMPT
    extractor = PromptExtractor()

    def add_prompt(self, contributor: type | str, source: str = DEFAULT_SOURCE) -> None:
        self.add_from_caller(contributor, source)

    def add_core_prompts(self, contributors: Iterable[type | str]) -> None:
        self.add_core_batch(contributors)


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------


class ResourceRegistrationEvent(RegistrationEvent[ResourceDefinition]):
    """Collects static resources (keyed by URI) and templates (keyed by name)."""

    kind = CapabilityKind.RESOURCE
    extractor = ResourceExtractor()

    def add_resource(self, contributor: type | str, source: str = DEFAULT_SOURCE) -> None:
        self.add_from_caller(contributor, source)

    def add_core_resources(self, contributors: Iterable[type | str]) -> None:
        self.add_core_batch(contributors)

    def get_static_definitions(self) -> dict[str, ResourceDefinition]:
        return {key: d for key, d in self._definitions.items() if not d.is_template}

    def get_template_definitions(self) -> dict[str, ResourceDefinition]:
        return {key: d for key, d in self._definitions.items() if d.is_template}


__all__ = [
    "DiscoveryPath",
    "PromptRegistrationEvent",
    "RegistrationEvent",
    "ResourceRegistrationEvent",
    "ToolRegistrationEvent",
]
