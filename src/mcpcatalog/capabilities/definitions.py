"""Capability definition value objects.

A definition is the immutable description of one capability, extracted
from a contributor class during a registration pass. Definitions never
hold instances; the owner class is constructed on demand.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar

from mcpcatalog.capabilities.kinds import (
    CORE_SOURCE,
    DEFAULT_CATEGORY,
    DEFAULT_SOURCE,
    CapabilityKind,
)
from mcpcatalog.capabilities.references import ClassRef, class_ref_name, resolve_class


@dataclass(frozen=True, kw_only=True)
class CapabilityDefinition:
    """Fields and behavior shared by every capability kind."""

    kind: ClassVar[CapabilityKind]

    name: str
    description: str = ""
    owner: ClassRef
    method: str
    source: str = DEFAULT_SOURCE
    category: str = DEFAULT_CATEGORY
    condition: str | None = None
    completion_providers: Mapping[str, type] = field(default_factory=dict, hash=False)

    @property
    def key(self) -> str:
        """Identity within the definition's kind."""
        return self.name

    @property
    def owner_name(self) -> str:
        return class_ref_name(self.owner)

    def is_condition_met(self) -> bool:
        """Evaluate the operation-level condition against a fresh owner instance.

        Re-evaluated on every call. A missing owner class or condition method
        counts as not met. Class-level conditions are checked at registration.
        """
        if self.condition is None:
            return True

        owner = resolve_class(self.owner)
        if owner.is_err():
            return False
        owner_cls = owner.unwrap()

        if not callable(getattr(owner_cls, self.condition, None)):
            return False

        instance = owner_cls()
        return bool(getattr(instance, self.condition)())

    def is_core(self) -> bool:
        return self.source == CORE_SOURCE

    def has_completions(self) -> bool:
        return bool(self.completion_providers)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "source": self.source,
            "category": self.category,
        }

    @staticmethod
    def _common_fields(data: Mapping[str, Any]) -> dict[str, Any]:
        return {
            "name": data.get("name", ""),
            "description": data.get("description") or "",
            "owner": data.get("owner", data.get("class", "")),
            "method": data.get("method", ""),
            "source": data.get("source") or DEFAULT_SOURCE,
            "category": data.get("category") or DEFAULT_CATEGORY,
            "condition": data.get("condition"),
            "completion_providers": dict(
                data.get("completion_providers", data.get("completionProviders", {})) or {}
            ),
        }


@dataclass(frozen=True, kw_only=True)
class ToolDefinition(CapabilityDefinition):
    """An invokable tool. Dangerous tools can be switched off by configuration."""

    kind: ClassVar[CapabilityKind] = CapabilityKind.TOOL

    dangerous: bool = False

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["dangerous"] = self.dangerous
        return payload

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ToolDefinition:
        return cls(**cls._common_fields(data), dangerous=bool(data.get("dangerous", False)))


@dataclass(frozen=True, kw_only=True)
class PromptDefinition(CapabilityDefinition):
    """A prompt template exposed to clients."""

    kind: ClassVar[CapabilityKind] = CapabilityKind.PROMPT

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["hasCompletions"] = self.has_completions()
        return payload

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PromptDefinition:
        return cls(**cls._common_fields(data))


@dataclass(frozen=True, kw_only=True)
class ResourceDefinition(CapabilityDefinition):
    """A static resource (keyed by URI) or a resource template (keyed by name)."""

    kind: ClassVar[CapabilityKind] = CapabilityKind.RESOURCE

    uri: str
    is_template: bool = False
    mime_type: str | None = None

    @property
    def key(self) -> str:
        return self.name if self.is_template else self.uri

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload = {"uri": self.uri, **payload}
        payload["isTemplate"] = self.is_template
        payload["mimeType"] = self.mime_type
        payload["hasCompletions"] = self.has_completions()
        return payload

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ResourceDefinition:
        return cls(
            **cls._common_fields(data),
            uri=data.get("uri", ""),
            is_template=bool(data.get("is_template", data.get("isTemplate", False))),
            mime_type=data.get("mime_type", data.get("mimeType")),
        )


__all__ = [
    "CapabilityDefinition",
    "PromptDefinition",
    "ResourceDefinition",
    "ToolDefinition",
]
