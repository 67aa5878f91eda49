"""Contributor validation and definition extraction.

An extractor decides whether a candidate class is a legal contributor for
its capability kind and, if so, turns every marked public method into a
definition. Validation runs these checks in order and stops at the first
failure:

    1. the reference resolves to a class
    2. the class can be introspected
    3. the class is not abstract
    4. the class can be constructed without arguments
    5. at least one public method carries the kind's marker

Failures come back as Err(RegistrationError); nothing raises past
validate().
"""

from __future__ import annotations

import inspect
import typing
from abc import ABC, abstractmethod
from collections.abc import Callable
from enum import Enum
from typing import Any, ClassVar, Generic, TypeVar

from mcpcatalog.capabilities.definitions import (
    CapabilityDefinition,
    PromptDefinition,
    ResourceDefinition,
    ToolDefinition,
)
from mcpcatalog.capabilities.kinds import DEFAULT_CATEGORY, CapabilityKind
from mcpcatalog.capabilities.markers import (
    PROMPT_MARKER_ATTR,
    PROMPT_META_ATTR,
    RESOURCE_MARKER_ATTR,
    RESOURCE_META_ATTR,
    RESOURCE_TEMPLATE_MARKER_ATTR,
    TOOL_MARKER_ATTR,
    TOOL_META_ATTR,
    CapabilityMeta,
    CompletionMarker,
    PromptMarker,
    ResourceMarker,
    ResourceTemplateMarker,
    ToolMarker,
    get_marker,
)
from mcpcatalog.capabilities.references import class_ref_name, resolve_class
from mcpcatalog.core.result import Err, Ok, RegistrationError, Result

DefT = TypeVar("DefT", bound=CapabilityDefinition)

_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


# ---------------------------------------------------------------------------
# Introspection helpers
# ---------------------------------------------------------------------------


def public_methods(cls: type) -> list[tuple[str, Callable[..., Any]]]:
    """Return public methods across the MRO in declaration order.

    Subclass definitions override base definitions of the same name.
    Static and class methods are unwrapped to their functions.
    """
    methods: dict[str, Callable[..., Any]] = {}
    for klass in reversed(cls.__mro__):
        if klass is object:
            continue
        for name, attr in vars(klass).items():
            if name.startswith("_"):
                continue
            func = getattr(attr, "__func__", attr)
            if inspect.isfunction(func):
                methods[name] = func
            else:
                methods.pop(name, None)
    return list(methods.items())


def _is_instantiable(cls: type) -> bool:
    if getattr(cls, "_is_protocol", False) or issubclass(cls, Enum):
        return False
    try:
        signature = inspect.signature(cls)
    except (TypeError, ValueError):
        return True
    return all(
        param.default is not inspect.Parameter.empty or param.kind in _VARIADIC
        for param in signature.parameters.values()
    )


def _annotated_markers(hint: Any) -> list[Any]:
    if typing.get_origin(hint) is typing.Annotated:
        return list(getattr(hint, "__metadata__", ()))
    markers: list[Any] = []
    for arg in typing.get_args(hint):
        markers.extend(_annotated_markers(arg))
    return markers


def completion_providers(fn: Callable[..., Any]) -> dict[str, type]:
    """Map parameter names to the providers declared via complete_with()."""
    try:
        hints = typing.get_type_hints(fn, include_extras=True)
    except Exception:
        # Unresolvable forward references: fall back to evaluated annotations only
        raw = getattr(fn, "__annotations__", {})
        hints = {name: hint for name, hint in raw.items() if not isinstance(hint, str)}

    providers: dict[str, type] = {}
    for param_name in inspect.signature(fn).parameters:
        hint = hints.get(param_name)
        if hint is None:
            continue
        for marker in _annotated_markers(hint):
            if isinstance(marker, CompletionMarker):
                providers[param_name] = marker.provider
                break
    return providers


def _describe(declared: str | None, fn: Callable[..., Any]) -> str:
    if declared is not None:
        return declared
    doc = inspect.getdoc(fn) or ""
    return doc.split("\n\n", 1)[0].strip()


def _meta(fn: Callable[..., Any], attr: str) -> CapabilityMeta:
    meta = get_marker(fn, attr)
    return meta if isinstance(meta, CapabilityMeta) else CapabilityMeta(category=DEFAULT_CATEGORY)


# ---------------------------------------------------------------------------
# Extractors
# ---------------------------------------------------------------------------


class MetadataExtractor(ABC, Generic[DefT]):
    """Validation and extraction for one capability kind."""

    kind: ClassVar[CapabilityKind]
    marker_attrs: ClassVar[tuple[str, ...]]
    marker_label: ClassVar[str]
    role: ClassVar[str]

    def validate(self, ref: object) -> Result[type, RegistrationError]:
        """Check that ref names a usable contributor class and return it."""
        resolved = resolve_class(ref)
        if resolved.is_err():
            return resolved
        cls = resolved.unwrap()
        name = class_ref_name(ref)

        try:
            methods = public_methods(cls)
        except Exception as exc:
            return Err(RegistrationError(f"Cannot introspect class '{name}': {exc}"))

        if inspect.isabstract(cls):
            return Err(
                RegistrationError(f"Class '{name}' is abstract and cannot be used as a {self.role}")
            )

        if not _is_instantiable(cls):
            return Err(RegistrationError(f"Class '{name}' is not instantiable"))

        if not any(self.has_marker(fn) for _, fn in methods):
            return Err(
                RegistrationError(
                    f"Class '{name}' has no public methods with {self.marker_label} marker"
                )
            )

        return Ok(cls)

    def has_marker(self, fn: Callable[..., Any]) -> bool:
        return any(get_marker(fn, attr) is not None for attr in self.marker_attrs)

    def extract(self, cls: type, source: str) -> list[DefT]:
        """Build a definition for every marked public method of cls."""
        definitions: list[DefT] = []
        for method_name, fn in public_methods(cls):
            definition = self.build_definition(cls, method_name, fn, source)
            if definition is not None:
                definitions.append(definition)
        return definitions

    @abstractmethod
    def build_definition(
        self, cls: type, method_name: str, fn: Callable[..., Any], source: str
    ) -> DefT | None:
        """Return the definition for one method, or None when it is unmarked."""


class ToolExtractor(MetadataExtractor[ToolDefinition]):
    kind = CapabilityKind.TOOL
    marker_attrs = (TOOL_MARKER_ATTR,)
    marker_label = "@tool"
    role = "tool"

    def build_definition(
        self, cls: type, method_name: str, fn: Callable[..., Any], source: str
    ) -> ToolDefinition | None:
        marker = get_marker(fn, TOOL_MARKER_ATTR)
        if not isinstance(marker, ToolMarker):
            return None
        meta = _meta(fn, TOOL_META_ATTR)
        return ToolDefinition(
            name=marker.name or method_name,
            description=_describe(marker.description, fn),
            owner=cls,
            method=method_name,
            source=source,
            category=meta.category,
            dangerous=meta.dangerous,
            condition=meta.condition,
            completion_providers=completion_providers(fn),
        )


class PromptExtractor(MetadataExtractor[PromptDefinition]):
    kind = CapabilityKind.PROMPT
    marker_attrs = (PROMPT_MARKER_ATTR,)
    marker_label = "@prompt"
    role = "prompt provider"

    def build_definition(
        self, cls: type, method_name: str, fn: Callable[..., Any], source: str
    ) -> PromptDefinition | None:
        marker = get_marker(fn, PROMPT_MARKER_ATTR)
        if not isinstance(marker, PromptMarker):
            return None
        meta = _meta(fn, PROMPT_META_ATTR)
        return PromptDefinition(
            name=marker.name or method_name,
            description=_describe(marker.description, fn),
            owner=cls,
            method=method_name,
            source=source,
            category=meta.category,
            condition=meta.condition,
            completion_providers=completion_providers(fn),
        )


class ResourceExtractor(MetadataExtractor[ResourceDefinition]):
    kind = CapabilityKind.RESOURCE
    marker_attrs = (RESOURCE_MARKER_ATTR, RESOURCE_TEMPLATE_MARKER_ATTR)
    marker_label = "@resource or @resource_template"
    role = "resource provider"

    def build_definition(
        self, cls: type, method_name: str, fn: Callable[..., Any], source: str
    ) -> ResourceDefinition | None:
        meta = _meta(fn, RESOURCE_META_ATTR)

        static = get_marker(fn, RESOURCE_MARKER_ATTR)
        if isinstance(static, ResourceMarker):
            return ResourceDefinition(
                uri=static.uri,
                name=static.name or method_name,
                description=_describe(static.description, fn),
                owner=cls,
                method=method_name,
                source=source,
                category=meta.category,
                is_template=False,
                mime_type=static.mime_type,
                condition=meta.condition,
            )

        template = get_marker(fn, RESOURCE_TEMPLATE_MARKER_ATTR)
        if isinstance(template, ResourceTemplateMarker):
            return ResourceDefinition(
                uri=template.uri_template,
                name=template.name or method_name,
                description=_describe(template.description, fn),
                owner=cls,
                method=method_name,
                source=source,
                category=meta.category,
                is_template=True,
                mime_type=template.mime_type,
                condition=meta.condition,
                completion_providers=completion_providers(fn),
            )

        return None


__all__ = [
    "MetadataExtractor",
    "PromptExtractor",
    "ResourceExtractor",
    "ToolExtractor",
    "completion_providers",
    "public_methods",
]
