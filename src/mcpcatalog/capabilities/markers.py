"""Declarative capability markers.

Contributor classes declare capabilities by decorating public methods:

    class ReportTools:
        @tool(description="Summarize the latest report")
        @tool_meta(category="reports", condition="has_reports")
        def summarize_report(
            self, report: Annotated[str, complete_with(ReportNameProvider)]
        ) -> dict[str, object]:
            ...

        def has_reports(self) -> bool:
            ...

Decorators attach frozen marker objects to the function and return it
unchanged, so stacking order does not matter and nothing is wrapped.
The extractor reads the markers back with get_marker().
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, TypeVar

from mcpcatalog.capabilities.kinds import DEFAULT_CATEGORY, category_value

if TYPE_CHECKING:
    from mcpcatalog.capabilities.completions import CompletionProvider

F = TypeVar("F", bound=Callable[..., Any])

# Attribute names the markers are stored under
TOOL_MARKER_ATTR = "__mcp_tool__"
TOOL_META_ATTR = "__mcp_tool_meta__"
PROMPT_MARKER_ATTR = "__mcp_prompt__"
PROMPT_META_ATTR = "__mcp_prompt_meta__"
RESOURCE_MARKER_ATTR = "__mcp_resource__"
RESOURCE_TEMPLATE_MARKER_ATTR = "__mcp_resource_template__"
RESOURCE_META_ATTR = "__mcp_resource_meta__"


# ---------------------------------------------------------------------------
# Marker payloads
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ToolMarker:
    name: str | None = None
    description: str | None = None


@dataclass(frozen=True, slots=True)
class PromptMarker:
    name: str | None = None
    description: str | None = None


@dataclass(frozen=True, slots=True)
class ResourceMarker:
    uri: str
    name: str | None = None
    description: str | None = None
    mime_type: str | None = None


@dataclass(frozen=True, slots=True)
class ResourceTemplateMarker:
    uri_template: str
    name: str | None = None
    description: str | None = None
    mime_type: str | None = None


@dataclass(frozen=True, slots=True)
class CapabilityMeta:
    """Secondary metadata: category, condition method, and the dangerous flag (tools only)."""

    category: str = DEFAULT_CATEGORY
    condition: str | None = None
    dangerous: bool = False


@dataclass(frozen=True, slots=True)
class CompletionMarker:
    """Per-parameter completion provider, used inside typing.Annotated."""

    provider: type[CompletionProvider]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _target(fn: Any) -> Any:
    # staticmethod/classmethod objects: mark the underlying function
    return getattr(fn, "__func__", fn)


def _attach(attr: str, marker: object) -> Callable[[F], F]:
    def decorator(fn: F) -> F:
        setattr(_target(fn), attr, marker)
        return fn

    return decorator


def _condition_name(condition: str | Callable[..., Any] | None) -> str | None:
    if condition is None or isinstance(condition, str):
        return condition
    name = getattr(_target(condition), "__name__", None)
    if not isinstance(name, str):
        raise TypeError(f"Condition {condition!r} has no __name__")
    return name


def get_marker(fn: object, attr: str) -> Any | None:
    """Return the marker stored under attr on fn, or None."""
    return getattr(_target(fn), attr, None)


# ---------------------------------------------------------------------------
# Tool markers
# ---------------------------------------------------------------------------


def tool(name: str | None = None, description: str | None = None) -> Callable[[F], F]:
    """Mark a method as an MCP tool."""
    return _attach(TOOL_MARKER_ATTR, ToolMarker(name=name, description=description))


def tool_meta(
    category: str | Enum = DEFAULT_CATEGORY,
    *,
    dangerous: bool = False,
    condition: str | Callable[..., Any] | None = None,
) -> Callable[[F], F]:
    """Attach category, dangerous flag, and an availability condition to a tool."""
    meta = CapabilityMeta(
        category=category_value(category),
        condition=_condition_name(condition),
        dangerous=dangerous,
    )
    return _attach(TOOL_META_ATTR, meta)


# ---------------------------------------------------------------------------
# Prompt markers
# ---------------------------------------------------------------------------


def prompt(name: str | None = None, description: str | None = None) -> Callable[[F], F]:
    """Mark a method as an MCP prompt."""
    return _attach(PROMPT_MARKER_ATTR, PromptMarker(name=name, description=description))


def prompt_meta(
    category: str | Enum = DEFAULT_CATEGORY,
    *,
    condition: str | Callable[..., Any] | None = None,
) -> Callable[[F], F]:
    meta = CapabilityMeta(category=category_value(category), condition=_condition_name(condition))
    return _attach(PROMPT_META_ATTR, meta)


# ---------------------------------------------------------------------------
# Resource markers
# ---------------------------------------------------------------------------


def resource(
    uri: str,
    *,
    name: str | None = None,
    description: str | None = None,
    mime_type: str | None = None,
) -> Callable[[F], F]:
    """Mark a method as a static MCP resource served at uri."""
    marker = ResourceMarker(uri=uri, name=name, description=description, mime_type=mime_type)
    return _attach(RESOURCE_MARKER_ATTR, marker)


def resource_template(
    uri_template: str,
    *,
    name: str | None = None,
    description: str | None = None,
    mime_type: str | None = None,
) -> Callable[[F], F]:
    """Mark a method as a parameterized MCP resource (e.g. ``notes://{slug}``)."""
    marker = ResourceTemplateMarker(
        uri_template=uri_template, name=name, description=description, mime_type=mime_type
    )
    return _attach(RESOURCE_TEMPLATE_MARKER_ATTR, marker)


def resource_meta(
    category: str | Enum = DEFAULT_CATEGORY,
    *,
    condition: str | Callable[..., Any] | None = None,
) -> Callable[[F], F]:
    meta = CapabilityMeta(category=category_value(category), condition=_condition_name(condition))
    return _attach(RESOURCE_META_ATTR, meta)


# ---------------------------------------------------------------------------
# Parameter markers
# ---------------------------------------------------------------------------


def complete_with(provider: type[CompletionProvider]) -> CompletionMarker:
    """Declare a completion provider for a parameter: ``Annotated[str, complete_with(P)]``."""
    return CompletionMarker(provider=provider)


__all__ = [
    "CapabilityMeta",
    "CompletionMarker",
    "PROMPT_MARKER_ATTR",
    "PROMPT_META_ATTR",
    "PromptMarker",
    "RESOURCE_MARKER_ATTR",
    "RESOURCE_META_ATTR",
    "RESOURCE_TEMPLATE_MARKER_ATTR",
    "ResourceMarker",
    "ResourceTemplateMarker",
    "TOOL_MARKER_ATTR",
    "TOOL_META_ATTR",
    "ToolMarker",
    "complete_with",
    "get_marker",
    "prompt",
    "prompt_meta",
    "resource",
    "resource_meta",
    "resource_template",
    "tool",
    "tool_meta",
]
