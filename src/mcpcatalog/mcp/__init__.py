"""Binding of catalog definitions to MCP handler callables.

Every bound handler is an async function that:
    - re-checks the definition's condition immediately before invocation
    - constructs a fresh owner instance and calls the declared method
    - converts failures into a JSON error payload instead of raising

The handler's signature mirrors the declared method without its first
parameter, with annotations resolved in the contributor's own module so
FastMCP can build argument schemas from it.
"""

from __future__ import annotations

import asyncio
import inspect
import json
import typing
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from mcpcatalog.capabilities.definitions import CapabilityDefinition
from mcpcatalog.capabilities.references import resolve_class
from mcpcatalog.core.console import get_logger
from mcpcatalog.core.result import CapabilityUnavailableError, CatalogError, Err, Ok
from mcpcatalog.core.runtime import get_runtime

if TYPE_CHECKING:
    from mcpcatalog.capabilities.catalog import CapabilityCatalog

logger = get_logger("mcp")

HandlerCallable = Callable[..., Awaitable[Any]]


def get_catalog() -> CapabilityCatalog:
    """Return the catalog from the runtime context.

    Raises:
        NoRuntimeContextError: If called outside a runtime_context() block.
    """
    return get_runtime().catalog


def format_error(error_code: str, message: str, capability: str) -> str:
    payload = {"error": error_code, "message": message, "capability": capability}
    return json.dumps(payload)


def owner_class(definition: CapabilityDefinition) -> type:
    """Resolve the definition's owner, raising CapabilityUnavailableError if it is gone."""
    match resolve_class(definition.owner):
        case Err(err):
            raise CapabilityUnavailableError(err.message, context={"capability": definition.name})
        case Ok(cls):
            return cls
    raise AssertionError("unreachable")


def handler_signature(cls: type, method_name: str) -> inspect.Signature:
    """Public signature of a declared method: no self/cls, annotations resolved."""
    raw = inspect.getattr_static(cls, method_name)
    fn = getattr(raw, "__func__", raw)
    skip_first = not isinstance(raw, staticmethod)

    try:
        hints = typing.get_type_hints(fn, include_extras=True)
    except Exception:
        hints = {}

    parameters: list[inspect.Parameter] = []
    for index, param in enumerate(inspect.signature(fn).parameters.values()):
        if index == 0 and skip_first:
            continue
        annotation = hints.get(param.name, param.annotation)
        if annotation is inspect.Parameter.empty or isinstance(annotation, str):
            annotation = Any
        parameters.append(param.replace(annotation=annotation))

    return inspect.Signature(parameters)


async def invoke(
    definition: CapabilityDefinition, cls: type, args: tuple[Any, ...], kwargs: dict[str, Any]
) -> Any:
    """Invoke a definition's method on a fresh owner instance."""
    if not definition.is_condition_met():
        raise CapabilityUnavailableError(
            f"{definition.kind.value.capitalize()} '{definition.name}' is not available: "
            f"condition '{definition.condition}' is not met",
            context={"capability": definition.name},
        )

    method = getattr(cls(), definition.method)
    if inspect.iscoroutinefunction(method):
        return await method(*args, **kwargs)

    result = await asyncio.to_thread(method, *args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


def capability_error_handler(definition: CapabilityDefinition, fn: HandlerCallable) -> HandlerCallable:
    """Wrap a handler so failures come back as JSON error payloads."""

    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await fn(*args, **kwargs)
        except asyncio.CancelledError:
            raise
        except CatalogError as exc:
            return format_error(type(exc).__name__, exc.message, definition.name)
        except Exception as exc:
            logger.exception("Unhandled error in %s %s", definition.kind.value, definition.name)
            return format_error("UnexpectedError", f"Unexpected error: {exc}", definition.name)

    wrapper.__capability_error_handler__ = True  # type: ignore[attr-defined]  # custom marker attr
    return wrapper


def bind_handler(definition: CapabilityDefinition) -> HandlerCallable:
    """Build the async callable FastMCP invokes for a definition."""
    cls = owner_class(definition)
    signature = handler_signature(cls, definition.method)

    async def call(*args: Any, **kwargs: Any) -> Any:
        bound = signature.bind(*args, **kwargs)
        return await invoke(definition, cls, bound.args, bound.kwargs)

    handler = capability_error_handler(definition, call)
    handler.__name__ = definition.method
    handler.__qualname__ = f"{cls.__qualname__}.{definition.method}"
    handler.__doc__ = definition.description or None
    handler.__signature__ = signature  # type: ignore[attr-defined]
    handler.__annotations__ = {
        name: param.annotation for name, param in signature.parameters.items()
    }
    return handler


__all__ = [
    "bind_handler",
    "capability_error_handler",
    "format_error",
    "get_catalog",
    "handler_signature",
    "invoke",
    "logger",
    "owner_class",
]
