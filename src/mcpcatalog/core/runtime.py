"""
Runtime context for mcp-catalog.

This module provides a context variable-based system for carrying the
loaded configuration and the capability catalog to bundled contributors
without module-level singletons.

Usage:
    from mcpcatalog.core.runtime import runtime_context, get_runtime

    # At entry point (main.py, mcp/server.py)
    with runtime_context(config, catalog) as ctx:
        serve()

    # In any contributor
    def get_catalog_info(self) -> dict[str, object]:
        catalog = get_runtime().catalog
        return catalog.get_summary()
"""

from __future__ import annotations

import contextvars
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from uuid import uuid4

if TYPE_CHECKING:
    from mcpcatalog.capabilities.catalog import CapabilityCatalog
    from mcpcatalog.core.config import AppConfig


@dataclass
class RuntimeContext:
    """Per-process runtime state.

    Attributes:
        config: The loaded AppConfig for this session
        catalog: The capability catalog the host serves from
        trace_id: Unique identifier for this execution trace
    """

    config: AppConfig
    catalog: CapabilityCatalog
    trace_id: str = field(default_factory=lambda: uuid4().hex[:12])


# Context variable for async/thread safety
_runtime_ctx: contextvars.ContextVar[RuntimeContext | None] = contextvars.ContextVar(
    "mcp_catalog_runtime",
    default=None,
)


class NoRuntimeContextError(RuntimeError):
    """Raised when get_runtime() is called outside a runtime_context block."""

    def __init__(self) -> None:
        super().__init__(
            "No runtime context available. "
            "Wrap entrypoints in 'with runtime_context(config, catalog):' or start the server through create_server()."
        )


def get_runtime() -> RuntimeContext:
    """Get the current runtime context.

    Raises:
        NoRuntimeContextError: If called outside a runtime_context block
    """
    ctx = _runtime_ctx.get()
    if ctx is None:
        raise NoRuntimeContextError()
    return ctx


def set_runtime_context(ctx: RuntimeContext) -> contextvars.Token[RuntimeContext | None]:
    """Set the current runtime context (used for server bootstrap and tests)."""
    return _runtime_ctx.set(ctx)


@contextmanager
def runtime_context(
    config: AppConfig,
    catalog: CapabilityCatalog,
    *,
    trace_id: str | None = None,
) -> Iterator[RuntimeContext]:
    """Context manager for establishing runtime state.

    Args:
        config: The loaded AppConfig
        catalog: The catalog bundled contributors should report on
        trace_id: Optional trace ID for correlation (auto-generated if not provided)

    Yields:
        The RuntimeContext for this execution
    """
    ctx = RuntimeContext(
        config=config,
        catalog=catalog,
        trace_id=trace_id or uuid4().hex[:12],
    )

    token = _runtime_ctx.set(ctx)
    try:
        yield ctx
    finally:
        _runtime_ctx.reset(token)


__all__ = [
    "NoRuntimeContextError",
    "RuntimeContext",
    "get_runtime",
    "runtime_context",
    "set_runtime_context",
]
