from __future__ import annotations

import asyncio
import functools
from collections.abc import Callable
from typing import Any, NoReturn, TypeVar

import typer
from rich.markup import escape

from mcpcatalog.core.config import ConfigError
from mcpcatalog.core.console import console
from mcpcatalog.core.result import CatalogError

F = TypeVar("F", bound=Callable[..., Any])

_HANDLED = (CatalogError, ConfigError, PermissionError)


def _handle_exception(exc: Exception) -> NoReturn:
    console.print(f"[red]{escape(str(exc))}[/red]", highlight=False)
    raise typer.Exit(code=1)


def handle_exceptions(func: F) -> F:
    """Decorate CLI entrypoints to present friendly errors and exit cleanly."""

    if asyncio.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)
            except _HANDLED as exc:
                _handle_exception(exc)

        return async_wrapper  # type: ignore[return-value]

    @functools.wraps(func)
    def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except _HANDLED as exc:
            _handle_exception(exc)

    return sync_wrapper  # type: ignore[return-value]


__all__ = ["handle_exceptions"]
