"""
Result types and error hierarchy for mcp-catalog.

This module provides:
1. Result[T, E] type for explicit error handling
2. Domain-specific exception hierarchy

Usage:
    from mcpcatalog.core.result import Ok, Err, Result, RegistrationError

    def resolve(ref: str) -> Result[type, RegistrationError]:
        if missing:
            return Err(RegistrationError(f"Class '{ref}' does not exist"))
        return Ok(cls)

    match resolve("pkg.module:Tools"):
        case Err(err):
            errors.append(err.message)
        case Ok(cls):
            register(cls)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")
E = TypeVar("E", bound=Exception)


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Represents a successful result containing a value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Return the contained value."""
        return self.value


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Represents a failed result containing an error."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> Any:
        """Raise the contained error."""
        raise self.error


# Type alias for Result
Result = Ok[T] | Err[E]


# ---------------------------------------------------------------------------
# Domain-specific error hierarchy
# ---------------------------------------------------------------------------


class CatalogError(Exception):
    """Base exception for all mcp-catalog errors.

    All custom exceptions should inherit from this class to enable
    consistent error handling across the codebase.
    """

    def __init__(self, message: str, *, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [{ctx_str}]"
        return self.message


class ConfigurationError(CatalogError):
    """Raised when catalog state fails a check the caller asked for, such as `errors --strict`."""


class RegistrationError(CatalogError):
    """Describes why a contributor class was rejected.

    Rejections travel inside Err values and end up as source-prefixed
    strings in the error list. A registry raises it only when it is
    queried from inside its own registration pass.
    """


class CapabilityUnavailableError(CatalogError):
    """Raised when a capability is invoked while disabled or its condition is not met."""


class CapabilityExecutionError(CatalogError):
    """Raised when a bound capability fails while executing."""


__all__ = [
    # Result types
    "Ok",
    "Err",
    "Result",
    # Error hierarchy
    "CatalogError",
    "ConfigurationError",
    "RegistrationError",
    "CapabilityUnavailableError",
    "CapabilityExecutionError",
]
