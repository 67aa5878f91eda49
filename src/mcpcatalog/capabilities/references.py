"""Resolution of contributor class references.

Contributors may be passed as class objects or as import paths in either
``package.module:Class`` or ``package.module.Class`` form.
"""

from __future__ import annotations

import inspect
from importlib import import_module
from typing import Any

from mcpcatalog.core.result import Err, Ok, RegistrationError, Result

ClassRef = type | str


def class_ref_name(ref: object) -> str:
    """Return a stable display name for a class reference."""
    if isinstance(ref, str):
        return ref
    if inspect.isclass(ref):
        return f"{ref.__module__}.{ref.__qualname__}"
    return repr(ref)


def _import_attribute(path: str) -> Any:
    if ":" in path:
        module_name, _, qualname = path.partition(":")
        target: Any = import_module(module_name)
        for part in qualname.split("."):
            target = getattr(target, part)
        return target

    module_name, _, attr = path.rpartition(".")
    if not module_name:
        raise ImportError(f"'{path}' is not an import path")
    return getattr(import_module(module_name), attr)


def resolve_class(ref: object) -> Result[type, RegistrationError]:
    """Resolve a class object or import path to a class."""
    if inspect.isclass(ref):
        return Ok(ref)

    if not isinstance(ref, str) or not ref:
        return Err(RegistrationError(f"'{class_ref_name(ref)}' is not a class"))

    try:
        resolved = _import_attribute(ref)
    except (ImportError, AttributeError, ValueError):
        return Err(RegistrationError(f"Class '{ref}' does not exist"))
    except Exception as exc:
        return Err(RegistrationError(f"Cannot load class '{ref}': {exc}"))

    if not inspect.isclass(resolved):
        return Err(RegistrationError(f"'{ref}' is not a class"))
    return Ok(resolved)


__all__ = ["ClassRef", "class_ref_name", "resolve_class"]
