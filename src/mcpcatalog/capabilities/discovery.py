"""Bulk tool discovery from directories declared through discovery paths.

Registration only records the directory. The server calls
scan_discovery_path() while binding and registers the tool classes it
finds. Unimportable modules are skipped with a RuntimeWarning.
"""

from __future__ import annotations

import hashlib
import importlib.util
import inspect
import pkgutil
import re
import sys
import warnings
from pathlib import Path
from types import ModuleType

from mcpcatalog.capabilities.events import DiscoveryPath
from mcpcatalog.capabilities.extractor import ToolExtractor, public_methods

# Package prefix for modules imported from discovery paths
_DISCOVERED_PREFIX = "mcpcatalog_discovered"

_extractor = ToolExtractor()


def _module_name(source: str, directory: Path, stem: str) -> str:
    # The directory digest keeps same-named directories from sharing modules
    digest = hashlib.sha1(str(directory).encode("utf-8")).hexdigest()[:8]
    parts = [source, f"{directory.name}_{digest}", stem]
    safe = [re.sub(r"\W", "_", part) or "_" for part in parts]
    return ".".join([_DISCOVERED_PREFIX, *safe])


def _load_module(module_name: str, file_path: Path) -> ModuleType:
    existing = sys.modules.get(module_name)
    if existing is not None:
        return existing

    spec = importlib.util.spec_from_file_location(module_name, file_path)
    if spec is None or spec.loader is None:
        raise ImportError(f"cannot build an import spec for {file_path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(module_name, None)
        raise
    return module


def discover_module_files(directory: Path) -> list[Path]:
    """Return the public module files directly inside directory, sorted by name."""
    if not directory.is_dir():
        warnings.warn(
            f"Discovery directory {directory} does not exist; skipping.",
            RuntimeWarning,
            stacklevel=2,
        )
        return []

    files: list[Path] = []
    for module_info in pkgutil.iter_modules([str(directory)]):
        if module_info.name.startswith("_") or module_info.ispkg:
            continue
        candidate = directory / f"{module_info.name}.py"
        if candidate.is_file():
            files.append(candidate)
    return sorted(files)


def tool_classes_in(module: ModuleType) -> list[type]:
    """Classes defined in module that declare at least one @tool method."""
    found: list[type] = []
    for _, obj in inspect.getmembers(module, inspect.isclass):
        if obj.__module__ != module.__name__:
            continue
        if any(_extractor.has_marker(fn) for _, fn in public_methods(obj)):
            found.append(obj)
    return found


def scan_discovery_path(discovery: DiscoveryPath, source: str) -> list[type]:
    """Import every public module under each subdirectory and collect tool classes."""
    classes: list[type] = []
    for subdirectory in discovery.subdirectories:
        directory = (discovery.path / subdirectory).resolve()
        for file_path in discover_module_files(directory):
            module_name = _module_name(source, directory, file_path.stem)
            try:
                module = _load_module(module_name, file_path)
            except Exception as exc:
                warnings.warn(
                    f"Failed to import tool module {file_path}: {exc}",
                    RuntimeWarning,
                    stacklevel=2,
                )
                continue
            classes.extend(tool_classes_in(module))
    return classes


__all__ = ["discover_module_files", "scan_discovery_path", "tool_classes_in"]
