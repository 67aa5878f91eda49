"""Python environment inspection shared by bundled tools and resources."""

from __future__ import annotations

import importlib.metadata
import platform
import sys
from dataclasses import asdict, dataclass
from typing import Any

from mcpcatalog.core.result import CapabilityExecutionError, Err, Ok, Result


@dataclass(frozen=True)
class PythonInfo:
    version: str
    implementation: str
    executable: str
    platform: str
    prefix: str
    base_prefix: str

    @property
    def in_virtualenv(self) -> bool:
        return self.prefix != self.base_prefix

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["in_virtualenv"] = self.in_virtualenv
        return payload


def python_info() -> PythonInfo:
    return PythonInfo(
        version=platform.python_version(),
        implementation=platform.python_implementation(),
        executable=sys.executable,
        platform=platform.platform(),
        prefix=sys.prefix,
        base_prefix=getattr(sys, "base_prefix", sys.prefix),
    )


def installed_packages() -> list[tuple[str, str]]:
    """(name, version) for every installed distribution, sorted case-insensitively."""
    seen: dict[str, tuple[str, str]] = {}
    for dist in importlib.metadata.distributions():
        name = dist.metadata.get("Name")
        if not name:
            continue
        seen.setdefault(name.lower(), (name, dist.version))
    return [seen[key] for key in sorted(seen)]


def package_info(name: str) -> Result[dict[str, Any], CapabilityExecutionError]:
    try:
        dist = importlib.metadata.distribution(name)
    except importlib.metadata.PackageNotFoundError:
        return Err(CapabilityExecutionError(f"Package '{name}' is not installed"))

    metadata = dist.metadata
    return Ok(
        {
            "name": metadata.get("Name", name),
            "version": dist.version,
            "summary": metadata.get("Summary") or "",
            "requires_python": metadata.get("Requires-Python") or "",
            "requires": list(dist.requires or []),
            "entry_point_groups": sorted({ep.group for ep in dist.entry_points}),
        }
    )


__all__ = ["PythonInfo", "installed_packages", "package_info", "python_info"]
