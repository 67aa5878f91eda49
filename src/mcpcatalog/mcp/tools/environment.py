from __future__ import annotations

import os
from typing import Annotated, Any

from mcpcatalog.capabilities.kinds import ToolCategory
from mcpcatalog.capabilities.markers import complete_with, tool, tool_meta
from mcpcatalog.core import environment as environment_core
from mcpcatalog.core.result import Err, Ok
from mcpcatalog.mcp.completions import InstalledPackageProvider

# Cap on lines returned by list_installed_packages
MAX_PACKAGE_LINES = 500


class EnvironmentTools:
    """Read-only inspection of the interpreter running the server."""

    @tool()
    @tool_meta(ToolCategory.ENVIRONMENT)
    async def get_python_info(self) -> dict[str, Any]:
        """Return the interpreter version, implementation, executable, and platform."""
        return environment_core.python_info().to_dict()

    @tool()
    @tool_meta(ToolCategory.ENVIRONMENT)
    async def list_installed_packages(self, name_filter: str | None = None, limit: int = 200) -> str:
        """List installed distributions as name==version lines."""
        packages = environment_core.installed_packages()
        if name_filter:
            needle = name_filter.lower()
            packages = [(name, version) for name, version in packages if needle in name.lower()]
        if not packages:
            return "No matching packages found."

        limit = max(1, min(limit, MAX_PACKAGE_LINES))
        lines = [f"{name}=={version}" for name, version in packages[:limit]]
        if len(packages) > limit:
            lines.append(f"... and {len(packages) - limit} more.")
        return "\n".join(lines)

    @tool()
    @tool_meta(ToolCategory.ENVIRONMENT)
    async def get_package_info(
        self, name: Annotated[str, complete_with(InstalledPackageProvider)]
    ) -> dict[str, Any] | str:
        """Return metadata for one installed distribution."""
        match environment_core.package_info(name):
            case Err(err):
                return f"Error reading package {name}: {err.message}"
            case Ok(info):
                return info

    @tool()
    @tool_meta(ToolCategory.ENVIRONMENT, condition="in_virtualenv")
    async def get_virtualenv_info(self) -> dict[str, Any]:
        """Describe the active virtual environment."""
        info = environment_core.python_info()
        return {
            "prefix": info.prefix,
            "base_prefix": info.base_prefix,
            "virtual_env": os.environ.get("VIRTUAL_ENV", ""),
        }

    @tool(description="Read one environment variable of the server process.")
    @tool_meta(ToolCategory.SYSTEM, dangerous=True)
    def get_environment_variable(self, name: str) -> dict[str, Any]:
        value = os.environ.get(name)
        return {"name": name, "set": value is not None, "value": value}

    def in_virtualenv(self) -> bool:
        return environment_core.python_info().in_virtualenv
