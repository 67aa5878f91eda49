"""mcp-catalog - capability registration and discovery for MCP servers.

This package assembles a catalog of tools, prompts, and resources from a
bundled core set and from third-party extensions, and binds the result
into a FastMCP server.

Exports:
    __version__: Package version string.
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.4.0"
