"""Bundled MCP tool contributors.

This package contains the core tool classes:
    - catalog: Catalog introspection and reload
    - environment: Python interpreter and installed packages
    - git: Repository status (only when GitPython is installed)

The registry registers these classes under the "core" source and declares
this directory as the core discovery path.
"""
