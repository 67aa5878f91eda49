"""Bundled MCP prompt contributors.

    - catalog: Explaining capabilities and planning new extensions
    - packages: Guidance for upgrading installed distributions
"""
