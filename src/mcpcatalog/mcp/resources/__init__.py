"""Bundled MCP resource contributors.

    - catalog: catalog://summary, catalog://errors, catalog://{tools,prompts,templates}/{name}
    - environment: env://python, env://packages/{name}
"""
