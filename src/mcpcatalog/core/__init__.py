"""Core shared infrastructure for mcpcatalog.

This package contains foundational utilities:
    - config: Application configuration management
    - console: Rich console output and logging
    - runtime: Runtime context management
    - result: Result values and the error hierarchy
"""

from __future__ import annotations

from . import config, console

__all__ = ["config", "console"]
