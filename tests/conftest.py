from __future__ import annotations

import os
import sys
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from rich.console import Console
from typer.testing import CliRunner

# Detect CI environment (GitHub Actions sets CI=true)
IS_CI = os.environ.get("CI", "").lower() == "true"


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "local_only: marks tests that require local environment (skip in CI)",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip local_only tests when running in CI."""
    if not IS_CI:
        return
    skip_ci = pytest.mark.skip(reason="Skipped in CI (requires local environment)")
    for item in items:
        if "local_only" in item.keywords:
            item.add_marker(skip_ci)


ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
TESTS = ROOT / "tests"
for _path in (SRC, TESTS):
    if str(_path) not in sys.path:
        sys.path.insert(0, str(_path))


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def isolate_config(tmp_path: Path, monkeypatch: Any) -> Path:
    """Point config to a temp path and drop MCP_CATALOG_* overrides from the host."""
    for key in list(os.environ):
        if key.startswith("MCP_CATALOG_"):
            monkeypatch.delenv(key, raising=False)
    cfg_path = tmp_path / "config.toml"
    monkeypatch.setenv("MCP_CATALOG_CONFIG", str(cfg_path))
    return cfg_path


@pytest.fixture(autouse=True)
def capture_console(monkeypatch: Any) -> Console:
    """Use an in-memory Rich console during tests."""
    test_console = Console(record=True, width=200)
    import mcpcatalog.core.console as core_console
    import mcpcatalog.core.decorators as core_decorators
    import mcpcatalog.main as catalog_main

    monkeypatch.setattr(core_console, "console", test_console)
    monkeypatch.setattr(core_decorators, "console", test_console)
    monkeypatch.setattr(catalog_main, "console", test_console)
    return test_console


@pytest.fixture(autouse=True)
def isolate_runtime() -> Iterator[None]:
    """Entry points set a long-lived runtime context; drop it after each test."""
    from mcpcatalog.core.runtime import _runtime_ctx

    token = _runtime_ctx.set(None)
    yield
    _runtime_ctx.reset(token)


@pytest.fixture
def app_config() -> Any:
    from mcpcatalog.core.config import AppConfig

    return AppConfig()


@pytest.fixture
def catalog_runtime(app_config: Any) -> Iterator[Any]:
    """A default catalog (bundled contributors only) inside a runtime context."""
    from mcpcatalog.capabilities.catalog import CapabilityCatalog
    from mcpcatalog.core.runtime import runtime_context

    catalog = CapabilityCatalog()
    with runtime_context(app_config, catalog) as ctx:
        yield ctx
