from __future__ import annotations

import warnings
from typing import Any
from unittest.mock import MagicMock, patch

from mcpcatalog.capabilities.extensions import (
    CatalogExtension,
    FunctionExtension,
    extension_name,
    load_entry_point_extensions,
)


class NamedExtension(CatalogExtension):
    name = "named"


class UnnamedExtension(CatalogExtension):
    pass


def _entry_point(name: str, loaded: Any = None, error: Exception | None = None) -> MagicMock:
    entry_point = MagicMock()
    entry_point.name = name
    entry_point.value = f"{name}_pkg:thing"
    if error is not None:
        entry_point.load.side_effect = error
    else:
        entry_point.load.return_value = loaded
    return entry_point


def _load(*entry_points: MagicMock) -> tuple[list[object], list[warnings.WarningMessage]]:
    with (
        patch(
            "mcpcatalog.capabilities.extensions.importlib.metadata.entry_points",
            return_value=list(entry_points),
        ) as finder,
        warnings.catch_warnings(record=True) as caught,
    ):
        warnings.simplefilter("always")
        extensions = load_entry_point_extensions("mcp_catalog.extensions")
        finder.assert_called_once_with(group="mcp_catalog.extensions")
    return extensions, caught


class TestEntryPointLoading:
    """Extensions published through the entry-point group."""

    def test_class_is_instantiated(self) -> None:
        extensions, caught = _load(_entry_point("named", NamedExtension))
        assert len(extensions) == 1
        assert isinstance(extensions[0], NamedExtension)
        assert caught == []

    def test_instance_used_as_is(self) -> None:
        instance = NamedExtension()
        extensions, _ = _load(_entry_point("named", instance))
        assert extensions == [instance]

    def test_factory_is_called(self) -> None:
        extensions, _ = _load(_entry_point("factory", lambda: NamedExtension()))
        assert isinstance(extensions[0], NamedExtension)

    def test_unnamed_extension_takes_entry_point_name(self) -> None:
        extensions, _ = _load(_entry_point("reports", UnnamedExtension))
        assert extension_name(extensions[0]) == "reports"

    def test_load_failure_warns_and_skips(self) -> None:
        extensions, caught = _load(
            _entry_point("broken", error=ImportError("missing dependency")),
            _entry_point("named", NamedExtension),
        )
        assert len(extensions) == 1
        assert len(caught) == 1
        assert issubclass(caught[0].category, RuntimeWarning)
        assert "Failed to load catalog extension 'broken'" in str(caught[0].message)

    def test_object_without_hooks_is_rejected(self) -> None:
        extensions, caught = _load(_entry_point("odd", 42))
        assert extensions == []
        assert "did not produce a catalog extension" in str(caught[0].message)


class TestExtensionHelpers:
    def test_base_hooks_are_no_ops(self) -> None:
        extension = CatalogExtension()
        event = MagicMock()
        extension.register_tools(event)
        extension.register_prompts(event)
        extension.register_resources(event)
        assert event.mock_calls == []

    def test_function_extension_dispatches(self) -> None:
        seen: list[str] = []
        extension = FunctionExtension("fn", prompts=lambda event: seen.append("prompts"))
        extension.register_tools(MagicMock())
        extension.register_prompts(MagicMock())
        assert seen == ["prompts"]

    def test_extension_name_falls_back_to_type(self) -> None:
        class Bare:
            pass

        assert extension_name(Bare()) == "Bare"
        assert extension_name(NamedExtension()) == "named"
