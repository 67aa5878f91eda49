from __future__ import annotations

import pytest

from catalog_fixtures import contributors as fx
from mcpcatalog.capabilities.definitions import ResourceDefinition, ToolDefinition
from mcpcatalog.capabilities.extractor import (
    PromptExtractor,
    ResourceExtractor,
    ToolExtractor,
    completion_providers,
    public_methods,
)
from mcpcatalog.capabilities.markers import tool


def _error(result: object) -> str:
    assert result.is_err()  # type: ignore[attr-defined]
    return result.error.message  # type: ignore[attr-defined]


class TestToolValidation:
    """Validation checks run in order and stop at the first failure."""

    def test_valid_class_is_returned(self) -> None:
        result = ToolExtractor().validate(fx.EchoTools)
        assert result.is_ok()
        assert result.unwrap() is fx.EchoTools

    def test_import_path_forms_resolve(self) -> None:
        extractor = ToolExtractor()
        assert extractor.validate("catalog_fixtures.contributors:EchoTools").unwrap() is fx.EchoTools
        assert extractor.validate("catalog_fixtures.contributors.EchoTools").unwrap() is fx.EchoTools

    def test_missing_class(self) -> None:
        message = _error(ToolExtractor().validate("catalog_fixtures.contributors:Nope"))
        assert message == "Class 'catalog_fixtures.contributors:Nope' does not exist"

    def test_missing_module(self) -> None:
        message = _error(ToolExtractor().validate("no_such_module_anywhere.Tools"))
        assert "does not exist" in message

    def test_reference_to_non_class(self) -> None:
        message = _error(ToolExtractor().validate("catalog_fixtures.contributors:NOT_A_CLASS"))
        assert "is not a class" in message

    def test_abstract_class_rejected(self) -> None:
        message = _error(ToolExtractor().validate(fx.AbstractTools))
        assert "is abstract and cannot be used as a tool" in message

    def test_abstract_prompt_provider_wording(self) -> None:
        message = _error(PromptExtractor().validate(fx.AbstractTools))
        assert "is abstract and cannot be used as a prompt provider" in message

    def test_constructor_with_required_args_rejected(self) -> None:
        message = _error(ToolExtractor().validate(fx.NeedsArgsTools))
        assert message.endswith("is not instantiable")

    def test_constructor_with_defaults_accepted(self) -> None:
        assert ToolExtractor().validate(fx.OptionalArgsTools).is_ok()

    def test_no_marked_methods(self) -> None:
        message = _error(ToolExtractor().validate(fx.UnmarkedTools))
        assert "has no public methods with @tool marker" in message

    def test_tool_class_is_not_a_prompt_provider(self) -> None:
        message = _error(PromptExtractor().validate(fx.EchoTools))
        assert "has no public methods with @prompt marker" in message

    def test_resource_marker_label(self) -> None:
        message = _error(ResourceExtractor().validate(fx.EchoTools))
        assert "@resource or @resource_template" in message

    def test_abstract_checked_before_markers(self) -> None:
        message = _error(ResourceExtractor().validate(fx.AbstractTools))
        assert "is abstract" in message


class TestToolExtraction:
    """Definitions built from marked methods."""

    def test_only_marked_public_methods_become_tools(self) -> None:
        definitions = ToolExtractor().extract(fx.EchoTools, "demo")
        assert [d.name for d in definitions] == ["echo", "shout"]

    def test_declared_name_and_description(self) -> None:
        echo, shout = ToolExtractor().extract(fx.EchoTools, "demo")
        assert echo.description == "Echo a message back"
        assert shout.method == "loud_echo"
        assert shout.description == "Echo a message in upper case."

    def test_defaults_for_unannotated_metadata(self) -> None:
        echo = ToolExtractor().extract(fx.EchoTools, "demo")[0]
        assert isinstance(echo, ToolDefinition)
        assert echo.source == "demo"
        assert echo.category == "general"
        assert echo.dangerous is False
        assert echo.condition is None
        assert echo.owner is fx.EchoTools
        assert echo.completion_providers == {}

    def test_meta_is_copied(self) -> None:
        by_name = {d.name: d for d in ToolExtractor().extract(fx.ReportTools, "reports")}
        assert by_name["summarize_report"].category == "reports"
        assert by_name["summarize_report"].condition == "has_reports"
        assert by_name["delete_report"].dangerous is True

    def test_completion_providers_from_annotations(self) -> None:
        by_name = {d.name: d for d in ToolExtractor().extract(fx.ReportTools, "reports")}
        assert by_name["summarize_report"].completion_providers == {"color": fx.ColorProvider}
        assert by_name["summarize_report"].has_completions()

    def test_subclass_overrides_are_respected(self) -> None:
        class Base:
            @tool()
            def first(self) -> str:
                return "base"

            @tool()
            def second(self) -> str:
                return "base"

        class Child(Base):
            def second(self) -> str:  # override without marker
                return "child"

        names = [d.name for d in ToolExtractor().extract(Child, "demo")]
        assert names == ["first"]

    def test_public_methods_preserve_declaration_order(self) -> None:
        names = [name for name, _ in public_methods(fx.EchoTools)]
        assert names == ["echo", "loud_echo", "helper"]


class TestPromptAndResourceExtraction:
    def test_prompt_definitions(self) -> None:
        definitions = {d.name: d for d in PromptExtractor().extract(fx.GreetingPrompts, "greet")}
        assert set(definitions) == {"greet", "farewell"}
        assert definitions["greet"].category == "greetings"
        assert definitions["greet"].completion_providers == {"color": fx.ColorProvider}
        assert definitions["farewell"].description == "Say goodbye"
        assert definitions["farewell"].method == "goodbye"

    def test_static_and_template_resources(self) -> None:
        definitions = ResourceExtractor().extract(fx.NoteResources, "notes")
        static, template = definitions
        assert isinstance(static, ResourceDefinition)
        assert static.is_template is False
        assert static.uri == "notes://index"
        assert static.key == "notes://index"
        assert static.mime_type == "application/json"
        assert template.is_template is True
        assert template.key == "note"
        assert template.uri == "notes://{slug}"
        assert template.completion_providers == {"slug": fx.SlugProvider}

    def test_completion_providers_without_annotations(self) -> None:
        def bare(self, value):  # type: ignore[no-untyped-def]
            return value

        assert completion_providers(bare) == {}


@pytest.mark.parametrize(
    "extractor",
    [ToolExtractor(), PromptExtractor(), ResourceExtractor()],
)
def test_validation_never_raises_for_garbage(extractor: object) -> None:
    for ref in (None, 42, "", "not.a.real:Thing", object()):
        result = extractor.validate(ref)  # type: ignore[attr-defined]
        assert result.is_err()
