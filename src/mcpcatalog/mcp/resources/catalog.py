from __future__ import annotations

import json
from typing import Annotated

from mcpcatalog.capabilities.definitions import CapabilityDefinition
from mcpcatalog.capabilities.kinds import ResourceCategory
from mcpcatalog.capabilities.markers import (
    complete_with,
    resource,
    resource_meta,
    resource_template,
)
from mcpcatalog.core.result import CapabilityExecutionError
from mcpcatalog.mcp import get_catalog
from mcpcatalog.mcp.completions import (
    PromptNameProvider,
    ResourceTemplateNameProvider,
    ToolNameProvider,
)


def _definition_json(definition: CapabilityDefinition | None, label: str, name: str) -> str:
    if definition is None:
        raise CapabilityExecutionError(f"No {label} named '{name}' is registered")
    payload = definition.to_dict()
    payload["owner"] = definition.owner_name
    payload["method"] = definition.method
    payload["condition"] = definition.condition
    return json.dumps(payload, indent=2)


class CatalogResources:
    @resource("catalog://summary", name="catalog_summary", mime_type="application/json")
    @resource_meta(ResourceCategory.CATALOG)
    def summary(self) -> str:
        """Counts per kind, source, and category for the whole catalog."""
        return json.dumps(get_catalog().summary_dict(), indent=2)

    @resource("catalog://errors", name="catalog_errors", mime_type="application/json")
    @resource_meta(ResourceCategory.CATALOG)
    def errors(self) -> str:
        """Registration errors collected while building the catalog."""
        return json.dumps(get_catalog().get_all_errors(), indent=2)

    @resource_template(
        "catalog://tools/{name}", name="tool_definition", mime_type="application/json"
    )
    @resource_meta(ResourceCategory.CATALOG)
    def tool_definition(self, name: Annotated[str, complete_with(ToolNameProvider)]) -> str:
        """The registered definition of one tool."""
        return _definition_json(get_catalog().tools.get_definition(name), "tool", name)

    @resource_template(
        "catalog://prompts/{name}", name="prompt_definition", mime_type="application/json"
    )
    @resource_meta(ResourceCategory.CATALOG)
    def prompt_definition(self, name: Annotated[str, complete_with(PromptNameProvider)]) -> str:
        """The registered definition of one prompt."""
        return _definition_json(get_catalog().prompts.get_definition(name), "prompt", name)

    @resource_template(
        "catalog://templates/{name}", name="template_definition", mime_type="application/json"
    )
    @resource_meta(ResourceCategory.CATALOG)
    def template_definition(
        self, name: Annotated[str, complete_with(ResourceTemplateNameProvider)]
    ) -> str:
        """The registered definition of one resource template."""
        definition = get_catalog().resources.get_template_definitions().get(name)
        return _definition_json(definition, "resource template", name)
