from __future__ import annotations

import json
from typing import Annotated

from mcpcatalog.capabilities.kinds import ResourceCategory
from mcpcatalog.capabilities.markers import (
    complete_with,
    resource,
    resource_meta,
    resource_template,
)
from mcpcatalog.core import environment as environment_core
from mcpcatalog.core.result import Err, Ok
from mcpcatalog.mcp.completions import InstalledPackageProvider


class EnvironmentResources:
    @resource("env://python", name="python_environment", mime_type="application/json")
    @resource_meta(ResourceCategory.ENVIRONMENT)
    def python_environment(self) -> str:
        """The interpreter serving this catalog."""
        return json.dumps(environment_core.python_info().to_dict(), indent=2)

    @resource_template("env://packages/{name}", name="package_metadata", mime_type="application/json")
    @resource_meta(ResourceCategory.ENVIRONMENT)
    def package_metadata(self, name: Annotated[str, complete_with(InstalledPackageProvider)]) -> str:
        """Metadata of one installed distribution."""
        match environment_core.package_info(name):
            case Err(err):
                raise err
            case Ok(info):
                return json.dumps(info, indent=2)
