from __future__ import annotations

from typing import Annotated

from mcpcatalog.capabilities.kinds import PromptCategory
from mcpcatalog.capabilities.markers import complete_with, prompt, prompt_meta
from mcpcatalog.core import environment as environment_core
from mcpcatalog.core.result import Err, Ok
from mcpcatalog.mcp.completions import InstalledPackageProvider


class PackagePrompts:
    @prompt(description="Walk through upgrading an installed package safely.")
    @prompt_meta(PromptCategory.ENVIRONMENT)
    def upgrade_package_guide(
        self,
        package: Annotated[str, complete_with(InstalledPackageProvider)],
        target_version: str = "latest",
    ) -> str:
        match environment_core.package_info(package):
            case Err(_):
                current = "not installed"
                requires: list[str] = []
            case Ok(info):
                current = info["version"]
                requires = info["requires"]

        lines = [
            f"Plan an upgrade of '{package}' from {current} to {target_version}.",
            "",
            "1. Summarize breaking changes between the two versions from the changelog.",
            "2. Find the places in this project that use the affected APIs.",
            "3. Propose the dependency pin change and the code changes, then the tests to run.",
        ]
        if requires:
            lines.extend(["", "Its declared requirements:", *(f"- {req}" for req in requires[:25])])
        return "\n".join(lines)
