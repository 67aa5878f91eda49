"""Repository tools, available only when GitPython can be imported.

GitPython raises ImportError at import time when the git executable is
missing, so the same check covers both the package and the binary.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from mcpcatalog.capabilities.conditions import ConditionalProvider
from mcpcatalog.capabilities.kinds import ToolCategory
from mcpcatalog.capabilities.markers import tool, tool_meta

if TYPE_CHECKING:
    from git import Repo

# Cap on commits returned by git_log
MAX_LOG_ENTRIES = 100


def _open_repo(path: Path | None = None) -> Repo:
    from git import Repo

    return Repo(path or Path.cwd(), search_parent_directories=True)


class GitTools(ConditionalProvider):
    """Status and history of the repository containing the working directory."""

    @classmethod
    def is_available(cls) -> bool:
        try:
            import git  # noqa: F401
        except ImportError:
            return False
        return True

    def in_repository(self) -> bool:
        from git import InvalidGitRepositoryError, NoSuchPathError

        try:
            _open_repo()
        except (InvalidGitRepositoryError, NoSuchPathError):
            return False
        return True

    @tool()
    @tool_meta(ToolCategory.REPOSITORY, condition="in_repository")
    def git_status(self) -> str:
        """Return a summarized git status."""
        repo = _open_repo()
        branch = "(detached)" if repo.head.is_detached else repo.active_branch.name
        changed = sorted({item.a_path for item in repo.index.diff(None)})
        staged = sorted({item.a_path for item in repo.index.diff("HEAD")}) if repo.head.is_valid() else []
        untracked = list(repo.untracked_files)

        lines = [f"branch: {branch}", f"dirty: {'yes' if repo.is_dirty() else 'no'}"]
        lines.extend(f"staged: {path}" for path in staged)
        lines.extend(f"modified: {path}" for path in changed)
        lines.extend(f"untracked: {path}" for path in untracked[:50])
        if len(untracked) > 50:
            lines.append(f"... and {len(untracked) - 50} more untracked.")
        return "\n".join(lines)

    @tool()
    @tool_meta(ToolCategory.REPOSITORY, condition="in_repository")
    def git_log(self, limit: int = 10) -> list[dict[str, Any]]:
        """Return the most recent commits on the current branch."""
        repo = _open_repo()
        if not repo.head.is_valid():
            return []

        limit = max(1, min(limit, MAX_LOG_ENTRIES))
        return [
            {
                "sha": commit.hexsha[:12],
                "author": commit.author.name,
                "date": commit.committed_datetime.isoformat(),
                "summary": commit.summary,
            }
            for commit in repo.iter_commits(max_count=limit)
        ]
