from __future__ import annotations

from pathlib import Path

import pytest
from git import Repo

from mcpcatalog.capabilities.catalog import CapabilityCatalog
from mcpcatalog.mcp.tools.git import GitTools


@pytest.fixture
def repo_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    repo_dir = tmp_path / "repo"
    repo_dir.mkdir()
    repo = Repo.init(repo_dir)

    (repo_dir / "file.txt").write_text("v1")
    repo.index.add(["file.txt"])
    repo.index.commit("commit 1")

    (repo_dir / "file.txt").write_text("v2")
    repo.index.add(["file.txt"])
    repo.index.commit("commit 2")

    monkeypatch.chdir(repo_dir)
    return repo_dir


def test_git_tools_registered_when_gitpython_imports() -> None:
    assert GitTools.is_available()
    tools = CapabilityCatalog().tools
    assert {"git_status", "git_log"} <= set(tools.get_definitions())
    assert tools.get_definition("git_log").category == "repository"  # type: ignore[union-attr]


def test_override_drops_conditional_contributors() -> None:
    tools = CapabilityCatalog(core_tools=[]).tools
    assert "git_status" not in tools.get_definitions()


def test_condition_follows_working_directory(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    definition = CapabilityCatalog().tools.get_definition("git_status")
    assert definition is not None

    outside = tmp_path / "outside"
    outside.mkdir()
    monkeypatch.chdir(outside)
    assert not definition.is_condition_met()


def test_git_log(repo_dir: Path) -> None:
    commits = GitTools().git_log(limit=5)
    assert [c["summary"] for c in commits] == ["commit 2", "commit 1"]
    assert len(commits[0]["sha"]) == 12
    assert GitTools().git_log(limit=1)[0]["summary"] == "commit 2"


def test_git_status(repo_dir: Path) -> None:
    assert GitTools().in_repository()
    assert "dirty: no" in GitTools().git_status()

    (repo_dir / "file.txt").write_text("v3")
    (repo_dir / "new.txt").write_text("fresh")
    status = GitTools().git_status()
    assert "dirty: yes" in status
    assert "modified: file.txt" in status
    assert "untracked: new.txt" in status
