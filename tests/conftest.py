"""Shared fixtures: throwaway git remotes and working copies."""

import subprocess
from pathlib import Path

import pytest


def git(cwd: Path, *args: str) -> str:
    """Run git in ``cwd`` and return stdout, failing the test on error."""
    result = subprocess.run(
        ["git", *args],
        cwd=str(cwd),
        check=True,
        capture_output=True,
        text=True,
    )
    return result.stdout


class Upstream:
    """A bare repository with a scratch clone used to publish commits."""

    def __init__(self, root: Path, name: str = "upstream"):
        root.mkdir(parents=True, exist_ok=True)
        self.root = root
        self.bare = root / f"{name}.git"
        self.work = root / f"{name}-work"

        git(root, "init", "--bare", "--initial-branch=main", str(self.bare))
        git(root, "clone", str(self.bare), str(self.work))
        self.commit("README.md", "hello\n", "Initial commit")

    def commit(self, filename: str, content: str, message: str) -> str:
        path = self.work / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        git(self.work, "add", filename)
        git(self.work, "commit", "-m", message)
        git(self.work, "push", "origin", "HEAD:main")
        return self.head()

    def head(self) -> str:
        return git(self.work, "rev-parse", "HEAD").strip()

    def clone(self, dest: Path, remote: str = "origin", **config: str) -> Path:
        """Clone with git's stock pull settings unless ``config`` says otherwise.

        Keys use underscores for dots, e.g. ``pull_rebase="true"``.
        """
        dest.parent.mkdir(parents=True, exist_ok=True)
        git(dest.parent, "clone", "-o", remote, str(self.bare), str(dest))
        for key, value in config.items():
            git(dest, "config", key.replace("_", "."), value)
        return dest


@pytest.fixture(autouse=True)
def isolated_git(monkeypatch, tmp_path_factory):
    """Keep the user's git config and home directory out of every test."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test User")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "test@test.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test User")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "test@test.com")
    monkeypatch.setenv("GIT_TERMINAL_PROMPT", "0")
    return home


@pytest.fixture
def upstream(tmp_path):
    return Upstream(tmp_path / "remotes")


@pytest.fixture
def workspace(tmp_path):
    path = tmp_path / "workspace"
    path.mkdir()
    return path
