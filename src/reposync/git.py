"""Thin wrappers around the git command line for one working copy."""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)

# Local queries should be instant; network operations get more slack.
LOCAL_TIMEOUT = 30
REMOTE_TIMEOUT = 300


@dataclass(frozen=True)
class GitResult:
    """Exit status and captured output of a single git invocation."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def error_summary(text: str, fallback: str) -> str:
    """Reduce git's stderr to a single line for status output.

    The first ``fatal:``/``error:`` line wins; otherwise the first line that
    is not a hint or a ``From <url>`` fetch header.
    """
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    for line in lines:
        if line.startswith(("fatal:", "error:")):
            return line
    for line in lines:
        if not line.startswith(("hint:", "From ", "* ")):
            return line
    return fallback


class GitRunner:
    """Runs git commands inside a given working copy.

    The working copy is passed to every call as ``cwd`` instead of changing
    the process working directory, so nothing needs restoring afterwards.
    """

    def __init__(self, path: Path, git_bin: str = "git"):
        self.path = Path(path)
        self.git_bin = git_bin

    def run(self, *args: str, timeout: int = LOCAL_TIMEOUT) -> GitResult:
        """Run ``git <args>`` and capture its output. Never raises on failure.

        Args:
            *args: Git command arguments (e.g., "status", "--porcelain")
            timeout: Command timeout in seconds

        Returns:
            GitResult with stdout/stderr captured as text
        """
        cmd = [self.git_bin] + list(args)
        logger.debug(f"[{self.path.name}] {' '.join(cmd)}")
        try:
            proc = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=timeout,
                cwd=str(self.path),
            )
        except subprocess.TimeoutExpired:
            logger.debug(f"git {args[0] if args else ''} timed out")
            return GitResult(124, "", f"git timed out after {timeout}s")
        except FileNotFoundError as e:
            logger.debug(f"Could not run git: {e}")
            return GitResult(127, "", str(e))

        if proc.returncode != 0:
            logger.debug(
                f"git exited {proc.returncode}: {proc.stderr.strip()}"
            )
        return GitResult(proc.returncode, proc.stdout, proc.stderr)

    def run_remote(self, *args: str) -> GitResult:
        """Run a git command that talks to a remote."""
        return self.run(*args, timeout=REMOTE_TIMEOUT)


class RepoProber:
    """Read-only questions about one working copy."""

    def __init__(self, runner: GitRunner):
        self.runner = runner

    @property
    def path(self) -> Path:
        return self.runner.path

    @staticmethod
    def is_repository(path: Path) -> bool:
        """True if ``path`` holds git metadata.

        A ``.git`` file (linked worktree or submodule) counts as well.
        """
        return (Path(path) / ".git").exists()

    def remote_exists(self, name: str) -> bool:
        result = self.runner.run("remote")
        return result.ok and name in result.stdout.splitlines()

    def has_uncommitted_changes(self) -> bool:
        result = self.runner.run("status", "--porcelain")
        return result.ok and bool(result.stdout.strip())

    def current_branch(self) -> str:
        """Name of the checked-out branch, or "unknown"."""
        result = self.runner.run("branch", "--show-current")
        if result.ok:
            return result.stdout.strip()
        return "unknown"

    def short_status(self) -> List[str]:
        result = self.runner.run("status", "--short")
        if not result.ok:
            return []
        return [line for line in result.stdout.splitlines() if line.strip()]

    @staticmethod
    def only_untracked(status_lines: List[str]) -> bool:
        """True if there are changed entries and every one is untracked.

        Branch header lines (``##``) are ignored. An empty list (status
        unavailable) is never treated as untracked-only.
        """
        entries = [line for line in status_lines if not line.startswith("##")]
        return bool(entries) and all(line.startswith("??") for line in entries)

    def local_branch_exists(self, name: str) -> bool:
        result = self.runner.run("branch", "--list", name)
        return result.ok and bool(result.stdout.strip())

    def head_commit(self) -> Optional[str]:
        result = self.runner.run("rev-parse", "--verify", "-q", "HEAD")
        if result.ok and result.stdout.strip():
            return result.stdout.strip()
        return None
