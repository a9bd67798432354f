"""Runs the sync engine over a directory of working copies."""

import logging
from pathlib import Path
from typing import List, Optional

from .engine import SyncEngine
from .git import RepoProber, error_summary
from .output import error, header, plain
from .types import RepositoryHandle, RunStatistics, SyncOutcome, SyncParameters

logger = logging.getLogger(__name__)

RULE_WIDTH = 60


def discover(base_dir: Path) -> List[RepositoryHandle]:
    """Immediate, non-hidden subdirectories of ``base_dir`` in sorted order."""
    dirs = [
        p for p in Path(base_dir).iterdir()
        if p.is_dir() and not p.name.startswith(".")
    ]
    return [RepositoryHandle.from_path(p) for p in sorted(dirs, key=lambda p: p.name)]


def name_width(handles: List[RepositoryHandle]) -> int:
    """Longest display name among the handles that are git repositories."""
    names = [
        h.display_name for h in handles if RepoProber.is_repository(h.path)
    ]
    return max((len(n) for n in names), default=0)


def render_report(stats: RunStatistics) -> List[str]:
    return [
        f"Git repositories found: {stats.git_repos}",
        f"Successfully synced: {stats.successfully_synced}",
        f"  - With changes pulled: {stats.changes_pulled}",
        f"  - No changes (up to date): {stats.no_changes}",
        f"Skipped: {stats.skipped}",
        f"Errors: {stats.errors}",
        f"Work in progress handled: {stats.work_in_progress}",
        f"Branch switches performed: {stats.branch_switches}",
    ]


class BatchOrchestrator:
    """Processes repositories one at a time and keeps the run statistics.

    Statistics are only ever updated here, from the outcome each engine call
    returns.
    """

    def __init__(
        self,
        params: SyncParameters,
        base_dir: Optional[Path] = None,
        engine: Optional[SyncEngine] = None,
    ):
        self.params = params
        self.base_dir = Path(base_dir) if base_dir else Path.cwd()
        self.engine = engine or SyncEngine(params)
        self.stats = RunStatistics()
        self._width = 0

    def run(self, target: Optional[str] = None) -> RunStatistics:
        self._print_header(target)

        if target:
            handles = [self._target_handle(target)]
        else:
            handles = discover(self.base_dir)

        if not self.params.verbose:
            self._width = name_width(handles)

        for handle in handles:
            outcome = self.process(handle)
            self.stats.record(outcome)

        self.print_report()
        return self.stats

    def _target_handle(self, target: str) -> RepositoryHandle:
        path = Path(target)
        if not path.is_absolute():
            path = self.base_dir / path
        return RepositoryHandle(path=path, display_name=target.rstrip("/"))

    def process(self, handle: RepositoryHandle) -> SyncOutcome:
        """Sync one repository; nothing raised here reaches the next one."""
        try:
            outcome = self.engine.sync(handle)
        except Exception as e:
            logger.debug(f"Unexpected failure in {handle.path}", exc_info=True)
            if self.params.verbose:
                error(f"Error processing {handle.display_name}: {e}")
            outcome = SyncOutcome.error(error_summary(str(e), type(e).__name__))

        if outcome.is_repository and not self.params.verbose:
            self._print_status(handle, outcome)
        return outcome

    def _print_status(self, handle: RepositoryHandle, outcome: SyncOutcome):
        plain(f"{handle.display_name.ljust(self._width)}: {outcome.status_text()}")

    def _print_header(self, target: Optional[str]) -> None:
        plain("🚀 Starting repository synchronization...")
        plain(f"Current directory: {self.base_dir}")
        plain(f"Source remote: {self.params.source_remote}")
        plain(f"Target remote: {self.params.target_remote or 'none'}")
        plain(f"Main branch: {self.params.main_branch}")
        if target:
            plain(f"Target directory: {target}")
        plain("=" * RULE_WIDTH)

    def print_report(self) -> None:
        plain("")
        header("📊 SYNCHRONIZATION COMPLETE", width=RULE_WIDTH)
        for line in render_report(self.stats):
            plain(line)
        plain("\n🎉 Synchronization process completed!")
