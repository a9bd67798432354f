"""Value types shared by the sync engine and the batch orchestrator."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

DEFAULT_SOURCE_REMOTE = "origin"
DEFAULT_MAIN_BRANCH = "main"


@dataclass(frozen=True)
class SyncParameters:
    """Effective settings for one run, resolved once at startup."""

    source_remote: str = DEFAULT_SOURCE_REMOTE
    target_remote: Optional[str] = None
    main_branch: str = DEFAULT_MAIN_BRANCH
    verbose: bool = False

    @property
    def upstream_ref(self) -> str:
        return f"{self.source_remote}/{self.main_branch}"


@dataclass(frozen=True)
class RepositoryHandle:
    """A candidate directory for one processing pass."""

    path: Path
    display_name: str

    @classmethod
    def from_path(cls, path: Path) -> "RepositoryHandle":
        return cls(path=Path(path), display_name=Path(path).name)


class OutcomeKind(Enum):
    NOT_A_REPOSITORY = "not_a_repository"
    MISSING_SOURCE_REMOTE = "missing_source_remote"
    SKIPPED = "skipped"
    ERROR = "error"
    SYNCED = "synced"


@dataclass(frozen=True)
class SyncOutcome:
    """Result of processing exactly one directory.

    ``work_in_progress`` and ``branch_switched`` are side signals folded into
    the run statistics; they do not change which terminal state was reached.
    """

    kind: OutcomeKind
    reason: str = ""
    changes: bool = False
    work_in_progress: bool = False
    branch_switched: bool = False
    detail: str = ""

    @classmethod
    def not_a_repository(cls) -> "SyncOutcome":
        return cls(OutcomeKind.NOT_A_REPOSITORY)

    @classmethod
    def missing_source_remote(cls, remote: str) -> "SyncOutcome":
        return cls(OutcomeKind.MISSING_SOURCE_REMOTE, reason=f"No {remote} remote")

    @classmethod
    def skipped(cls, reason: str, **kwargs) -> "SyncOutcome":
        return cls(OutcomeKind.SKIPPED, reason=reason, **kwargs)

    @classmethod
    def error(cls, message: str, **kwargs) -> "SyncOutcome":
        return cls(OutcomeKind.ERROR, reason=message, **kwargs)

    @classmethod
    def synced(cls, changes: bool, **kwargs) -> "SyncOutcome":
        return cls(OutcomeKind.SYNCED, changes=changes, **kwargs)

    @property
    def is_repository(self) -> bool:
        return self.kind is not OutcomeKind.NOT_A_REPOSITORY

    def status_text(self) -> str:
        """One-line summary used in the concise per-repository listing."""
        if self.kind is OutcomeKind.SYNCED:
            what = "changes pulled" if self.changes else "no changes"
            if self.detail:
                what = f"{what}, {self.detail}"
            return f"✅ Synced ({what})"
        if self.kind is OutcomeKind.MISSING_SOURCE_REMOTE:
            return f"❌ {self.reason}"
        if self.kind is OutcomeKind.SKIPPED:
            return f"⏭️  Skipped ({self.reason})"
        if self.kind is OutcomeKind.ERROR:
            return f"❌ Error: {self.reason}" if self.reason else "❌ Error"
        return ""


@dataclass
class RunStatistics:
    """Running counters for one invocation."""

    git_repos: int = 0
    successfully_synced: int = 0
    changes_pulled: int = 0
    no_changes: int = 0
    skipped: int = 0
    errors: int = 0
    work_in_progress: int = 0
    branch_switches: int = 0

    def record(self, outcome: SyncOutcome) -> None:
        """Fold one outcome into the counters."""
        if not outcome.is_repository:
            return

        self.git_repos += 1
        if outcome.work_in_progress:
            self.work_in_progress += 1
        if outcome.branch_switched:
            self.branch_switches += 1

        if outcome.kind is OutcomeKind.SYNCED:
            self.successfully_synced += 1
            if outcome.changes:
                self.changes_pulled += 1
            else:
                self.no_changes += 1
        elif outcome.kind in (
            OutcomeKind.SKIPPED,
            OutcomeKind.MISSING_SOURCE_REMOTE,
        ):
            self.skipped += 1
        elif outcome.kind is OutcomeKind.ERROR:
            self.errors += 1


class PullStatus(Enum):
    CHANGES_PULLED = "changes_pulled"
    NO_CHANGES = "no_changes"
    CONFLICT = "conflict"
    FAILED = "failed"


@dataclass(frozen=True)
class PullResult:
    status: PullStatus
    output: str = ""
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.status in (PullStatus.CHANGES_PULLED, PullStatus.NO_CHANGES)

    @property
    def changes(self) -> bool:
        return self.status is PullStatus.CHANGES_PULLED


class WipChoice(Enum):
    STASH = "1"
    COMMIT = "2"
    SKIP = "3"
    SHOW_STATUS = "4"
    INVALID = ""


class BranchChoice(Enum):
    SKIP = "1"
    STAY = "2"
    INVALID = ""


class ConflictChoice(Enum):
    SKIP = "1"
    RESET = "2"
    MANUAL = "3"
    INVALID = ""
