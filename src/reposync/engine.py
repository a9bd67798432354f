"""Per-repository synchronisation state machine."""

import logging
from dataclasses import replace
from typing import List, Optional

from .git import GitRunner, RepoProber, error_summary
from .output import error, plain, step, success, warning
from .prompts import Resolver
from .pull import classify_pull
from .types import (
    BranchChoice,
    ConflictChoice,
    OutcomeKind,
    PullResult,
    PullStatus,
    RepositoryHandle,
    SyncOutcome,
    SyncParameters,
    WipChoice,
)

logger = logging.getLogger(__name__)

STASH_MESSAGE = "Auto-stash by sync script"

UNCOMMITTED_REASON = "uncommitted changes, rerun with verbose for options"
CONFLICT_REASON = "merge conflict"

# Always a merge-pull, whatever pull.rebase / pull.ff the user has configured.
PULL_COMMAND = ("pull", "--no-rebase", "--ff", "--no-edit")


class _Pass:
    """Mutable state for one repository while it moves through the steps."""

    def __init__(self, handle: RepositoryHandle, runner: GitRunner):
        self.handle = handle
        self.git = runner
        self.probe = RepoProber(runner)
        self.original_branch = "unknown"
        self.branch_switched = False
        self.work_in_progress = False
        self.detail = ""

    def outcome(self, base: SyncOutcome) -> SyncOutcome:
        return replace(
            base,
            work_in_progress=self.work_in_progress,
            branch_switched=self.branch_switched,
            detail=self.detail or base.detail,
        )


class SyncEngine:
    """Brings one working copy in line with ``source_remote/main_branch``.

    ``sync`` always returns exactly one ``SyncOutcome``; failures of git
    commands are turned into outcomes rather than raised. Counting happens
    in the caller.
    """

    def __init__(
        self,
        params: SyncParameters,
        resolver: Optional[Resolver] = None,
        runner_factory=GitRunner,
    ):
        self.params = params
        self.resolver = resolver or Resolver(params.verbose)
        self.runner_factory = runner_factory

    @property
    def verbose(self) -> bool:
        return self.params.verbose

    def _say(self, message: str) -> None:
        if self.verbose:
            step(message)

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def sync(self, handle: RepositoryHandle) -> SyncOutcome:
        if not RepoProber.is_repository(handle.path):
            return SyncOutcome.not_a_repository()

        if self.verbose:
            plain(f"\n📁 Processing: {handle.display_name}")

        state = _Pass(handle, self.runner_factory(handle.path))
        source = self.params.source_remote

        if not state.probe.remote_exists(source):
            if self.verbose:
                error(f"Remote '{source}' not found, skipping")
            return SyncOutcome.missing_source_remote(source)

        state.original_branch = state.probe.current_branch()

        if state.probe.has_uncommitted_changes():
            state.work_in_progress = True
            return state.outcome(self._handle_work_in_progress(state))

        return state.outcome(self._align_and_sync(state))

    # ------------------------------------------------------------------
    # Clean-tree pipeline: BranchAlign -> SourceSync -> TargetMirror -> Restore
    # ------------------------------------------------------------------

    def _align_and_sync(self, state: _Pass) -> SyncOutcome:
        current = state.probe.current_branch()
        self._say(f"📍 Current branch: {current}")

        if current != self.params.main_branch:
            if self._switch_to_main(state, current):
                state.branch_switched = True
            elif not self._stay_on_branch(current):
                return SyncOutcome.skipped("branch switch failed")

        pull = self._sync_with_source(state)
        if pull.status is PullStatus.CONFLICT:
            return self._handle_conflict(state)
        if not pull.ok:
            self._restore_original_branch(state)
            return SyncOutcome.error(error_summary(pull.error, "sync failed"))

        return self._finish(state, pull.changes)

    def _finish(self, state: _Pass, changes: bool) -> SyncOutcome:
        self._push_to_target(state)
        self._restore_original_branch(state)

        if self.verbose:
            success(f"Successfully synced {state.handle.display_name}")
        return SyncOutcome.synced(changes)

    # ------------------------------------------------------------------
    # Branch handling
    # ------------------------------------------------------------------

    def _switch_to_main(self, state: _Pass, current: str) -> bool:
        """Check out the main branch, creating it from the source if needed."""
        main = self.params.main_branch
        self._say(f"🔄 Switching from '{current}' to '{main}'")

        if state.probe.local_branch_exists(main):
            result = state.git.run("checkout", main)
        else:
            self._say(
                f"📥 {main} branch not found locally, checking out from "
                f"{self.params.upstream_ref}"
            )
            result = state.git.run(
                "checkout", "-b", main, self.params.upstream_ref
            )

        if result.ok:
            self._say(f"✅ Switched to {main} branch")
            return True

        if self.verbose:
            error(f"Failed to switch to {main}: {result.stderr.strip()}")
        logger.debug(f"checkout of {main} failed in {state.handle.path}")
        return False

    def _stay_on_branch(self, current: str) -> bool:
        """Ask whether to keep going on the current branch after a failed switch."""
        choice = self.resolver.branch_switch_choice()
        if choice is BranchChoice.STAY:
            warning(f"Continuing on branch '{current}'")
            return True
        return False

    def _restore_original_branch(self, state: _Pass) -> None:
        branch = state.original_branch
        if (
            not state.branch_switched
            or branch in ("", "unknown")
            or branch == self.params.main_branch
        ):
            return

        result = state.git.run("checkout", branch)
        if result.ok:
            self._say(f"🔄 Returned to original branch: {branch}")
        else:
            logger.info(
                f"Could not return {state.handle.display_name} to {branch}"
            )
            if self.verbose:
                warning(
                    f"Failed to return to original branch {branch}: "
                    f"{result.stderr.strip()}"
                )

    # ------------------------------------------------------------------
    # Source sync and target mirror
    # ------------------------------------------------------------------

    def _sync_with_source(self, state: _Pass) -> PullResult:
        source = self.params.source_remote
        main = self.params.main_branch

        self._say(f"📥 Fetching from {source}...")
        fetch = state.git.run_remote("fetch", source)
        if not fetch.ok:
            if self.verbose:
                error(f"Failed to fetch from {source}: {fetch.stderr.strip()}")
            return PullResult(PullStatus.FAILED, fetch.stdout, fetch.stderr)

        self._say(f"📥 Pulling from {source}/{main}...")
        before = state.probe.head_commit()
        result = state.git.run_remote(*PULL_COMMAND, source, main)
        after = state.probe.head_commit() if result.ok else None
        pull = classify_pull(result, before, after)

        if self.verbose:
            output = pull.output.strip()
            if output:
                step(f"📋 Git pull output: {output}")
            if pull.status is PullStatus.CHANGES_PULLED:
                success(f"Successfully pulled changes from {source}/{main}")
            elif pull.status is PullStatus.NO_CHANGES:
                success(f"Already up to date with {source}/{main}")
            else:
                error(
                    f"Failed to pull from {source}/{main}: "
                    f"{pull.error.strip()}"
                )
        return pull

    def _push_to_target(self, state: _Pass) -> None:
        """Mirror to the target remote. Failures never change the outcome."""
        target = self.params.target_remote
        if not target:
            return

        if not state.probe.remote_exists(target):
            if self.verbose:
                warning(f"Remote '{target}' not found, skipping push")
            return

        self._say(f"📤 Pushing to {target}...")
        result = state.git.run_remote(
            "push", "--force-with-lease", "-u", target, "HEAD"
        )
        if result.ok:
            if self.verbose:
                success(f"Successfully pushed to {target}")
            return

        logger.info(f"Push to {target} failed for {state.handle.display_name}")
        if self.verbose:
            error(f"Failed to push to {target}: {result.stderr.strip()}")
            step("This is not critical - the main sync was successful")

    # ------------------------------------------------------------------
    # Conflict protocol
    # ------------------------------------------------------------------

    def _handle_conflict(self, state: _Pass) -> SyncOutcome:
        upstream = self.params.upstream_ref
        if self.verbose:
            warning("Merge conflict detected!")

        choice = self.resolver.conflict_choice(upstream)
        if choice is ConflictChoice.RESET:
            warning(f"Performing hard reset to {upstream}...")
            result = state.git.run("reset", "--hard", upstream)
            if not result.ok:
                error(f"Failed to reset: {result.stderr.strip()}")
                return SyncOutcome.error(f"reset to {upstream} failed")
            success(f"Successfully reset to {upstream}")
            return self._finish(state, True)

        if choice is ConflictChoice.MANUAL:
            step("🔧 Please resolve conflicts manually, then run the script again")
            return SyncOutcome.skipped(
                f"{CONFLICT_REASON}, resolve manually and rerun"
            )

        return SyncOutcome.skipped(CONFLICT_REASON)

    # ------------------------------------------------------------------
    # Work-in-progress protocol
    # ------------------------------------------------------------------

    def _handle_work_in_progress(self, state: _Pass) -> SyncOutcome:
        status_lines = state.probe.short_status()

        if RepoProber.only_untracked(status_lines):
            self._say(
                "💡 Only untracked files detected, attempting git pull first..."
            )
            outcome = self._align_and_sync(state)
            if outcome.kind is OutcomeKind.SYNCED:
                state.detail = "untracked preserved"
            if outcome.kind is not OutcomeKind.ERROR:
                return outcome
            if self.verbose:
                error("Git pull failed even with only untracked files present")

        if not self.verbose:
            return SyncOutcome.skipped(UNCOMMITTED_REASON)

        return self._ask_about_work_in_progress(state, status_lines)

    def _ask_about_work_in_progress(
        self, state: _Pass, status_lines: List[str]
    ) -> SyncOutcome:
        while True:
            warning("Work in progress detected!")
            step("📋 Changes:")
            for line in status_lines:
                step(line, prefix="      ")

            choice = self.resolver.wip_choice()

            if choice is WipChoice.SHOW_STATUS:
                full = state.git.run("status")
                plain(full.stdout.rstrip() or full.stderr.rstrip())
                status_lines = state.probe.short_status()
                continue

            if choice is WipChoice.STASH:
                return self._stash_and_continue(state)
            if choice is WipChoice.COMMIT:
                return self._commit_and_continue(state)
            if choice is WipChoice.SKIP:
                step("⏭️  Skipping repository")
                return SyncOutcome.skipped("skipped by operator")

            error("Invalid choice, skipping repository")
            return SyncOutcome.skipped("invalid choice")

    def _stash_and_continue(self, state: _Pass) -> SyncOutcome:
        result = state.git.run("stash", "push", "-m", STASH_MESSAGE)
        if not result.ok:
            error(f"Failed to stash: {result.stderr.strip()}")
            return SyncOutcome.error("stash failed")

        success("Changes stashed successfully")
        step("💾 Restore them later with 'git stash pop'")
        return self._align_and_sync(state)

    def _commit_and_continue(self, state: _Pass) -> SyncOutcome:
        message = self.resolver.commit_message()

        add = state.git.run("add", "-A")
        if not add.ok:
            error(f"Failed to commit: {add.stderr.strip()}")
            return SyncOutcome.error("commit failed")

        commit = state.git.run("commit", "-m", message)
        if not commit.ok:
            error(
                f"Failed to commit: "
                f"{commit.stderr.strip() or commit.stdout.strip()}"
            )
            return SyncOutcome.error("commit failed")

        success("Changes committed successfully")
        return self._align_and_sync(state)
