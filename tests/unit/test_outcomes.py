"""Tests for SyncOutcome and RunStatistics."""

from reposync.orchestrator import render_report
from reposync.types import OutcomeKind, RunStatistics, SyncOutcome, SyncParameters


class TestSyncParameters:

    def test_defaults(self):
        params = SyncParameters()
        assert params.source_remote == "origin"
        assert params.target_remote is None
        assert params.main_branch == "main"
        assert params.verbose is False

    def test_upstream_ref(self):
        params = SyncParameters(source_remote="upstream", main_branch="develop")
        assert params.upstream_ref == "upstream/develop"


class TestRunStatistics:
    """Counters are only ever updated from outcomes."""

    def test_not_a_repository_counts_nothing(self):
        stats = RunStatistics()
        stats.record(SyncOutcome.not_a_repository())
        assert stats == RunStatistics()

    def test_missing_remote_is_skip_not_error(self):
        stats = RunStatistics()
        stats.record(SyncOutcome.missing_source_remote("origin"))
        assert stats.git_repos == 1
        assert stats.skipped == 1
        assert stats.errors == 0

    def test_synced_splits_by_changes(self):
        stats = RunStatistics()
        stats.record(SyncOutcome.synced(True))
        stats.record(SyncOutcome.synced(False))
        stats.record(SyncOutcome.synced(False))
        assert stats.successfully_synced == 3
        assert stats.changes_pulled == 1
        assert stats.no_changes == 2

    def test_side_signals(self):
        stats = RunStatistics()
        stats.record(
            SyncOutcome.skipped(
                "merge conflict", work_in_progress=True, branch_switched=True
            )
        )
        assert stats.work_in_progress == 1
        assert stats.branch_switches == 1
        assert stats.skipped == 1

    def test_totals_never_exceed_repos(self):
        stats = RunStatistics()
        for outcome in [
            SyncOutcome.synced(True),
            SyncOutcome.skipped("x"),
            SyncOutcome.error("boom"),
            SyncOutcome.missing_source_remote("origin"),
            SyncOutcome.not_a_repository(),
        ]:
            stats.record(outcome)
        assert stats.git_repos == 4
        assert stats.successfully_synced + stats.skipped + stats.errors <= stats.git_repos


class TestStatusText:

    def test_synced_text(self):
        assert SyncOutcome.synced(True).status_text() == "✅ Synced (changes pulled)"
        outcome = SyncOutcome.synced(False, detail="untracked preserved")
        assert outcome.status_text() == "✅ Synced (no changes, untracked preserved)"

    def test_skip_and_error_text(self):
        assert "merge conflict" in SyncOutcome.skipped("merge conflict").status_text()
        assert SyncOutcome.error("").status_text() == "❌ Error"
        assert SyncOutcome.missing_source_remote("upstream").status_text() == (
            "❌ No upstream remote"
        )
        assert SyncOutcome.error("x").kind is OutcomeKind.ERROR


def test_render_report_structure():
    stats = RunStatistics(
        git_repos=5,
        successfully_synced=3,
        changes_pulled=2,
        no_changes=1,
        skipped=1,
        errors=1,
        work_in_progress=2,
        branch_switches=1,
    )
    assert render_report(stats) == [
        "Git repositories found: 5",
        "Successfully synced: 3",
        "  - With changes pulled: 2",
        "  - No changes (up to date): 1",
        "Skipped: 1",
        "Errors: 1",
        "Work in progress handled: 2",
        "Branch switches performed: 1",
    ]
