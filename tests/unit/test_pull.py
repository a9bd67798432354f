"""Tests for translating git pull results."""

from reposync.git import GitResult
from reposync.pull import classify_pull, has_conflict_markers, output_reports_changes
from reposync.types import PullStatus

FAST_FORWARD_OUTPUT = """Updating 1a2b3c4..5d6e7f8
Fast-forward
 README.md | 2 +-
 1 file changed, 1 insertion(+), 1 deletion(-)
"""


class TestOutputHeuristic:
    """The text fallback used when branch tips are unavailable."""

    def test_already_up_to_date_variants(self):
        assert not output_reports_changes("Already up to date.\n")
        assert not output_reports_changes("Already up-to-date.\n")
        assert not output_reports_changes("Current branch main is up to date.\n")

    def test_fast_forward_reports_changes(self):
        assert output_reports_changes(FAST_FORWARD_OUTPUT)

    def test_short_output_without_file_count_is_no_change(self):
        assert not output_reports_changes("From github.com:x/y\n")

    def test_short_output_with_file_count_is_change(self):
        assert output_reports_changes(" 2 files changed\n")


class TestClassifyPull:

    def test_tips_decide_when_known(self):
        """Identical tips mean no changes even if the text looks busy."""
        result = GitResult(0, FAST_FORWARD_OUTPUT)
        pull = classify_pull(result, before="abc", after="abc")
        assert pull.status is PullStatus.NO_CHANGES

    def test_moved_tip_means_changes(self):
        pull = classify_pull(GitResult(0, "Already up to date.\n"), "abc", "def")
        assert pull.status is PullStatus.CHANGES_PULLED
        assert pull.changes

    def test_falls_back_to_text_without_tips(self):
        pull = classify_pull(GitResult(0, FAST_FORWARD_OUTPUT), None, None)
        assert pull.status is PullStatus.CHANGES_PULLED

        pull = classify_pull(GitResult(0, "Already up to date.\n"), "abc", None)
        assert pull.status is PullStatus.NO_CHANGES

    def test_conflict_detected_in_stdout(self):
        result = GitResult(
            1,
            "Auto-merging README.md\n"
            "CONFLICT (content): Merge conflict in README.md\n",
            "Automatic merge failed; fix conflicts and then commit the result.\n",
        )
        pull = classify_pull(result)
        assert pull.status is PullStatus.CONFLICT
        assert not pull.ok

    def test_plain_failure(self):
        result = GitResult(1, "", "fatal: couldn't find remote ref main\n")
        pull = classify_pull(result)
        assert pull.status is PullStatus.FAILED
        assert "couldn't find remote ref" in pull.error

    def test_conflict_markers(self):
        assert has_conflict_markers("CONFLICT (add/add)")
        assert has_conflict_markers("fix conflicts and then commit")
        assert not has_conflict_markers("fatal: not a git repository")
