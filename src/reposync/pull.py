"""Interpretation of ``git pull`` results.

Everything that reads free-form git output lives here so the engine only
ever sees a ``PullStatus``.
"""

import re
from typing import Optional

from .git import GitResult
from .types import PullResult, PullStatus

UP_TO_DATE_PATTERNS = (
    "Already up to date",
    "Already up-to-date",
    "is up to date",
)

# Output shorter than this with no file count is treated as "nothing pulled".
MIN_CHANGE_OUTPUT = 50

_FILE_COUNT = re.compile(r"\d+ file")


def has_conflict_markers(text: str) -> bool:
    return "CONFLICT" in text or "conflict" in text


def output_reports_changes(stdout: str) -> bool:
    """Best-effort guess from pull output whether anything was merged."""
    if any(pattern in stdout for pattern in UP_TO_DATE_PATTERNS):
        return False
    if len(stdout.strip()) < MIN_CHANGE_OUTPUT and not _FILE_COUNT.search(stdout):
        return False
    return True


def classify_pull(
    result: GitResult,
    before: Optional[str] = None,
    after: Optional[str] = None,
) -> PullResult:
    """Translate a pull into a PullResult.

    When both branch tips are known they decide whether changes arrived;
    the text heuristic is only a fallback.
    """
    if not result.ok:
        combined = f"{result.stderr}\n{result.stdout}"
        status = (
            PullStatus.CONFLICT
            if has_conflict_markers(combined)
            else PullStatus.FAILED
        )
        return PullResult(status, result.stdout, result.stderr)

    if before and after:
        changed = before != after
    else:
        changed = output_reports_changes(result.stdout)

    status = PullStatus.CHANGES_PULLED if changed else PullStatus.NO_CHANGES
    return PullResult(status, result.stdout, result.stderr)
