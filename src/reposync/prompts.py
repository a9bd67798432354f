"""Operator prompts for states the engine cannot resolve on its own."""

import logging
from typing import Callable, List, Optional

import typer

from .output import plain, step
from .types import BranchChoice, ConflictChoice, WipChoice

logger = logging.getLogger(__name__)

DEFAULT_COMMIT_MESSAGE = "WIP: Auto-commit by sync script"

PromptFn = Callable[..., str]


def _parse(choice_enum, raw: Optional[str]):
    value = (raw or "").strip()
    for member in choice_enum:
        if member.value and member.value == value:
            return member
    logger.debug(f"Unrecognised choice {value!r}")
    return choice_enum.INVALID


class Resolver:
    """Asks the operator what to do.

    In concise (non-verbose) mode nothing is ever asked and every question
    resolves to "skip".
    """

    def __init__(self, verbose: bool, prompt: Optional[PromptFn] = None):
        self.verbose = verbose
        self._prompt = prompt or typer.prompt

    def _ask(self, options: List[str], hint: str) -> str:
        plain("")
        step("What would you like to do?")
        for i, option in enumerate(options, 1):
            step(f"{i}) {option}")
        return self._prompt(
            f"   Enter choice ({hint})", default="", show_default=False
        )

    def wip_choice(self) -> WipChoice:
        if not self.verbose:
            return WipChoice.SKIP
        raw = self._ask(
            [
                "Stash changes and continue",
                "Commit changes and continue",
                "Skip this repository",
                "Show full git status",
            ],
            "1-4",
        )
        return _parse(WipChoice, raw)

    def branch_switch_choice(self) -> BranchChoice:
        if not self.verbose:
            return BranchChoice.SKIP
        raw = self._ask(
            [
                "Skip this repository",
                "Stay on current branch and try to sync",
            ],
            "1-2",
        )
        return _parse(BranchChoice, raw)

    def conflict_choice(self, upstream_ref: str) -> ConflictChoice:
        if not self.verbose:
            return ConflictChoice.SKIP
        raw = self._ask(
            [
                "Skip this repository",
                f"Reset hard to {upstream_ref} "
                "(DESTRUCTIVE - will lose local changes)",
                "Open manual resolution "
                "(you'll need to resolve conflicts manually)",
            ],
            "1-3",
        )
        return _parse(ConflictChoice, raw)

    def commit_message(self) -> str:
        message = self._prompt(
            "   Enter commit message", default="", show_default=False
        )
        message = (message or "").strip()
        return message or DEFAULT_COMMIT_MESSAGE
