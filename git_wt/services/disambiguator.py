"""Resolution of a partial branch name to exactly one worktree."""

from typing import Optional, Sequence

from rich.console import Console

from git_wt.exceptions import NotFoundError
from git_wt.models.worktree import Worktree
from git_wt.services.matcher import find_matches
from git_wt.services.prompts import Prompter
from git_wt.services.worktree_index import WorktreeIndex
from git_wt.logging_config import get_logger

logger = get_logger(__name__)


class Disambiguator:
    """Turns a partial name into one worktree, asking the user when needed."""

    def __init__(self, index: WorktreeIndex, prompter: Prompter, console: Optional[Console] = None):
        self.index = index
        self.prompter = prompter
        self.console = console or Console()

    def resolve(self, partial: str) -> Worktree:
        """Resolve ``partial`` to a single worktree.

        One match is returned without interaction. Several matches are listed
        and the user picks one; zero matches raise NotFoundError.
        """
        matches = find_matches(partial, self.index.list_worktrees())
        logger.debug(f"'{partial}' matched {len(matches)} worktree(s)")
        if not matches:
            raise NotFoundError(partial)
        return self.choose(matches, f"Multiple worktrees match '{partial}':")

    def choose(self, candidates: Sequence[Worktree], heading: str) -> Worktree:
        """Pick one of ``candidates``; prompts only when there is more than one."""
        if len(candidates) == 1:
            return candidates[0]

        self.console.print(heading, markup=False, highlight=False)
        for wt in candidates:
            self.console.print(f"  {wt.branch} ({wt.path})", markup=False, highlight=False)
        self.console.print()
        self.console.print("Select branch:")
        index = self.prompter.choose([wt.branch for wt in candidates])
        selected = candidates[index]
        logger.debug(f"User selected {selected}")
        return selected
