"""Bringing a worktree's branch up to date with the project's base branch."""

from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Union, TYPE_CHECKING

from rich.console import Console

from git_wt.constants import STASH_LABEL_PREFIX, STASH_TIMESTAMP_FORMAT
from git_wt.exceptions import (
    BranchRequiredError,
    FetchFailedError,
    GitOperationError,
    NoBaseBranchError,
    SelectionCancelledError,
    StashFailedError,
    SyncConflictError,
)
from git_wt.models.worktree import SyncResult, Worktree
from git_wt.services.disambiguator import Disambiguator
from git_wt.services.git.operations import GitOperations
from git_wt.services.prompts import Prompter
from git_wt.logging_config import get_logger

if TYPE_CHECKING:
    from git_wt.config import Config

logger = get_logger(__name__)


class SyncEngine:
    """Runs the fetch → stash → rebase → merge fallback → unstash protocol.

    Steps run strictly in order and nothing is rolled back: when a step
    fails the repository is left as the last successful git command left it,
    and the error says what is still pending.
    """

    def __init__(
        self,
        config: "Config",
        git_ops: GitOperations,
        disambiguator: Disambiguator,
        prompter: Prompter,
        console: Optional[Console] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.config = config
        self.git_ops = git_ops
        self.disambiguator = disambiguator
        self.prompter = prompter
        self.console = console or Console()
        self.clock = clock
        self.remote_name = config.remote_name
        self.base_branches = list(config.base_branches)

    def _partial_from_cwd(self, cwd: Union[str, Path]) -> str:
        """Use the branch checked out in ``cwd``, once the user confirms it."""
        repo_root = self.git_ops.find_repo_root(cwd)
        branch = self.git_ops.current_branch(repo_root) if repo_root else None
        if not branch:
            raise BranchRequiredError()
        if not self.prompter.confirm(f"Sync current branch '{branch}'?"):
            raise SelectionCancelledError("Sync cancelled")
        return branch

    def find_source(self, path: Union[str, Path]) -> tuple[str, bool]:
        """Pick the ref to sync from.

        Remote base branches are preferred over local ones, in the configured
        order (main, then master by default).

        Returns:
            Tuple of (ref, is_remote)
        """
        for name in self.base_branches:
            if self.git_ops.ref_exists(path, f"refs/remotes/{self.remote_name}/{name}"):
                return f"{self.remote_name}/{name}", True
        for name in self.base_branches:
            if self.git_ops.ref_exists(path, f"refs/heads/{name}"):
                self.console.print(
                    f"[yellow]⚠️  No remote base branch found, using local {name} branch[/yellow]"
                )
                return name, False

        candidates = [f"{self.remote_name}/{n}" for n in self.base_branches] + self.base_branches
        raise NoBaseBranchError(candidates, self.git_ops.list_branches(path))

    def _stash_label(self) -> str:
        return f"{STASH_LABEL_PREFIX} {self.clock().strftime(STASH_TIMESTAMP_FORMAT)}"

    def sync(self, partial: Optional[str] = None, cwd: Optional[Union[str, Path]] = None) -> SyncResult:
        """Sync the worktree matching ``partial`` with the base branch.

        Without ``partial`` the branch checked out in ``cwd`` is used after
        the user confirms it.

        Raises:
            BranchRequiredError: No partial given and none could be inferred
            SelectionCancelledError: The user declined or aborted a prompt
            NotFoundError: Nothing matches
            NoBaseBranchError: No main/master branch, remote or local
            FetchFailedError: Fetching the remote failed (nothing else was done)
            StashFailedError: Local changes could not be stashed
            SyncConflictError: Rebase and merge both failed
        """
        if not partial:
            partial = self._partial_from_cwd(cwd or Path.cwd())

        worktree = self.disambiguator.resolve(partial)
        return self.sync_worktree(worktree)

    def sync_worktree(self, worktree: Worktree) -> SyncResult:
        """Run the sync protocol against an already resolved worktree."""
        path = worktree.path
        branch = worktree.branch
        self.console.print(f"🔄 Syncing worktree: {branch}")

        source, is_remote = self.find_source(path)
        result = SyncResult(branch=branch, path=path, source=source)

        if is_remote:
            self.console.print("📡 Fetching latest changes...")
            try:
                self.git_ops.fetch(path, self.remote_name)
            except GitOperationError as e:
                raise FetchFailedError(self.remote_name, e.message)
            result.fetched = True
        else:
            self.console.print("💡 Using local branch, skipping fetch")

        try:
            dirty = self.git_ops.is_dirty(path)
        except GitOperationError as e:
            raise StashFailedError(path, e.message)
        if dirty:
            self.console.print("💾 Stashing uncommitted changes...")
            try:
                self.git_ops.stash_push(path, self._stash_label())
            except GitOperationError as e:
                raise StashFailedError(path, e.message)
            result.stashed = True

        self.console.print(f"🔄 Rebasing {branch} onto {source}...")
        try:
            self.git_ops.rebase(path, source)
            result.method = "rebase"
            self.console.print("[green]✅ Rebase successful[/green]")
        except GitOperationError as rebase_error:
            logger.info(f"Rebase of {branch} onto {source} failed: {rebase_error}")
            self.console.print("[yellow]⚠️  Rebase failed, attempting merge instead...[/yellow]")
            try:
                self.git_ops.rebase_abort(path)
            except GitOperationError as e:
                logger.debug(f"rebase --abort: {e}")
            try:
                self.git_ops.merge(path, source)
            except GitOperationError as merge_error:
                logger.info(f"Merge of {source} into {branch} failed: {merge_error}")
                raise SyncConflictError(branch, source, stashed=result.stashed)
            result.method = "merge"
            self.console.print("[green]✅ Merge successful[/green]")

        if result.stashed:
            self.console.print("📤 Restoring stashed changes...")
            try:
                self.git_ops.stash_pop(path)
                result.stash_restored = True
                self.console.print("[green]✅ Changes restored successfully[/green]")
            except GitOperationError as e:
                result.stash_restored = False
                logger.warning(f"Could not restore stashed changes in {path}: {e}")
                self.console.print(
                    "[yellow]⚠️  Failed to restore stashed changes. Use 'git stash pop' manually.[/yellow]"
                )
                self.console.print("💡 Your changes are still available in the stash.")

        self.console.print(f"🎉 Sync completed for {branch}")
        return result
