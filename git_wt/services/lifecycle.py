"""Creating, checking out and deleting worktrees."""

import os
import re
import shutil
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional, TYPE_CHECKING

from rich.console import Console

from git_wt.constants import TIME_TRAVEL_DATE_FORMAT
from git_wt.exceptions import (
    BranchExistsError,
    BranchNotFoundError,
    FolderCollisionError,
    InvalidBranchNameError,
    NoCommitBeforeDateError,
)
from git_wt.models.worktree import DeleteReport
from git_wt.services.disambiguator import Disambiguator
from git_wt.services.file_copier import FileCopier, CopyReport
from git_wt.services.git.operations import GitOperations, is_worktree_dir
from git_wt.services.worktree_index import WorktreeIndex
from git_wt.utils.disk import directory_size
from git_wt.logging_config import get_logger

if TYPE_CHECKING:
    from git_wt.config import Config

logger = get_logger(__name__)


@dataclass
class CheckoutResult:
    """Where a checkout ended up and whether it only switched."""

    path: str
    branch: str
    switched: bool = False  # An existing worktree was reused
    from_remote: bool = False  # A local tracking branch was created


class LifecycleManager:
    """Owns the absent → active → absent life of a worktree directory.

    Every precondition is checked before anything on disk is touched, and a
    worktree's registration is always removed before its directory.
    """

    def __init__(
        self,
        config: "Config",
        git_ops: GitOperations,
        index: WorktreeIndex,
        disambiguator: Disambiguator,
        copier: Optional[FileCopier] = None,
        console: Optional[Console] = None,
    ):
        self.config = config
        self.git_ops = git_ops
        self.index = index
        self.disambiguator = disambiguator
        self.console = console or Console()
        self.copier = copier or FileCopier(self.console)
        self.last_copy_report: Optional[CopyReport] = None

    def _target_for(self, name: str) -> Path:
        """Worktree directory for ``name``; it must be an immediate child of the root.

        Raises:
            InvalidBranchNameError: The folder would be the root itself or lie outside it
        """
        target = self.index.path_for_branch(name)
        self._check_inside_root(target, name)
        return target

    def _check_inside_root(self, target: Path, name: str) -> None:
        parent = os.path.dirname(os.path.abspath(target))
        if parent != os.path.abspath(self.index.root):
            raise InvalidBranchNameError(name, f"folder {target} is not inside {self.index.root}")

    def _clear_target(self, target: Path, force: bool = True) -> None:
        """Remove whatever occupies ``target``: registration first, then the directory."""
        self._check_inside_root(target, target.name)
        if self.git_ops.is_registered(target):
            self.git_ops.discard_worktree(target, force=force)
        if target.is_symlink() or target.is_file():
            target.unlink()
        elif target.exists():
            shutil.rmtree(target)
        self.git_ops.prune_worktrees()
        logger.info(f"Cleared existing folder {target}")

    def create(self, branch: str, force: bool = False, copy_patterns: Iterable[str] = ()) -> str:
        """Create ``branch`` and a worktree for it.

        A folder already sitting at the target is discarded, but only once the
        branch is known not to exist. ``force`` also drops a registration
        git would refuse to remove because of local changes.

        Raises:
            InvalidBranchNameError: git would reject the name (nothing is touched)
            BranchExistsError: The branch already exists (nothing is touched)
        """
        repo_path = self.git_ops.require_repo()
        # Must run before any destructive step below
        self.git_ops.validate_branch_name(branch)
        target = self._target_for(branch)
        if self.git_ops.branch_exists_local(branch):
            raise BranchExistsError(branch)

        self.index.ensure_root()
        if target.exists() or target.is_symlink():
            self._clear_target(target, force=force)

        self.git_ops.register_worktree(target, branch, new_branch=True)

        copy_patterns = list(copy_patterns)
        if copy_patterns:
            self.last_copy_report = self.copier.copy(repo_path, target, copy_patterns)

        self.console.print(f"[green]✓ Worktree ready at: {target}[/green]")
        return str(target)

    def checkout(self, branch: str, force: bool = False) -> CheckoutResult:
        """Check out an existing local or remote branch in its own worktree.

        Raises:
            InvalidBranchNameError: git would reject the name
            BranchNotFoundError: The branch exists neither locally nor remotely
            FolderCollisionError: A non-worktree folder blocks the target
        """
        self.git_ops.require_repo()
        self.git_ops.validate_branch_name(branch)
        target = self._target_for(branch)
        self.index.ensure_root()

        if is_worktree_dir(target):
            self.console.print(f"[green]✓ Switching to existing worktree at: {target}[/green]")
            return CheckoutResult(path=str(target), branch=branch, switched=True)

        local_exists = self.git_ops.branch_exists_local(branch)
        remote_exists = self.git_ops.branch_exists_remote(branch)
        if not local_exists and not remote_exists:
            raise BranchNotFoundError(branch, self.git_ops.remote_name)

        if target.exists() or target.is_symlink():
            if not force:
                raise FolderCollisionError(str(target))
            self._clear_target(target)

        from_remote = not local_exists
        if from_remote:
            start_point = f"{self.git_ops.remote_name}/{branch}"
            self.git_ops.register_worktree(target, branch, new_branch=True, start_point=start_point)
        else:
            self.git_ops.register_worktree(target, branch)

        self.console.print(f"[green]✓ Worktree ready at: {target} (branch {branch})[/green]")
        return CheckoutResult(path=str(target), branch=branch, from_remote=from_remote)

    def time_travel(self, branch: str, date: str, force: bool = False) -> str:
        """Create a detached worktree at the last commit on ``branch`` before ``date``.

        Raises:
            ValueError: ``date`` is not YYYY-MM-DD
            NoCommitBeforeDateError: ``branch`` has no commit that old
            FolderCollisionError: The target folder exists and force is not set
        """
        self.git_ops.require_repo()
        datetime.strptime(date, TIME_TRAVEL_DATE_FORMAT)

        commit = self.git_ops.find_commit_before(branch, date)
        if not commit:
            raise NoCommitBeforeDateError(branch, date)

        target = self._target_for(f"{branch}-{date}")
        self.index.ensure_root()
        if target.exists() or target.is_symlink():
            if not force:
                raise FolderCollisionError(str(target))
            self._clear_target(target)

        self.git_ops.register_worktree(target, detach=True, start_point=commit)
        self.console.print(f"[green]✓ Time-machine worktree created at {target} (commit {commit[:7]})[/green]")
        return str(target)

    def inspect(self, path: str, branch: str) -> DeleteReport:
        """Gather what deleting the worktree at ``path`` would lose."""
        report = DeleteReport(path=path, branch=branch, dry_run=True)
        report.has_changes = self.git_ops.is_dirty(path)
        report.upstream = self.git_ops.upstream_of(path)
        if report.upstream:
            report.ahead = self.git_ops.ahead_count(path, report.upstream)
        report.disk_usage = directory_size(path)
        return report

    def delete(self, partial: str, force: bool = False, dry_run: bool = False) -> DeleteReport:
        """Delete the worktree matching ``partial``.

        In dry-run mode only diagnostics are gathered. Otherwise the worktree is
        unregistered and only then is its directory removed; if unregistering
        fails the directory is left alone.

        Raises:
            NotFoundError: Nothing matches ``partial``
            DirtyWorktreeError: Local changes block removal and force is not set
            RegistrationRemovalFailedError: git refused to unregister the worktree
        """
        worktree = self.disambiguator.resolve(partial)

        if dry_run:
            return self.inspect(worktree.path, worktree.branch)

        report = DeleteReport(path=worktree.path, branch=worktree.branch, dry_run=False)
        self.git_ops.unregister_worktree(worktree.path, force=force)
        # git removes the directory itself; clear anything it left (ignored files)
        if Path(worktree.path).exists():
            shutil.rmtree(worktree.path)
        report.deleted = True
        logger.info(f"Deleted worktree {worktree.path}")
        self.console.print(f"[green]✓ Deleted worktree {worktree.branch} ({worktree.path})[/green]")
        return report


def parse_time_spec(spec: str) -> tuple[str, str]:
    """Split ``<branch>@<YYYY-MM-DD>`` into branch and date.

    Raises:
        ValueError: The value does not have that shape
    """
    match = re.fullmatch(r"(.+)@(\d{4}-\d{2}-\d{2})", spec or "")
    if not match:
        raise ValueError("Format must be <branch>@<YYYY-MM-DD>")
    return match.group(1), match.group(2)
