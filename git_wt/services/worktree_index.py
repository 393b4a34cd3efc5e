"""Discovery of the worktrees stored under the worktrees root."""

import os
from dataclasses import replace
from pathlib import Path
from typing import Optional, Union, TYPE_CHECKING

from git_wt.exceptions import GitOperationError
from git_wt.models.worktree import Worktree
from git_wt.services.git.operations import GitOperations, is_worktree_dir
from git_wt.logging_config import get_logger

if TYPE_CHECKING:
    from git_wt.config import Config

logger = get_logger(__name__)


def folder_from_branch(branch: str, filler: str = "-") -> str:
    """Folder name for a branch: every path separator becomes ``filler``."""
    return branch.replace("/", filler)


def branch_from_folder(folder: str, filler: str = "-") -> str:
    """Best-effort inverse of folder_from_branch."""
    return folder.replace(filler, "/")


class WorktreeIndex:
    """Enumerates worktrees under the root and maps them to branches.

    Nothing is cached: every listing asks git for the current branch, so the
    index never goes stale, at the cost of one git call per worktree.
    """

    def __init__(self, config: "Config", git_ops: GitOperations):
        self.config = config
        self.git_ops = git_ops
        self.root = Path(config.worktrees_root)
        self.filler = config.folder_filler

    def ensure_root(self) -> Path:
        """Create the worktrees root if it does not exist."""
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root

    def folder_for_branch(self, branch: str) -> str:
        return folder_from_branch(branch, self.filler)

    def branch_for_folder(self, folder: str) -> str:
        return branch_from_folder(folder, self.filler)

    def path_for_branch(self, branch: str) -> Path:
        """Target directory of the worktree for ``branch``."""
        return self.root / self.folder_for_branch(branch)

    def get(self, path: Union[str, Path]) -> Optional[Worktree]:
        """Build the Worktree for a directory, or None if it is not one."""
        path = str(path)
        if not is_worktree_dir(path):
            return None
        branch = self.git_ops.current_branch(path)
        if branch:
            return Worktree(path=path, branch=branch)
        # Detached or broken linkage: fall back to the folder name
        fallback = self.branch_for_folder(os.path.basename(path))
        logger.debug(f"Using folder-derived branch '{fallback}' for {path}")
        return Worktree(path=path, branch=fallback, branch_from_folder=True)

    def list_worktrees(self) -> list[Worktree]:
        """List worktrees in directory order.

        Immediate subdirectories of the root without git linkage are skipped;
        they are reported only when ``warn_invalid_worktrees`` is set.
        """
        root = self.ensure_root()
        worktrees = []
        for entry in sorted(os.scandir(root), key=lambda e: e.name):
            if not entry.is_dir():
                continue
            worktree = self.get(entry.path)
            if worktree is None:
                if self.config.warn_invalid_worktrees:
                    logger.warning(f"Skipping {entry.path}: not a git worktree")
                else:
                    logger.debug(f"Skipping {entry.path}: not a git worktree")
                continue
            worktrees.append(worktree)

        logger.debug(f"Found {len(worktrees)} worktrees under {root}")
        return worktrees

    def load_details(self, worktree: Worktree) -> Worktree:
        """Return a copy of ``worktree`` with dirty state, upstream and project filled in."""
        try:
            dirty = self.git_ops.is_dirty(worktree.path)
        except GitOperationError as e:
            logger.warning(f"Could not check status of {worktree.path}: {e}")
            dirty = None
        return replace(
            worktree,
            dirty=dirty,
            upstream=self.git_ops.upstream_of(worktree.path),
            project=self.git_ops.project_name(worktree.path),
        )
