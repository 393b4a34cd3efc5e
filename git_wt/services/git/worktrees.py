"""Worktree registration queries for git-wt."""

import git
import os
from typing import Optional, Dict, Any

from git_wt.exceptions import GitOperationError
from git_wt.models.worktree import RegisteredWorktree
from git_wt.logging_config import get_logger

logger = get_logger(__name__)


def _describe_command_error(e: git.exc.GitCommandError, what: str) -> str:
    """Build a one-line description of a failed git command."""
    stderr = (e.stderr if hasattr(e, "stderr") and e.stderr else str(e)).strip()
    status = e.status if hasattr(e, "status") else "unknown"
    if stderr:
        return f"{what} failed (exit {status}): {stderr}"
    return f"{what} failed with exit code {status}"


def parse_worktree_porcelain(output: str) -> list[RegisteredWorktree]:
    """Parse the output of ``git worktree list --porcelain``.

    Format::

        worktree /path/to/worktree
        HEAD commit_sha
        branch refs/heads/branch-name
        (blank line between worktrees)

    The first entry is always the main working tree.
    """
    worktree_list: list[RegisteredWorktree] = []
    current: Dict[str, Any] = {}

    def flush():
        path = current.get("path")
        if path:
            worktree_list.append(
                RegisteredWorktree(
                    path=path,
                    branch_name=current.get("branch", ""),
                    commit_sha=current.get("HEAD", ""),
                    is_main=not worktree_list,
                    is_orphaned=not os.path.exists(path),
                )
            )
        current.clear()

    for line in output.split("\n"):
        line = line.strip()

        if not line:
            # Empty line marks end of worktree entry
            flush()
            continue

        if line.startswith("worktree "):
            current["path"] = line.split(" ", 1)[1]
        elif line.startswith("HEAD "):
            current["HEAD"] = line.split(" ", 1)[1]
        elif line.startswith("branch "):
            branch_ref = line.split(" ", 1)[1]
            if branch_ref.startswith("refs/heads/"):
                current["branch"] = branch_ref[len("refs/heads/"):]
            else:
                current["branch"] = ""
        elif line.startswith("detached"):
            current["branch"] = ""

    # Handle last entry if no trailing blank line
    flush()
    return worktree_list


class WorktreeService:
    """Queries and maintenance of the worktrees registered with a repository."""

    def __init__(self, repo_path: str):
        """Initialize the worktree service.

        Args:
            repo_path: Path to the git repository (any of its worktrees works)
        """
        self.repo_path = repo_path

    def _get_repo(self):
        """Get a fresh git.Repo instance for the repository."""
        return git.Repo(self.repo_path)

    def get_worktree_info(self) -> list[RegisteredWorktree]:
        """Get the worktrees registered with the repository.

        Raises:
            GitOperationError: If git cannot list the worktrees
        """
        try:
            output = self._get_repo().git.worktree("list", "--porcelain")
        except git.exc.GitCommandError as e:
            raise GitOperationError("worktree list", self.repo_path, _describe_command_error(e, "git worktree list"))

        worktree_list = parse_worktree_porcelain(output)
        logger.debug(f"Found {len(worktree_list)} registered worktrees")
        for wt in worktree_list:
            logger.debug(f"  {wt}")
        return worktree_list

    def is_registered(self, path: str) -> bool:
        """Check whether a path is registered as a worktree of the repository."""
        target = os.path.realpath(path)
        return any(os.path.realpath(wt.path) == target for wt in self.get_worktree_info())

    def prune_worktrees(self) -> None:
        """Prune metadata of worktrees whose directory is gone."""
        try:
            self._get_repo().git.worktree("prune")
            logger.info("Pruned orphaned worktree metadata")
        except git.exc.GitCommandError as e:
            raise GitOperationError("worktree prune", self.repo_path, _describe_command_error(e, "git worktree prune"))

    def remove_worktree(self, path: str, force: bool = False) -> tuple[bool, Optional[str]]:
        """Remove a worktree registration (and its directory) via git.

        Returns:
            Tuple of (success, error_message). error_message is None on success.
        """
        args = ["remove", path]
        if force:
            args.append("--force")
        try:
            self._get_repo().git.worktree(*args)
            logger.info(f"Removed worktree at {path}")
            return True, None
        except git.exc.GitCommandError as e:
            error_msg = _describe_command_error(e, "git worktree remove")
            logger.debug(f"Failed to remove worktree at {path}: {error_msg}")
            return False, error_msg
