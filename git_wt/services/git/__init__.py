"""Git-related services for git-wt."""

from .github import GitHubCli
from .operations import GitOperations, is_worktree_dir
from .worktrees import WorktreeService, parse_worktree_porcelain

__all__ = [
    "GitHubCli",
    "GitOperations",
    "is_worktree_dir",
    "WorktreeService",
    "parse_worktree_porcelain",
]
