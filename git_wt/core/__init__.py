"""Core functionality for git-wt."""

from .worktree_manager import WorktreeManager, install_signal_handler

__all__ = ["WorktreeManager", "install_signal_handler"]
