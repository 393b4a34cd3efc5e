"""Data models for git-wt."""

from .worktree import Worktree, RegisteredWorktree, DeleteReport, SyncResult

__all__ = ["Worktree", "RegisteredWorktree", "DeleteReport", "SyncResult"]
