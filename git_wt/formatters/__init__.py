"""Formatting utilities for git-wt.

- size: human-readable byte counts
- worktree: table cells for worktree listings
"""

from .size import format_size
from .worktree import format_branch, format_upstream, format_tags, format_project

__all__ = [
    "format_size",
    "format_branch",
    "format_upstream",
    "format_tags",
    "format_project",
]
