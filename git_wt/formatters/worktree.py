"""Worktree field formatting."""

from rich.markup import escape

from git_wt.constants import SYMBOL_DIRTY, SYMBOL_NO_UPSTREAM
from git_wt.models.worktree import Worktree


def format_branch(worktree: Worktree) -> str:
    """Branch name, marked when the worktree has local changes."""
    if worktree.dirty:
        return f"{SYMBOL_DIRTY}{worktree.branch}"
    return worktree.branch


def format_upstream(worktree: Worktree) -> str:
    return worktree.upstream or SYMBOL_NO_UPSTREAM


def format_tags(worktree: Worktree) -> str:
    return escape(", ".join(worktree.tags))


def format_project(worktree: Worktree) -> str:
    return worktree.project or ""
