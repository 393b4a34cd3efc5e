"""Partial matching of user input against worktrees."""

from typing import Iterable

from git_wt.models.worktree import Worktree


def find_matches(partial: str, worktrees: Iterable[Worktree]) -> list[Worktree]:
    """Worktrees whose branch contains ``partial``, in index order.

    Matching is a case-sensitive substring test. An empty result is not an
    error; the caller decides whether it is fatal.

    Raises:
        ValueError: If ``partial`` is empty
    """
    if not partial:
        raise ValueError("search key must not be empty")
    return [wt for wt in worktrees if partial in wt.branch]


def filter_worktrees(pattern: str, worktrees: Iterable[Worktree]) -> list[Worktree]:
    """Worktrees whose branch, project name or path contains ``pattern``.

    Used by ``list``; project names are only consulted for worktrees whose
    details have been loaded.
    """
    if not pattern:
        return list(worktrees)
    return [
        wt
        for wt in worktrees
        if pattern in wt.branch or (wt.project and pattern in wt.project) or pattern in wt.path
    ]
