"""Worktree data models."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, List


@dataclass
class Worktree:
    """A checked-out worktree under the worktrees root."""

    path: str
    branch: str
    branch_from_folder: bool = False  # Branch derived from the folder name?
    dirty: Optional[bool] = None  # None = not computed
    upstream: Optional[str] = None
    project: Optional[str] = None
    tags: List[str] = field(default_factory=list)

    @property
    def folder(self) -> str:
        """Folder name of the worktree inside the root."""
        return Path(self.path).name

    def __str__(self) -> str:
        """String representation of worktree."""
        return f"{self.branch} ({self.path})"


@dataclass
class DeleteReport:
    """Outcome of a delete, or what a dry run found."""

    path: str
    branch: str
    dry_run: bool
    has_changes: bool = False
    upstream: Optional[str] = None
    ahead: int = 0
    disk_usage: Optional[int] = None  # bytes
    deleted: bool = False

    @property
    def warnings(self) -> List[str]:
        """Human-readable warnings about data that would be lost."""
        messages = []
        if self.has_changes:
            messages.append("Worktree has uncommitted changes that would be lost")
        if self.upstream is None:
            messages.append("Branch has no upstream - all commits would be lost")
        elif self.ahead > 0:
            messages.append(f"Branch has {self.ahead} unpushed commit(s) that would be lost")
        return messages


@dataclass
class SyncResult:
    """Outcome of a successful sync."""

    branch: str
    path: str
    source: str
    fetched: bool = False
    stashed: bool = False
    method: str = "rebase"  # rebase or merge
    stash_restored: Optional[bool] = None  # None = nothing was stashed


@dataclass
class RegisteredWorktree:
    """A worktree as reported by ``git worktree list``."""

    path: str
    branch_name: str
    commit_sha: str
    is_main: bool  # Is this the main working tree?
    is_orphaned: bool  # Directory missing?

    def __str__(self) -> str:
        """String representation of worktree."""
        status = "orphaned" if self.is_orphaned else "active"
        main_marker = " (main)" if self.is_main else ""
        return f"{self.branch_name or '(detached)'} @ {self.path}{main_marker} [{status}]"
