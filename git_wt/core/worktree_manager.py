"""Core functionality for git-wt"""

import os
import signal
import sys
from pathlib import Path
from typing import Iterable, Optional, Union

from rich.console import Console
from rich.markup import escape

from git_wt.config import Config
from git_wt.exceptions import NotFoundError, NotInRepositoryError
from git_wt.models.worktree import Worktree, DeleteReport, SyncResult
from git_wt.services.disambiguator import Disambiguator
from git_wt.services.display_service import DisplayService
from git_wt.services.file_copier import FileCopier
from git_wt.services.git import GitOperations
from git_wt.services.lifecycle import LifecycleManager, parse_time_spec
from git_wt.services.matcher import filter_worktrees
from git_wt.services.prompts import Prompter, ConsolePrompter
from git_wt.services.publisher import Publisher
from git_wt.services.sync_engine import SyncEngine
from git_wt.services.tag_store import TagStore
from git_wt.services.worktree_index import WorktreeIndex
from git_wt.utils.disk import directory_size
from git_wt.logging_config import get_logger

console = Console()
logger = get_logger(__name__)

# Module-level reference to the active WorktreeManager instance for signal handling
_active_manager: Optional["WorktreeManager"] = None


def _signal_handler(signum, frame):
    """Handle interrupt signals: report what may be left pending, then exit."""
    if signum == signal.SIGINT:
        print()  # New line after ^C
        if _active_manager and _active_manager.git_ops.in_git_operation:
            console.print(
                "\n[yellow]Interrupted during a git operation! Nothing is rolled back: "
                "check 'git stash list' and 'git worktree list' before retrying.[/yellow]"
            )
        else:
            console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(1)


def install_signal_handler() -> None:
    """Route SIGINT through _signal_handler."""
    signal.signal(signal.SIGINT, _signal_handler)


class WorktreeManager:
    """One method per command; wires the services together from a Config."""

    def __init__(
        self,
        config: Union[Config, dict],
        cwd: Optional[Union[str, Path]] = None,
        prompter: Optional[Prompter] = None,
        output: Optional[Console] = None,
    ):
        """Initialize WorktreeManager.

        Args:
            config: Configuration dict or Config object
            cwd: Directory the command was started from (defaults to os.getcwd())
            prompter: Source of interactive answers (defaults to the console)
            output: Console for user-facing messages
        """
        if isinstance(config, dict):
            self.config = Config.from_dict(config)
        else:
            self.config = config
        self.cwd = str(cwd or os.getcwd())
        self.console = output or console
        self.prompter = prompter or ConsolePrompter(self.console)

        self.repo_path = GitOperations.find_repo_root(self.cwd)
        logger.debug(f"Parent repository: {self.repo_path or '(none)'}")

        self.git_ops = GitOperations(self.repo_path, self.config)
        self.index = WorktreeIndex(self.config, self.git_ops)
        self.disambiguator = Disambiguator(self.index, self.prompter, self.console)
        self.tag_store = TagStore(self.config, self.index)
        self.lifecycle = LifecycleManager(
            self.config, self.git_ops, self.index, self.disambiguator, FileCopier(self.console), self.console
        )
        self.sync_engine = SyncEngine(self.config, self.git_ops, self.disambiguator, self.prompter, self.console)
        self.publisher = Publisher(self.config, self.git_ops, self.prompter, self.console)
        self.display_service = DisplayService(self.console, verbose=self.config.verbose)

        # Set as active manager for signal handling
        global _active_manager
        _active_manager = self

    def list_worktrees(self, pattern: Optional[str] = None, current_only: bool = False) -> list[Worktree]:
        """Worktrees with details and tags, optionally filtered.

        Raises:
            NotInRepositoryError: ``current_only`` outside a repository
        """
        worktrees = self.index.list_worktrees()

        if current_only:
            if not self.repo_path:
                raise NotInRepositoryError(self.cwd)
            current_url = self.git_ops.remote_url(self.repo_path)
            current_project = self.git_ops.project_name(self.repo_path)
            worktrees = [
                wt
                for wt in worktrees
                if (current_url and self.git_ops.remote_url(wt.path) == current_url)
                or self.git_ops.project_name(wt.path) == current_project
            ]

        detailed = []
        for wt in worktrees:
            wt = self.index.load_details(wt)
            wt.tags = self.tag_store.read_tags(wt.path)
            detailed.append(wt)

        return filter_worktrees(pattern, detailed) if pattern else detailed

    def disk_usage(self) -> tuple[list[tuple[str, int]], int]:
        """Size of every folder under the root, and of the root as a whole."""
        root = self.index.ensure_root()
        sizes = [(entry.name, directory_size(entry)) for entry in sorted(root.iterdir()) if entry.is_dir()]
        return sizes, directory_size(root)

    def create(self, branch: str, force: bool = False, copy_patterns: Iterable[str] = ()) -> str:
        return self.lifecycle.create(branch, force=force, copy_patterns=copy_patterns)

    def checkout(self, branch: str, force: bool = False) -> str:
        return self.lifecycle.checkout(branch, force=force).path

    def switch(self, partial: str) -> str:
        """Path of the worktree matching ``partial``."""
        return self.disambiguator.resolve(partial).path

    def delete(self, partial: str, force: bool = False, dry_run: bool = False) -> DeleteReport:
        report = self.lifecycle.delete(partial, force=force, dry_run=dry_run)
        if dry_run:
            self.display_service.display_delete_report(report, partial, force=force)
        return report

    def tag(self, partial: str, tag: str) -> Worktree:
        """Tag the worktree matching ``partial``."""
        worktree = self.disambiguator.resolve(partial)
        if self.tag_store.add_tag(worktree.path, tag):
            self.console.print(f"[green]✓ Tagged '{escape(worktree.branch)}' as '{escape(tag)}'[/green]")
        else:
            self.console.print(f"'{escape(worktree.branch)}' is already tagged '{escape(tag)}'")
        return worktree

    def switch_by_tag(self, tag: str) -> str:
        """Path of a worktree carrying ``tag``; asks when several do."""
        candidates = self.tag_store.list_tagged_worktrees(tag)
        if not candidates:
            raise NotFoundError(tag, kind="tagged")
        return self.disambiguator.choose(candidates, f"Multiple worktrees have tag '{tag}':").path

    def time_travel(self, spec: str, force: bool = False) -> str:
        """Detached worktree for ``<branch>@<YYYY-MM-DD>``."""
        branch, date = parse_time_spec(spec)
        return self.lifecycle.time_travel(branch, date, force=force)

    def sync(self, partial: Optional[str] = None) -> SyncResult:
        result = self.sync_engine.sync(partial, cwd=self.cwd)
        self.display_service.display_sync_result(result)
        return result

    def push(self) -> str:
        return self.publisher.push(self.cwd)
