"""Display and formatting service for worktree information"""
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from git_wt.constants import LIST_COLUMNS, DISK_USAGE_COLUMNS
from git_wt.formatters import format_size, format_branch, format_upstream, format_tags, format_project
from git_wt.models.worktree import Worktree, DeleteReport, SyncResult
from git_wt.logging_config import get_logger

logger = get_logger(__name__)


class DisplayService:
    def __init__(self, console: Optional[Console] = None, verbose: bool = False):
        self.console = console or Console()
        self.verbose = verbose

    def display_worktree_table(self, worktrees: List[Worktree], empty_message: Optional[str] = None) -> None:
        """Display a table of worktrees; dirty ones are marked and yellow."""
        if not worktrees:
            if empty_message:
                self.console.print(empty_message)
            return

        table = Table()
        for col in LIST_COLUMNS:
            table.add_column(col.label, min_width=col.width or None, overflow="fold")

        for wt in worktrees:
            table.add_row(
                format_project(wt),
                format_branch(wt),
                format_upstream(wt),
                format_tags(wt),
                wt.path,
                style="yellow" if wt.dirty else None,
            )

        self.console.print(table)

    def display_disk_usage(self, sizes: List[tuple[str, int]], total: int) -> None:
        """Display size per worktree folder, largest first, and the total."""
        table = Table(show_footer=True)
        label, size = DISK_USAGE_COLUMNS
        table.add_column(label.label, footer="TOTAL", min_width=label.width)
        table.add_column(size.label, footer=format_size(total), justify="right", min_width=size.width)
        for name, value in sorted(sizes, key=lambda item: item[1], reverse=True):
            table.add_row(name, format_size(value))
        self.console.print(table)

    def display_delete_report(self, report: DeleteReport, partial: str, force: bool = False) -> None:
        """Describe what a dry-run delete found."""
        self.console.print("🔍 DRY RUN MODE - Would delete the following:")
        self.console.print(f"  📂 Worktree directory: {report.path}")
        self.console.print(f"  🌿 Branch: {report.branch}")
        for warning in report.warnings:
            self.console.print(f"  [yellow]⚠️  WARNING: {warning}[/yellow]")
        self.console.print(f"  💾 Disk space to be freed: {format_size(report.disk_usage)}")
        self.console.print()
        self.console.print(f"💡 To actually delete, run: wt delete {partial}")
        if force:
            self.console.print("💡 Force flag detected - would override safety checks")

    def display_sync_result(self, result: SyncResult) -> None:
        """Summarize a sync in verbose mode."""
        if not self.verbose:
            return
        self.console.print(f"  Source: {result.source} (fetched: {result.fetched})")
        self.console.print(f"  Method: {result.method}")
        if result.stashed:
            self.console.print(f"  Stash restored: {result.stash_restored}")
