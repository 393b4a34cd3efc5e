"""Tests for formatters and DisplayService"""
import io

import pytest
from rich.console import Console

from git_wt.formatters import format_size, format_branch, format_upstream, format_tags
from git_wt.models.worktree import Worktree, DeleteReport, SyncResult
from git_wt.services.display_service import DisplayService
from git_wt.utils.disk import directory_size


@pytest.mark.parametrize(
    "size,expected",
    [
        (None, "unknown"),
        (0, "0B"),
        (512, "512B"),
        (4096, "4.0K"),
        (12 * 1024 * 1024, "12M"),
        (3 * 1024 ** 3 // 2, "1.5G"),
    ],
)
def test_format_size(size, expected):
    assert format_size(size) == expected


def test_worktree_cells():
    worktree = Worktree(path="/wt/a", branch="feature/a", dirty=True, tags=["auth", "ui"])
    assert format_branch(worktree) == "* feature/a"
    assert format_upstream(worktree) == "-"
    assert format_tags(worktree) == "auth, ui"


def test_directory_size(temp_dir):
    (temp_dir / "a.bin").write_bytes(b"x" * 100)
    (temp_dir / "sub").mkdir()
    (temp_dir / "sub" / "b.bin").write_bytes(b"y" * 50)
    assert directory_size(temp_dir) == 150


class TestDisplayService:
    """Test rendering."""

    @pytest.fixture
    def display(self):
        return DisplayService(Console(file=io.StringIO(), width=200), verbose=True)

    def test_worktree_table(self, display):
        display.display_worktree_table(
            [Worktree(path="/wt/feature-a", branch="feature/a", upstream="origin/feature/a", project="shop")]
        )
        out = display.console.file.getvalue()
        assert "feature/a" in out
        assert "origin/feature/a" in out
        assert "shop" in out

    def test_empty_table_message(self, display):
        display.display_worktree_table([], empty_message="Nothing here")
        assert "Nothing here" in display.console.file.getvalue()

    def test_delete_report(self, display):
        report = DeleteReport(path="/wt/a", branch="a", dry_run=True, has_changes=True, disk_usage=2048)
        display.display_delete_report(report, "a", force=True)
        out = display.console.file.getvalue()
        assert "DRY RUN MODE" in out
        assert "uncommitted changes" in out
        assert "2.0K" in out
        assert "wt delete a" in out

    def test_sync_result_only_when_verbose(self):
        quiet = DisplayService(Console(file=io.StringIO()), verbose=False)
        quiet.display_sync_result(SyncResult(branch="a", path="/wt/a", source="origin/main"))
        assert quiet.console.file.getvalue() == ""
