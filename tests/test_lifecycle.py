"""Tests for creating, checking out, time travelling and deleting worktrees"""
import git
import pytest

from git_wt.core import WorktreeManager
from git_wt.exceptions import (
    BranchExistsError,
    BranchNotFoundError,
    DirtyWorktreeError,
    FolderCollisionError,
    InvalidBranchNameError,
    NoCommitBeforeDateError,
    NotFoundError,
    NotInRepositoryError,
    RegistrationRemovalFailedError,
)
from git_wt.services.git.operations import is_worktree_dir
from git_wt.services.lifecycle import parse_time_spec

from conftest import commit_file


def branch_at(path):
    return git.Repo(path).git.rev_parse("--abbrev-ref", "HEAD")


class TestCreate:
    """Test creating a branch together with its worktree."""

    def test_create_new_branch(self, manager, git_repo, worktrees_root):
        path = manager.create("feature/login")

        assert path == str(worktrees_root / "feature-login")
        assert is_worktree_dir(path)
        assert branch_at(path) == "feature/login"
        assert "feature/login" in [h.name for h in git_repo.heads]

    def test_existing_branch_touches_nothing(self, manager, git_repo, worktrees_root):
        git_repo.git.branch("feature/login")
        stale = worktrees_root / "feature-login"
        stale.mkdir()
        (stale / "keep.txt").write_text("precious")

        with pytest.raises(BranchExistsError):
            manager.create("feature/login")

        assert (stale / "keep.txt").read_text() == "precious"

    def test_stale_folder_is_replaced(self, manager, worktrees_root):
        stale = worktrees_root / "feature-login"
        stale.mkdir()
        (stale / "junk.txt").write_text("junk")

        path = manager.create("feature/login")

        assert is_worktree_dir(path)
        assert not (stale / "junk.txt").exists()

    def test_replaces_worktree_left_at_target(self, manager, add_worktree):
        old = add_worktree("feature-login")
        (old / "wip.txt").write_text("dirty")

        path = manager.create("feature/login", force=True)

        assert path == str(old)
        assert branch_at(path) == "feature/login"
        assert not (old / "wip.txt").exists()
        assert [wt.branch_name for wt in manager.git_ops.list_registered_worktrees()] == ["main", "feature/login"]

    @pytest.mark.parametrize("name", ["", ".", "..", "bad..name", "feature/"])
    def test_invalid_name_touches_nothing(self, manager, add_worktree, worktrees_root, name):
        keep = add_worktree("feature/keep")

        with pytest.raises(InvalidBranchNameError):
            manager.create(name)

        assert worktrees_root.is_dir()
        assert is_worktree_dir(keep)
        assert manager.git_ops.is_registered(keep)

    def test_clear_target_refuses_root_and_outside(self, manager, worktrees_root):
        (worktrees_root / "keep.txt").write_text("x")

        with pytest.raises(InvalidBranchNameError):
            manager.lifecycle._clear_target(worktrees_root)
        with pytest.raises(InvalidBranchNameError):
            manager.lifecycle._clear_target(worktrees_root / "..")

        assert (worktrees_root / "keep.txt").exists()

    def test_outside_repository(self, config, temp_dir, prompter, output):
        elsewhere = temp_dir / "elsewhere"
        elsewhere.mkdir()
        manager = WorktreeManager(config, cwd=elsewhere, prompter=prompter, output=output)

        with pytest.raises(NotInRepositoryError):
            manager.create("feature/login")

    def test_copy_patterns(self, manager, git_repo):
        repo_path = git_repo.working_tree_dir
        with open(f"{repo_path}/.env", "w") as f:
            f.write("SECRET=1\n")
        commit_file(git_repo, "config/app.json", "{}")
        with open(f"{repo_path}/config/local.json", "w") as f:
            f.write('{"local": true}')

        path = manager.create("feature/login", copy_patterns=[".env,config/local.json", "*.missing"])

        assert open(f"{path}/.env").read() == "SECRET=1\n"
        assert open(f"{path}/config/local.json").read() == '{"local": true}'
        report = manager.lifecycle.last_copy_report
        assert report.copied == [".env", "config/local.json"]
        assert report.unmatched_patterns == ["*.missing"]

    def test_copy_directory_skips_git(self, manager, git_repo):
        repo_path = git_repo.working_tree_dir
        commit_file(git_repo, "node_modules/.keep", "")
        with open(f"{repo_path}/node_modules/lib.js", "w") as f:
            f.write("module.exports = 1")

        path = manager.create("feature/deps", copy_patterns=["node_modules", ".git"])

        assert open(f"{path}/node_modules/lib.js").read() == "module.exports = 1"
        assert manager.lifecycle.last_copy_report.skipped == [".git"]
        assert branch_at(path) == "feature/deps"


class TestCheckout:
    """Test checking out existing branches."""

    def test_local_branch(self, manager, git_repo, worktrees_root):
        git_repo.git.branch("feature/local")

        path = manager.checkout("feature/local")

        assert path == str(worktrees_root / "feature-local")
        assert branch_at(path) == "feature/local"

    def test_remote_only_branch_gets_tracking_branch(self, manager, git_repo, origin_repo):
        git_repo.git.push("origin", "main:feature/remote")
        git_repo.git.fetch("origin")

        result = manager.lifecycle.checkout("feature/remote")

        assert result.from_remote is True
        assert branch_at(result.path) == "feature/remote"
        assert manager.git_ops.upstream_of(result.path) == "origin/feature/remote"

    def test_existing_worktree_is_reused(self, manager, add_worktree):
        path = add_worktree("feature/login")

        result = manager.lifecycle.checkout("feature/login")

        assert result.switched is True
        assert result.path == str(path)

    def test_unknown_branch(self, manager):
        with pytest.raises(BranchNotFoundError):
            manager.checkout("feature/ghost")

    def test_invalid_name(self, manager, worktrees_root):
        with pytest.raises(InvalidBranchNameError):
            manager.checkout("..")
        assert worktrees_root.is_dir()

    def test_folder_collision(self, manager, git_repo, worktrees_root):
        git_repo.git.branch("feature/local")
        (worktrees_root / "feature-local").mkdir()
        (worktrees_root / "feature-local" / "file.txt").write_text("x")

        with pytest.raises(FolderCollisionError):
            manager.checkout("feature/local")
        assert (worktrees_root / "feature-local" / "file.txt").exists()

        path = manager.checkout("feature/local", force=True)
        assert branch_at(path) == "feature/local"


class TestTimeTravel:
    """Test detached worktrees at a past date."""

    def test_parse_time_spec(self):
        assert parse_time_spec("feature/x@2024-01-31") == ("feature/x", "2024-01-31")

    @pytest.mark.parametrize("spec", ["main", "main@", "main@2024-1-1", "@2024-01-01"])
    def test_parse_time_spec_invalid(self, spec):
        with pytest.raises(ValueError):
            parse_time_spec(spec)

    def test_detached_worktree_at_old_commit(self, manager, git_repo, worktrees_root):
        old = commit_file(git_repo, "old.txt", "old", "Old commit", date="2020-01-01T12:00:00")

        path = manager.time_travel("main@2020-06-01")

        assert path == str(worktrees_root / "main-2020-06-01")
        assert branch_at(path) == "HEAD"
        assert git.Repo(path).git.rev_parse("HEAD") == old

    def test_no_commit_before_date(self, manager):
        with pytest.raises(NoCommitBeforeDateError):
            manager.time_travel("main@1999-01-01")

    def test_invalid_calendar_date(self, manager):
        with pytest.raises(ValueError):
            manager.time_travel("main@2020-13-45")

    def test_collision_without_force(self, manager, git_repo, worktrees_root):
        commit_file(git_repo, "old.txt", "old", "Old commit", date="2020-01-01T12:00:00")
        (worktrees_root / "main-2020-06-01").mkdir()

        with pytest.raises(FolderCollisionError):
            manager.time_travel("main@2020-06-01")

        assert is_worktree_dir(manager.time_travel("main@2020-06-01", force=True))


class TestDelete:
    """Test deleting worktrees."""

    def test_dry_run_reports_and_changes_nothing(self, manager, git_repo, add_worktree):
        path = add_worktree("feature/login")
        wt_repo = git.Repo(path)
        commit_file(wt_repo, "a.txt", "a")
        commit_file(wt_repo, "b.txt", "b")
        (path / "notes.txt").write_text("uncommitted")

        report = manager.delete("login", dry_run=True)

        assert report.dry_run is True
        assert report.deleted is False
        assert report.has_changes is True
        assert report.upstream is None
        assert report.disk_usage > 0
        assert "Branch has no upstream - all commits would be lost" in report.warnings
        assert path.is_dir()
        assert manager.git_ops.is_registered(path)
        assert "DRY RUN MODE" in manager.console.file.getvalue()

    def test_dry_run_counts_unpushed_commits(self, manager, add_worktree, origin_repo):
        path = add_worktree("feature/login")
        wt_repo = git.Repo(path)
        wt_repo.git.push("-u", "origin", "feature/login")
        commit_file(wt_repo, "a.txt", "a")
        commit_file(wt_repo, "b.txt", "b")

        report = manager.delete("login", dry_run=True)

        assert report.upstream == "origin/feature/login"
        assert report.ahead == 2
        assert report.warnings == ["Branch has 2 unpushed commit(s) that would be lost"]

    def test_delete_clean_worktree(self, manager, add_worktree):
        path = add_worktree("feature/login")

        report = manager.delete("login")

        assert report.deleted is True
        assert not path.exists()
        assert not manager.git_ops.is_registered(path)

    def test_dirty_worktree_requires_force(self, manager, add_worktree):
        path = add_worktree("feature/login")
        (path / "notes.txt").write_text("wip")

        with pytest.raises(DirtyWorktreeError):
            manager.delete("login")
        assert (path / "notes.txt").exists()
        assert manager.git_ops.is_registered(path)

        assert manager.delete("login", force=True).deleted is True
        assert not path.exists()

    def test_delete_asks_when_ambiguous(self, manager, add_worktree):
        login = add_worktree("feature/login")
        logout = add_worktree("feature/logout")
        manager.prompter.choices = [0]

        manager.delete("log")

        assert not login.exists()
        assert logout.exists()

    def test_delete_unknown(self, manager, add_worktree):
        add_worktree("feature/login")
        with pytest.raises(NotFoundError):
            manager.delete("payments")

    def test_failed_unregistration_leaves_directory(self, manager, git_repo, add_worktree):
        path = add_worktree("feature/login")
        git_repo.git.worktree("lock", str(path))

        with pytest.raises(RegistrationRemovalFailedError) as exc_info:
            manager.delete("login")

        assert "locked" in exc_info.value.message
        assert (path / "README.md").exists()
        assert manager.git_ops.is_registered(path)
        assert "Deleted worktree" not in manager.console.file.getvalue()

    def test_single_success_message(self, manager, add_worktree):
        add_worktree("feature/login")
        manager.delete("login")
        assert manager.console.file.getvalue().count("✓") == 1
