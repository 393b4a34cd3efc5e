"""Tests for GitOperations and worktree registration parsing"""
import os

import pytest

from git_wt.exceptions import GitOperationError, NotInRepositoryError
from git_wt.services.git import GitOperations, parse_worktree_porcelain, is_worktree_dir


@pytest.fixture
def git_ops(config, git_repo):
    return GitOperations(git_repo.working_tree_dir, config)


class TestParseWorktreePorcelain:
    """Test parsing of 'git worktree list --porcelain'."""

    def test_main_and_linked(self, temp_dir):
        output = (
            f"worktree {temp_dir}\n"
            "HEAD 1111111111111111111111111111111111111111\n"
            "branch refs/heads/main\n"
            "\n"
            f"worktree {temp_dir}/gone\n"
            "HEAD 2222222222222222222222222222222222222222\n"
            "detached\n"
        )

        worktrees = parse_worktree_porcelain(output)

        assert len(worktrees) == 2
        assert worktrees[0].is_main is True
        assert worktrees[0].branch_name == "main"
        assert worktrees[0].is_orphaned is False
        assert worktrees[1].is_main is False
        assert worktrees[1].branch_name == ""
        assert worktrees[1].is_orphaned is True

    def test_empty_output(self):
        assert parse_worktree_porcelain("") == []


class TestGitOperations:
    """Test repository queries against a real repository."""

    def test_find_repo_root_from_subdirectory(self, git_repo):
        sub = f"{git_repo.working_tree_dir}/docs"
        os.makedirs(sub)
        assert GitOperations.find_repo_root(sub) == git_repo.working_tree_dir

    def test_find_repo_root_outside(self, temp_dir):
        assert GitOperations.find_repo_root(temp_dir) is None

    def test_require_repo(self, config):
        with pytest.raises(NotInRepositoryError):
            GitOperations(None, config).require_repo()

    def test_registration(self, git_ops, worktrees_root):
        path = worktrees_root / "feature-a"
        git_ops.register_worktree(path, "feature/a", new_branch=True)

        assert is_worktree_dir(path)
        assert git_ops.is_registered(path)
        assert git_ops.current_branch(path) == "feature/a"
        assert git_ops.parent_repo_path(path) == git_ops.repo_path
        assert [wt.branch_name for wt in git_ops.list_registered_worktrees()] == ["main", "feature/a"]

    def test_register_existing_folder_fails(self, git_ops, worktrees_root):
        path = worktrees_root / "busy"
        path.mkdir()
        (path / "file.txt").write_text("x")
        with pytest.raises(GitOperationError):
            git_ops.register_worktree(path, "feature/busy", new_branch=True)

    def test_in_git_operation_is_reset(self, git_ops, worktrees_root):
        git_ops.register_worktree(worktrees_root / "feature-a", "feature/a", new_branch=True)
        assert git_ops.in_git_operation is False

    def test_branch_queries(self, git_ops, git_repo):
        git_repo.git.branch("feature/b")
        assert git_ops.branch_exists_local("feature/b") is True
        assert git_ops.branch_exists_local("feature/none") is False
        assert git_ops.branch_exists_remote("feature/b") is False
        assert "feature/b" in git_ops.list_branches(git_repo.working_tree_dir)

    def test_is_dirty(self, git_ops, git_repo):
        assert git_ops.is_dirty(git_repo.working_tree_dir) is False
        with open(f"{git_repo.working_tree_dir}/new.txt", "w") as f:
            f.write("x")
        assert git_ops.is_dirty(git_repo.working_tree_dir) is True

    def test_is_dirty_outside_repository(self, git_ops, temp_dir):
        plain = temp_dir / "plain"
        plain.mkdir()
        with pytest.raises(GitOperationError):
            git_ops.is_dirty(plain)

    def test_project_name_without_remote(self, git_ops, git_repo):
        assert git_ops.project_name(git_repo.working_tree_dir) == "test_repo"
        assert git_ops.remote_url(git_repo.working_tree_dir) is None
