"""Pytest fixtures for git-wt tests"""
import io
import tempfile
from pathlib import Path

import pytest
import git
from rich.console import Console

from git_wt.config import Config
from git_wt.core import WorktreeManager
from git_wt.exceptions import SelectionCancelledError
from git_wt.services.prompts import Prompter


class ScriptedPrompter(Prompter):
    """Prompter answering from pre-recorded lists and remembering what it was asked."""

    def __init__(self, choices=None, confirms=None, answers=None):
        self.choices = list(choices or [])
        self.confirms = list(confirms or [])
        self.answers = list(answers or [])
        self.asked = []

    def choose(self, options):
        self.asked.append(("choose", list(options)))
        if not self.choices:
            raise SelectionCancelledError()
        return self.choices.pop(0)

    def confirm(self, message):
        self.asked.append(("confirm", message))
        return self.confirms.pop(0) if self.confirms else False

    def ask(self, message, default=None):
        self.asked.append(("ask", message))
        answer = self.answers.pop(0) if self.answers else ""
        if not answer and default is not None:
            return default
        return answer


def commit_file(repo, name, content, message=None, date=None):
    """Write a file in the repo's working tree and commit it; returns the new sha.

    Uses the git CLI so it works the same in linked worktrees.
    """
    path = Path(repo.working_tree_dir) / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    repo.git.add(name)
    env = {"GIT_AUTHOR_DATE": date, "GIT_COMMITTER_DATE": date} if date else None
    repo.git.commit("-m", message or f"Update {name}", env=env)
    return repo.git.rev_parse("HEAD")


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository on branch main, without remotes."""
    repo_path = temp_dir / "test_repo"
    repo_path.mkdir()

    # Initialize repository
    repo = git.Repo.init(repo_path)

    # Configure git user for commits
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    commit_file(repo, "README.md", "# Test Repository\n", "Initial commit")

    # Rename master to main if needed
    repo.git.branch("-M", "main")

    yield repo

    # Cleanup
    repo.close()


@pytest.fixture
def origin_repo(git_repo, temp_dir):
    """Give git_repo a bare 'origin' remote holding main."""
    bare_path = temp_dir / "origin.git"
    bare = git.Repo.init(bare_path, bare=True)
    git_repo.create_remote("origin", str(bare_path))
    git_repo.git.push("-u", "origin", "main")
    git_repo.git.fetch("origin")

    yield bare

    bare.close()


@pytest.fixture
def worktrees_root(temp_dir):
    """Directory holding all worktrees."""
    root = temp_dir / "worktrees"
    root.mkdir()
    return root


@pytest.fixture
def config(worktrees_root):
    """Configuration pointing at the temporary worktrees root."""
    return Config(worktrees_root=worktrees_root)


@pytest.fixture
def prompter():
    """Prompter without any scripted answers."""
    return ScriptedPrompter()


@pytest.fixture
def output():
    """Console writing to a buffer."""
    return Console(file=io.StringIO(), width=200)


@pytest.fixture
def manager(config, git_repo, prompter, output):
    """WorktreeManager started from inside git_repo."""
    return WorktreeManager(config, cwd=git_repo.working_tree_dir, prompter=prompter, output=output)


@pytest.fixture
def add_worktree(git_repo, worktrees_root):
    """Factory registering a worktree for a new branch under the root."""

    def _add(branch, folder=None, start_point="main"):
        path = worktrees_root / (folder or branch.replace("/", "-"))
        git_repo.git.worktree("add", "-b", branch, str(path), start_point)
        return path

    return _add
