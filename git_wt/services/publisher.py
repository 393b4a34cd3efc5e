"""Committing and pushing the worktree the user is standing in."""

from pathlib import Path
from typing import Optional, Union, TYPE_CHECKING

from rich.console import Console

from git_wt.exceptions import (
    BranchRequiredError,
    CommitAbortedError,
    GitHubCliError,
    GitOperationError,
    NotInRepositoryError,
    PushFailedError,
)
from git_wt.services.git.github import GitHubCli
from git_wt.services.git.operations import GitOperations
from git_wt.services.prompts import Prompter
from git_wt.logging_config import get_logger

if TYPE_CHECKING:
    from git_wt.config import Config

logger = get_logger(__name__)


class Publisher:
    """Commit everything in the current worktree and push its branch."""

    def __init__(
        self,
        config: "Config",
        git_ops: GitOperations,
        prompter: Prompter,
        console: Optional[Console] = None,
        github: Optional[GitHubCli] = None,
    ):
        self.config = config
        self.git_ops = git_ops
        self.prompter = prompter
        self.console = console or Console()
        self.remote_name = config.remote_name
        self.github = github or GitHubCli()

    def suggest_remote_url(self, path: str) -> str:
        """Guess a GitHub URL for a repository without a remote."""
        user = (
            self.git_ops.config_value(path, "github.user")
            or self.git_ops.config_value(path, "user.name")
            or "USERNAME"
        )
        return f"https://github.com/{user}/{self.repo_name(path)}.git"

    def repo_name(self, path: str) -> str:
        """Directory name of the main repository, also for linked worktrees."""
        return Path(self.git_ops.parent_repo_path(path)).name

    def _ensure_remote(self, path: str) -> None:
        """Make sure ``remote_name`` exists, offering to create the repository with gh."""
        if self.git_ops.remote_url(path, self.remote_name):
            return

        self.console.print(f"[yellow]⚠️  No '{self.remote_name}' remote found.[/yellow]")
        if self.prompter.confirm("Create repository on GitHub? (requires gh CLI)"):
            if self._create_on_github(path):
                return

        suggested = self.suggest_remote_url(path)
        self.console.print(f"Suggested repository URL: {suggested}")
        url = self.prompter.ask("Enter repository URL (or press Enter to use suggestion)", default=suggested)
        self.console.print(f"🔗 Adding {self.remote_name} remote: {url}")
        self.git_ops.add_remote(path, self.remote_name, url)

    def _create_on_github(self, path: str) -> bool:
        """Run ``gh repo create``; returns False when the remote still has to be added by hand."""
        if not self.github.is_available():
            self.console.print(
                "[yellow]⚠️  GitHub CLI (gh) not found. Please install it or create the repository manually.[/yellow]"
            )
            self.console.print("💡 Install with: brew install gh (macOS) or visit https://cli.github.com")
            return False

        name = self.repo_name(path)
        self.console.print("🏗️  Creating GitHub repository...")
        try:
            self.github.create_repo(name, path, remote=self.remote_name)
        except GitHubCliError as e:
            logger.warning(e.message)
            self.console.print(
                "[yellow]⚠️  Failed to create repository via GitHub CLI. You may need to create it manually.[/yellow]"
            )
            return False
        return bool(self.git_ops.remote_url(path, self.remote_name))

    def push(self, cwd: Union[str, Path]) -> str:
        """Commit pending changes in ``cwd`` (asking for a message) and push.

        Returns:
            The branch that was pushed

        Raises:
            NotInRepositoryError: ``cwd`` is not inside a repository
            CommitAbortedError: The user gave an empty commit message
            PushFailedError: git push failed
        """
        path = self.git_ops.find_repo_root(cwd)
        if not path:
            raise NotInRepositoryError(str(cwd))
        branch = self.git_ops.current_branch(path)
        if not branch:
            raise BranchRequiredError()

        if self.git_ops.is_dirty(path):
            message = self.prompter.ask("Commit message")
            if not message.strip():
                raise CommitAbortedError()
            self.git_ops.commit_all(path, message)
            logger.info(f"Committed all changes on {branch}")
        else:
            self.console.print("✓ Nothing to commit. Pushing current branch…")

        self._ensure_remote(path)

        try:
            self.git_ops.push(path, self.remote_name, branch)
        except GitOperationError as e:
            raise PushFailedError(branch, e.message, repo_name=self.repo_name(path))
        self.console.print(f"[green]✓ Pushed {branch} to {self.remote_name}[/green]")
        return branch
