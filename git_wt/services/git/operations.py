"""Git operations service"""

import git
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Union, TYPE_CHECKING, Optional

from git_wt.exceptions import (
    GitOperationError,
    NotInRepositoryError,
    DirtyWorktreeError,
    InvalidBranchNameError,
    RegistrationRemovalFailedError,
)
from git_wt.constants import DETACHED_HEAD
from git_wt.models.worktree import RegisteredWorktree
from git_wt.services.git.worktrees import WorktreeService, _describe_command_error
from git_wt.logging_config import get_logger

if TYPE_CHECKING:
    from git_wt.config import Config

logger = get_logger(__name__)

PathLike = Union[str, Path]


class GitOperations:
    """Repository adapter: every git command git-wt runs goes through here.

    Commands that concern one worktree take its path and run there; commands
    that concern the parent repository run in ``repo_path``.
    """

    def __init__(self, repo_path: Optional[str], config: Union["Config", dict]):
        """Initialize the service.

        Args:
            repo_path: Top level of the parent repository, or None when the
                process was not started inside one
            config: Configuration dictionary or Config object
        """
        self.repo_path = repo_path
        self.config = config
        self.remote_name = config.get("remote_name", "origin")
        self.in_git_operation = False  # Track if a mutating operation is in progress
        self.worktree_service = WorktreeService(repo_path) if repo_path else None

        logger.debug(f"Git operations initialized (repo: {repo_path})")

    @staticmethod
    def find_repo_root(path: PathLike) -> Optional[str]:
        """Return the top level of the repository containing ``path``, if any."""
        try:
            repo = git.Repo(path, search_parent_directories=True)
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError):
            return None
        return repo.working_tree_dir

    def require_repo(self) -> str:
        """Return the parent repository path or fail if there is none."""
        if not self.repo_path:
            raise NotInRepositoryError()
        return self.repo_path

    def _get_repo(self):
        """Get a fresh git.Repo instance for the parent repository."""
        return git.Repo(self.require_repo())

    def _git(self, path: PathLike) -> git.Git:
        """Get a git command runner bound to ``path``."""
        return git.Git(str(path))

    @contextmanager
    def _git_operation(self):
        """Context manager to track mutating git operations."""
        self.in_git_operation = True
        try:
            yield
        finally:
            self.in_git_operation = False

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_registered_worktrees(self) -> list[RegisteredWorktree]:
        """List the worktrees registered with the parent repository."""
        self.require_repo()
        return self.worktree_service.get_worktree_info()

    def is_registered(self, path: PathLike) -> bool:
        """Check if ``path`` is a registered worktree of the parent repository."""
        self.require_repo()
        return self.worktree_service.is_registered(str(path))

    def current_branch(self, path: PathLike) -> Optional[str]:
        """Get the branch checked out at ``path``.

        Returns None for a detached HEAD or when git cannot read the worktree.
        """
        try:
            branch = self._git(path).rev_parse("--abbrev-ref", "HEAD").strip()
        except git.exc.GitCommandError as e:
            logger.debug(f"Could not read branch of {path}: {e}")
            return None
        if not branch or branch == DETACHED_HEAD:
            return None
        return branch

    def is_dirty(self, path: PathLike) -> bool:
        """Check for uncommitted or untracked changes at ``path``."""
        try:
            status = self._git(path).status("--porcelain")
        except git.exc.GitCommandError as e:
            raise GitOperationError("status", str(path), _describe_command_error(e, "git status"))
        return bool(status.strip())

    def upstream_of(self, path: PathLike) -> Optional[str]:
        """Get the remote-tracking branch of the worktree at ``path``, if any."""
        try:
            upstream = self._git(path).rev_parse("--abbrev-ref", "@{u}").strip()
        except git.exc.GitCommandError:
            return None
        return upstream or None

    def ahead_count(self, path: PathLike, upstream: str) -> int:
        """Count commits on HEAD that are not on ``upstream``."""
        try:
            return int(self._git(path).rev_list("--count", f"{upstream}..HEAD").strip())
        except (git.exc.GitCommandError, ValueError) as e:
            logger.debug(f"Could not count commits ahead of {upstream} in {path}: {e}")
            return 0

    def ref_exists(self, path: PathLike, ref: str) -> bool:
        """Check if a fully qualified ref exists, as seen from ``path``."""
        try:
            self._git(path).show_ref("--verify", "--quiet", ref)
            return True
        except git.exc.GitCommandError:
            return False

    def validate_branch_name(self, name: str) -> None:
        """Check ``name`` with ``git check-ref-format --branch``.

        Raises:
            InvalidBranchNameError: git rejects the name
        """
        if not name or not name.strip():
            raise InvalidBranchNameError(name, "empty")
        try:
            self._git(self.require_repo()).check_ref_format("--branch", name)
        except git.exc.GitCommandError as e:
            raise InvalidBranchNameError(name, _describe_command_error(e, "git check-ref-format"))

    def branch_exists_local(self, name: str, path: Optional[PathLike] = None) -> bool:
        """Check if a local branch exists."""
        return self.ref_exists(path or self.require_repo(), f"refs/heads/{name}")

    def branch_exists_remote(self, name: str, path: Optional[PathLike] = None) -> bool:
        """Check if a remote-tracking branch exists on the configured remote."""
        return self.ref_exists(path or self.require_repo(), f"refs/remotes/{self.remote_name}/{name}")

    def list_branches(self, path: PathLike) -> list[str]:
        """List local and remote-tracking branch names."""
        try:
            output = self._git(path).branch("-a", "--format=%(refname:short)")
        except git.exc.GitCommandError as e:
            logger.debug(f"Could not list branches in {path}: {e}")
            return []
        return [line.strip() for line in output.split("\n") if line.strip()]

    def find_commit_before(self, branch: str, date: str) -> Optional[str]:
        """Find the last commit on ``branch`` made before the end of ``date``."""
        try:
            commit = self._get_repo().git.rev_list("-n", "1", f"--before={date} 23:59", branch).strip()
        except git.exc.GitCommandError as e:
            logger.debug(f"Could not find commit on {branch} before {date}: {e}")
            return None
        return commit or None

    def parent_repo_path(self, path: PathLike) -> str:
        """Find the main repository a worktree belongs to."""
        try:
            common_dir = self._git(path).rev_parse("--path-format=absolute", "--git-common-dir").strip()
        except git.exc.GitCommandError as e:
            raise GitOperationError("rev-parse", str(path), _describe_command_error(e, "git rev-parse"))
        common = Path(common_dir)
        return str(common.parent if common.name == ".git" else common)

    def remote_url(self, path: PathLike, remote: Optional[str] = None) -> Optional[str]:
        """Get the URL of a remote, or None if it is not configured."""
        try:
            url = self._git(path).remote("get-url", remote or self.remote_name).strip()
        except git.exc.GitCommandError:
            return None
        return url or None

    def config_value(self, path: PathLike, key: str) -> Optional[str]:
        """Read a git config value, or None when unset."""
        try:
            value = self._git(path).config("--get", key).strip()
        except git.exc.GitCommandError:
            return None
        return value or None

    def project_name(self, path: PathLike) -> str:
        """Name of the project a worktree belongs to.

        Uses the origin URL when there is one, otherwise the directory name of
        the parent repository.
        """
        url = self.remote_url(path)
        if url:
            name = url.rstrip("/").split("/")[-1].split(":")[-1]
            if name.endswith(".git"):
                name = name[: -len(".git")]
            if name:
                return name
        try:
            return Path(self.parent_repo_path(path)).name
        except GitOperationError:
            return Path(path).name

    # ------------------------------------------------------------------
    # Worktree registration
    # ------------------------------------------------------------------

    def register_worktree(
        self,
        path: PathLike,
        branch: Optional[str] = None,
        new_branch: bool = False,
        start_point: Optional[str] = None,
        detach: bool = False,
    ) -> None:
        """Register a new worktree at ``path`` with the parent repository.

        Args:
            path: Directory to create the worktree in
            branch: Branch to check out (or create, with new_branch)
            new_branch: Create ``branch`` instead of checking out an existing one
            start_point: Commit-ish the new branch or detached HEAD starts at
            detach: Check out ``start_point`` with a detached HEAD
        """
        args = ["add"]
        if detach:
            args += ["--detach", str(path), start_point]
        elif new_branch:
            args += ["-b", branch, str(path)]
            if start_point:
                args.append(start_point)
        else:
            args += [str(path), branch]

        with self._git_operation():
            try:
                self._get_repo().git.worktree(*args)
            except git.exc.GitCommandError as e:
                raise GitOperationError("worktree add", str(path), _describe_command_error(e, "git worktree add"))
        logger.info(f"Registered worktree at {path}")

    def unregister_worktree(self, path: PathLike, force: bool = False) -> None:
        """Remove a worktree registration from its parent repository.

        Raises:
            DirtyWorktreeError: git refused because of local changes
            RegistrationRemovalFailedError: git refused for any other reason
        """
        try:
            service = WorktreeService(self.parent_repo_path(path))
        except GitOperationError as e:
            raise RegistrationRemovalFailedError(str(path), e.message)

        with self._git_operation():
            success, error_msg = service.remove_worktree(str(path), force=force)
        if success:
            return
        if not force and error_msg and "modified or untracked" in error_msg:
            raise DirtyWorktreeError(str(path), error_msg)
        raise RegistrationRemovalFailedError(str(path), error_msg)

    def discard_worktree(self, path: PathLike, force: bool = True) -> bool:
        """Drop a registration via the parent repository.

        Failure is not fatal here: the caller removes the directory and prunes.
        """
        self.require_repo()
        with self._git_operation():
            success, error_msg = self.worktree_service.remove_worktree(str(path), force=force)
        if not success:
            logger.debug(f"Could not discard worktree {path}: {error_msg}")
        return success

    def prune_worktrees(self) -> None:
        """Drop registrations whose directories no longer exist."""
        self.require_repo()
        self.worktree_service.prune_worktrees()

    # ------------------------------------------------------------------
    # Sync primitives
    # ------------------------------------------------------------------

    def _run(self, path: PathLike, operation: str, *args) -> str:
        """Run a mutating git command in ``path``, raising GitOperationError."""
        with self._git_operation():
            try:
                return self._git(path).execute(["git", *args])
            except git.exc.GitCommandError as e:
                raise GitOperationError(operation, str(path), _describe_command_error(e, f"git {operation}"))

    def fetch(self, path: PathLike, remote: Optional[str] = None) -> None:
        """Fetch from a remote."""
        self._run(path, "fetch", "fetch", remote or self.remote_name)

    def stash_push(self, path: PathLike, label: str) -> None:
        """Stash tracked and untracked changes under ``label``."""
        self._run(path, "stash push", "stash", "push", "--include-untracked", "-m", label)

    def stash_pop(self, path: PathLike) -> None:
        """Restore the most recent stash."""
        self._run(path, "stash pop", "stash", "pop")

    def rebase(self, path: PathLike, onto: str) -> None:
        """Rebase the checked-out branch onto ``onto``."""
        self._run(path, "rebase", "rebase", onto)

    def rebase_abort(self, path: PathLike) -> None:
        """Abort an in-progress rebase."""
        self._run(path, "rebase --abort", "rebase", "--abort")

    def merge(self, path: PathLike, onto: str) -> None:
        """Merge ``onto`` into the checked-out branch."""
        self._run(path, "merge", "merge", "--no-edit", onto)

    def commit_all(self, path: PathLike, message: str) -> None:
        """Stage everything and commit it."""
        self._run(path, "add", "add", "-A")
        self._run(path, "commit", "commit", "-m", message)

    def push(self, path: PathLike, remote: str, branch: str) -> None:
        """Push ``branch`` to ``remote`` and set it as upstream."""
        self._run(path, "push", "push", "-u", remote, branch)

    def add_remote(self, path: PathLike, name: str, url: str) -> None:
        """Add a remote."""
        self._run(path, "remote add", "remote", "add", name, url)


def is_worktree_dir(path: PathLike) -> bool:
    """Check whether a directory carries git linkage metadata (a .git entry)."""
    return os.path.isdir(path) and os.path.exists(os.path.join(path, ".git"))
