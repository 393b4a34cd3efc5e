"""Custom exceptions for git-wt"""

from typing import Optional


class WtError(Exception):
    """Base exception for all git-wt errors.

    Every error carries an optional ``hint`` telling the user what to do next.
    """

    hint: Optional[str] = None

    def __init__(self, message: str, hint: Optional[str] = None):
        self.message = message
        if hint is not None:
            self.hint = hint
        super().__init__(message)


class GitOperationError(WtError):
    """Exception raised for errors in Git operations."""

    def __init__(self, operation: str, target: Optional[str] = None, message: Optional[str] = None):
        self.operation = operation
        self.target = target

        error_msg = f"Git operation '{operation}' failed"
        if target:
            error_msg += f" for '{target}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class NotInRepositoryError(WtError):
    """Raised when a command needs a parent repository but none was found."""

    def __init__(self, path: Optional[str] = None):
        where = f" ({path})" if path else ""
        super().__init__(f"Not inside a Git repository{where}", hint="Run this command from inside your project")


class NotFoundError(WtError):
    """Raised when no worktree matches a partial name or tag."""

    def __init__(self, query: str, kind: str = "matching"):
        self.query = query
        if kind == "tagged":
            message = f"No worktree tagged '{query}'"
            hint = "Tag a worktree first with 'wt tag <partial> <tag>'"
        else:
            message = f"No worktree found matching '{query}'"
            hint = "Run 'wt list' to see available worktrees"
        super().__init__(message, hint=hint)


class SelectionCancelledError(WtError):
    """Raised when the user aborts an interactive selection or confirmation."""

    def __init__(self, message: str = "Selection cancelled"):
        super().__init__(message)


class BranchRequiredError(WtError):
    """Raised when a branch could not be inferred and none was given."""

    def __init__(self):
        super().__init__("Branch name required", hint="Pass a partial branch name")


class BranchExistsError(WtError):
    """Raised when creating a branch that already exists."""

    def __init__(self, branch: str):
        self.branch = branch
        super().__init__(
            f"Branch '{branch}' already exists",
            hint=f"Use 'wt checkout {branch}' instead",
        )


class InvalidBranchNameError(WtError):
    """Raised for names git will not accept as a branch, or that map outside the root."""

    def __init__(self, branch: str, detail: Optional[str] = None):
        self.branch = branch
        message = f"Invalid branch name: {branch!r}"
        if detail:
            message += f" ({detail})"
        super().__init__(message, hint="See 'git check-ref-format --help' for the naming rules")


class BranchNotFoundError(WtError):
    """Raised when a branch exists neither locally nor on the remote."""

    def __init__(self, branch: str, remote: str = "origin"):
        self.branch = branch
        super().__init__(
            f"Branch '{branch}' does not exist locally or on '{remote}'",
            hint=f"Use 'wt create {branch}' to start a new branch",
        )


class FolderCollisionError(WtError):
    """Raised when a non-worktree folder blocks the target path."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Folder already exists: {path}", hint="Use --force to overwrite")


class DirtyWorktreeError(WtError):
    """Raised when git refuses to remove a worktree with local changes."""

    def __init__(self, path: str, detail: Optional[str] = None):
        self.path = path
        message = f"Worktree has uncommitted or untracked changes: {path}"
        if detail:
            message += f" ({detail})"
        super().__init__(message, hint="Commit your changes or use --force")


class RegistrationRemovalFailedError(WtError):
    """Raised when git refuses to unregister a worktree for another reason."""

    def __init__(self, path: str, detail: Optional[str] = None):
        self.path = path
        message = f"Failed to remove worktree registration: {path}"
        if detail:
            message += f" ({detail})"
        super().__init__(message, hint="The directory was left untouched; run 'git worktree list' to inspect")


class NoCommitBeforeDateError(WtError):
    """Raised when a branch has no commit before the requested date."""

    def __init__(self, branch: str, date: str):
        super().__init__(f"No commit on '{branch}' before {date}")


class InvalidTagError(WtError):
    """Raised for tags that cannot be stored one per line."""

    def __init__(self, tag: str):
        super().__init__(f"Invalid tag: {tag!r}", hint="Tags must be non-empty and fit on one line")


class NoBaseBranchError(WtError):
    """Raised when no main/master branch can be found to sync from."""

    def __init__(self, candidates: list[str], available: Optional[list[str]] = None):
        message = f"No base branch found (tried {', '.join(candidates)})"
        hint = None
        if available:
            hint = f"Available branches: {', '.join(available[:10])}"
        super().__init__(message, hint=hint)


class FetchFailedError(WtError):
    """Raised when fetching the sync source fails."""

    def __init__(self, remote: str, detail: Optional[str] = None):
        message = f"Failed to fetch from '{remote}'"
        if detail:
            message += f": {detail}"
        super().__init__(message, hint="Check your network connection and remote configuration")


class StashFailedError(WtError):
    """Raised when local changes could not be stashed before a sync."""

    def __init__(self, path: str, detail: Optional[str] = None):
        message = f"Failed to stash changes in {path}"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class SyncConflictError(WtError):
    """Raised when both rebase and merge failed during a sync."""

    def __init__(self, branch: str, source: str, stashed: bool = False):
        self.branch = branch
        self.source = source
        self.stashed = stashed
        hint = "Resolve the conflicts manually, then commit"
        if stashed:
            hint += ". Your changes are stashed; use 'git stash pop' to restore them"
        super().__init__(f"Both rebase and merge of '{branch}' onto '{source}' failed", hint=hint)


class CommitAbortedError(WtError):
    """Raised when the user gives an empty commit message."""

    def __init__(self):
        super().__init__("Commit aborted: empty message")


class GitHubCliError(WtError):
    """Raised when ``gh repo create`` fails."""

    def __init__(self, repo_name: str, detail: Optional[str] = None):
        message = f"Failed to create repository '{repo_name}' via GitHub CLI"
        if detail:
            message += f": {detail}"
        super().__init__(message, hint="You may need to create it manually")


class PushFailedError(WtError):
    """Raised when pushing the current branch fails."""

    def __init__(self, branch: str, detail: Optional[str] = None, repo_name: Optional[str] = None):
        message = f"Push of '{branch}' failed"
        if detail:
            message += f": {detail}"
        hint = "You may need to create the repository on the remote first"
        if repo_name:
            hint += f" (e.g. 'gh repo create {repo_name} --public')"
        super().__init__(message, hint=hint)
