"""Handing a resolved worktree path over to the user."""

import os
import shutil
import sys
from typing import Optional

from rich.console import Console

from git_wt.logging_config import get_logger

logger = get_logger(__name__)


def detect_shell(configured: Optional[str] = None) -> str:
    """Shell to start: configured, then $SHELL, then bash or sh from PATH."""
    return configured or os.environ.get("SHELL") or shutil.which("bash") or shutil.which("sh") or "/bin/sh"


def enter_session(path: str, shell: Optional[str] = None, print_only: bool = False, console: Optional[Console] = None) -> None:
    """Open an interactive shell in ``path``, replacing this process.

    When ``print_only`` is set, or stdin is not a terminal, the path is
    printed instead so that a wrapper (``cd "$(wt sw feat --print-path)"``)
    can use it.
    """
    if print_only or not sys.stdin.isatty():
        print(path)
        return

    shell = detect_shell(shell)
    logger.debug(f"Starting {shell} in {path}")
    (console or Console()).print(f"[dim]Entering {path} (exit the shell to return)[/dim]")
    sys.stdout.flush()
    os.chdir(path)
    os.execvp(shell, [shell])
