"""GitHub CLI integration"""

import shutil
import subprocess
from pathlib import Path
from typing import Union

from git_wt.exceptions import GitHubCliError
from git_wt.logging_config import get_logger

logger = get_logger(__name__)


class GitHubCli:
    """Runs the ``gh`` command line tool when it is installed."""

    def __init__(self, executable: str = "gh"):
        self.executable = executable

    def is_available(self) -> bool:
        return shutil.which(self.executable) is not None

    def create_repo(self, name: str, source: Union[str, Path], remote: str = "origin") -> None:
        """Create a public repository from ``source``, add it as ``remote`` and push.

        Raises:
            GitHubCliError: gh could not be started or exited with an error
        """
        cmd = [
            self.executable,
            "repo",
            "create",
            name,
            "--public",
            "--source=.",
            f"--remote={remote}",
            "--push",
        ]
        logger.debug(f"Running {' '.join(cmd)} in {source}")
        try:
            subprocess.run(cmd, cwd=str(source), check=True, capture_output=True, text=True)
        except subprocess.CalledProcessError as e:
            raise GitHubCliError(name, (e.stderr or "").strip() or f"exit code {e.returncode}")
        except OSError as e:
            raise GitHubCliError(name, str(e))
