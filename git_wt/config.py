"""Configuration handling for git-wt"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, List

from git_wt.constants import DEFAULT_TAGS_FILENAME, DEFAULT_FOLDER_FILLER
from git_wt.logging_config import get_logger

logger = get_logger(__name__)

CONFIG_DIR = Path.home() / ".wt"
CONFIG_FILE = CONFIG_DIR / "config.json"
ROOT_ENV_VAR = "WT_WORKTREES_DIR"


def default_worktrees_root() -> Path:
    """Default location of the worktrees root directory."""
    return Path.home() / ".worktrees"


@dataclass
class Config:
    """Configuration for git-wt with validation."""

    # Storage layout
    worktrees_root: Path = field(default_factory=default_worktrees_root)
    tags_filename: str = DEFAULT_TAGS_FILENAME
    folder_filler: str = DEFAULT_FOLDER_FILLER

    # Sync
    remote_name: str = "origin"
    base_branches: List[str] = field(default_factory=lambda: ["main", "master"])

    # Folders under the root without a .git entry are skipped; warn about them?
    warn_invalid_worktrees: bool = False

    # Session hand-off (None = $SHELL)
    shell: Optional[str] = None

    # Execution modes
    verbose: bool = False
    debug: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_worktrees_root()
        self._validate_tags_filename()
        self._validate_folder_filler()
        self._validate_remote_name()
        self._validate_base_branches()

    def _validate_worktrees_root(self):
        """Normalize worktrees_root to an absolute Path."""
        if not self.worktrees_root:
            raise ValueError("worktrees_root cannot be empty")
        self.worktrees_root = Path(self.worktrees_root).expanduser().absolute()

    def _validate_tags_filename(self):
        """Validate tags_filename is a bare file name."""
        if not self.tags_filename or os.sep in self.tags_filename:
            raise ValueError(f"tags_filename must be a plain file name, got '{self.tags_filename}'")

    def _validate_folder_filler(self):
        """Validate folder_filler is a single, non-separator character."""
        if len(self.folder_filler) != 1 or self.folder_filler in ("/", os.sep):
            raise ValueError(f"folder_filler must be a single non-separator character, got '{self.folder_filler}'")

    def _validate_remote_name(self):
        """Validate remote_name is not empty."""
        if not self.remote_name or not self.remote_name.strip():
            raise ValueError("remote_name cannot be empty")
        self.remote_name = self.remote_name.strip()

    def _validate_base_branches(self):
        """Validate base_branches list."""
        if not isinstance(self.base_branches, list) or not self.base_branches:
            raise ValueError("base_branches must be a non-empty list")

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "worktrees_root": str(self.worktrees_root),
            "tags_filename": self.tags_filename,
            "folder_filler": self.folder_filler,
            "remote_name": self.remote_name,
            "base_branches": self.base_branches,
            "warn_invalid_worktrees": self.warn_invalid_worktrees,
            "shell": self.shell,
            "verbose": self.verbose,
            "debug": self.debug,
        }

    def get(self, key: str, default=None):
        """Get config value by key."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary."""
        # Extract only known fields
        known_fields = {
            "worktrees_root",
            "tags_filename",
            "folder_filler",
            "remote_name",
            "base_branches",
            "warn_invalid_worktrees",
            "shell",
            "verbose",
            "debug",
        }

        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)


def load_config_file(path: Path = CONFIG_FILE) -> dict:
    """Read user settings from a JSON config file.

    Returns an empty dict when the file does not exist. A malformed file is
    an error; it is never silently ignored.
    """
    if not path.exists():
        return {}
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Invalid config file {path}: expected a JSON object")
    logger.debug(f"Loaded config file {path}")
    return data


def build_config(overrides: Optional[dict] = None, config_file: Path = CONFIG_FILE, environ=None) -> Config:
    """Build the effective Config.

    Precedence, lowest first: defaults, config file, environment, overrides.
    The environment is read here, once, so the rest of the program only sees
    the resulting Config.
    """
    environ = os.environ if environ is None else environ
    values = load_config_file(config_file)

    env_root = environ.get(ROOT_ENV_VAR)
    if env_root:
        values["worktrees_root"] = env_root

    for key, value in (overrides or {}).items():
        if value is not None:
            values[key] = value

    return Config.from_dict(values)
