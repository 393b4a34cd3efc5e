"""Shared constants for git-wt."""

from dataclasses import dataclass
from typing import List


DEFAULT_TAGS_FILENAME = ".wt-tags"
DEFAULT_FOLDER_FILLER = "-"

# Marker git prints for `rev-parse --abbrev-ref HEAD` on a detached HEAD
DETACHED_HEAD = "HEAD"

# Directories never copied by --copy patterns
COPY_EXCLUDED_NAMES = (".git",)

STASH_LABEL_PREFIX = "wt sync auto-stash"
STASH_TIMESTAMP_FORMAT = "%Y-%m-%d_%H:%M:%S"

TIME_TRAVEL_DATE_FORMAT = "%Y-%m-%d"


@dataclass
class ColumnDefinition:
    """Definition of a table column."""

    key: str
    label: str
    width: int = 0  # 0 means auto-width


LIST_COLUMNS: List[ColumnDefinition] = [
    ColumnDefinition("project", "Project", 20),
    ColumnDefinition("branch", "Branch", 25),
    ColumnDefinition("upstream", "Upstream", 25),
    ColumnDefinition("tags", "Tags", 15),
    ColumnDefinition("path", "Path"),
]

DISK_USAGE_COLUMNS: List[ColumnDefinition] = [
    ColumnDefinition("worktree", "Worktree", 40),
    ColumnDefinition("size", "Size", 10),
]


# Symbol constants
SYMBOL_DIRTY = "* "
SYMBOL_NO_UPSTREAM = "-"
