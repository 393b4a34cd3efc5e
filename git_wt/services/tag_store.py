"""Per-worktree tag labels kept in a sidecar file."""

import re
from pathlib import Path
from typing import Union, TYPE_CHECKING

from git_wt.exceptions import InvalidTagError
from git_wt.models.worktree import Worktree
from git_wt.services.worktree_index import WorktreeIndex
from git_wt.logging_config import get_logger

if TYPE_CHECKING:
    from git_wt.config import Config

logger = get_logger(__name__)


class TagStore:
    """Reads and writes the ``.wt-tags`` sidecar of each worktree.

    The sidecar holds one tag per line, sorted and deduplicated, and is meant
    to be human-editable. Tags cannot be removed through the tool; delete the
    line from the file instead.
    """

    def __init__(self, config: "Config", index: WorktreeIndex):
        self.index = index
        self.filename = config.tags_filename

    def _tags_file(self, path: Union[str, Path]) -> Path:
        return Path(path) / self.filename

    def read_tags(self, path: Union[str, Path]) -> list[str]:
        """Tags stored for the worktree at ``path``."""
        tags_file = self._tags_file(path)
        if not tags_file.is_file():
            return []
        return [line.strip() for line in tags_file.read_text().splitlines() if line.strip()]

    def add_tag(self, path: Union[str, Path], tag: str) -> bool:
        """Add ``tag`` to the worktree at ``path``.

        Returns:
            True if the tag was added, False if it was already present
        """
        tag = tag.strip()
        if not tag or "\n" in tag or "\r" in tag:
            raise InvalidTagError(tag)

        tags_file = self._tags_file(path)
        tags_file.touch(exist_ok=True)
        tags = self.read_tags(path)
        if tag in tags:
            logger.debug(f"{path} already tagged '{tag}'")
            return False

        tags_file.write_text("".join(f"{t}\n" for t in sorted(set(tags) | {tag})))
        logger.info(f"Tagged {path} as '{tag}'")
        return True

    def has_tag(self, path: Union[str, Path], tag: str) -> bool:
        """Check if ``tag`` appears as a whole word in the sidecar.

        Word characters are letters, digits and underscore, so ``ui`` does not
        match a stored ``uix``.
        """
        tags_file = self._tags_file(path)
        if not tag or not tags_file.is_file():
            return False
        pattern = re.compile(rf"(?<!\w){re.escape(tag)}(?!\w)")
        return bool(pattern.search(tags_file.read_text()))

    def list_tagged_worktrees(self, tag: str) -> list[Worktree]:
        """Worktrees carrying ``tag``, in index order."""
        return [wt for wt in self.index.list_worktrees() if self.has_tag(wt.path, tag)]
