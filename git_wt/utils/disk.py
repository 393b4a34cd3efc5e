"""Disk usage helpers."""

import os
from pathlib import Path
from typing import Union

from git_wt.logging_config import get_logger

logger = get_logger(__name__)


def directory_size(path: Union[str, Path]) -> int:
    """Total size in bytes of the files under ``path``; symlinks are not followed."""
    total = 0
    for dirpath, _dirnames, filenames in os.walk(path, onerror=lambda e: logger.debug(f"du: {e}")):
        for name in filenames:
            try:
                total += os.lstat(os.path.join(dirpath, name)).st_size
            except OSError as e:
                logger.debug(f"du: cannot stat {name}: {e}")
    return total
