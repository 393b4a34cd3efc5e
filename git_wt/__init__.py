"""
git-wt - A git worktree manager with partial matching, tagging and sync
"""

from .__version__ import __version__
from .core import WorktreeManager
from .cli.main import main

__all__ = ["WorktreeManager", "main", "__version__"]
