"""Command-line interface for git-wt.

This package provides the CLI entry point, argument parsing and the
shell hand-off used by the navigation commands.
"""

from .main import main
from .args import parse_args

__all__ = ["main", "parse_args"]
