"""Utility functions for git-wt."""

from .disk import directory_size

__all__ = ["directory_size"]
