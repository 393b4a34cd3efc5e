"""Copying untracked project files into a freshly created worktree."""

import glob
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional, Union

from rich.console import Console

from git_wt.constants import COPY_EXCLUDED_NAMES
from git_wt.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class CopyReport:
    """What a copy pass did."""

    copied: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    unmatched_patterns: list[str] = field(default_factory=list)


def split_patterns(patterns: Iterable[str]) -> list[str]:
    """Flatten comma-separated pattern arguments into single patterns."""
    result = []
    for value in patterns:
        result.extend(part.strip() for part in value.split(",") if part.strip())
    return result


def _is_excluded(relative: str) -> bool:
    return any(part in COPY_EXCLUDED_NAMES for part in Path(relative).parts)


class FileCopier:
    """Copies files matching glob patterns from a project into a worktree.

    Patterns are expanded relative to the project root, hidden files
    included and ``**`` recursive. Each match lands at the same relative
    path in the worktree.
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def copy(self, project_root: Union[str, Path], target: Union[str, Path], patterns: Iterable[str]) -> CopyReport:
        report = CopyReport()
        project_root = Path(project_root)
        target = Path(target)

        for pattern in split_patterns(patterns):
            matches = sorted(glob.glob(pattern, root_dir=project_root, recursive=True, include_hidden=True))
            if not matches:
                self.console.print(f"[yellow]⚠️  No files found matching pattern: {pattern} (skipped)[/yellow]")
                logger.warning(f"No files found matching pattern: {pattern}")
                report.unmatched_patterns.append(pattern)
                continue

            self.console.print(f"📁 Copying {len(matches)} item(s) matching '{pattern}':")
            for relative in matches:
                if not relative.rstrip(os.sep):
                    continue
                self._copy_one(project_root, target, relative.rstrip(os.sep), report)

        return report

    def _copy_one(self, project_root: Path, target: Path, relative: str, report: CopyReport) -> None:
        if _is_excluded(relative):
            self.console.print(f"   ⚠️  Skipping .git directory: {relative}")
            report.skipped.append(relative)
            return

        source = project_root / relative
        destination = target / relative
        destination.parent.mkdir(parents=True, exist_ok=True)

        # Check links first: is_file/is_dir follow them
        if source.is_symlink():
            if destination.is_dir() and not destination.is_symlink():
                self.console.print(f"   ⚠️  Directory in the way of symlink, skipping: {relative}")
                logger.warning(f"Not replacing directory {destination} with a symlink")
                report.skipped.append(relative)
                return
            if destination.is_symlink() or destination.exists():
                destination.unlink()
            os.symlink(os.readlink(source), destination)
            kind = "symlink"
        elif source.is_file():
            shutil.copy2(source, destination)
            kind = "file"
        elif source.is_dir():
            shutil.copytree(
                source,
                destination,
                symlinks=True,
                ignore=shutil.ignore_patterns(*COPY_EXCLUDED_NAMES),
                dirs_exist_ok=True,
            )
            kind = "directory"
        else:
            self.console.print(f"   ⚠️  Unknown file type, skipping: {relative}")
            report.skipped.append(relative)
            return

        self.console.print(f"   ✓ Copied {kind}: {relative}")
        logger.debug(f"Copied {kind} {source} -> {destination}")
        report.copied.append(relative)
