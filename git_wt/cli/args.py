"""Command-line argument parsing for git-wt."""

import argparse
from git_wt.__version__ import __version__


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one sub-command per operation."""
    parser = argparse.ArgumentParser(
        prog="wt",
        description="Git worktree manager with partial matching, tagging and sync",
        epilog="All commands that take a partial name accept any substring of a branch "
        "and ask which one you mean when several worktrees match.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument("--version", action="version", version=f"git-wt {__version__}")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )
    parser.add_argument(
        "--root",
        metavar="DIR",
        help="Worktrees root directory (default: $WT_WORKTREES_DIR or ~/.worktrees)",
    )
    parser.add_argument(
        "--print-path",
        action="store_true",
        help="Print the resulting worktree path instead of opening a shell there",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")

    list_parser = subparsers.add_parser("list", aliases=["ls", "l"], help="List worktrees with status")
    list_parser.add_argument("pattern", nargs="?", help="Only show worktrees whose branch, project or path contains this")
    list_parser.add_argument(
        "--current", action="store_true", help="Show only worktrees of the current repository"
    )

    subparsers.add_parser("du", help="Show disk usage per worktree")

    create_parser = subparsers.add_parser("create", aliases=["new"], help="Create a new branch and worktree")
    create_parser.add_argument("branch", help="Name of the new branch")
    create_parser.add_argument(
        "--copy",
        nargs="+",
        default=[],
        metavar="PATTERN",
        help="Copy files/directories matching these globs from the project (comma-separated lists allowed)",
    )
    create_parser.add_argument("-f", "--force", action="store_true", help="Force removal of a worktree left at the target")

    checkout_parser = subparsers.add_parser("checkout", aliases=["co"], help="Check out an existing branch in a worktree")
    checkout_parser.add_argument("branch", help="Local or remote branch name")
    checkout_parser.add_argument("-f", "--force", action="store_true", help="Overwrite a folder in the way")

    switch_parser = subparsers.add_parser("switch", aliases=["sw"], help="Switch to a worktree by partial branch name")
    switch_parser.add_argument("partial", help="Part of the branch name")

    delete_parser = subparsers.add_parser("delete", aliases=["remove", "rm"], help="Delete a worktree")
    delete_parser.add_argument("partial", help="Part of the branch name")
    delete_parser.add_argument("-f", "--force", action="store_true", help="Delete even with local changes")
    delete_parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be deleted without doing it"
    )

    tag_parser = subparsers.add_parser("tag", aliases=["label"], help="Tag a worktree with a group label")
    tag_parser.add_argument("partial", help="Part of the branch name")
    tag_parser.add_argument("tag", help="Label to add")

    switchg_parser = subparsers.add_parser("switchg", aliases=["sg"], help="Switch to a worktree by tag")
    switchg_parser.add_argument("tag", help="Label to look for")

    time_parser = subparsers.add_parser("time", aliases=["tm"], help="Create a detached worktree from a date")
    time_parser.add_argument("spec", metavar="BRANCH@YYYY-MM-DD", help="Branch and date, e.g. main@2024-01-01")
    time_parser.add_argument("-f", "--force", action="store_true", help="Overwrite an existing folder")

    sync_parser = subparsers.add_parser("sync", help="Rebase a worktree onto origin/main (stashing local changes)")
    sync_parser.add_argument("partial", nargs="?", help="Part of the branch name (default: current branch)")

    subparsers.add_parser("push", help="Commit all changes and push the current worktree")

    return parser


# Aliases resolve to the canonical command name
COMMAND_ALIASES = {
    "ls": "list",
    "l": "list",
    "new": "create",
    "co": "checkout",
    "sw": "switch",
    "remove": "delete",
    "rm": "delete",
    "label": "tag",
    "sg": "switchg",
    "tm": "time",
}


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        parser.exit(1)
    args.command = COMMAND_ALIASES.get(args.command, args.command)
    return args
