"""Command-line interface for git-wt"""

import sys
from rich.console import Console
from rich.markup import escape

from git_wt.cli.args import parse_args
from git_wt.cli.session import enter_session
from git_wt.config import build_config
from git_wt.core import WorktreeManager, install_signal_handler
from git_wt.exceptions import WtError
from git_wt.logging_config import setup_logging

console = Console()

# Commands whose result is a worktree path to hand over to the user
PATH_COMMANDS = {"create", "checkout", "switch", "switchg", "time"}


def run_command(manager: WorktreeManager, args):
    """Dispatch a parsed command. Returns a worktree path for navigation commands."""
    command = args.command

    if command == "list":
        worktrees = manager.list_worktrees(pattern=args.pattern, current_only=args.current)
        manager.display_service.display_worktree_table(
            worktrees, empty_message=f"No worktrees found in {manager.index.root}"
        )
    elif command == "du":
        sizes, total = manager.disk_usage()
        manager.display_service.display_disk_usage(sizes, total)
    elif command == "create":
        return manager.create(args.branch, force=args.force, copy_patterns=args.copy)
    elif command == "checkout":
        return manager.checkout(args.branch, force=args.force)
    elif command == "switch":
        return manager.switch(args.partial)
    elif command == "delete":
        manager.delete(args.partial, force=args.force, dry_run=args.dry_run)
    elif command == "tag":
        manager.tag(args.partial, args.tag)
    elif command == "switchg":
        return manager.switch_by_tag(args.tag)
    elif command == "time":
        return manager.time_travel(args.spec, force=args.force)
    elif command == "sync":
        result = manager.sync(args.partial)
        manager.console.print(f"[green]✓ Synced {result.branch} with {result.source} ({result.method})[/green]")
    elif command == "push":
        manager.push()
    return None


def main(argv=None):
    """Main entry point for the application."""
    parsed_args = None
    output = console
    try:
        parsed_args = parse_args(argv)

        # Keep stdout clean for the path when it is going to be captured
        if parsed_args.print_path:
            output = Console(stderr=True)

        # Setup logging before creating WorktreeManager
        setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

        config = build_config(
            overrides={
                "worktrees_root": parsed_args.root,
                "verbose": parsed_args.verbose or None,
                "debug": parsed_args.debug or None,
            }
        )

        if parsed_args.debug:
            output.print("[yellow]Debug mode enabled[/yellow]")
            output.print("[yellow]Configuration:[/yellow]")
            for key, value in config.to_dict().items():
                output.print(f"  {key}: {value}")

        install_signal_handler()
        manager = WorktreeManager(config, output=output)

        path = run_command(manager, parsed_args)
        if path and parsed_args.command in PATH_COMMANDS:
            enter_session(path, shell=config.shell, print_only=parsed_args.print_path, console=output)

        return 0
    except KeyboardInterrupt:
        output.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except WtError as e:
        output.print(f"[red]Error: {escape(e.message)}[/red]")
        if e.hint:
            output.print(f"[dim]{escape(e.hint)}[/dim]")
        if parsed_args and parsed_args.debug:
            output.print_exception()
        return 1
    except ValueError as e:
        output.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1
    except Exception as e:
        output.print(f"[red]Error: {escape(str(e))}[/red]")
        if parsed_args and parsed_args.debug:
            output.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
