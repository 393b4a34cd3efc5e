"""Interactive prompts.

Every place git-wt waits for the user goes through a Prompter, so the
resolution and sync logic can be driven by a scripted implementation.
"""

from typing import Optional, Sequence

from rich.console import Console

from git_wt.exceptions import SelectionCancelledError


class Prompter:
    """Interface for the interactive suspension points."""

    def choose(self, options: Sequence[str]) -> int:
        """Ask for one of ``options``; returns its 0-based index.

        Raises:
            SelectionCancelledError: On end of input or cancellation
        """
        raise NotImplementedError

    def confirm(self, message: str) -> bool:
        """Ask a yes/no question; anything but yes is no."""
        raise NotImplementedError

    def ask(self, message: str, default: Optional[str] = None) -> str:
        """Ask for a line of free text."""
        raise NotImplementedError


class ConsolePrompter(Prompter):
    """Prompter reading from standard input through a rich Console."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def _read(self, prompt: str) -> str:
        try:
            return self.console.input(prompt)
        except (EOFError, KeyboardInterrupt):
            self.console.print()
            raise SelectionCancelledError()

    def choose(self, options: Sequence[str]) -> int:
        if not options:
            raise ValueError("no options to choose from")
        for number, option in enumerate(options, start=1):
            self.console.print(f"  {number}) {option}", markup=False, highlight=False)
        count = len(options)
        while True:
            answer = self._read(f"Select option (1-{count}): ").strip()
            # ASCII only: isdigit() also accepts superscripts such as "²"
            if answer.isascii() and answer.isdigit() and 1 <= int(answer) <= count:
                return int(answer) - 1
            self.console.print(f"[yellow]Invalid selection. Please choose 1-{count}.[/yellow]")

    def confirm(self, message: str) -> bool:
        answer = self._read(f"{message} (y/N): ").strip().lower()
        return answer in ("y", "yes")

    def ask(self, message: str, default: Optional[str] = None) -> str:
        answer = self._read(f"{message}: ").strip()
        if not answer and default is not None:
            return default
        return answer
