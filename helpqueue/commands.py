"""
Command dispatch for the help queue console.

Each input line is split on whitespace; the first token picks a command from
a fixed table and the rest are positional arguments. Argument counts are
checked before any command runs, so a usage error never prompts for the
secret.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence

from .core.terminal import clear_screen
from .core.types import format_duration
from .exceptions import (
    EmptyCommandError,
    HelpQueueError,
    UnknownCommandError,
    UsageError,
)
from .queue.help_queue import HelpQueue

logger = logging.getLogger("helpqueue.commands")

Handler = Callable[[Sequence[str]], List[str]]

# name, arity, usage, summary
COMMAND_TABLE = (
    ("add", 1, "add <netid>", "adds the specified netid to the queue."),
    ("pop", 0, "pop", "removes the student at the front of the queue."),
    ("view", 0, "view", "views the queue."),
    ("checkin", 1, "checkin <netid>", "records a staff check-in."),
    ("clear", 0, "clear", "clears the screen."),
    ("stats", 1, "stats <filename>", "dumps the full state, indented, to a file."),
    ("reset", 0, "reset", "clears the queue and every wait history."),
    ("lock", 0, "lock", "stops new students from joining."),
    ("unlock", 0, "unlock", "lets new students join again."),
    ("help", 0, "help", "prints this summary."),
    ("quit", 0, "quit", "saves the backup and exits."),
    ("load", 1, "load <filename>", "replaces the state with a saved one."),
    ("save", 1, "save <filename>", "saves the full state to a file."),
    ("add_staff", 1, "add_staff <netid>", "registers a staff member."),
    (
        "load_roster",
        1,
        "load_roster <path_to_file>",
        "replaces the student roster from a CSV file.",
    ),
)


@dataclass(frozen=True)
class CommandSpec:
    """One entry of the command table."""

    name: str
    arity: int
    usage: str
    summary: str
    handler: Handler


class CommandDispatcher:
    """
    Maps command verbs to ``HelpQueue`` operations.

    Handlers return the lines to show the operator; failures are raised as
    ``HelpQueueError`` and reported by ``run_line``.
    """

    def __init__(
        self,
        queue: HelpQueue,
        clear: Callable[[], None] = clear_screen,
        output: Callable[[str], None] = print,
    ) -> None:
        """
        Initialize the dispatcher.

        Args:
            queue: Queue the commands operate on.
            clear: Screen clearing function used by ``clear``.
            output: Line writer used by ``run_line``.
        """
        self.queue = queue
        self._clear = clear
        self._output = output
        self._commands: Dict[str, CommandSpec] = {}

        for name, arity, usage, summary in COMMAND_TABLE:
            handler = getattr(self, f"_cmd_{name}")
            self._commands[name] = CommandSpec(name, arity, usage, summary, handler)

    @property
    def commands(self) -> Dict[str, CommandSpec]:
        """Return a copy of the command table."""
        return dict(self._commands)

    def execute(self, line: str) -> List[str]:
        """
        Tokenize and run one input line.

        Args:
            line: Raw input line.

        Returns:
            Lines of output produced by the command.

        Raises:
            EmptyCommandError: If the line holds no tokens.
            UnknownCommandError: If the verb is not in the table.
            UsageError: If required arguments are missing.
            HelpQueueError: Any failure raised by the command itself.
            SystemExit: On ``quit``.
        """
        parts = line.split()
        if not parts:
            raise EmptyCommandError()

        verb = parts[0].lower()
        spec = self._commands.get(verb)
        if spec is None:
            raise UnknownCommandError(verb)

        args = parts[1:]
        if len(args) < spec.arity:
            raise UsageError(spec.usage)

        logger.debug(f"Dispatching {verb} with {len(args)} argument(s)")
        return spec.handler(args)

    def run_line(self, line: str) -> bool:
        """
        Execute a line and print its output or its error.

        Returns:
            True when the command succeeded.
        """
        try:
            lines = self.execute(line)
        except HelpQueueError as e:
            self._output(f"Error: {e}")
            return False
        for text in lines:
            self._output(text)
        return True

    # -------------------- handlers --------------------

    def _cmd_add(self, args: Sequence[str]) -> List[str]:
        position = self.queue.add(args[0])
        return [f"Added to queue in position {position}"]

    def _cmd_pop(self, args: Sequence[str]) -> List[str]:
        student, waited = self.queue.pop()
        return [f'Popped: "{student.full_name}" after {format_duration(waited)} in queue.']

    def _cmd_view(self, args: Sequence[str]) -> List[str]:
        waiting = self.queue.view()
        if not waiting:
            return ["Queue is empty."]
        lines = []
        if self.queue.state.locked:
            lines.append("QUEUE IS LOCKED!")
        for index, student, waited in waiting:
            lines.append(f"{index}: {student.full_name} for {format_duration(waited)}")
        return lines

    def _cmd_checkin(self, args: Sequence[str]) -> List[str]:
        self.queue.checkin(args[0])
        return [f"{args[0].lower()} checked in."]

    def _cmd_clear(self, args: Sequence[str]) -> List[str]:
        self.queue.authenticate()
        self._clear()
        return []

    def _cmd_stats(self, args: Sequence[str]) -> List[str]:
        summary = self.queue.stats(args[0])
        return [
            "Stats saved.",
            f"Helped {summary.helped} students, average wait "
            f"{format_duration(summary.average_seconds)}, longest "
            f"{format_duration(summary.longest_seconds)}.",
        ]

    def _cmd_reset(self, args: Sequence[str]) -> List[str]:
        self.queue.reset()
        return ["Queue reset."]

    def _cmd_lock(self, args: Sequence[str]) -> List[str]:
        self.queue.lock()
        return ["Queue is locked."]

    def _cmd_unlock(self, args: Sequence[str]) -> List[str]:
        self.queue.unlock()
        return ["Queue is unlocked."]

    def _cmd_help(self, args: Sequence[str]) -> List[str]:
        return [f'"{spec.usage}" - {spec.summary}' for spec in self._commands.values()]

    def _cmd_quit(self, args: Sequence[str]) -> List[str]:
        self.queue.authenticate()
        self.queue.save_backup()
        logger.info("Exiting on quit")
        raise SystemExit(0)

    def _cmd_load(self, args: Sequence[str]) -> List[str]:
        self.queue.load(args[0])
        return ["Loaded from file."]

    def _cmd_save(self, args: Sequence[str]) -> List[str]:
        self.queue.save(args[0])
        return ["State saved."]

    def _cmd_add_staff(self, args: Sequence[str]) -> List[str]:
        self.queue.add_staff(args[0])
        return [f"Staff member {args[0].lower()} added."]

    def _cmd_load_roster(self, args: Sequence[str]) -> List[str]:
        count = self.queue.load_roster(args[0])
        return [f"Imported {count} students."]
