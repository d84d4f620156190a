"""
Interactive console for the office-hours help queue.

Reads one command per line from standard input until ``quit`` or end of
input. The state is restored from the automatic backup on start-up.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, TextIO

from .commands import CommandDispatcher
from .core.auth import SharedSecretAuthenticator
from .queue.help_queue import HelpQueue

logger = logging.getLogger("helpqueue.console")


@dataclass
class HelpQueueConfig:
    """Configuration for the help queue console."""

    backup_path: str = "backup.txt"
    secret: str = "53rocks"
    prompt: str = "Enter password:"
    log_level: str = "WARNING"


def build_queue(config: HelpQueueConfig) -> HelpQueue:
    """
    Create a queue wired to the shared-secret check.

    Args:
        config: Console configuration.

    Returns:
        Empty queue; call ``restore_backup`` to load the last state.
    """
    authenticator = SharedSecretAuthenticator(config.secret, prompt=config.prompt)
    return HelpQueue(authenticator, backup_path=config.backup_path)


def run(dispatcher: CommandDispatcher, lines: Iterable[str]) -> None:
    """
    Feed lines to the dispatcher until input runs out.

    The backup is written once more when input ends without ``quit``.

    Args:
        dispatcher: Dispatcher to run commands with.
        lines: Source of command lines, usually ``sys.stdin``.
    """
    for line in lines:
        dispatcher.run_line(line)
    logger.info("End of input")
    dispatcher.queue.save_backup()


def main(config: Optional[HelpQueueConfig] = None, stdin: TextIO = sys.stdin) -> None:
    """Console entry point."""
    config = config or HelpQueueConfig()
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    queue = build_queue(config)
    if queue.restore_backup():
        print("Loaded from backup.")
    elif not Path(config.backup_path).exists():
        print("Backup file does not exist.")

    try:
        run(CommandDispatcher(queue), stdin)
    except KeyboardInterrupt:
        queue.save_backup()


if __name__ == "__main__":
    main()
