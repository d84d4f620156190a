"""
Custom exceptions for the office-hours help queue.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

from typing import Optional


class HelpQueueError(Exception):
    """Base exception for all help queue errors."""

    pass


class UsageError(HelpQueueError):
    """Raised when a command is invoked with missing arguments."""

    def __init__(self, usage: str) -> None:
        self.usage = usage
        super().__init__(f'Usage: "{usage}".')


class EmptyCommandError(HelpQueueError):
    """Raised when the input line holds no tokens."""

    def __init__(self) -> None:
        super().__init__("Command is empty.")


class UnknownCommandError(HelpQueueError):
    """Raised when the command verb is not recognised."""

    def __init__(self, verb: str) -> None:
        self.verb = verb
        super().__init__("Unknown command.")


class AuthenticationFailedError(HelpQueueError):
    """Raised when the shared secret does not match."""

    def __init__(self) -> None:
        super().__init__("Invalid password.")


class NotFoundError(HelpQueueError):
    """Base class for unknown netids."""

    def __init__(self, net_id: str, message: str) -> None:
        self.net_id = net_id
        super().__init__(message)


class NotAStudentError(NotFoundError):
    """Raised when a netid is not on the roster."""

    def __init__(self, net_id: str) -> None:
        super().__init__(
            net_id,
            "Not a student. Contact course staff if you believe this is a mistake.",
        )


class NotStaffError(NotFoundError):
    """Raised when a netid is not a registered staff member."""

    def __init__(self, net_id: str) -> None:
        super().__init__(net_id, "Not a member of staff.")


class StateConflictError(HelpQueueError):
    """Raised when an operation conflicts with the current queue state."""

    pass


class AlreadyQueuedError(StateConflictError):
    """Raised when a student is already waiting in the queue."""

    def __init__(self, net_id: str, position: int) -> None:
        self.net_id = net_id
        self.position = position
        super().__init__(f"Already in the queue, position: {position}")


class AlreadyStaffError(StateConflictError):
    """Raised when registering a staff member twice."""

    def __init__(self, net_id: str) -> None:
        self.net_id = net_id
        super().__init__(f"{net_id} is already a staff member.")


class QueueLockedError(StateConflictError):
    """Raised when adding to a locked queue."""

    def __init__(self) -> None:
        super().__init__("Queue is locked.")


class QueueEmptyError(StateConflictError):
    """Raised when popping from an empty queue."""

    def __init__(self) -> None:
        super().__init__("Queue is empty.")


class PersistenceError(HelpQueueError):
    """Raised when reading or writing a state or roster file fails."""

    def __init__(
        self,
        step: str,
        path: str,
        original_error: Optional[Exception] = None,
    ) -> None:
        self.step = step
        self.path = path
        self.original_error = original_error
        error_msg = f"Failed to {step} '{path}'"
        if original_error:
            error_msg += f": {original_error}"
        super().__init__(error_msg)


class ParseFailure(HelpQueueError):
    """Base class for malformed input documents."""

    pass


class RosterLineError(ParseFailure):
    """Raised when a roster line does not have exactly four fields."""

    def __init__(self, line_number: int, content: str) -> None:
        self.line_number = line_number
        self.content = content
        super().__init__(f"Err on line {line_number}: {content}")


class StateParseError(ParseFailure):
    """Raised when a persisted state document cannot be deserialized."""

    def __init__(
        self, source: str, original_error: Optional[Exception] = None
    ) -> None:
        self.source = source
        self.original_error = original_error
        error_msg = f"Failed to parse {source}"
        if original_error:
            error_msg += f": {original_error}"
        super().__init__(error_msg)
