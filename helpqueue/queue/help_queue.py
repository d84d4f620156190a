"""
Help queue implementation: the roster, staff and FIFO queue state and every
operation that changes it.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

from __future__ import annotations

import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Union

from helpqueue.core.auth import Authenticator
from helpqueue.core.persistence import read_state, save_backup, write_state
from helpqueue.core.roster import import_roster
from helpqueue.core.types import (
    NetId,
    QueuedStudent,
    QueueState,
    StaffMember,
    Student,
    format_timestamp,
)
from helpqueue.exceptions import (
    AlreadyQueuedError,
    AlreadyStaffError,
    NotAStudentError,
    NotStaffError,
    PersistenceError,
    QueueEmptyError,
    QueueLockedError,
    StateParseError,
)
from .help_queue_metrics import HelpQueueMetricsMixin, WaitStatistics

logger = logging.getLogger("helpqueue.queue.help_queue")

PathLike = Union[str, Path]


class HelpQueue(HelpQueueMetricsMixin):
    """
    Owner of the office-hours queue state.

    Operations that need the course secret call the configured authenticator
    before touching any state. Successful add, pop, checkin, add_staff and
    roster imports write the automatic backup.
    """

    def __init__(
        self,
        authenticator: Authenticator,
        state: Optional[QueueState] = None,
        backup_path: PathLike = "backup.txt",
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        """
        Initialize the help queue.

        Args:
            authenticator: Callable raising AuthenticationFailedError on a bad secret.
            state: Initial state, empty when omitted.
            backup_path: File rewritten after every successful mutation.
            clock: Monotonic clock used to time waits.
            now: Wall-clock source for history timestamps.
        """
        self.authenticator = authenticator
        self.state = state if state is not None else QueueState()
        self.backup_path = backup_path
        self.clock = clock
        self.now = now

    def authenticate(self) -> None:
        """
        Run the privileged-command check.

        Raises:
            AuthenticationFailedError: If the check rejects the caller.
        """
        self.authenticator()

    # -------------------- queue operations --------------------

    def add(self, net_id: NetId) -> int:
        """
        Append a student to the back of the queue.

        Args:
            net_id: Student netid, compared case-insensitively.

        Returns:
            New 1-based position, i.e. the queue length after insertion.

        Raises:
            NotAStudentError: If the netid is not on the roster.
            QueueLockedError: If the queue is locked.
            AlreadyQueuedError: If the student is already waiting.
        """
        net_id = net_id.lower()
        if net_id not in self.state.students:
            raise NotAStudentError(net_id)

        if self.state.locked:
            raise QueueLockedError()

        position = self.get_position(net_id)
        if position is not None:
            raise AlreadyQueuedError(net_id, position)

        self.state.queue.append(QueuedStudent(entry_time=self.clock(), net_id=net_id))
        position = self.get_queue_length()
        logger.info(f"Queued {net_id} at position {position}")
        self.save_backup()
        return position

    def pop(self) -> Tuple[Student, float]:
        """
        Remove the student at the head of the queue and record the wait.

        Returns:
            The student and the seconds they spent waiting.

        Raises:
            AuthenticationFailedError: If authentication fails.
            QueueEmptyError: If nobody is waiting.
        """
        self.authenticate()

        if not self.state.queue:
            raise QueueEmptyError()

        entry = self.state.queue[0]
        student = self._student_for(entry)
        self.state.queue.popleft()

        time_in_queue = self.clock() - entry.entry_time
        student.queue_times.append((time_in_queue, format_timestamp(self.now())))
        logger.info(f"Popped {entry.net_id} after {time_in_queue:.3f}s")

        self.save_backup()
        return student, time_in_queue

    def view(self) -> List[Tuple[int, Student, float]]:
        """
        Return the waiting students in FIFO order.

        Returns:
            List of ``(index, student, seconds_waiting)`` tuples.
        """
        return self.list_waiting()

    def lock(self) -> None:
        """Stop accepting new students. Waiting students stay queued."""
        self.authenticate()
        self.state.locked = True
        logger.info("Queue locked")

    def unlock(self) -> None:
        """Accept new students again."""
        self.authenticate()
        self.state.locked = False
        logger.info("Queue unlocked")

    def reset(self) -> None:
        """
        Clear every wait history, the queue and the lock flag.

        Staff and their check-ins are kept.
        """
        self.authenticate()
        for student in self.state.students.values():
            student.queue_times.clear()
        self.state.queue.clear()
        self.state.locked = False
        logger.info("Queue and wait histories reset")

    # -------------------- staff --------------------

    def checkin(self, net_id: NetId) -> str:
        """
        Record a staff check-in.

        Args:
            net_id: Staff netid.

        Returns:
            The timestamp that was recorded.

        Raises:
            AuthenticationFailedError: If authentication fails.
            NotStaffError: If the netid is not registered as staff.
        """
        self.authenticate()

        net_id = net_id.lower()
        staff_member = self.state.staff.get(net_id)
        if staff_member is None:
            raise NotStaffError(net_id)

        stamp = format_timestamp(self.now())
        staff_member.checkin_times.append(stamp)
        logger.info(f"Staff {net_id} checked in at {stamp}")
        self.save_backup()
        return stamp

    def add_staff(self, net_id: NetId) -> None:
        """
        Register a staff member with an empty check-in history.

        Raises:
            AuthenticationFailedError: If authentication fails.
            AlreadyStaffError: If the netid is already registered.
        """
        self.authenticate()

        net_id = net_id.lower()
        if net_id in self.state.staff:
            raise AlreadyStaffError(net_id)

        self.state.staff[net_id] = StaffMember()
        logger.info(f"Added staff member {net_id}")
        self.save_backup()

    # -------------------- roster --------------------

    def load_roster(self, path: PathLike) -> int:
        """
        Replace the student directory with the contents of a roster file.

        The directory is cleared before parsing starts and only filled once
        the whole file parsed, so a malformed line leaves it empty.
        Wait histories of re-imported students are not carried over.

        Args:
            path: Roster file.

        Returns:
            Number of students imported.

        Raises:
            AuthenticationFailedError: If authentication fails.
            PersistenceError: If the file cannot be opened or read.
            RosterLineError: If a line does not have four fields.
        """
        self.authenticate()

        try:
            handle = open(path, "r", encoding="utf-8")
        except OSError as e:
            raise PersistenceError("open roster file", str(path), e) from e

        self.state.students.clear()
        staged: Dict[NetId, Student] = {}
        with handle:
            try:
                count = import_roster(staged, handle)
            except (OSError, UnicodeDecodeError) as e:
                raise PersistenceError("read roster file", str(path), e) from e
        self.state.students.update(staged)

        logger.info(f"Imported {count} students from {path}")
        self.save_backup()
        return count

    # -------------------- persistence --------------------

    def save(self, path: PathLike) -> None:
        """
        Write the full state to ``path``.

        Raises:
            AuthenticationFailedError: If authentication fails.
            PersistenceError: If the file cannot be written.
        """
        self.authenticate()
        write_state(self.state, path)
        logger.info(f"State saved to {path}")

    def stats(self, path: PathLike) -> WaitStatistics:
        """
        Write an indented dump of the full state to ``path``.

        Returns:
            Summary of completed waits, for display.

        Raises:
            AuthenticationFailedError: If authentication fails.
            PersistenceError: If the file cannot be written.
        """
        self.authenticate()
        write_state(self.state, path, pretty=True)
        logger.info(f"Stats written to {path}")
        return self.wait_statistics()

    def load(self, path: PathLike) -> None:
        """
        Replace the live state with the one stored in ``path``.

        The live state is only swapped after the whole document parsed.
        Queue entries restart their wait timers from now.

        Raises:
            AuthenticationFailedError: If authentication fails.
            PersistenceError: If the file cannot be read.
            StateParseError: If the document is malformed.
        """
        self.authenticate()
        self.state = read_state(path, self.clock)
        logger.info(f"State loaded from {path}")

    def save_backup(self) -> bool:
        """
        Write the automatic backup. Never raises.

        Returns:
            True when the backup was written.
        """
        return save_backup(self.state, self.backup_path)

    def restore_backup(self) -> bool:
        """
        Load the automatic backup at start-up, if there is one.

        Returns:
            True when the state was replaced.
        """
        if not Path(self.backup_path).exists():
            logger.info(f"No backup at {self.backup_path}")
            return False
        try:
            self.state = read_state(self.backup_path, self.clock)
        except (PersistenceError, StateParseError) as e:
            logger.error(f"Could not restore backup: {e}")
            return False
        logger.info(f"Restored state from {self.backup_path}")
        return True
