"""
Metrics and inspection helpers for ``HelpQueue``.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from helpqueue.core.types import NetId, QueuedStudent, QueueState, Student


@dataclass(frozen=True)
class WaitStatistics:
    """Summary of completed waits across the roster."""

    helped: int
    average_seconds: float
    longest_seconds: float


class HelpQueueMetricsMixin:
    """
    Provides read-only inspection helpers for the help queue.

    The mixin assumes inheriting classes define ``state`` and ``clock``.
    """

    state: QueueState
    clock: Callable[[], float]

    def get_queue_length(self) -> int:
        """
        Return number of students currently waiting.

        Returns:
            Length of the FIFO queue.
        """
        return len(self.state.queue)

    def get_position(self, net_id: NetId) -> Optional[int]:
        """
        Lookup a student's 0-based place in line.

        Args:
            net_id: Student netid.

        Returns:
            Index in the queue, or ``None`` when not waiting.
        """
        for index, entry in enumerate(self.state.queue):
            if entry.net_id == net_id:
                return index
        return None

    def list_waiting(self) -> List[Tuple[int, Student, float]]:
        """
        Produce the queue in FIFO order with live waits.

        Elapsed time is recomputed on every call and never stored.

        Returns:
            List of ``(index, student, seconds_waiting)`` tuples.
        """
        now = self.clock()
        return [
            (index, self._student_for(entry), now - entry.entry_time)
            for index, entry in enumerate(self.state.queue)
        ]

    def wait_statistics(self) -> WaitStatistics:
        """
        Aggregate the recorded waits of every student.

        Returns:
            Count, mean and maximum of completed waits in seconds.
        """
        waits = [
            seconds
            for student in self.state.students.values()
            for seconds, _ in student.queue_times
        ]
        if not waits:
            return WaitStatistics(helped=0, average_seconds=0.0, longest_seconds=0.0)
        return WaitStatistics(
            helped=len(waits),
            average_seconds=sum(waits) / len(waits),
            longest_seconds=max(waits),
        )

    def _student_for(self, entry: QueuedStudent) -> Student:
        """
        Resolve a queued entry to its roster record.

        Raises:
            RuntimeError: If the netid is no longer in the student directory.
        """
        student = self.state.students.get(entry.net_id)
        if student is None:
            raise RuntimeError(
                f"Queued netid '{entry.net_id}' is missing from the student directory"
            )
        return student
