"""
Core data types for the help queue.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Deque, Dict, List, Tuple

NetId = str

TIMESTAMP_FORMAT = "%d/%m/%Y %H:%M"

# (seconds spent waiting, wall-clock time of the pop)
QueueTime = Tuple[float, str]


def format_timestamp(moment: datetime) -> str:
    """
    Format a wall-clock moment the way histories store it.

    Args:
        moment: Local date and time.

    Returns:
        String in ``day/month/year hour:minute`` form.
    """
    return moment.strftime(TIMESTAMP_FORMAT)


def format_duration(seconds: float) -> str:
    """
    Render an elapsed wait for operators.

    Args:
        seconds: Elapsed time in seconds.

    Returns:
        Human-readable duration such as ``"42.108s"`` or ``"3m 05.000s"``.
    """
    seconds = round(max(seconds, 0.0), 3)
    minutes, rest = divmod(seconds, 60.0)
    if minutes < 1:
        return f"{rest:.3f}s"
    hours, minutes = divmod(int(minutes), 60)
    if hours:
        return f"{hours}h {minutes:02d}m {rest:06.3f}s"
    return f"{minutes}m {rest:06.3f}s"


@dataclass
class Student:
    """Roster entry with the history of completed waits."""

    first: str
    last: str
    queue_times: List[QueueTime] = field(default_factory=list)

    @property
    def full_name(self) -> str:
        """Return ``"first last"`` as stored on the roster."""
        return f"{self.first} {self.last}"


@dataclass
class StaffMember:
    """Staff member with check-in timestamps."""

    checkin_times: List[str] = field(default_factory=list)


@dataclass
class QueuedStudent:
    """
    One student's current wait.

    ``entry_time`` is a monotonic clock reading. It only measures elapsed
    time inside the running process and is never restored from disk.
    """

    entry_time: float
    net_id: NetId


@dataclass
class QueueState:
    """Root aggregate: roster, staff, FIFO queue and lock flag."""

    students: Dict[NetId, Student] = field(default_factory=dict)
    staff: Dict[NetId, StaffMember] = field(default_factory=dict)
    queue: Deque[QueuedStudent] = field(default_factory=deque)
    locked: bool = False
