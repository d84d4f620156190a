"""
JSON persistence for the whole queue state.

The state is always written and read as a single document; there is no
partial save of individual students or staff members.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

from __future__ import annotations

import json
import logging
from collections import deque
from pathlib import Path
from typing import Any, Callable, Deque, Dict, Union

from ..exceptions import PersistenceError, StateParseError
from .types import QueuedStudent, QueueState, StaffMember, Student

logger = logging.getLogger("helpqueue.core.persistence")

PathLike = Union[str, Path]

# Monotonic readings mean nothing in another process.
ENTRY_TIME_PLACEHOLDER = 0


def state_to_dict(state: QueueState) -> Dict[str, Any]:
    """
    Convert the state into JSON-serializable primitives.

    Args:
        state: State to convert.

    Returns:
        Dictionary with ``students``, ``staff``, ``queue`` and ``locked``.
    """
    return {
        "students": {
            net_id: {
                "first": student.first,
                "last": student.last,
                "queue_times": [
                    [seconds, popped_at] for seconds, popped_at in student.queue_times
                ],
            }
            for net_id, student in state.students.items()
        },
        "staff": {
            net_id: {"checkin_times": list(member.checkin_times)}
            for net_id, member in state.staff.items()
        },
        "queue": [
            {"entry_time": ENTRY_TIME_PLACEHOLDER, "net_id": entry.net_id}
            for entry in state.queue
        ],
        "locked": state.locked,
    }


def state_from_dict(data: Dict[str, Any], clock: Callable[[], float]) -> QueueState:
    """
    Build a state from primitives produced by ``state_to_dict``.

    Every queued entry gets ``clock()`` as its entry time, so waits restart
    from zero after a reload.

    Args:
        data: Decoded JSON document.
        clock: Monotonic clock used to stamp restored queue entries.

    Returns:
        Freshly built state.

    Raises:
        KeyError, TypeError, ValueError: If the document is malformed, or a
            queued netid is unknown or repeated.
    """
    if not isinstance(data, dict):
        raise TypeError("state document must be an object")

    students: Dict[str, Student] = {}
    for net_id, raw in data["students"].items():
        queue_times = []
        for seconds, popped_at in raw["queue_times"]:
            queue_times.append((float(seconds), str(popped_at)))
        students[net_id] = Student(
            first=str(raw["first"]), last=str(raw["last"]), queue_times=queue_times
        )

    staff: Dict[str, StaffMember] = {}
    for net_id, raw in data["staff"].items():
        staff[net_id] = StaffMember(
            checkin_times=[str(moment) for moment in raw["checkin_times"]]
        )

    now = clock()
    queue: Deque[QueuedStudent] = deque()
    for raw in data["queue"]:
        net_id = str(raw["net_id"])
        if net_id not in students:
            raise ValueError(f"queued netid '{net_id}' is not a student")
        if any(entry.net_id == net_id for entry in queue):
            raise ValueError(f"netid '{net_id}' is queued twice")
        queue.append(QueuedStudent(entry_time=now, net_id=net_id))

    locked = data["locked"]
    if not isinstance(locked, bool):
        raise TypeError("'locked' must be a boolean")

    return QueueState(students=students, staff=staff, queue=queue, locked=locked)


def dumps_state(state: QueueState, pretty: bool = False) -> str:
    """Serialize the state to a JSON string."""
    if pretty:
        return json.dumps(state_to_dict(state), indent=2)
    return json.dumps(state_to_dict(state))


def loads_state(text: str, clock: Callable[[], float], source: str = "file") -> QueueState:
    """
    Deserialize a JSON string into a state.

    Raises:
        StateParseError: If the text is not a valid state document.
    """
    try:
        return state_from_dict(json.loads(text), clock)
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        raise StateParseError(source, e) from e


def write_state(state: QueueState, path: PathLike, pretty: bool = False) -> None:
    """
    Overwrite ``path`` with the serialized state.

    Args:
        state: State to write.
        path: Target file.
        pretty: Indent the document for human reading.

    Raises:
        PersistenceError: Naming the step that failed.
    """
    try:
        payload = dumps_state(state, pretty=pretty)
    except (TypeError, ValueError) as e:
        raise PersistenceError("serialize state for", str(path), e) from e

    try:
        handle = open(path, "w", encoding="utf-8")
    except OSError as e:
        raise PersistenceError("create file", str(path), e) from e

    # Small payloads only hit the disk when the handle is flushed on close.
    try:
        with handle:
            handle.write(payload)
    except OSError as e:
        raise PersistenceError("write bytes to", str(path), e) from e


def read_state(path: PathLike, clock: Callable[[], float]) -> QueueState:
    """
    Read a state document from ``path``.

    Raises:
        PersistenceError: If the file cannot be read.
        StateParseError: If its contents are not a valid state.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise PersistenceError("read file", str(path), e) from e
    return loads_state(text, clock, source=f"'{path}'")


def save_backup(state: QueueState, path: PathLike) -> bool:
    """
    Best-effort backup write.

    Failures are logged and swallowed so that a broken backup never fails
    the command that triggered it.

    Returns:
        True when the backup was written.
    """
    try:
        write_state(state, path)
    except PersistenceError as e:
        logger.error(f"Backup failed: {e}")
        return False
    return True
